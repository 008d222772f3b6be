"""
Rule definitions and the rule store used to bind record rule descriptors.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader
from .rule_store import ValidationRuleStore

__all__ = [
    "ValidationRuleStore",
    "RuleConfigLoader",
    "RuleConfigBuilder",
]
