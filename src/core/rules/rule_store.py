"""
Rule store holding the current rule definitions.

Records bind their rule descriptors to these definitions by rule type
whenever the repository runs a rule sync.
"""

import threading
from pathlib import Path
from typing import Iterable

from src.core.models import RuleDefinition
from src.observability.logger import get_logger

from .rule_config import RuleConfigLoader

logger = get_logger(__name__)


class ValidationRuleStore:
    """
    Current rule definitions keyed by rule type.

    Definitions are replaced as a whole by reload() or replace(); readers
    always see either the old or the new set.
    """

    def __init__(self, rules: Iterable[RuleDefinition] | None = None, config_path: str | Path | None = None):
        """
        Initialize the rule store.

        Args:
            rules: Initial definitions
            config_path: YAML file to load definitions from (takes precedence over rules)
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self._lock = threading.Lock()
        self._rules: dict[str, RuleDefinition] = {}

        if self.config_path is not None:
            self.reload()
        elif rules is not None:
            self.replace(rules)

    def reload(self) -> None:
        """
        Reload definitions from the configured YAML file.

        Raises:
            RuntimeError: If the store was not created with a config path
        """
        if self.config_path is None:
            raise RuntimeError("Rule store has no configuration file to reload from")

        rules = RuleConfigLoader(self.config_path).load_rules()
        self.replace(rules)
        logger.info(f"Loaded {len(rules)} rule definitions from {self.config_path}")

    def replace(self, rules: Iterable[RuleDefinition]) -> None:
        rule_map = {}
        for rule in rules:
            if rule.rule_type in rule_map:
                raise ValueError(f"Duplicate rule type: {rule.rule_type}")
            rule_map[rule.rule_type] = rule

        with self._lock:
            self._rules = rule_map

    def get_rules(self) -> list[RuleDefinition]:
        with self._lock:
            return list(self._rules.values())

    def get_rule_map(self) -> dict[str, RuleDefinition]:
        """Return enabled definitions keyed by rule type."""
        with self._lock:
            return {rule_type: rule for rule_type, rule in self._rules.items() if rule.enabled}

    def get_rule(self, rule_type: str) -> RuleDefinition | None:
        with self._lock:
            return self._rules.get(rule_type)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)
