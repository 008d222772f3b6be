"""
Core data models for the checkpoint validation data repository.

All models use Pydantic for runtime validation and JSON serialization.
"""

from .param_type import ParamType
from .req_url import ReqUrl
from .validation_data import MANDATORY_FIELDS, ValidationData
from .validation_rule import RuleDefinition, ValidationRule

__all__ = [
    "ParamType",
    "ReqUrl",
    "RuleDefinition",
    "ValidationRule",
    "ValidationData",
    "MANDATORY_FIELDS",
]
