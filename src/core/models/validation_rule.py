"""
Rule models: RuleDefinition (a rule type known to the rule store) and
ValidationRule (a rule descriptor attached to a validation data record).
"""

from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field


class RuleDefinition(BaseModel):
    """
    A rule type published by the rule store.

    Attributes:
        rule_type: Unique key ("mandatory", "min_size", "pattern", ...)
        description: Human-readable description
        severity: "error" (reject request) or "warning" (log only)
        error_message: Default message used when a record does not override it
        enabled: Whether the rule type is currently active
    """

    rule_type: str = Field(..., min_length=1)
    description: str = ""
    severity: Literal["error", "warning"] = "error"
    error_message: str | None = None
    enabled: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "rule_type": "mandatory",
                "description": "Value must be present",
                "severity": "error",
                "error_message": "{name} is required",
                "enabled": True
            }
        }


class ValidationRule(BaseModel):
    """
    A rule descriptor attached to a ValidationData record.

    Only rule_type, use, standard_value and error_message are persisted.
    The remaining fields are bound from the rule store by sync() and are
    stripped again by minimalize().

    Attributes:
        rule_type: Key of the RuleDefinition this descriptor refers to
        use: Whether the check is switched on for this parameter
        standard_value: Rule argument (e.g. a minimum length or a regex)
        error_message: Per-parameter override of the definition's message
    """

    rule_type: str = Field(..., min_length=1, alias="ruleType")
    use: bool = True
    standard_value: Any = Field(None, alias="standardValue")
    error_message: str | None = Field(None, alias="errorMessage")

    description: str | None = Field(None, exclude=True)
    severity: Literal["error", "warning"] | None = Field(None, exclude=True)
    default_error_message: str | None = Field(None, exclude=True)
    bound: bool = Field(False, exclude=True)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "ruleType": "min_size",
                "use": True,
                "standardValue": 3,
                "errorMessage": None
            }
        }

    @property
    def effective_error_message(self) -> str | None:
        """Record-level override, falling back to the bound definition."""
        return self.error_message or self.default_error_message

    def sync(self, definitions: Mapping[str, RuleDefinition]) -> bool:
        """
        Bind this descriptor to the current definition of its rule type.

        Args:
            definitions: Rule definitions keyed by rule_type

        Returns:
            True if a definition was found, False otherwise (descriptor left unbound)
        """
        definition = definitions.get(self.rule_type)
        if definition is None:
            self.minimalize()
            return False

        self.description = definition.description
        self.severity = definition.severity
        self.default_error_message = definition.error_message
        self.bound = True
        return True

    def minimalize(self) -> None:
        """Drop every field derived from the rule store."""
        self.description = None
        self.severity = None
        self.default_error_message = None
        self.bound = False
