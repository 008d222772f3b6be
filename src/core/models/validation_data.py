"""
ValidationData model: the record binding validation rules to a request parameter.
"""

from typing import Mapping, Optional

from pydantic import BaseModel, Field, PrivateAttr

from .param_type import ParamType
from .validation_rule import RuleDefinition, ValidationRule

MANDATORY_FIELDS = ("param_type", "url", "method", "type", "type_class")


class ValidationData(BaseModel):
    """
    Describes which checks apply to one named parameter of one route.

    Records form a forest through parent_id: a child describes a field nested
    inside the object parameter described by its parent. The resolved parent
    link is a private attribute and is never serialized.

    Attributes:
        id: Repository-assigned identifier (0 until the record is saved)
        parent_id: Id of the parent record, None for top-level parameters
        method: HTTP method token
        url: Exact request URL
        name: Parameter name (matched case-insensitively)
        param_type: Where the parameter lives in the request
        type: Declared value type ("String", "Integer", "Object", ...)
        type_class: Fully qualified type descriptor used by the rule evaluator
        validation_rules: Ordered rule descriptors for this parameter
    """

    id: int = 0
    parent_id: int | None = Field(None, alias="parentId")
    method: str | None = None
    url: str | None = None
    name: str = ""
    param_type: ParamType | None = Field(None, alias="paramType")
    type: str | None = None
    type_class: str | None = Field(None, alias="typeClass")
    validation_rules: list[ValidationRule] = Field(default_factory=list, alias="validationRules")

    _parent: Optional["ValidationData"] = PrivateAttr(default=None)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": 2,
                "parentId": 1,
                "method": "POST",
                "url": "/api/v1/orders",
                "name": "quantity",
                "paramType": "BODY",
                "type": "Integer",
                "typeClass": "java.lang.Integer",
                "validationRules": [
                    {"ruleType": "mandatory", "use": True},
                    {"ruleType": "min_size", "use": True, "standardValue": 1}
                ]
            }
        }

    @property
    def parent(self) -> Optional["ValidationData"]:
        return self._parent

    def set_parent(self, parent: Optional["ValidationData"]) -> None:
        self._parent = parent

    def missing_mandatory_fields(self) -> list[str]:
        """Return the names of mandatory fields that are still unset."""
        return [field for field in MANDATORY_FIELDS if getattr(self, field) is None]

    def matches_name(self, name: str | None) -> bool:
        if name is None:
            return False
        return self.name.casefold() == name.casefold()

    def minimalize(self) -> None:
        """Reduce every attached rule to its persisted subset."""
        for rule in self.validation_rules:
            rule.minimalize()

    def rule_sync(self, definitions: Mapping[str, RuleDefinition]) -> list[str]:
        """
        Rebind attached rule descriptors to the current rule definitions.

        Args:
            definitions: Rule definitions keyed by rule_type

        Returns:
            rule_type of every descriptor that has no definition
        """
        return [rule.rule_type for rule in self.validation_rules if not rule.sync(definitions)]
