"""
Rule configuration management.

Loads rule definitions from YAML files and provides a builder
for declaring them in code.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.core.models import RuleDefinition


class RuleConfigLoader:
    """
    Loads rule definitions from YAML configuration files.

    Expected YAML format:
    ```yaml
    rules:
      mandatory:
        description: Value must be present
        severity: error
        error_message: "{name} is required"

      min_size:
        description: Minimum length or value
        severity: error

      pattern:
        description: Value must match a regular expression
        severity: warning
        enabled: false
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[RuleDefinition]:
        """
        Load and parse rule definitions from the YAML file.

        Returns:
            List of RuleDefinition in file order

        Raises:
            ValueError: If YAML is invalid or a definition is malformed
        """
        with open(self.config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if not config or "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        rule_defs = config["rules"]
        if not isinstance(rule_defs, dict):
            raise ValueError("'rules' section must be a mapping of rule type to definition")

        return [self._parse_rule(rule_type, rule_def) for rule_type, rule_def in rule_defs.items()]

    def _parse_rule(self, rule_type: str, rule_def: dict[str, Any] | None) -> RuleDefinition:
        """
        Parse a single rule definition.

        Args:
            rule_type: The mapping key, used as the rule type
            rule_def: The definition body from YAML (may be empty)

        Raises:
            ValueError: If the definition is not a mapping or fails model validation
        """
        if rule_def is None:
            rule_def = {}
        if not isinstance(rule_def, dict):
            raise ValueError(f"Definition for rule '{rule_type}' must be a mapping")

        try:
            return RuleDefinition(rule_type=str(rule_type), **rule_def)
        except ValidationError as e:
            raise ValueError(f"Invalid definition for rule '{rule_type}': {e}") from e


class RuleConfigBuilder:
    """
    Programmatically build rule definitions (for testing or dynamic rules).
    """

    def __init__(self):
        self.rules: list[RuleDefinition] = []

    def add_rule(
        self,
        rule_type: str,
        description: str = "",
        severity: str = "error",
        error_message: str | None = None,
        enabled: bool = True,
    ) -> "RuleConfigBuilder":
        """Add a rule definition."""
        self.rules.append(RuleDefinition(
            rule_type=rule_type,
            description=description,
            severity=severity,
            error_message=error_message,
            enabled=enabled,
        ))
        return self

    def add_mandatory(self, error_message: str | None = "{name} is required") -> "RuleConfigBuilder":
        return self.add_rule("mandatory", "Value must be present", error_message=error_message)

    def add_min_size(self) -> "RuleConfigBuilder":
        return self.add_rule("min_size", "Minimum length or value")

    def add_max_size(self) -> "RuleConfigBuilder":
        return self.add_rule("max_size", "Maximum length or value")

    def add_pattern(self, severity: str = "error") -> "RuleConfigBuilder":
        return self.add_rule("pattern", "Value must match a regular expression", severity=severity)

    def build(self) -> list[RuleDefinition]:
        """Build and return the rule definitions."""
        return list(self.rules)
