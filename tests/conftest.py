"""
Pytest configuration and fixtures for checkpoint repository tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import json
from pathlib import Path
from typing import Any, Callable

import pytest

from src.core.models import ParamType, ValidationData, ValidationRule
from src.core.repository import JsonFileStorage, ValidationDataRepository
from src.core.rules import RuleConfigBuilder, ValidationRuleStore


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't touch the filesystem beyond tmp_path"
    )
    config.addinivalue_line(
        "markers", "integration: Tests exercising repository, storage and threads together"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests driving the admin CLI"
    )


# =======================
# RECORD FIXTURES
# =======================

@pytest.fixture
def make_data() -> Callable[..., ValidationData]:
    """
    Factory for ValidationData with every mandatory field set

    Returns:
        Callable accepting field overrides
    """
    def _make(**overrides: Any) -> ValidationData:
        fields: dict[str, Any] = {
            "method": "POST",
            "url": "/api/v1/orders",
            "name": "quantity",
            "param_type": ParamType.BODY,
            "type": "Integer",
            "type_class": "java.lang.Integer",
            "validation_rules": [ValidationRule(rule_type="mandatory")],
        }
        fields.update(overrides)
        return ValidationData(**fields)

    return _make


@pytest.fixture
def sample_file_content() -> list[dict[str, Any]]:
    """
    Repository file content with a parent, a child and an orphan

    Returns:
        JSON-ready list in the durable format
    """
    return [
        {
            "id": 1,
            "parentId": None,
            "method": "POST",
            "url": "/api/v1/orders",
            "name": "customer",
            "paramType": "BODY",
            "type": "Object",
            "typeClass": "com.example.Customer",
            "validationRules": [{"ruleType": "mandatory", "use": True}],
        },
        {
            "id": 2,
            "parentId": 1,
            "method": "POST",
            "url": "/api/v1/orders",
            "name": "email",
            "paramType": "BODY",
            "type": "String",
            "typeClass": "java.lang.String",
            "validationRules": [
                {"ruleType": "email", "use": True},
                {"ruleType": "max_size", "use": True, "standardValue": 128},
            ],
        },
        {
            "id": 3,
            "parentId": 99,
            "method": "GET",
            "url": "/api/v1/orders/{id}",
            "name": "id",
            "paramType": "PATH",
            "type": "Long",
            "typeClass": "java.lang.Long",
            "validationRules": [],
        },
    ]


# =======================
# REPOSITORY FIXTURES
# =======================

@pytest.fixture
def rule_store() -> ValidationRuleStore:
    """Rule store with the common rule definitions"""
    rules = RuleConfigBuilder() \
        .add_mandatory() \
        .add_min_size() \
        .add_max_size() \
        .add_pattern() \
        .add_rule("email", "Value must be an e-mail address", severity="warning") \
        .build()
    return ValidationRuleStore(rules)


@pytest.fixture
def repository_file(tmp_path) -> Path:
    """Path of a repository file that does not exist yet"""
    return tmp_path / "repository" / "validation-data.json"


@pytest.fixture
def seeded_repository_file(repository_file, sample_file_content) -> Path:
    """Repository file pre-populated with sample_file_content"""
    repository_file.parent.mkdir(parents=True, exist_ok=True)
    repository_file.write_text(json.dumps(sample_file_content), encoding="utf-8")
    return repository_file


@pytest.fixture
def repository(repository_file, rule_store) -> ValidationDataRepository:
    """Empty, refreshed repository backed by a JSON file in tmp_path"""
    repo = ValidationDataRepository(JsonFileStorage(repository_file), rule_store, name="test")
    repo.refresh()
    return repo


@pytest.fixture
def seeded_repository(seeded_repository_file, rule_store) -> ValidationDataRepository:
    """Refreshed repository loaded from sample_file_content"""
    repo = ValidationDataRepository(JsonFileStorage(seeded_repository_file), rule_store, name="test")
    repo.refresh()
    return repo
