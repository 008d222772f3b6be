"""
End-to-end tests for the admin CLI.

Each test drives main() against a repository file and rule file in
tmp_path and checks the JSON written to stdout and the file on disk.
"""

import json
from pathlib import Path

import pytest
import yaml

from src.cli.admin_cli import main
from src.observability.logger import reconfigure_loggers

RULES_PATH = Path(__file__).resolve().parents[2] / "config" / "rules.yaml"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Clear config variables and restore log handlers once output capture ends."""
    for name in ("CHECKPOINT_REPOSITORY_PATH", "CHECKPOINT_RULES_PATH", "CHECKPOINT_REPOSITORY_NAME",
                 "LOG_LEVEL", "LOG_FORMAT", "METRICS_PORT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield
    reconfigure_loggers()


@pytest.fixture
def run_cli(repository_file, capsys):
    """Run the CLI against the test repository file and return (exit_code, stdout_json)."""
    def _run(*args):
        code = main([
            "--repository-path", str(repository_file),
            "--rules-path", str(RULES_PATH),
            "--log-level", "WARNING",
            *args,
        ])
        out = capsys.readouterr().out
        return code, json.loads(out) if out.strip() else None

    return _run


@pytest.fixture
def import_file(tmp_path, sample_file_content):
    path = tmp_path / "import.json"
    path.write_text(json.dumps(sample_file_content), encoding="utf-8")
    return path


@pytest.mark.e2e
def test_import_then_list(run_cli, import_file, repository_file):
    """Test import writes the file and list reports the records."""
    code, output = run_cli("import", "--file", str(import_file))

    assert code == 0
    assert output["status"] == "imported"
    assert output["ids"] == [1, 2, 3]

    stored = json.loads(repository_file.read_text(encoding="utf-8"))
    assert [d["name"] for d in stored] == ["customer", "email", "id"]

    code, output = run_cli("list")
    assert code == 0
    assert output["count"] == 3


@pytest.mark.e2e
def test_reimport_replaces_rules_in_place(run_cli, import_file, sample_file_content, repository_file):
    """Test importing records whose ids exist only replaces their rule lists."""
    run_cli("import", "--file", str(import_file))

    sample_file_content[1]["name"] = "renamed"
    sample_file_content[1]["validationRules"] = [{"ruleType": "mandatory", "use": True}]
    import_file.write_text(json.dumps(sample_file_content), encoding="utf-8")

    code, output = run_cli("import", "--file", str(import_file))

    assert code == 0
    assert output["ids"] == [1, 2, 3]
    stored = json.loads(repository_file.read_text(encoding="utf-8"))
    assert len(stored) == 3
    assert stored[1]["name"] == "email"
    assert [r["ruleType"] for r in stored[1]["validationRules"]] == ["mandatory"]


@pytest.mark.e2e
def test_import_yaml_with_datas_key(run_cli, tmp_path, sample_file_content):
    """Test a YAML file with a datas key is imported."""
    path = tmp_path / "import.yaml"
    path.write_text(yaml.safe_dump({"datas": sample_file_content[:1]}), encoding="utf-8")

    code, output = run_cli("import", "--file", str(path))

    assert code == 0
    assert output["count"] == 1


@pytest.mark.e2e
def test_import_missing_mandatory_field(run_cli, tmp_path, sample_file_content):
    """Test a record missing a mandatory field fails the import."""
    record = dict(sample_file_content[0])
    record["typeClass"] = None
    path = tmp_path / "import.json"
    path.write_text(json.dumps([record]), encoding="utf-8")

    code, output = run_cli("import", "--file", str(path))

    assert code == 1
    assert output is None


@pytest.mark.e2e
def test_list_by_route_and_name(run_cli, import_file):
    """Test list narrows by route and case-insensitive name."""
    run_cli("import", "--file", str(import_file))

    code, output = run_cli("list", "--method", "POST", "--url", "/api/v1/orders", "--name", "EMAIL")

    assert code == 0
    assert [d["id"] for d in output["datas"]] == [2]


@pytest.mark.e2e
def test_list_requires_method_and_url_together(run_cli):
    """Test --method without --url is a usage error."""
    code, output = run_cli("list", "--method", "POST")
    assert code == 2
    assert output is None


@pytest.mark.e2e
def test_urls(run_cli, import_file):
    """Test urls lists every route once."""
    run_cli("import", "--file", str(import_file))

    code, output = run_cli("urls")

    assert code == 0
    assert output["urls"] == [
        {"method": "POST", "url": "/api/v1/orders"},
        {"method": "GET", "url": "/api/v1/orders/{id}"},
    ]


@pytest.mark.e2e
def test_show_and_children(run_cli, import_file):
    """Test show includes children and children lists them."""
    run_cli("import", "--file", str(import_file))

    code, output = run_cli("show", "--id", "1")
    assert code == 0
    assert output["name"] == "customer"
    assert [c["id"] for c in output["children"]] == [2]

    code, output = run_cli("children", "--id", "1")
    assert code == 0
    assert output["count"] == 1


@pytest.mark.e2e
def test_show_unknown_id(run_cli):
    """Test show of an unknown id exits with 1."""
    code, output = run_cli("show", "--id", "42")
    assert code == 1
    assert output is None


@pytest.mark.e2e
def test_delete(run_cli, import_file, repository_file):
    """Test delete removes known ids, reports unknown ones and flushes."""
    run_cli("import", "--file", str(import_file))

    code, output = run_cli("delete", "--ids", "3", "42")

    assert code == 0
    assert output["deleted"] == [3]
    assert output["not_found"] == [42]
    stored = json.loads(repository_file.read_text(encoding="utf-8"))
    assert [d["id"] for d in stored] == [1, 2]


@pytest.mark.e2e
def test_truncate_requires_confirmation(run_cli, import_file):
    """Test truncate needs --yes and then empties the repository."""
    run_cli("import", "--file", str(import_file))

    code, _ = run_cli("truncate")
    assert code == 2

    code, output = run_cli("truncate", "--yes")
    assert code == 0
    assert output == {"status": "truncated", "count": 0}

    _, output = run_cli("list")
    assert output["count"] == 0


@pytest.mark.e2e
def test_rules(run_cli):
    """Test rules lists the definitions from the rule file."""
    code, output = run_cli("rules")

    assert code == 0
    assert "mandatory" in [r["rule_type"] for r in output["rules"]]


@pytest.mark.e2e
def test_corrupt_repository_file(run_cli, repository_file):
    """Test a corrupt repository file fails the command."""
    repository_file.parent.mkdir(parents=True)
    repository_file.write_text("[{broken", encoding="utf-8")

    code, output = run_cli("list")

    assert code == 1
    assert output is None


@pytest.mark.e2e
def test_no_command_prints_help(capsys):
    """Test running without a command prints usage."""
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out
