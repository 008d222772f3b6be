"""
Admin CLI for managing the validation data repository.

Usage:
    python -m src.cli.admin_cli list [--method <method> --url <url>] [--name <name>]
    python -m src.cli.admin_cli urls
    python -m src.cli.admin_cli show --id <id>
    python -m src.cli.admin_cli children --id <id>
    python -m src.cli.admin_cli import --file <path.json|path.yaml>
    python -m src.cli.admin_cli delete --ids <id> [<id> ...]
    python -m src.cli.admin_cli truncate --yes
    python -m src.cli.admin_cli rules

Global options (--repository-path, --rules-path, --env-file) fall back to
CHECKPOINT_REPOSITORY_PATH / CHECKPOINT_RULES_PATH from the environment.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from src.core.config import CheckpointConfig
from src.core.exceptions import ValidationLibException
from src.core.models import ValidationData
from src.core.repository import ValidationDataRepository
from src.observability.logger import get_logger, reconfigure_loggers
from src.observability.metrics import start_metrics_server

logger = get_logger(__name__)

_IMPORT_ADAPTER = TypeAdapter(list[ValidationData])


def _dump(datas: list[ValidationData]) -> list[dict[str, Any]]:
    return [d.model_dump(mode="json", by_alias=True) for d in datas]


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def load_import_file(path: str | Path) -> list[ValidationData]:
    """
    Load records to import from a JSON or YAML file.

    The file holds a list of records in the repository file format, or a
    mapping with a "datas" list.

    Raises:
        ValueError: If the content is not a list of valid records
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            raw = yaml.safe_load(f)
        else:
            raw = json.load(f)

    if isinstance(raw, dict):
        raw = raw.get("datas")
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a list of validation data records")

    try:
        return _IMPORT_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid validation data in {path}: {e}") from e


def list_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    """List records, optionally narrowed to one route and parameter name."""
    if args.method and args.url:
        if args.name:
            datas = repository.find_by_method_and_url_and_name(args.method, args.url, args.name)
        else:
            datas = repository.find_by_method_and_url(args.method, args.url)
    elif args.method or args.url or args.name:
        print(json.dumps({"status": "error", "error": "--method and --url must be given together"}), file=sys.stderr)
        return 2
    else:
        datas = repository.find_all()

    _print_json({"count": len(datas), "datas": _dump(datas)})
    return 0


def urls_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    urls = repository.find_all_url()
    _print_json({"count": len(urls), "urls": [u.model_dump() for u in urls]})
    return 0


def show_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    data = repository.find_by_id(args.id)
    if data is None:
        print(json.dumps({"status": "not_found", "id": args.id}), file=sys.stderr)
        return 1

    output = data.model_dump(mode="json", by_alias=True)
    output["children"] = _dump(repository.find_by_parent_id(data.id))
    _print_json(output)
    return 0


def children_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    datas = repository.find_by_parent_id(args.id)
    _print_json({"count": len(datas), "datas": _dump(datas)})
    return 0


def import_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    """
    Bulk import records, then flush.

    Records whose id already exists only get their rule list replaced.
    """
    logger.info(f"Importing validation data from file: {args.file}")
    datas = load_import_file(args.file)

    saved = repository.save_all(datas)
    repository.flush()

    _print_json({"status": "imported", "count": len(saved), "ids": [d.id for d in saved]})
    return 0


def delete_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    datas = repository.find_by_ids(args.ids)
    repository.delete_all(datas)
    repository.flush()

    deleted = sorted(d.id for d in datas)
    missing = sorted(set(args.ids) - set(deleted))
    _print_json({"status": "deleted", "deleted": deleted, "not_found": missing})
    return 0


def truncate_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    if not args.yes:
        print(json.dumps({"status": "error", "error": "truncate requires --yes"}), file=sys.stderr)
        return 2

    repository.truncate()
    _print_json({"status": "truncated", "count": len(repository)})
    return 0


def rules_command(repository: ValidationDataRepository, args: argparse.Namespace) -> int:
    rules = repository.rule_store.get_rules()
    _print_json({"count": len(rules), "rules": [r.model_dump(mode="json") for r in rules]})
    return 0


COMMANDS = {
    "list": list_command,
    "urls": urls_command,
    "show": show_command,
    "children": children_command,
    "import": import_command,
    "delete": delete_command,
    "truncate": truncate_command,
    "rules": rules_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Admin CLI for the validation data repository",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--repository-path",
        help="Repository JSON file (default: $CHECKPOINT_REPOSITORY_PATH or validation-data.json)"
    )
    parser.add_argument(
        "--rules-path",
        help="Rule definitions YAML file (default: $CHECKPOINT_RULES_PATH)"
    )
    parser.add_argument(
        "--env-file",
        help="Optional .env file to load before reading the environment"
    )
    parser.add_argument(
        "--log-level",
        help="Log level (default: $LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List validation data records")
    list_parser.add_argument("--method", help="HTTP method (requires --url)")
    list_parser.add_argument("--url", help="Exact URL (requires --method)")
    list_parser.add_argument("--name", help="Parameter name, case-insensitive (requires --method and --url)")

    subparsers.add_parser("urls", help="List every known (method, url) route")

    show_parser = subparsers.add_parser("show", help="Show one record and its children")
    show_parser.add_argument("--id", type=int, required=True, help="Record ID")

    children_parser = subparsers.add_parser("children", help="List the children of a record")
    children_parser.add_argument("--id", type=int, required=True, help="Parent record ID")

    import_parser = subparsers.add_parser("import", help="Bulk import records from a JSON or YAML file")
    import_parser.add_argument("--file", required=True, help="Path to the records file")

    delete_parser = subparsers.add_parser("delete", help="Delete records by id")
    delete_parser.add_argument("--ids", type=int, nargs="+", required=True, help="Record IDs to delete")

    truncate_parser = subparsers.add_parser("truncate", help="Delete every record")
    truncate_parser.add_argument("--yes", action="store_true", help="Confirm the truncate")

    subparsers.add_parser("rules", help="List rule definitions from the rule store")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for admin CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = CheckpointConfig.from_env(
            env_file=args.env_file,
            repository_path=args.repository_path,
            rules_path=args.rules_path,
            log_level=args.log_level.upper() if args.log_level else None,
        )
        reconfigure_loggers(level=config.log_level, format_type=config.log_format)
        if config.metrics_port:
            start_metrics_server(config.metrics_port)

        repository = ValidationDataRepository.from_config(config)
        return COMMANDS[args.command](repository, args)

    except ValidationLibException as e:
        logger.error(f"Repository error: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": e.message, "http_status": e.status.value}), file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(json.dumps({"status": "error", "error": str(e)}), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
