"""Command-line interface router for nodeconfig."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from nodeconfig.config import (
    SettingsLoadError,
    SettingsValidationError,
    load_settings,
    load_settings_payload,
)
from nodeconfig.config.schema import EngineSettings
from nodeconfig.domain.models import (
    Unit,
    ValidationMode,
    ValidationProfile,
    ValidationReport,
)
from nodeconfig.domain.node_types import normalize_node_type
from nodeconfig.observability import configure_logging
from nodeconfig.properties import get_essentials, search_properties
from nodeconfig.ui.render import CLIRenderer, create_renderer
from nodeconfig.validation import inspect_visibility, validate_node


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 2

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class NodeSchema:
    """Property descriptors read from a schema document, plus its declared type."""

    node_type: str | None
    descriptors: tuple[Mapping[str, object], ...]


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="nodeconfig",
        description=(
            "nodeconfig — node configuration validation and property visibility.\n\n"
            "Common workflows:\n"
            "  nodeconfig validate schema.json params.yaml   Validate a node configuration\n"
            "  nodeconfig essentials schema.json             Show the essential properties\n"
            "  nodeconfig search schema.json auth            Search properties by name\n"
            "  nodeconfig visibility schema.json params.json Explain shown/hidden fields\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to settings TOML (default: ./nodeconfig.toml if present).",
    )
    common.add_argument(
        "--type",
        dest="node_type",
        default=None,
        help="Node type, e.g. nodes-base.httpRequest (default: taken from the schema/config file).",
    )
    common.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show issue codes and debug logs.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate a node configuration against its property schema",
        description=(
            "Validate a node configuration (JSON or YAML) against a property schema.\n"
            "Exits 1 when the configuration has errors.\n\n"
            "Examples:\n"
            "  nodeconfig validate slack.json params.yaml\n"
            "  nodeconfig validate tool.json node.json --profile strict --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    validate_parser.add_argument("schema", help="Property schema file (JSON/YAML, '-' for stdin)")
    validate_parser.add_argument("params", help="Node parameters or node object (JSON/YAML)")
    validate_parser.add_argument(
        "--profile",
        choices=[item.value for item in ValidationProfile],
        default=None,
        help="Validation profile (default from settings).",
    )
    validate_parser.add_argument(
        "--mode",
        choices=[item.value for item in ValidationMode],
        default=None,
        help="Property filter mode (default from profile).",
    )
    validate_parser.set_defaults(handler=_cmd_validate)

    # essentials ----------------------------------------------------------
    essentials_parser = subparsers.add_parser(
        "essentials",
        parents=[common],
        help="Show the required and commonly used properties of a node",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    essentials_parser.add_argument("schema", help="Property schema file (JSON/YAML)")
    essentials_parser.set_defaults(handler=_cmd_essentials)

    # search --------------------------------------------------------------
    search_parser = subparsers.add_parser(
        "search",
        parents=[common],
        help="Search a property tree by name, label or description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    search_parser.add_argument("schema", help="Property schema file (JSON/YAML)")
    search_parser.add_argument("query", help="Case-insensitive search text")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of results (default from settings).",
    )
    search_parser.set_defaults(handler=_cmd_search)

    # visibility ----------------------------------------------------------
    visibility_parser = subparsers.add_parser(
        "visibility",
        parents=[common],
        help="Explain which properties a configuration shows or hides",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    visibility_parser.add_argument("schema", help="Property schema file (JSON/YAML)")
    visibility_parser.add_argument("params", help="Node parameters (JSON/YAML)")
    visibility_parser.add_argument(
        "--no-defaults",
        action="store_true",
        default=False,
        help="Evaluate conditions without filling in schema defaults.",
    )
    visibility_parser.set_defaults(handler=_cmd_visibility)

    # settings ------------------------------------------------------------
    settings_parser = subparsers.add_parser(
        "settings",
        parents=[common],
        help="Show effective engine settings",
        description=(
            "Display the effective settings after merging defaults, file, and env.\n\n"
            "Examples:\n"
            "  nodeconfig settings\n"
            "  NODECONFIG_VALIDATION_DEFAULT_PROFILE=strict nodeconfig settings --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    settings_parser.set_defaults(handler=_cmd_settings)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    # Bootstrap to stderr until settings are known; stdout carries command output only.
    configure_logging("DEBUG" if _flag(namespace, "verbose") else "WARNING")
    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_validate(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    schema = _load_schema(args.schema)
    unit = _load_unit(args.params)
    node_type = _resolve_node_type(args, schema, unit)

    try:
        report = validate_node(
            node_type,
            unit.parameters,
            schema.descriptors,
            profile=args.profile,
            mode=args.mode,
            unit=unit,
            settings=settings,
        )
    except (TypeError, ValueError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    if _flag(args, "json"):
        _emit_json(report.to_dict())
    else:
        _render_report(_get_renderer(args), report)
    return 0 if report.valid else 1


def _cmd_essentials(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    schema = _load_schema(args.schema)
    node_type = _resolve_node_type(args, schema, None)

    essentials = get_essentials(
        schema.descriptors,
        node_type,
        max_options=settings.max_options,
        max_depth=settings.max_tree_depth,
        total_limit=settings.essentials_total_limit,
    )

    if _flag(args, "json"):
        _emit_json({"nodeType": node_type, **essentials.to_dict()})
        return 0

    renderer = _get_renderer(args)
    renderer.kv("Node type", node_type)
    renderer.properties("Required:", essentials.required)
    renderer.properties("Common:", essentials.common)
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    schema = _load_schema(args.schema)
    limit = args.limit if args.limit is not None else settings.search_max_results
    if limit <= 0:
        raise CLIError("--limit must be > 0", exit_code=2)

    results = search_properties(
        schema.descriptors,
        args.query,
        limit,
        max_options=settings.max_options,
        max_depth=settings.max_tree_depth,
    )

    if _flag(args, "json"):
        _emit_json(
            {
                "query": args.query,
                "totalMatches": len(results),
                "matches": [item.to_dict() for item in results],
            }
        )
        return 0

    renderer = _get_renderer(args)
    renderer.kv("Query", args.query)
    renderer.properties(f"Matches ({len(results)}):", results)
    return 0


def _cmd_visibility(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    schema = _load_schema(args.schema)
    unit = _load_unit(args.params)

    entries = inspect_visibility(
        schema.descriptors,
        unit.parameters,
        with_defaults=not _flag(args, "no_defaults"),
        max_depth=settings.max_tree_depth,
    )

    if _flag(args, "json"):
        _emit_json(
            {
                "visible": [entry.name for entry in entries if entry.visible],
                "hidden": [
                    {"name": entry.name, "requirement": entry.requirement}
                    for entry in entries
                    if not entry.visible
                ],
            }
        )
        return 0

    renderer = _get_renderer(args)
    rows = [
        (entry.name, "shown" if entry.visible else "hidden", entry.requirement or "")
        for entry in entries
    ]
    renderer.table(("property", "state", "shown when"), rows, title="Visibility:")
    return 0


def _cmd_settings(args: argparse.Namespace) -> int:
    config_path = _optional_str(getattr(args, "config_path", None))
    try:
        payload = load_settings_payload(config_path)
    except (SettingsLoadError, SettingsValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    if _flag(args, "json"):
        _emit_json({"command": "settings", "settings": payload})
        return 0

    renderer = _get_renderer(args)
    renderer.text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(verbose=_flag(args, "verbose"))


def _render_report(renderer: CLIRenderer, report: ValidationReport) -> None:
    renderer.kv("Node type", report.node_type)
    renderer.kv("Profile", f"{report.profile.value} (mode: {report.mode.value})")
    operation = report.operation.to_dict()
    if operation:
        renderer.kv("Operation", ", ".join(f"{key}={value}" for key, value in operation.items()))
    renderer.kv("Result", "valid" if report.valid else "invalid")
    renderer.issues(f"Errors ({len(report.errors)}):", report.errors)
    renderer.issues(f"Warnings ({len(report.warnings)}):", report.warnings)
    if report.suggestions:
        renderer.section("Suggestions:")
        renderer.items(list(report.suggestions))
    if report.autofix and renderer.verbose:
        renderer.section("Autofix:")
        renderer.text(json.dumps(report.autofix, indent=2, sort_keys=True, default=str))
    renderer.next_steps(report.next_steps)


# ---------------------------------------------------------------------------
# Helpers: settings, documents, resolution
# ---------------------------------------------------------------------------


def _load_settings(args: argparse.Namespace) -> EngineSettings:
    config_path = _optional_str(getattr(args, "config_path", None))
    try:
        settings = load_settings(config_path)
    except (SettingsLoadError, SettingsValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    level = "DEBUG" if _flag(args, "verbose") else settings.log_level
    configure_logging(level, settings.log_format)
    return settings


def _read_document(source: str) -> Any:
    if source == "-":
        text = sys.stdin.read()
        label = "<stdin>"
    else:
        path = Path(source).expanduser()
        label = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise CLIError(f"file not found: {label}", exit_code=2) from exc
        except OSError as exc:
            raise CLIError(f"unable to read {label}: {exc}", exit_code=2) from exc

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CLIError(f"invalid JSON/YAML in {label}: {exc}", exit_code=2) from exc


def _load_schema(source: str) -> NodeSchema:
    """Accept a bare descriptor list or a node description with ``properties``."""

    document = _read_document(source)
    node_type: str | None = None
    if isinstance(document, Mapping):
        for key in ("type", "name", "nodeType"):
            candidate = document.get(key)
            if isinstance(candidate, str) and candidate.strip():
                node_type = candidate.strip()
                break
        document = document.get("properties")

    if not isinstance(document, list):
        raise CLIError(
            f"schema {source} must be a list of properties or an object with 'properties'",
            exit_code=2,
        )
    descriptors = tuple(item for item in document if isinstance(item, Mapping))
    return NodeSchema(node_type=node_type, descriptors=descriptors)


def _load_unit(source: str) -> Unit:
    """Accept bare parameters or a workflow node object with ``parameters``."""

    document = _read_document(source)
    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        raise CLIError(f"configuration {source} must be an object", exit_code=2)
    if isinstance(document.get("parameters"), Mapping) and isinstance(document.get("type"), str):
        return Unit.from_mapping(document)
    return Unit(name="", type="", parameters=dict(document))


def _resolve_node_type(
    args: argparse.Namespace, schema: NodeSchema, unit: Unit | None
) -> str:
    for candidate in (
        _optional_str(getattr(args, "node_type", None)),
        unit.type if unit is not None and unit.type else None,
        schema.node_type,
    ):
        if candidate:
            return normalize_node_type(candidate)
    raise CLIError("node type is unknown; pass --type or declare it in the schema", exit_code=2)


def _optional_str(value: object) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


__all__ = ["CLIError", "NodeSchema", "build_parser", "run_cli"]
