"""
nodeconfig — unit tests for the CLI router

File: tests/unit/ui/test_cli.py

Purpose
- Exercise each subcommand in-process with temporary schema/config files and
  verify exit codes, JSON payloads and error routing.

Functional requirements
- Offline; never reads a settings file outside the temporary directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from nodeconfig.config import SettingsLoadError
from nodeconfig.main import ExitCode, _route_exception, cli_entrypoint
from nodeconfig.observability import reset_logging
from nodeconfig.ui.cli import CLIError, build_parser, run_cli

if TYPE_CHECKING:
    from collections.abc import Iterator

HTTP_NODE: dict[str, object] = {
    "name": "n8n-nodes-base.httpRequest",
    "displayName": "HTTP Request",
    "properties": [
        {
            "name": "method",
            "type": "options",
            "default": "GET",
            "options": [{"value": "GET"}, {"value": "POST"}],
        },
        {"name": "url", "displayName": "URL", "type": "string", "required": True, "default": ""},
        {"name": "sendBody", "type": "boolean", "default": False},
        {
            "name": "jsonBody",
            "type": "json",
            "displayOptions": {"show": {"sendBody": [True]}},
        },
    ],
}


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for key in ("NODECONFIG_VALIDATION_DEFAULT_PROFILE", "NODECONFIG_OBSERVABILITY_LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    yield
    reset_logging()


def _write_json(path: Path, payload: object) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


@pytest.fixture
def schema_file(tmp_path: Path) -> str:
    return _write_json(tmp_path / "http.json", HTTP_NODE)


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_validate_valid_configuration_text_output(
    schema_file: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    params = _write_json(tmp_path / "params.json", {"url": "https://example.com"})

    exit_code = run_cli(["validate", schema_file, params])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Node type: nodes-base.httpRequest" in out
    assert "Result: valid" in out


def test_validate_invalid_configuration_json_output(
    schema_file: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    params = tmp_path / "params.yaml"
    params.write_text("method: GET\n", encoding="utf-8")

    exit_code = run_cli(["validate", schema_file, str(params), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert payload["valid"] is False
    assert payload["profile"] == "runtime"
    assert [issue["property"] for issue in payload["errors"]] == ["url"]
    assert "jsonBody" in payload["hiddenProperties"]


def test_validate_accepts_node_objects_and_profile_flag(
    schema_file: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    node = _write_json(
        tmp_path / "node.json",
        {
            "id": "n1",
            "name": "Fetch",
            "type": "n8n-nodes-base.httpRequest",
            "parameters": {"url": "https://example.com", "method": "POST"},
        },
    )

    exit_code = run_cli(["validate", schema_file, node, "--profile", "minimal", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["mode"] == "minimal"
    assert payload["warnings"] == []


def test_validate_input_errors_exit_two(
    schema_file: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    params = _write_json(tmp_path / "params.json", {"url": "https://example.com"})
    bare_schema = _write_json(tmp_path / "bare.json", HTTP_NODE["properties"])
    broken = tmp_path / "broken.yaml"
    broken.write_text("url: [unterminated\n", encoding="utf-8")

    assert run_cli(["validate", str(tmp_path / "missing.json"), params]) == 2
    assert "file not found" in capsys.readouterr().err

    assert run_cli(["validate", bare_schema, params]) == 2
    assert "node type is unknown" in capsys.readouterr().err

    assert run_cli(["validate", schema_file, str(broken)]) == 2
    assert "invalid JSON/YAML" in capsys.readouterr().err

    assert run_cli(["validate", schema_file, params, "--config", str(tmp_path / "none.toml")]) == 2


def test_type_flag_overrides_schema(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    bare_schema = _write_json(tmp_path / "bare.json", HTTP_NODE["properties"])
    params = _write_json(tmp_path / "params.json", {"url": "https://example.com"})

    exit_code = run_cli(["validate", bare_schema, params, "--type", "nodes-base.httpRequest", "--json"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["nodeType"] == "nodes-base.httpRequest"


def test_essentials_json(schema_file: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["essentials", schema_file, "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["nodeType"] == "nodes-base.httpRequest"
    assert [prop["name"] for prop in payload["required"]] == ["url"]
    assert [prop["name"] for prop in payload["common"]] == ["method", "sendBody"]


def test_search_text_and_limits(schema_file: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["search", schema_file, "body", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [match["name"] for match in payload["matches"]] == ["sendBody", "jsonBody"]

    assert run_cli(["search", schema_file, "url"]) == 0
    assert "Matches (1):" in capsys.readouterr().out

    assert run_cli(["search", schema_file, "url", "--limit", "0"]) == 2


def test_visibility_table_and_json(
    schema_file: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    params = _write_json(tmp_path / "params.json", {"sendBody": False})

    assert run_cli(["visibility", schema_file, params, "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["visible"] == ["method", "url", "sendBody"]
    assert payload["hidden"] == [{"name": "jsonBody", "requirement": 'Requires: sendBody="true"'}]

    assert run_cli(["visibility", schema_file, params]) == 0
    out = capsys.readouterr().out
    assert "jsonBody" in out
    assert "hidden" in out


def test_settings_reflect_env(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("NODECONFIG_VALIDATION_DEFAULT_PROFILE", "strict")

    assert run_cli(["settings", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["command"] == "settings"
    assert payload["settings"]["validation"]["default_profile"] == "strict"


def test_cli_entrypoint_maps_exit_codes(
    schema_file: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    params = _write_json(tmp_path / "params.json", {})

    assert cli_entrypoint(["validate", schema_file, params]) == ExitCode.VALIDATION_FAILED
    assert cli_entrypoint(["unknown-command"]) == ExitCode.INPUT_ERROR
    assert cli_entrypoint(["settings", "--config", str(tmp_path / "nope.toml")]) == ExitCode.INPUT_ERROR
    capsys.readouterr()


def test_exception_routing_follows_the_cause_chain() -> None:
    try:
        try:
            raise SettingsLoadError("bad env")
        except SettingsLoadError as inner:
            raise RuntimeError("wrapped") from inner
    except RuntimeError as outer:
        assert _route_exception(outer) is ExitCode.INPUT_ERROR

    assert _route_exception(RuntimeError("boom")) is ExitCode.INTERNAL_ERROR
    assert str(CLIError("nope")) == "nope"
