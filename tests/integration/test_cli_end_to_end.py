"""
nodeconfig — CLI subprocess contracts

File: tests/integration/test_cli_end_to_end.py

Purpose
- Run ``python -m nodeconfig`` as a real process and verify exit codes,
  stdout payloads and that logs never leak onto stdout.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

SLACK_NODE: dict[str, object] = {
    "name": "n8n-nodes-base.slack",
    "properties": [
        {
            "name": "resource",
            "type": "options",
            "default": "message",
            "options": [{"value": "message"}, {"value": "channel"}],
        },
        {
            "name": "operation",
            "type": "options",
            "default": "send",
            "options": [{"value": "send"}, {"value": "update"}],
            "displayOptions": {"show": {"resource": ["message"]}},
        },
        {
            "name": "channel",
            "type": "string",
            "required": True,
            "displayOptions": {"show": {"resource": ["message"]}},
        },
        {"name": "text", "type": "string", "displayOptions": {"show": {"resource": ["message"]}}},
    ],
}


def _run_cli(cwd: Path, *args: str, extra_env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    for key in list(env):
        if key.startswith("NODECONFIG_"):
            del env[key]
    env.update(extra_env or {})
    return subprocess.run(
        [sys.executable, "-m", "nodeconfig", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def _write(path: Path, payload: object) -> str:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_validate_reports_missing_channel_and_exits_one(tmp_path: Path) -> None:
    schema = _write(tmp_path / "slack.json", SLACK_NODE)
    params = _write(tmp_path / "params.json", {"resource": "message", "operation": "send"})

    completed = _run_cli(tmp_path, "validate", schema, params, "--json")

    assert completed.returncode == 1, completed.stderr
    payload = json.loads(completed.stdout)
    assert payload["nodeType"] == "nodes-base.slack"
    assert payload["operation"] == {"resource": "message", "operation": "send"}
    assert {issue["property"] for issue in payload["errors"]} == {"channel", "text"}


def test_validate_clean_message_exits_zero_with_json_logs_on_stderr(tmp_path: Path) -> None:
    schema = _write(tmp_path / "slack.json", SLACK_NODE)
    params = _write(
        tmp_path / "params.json",
        {"channel": "#general", "text": "deploy finished", "onError": "continueRegularOutput"},
    )

    completed = _run_cli(
        tmp_path,
        "validate",
        schema,
        params,
        "--json",
        extra_env={
            "NODECONFIG_OBSERVABILITY_LOG_LEVEL": "DEBUG",
            "NODECONFIG_OBSERVABILITY_LOG_FORMAT": "json",
        },
    )

    assert completed.returncode == 0, completed.stderr
    assert json.loads(completed.stdout)["valid"] is True
    events = [json.loads(line)["event"] for line in completed.stderr.splitlines() if line.strip()]
    assert "node_validation_completed" in events


def test_settings_file_drives_default_profile(tmp_path: Path) -> None:
    (tmp_path / "nodeconfig.toml").write_text(
        '[validation]\ndefault_profile = "strict"\n', encoding="utf-8"
    )

    completed = _run_cli(tmp_path, "settings", "--json")

    assert completed.returncode == 0, completed.stderr
    assert json.loads(completed.stdout)["settings"]["validation"]["default_profile"] == "strict"


def test_invalid_settings_exit_two(tmp_path: Path) -> None:
    (tmp_path / "nodeconfig.toml").write_text(
        "[validation]\nmax_top_k_warning_threshold = 0\n", encoding="utf-8"
    )

    completed = _run_cli(tmp_path, "settings")

    assert completed.returncode == 2
    assert "validation.max_top_k_warning_threshold" in completed.stderr
