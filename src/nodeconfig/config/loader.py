"""
nodeconfig — settings loader.

File: src/nodeconfig/config/loader.py

Purpose
- Load effective engine settings from defaults, a TOML file, env vars and
  explicit overrides.

What should be included in this file
- Precedence logic: overrides > env (NODECONFIG_) > file > defaults.
- TOML loading via ``tomllib``.
- Deterministic environment variable mapping and coercion.

Functional requirements
- Reject invalid settings via schema validation.
- A missing default file is fine; a missing explicit file is an error.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final

from nodeconfig.config.schema import (
    EngineSettings,
    assert_valid_settings,
    default_settings,
    merge_settings,
)
from nodeconfig.observability.logging import get_logger

DEFAULT_SETTINGS_FILE: Final[str] = "nodeconfig.toml"
ENV_PREFIX: Final[str] = "NODECONFIG_"

_logger = get_logger(__name__)


def _parse_int(raw: str) -> int:
    return int(raw, 10)


# Settings leaves are either free text or counts; the default value's type picks the parser.
_ENV_PARSERS: Final[dict[type, tuple[Callable[[str], object], str]]] = {
    str: (str, "text"),
    int: (_parse_int, "an integer"),
}


class SettingsLoadError(ValueError):
    """Raised when settings cannot be read or env overrides cannot be coerced."""


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> EngineSettings:
    """Load effective settings with precedence: overrides > env > file > defaults."""

    payload = load_settings_payload(path, environ=environ, overrides=overrides)
    return EngineSettings.from_mapping(payload)


def load_settings_payload(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> dict[str, Any]:
    """Merge and validate every settings layer; return the nested payload."""

    resolved_path = _resolve_settings_path(path)
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_toml_file(resolved_path, required=path is not None)
    merged = merge_settings(default_settings(), file_payload)
    merged = assert_valid_settings(merged)

    merged = merge_settings(merged, _collect_env_overrides(merged, env_map))
    merged = merge_settings(merged, _materialize_overrides(overrides or {}))
    merged = assert_valid_settings(merged)

    _logger.debug("settings_loaded", path=str(resolved_path), file_present=bool(file_payload))
    return merged


def dump_effective_settings(payload: Mapping[str, object]) -> str:
    """Return a deterministic JSON dump of a settings payload."""

    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _resolve_settings_path(path: str | Path | None) -> Path:
    if path is None:
        return (Path.cwd() / DEFAULT_SETTINGS_FILE).resolve()
    return Path(path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise SettingsLoadError(f"settings file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise SettingsLoadError(f"unable to read settings file {path}: {exc}") from exc

    return parsed


def _collect_env_overrides(
    settings: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    """Pick ``NODECONFIG_<SECTION>_<FIELD>`` values for every known settings leaf."""

    overrides: dict[str, Any] = {}
    for section, fields in sorted(settings.items()):
        if section == "meta" or not isinstance(fields, Mapping):
            continue
        for field, current in sorted(fields.items()):
            env_name = f"{ENV_PREFIX}{section.upper()}_{field.upper()}"
            if env_name not in environ:
                continue
            parsed = _parse_env_value(env_name, f"{section}.{field}", environ[env_name], current)
            overrides.setdefault(section, {})[field] = parsed
    return overrides


def _parse_env_value(env_name: str, dotted: str, raw: str, current: object) -> object:
    entry = _ENV_PARSERS.get(type(current))
    if entry is None:
        raise SettingsLoadError(f"{env_name} -> {dotted} cannot be set from the environment")
    parser, expected = entry
    try:
        return parser(raw.strip())
    except ValueError as exc:
        raise SettingsLoadError(f"{env_name} -> {dotted} must be {expected}") from exc


def _materialize_overrides(overrides: Mapping[str, object]) -> dict[str, Any]:
    """Expand ``{"section.field": value}`` keys into the nested settings shape."""

    payload: dict[str, Any] = {}
    for key, value in sorted(overrides.items()):
        *parents, leaf = key.split(".")
        if not leaf or any(not part for part in parents):
            raise SettingsLoadError(f"invalid override key {key!r}")
        node = payload
        for part in parents:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise SettingsLoadError(f"invalid override key {key!r}")
        node[leaf] = value
    return payload


__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "ENV_PREFIX",
    "SettingsLoadError",
    "dump_effective_settings",
    "load_settings",
    "load_settings_payload",
]
