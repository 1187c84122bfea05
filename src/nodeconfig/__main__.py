"""Module entrypoint for ``python -m nodeconfig``."""

from __future__ import annotations

from nodeconfig.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
