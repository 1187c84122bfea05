"""
nodeconfig — node configuration validation and property visibility engine.

File: src/nodeconfig/__init__.py

Purpose
- Package root. Exposes the version and the small public entrypoint surface.

Functional requirements
- Must not have side effects at import time (no settings loading, no logging init).
"""

from nodeconfig.validation.engine import inspect_visibility, validate_node, validate_unit

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "inspect_visibility",
    "validate_node",
    "validate_unit",
]
