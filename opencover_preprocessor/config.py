"""Configuration constants, naming conventions, and .env loading.

WHY: Centralizes the fixed naming conventions of compiler-generated
startup code and the few runtime knobs (worker count, log level) so they
are easy to find and override without touching the matching logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings and sets. Defaults can be overridden via
environment variables.

RULES:
- STARTUP_CODE_PREFIX is matched case-insensitively against FullName
- NESTED_TYPE_SEPARATOR is used both to detect and to build nested names
- SUPPORTED_REPORT_EXTENSIONS lists accepted report file extensions
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Compiler naming conventions
# ---------------------------------------------------------------------------

STARTUP_CODE_PREFIX = "<StartupCode$"
"""Name prefix the F# compiler gives to synthetic module-initialisation classes."""

NESTED_TYPE_SEPARATOR = "/"
"""Separator between an enclosing type and a nested type in a FullName."""

# ---------------------------------------------------------------------------
# Supported input files
# ---------------------------------------------------------------------------

SUPPORTED_REPORT_EXTENSIONS: set[str] = {".xml"}
"""Report file extensions accepted by the CLI (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Runtime defaults
# ---------------------------------------------------------------------------


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None
    if value < 1:
        raise ValueError("{} must be at least 1, got {}".format(name, value))
    return value


DEFAULT_MAX_WORKERS = _int_from_env("OPENCOVER_MAX_WORKERS", 1)
DEFAULT_LOG_LEVEL = os.getenv("OPENCOVER_LOG_LEVEL", "WARNING").upper()
