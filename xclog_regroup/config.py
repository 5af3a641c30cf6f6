"""Configuration constants, tunables, and .env loading.

WHY: Centralizes the few values that shape how a decoded activity log is
restructured, so they are easy to find, update, and override without
touching the grouping or expansion logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values; tunables read from the environment with a
default. parse_sample_size() gives a clear error for a bad override.

RULES:
- FLATTEN_SAMPLE_SIZE is a heuristic, not a semantic guarantee (default 15)
- TARGET_SECTION_TYPE is the structural tag of synthesized target sections
- All tunables can be overridden via environment variables (XCLOG_*)
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Log structure constants
# ---------------------------------------------------------------------------

TARGET_SECTION_TYPE = 2
"""sectionType value Xcode uses for a target container section."""

SOURCE_FILE_EXTENSION = ".swift"
"""Extension of the source files listed in a whole-module compile command."""

DEFAULT_FLATTEN_SAMPLE_SIZE = 15


def parse_sample_size(raw: Optional[str]) -> int:
    """Parse the flatten-detection sample size from an environment string.

    WHY: Only the first few children of the root are inspected to decide
    whether a log is flat. The threshold has no documented rationale, so
    it is exposed as a tunable.

    RULES:
    - None or blank -> DEFAULT_FLATTEN_SAMPLE_SIZE
    - Must be a positive integer; anything else raises ValueError
    """
    if raw is None or not raw.strip():
        return DEFAULT_FLATTEN_SAMPLE_SIZE
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(
            "XCLOG_FLATTEN_SAMPLE_SIZE must be an integer, got {!r}".format(raw)
        ) from None
    if value <= 0:
        raise ValueError(
            "XCLOG_FLATTEN_SAMPLE_SIZE must be positive, got {}".format(value)
        )
    return value


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

FLATTEN_SAMPLE_SIZE = parse_sample_size(os.getenv("XCLOG_FLATTEN_SAMPLE_SIZE"))
LOG_LEVEL = os.getenv("XCLOG_LOG_LEVEL", "WARNING").upper()
DEFAULT_FORMATS = os.getenv("XCLOG_DEFAULT_FORMATS", "")
