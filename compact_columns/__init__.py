"""
Compact build-status columns for CI dashboards.

Given a job's build history, pick a small policy-driven set of recent builds (last failed,
last unstable, last stable, or the last aborted one as a fallback) and format them for a
narrow dashboard column: "time ago" strings, colorblind underline hints, tooltips.

Public API is re-exported from:
- `compact_columns.columns` for the one-call entry points
- `compact_columns.history` for the history model
- `compact_columns.timefmt` for time formatting
"""

from .build_info import BuildInfo  # noqa: F401
from .column_types import (  # noqa: F401
    BuildResult,
    ColumnPreset,
    ConfigurationError,
    StatusCategory,
    TimeAgoType,
    UnsupportedLocaleError,
)
from .columns import column_sort_data, get_builds, is_builds_empty, tooltip  # noqa: F401
from .config import ColumnConfig, load_column_config  # noqa: F401
from .history import BuildHistory, BuildRecord, InMemoryBuildHistory  # noqa: F401
from .messages import MessageKey, MessageTable  # noqa: F401
from .policy import ColumnPolicy  # noqa: F401
from .timefmt import TimeFormatter  # noqa: F401

__all__ = [
    "BuildHistory",
    "BuildInfo",
    "BuildRecord",
    "BuildResult",
    "ColumnConfig",
    "ColumnPolicy",
    "ColumnPreset",
    "ConfigurationError",
    "InMemoryBuildHistory",
    "MessageKey",
    "MessageTable",
    "StatusCategory",
    "TimeAgoType",
    "TimeFormatter",
    "UnsupportedLocaleError",
    "column_sort_data",
    "get_builds",
    "is_builds_empty",
    "load_column_config",
    "tooltip",
]
