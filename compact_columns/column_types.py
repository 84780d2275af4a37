# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Common shared enums/types used by every `compact_columns` module:
- `history.py` (build records)
- `scanner.py` / `selector.py` (build selection)
- `timefmt.py` / `config.py` (formatting + configuration)

This module MUST NOT import any other compact_columns module to avoid cycles.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class BuildResult(str, Enum):
    """Completion result of a build, as reported by the CI server."""

    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["BuildResult"]:
        """Parse a CI server result string; None/empty means in progress or unknown."""
        s = str(value or "").strip().upper()
        if not s:
            return None
        try:
            return cls(s)
        except ValueError:
            return None


class StatusCategory(str, Enum):
    """Status category of a displayed build (at most one record per category)."""

    FAILED = "failed"
    UNSTABLE = "unstable"
    STABLE = "stable"
    ABORTED = "aborted"


class TimeAgoType(str, Enum):
    """How a displayed build's time is rendered."""

    DIFF = "DIFF"
    # ^ Always a coarse relative time ("2.1 days").
    PREFER_DATES = "PREFER_DATES"
    # ^ Time-only for builds from today, date-only otherwise.
    PREFER_DATE_TIME = "PREFER_DATE_TIME"
    # ^ Full date+time when a single build is shown, else like PREFER_DATES.

    @classmethod
    def parse(cls, value: Optional[str]) -> "TimeAgoType":
        """Parse a mode name; None means DIFF. Unknown names raise ConfigurationError."""
        if value is None:
            return cls.DIFF
        if isinstance(value, cls):
            return value
        s = str(value).strip().upper().replace("-", "_")
        aliases = {
            "RELATIVE_DIFF": cls.DIFF,
            "PREFER_ABSOLUTE_DATES": cls.PREFER_DATES,
            "PREFER_ABSOLUTE_DATE_TIME_FOR_SINGLE": cls.PREFER_DATE_TIME,
        }
        if s in aliases:
            return aliases[s]
        try:
            return cls(s)
        except ValueError:
            raise ConfigurationError(f"Unknown time_ago_type: {value!r}") from None


class ColumnPreset(str, Enum):
    """The three fixed build-selection strategies."""

    LAST_STABLE_AND_UNSTABLE = "last_stable_and_unstable"
    LAST_SUCCESS_AND_FAILED = "last_success_and_failed"
    ALL_STATUSES = "all_statuses"

    @classmethod
    def parse(cls, value: str) -> "ColumnPreset":
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower().replace("-", "_")
        try:
            return cls(s)
        except ValueError:
            raise ConfigurationError(f"Unknown column preset: {value!r}") from None


class ConfigurationError(ValueError):
    """Invalid column configuration (bad preset, mode, day count, time zone, ...)."""


class UnsupportedLocaleError(ConfigurationError):
    """Locale whose date/time patterns cannot be introspected."""


# Color tokens (CSS colors) per status category.
FAILED_COLOR = "#ef2929"
UNSTABLE_COLOR = "#f57900"
STABLE_COLOR = "#0000ff"
OTHER_COLOR = "#5a5a5a"

# Colorblind underline hints (CSS border-bottom shorthand) per status category.
FAILED_UNDERLINE_STYLE = "1px solid"
UNSTABLE_UNDERLINE_STYLE = "1px dashed"
STABLE_UNDERLINE_STYLE = "0px solid"
OTHER_UNDERLINE_STYLE = "1px dashed"

# Fixed URL fragments (relative to the job URL) for categories that use a permalink.
LAST_FAILED_URL_PART = "lastFailedBuild"
LAST_STABLE_URL_PART = "lastStableBuild"
