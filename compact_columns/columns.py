# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Column entry points: scan + select + format in one pass.

`now` is sampled once per call so every build in one column uses the same reference time.
"""

from __future__ import annotations

import time
from typing import List, Optional

from .build_info import BuildInfo
from .history import BuildHistory
from .policy import ColumnPolicy
from .scanner import scan
from .selector import select
from .timefmt import TimeFormatter


def current_time_ms() -> int:
    return int(time.time() * 1000)


def get_builds(
    history: BuildHistory,
    policy: ColumnPolicy,
    *,
    formatter: Optional[TimeFormatter] = None,
    now_ms: Optional[int] = None,
) -> List[BuildInfo]:
    """Builds to display for one job, newest first. Empty when nothing qualifies."""
    fmt = formatter if formatter is not None else TimeFormatter.create()
    now = current_time_ms() if now_ms is None else int(now_ms)
    return select(scan(history, policy, fmt.messages), policy, now_ms=now, formatter=fmt)


def column_sort_data(
    history: BuildHistory,
    policy: ColumnPolicy,
    *,
    formatter: Optional[TimeFormatter] = None,
    now_ms: Optional[int] = None,
) -> str:
    """Sort key: timestamp of the newest displayed build, "0" when none."""
    builds = get_builds(history, policy, formatter=formatter, now_ms=now_ms)
    if not builds:
        return "0"
    return str(builds[0].build_time)


def is_builds_empty(
    history: BuildHistory,
    policy: ColumnPolicy,
    *,
    formatter: Optional[TimeFormatter] = None,
    now_ms: Optional[int] = None,
) -> bool:
    return not get_builds(history, policy, formatter=formatter, now_ms=now_ms)


def tooltip(build: BuildInfo, *, formatter: TimeFormatter, now_ms: Optional[int] = None) -> str:
    """HTML tooltip for one displayed build."""
    now = current_time_ms() if now_ms is None else int(now_ms)
    return build.tooltip_html(formatter, now_ms=now)
