# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Build selector: orders scanned candidates, applies the day cutoff and "only last status",
then sets display flags and time strings on what survives.

Input candidates are never mutated; survivors are copies.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Sequence

from .build_info import BuildInfo
from .policy import ColumnPolicy
from .timefmt import ONE_DAY_MS, TimeFormatter

logger = logging.getLogger(__name__)


def filter_builds(candidates: Sequence[BuildInfo], policy: ColumnPolicy, *, now_ms: int) -> List[BuildInfo]:
    """Newest first; drop builds older than `hide_days` (the newest one always stays)."""
    ordered = sorted(candidates, key=lambda b: b.number, reverse=True)
    max_diff_ms = policy.hide_days * ONE_DAY_MS

    kept: List[BuildInfo] = []
    for info in ordered:
        show = True
        if policy.hide_days > 0:
            show = (int(now_ms) - info.build_time) <= max_diff_ms
        if kept and not show:
            logger.debug("Hiding build #%d: older than %d days", info.number, policy.hide_days)
            continue
        kept.append(info)
        if policy.only_show_last_status:
            break
    return kept


def select(
    candidates: Sequence[BuildInfo],
    policy: ColumnPolicy,
    *,
    now_ms: int,
    formatter: TimeFormatter,
) -> List[BuildInfo]:
    """Displayed builds, newest first, with flags and time strings assigned."""
    kept = filter_builds(candidates, policy, now_ms=now_ms)
    multiple = len(kept) > 1

    out: List[BuildInfo] = []
    for i, info in enumerate(kept):
        time_ago = formatter.time_ago(
            info.build_time,
            now_ms=now_ms,
            time_ago_type=policy.time_ago_type,
            is_multiple=multiple,
        )
        out.append(dataclasses.replace(info, is_first=(i == 0), multiple_builds=multiple, time_ago_string=time_ago))
    return out
