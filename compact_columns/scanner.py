# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
History scanner: picks at most one candidate build per status category.

Categories:
- Failed   : last FAILURE (optionally only when it is the last completed build)
- Unstable : last UNSTABLE (optionally only when it is the last completed build)
- Stable   : last SUCCESS
- Aborted  : only when none of the above exist; newest ABORTED build found walking back

The returned list is unsorted; ordering and filtering are the selector's job.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .build_info import BuildInfo
from .column_types import (
    FAILED_COLOR,
    FAILED_UNDERLINE_STYLE,
    LAST_FAILED_URL_PART,
    LAST_STABLE_URL_PART,
    OTHER_COLOR,
    OTHER_UNDERLINE_STYLE,
    STABLE_UNDERLINE_STYLE,
    UNSTABLE_COLOR,
    UNSTABLE_UNDERLINE_STYLE,
    BuildResult,
    StatusCategory,
)
from .history import BuildHistory, BuildRecord
from .messages import MessageKey, MessageTable
from .policy import ColumnPolicy

logger = logging.getLogger(__name__)


def _is_last_completed(history: BuildHistory, record: BuildRecord) -> bool:
    last_completed = history.last_completed()
    return last_completed is not None and last_completed.number == record.number


def _latest_number(history: BuildHistory) -> Optional[int]:
    latest = history.last_completed() or history.last()
    return latest.number if latest is not None else None


def create_build_info(
    record: Optional[BuildRecord],
    *,
    history: BuildHistory,
    category: StatusCategory,
    color: str,
    underline_style: str,
    status: str,
    url_part: Optional[str],
    policy: ColumnPolicy,
) -> Optional[BuildInfo]:
    if record is None:
        return None
    return BuildInfo(
        record=record,
        category=category,
        status=status,
        color=color,
        underline_style=underline_style if policy.show_colorblind_hint else None,
        url_part=url_part if url_part is not None else str(record.number),
        is_latest_build=record.number == _latest_number(history),
    )


def last_failed_build(history: BuildHistory, policy: ColumnPolicy, messages: MessageTable) -> Optional[BuildInfo]:
    record = history.last_failed()
    if record is None:
        return None
    if policy.failed_only_if_last and not _is_last_completed(history, record):
        logger.debug("Hiding failed build #%d: not the last completed build", record.number)
        return None
    return create_build_info(
        record,
        history=history,
        category=StatusCategory.FAILED,
        color=FAILED_COLOR,
        underline_style=FAILED_UNDERLINE_STYLE,
        status=messages.status_label(MessageKey.STATUS_FAILED),
        url_part=LAST_FAILED_URL_PART,
        policy=policy,
    )


def last_unstable_build(history: BuildHistory, policy: ColumnPolicy, messages: MessageTable) -> Optional[BuildInfo]:
    record = history.last_unstable()
    if record is None:
        return None
    if policy.unstable_only_if_last and not _is_last_completed(history, record):
        logger.debug("Hiding unstable build #%d: not the last completed build", record.number)
        return None
    return create_build_info(
        record,
        history=history,
        category=StatusCategory.UNSTABLE,
        color=UNSTABLE_COLOR,
        underline_style=UNSTABLE_UNDERLINE_STYLE,
        status=messages.status_label(MessageKey.STATUS_UNSTABLE),
        url_part=str(record.number),
        policy=policy,
    )


def last_stable_build(history: BuildHistory, policy: ColumnPolicy, messages: MessageTable) -> Optional[BuildInfo]:
    return create_build_info(
        history.last_stable(),
        history=history,
        category=StatusCategory.STABLE,
        color=policy.stable_color,
        underline_style=STABLE_UNDERLINE_STYLE,
        status=messages.status_label(MessageKey.STATUS_STABLE),
        url_part=LAST_STABLE_URL_PART,
        policy=policy,
    )


def last_aborted_record(history: BuildHistory) -> Optional[BuildRecord]:
    """Walk back from the newest build to the first ABORTED one."""
    for depth, record in enumerate(history):
        if record.result == BuildResult.ABORTED:
            logger.debug("Aborted fallback: build #%d at depth %d", record.number, depth)
            return record
    return None


def scan(history: BuildHistory, policy: ColumnPolicy, messages: MessageTable) -> List[BuildInfo]:
    """Candidate builds (at most one per category, unsorted)."""
    candidates: List[BuildInfo] = []
    for finder in (last_failed_build, last_unstable_build, last_stable_build):
        info = finder(history, policy, messages)
        if info is not None:
            candidates.append(info)

    if not candidates:
        aborted = create_build_info(
            last_aborted_record(history),
            history=history,
            category=StatusCategory.ABORTED,
            color=OTHER_COLOR,
            underline_style=OTHER_UNDERLINE_STYLE,
            status=messages.status_label(MessageKey.STATUS_ABORTED),
            url_part=None,
            policy=policy,
        )
        if aborted is not None:
            candidates.append(aborted)

    return candidates
