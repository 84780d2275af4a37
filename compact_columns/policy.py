# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Column policy: the immutable per-request knobs of a compact column."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .column_types import STABLE_COLOR, ColumnPreset, ConfigurationError, TimeAgoType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnPolicy:
    """Selection + display policy.

    - failed_only_if_last / unstable_only_if_last: hide that category unless it is the
      most recently completed build
    - only_show_last_status: show only the newest surviving build
    - hide_days: hide builds older than N days (0 = never); the newest build always stays
    """

    failed_only_if_last: bool = False
    unstable_only_if_last: bool = False
    only_show_last_status: bool = False
    show_colorblind_hint: bool = False
    hide_days: int = 0
    time_ago_type: TimeAgoType = TimeAgoType.DIFF
    stable_color: str = STABLE_COLOR

    def __post_init__(self) -> None:
        if isinstance(self.hide_days, bool) or not isinstance(self.hide_days, int):
            raise ConfigurationError(f"hide_days must be an integer, got {self.hide_days!r}")
        if self.hide_days < 0:
            raise ConfigurationError(f"hide_days must be >= 0, got {self.hide_days}")
        if not isinstance(self.time_ago_type, TimeAgoType):
            object.__setattr__(self, "time_ago_type", TimeAgoType.parse(self.time_ago_type))

    @classmethod
    def for_preset(
        cls,
        preset: ColumnPreset,
        *,
        show_colorblind_hint: bool = False,
        time_ago_type: Optional[TimeAgoType] = None,
        only_show_last_status: bool = False,
        hide_days: int = 0,
        stable_color: str = STABLE_COLOR,
    ) -> "ColumnPolicy":
        """Policy of one of the three column kinds.

        Only ALL_STATUSES honors only_show_last_status / hide_days; the other presets
        always show every selected category.
        """
        preset = ColumnPreset.parse(preset)
        if preset == ColumnPreset.LAST_STABLE_AND_UNSTABLE:
            failed_only, unstable_only = True, False
        elif preset == ColumnPreset.LAST_SUCCESS_AND_FAILED:
            failed_only, unstable_only = False, True
        else:
            failed_only, unstable_only = False, False

        if preset != ColumnPreset.ALL_STATUSES and (only_show_last_status or hide_days):
            logger.warning(
                "Column preset %s ignores only_show_last_status/hide_days (got %s/%s)",
                preset.value,
                only_show_last_status,
                hide_days,
            )
            only_show_last_status, hide_days = False, 0

        return cls(
            failed_only_if_last=failed_only,
            unstable_only_if_last=unstable_only,
            only_show_last_status=bool(only_show_last_status),
            show_colorblind_hint=bool(show_colorblind_hint),
            hide_days=hide_days,
            time_ago_type=TimeAgoType.parse(time_ago_type),
            stable_color=stable_color,
        )
