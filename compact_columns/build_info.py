# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""View-model for one build shown in a compact column."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import List, Optional

from .column_types import StatusCategory
from .history import BuildRecord
from .messages import MessageKey
from .timefmt import TimeFormatter


@dataclass
class BuildInfo:
    """One displayed build.

    - status: localized status label ("Failed", "Stable", ...)
    - color / underline_style: CSS tokens; underline_style is None when the colorblind hint is off
    - url_part: link target relative to the job URL ("lastStableBuild" or a build number)
    - is_latest_build: this is the most recent completed build (or most recent build, if none completed)
    - is_first / multiple_builds / time_ago_string: assigned by the selector after filtering
    """

    record: BuildRecord
    category: StatusCategory
    status: str
    color: str
    underline_style: Optional[str]
    url_part: str
    is_latest_build: bool
    is_first: bool = False
    multiple_builds: bool = False
    time_ago_string: Optional[str] = None

    @property
    def number(self) -> int:
        return self.record.number

    @property
    def build_time(self) -> int:
        return self.record.timestamp_ms

    @property
    def font_weight(self) -> str:
        return "bold" if self.is_latest_build and self.multiple_builds else "normal"

    def latest_build_suffix(self, formatter: TimeFormatter) -> str:
        if not self.is_latest_build:
            return ""
        return " (" + formatter.messages.format(MessageKey.LATEST_BUILD) + ")"

    def built_at(self, formatter: TimeFormatter) -> str:
        return formatter.messages.format(MessageKey.BUILT_AT, formatter.built_at(self.build_time))

    def started_ago(self, formatter: TimeFormatter) -> str:
        return formatter.messages.format(MessageKey.STARTED_AGO, self.time_ago_string or "")

    def lasted_duration(self, formatter: TimeFormatter, *, now_ms: int) -> str:
        if self.record.building:
            running = formatter.time_span(max(0, int(now_ms) - self.build_time))
            duration = formatter.messages.format(MessageKey.IN_PROGRESS_DURATION, running)
        else:
            duration = formatter.time_span(self.record.duration_ms)
        return formatter.messages.format(MessageKey.LASTED_DURATION, duration)

    def tooltip_lines(self, formatter: TimeFormatter, *, now_ms: int) -> List[str]:
        """Header line, built-at, started-ago, duration, status."""
        header = formatter.messages.format(MessageKey.BUILD_NUMBER) + str(self.number) + self.latest_build_suffix(formatter)
        return [
            header,
            self.built_at(formatter),
            self.started_ago(formatter),
            self.lasted_duration(formatter, now_ms=now_ms),
            self.status,
        ]

    def tooltip_html(self, formatter: TimeFormatter, *, now_ms: int) -> str:
        """Tooltip as an HTML fragment (bold-underlined header, bullet list, bold status)."""
        header, *items = self.tooltip_lines(formatter, now_ms=now_ms)
        status = items.pop()
        out = [f"<b><u>{html.escape(header)}</u></b>", "<ul>"]
        out.extend(f"<li>{html.escape(item)}</li>" for item in items)
        out.append(f"<li><b>{html.escape(status)}</b></li>")
        out.append("</ul>")
        return "\n".join(out)
