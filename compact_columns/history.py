# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Build history model consumed (read-only) by the column logic.

A job's history is exposed newest-first. The CI server keeps it as a backward-linked list
(each build knows its predecessor); here it is an iterable, so the selection code can be
exercised against an in-memory history in tests and against a fetched snapshot in the CLI.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .column_types import BuildResult


@dataclass(frozen=True)
class BuildRecord:
    """One build of a job.

    - number: unique, increases with recency
    - result: None while building (or when the server reports no result)
    - timestamp_ms: start time, epoch milliseconds
    - duration_ms: run time in milliseconds (0 while building)
    """

    number: int
    result: Optional[BuildResult]
    timestamp_ms: int
    duration_ms: int = 0
    building: bool = False

    @property
    def is_completed(self) -> bool:
        return not self.building and self.result is not None


class BuildHistory(abc.ABC):
    """Read-only, newest-first view of a job's builds.

    Subclasses only need `__iter__`. The lookups below walk the history; a store that keeps
    per-result indexes can override them.
    """

    @abc.abstractmethod
    def __iter__(self) -> Iterator[BuildRecord]:
        """Yield builds newest first."""

    def last(self) -> Optional[BuildRecord]:
        for rec in self:
            return rec
        return None

    def last_completed(self) -> Optional[BuildRecord]:
        for rec in self:
            if rec.is_completed:
                return rec
        return None

    def last_with_result(self, result: BuildResult) -> Optional[BuildRecord]:
        for rec in self:
            if rec.is_completed and rec.result == result:
                return rec
        return None

    def last_failed(self) -> Optional[BuildRecord]:
        return self.last_with_result(BuildResult.FAILURE)

    def last_unstable(self) -> Optional[BuildRecord]:
        return self.last_with_result(BuildResult.UNSTABLE)

    def last_stable(self) -> Optional[BuildRecord]:
        return self.last_with_result(BuildResult.SUCCESS)


# Result letters for compact history strings (newest first), e.g. "SSFFUFUS".
RESULT_LETTERS: Dict[str, Optional[BuildResult]] = {
    "S": BuildResult.SUCCESS,
    "U": BuildResult.UNSTABLE,
    "F": BuildResult.FAILURE,
    "A": BuildResult.ABORTED,
    "N": BuildResult.NOT_BUILT,
    "R": None,  # running
}


def _parse_timestamp_ms(value: Any) -> int:
    """Accept epoch milliseconds or an ISO-8601 string (naive strings are UTC)."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value or "").strip()
        if not s:
            raise ValueError("Missing timestamp")
        if s.isdigit():
            return int(s)
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


class InMemoryBuildHistory(BuildHistory):
    """A snapshot of builds held in a list (newest first)."""

    def __init__(self, records: Iterable[BuildRecord] = ()):
        recs = sorted(records, key=lambda r: r.number, reverse=True)
        seen: set[int] = set()
        for r in recs:
            if r.number in seen:
                raise ValueError(f"Duplicate build number: {r.number}")
            seen.add(r.number)
        self._records: List[BuildRecord] = recs

    def __iter__(self) -> Iterator[BuildRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"InMemoryBuildHistory({len(self._records)} builds)"

    @classmethod
    def from_results(
        cls,
        spec: str,
        *,
        newest_number: Optional[int] = None,
        newest_timestamp_ms: int = 0,
        step_ms: int = 1,
        duration_ms: int = 0,
    ) -> "InMemoryBuildHistory":
        """Build a history from a newest-first result string.

        Letters: S=success, U=unstable, F=failure, A=aborted, N=not built, R=running.
        Build numbers count down by one from `newest_number` (default: len(spec)), and
        timestamps count down by `step_ms` from `newest_timestamp_ms`.
        """
        letters = str(spec or "").strip().upper()
        top = len(letters) if newest_number is None else int(newest_number)
        records: List[BuildRecord] = []
        for i, ch in enumerate(letters):
            if ch not in RESULT_LETTERS:
                raise ValueError(f"Unknown result letter {ch!r} in {spec!r}")
            running = ch == "R"
            records.append(
                BuildRecord(
                    number=top - i,
                    result=RESULT_LETTERS[ch],
                    timestamp_ms=int(newest_timestamp_ms) - i * int(step_ms),
                    duration_ms=0 if running else int(duration_ms),
                    building=running,
                )
            )
        return cls(records)

    @classmethod
    def from_dicts(cls, rows: Iterable[Mapping[str, Any]]) -> "InMemoryBuildHistory":
        """Build a history from mappings (CI server JSON / YAML fixtures).

        Keys: number, result, timestamp (epoch ms or ISO-8601), duration (ms), building.
        """
        records: List[BuildRecord] = []
        for row in rows:
            try:
                number = int(row["number"])
            except (KeyError, TypeError, ValueError):
                raise ValueError(f"Build entry without a valid number: {dict(row)!r}") from None
            building = bool(row.get("building", False))
            records.append(
                BuildRecord(
                    number=number,
                    result=BuildResult.parse(row.get("result")),
                    timestamp_ms=_parse_timestamp_ms(row.get("timestamp")),
                    duration_ms=int(row.get("duration") or 0),
                    building=building,
                )
            )
        return cls(records)
