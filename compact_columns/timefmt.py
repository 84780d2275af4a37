# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Time and locale formatting for compact build columns.

Two independent pieces:
- relative "time ago" strings: one coarse unit with at most one decimal ("2.1 days", "17 sec")
- absolute strings from the locale's CLDR short patterns, with 4-digit years forced

Also hosts the CI server's duration ("time span") string used by tooltips.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_DOWN, Decimal
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from babel import Locale
from babel.dates import LOCALTZ, format_datetime, get_date_format, get_datetime_format, get_time_format

from .column_types import ConfigurationError, TimeAgoType, UnsupportedLocaleError
from .messages import MessageKey, MessageTable, parse_locale

logger = logging.getLogger(__name__)

ONE_SECOND_MS: int = 1000
ONE_MINUTE_MS: int = 60 * ONE_SECOND_MS
ONE_HOUR_MS: int = 60 * ONE_MINUTE_MS
ONE_DAY_MS: int = 24 * ONE_HOUR_MS
ONE_MONTH_MS: int = 30 * ONE_DAY_MS
ONE_YEAR_MS: int = 365 * ONE_DAY_MS

# Largest first. Month/year are fixed 30/365-day approximations.
_BUCKETS: Tuple[Tuple[int, MessageKey], ...] = (
    (ONE_YEAR_MS, MessageKey.YEAR),
    (ONE_MONTH_MS, MessageKey.MONTH),
    (ONE_DAY_MS, MessageKey.DAY),
    (ONE_HOUR_MS, MessageKey.HOUR),
    (ONE_MINUTE_MS, MessageKey.MINUTE),
    (ONE_SECOND_MS, MessageKey.SECOND),
)

Number = Union[int, float, Decimal]


# ======================================================================================
# Relative time
# ======================================================================================

def rounded_number(number: Number) -> Decimal:
    """Round to 1 decimal below 10 and to an integer from 10 up, ties toward zero (half-down)."""
    value = Decimal(number)
    quantum = Decimal("1") if value >= 10 else Decimal("0.1")
    return value.quantize(quantum, rounding=ROUND_HALF_DOWN)


def short_timestamp(elapsed_ms: Number, messages: MessageTable) -> str:
    """Coarse relative time: "2.1 days" rather than "2 days 3 hours".

    - < 1 sec: "0 sec"
    - < 10 of a unit: one decimal ("1.5 sec")
    - >= 10 of a unit: whole number ("17 sec")
    """
    diff = Decimal(elapsed_ms)
    for bucket_ms, key in _BUCKETS:
        if diff >= bucket_ms:
            return messages.format(key, rounded_number(diff / bucket_ms))
    return messages.format(MessageKey.SECOND, 0)


def _time_span_with_remainder(big: int, big_key: MessageKey, small: int, small_key: MessageKey, messages: MessageTable) -> str:
    text = messages.format(big_key, big)
    if big < 10:
        text += " " + messages.format(small_key, small)
    return text


def format_time_span(duration_ms: int, messages: MessageTable) -> str:
    """Duration string as the CI server prints it ("2 hr 5 min", "12 hr", "1.2 sec", "40 ms")."""
    remaining = max(0, int(duration_ms))
    years, remaining = divmod(remaining, ONE_YEAR_MS)
    months, remaining = divmod(remaining, ONE_MONTH_MS)
    days, remaining = divmod(remaining, ONE_DAY_MS)
    hours, remaining = divmod(remaining, ONE_HOUR_MS)
    minutes, remaining = divmod(remaining, ONE_MINUTE_MS)
    seconds, millis = divmod(remaining, ONE_SECOND_MS)

    if years > 0:
        return _time_span_with_remainder(years, MessageKey.YEAR, months, MessageKey.MONTH, messages)
    if months > 0:
        return _time_span_with_remainder(months, MessageKey.MONTH, days, MessageKey.DAY, messages)
    if days > 0:
        return _time_span_with_remainder(days, MessageKey.DAY, hours, MessageKey.HOUR, messages)
    if hours > 0:
        return _time_span_with_remainder(hours, MessageKey.HOUR, minutes, MessageKey.MINUTE, messages)
    if minutes > 0:
        return _time_span_with_remainder(minutes, MessageKey.MINUTE, seconds, MessageKey.SECOND, messages)
    if seconds >= 10:
        return messages.format(MessageKey.SECOND, seconds)
    if seconds >= 1:
        return messages.format(MessageKey.SECOND, seconds + Decimal(millis // 100) / 10)
    if millis >= 100:
        return messages.format(MessageKey.SECOND, Decimal(millis // 10) / 100)
    return messages.format(MessageKey.MILLISECOND, millis)


# ======================================================================================
# Locale patterns
# ======================================================================================

def force_four_digit_year(pattern: str) -> str:
    """'M/d/yy' -> 'M/d/yyyy'. Patterns that already carry 'yyyy' (or a bare 'y') are unchanged."""
    if "yyyy" in pattern:
        return pattern
    return pattern.replace("yy", "yyyy")


def _pattern_of(fmt: object, locale: Locale) -> str:
    pattern = getattr(fmt, "pattern", None)
    if not isinstance(pattern, str) or not pattern:
        raise UnsupportedLocaleError(f"Can't handle locale: {locale}")
    return pattern


@functools.lru_cache(maxsize=64)
def _locale_patterns(locale_id: str) -> Tuple[str, str, str]:
    locale = Locale.parse(locale_id)
    try:
        date_p = _pattern_of(get_date_format("short", locale=locale), locale)
        time_p = _pattern_of(get_time_format("short", locale=locale), locale)
        glue = get_datetime_format("short", locale=locale)
    except (KeyError, AttributeError) as e:
        raise UnsupportedLocaleError(f"Can't handle locale: {locale} ({e})") from e
    if not isinstance(glue, str) or "{0}" not in glue or "{1}" not in glue:
        raise UnsupportedLocaleError(f"Can't handle locale: {locale}")
    datetime_p = glue.replace("{1}", date_p).replace("{0}", time_p)
    logger.debug("Short patterns for %s: date=%r time=%r datetime=%r", locale, date_p, time_p, datetime_p)
    return force_four_digit_year(date_p), time_p, force_four_digit_year(datetime_p)


def date_pattern(locale: Union[str, Locale]) -> str:
    """Short date pattern of the locale with a 4-digit year."""
    return _locale_patterns(str(parse_locale(locale)))[0]


def time_pattern(locale: Union[str, Locale]) -> str:
    return _locale_patterns(str(parse_locale(locale)))[1]


def datetime_pattern(locale: Union[str, Locale]) -> str:
    """Short date-time pattern of the locale with a 4-digit year."""
    return _locale_patterns(str(parse_locale(locale)))[2]


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """IANA zone name -> tzinfo; None/empty means the host's local zone."""
    if not name:
        return LOCALTZ
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown time zone: {name!r}") from e


# ======================================================================================
# Absolute time
# ======================================================================================

def _to_datetime(timestamp_ms: int, tz: tzinfo) -> datetime:
    return datetime.fromtimestamp(int(timestamp_ms) / 1000.0, tz=tz)


def build_time_string(
    timestamp_ms: int,
    *,
    locale: Union[str, Locale],
    tz: tzinfo,
    add_date: bool = True,
    add_time: bool = True,
    use_default_format: bool = False,
) -> str:
    """Absolute build time.

    - date + time + use_default_format: the locale's combined date-time pattern
    - otherwise "<time>, <date>" with whichever parts are requested
    """
    loc = parse_locale(locale)
    when = _to_datetime(timestamp_ms, tz)
    if add_date and add_time and use_default_format:
        return format_datetime(when, format=datetime_pattern(loc), tzinfo=tz, locale=loc)

    parts = []
    if add_time:
        parts.append(format_datetime(when, format=time_pattern(loc), tzinfo=tz, locale=loc))
    if add_date:
        parts.append(format_datetime(when, format=date_pattern(loc), tzinfo=tz, locale=loc))
    return ", ".join(parts)


def is_same_day_of_year(timestamp_ms: int, now_ms: int, tz: tzinfo) -> bool:
    # Compares day-of-year only: Jan 1 of two different years also counts as "today".
    then = _to_datetime(timestamp_ms, tz).timetuple().tm_yday
    now = _to_datetime(now_ms, tz).timetuple().tm_yday
    return then == now


@dataclass(frozen=True)
class TimeFormatter:
    """Locale, time zone and string table needed to render build times."""

    messages: MessageTable = field(default_factory=MessageTable)
    tz: tzinfo = LOCALTZ

    @classmethod
    def create(
        cls,
        *,
        locale: Union[str, Locale, None] = "en_US",
        timezone_name: Optional[str] = None,
        messages: Optional[MessageTable] = None,
    ) -> "TimeFormatter":
        table = messages if messages is not None else MessageTable(locale=locale)
        # Fail fast on locales without introspectable patterns.
        date_pattern(table.locale)
        return cls(messages=table, tz=resolve_timezone(timezone_name))

    @property
    def locale(self) -> Locale:
        return self.messages.locale

    def relative(self, elapsed_ms: Number) -> str:
        return short_timestamp(elapsed_ms, self.messages)

    def time_span(self, duration_ms: int) -> str:
        return format_time_span(duration_ms, self.messages)

    def built_at(self, timestamp_ms: int) -> str:
        """"<time>, <date>" for tooltips."""
        return build_time_string(timestamp_ms, locale=self.locale, tz=self.tz)

    def absolute(
        self,
        timestamp_ms: int,
        *,
        now_ms: int,
        time_ago_type: TimeAgoType,
        is_multiple: bool,
    ) -> str:
        if time_ago_type == TimeAgoType.PREFER_DATE_TIME and not is_multiple:
            return build_time_string(
                timestamp_ms, locale=self.locale, tz=self.tz, add_date=True, add_time=True, use_default_format=True
            )
        if is_same_day_of_year(timestamp_ms, now_ms, self.tz):
            return build_time_string(timestamp_ms, locale=self.locale, tz=self.tz, add_date=False, add_time=True)
        return build_time_string(timestamp_ms, locale=self.locale, tz=self.tz, add_date=True, add_time=False)

    def time_ago(
        self,
        timestamp_ms: int,
        *,
        now_ms: int,
        time_ago_type: TimeAgoType = TimeAgoType.DIFF,
        is_multiple: bool = False,
    ) -> str:
        """Display time for one build according to the column's time mode."""
        if time_ago_type == TimeAgoType.DIFF:
            return self.relative(max(0, int(now_ms) - int(timestamp_ms)))
        return self.absolute(timestamp_ms, now_ms=now_ms, time_ago_type=time_ago_type, is_multiple=is_multiple)
