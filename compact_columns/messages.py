# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Localized string table for unit labels, status labels and tooltip templates.

Templates use positional `{0}` placeholders. An entry may also be a plural mapping
`{"one": ..., "other": ...}`; "one" is used only when the first argument equals exactly 1
(so "1 day" but "1.5 days" and "0.5 days").

Numeric arguments are rendered with the locale's decimal symbols via Babel
("1.5" in English, "1,5" in German).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from babel import Locale
from babel.core import UnknownLocaleError
from babel.numbers import format_decimal

from .column_types import ConfigurationError, UnsupportedLocaleError

logger = logging.getLogger(__name__)

Template = Union[str, Mapping[str, str]]


class MessageKey(str, Enum):
    """Fixed set of message identifiers."""

    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"

    STATUS_FAILED = "status_failed"
    STATUS_UNSTABLE = "status_unstable"
    STATUS_STABLE = "status_stable"
    STATUS_ABORTED = "status_aborted"

    BUILD_NUMBER = "build_number"
    LATEST_BUILD = "latest_build"
    BUILT_AT = "built_at"
    STARTED_AGO = "started_ago"
    LASTED_DURATION = "lasted_duration"
    IN_PROGRESS_DURATION = "in_progress_duration"


DEFAULT_MESSAGES: Dict[MessageKey, Template] = {
    MessageKey.MILLISECOND: "{0} ms",
    MessageKey.SECOND: "{0} sec",
    MessageKey.MINUTE: "{0} min",
    MessageKey.HOUR: "{0} hr",
    MessageKey.DAY: {"one": "{0} day", "other": "{0} days"},
    MessageKey.MONTH: "{0} mo",
    MessageKey.YEAR: "{0} yr",
    MessageKey.STATUS_FAILED: "Failed",
    MessageKey.STATUS_UNSTABLE: "Unstable",
    MessageKey.STATUS_STABLE: "Stable",
    MessageKey.STATUS_ABORTED: "Aborted",
    MessageKey.BUILD_NUMBER: "Build #",
    MessageKey.LATEST_BUILD: "latest",
    MessageKey.BUILT_AT: "Built at {0}",
    MessageKey.STARTED_AGO: "Started {0} ago",
    MessageKey.LASTED_DURATION: "Lasted {0}",
    MessageKey.IN_PROGRESS_DURATION: "{0} and counting",
}


def parse_locale(identifier: Union[str, Locale, None]) -> Locale:
    """Parse "en_US" / "de-DE" / "de" into a Babel Locale (UnsupportedLocaleError if unknown)."""
    if isinstance(identifier, Locale):
        return identifier
    s = str(identifier or "").strip().replace("-", "_")
    if not s:
        s = "en_US"
    try:
        return Locale.parse(s)
    except (UnknownLocaleError, ValueError) as e:
        raise UnsupportedLocaleError(f"Can't handle locale: {identifier!r} ({e})") from e


def _validate_template(key: MessageKey, value: Any) -> Template:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and "other" in value:
        return {str(k): str(v) for k, v in value.items()}
    raise ConfigurationError(f"Message {key.value!r} must be a string or a mapping with an 'other' form")


class MessageTable:
    """String-table collaborator: `format(key, *args) -> str`."""

    def __init__(
        self,
        locale: Union[str, Locale, None] = "en_US",
        overrides: Optional[Mapping[Union[str, MessageKey], Any]] = None,
    ):
        self.locale: Locale = parse_locale(locale)
        self._messages: Dict[MessageKey, Template] = dict(DEFAULT_MESSAGES)
        for raw_key, value in dict(overrides or {}).items():
            try:
                key = MessageKey(raw_key)
            except ValueError:
                raise ConfigurationError(f"Unknown message key: {raw_key!r}") from None
            self._messages[key] = _validate_template(key, value)

    @classmethod
    def from_yaml(cls, path: Path, *, locale: Union[str, Locale, None] = "en_US") -> "MessageTable":
        """Load per-key overrides from a YAML mapping (e.g. a translated catalogue)."""
        p = Path(path).expanduser()
        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read message catalogue {p}: {e}") from e
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Message catalogue {p} must be a mapping")
        logger.debug("Loaded %d message overrides from %s", len(data), p)
        return cls(locale=locale, overrides=data)

    def format_number(self, value: Union[int, float, Decimal]) -> str:
        return format_decimal(value, locale=self.locale)

    def format(self, key: MessageKey, *args: Any) -> str:
        template = self._messages[MessageKey(key)]
        if not isinstance(template, str):
            first = args[0] if args else None
            is_one = isinstance(first, (int, float, Decimal)) and not isinstance(first, bool) and first == 1
            template = template.get("one", template["other"]) if is_one else template["other"]
        rendered = [self.format_number(a) if isinstance(a, (int, float, Decimal)) and not isinstance(a, bool) else a for a in args]
        return template.format(*rendered)

    def status_label(self, key: MessageKey) -> str:
        """Status label, with the first letter upper-cased (catalogues may supply "stable")."""
        message = self.format(key)
        if len(message) > 1 and message[0].islower():
            message = message[0].upper() + message[1:]
        return message
