# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Column configuration (YAML file + environment overrides).

Resolution order for the file:
- explicit `path` argument
- $COMPACT_COLUMNS_CONFIG
- none (built-in defaults)

Any key can then be overridden by $COMPACT_COLUMNS_<KEY> (e.g. COMPACT_COLUMNS_HIDE_DAYS=7).

Example file:

    preset: all_statuses
    show_colorblind_hint: true
    only_show_last_status: false
    hide_days: 14
    time_ago_type: PREFER_DATES
    locale: de_DE
    timezone: Europe/Berlin
    messages:
      status_stable: Stabil
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .column_types import STABLE_COLOR, ColumnPreset, ConfigurationError, TimeAgoType
from .messages import MessageTable
from .policy import ColumnPolicy
from .timefmt import TimeFormatter

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "COMPACT_COLUMNS_CONFIG"
ENV_PREFIX = "COMPACT_COLUMNS_"

_BOOL_KEYS = ("failed_only_if_last", "unstable_only_if_last", "only_show_last_status", "show_colorblind_hint")
_STR_KEYS = ("preset", "time_ago_type", "stable_color", "locale", "timezone")
KNOWN_KEYS = frozenset(_BOOL_KEYS + _STR_KEYS + ("hide_days", "messages"))


@dataclass(frozen=True)
class ColumnConfig:
    """Policy plus the locale/time zone/catalogue used to render it."""

    policy: ColumnPolicy = field(default_factory=ColumnPolicy)
    locale: str = "en_US"
    timezone: Optional[str] = None
    messages: Mapping[str, Any] = field(default_factory=dict)

    def formatter(self) -> TimeFormatter:
        table = MessageTable(locale=self.locale, overrides=self.messages)
        return TimeFormatter.create(timezone_name=self.timezone, messages=table)


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off", ""):
        return False
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


def _parse_days(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"hide_days must be an integer, got {value!r}")
    try:
        days = int(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"hide_days must be an integer, got {value!r}") from None
    if days < 0:
        raise ConfigurationError(f"hide_days must be >= 0, got {days}")
    return days


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return dict(data)


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in sorted(KNOWN_KEYS - {"messages"}):
        raw = env.get(ENV_PREFIX + key.upper())
        if raw is not None and raw.strip() != "":
            out[key] = raw.strip()
    return out


def config_from_mapping(data: Mapping[str, Any]) -> ColumnConfig:
    """Validate a raw mapping into a ColumnConfig."""
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    preset = ColumnPreset.parse(data.get("preset", ColumnPreset.ALL_STATUSES.value))
    policy = ColumnPolicy.for_preset(
        preset,
        show_colorblind_hint=_parse_bool("show_colorblind_hint", data.get("show_colorblind_hint", False)),
        time_ago_type=TimeAgoType.parse(data.get("time_ago_type")),
        only_show_last_status=_parse_bool("only_show_last_status", data.get("only_show_last_status", False)),
        hide_days=_parse_days(data.get("hide_days", 0)),
        stable_color=str(data.get("stable_color") or STABLE_COLOR),
    )
    explicit = {k: _parse_bool(k, data[k]) for k in ("failed_only_if_last", "unstable_only_if_last") if k in data}
    if explicit:
        policy = dataclasses.replace(policy, **explicit)

    messages = data.get("messages") or {}
    if not isinstance(messages, Mapping):
        raise ConfigurationError("messages must be a mapping of message key -> template")

    return ColumnConfig(
        policy=policy,
        locale=str(data.get("locale") or "en_US"),
        timezone=(str(data["timezone"]) if data.get("timezone") else None),
        messages=dict(messages),
    )


def load_column_config(
    path: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ColumnConfig:
    """Load the column configuration (see module docstring for the resolution order).

    `overrides` (e.g. command line flags) win over both the file and the environment.
    """
    environ = os.environ if env is None else env
    data: Dict[str, Any] = {}

    cfg_path = Path(path).expanduser() if path else None
    if cfg_path is None and environ.get(CONFIG_ENV_VAR):
        cfg_path = Path(environ[CONFIG_ENV_VAR]).expanduser()
    if cfg_path is not None:
        data.update(_read_yaml(cfg_path))
        logger.debug("Loaded column config from %s", cfg_path)

    env_values = _env_overrides(environ)
    if env_values:
        logger.debug("Environment overrides: %s", ", ".join(sorted(env_values)))
    data.update(env_values)
    data.update({k: v for k, v in dict(overrides or {}).items() if v is not None})
    return config_from_mapping(data)
