"""
Pytest tests for compact_columns/config.py, policy.py and messages.py.
"""

import pytest

from compact_columns.column_types import ConfigurationError, TimeAgoType, UnsupportedLocaleError
from compact_columns.config import CONFIG_ENV_VAR, load_column_config
from compact_columns.messages import MessageKey, MessageTable, parse_locale
from compact_columns.policy import ColumnPolicy


# ============================================================================
# load_column_config
# ============================================================================

def test_defaults_without_file_or_env():
    cfg = load_column_config(env={})
    assert cfg.policy == ColumnPolicy()
    assert cfg.locale == "en_US"
    assert cfg.timezone is None
    assert cfg.messages == {}


def test_yaml_file(tmp_path):
    path = tmp_path / "columns.yaml"
    path.write_text(
        "preset: all_statuses\n"
        "show_colorblind_hint: true\n"
        "hide_days: 14\n"
        "time_ago_type: PREFER_DATES\n"
        "locale: de_DE\n"
        "timezone: Europe/Berlin\n"
        "messages:\n"
        "  status_stable: Stabil\n"
    )
    cfg = load_column_config(path, env={})
    assert cfg.policy.show_colorblind_hint
    assert cfg.policy.hide_days == 14
    assert cfg.policy.time_ago_type == TimeAgoType.PREFER_DATES
    assert cfg.locale == "de_DE"
    assert cfg.timezone == "Europe/Berlin"

    fmt = cfg.formatter()
    assert str(fmt.locale) == "de_DE"
    assert fmt.messages.status_label(MessageKey.STATUS_STABLE) == "Stabil"


def test_config_path_from_env(tmp_path):
    path = tmp_path / "columns.yaml"
    path.write_text("preset: last_stable_and_unstable\n")
    cfg = load_column_config(env={CONFIG_ENV_VAR: str(path)})
    assert cfg.policy.failed_only_if_last
    assert not cfg.policy.unstable_only_if_last


def test_env_overrides_file_and_overrides_win(tmp_path):
    path = tmp_path / "columns.yaml"
    path.write_text("hide_days: 14\nlocale: de_DE\n")
    env = {"COMPACT_COLUMNS_HIDE_DAYS": "3", "COMPACT_COLUMNS_SHOW_COLORBLIND_HINT": "yes", "COMPACT_COLUMNS_LOCALE": ""}
    cfg = load_column_config(path, env=env, overrides={"locale": "fr_FR", "timezone": None})
    assert cfg.policy.hide_days == 3
    assert cfg.policy.show_colorblind_hint
    assert cfg.locale == "fr_FR"


def test_explicit_only_if_last_flags_override_preset():
    cfg = load_column_config(
        env={},
        overrides={"preset": "last_success_and_failed", "failed_only_if_last": True, "unstable_only_if_last": "false"},
    )
    assert cfg.policy.failed_only_if_last
    assert not cfg.policy.unstable_only_if_last


@pytest.mark.parametrize(
    "overrides, match",
    [
        ({"bogus": 1}, "Unknown config keys"),
        ({"preset": "newest"}, "Unknown column preset"),
        ({"hide_days": -1}, ">= 0"),
        ({"hide_days": "lots"}, "integer"),
        ({"show_colorblind_hint": "maybe"}, "boolean"),
        ({"time_ago_type": "WHENEVER"}, "time_ago_type"),
        ({"messages": ["a"]}, "mapping"),
    ],
)
def test_invalid_config(overrides, match):
    with pytest.raises(ConfigurationError, match=match):
        load_column_config(env={}, overrides=overrides)


def test_unreadable_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("preset: [unclosed\n")
    with pytest.raises(ConfigurationError, match="Cannot read config"):
        load_column_config(path, env={})


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_column_config(path, env={})


def test_unknown_locale_in_config_fails_on_formatter():
    cfg = load_column_config(env={}, overrides={"locale": "xx_ZZ"})
    with pytest.raises(UnsupportedLocaleError):
        cfg.formatter()


# ============================================================================
# ColumnPolicy
# ============================================================================

def test_policy_validates_days():
    with pytest.raises(ConfigurationError):
        ColumnPolicy(hide_days=-3)
    with pytest.raises(ConfigurationError):
        ColumnPolicy(hide_days=True)


def test_policy_parses_time_ago_type_strings():
    assert ColumnPolicy(time_ago_type="PREFER_DATES").time_ago_type == TimeAgoType.PREFER_DATES


# ============================================================================
# MessageTable
# ============================================================================

def test_day_plural_forms():
    messages = MessageTable()
    assert messages.format(MessageKey.DAY, 1) == "1 day"
    assert messages.format(MessageKey.DAY, 2) == "2 days"
    assert messages.format(MessageKey.DAY, 0.5) == "0.5 days"


def test_message_overrides_and_unknown_keys():
    messages = MessageTable(locale="de_DE", overrides={"second": "{0} Sek.", "day": {"one": "{0} Tag", "other": "{0} Tage"}})
    assert messages.format(MessageKey.SECOND, 1.5) == "1,5 Sek."
    assert messages.format(MessageKey.DAY, 3) == "3 Tage"
    with pytest.raises(ConfigurationError, match="Unknown message key"):
        MessageTable(overrides={"nope": "x"})
    with pytest.raises(ConfigurationError, match="'other'"):
        MessageTable(overrides={"day": {"one": "x"}})


def test_messages_from_yaml(tmp_path):
    path = tmp_path / "de.yaml"
    path.write_text("status_failed: fehlgeschlagen\nlatest_build: neuester\n")
    messages = MessageTable.from_yaml(path, locale="de")
    assert messages.status_label(MessageKey.STATUS_FAILED) == "Fehlgeschlagen"
    assert messages.format(MessageKey.LATEST_BUILD) == "neuester"


@pytest.mark.parametrize("raw, expect", [("de-DE", "de_DE"), ("en_US", "en_US"), ("", "en_US"), (None, "en_US")])
def test_parse_locale(raw, expect):
    assert str(parse_locale(raw)) == expect


def test_parse_locale_unknown():
    with pytest.raises(UnsupportedLocaleError):
        parse_locale("xx_ZZ")
