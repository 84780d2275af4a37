"""
Pytest tests for compact_columns/history.py and the enum parsers in column_types.py.
"""

import pytest

from compact_columns.column_types import BuildResult, ColumnPreset, ConfigurationError, TimeAgoType
from compact_columns.history import BuildRecord, InMemoryBuildHistory


def test_from_results_numbers_and_timestamps():
    history = InMemoryBuildHistory.from_results("SFR", newest_number=10, newest_timestamp_ms=5000, step_ms=100)
    records = list(history)
    assert [r.number for r in records] == [10, 9, 8]
    assert [r.timestamp_ms for r in records] == [5000, 4900, 4800]
    assert [r.result for r in records] == [BuildResult.SUCCESS, BuildResult.FAILURE, None]
    assert records[2].building
    assert not records[2].is_completed
    assert len(history) == 3


def test_from_results_rejects_unknown_letters():
    with pytest.raises(ValueError, match="Unknown result letter"):
        InMemoryBuildHistory.from_results("SXF")


def test_records_sorted_newest_first():
    history = InMemoryBuildHistory([
        BuildRecord(number=1, result=BuildResult.SUCCESS, timestamp_ms=1),
        BuildRecord(number=3, result=BuildResult.FAILURE, timestamp_ms=3),
        BuildRecord(number=2, result=BuildResult.UNSTABLE, timestamp_ms=2),
    ])
    assert [r.number for r in history] == [3, 2, 1]


def test_duplicate_numbers_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        InMemoryBuildHistory([
            BuildRecord(number=1, result=BuildResult.SUCCESS, timestamp_ms=1),
            BuildRecord(number=1, result=BuildResult.FAILURE, timestamp_ms=2),
        ])


def test_lookups_skip_running_builds():
    history = InMemoryBuildHistory.from_results("RUFSA")
    assert history.last().number == 5
    assert history.last_completed().number == 4
    assert history.last_unstable().number == 4
    assert history.last_failed().number == 3
    assert history.last_stable().number == 2
    assert history.last_with_result(BuildResult.ABORTED).number == 1
    assert history.last_with_result(BuildResult.NOT_BUILT) is None


def test_lookups_on_empty_history():
    history = InMemoryBuildHistory()
    assert history.last() is None
    assert history.last_completed() is None
    assert history.last_stable() is None


def test_from_dicts_accepts_server_json_and_iso_timestamps():
    history = InMemoryBuildHistory.from_dicts([
        {"number": 12, "result": None, "timestamp": 1700000000000, "duration": 0, "building": True},
        {"number": 11, "result": "FAILURE", "timestamp": "2023-11-14T22:00:00Z", "duration": 65000},
        {"number": "10", "result": "success", "timestamp": "2023-11-14T21:00:00"},
    ])
    records = list(history)
    assert [r.number for r in records] == [12, 11, 10]
    assert records[0].building and records[0].result is None
    assert records[1].result == BuildResult.FAILURE
    assert records[1].timestamp_ms == 1699999200000
    assert records[1].duration_ms == 65000
    # Naive ISO strings are UTC.
    assert records[2].timestamp_ms == 1699995600000
    assert records[2].result == BuildResult.SUCCESS


@pytest.mark.parametrize("row", [{"result": "SUCCESS", "timestamp": 1}, {"number": "x", "timestamp": 1}])
def test_from_dicts_requires_number(row):
    with pytest.raises(ValueError, match="valid number"):
        InMemoryBuildHistory.from_dicts([row])


def test_from_dicts_requires_timestamp():
    with pytest.raises(ValueError, match="timestamp"):
        InMemoryBuildHistory.from_dicts([{"number": 1, "result": "SUCCESS"}])


@pytest.mark.parametrize(
    "raw, expect",
    [
        ("SUCCESS", BuildResult.SUCCESS),
        ("unstable", BuildResult.UNSTABLE),
        (" FAILURE ", BuildResult.FAILURE),
        ("", None),
        (None, None),
        ("SOMETHING_NEW", None),
    ],
)
def test_build_result_parse(raw, expect):
    assert BuildResult.parse(raw) == expect


@pytest.mark.parametrize(
    "raw, expect",
    [
        (None, TimeAgoType.DIFF),
        ("DIFF", TimeAgoType.DIFF),
        ("prefer-dates", TimeAgoType.PREFER_DATES),
        ("PREFER_ABSOLUTE_DATE_TIME_FOR_SINGLE", TimeAgoType.PREFER_DATE_TIME),
        (TimeAgoType.PREFER_DATE_TIME, TimeAgoType.PREFER_DATE_TIME),
    ],
)
def test_time_ago_type_parse(raw, expect):
    assert TimeAgoType.parse(raw) == expect


def test_time_ago_type_parse_unknown():
    with pytest.raises(ConfigurationError):
        TimeAgoType.parse("SOMETIMES")


def test_column_preset_parse():
    assert ColumnPreset.parse("All-Statuses") == ColumnPreset.ALL_STATUSES
    with pytest.raises(ConfigurationError):
        ColumnPreset.parse("newest_only")
