# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
CLI wrapper for compact_columns.

CLI glue lives in its own module so the selection/formatting code stays importable
by dashboards without argparse side effects.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .build_info import BuildInfo
from .column_types import ColumnPreset, ConfigurationError, TimeAgoType
from .columns import column_sort_data, current_time_ms, get_builds
from .config import load_column_config
from .history import BuildHistory, InMemoryBuildHistory
from .jenkins_api import HistoryFetchError, JenkinsBuildHistoryClient
from .timefmt import TimeFormatter

logger = logging.getLogger(__name__)


def load_history_file(path: Path) -> InMemoryBuildHistory:
    """Read builds from a YAML/JSON file: a list of builds, or {"builds": [...]}."""
    p = Path(path).expanduser()
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read history file {p}: {e}") from e
    if isinstance(data, dict):
        data = data.get("builds")
    if not isinstance(data, list):
        raise ConfigurationError(f"History file {p} must contain a list of builds")
    try:
        return InMemoryBuildHistory.from_dicts(data)
    except ValueError as e:
        raise ConfigurationError(f"History file {p}: {e}") from e


def _build_to_dict(build: BuildInfo, formatter: TimeFormatter, now_ms: int) -> Dict[str, Any]:
    return {
        "number": build.number,
        "category": build.category.value,
        "status": build.status,
        "color": build.color,
        "underline_style": build.underline_style,
        "url_part": build.url_part,
        "build_time": build.build_time,
        "time_ago": build.time_ago_string,
        "is_first": build.is_first,
        "is_latest_build": build.is_latest_build,
        "multiple_builds": build.multiple_builds,
        "font_weight": build.font_weight,
        "tooltip": build.tooltip_lines(formatter, now_ms=now_ms),
    }


def _format_line(build: BuildInfo) -> str:
    flags = []
    if build.is_latest_build:
        flags.append("latest")
    if build.font_weight == "bold":
        flags.append("bold")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return f"{build.status:<9} {build.time_ago_string or '':<24} #{build.number} -> {build.url_part}{suffix}"


def _cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Show the builds a compact status column would display for a job.",
        epilog="Examples:\n"
               "  %(prog)s --results SSFFUFUS --preset last_stable_and_unstable\n"
               "  %(prog)s --history builds.yaml --time-ago-type PREFER_DATES --locale de_DE\n"
               "  %(prog)s --jenkins-url https://ci.example.com --job team/app --json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--history", type=Path, help="YAML/JSON file with the job's builds")
    source.add_argument("--results", help="Newest-first result letters, e.g. SSFFUFUS (S/U/F/A/N/R)")
    source.add_argument("--job", help="Job name on the CI server (folders as a/b); requires --jenkins-url")
    parser.add_argument("--jenkins-url", default=None, help="CI server base URL for --job")
    parser.add_argument("--max-builds", type=int, default=100, help="Builds to fetch for --job (default: 100)")
    parser.add_argument("--config", type=Path, default=None, help="Column config YAML (default: $COMPACT_COLUMNS_CONFIG)")
    parser.add_argument("--preset", choices=[p.value for p in ColumnPreset], default=None, help="Column kind")
    parser.add_argument("--time-ago-type", choices=[t.value for t in TimeAgoType], default=None, help="Time display mode")
    parser.add_argument("--hide-days", type=int, default=None, help="Hide builds older than N days (all_statuses only)")
    parser.add_argument("--only-last", action="store_true", default=None, help="Only show the newest status (all_statuses only)")
    parser.add_argument("--colorblind", action="store_true", default=None, help="Include underline hints")
    parser.add_argument("--locale", default=None, help="Locale, e.g. en_US or de_DE")
    parser.add_argument("--timezone", default=None, help="IANA time zone for absolute times (default: local)")
    parser.add_argument("--now-ms", type=int, default=None, help="Reference time in epoch ms (default: now)")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print builds as JSON")
    output.add_argument("--tooltips", action="store_true", help="Print tooltip text under each build")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="[%(levelname)s] %(message)s")

    if args.job and not args.jenkins_url:
        logger.error("ERROR: --job requires --jenkins-url")
        return 2

    overrides = {
        "preset": args.preset,
        "time_ago_type": args.time_ago_type,
        "hide_days": args.hide_days,
        "only_show_last_status": args.only_last,
        "show_colorblind_hint": args.colorblind,
        "locale": args.locale,
        "timezone": args.timezone,
    }
    now_ms = current_time_ms() if args.now_ms is None else int(args.now_ms)
    try:
        config = load_column_config(args.config, overrides=overrides)
        formatter = config.formatter()
        history: BuildHistory
        if args.history:
            history = load_history_file(args.history)
        elif args.results:
            # Synthetic history: one build per minute, newest starting now.
            history = InMemoryBuildHistory.from_results(args.results, newest_timestamp_ms=now_ms, step_ms=60_000)
        else:
            client = JenkinsBuildHistoryClient(args.jenkins_url, max_builds=args.max_builds)
            history = client.fetch_history(args.job)
    except (ConfigurationError, HistoryFetchError, ValueError) as e:
        logger.error(f"ERROR: {e}")
        return 2

    builds = get_builds(history, config.policy, formatter=formatter, now_ms=now_ms)

    if args.json:
        payload = {
            "sort_key": column_sort_data(history, config.policy, formatter=formatter, now_ms=now_ms),
            "builds": [_build_to_dict(b, formatter, now_ms) for b in builds],
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
        return 0

    if not builds:
        logger.info("(no builds)")
        return 0

    lines: List[str] = []
    for b in builds:
        lines.append(_format_line(b))
        if args.tooltips:
            lines.extend("    " + ln for ln in b.tooltip_lines(formatter, now_ms=now_ms))
    sys.stdout.write("\n".join(lines) + "\n")
    return 0
