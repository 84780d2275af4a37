# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Fetch a job's build history from the CI server's JSON API.

Only the fields the column needs are requested:
    <base>/job/<name>/api/json?tree=builds[number,result,timestamp,duration,building]{0,N}

Nested folders are given as "folder/job" and become "job/folder/job/job".
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from requests.auth import HTTPBasicAuth

from .history import InMemoryBuildHistory

logger = logging.getLogger(__name__)

BUILD_FIELDS = "number,result,timestamp,duration,building"


class HistoryFetchError(RuntimeError):
    """The build history could not be read from the CI server."""


def job_api_path(job: str) -> str:
    """"team/app" -> "job/team/job/app"."""
    parts = [p.strip() for p in str(job or "").strip().strip("/").split("/")]
    parts = [p for p in parts if p and p != "job"]
    if not parts:
        raise ValueError("Empty job name")
    return "/".join(f"job/{quote(p, safe='')}" for p in parts)


class JenkinsBuildHistoryClient:
    """Read-only JSON API client.

    Credentials priority: 1) arguments, 2) JENKINS_USER / JENKINS_API_TOKEN env,
    3) ~/.config/jenkins-token (API token only).
    """

    @staticmethod
    def get_token_from_file() -> Optional[str]:
        token_file = Path.home() / ".config" / "jenkins-token"
        try:
            if token_file.exists():
                return token_file.read_text().strip() or None
        except OSError:
            return None
        return None

    def __init__(
        self,
        base_url: str,
        *,
        username: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout_s: float = 10.0,
        max_builds: int = 100,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = str(base_url).rstrip("/")
        self.username = username or os.environ.get("JENKINS_USER")
        self.api_token = api_token or os.environ.get("JENKINS_API_TOKEN") or self.get_token_from_file()
        self.timeout_s = float(timeout_s)
        self.max_builds = int(max_builds)
        self.session = session or requests.Session()
        self._rest_calls_total: int = 0
        self._rest_time_total_s: float = 0.0

    def _auth(self) -> Optional[HTTPBasicAuth]:
        if self.username and self.api_token:
            return HTTPBasicAuth(self.username, self.api_token)
        return None

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        t0 = time.monotonic()
        try:
            response = self.session.get(url, params=params, auth=self._auth(), timeout=self.timeout_s)
            if response.status_code == 401:
                raise HistoryFetchError(f"CI server returned 401 Unauthorized for {url}. Check your API token.")
            if response.status_code == 403:
                raise HistoryFetchError(f"CI server returned 403 Forbidden for {url}.")
            if response.status_code == 404:
                raise HistoryFetchError(f"CI server returned 404 Not Found for {url}")
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise HistoryFetchError(f"CI server request failed for {url}: {e}") from e
        except ValueError as e:
            raise HistoryFetchError(f"CI server returned invalid JSON for {url}: {e}") from e
        finally:
            self._rest_calls_total += 1
            self._rest_time_total_s += max(0.0, time.monotonic() - t0)

    def fetch_history(self, job: str) -> InMemoryBuildHistory:
        """Snapshot of the newest `max_builds` builds of `job`."""
        payload = self.get_json(
            f"{job_api_path(job)}/api/json",
            params={"tree": f"builds[{BUILD_FIELDS}]{{0,{self.max_builds}}}"},
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("builds"), list):
            raise HistoryFetchError(f"Unexpected payload for job {job!r}: missing 'builds' list")
        try:
            history = InMemoryBuildHistory.from_dicts(payload["builds"])
        except ValueError as e:
            raise HistoryFetchError(f"Malformed build entry for job {job!r}: {e}") from e
        logger.debug("Fetched %d builds for %s", len(history), job)
        return history

    def get_rest_call_stats(self) -> Dict[str, Any]:
        return {"total": int(self._rest_calls_total), "time_total_s": float(self._rest_time_total_s)}
