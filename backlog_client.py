#!/usr/bin/env python3
"""
Backlog API client

Handles the issue search (paginated), per-project status lists and the
current-user lookup. Every failed request aborts the run with RetrievalError.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import requests

from config import ISSUE_PAGE_SIZE, MAX_ISSUE_PAGES, ReminderConfig
from models import Issue, Status
from status_display import StatusDisplay
from utils_dates import iso_date


class RetrievalError(RuntimeError):
    """Raised when a Backlog API request does not succeed"""

    def __init__(self, status_code: Optional[int], body: str, url: str = ''):
        self.status_code = status_code
        self.body = body
        self.url = url
        if status_code is None:
            message = f"Backlog request failed: {body}"
        else:
            message = f"Backlog request failed with HTTP {status_code}: {body}"
        if url:
            message = f"{message} ({url})"
        super().__init__(message)


class BacklogClient:
    """Read-only client for the Backlog v2 REST API"""

    def __init__(self, config: ReminderConfig, status: Optional[StatusDisplay] = None):
        self.api_key = config.api_key
        self.base_url = config.api_base
        self.timeout = config.request_timeout
        self.session = requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        self.status = status or StatusDisplay(quiet=True)

    def _make_request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a GET request and return the decoded JSON body"""
        url = f"{self.base_url}{path}"
        query = {'apiKey': self.api_key}
        if params:
            query.update(params)

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RetrievalError(None, str(e).replace(self.api_key, "***"), url) from e

        # url excludes the query string so the API key never reaches error output
        if not 200 <= response.status_code < 300:
            raise RetrievalError(response.status_code, response.text, url)

        try:
            return response.json()
        except ValueError as e:
            raise RetrievalError(response.status_code, response.text, url) from e

    def get_myself(self) -> Dict[str, Any]:
        """Return the user that owns the API key"""
        return self._make_request('/users/myself')

    def get_project_statuses(self, project_id: int) -> List[Status]:
        """Return the workflow statuses of a project in display order"""
        data = self._make_request(f'/projects/{project_id}/statuses')
        return [Status.from_api(item) for item in data]

    def fetch_assigned_issues(self, assignee_id: int, due_date_since: date, due_date_until: date) -> List[Issue]:
        """
        Fetch every issue assigned to assignee_id with a due date in range.

        Pages of ISSUE_PAGE_SIZE are requested by increasing offset until a
        short (or empty) page comes back. The server sorts by due date
        ascending and pages are concatenated without re-sorting.

        Raises:
            RetrievalError: if any page fails, or MAX_ISSUE_PAGES full pages
                are returned without reaching the end
        """
        issues: List[Issue] = []
        params = {
            'assigneeId[]': assignee_id,
            'dueDateSince': iso_date(due_date_since),
            'dueDateUntil': iso_date(due_date_until),
            'sort': 'dueDate',
            'order': 'asc',
            'count': ISSUE_PAGE_SIZE,
        }

        for page in range(MAX_ISSUE_PAGES):
            offset = page * ISSUE_PAGE_SIZE
            self.status.update(f"📥 Fetching issues page {page + 1} (offset {offset})...")

            raw_batch = self._make_request('/issues', {**params, 'offset': offset})
            issues.extend(Issue.from_api(item) for item in raw_batch)

            if len(raw_batch) < ISSUE_PAGE_SIZE:
                self.status.update(f"✅ Received partial page, {len(issues)} issues fetched", style="green")
                return issues

        raise RetrievalError(
            None,
            f"Issue search did not finish within {MAX_ISSUE_PAGES} pages ({len(issues)} issues so far)",
            f"{self.base_url}/issues",
        )
