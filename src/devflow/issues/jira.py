"""Minimal Jira Cloud REST client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from devflow.exceptions import IssueTrackerError
from devflow.issues.models import Issue

logger = logging.getLogger(__name__)


class JiraClient:
    """Search and transition issues in one Jira project."""

    def __init__(
        self,
        url: str,
        project: str,
        email: str,
        token: str,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.project = project
        self._client = client or httpx.Client(timeout=30.0)
        self._auth = httpx.BasicAuth(email, token)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, auth=self._auth, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IssueTrackerError(f"Jira returned {e.response.status_code} for {method} {path}") from e
        except httpx.HTTPError as e:
            raise IssueTrackerError(f"Could not reach Jira at {self.url}: {e}") from e
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise IssueTrackerError(f"Could not decode Jira response for {path}") from e

    def search(self, status: str) -> list[Issue]:
        """Issues in the project with the given status."""
        data = self._request(
            "POST",
            "/rest/api/3/search",
            json={"jql": f'status = "{status}" AND project = {self.project}', "fields": ["summary"]},
        )
        try:
            return [Issue(key=item["key"], summary=item["fields"]["summary"]) for item in data["issues"]]
        except (KeyError, TypeError) as e:
            raise IssueTrackerError("Unexpected Jira search response") from e

    def transition(self, issue_key: str, status: str) -> None:
        """Move *issue_key* through the transition named *status*."""
        path = f"/rest/api/3/issue/{issue_key}/transitions"
        data = self._request("GET", path)
        transitions = data.get("transitions", []) if isinstance(data, dict) else []
        match = next((t for t in transitions if t.get("name") == status), None)
        if match is None:
            available = ", ".join(t.get("name", "?") for t in transitions) or "none"
            raise IssueTrackerError(
                f"No transition named {status!r} for {issue_key} (available: {available})"
            )
        self._request("POST", path, json={"transition": {"id": match["id"]}})
