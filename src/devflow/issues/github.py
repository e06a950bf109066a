"""Minimal GitHub REST client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from devflow.exceptions import IssueTrackerError
from devflow.issues.models import Issue

logger = logging.getLogger(__name__)


class GitHubClient:
    """Issues and releases of one GitHub repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        *,
        api_url: str = "https://api.github.com",
        client: httpx.Client | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self._client = client or httpx.Client(timeout=30.0)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.api_url}/repos/{self.owner}/{self.repo}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, headers=self._headers, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise IssueTrackerError(f"GitHub returned {e.response.status_code} for {method} {path}") from e
        except httpx.HTTPError as e:
            raise IssueTrackerError(f"Could not reach GitHub at {self.api_url}: {e}") from e
        except ValueError as e:
            raise IssueTrackerError(f"Could not decode GitHub response for {path}") from e

    def list_issues(self, labels: list[str] | None = None) -> list[Issue]:
        """Open issues, optionally filtered by label. Pull requests are skipped."""
        params = {"state": "open"}
        if labels:
            params["labels"] = ",".join(labels)
        data = self._request("GET", "/issues", params=params)
        return [
            Issue(key=str(item["number"]), summary=item["title"])
            for item in data
            if "pull_request" not in item
        ]

    def create_release(self, tag_name: str, name: str, body: str, *, prerelease: bool = False) -> str:
        """Create a release (and its tag, at the default branch) and return its URL."""
        data = self._request(
            "POST",
            "/releases",
            json={"tag_name": tag_name, "name": name, "body": body, "prerelease": prerelease},
        )
        return data.get("html_url", "")
