"""GitHub REST API client for notification triage.

Thin async wrapper over ``httpx.AsyncClient``. Every method raises
``GitHubError`` for non-2xx replies and lets ``httpx.HTTPError`` through for
transport failures; callers decide which conditions are benign.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from gh_triage.models import GITHUB_API_URL, Comment, Issue, Label, Notification
from gh_triage.parsing import (
    parse_comment,
    parse_issue,
    parse_label,
    parse_list,
    parse_notification,
)

logger = logging.getLogger(__name__)

GITHUB_USER_AGENT = "gh-triage/1.0"
GITHUB_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
DEFAULT_HTTP_TIMEOUT = 30.0  # seconds; commands apply tighter deadlines


class GitHubError(Exception):
    """Non-2xx reply from the GitHub API."""

    def __init__(self, status_code: int, message: str, codes: tuple[str, ...] = ()) -> None:
        super().__init__(f"{status_code} {message}".strip())
        self.status_code = status_code
        self.message = message
        self.codes = codes

    @property
    def not_found(self) -> bool:
        """The target is already gone."""
        return self.status_code == 404

    @property
    def already_exists(self) -> bool:
        """A create call hit an existing resource."""
        return "already_exists" in self.codes


def _error_from_response(response: httpx.Response) -> GitHubError:
    message = response.reason_phrase or ""
    codes: tuple[str, ...] = ()
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        if isinstance(payload.get("message"), str):
            message = payload["message"]
        errors = payload.get("errors")
        if isinstance(errors, list):
            codes = tuple(
                e["code"] for e in errors if isinstance(e, dict) and isinstance(e.get("code"), str)
            )
    return GitHubError(response.status_code, message, codes)


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


class GitHubClient:
    """Async GitHub REST client authenticated with a personal access token."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = GITHUB_API_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT)
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Accept": GITHUB_ACCEPT,
            "Authorization": f"Bearer {token}",
            "User-Agent": GITHUB_USER_AGENT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self._base_url}{path_or_url}"

    async def _request(
        self,
        method: str,
        path_or_url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = self._url(path_or_url)
        logger.debug("GitHub %s %s", method, url)
        response = await self._client.request(
            method, url, params=params, json=json, headers=self._headers
        )
        if response.is_error:
            raise _error_from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("GitHub %s %s returned invalid JSON", method, url, exc_info=True)
            return None

    # -- reads ---------------------------------------------------------------

    async def list_notifications(self, *, per_page: int) -> list[Notification]:
        """First page of the authenticated user's notifications."""
        payload = await self._request("GET", "/notifications", params={"per_page": per_page})
        return parse_list(payload, parse_notification, "notifications")

    async def get_issue(self, url: str) -> Issue:
        """Fetch an issue (or pull request) by its API URL."""
        payload = await self._request("GET", url)
        if not isinstance(payload, dict):
            raise GitHubError(200, f"unexpected issue payload from {url}")
        return parse_issue(payload)

    async def list_issue_labels(self, owner: str, repo: str, number: int) -> list[Label]:
        payload = await self._request(
            "GET", f"{_repo_path(owner, repo)}/issues/{number}/labels", params={"per_page": 100}
        )
        return parse_list(payload, parse_label, "issue labels")

    async def list_repo_labels(self, owner: str, repo: str) -> list[Label]:
        payload = await self._request(
            "GET", f"{_repo_path(owner, repo)}/labels", params={"per_page": 100}
        )
        return parse_list(payload, parse_label, "repo labels")

    async def list_comments(self, url: str) -> list[Comment]:
        """Fetch comments from an issue's ``comments_url``."""
        payload = await self._request("GET", url, params={"per_page": 100})
        return parse_list(payload, parse_comment, "issue comments")

    # -- writes --------------------------------------------------------------

    async def replace_issue_labels(
        self, owner: str, repo: str, number: int, names: list[str]
    ) -> None:
        await self._request(
            "PUT", f"{_repo_path(owner, repo)}/issues/{number}/labels", json={"labels": names}
        )

    async def remove_issue_labels(self, owner: str, repo: str, number: int) -> None:
        """Remove every label from an issue."""
        await self._request("DELETE", f"{_repo_path(owner, repo)}/issues/{number}/labels")

    async def remove_issue_label(self, owner: str, repo: str, number: int, name: str) -> None:
        await self._request(
            "DELETE", f"{_repo_path(owner, repo)}/issues/{number}/labels/{quote(name, safe='')}"
        )

    async def add_issue_labels(self, owner: str, repo: str, number: int, names: list[str]) -> None:
        await self._request(
            "POST", f"{_repo_path(owner, repo)}/issues/{number}/labels", json={"labels": names}
        )

    async def create_label(
        self, owner: str, repo: str, *, name: str, color: str, description: str = ""
    ) -> None:
        await self._request(
            "POST",
            f"{_repo_path(owner, repo)}/labels",
            json={"name": name, "color": color, "description": description},
        )

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        await self._request(
            "POST", f"{_repo_path(owner, repo)}/issues/{number}/comments", json={"body": body}
        )

    async def mark_thread_read(self, thread_id: str) -> None:
        await self._request("PATCH", f"/notifications/threads/{quote(thread_id, safe='')}")

    async def delete_thread_subscription(self, thread_id: str) -> None:
        await self._request(
            "DELETE", f"/notifications/threads/{quote(thread_id, safe='')}/subscription"
        )

    async def delete_repo_subscription(self, owner: str, repo: str) -> None:
        await self._request("DELETE", f"{_repo_path(owner, repo)}/subscription")


__all__ = [
    "GITHUB_USER_AGENT",
    "GitHubClient",
    "GitHubError",
]
