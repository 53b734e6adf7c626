"""Repository metadata lookups against the GitHub REST API."""

from __future__ import annotations

import json
from datetime import date, datetime
from http.client import HTTPException
from typing import Any, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import GitHubConfig
from ..deadline import deadline_after, read_before
from ..errors import RateLimitedError, RepositoryNotFoundError, UpstreamError
from ..logging import get_logger
from ..models import RepositoryMetadata

ACCEPT_HEADER = "application/vnd.github.v3+json"


class RepositoryMetadataClient:
    """Fetches and normalizes repository metadata. Missing repositories are not retried."""

    def __init__(self, config: GitHubConfig | None = None) -> None:
        self.config = config or GitHubConfig()
        self.logger = get_logger("github")

    def fetch(self, owner_slash_repo: str) -> RepositoryMetadata:
        """Return metadata for ``owner/repo`` or raise a :class:`GitHubError` subclass."""
        url = self._build_url(owner_slash_repo)
        self.logger.debug("GitHub request: %s", url)
        request = Request(url, headers=self._headers(), method="GET")
        timeout = self.config.timeout / 1000.0
        deadline = deadline_after(timeout)

        try:
            with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = read_before(response, deadline)
        except HTTPError as exc:
            self.logger.error("GitHub API error: %s", exc.code)
            raise self._map_status(exc.code) from exc
        except URLError as exc:
            self.logger.error("GitHub API error: %s", exc.reason)
            raise UpstreamError("Error communicating with GitHub") from exc
        except OSError as exc:
            # Socket timeouts and DeadlineExceeded surface here rather than as URLError.
            self.logger.error("GitHub API error: %s", exc)
            raise UpstreamError("Error communicating with GitHub") from exc
        except HTTPException as exc:
            self.logger.error("GitHub API response cut short: %r", exc)
            raise UpstreamError("Error communicating with GitHub") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise UpstreamError("GitHub returned an invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("GitHub returned an unexpected payload")

        try:
            return normalize_repository(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError(f"GitHub payload is missing fields: {exc}") from exc

    def _build_url(self, owner_slash_repo: str) -> str:
        owner, _, repo = owner_slash_repo.strip().strip("/").partition("/")
        base = self.config.api_url.rstrip("/")
        return f"{base}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": ACCEPT_HEADER, "User-Agent": self.config.user_agent}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    @staticmethod
    def _map_status(status: int) -> Exception:
        if status == 404:
            return RepositoryNotFoundError("Repository not found", status=status)
        if status in (403, 429):
            return RateLimitedError("GitHub API rate limit reached", status=status)
        return UpstreamError("Error communicating with GitHub", status=status)


def normalize_repository(data: Dict[str, Any]) -> RepositoryMetadata:
    """Convert a GitHub ``/repos`` payload into :class:`RepositoryMetadata`."""
    owner = data.get("owner") or {}
    license_data = data.get("license") or {}
    topics = data.get("topics") or []
    return RepositoryMetadata(
        name=str(data["name"]),
        owner=str(owner.get("login", "")),
        description=data.get("description") or None,
        url=str(data.get("html_url") or ""),
        stars=int(data.get("stargazers_count") or 0),
        forks=int(data.get("forks_count") or 0),
        open_issues=int(data.get("open_issues_count") or 0),
        language=data.get("language") or None,
        license_id=license_data.get("spdx_id") or None,
        created_at=_parse_date(data.get("created_at")),
        updated_at=_parse_date(data.get("updated_at")),
        # GitHub already reports repository size in KiB.
        size_kib=round(float(data.get("size") or 0), 1),
        topics=tuple(str(topic) for topic in topics),
    )


def _parse_date(value: Optional[str]) -> date:
    if not value:
        raise ValueError("missing timestamp")
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
