"""Tests for the GitHub repository metadata client."""

from __future__ import annotations

import json
import time
from datetime import date
from http.client import BadStatusLine, IncompleteRead
from urllib.error import HTTPError, URLError

import pytest

from gitinspect.config import GitHubConfig
from gitinspect.errors import (
    GitHubError,
    RateLimitedError,
    RepositoryNotFoundError,
    UpstreamError,
)
from gitinspect.github.client import RepositoryMetadataClient, normalize_repository
from tests._fixtures.fakes import FakeHTTPResponse

SAMPLE_PAYLOAD = {
    "name": "Hello-World",
    "owner": {"login": "octocat"},
    "description": "My first repository on GitHub!",
    "html_url": "https://github.com/octocat/Hello-World",
    "stargazers_count": 2500,
    "forks_count": 2100,
    "open_issues_count": 42,
    "language": "Python",
    "license": {"key": "mit", "spdx_id": "MIT"},
    "created_at": "2011-01-26T19:01:12Z",
    "updated_at": "2024-05-01T08:00:00Z",
    "size": 1536,
    "topics": ["demo", "octocat"],
}


def _install_response(monkeypatch, payload, captured=None) -> None:
    def fake_urlopen(request, timeout=None):
        if captured is not None:
            captured["url"] = request.full_url
            captured["headers"] = {k.lower(): v for k, v in request.header_items()}
            captured["timeout"] = timeout
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        return FakeHTTPResponse(body)

    monkeypatch.setattr("gitinspect.github.client.urlopen", fake_urlopen)


def _install_error(monkeypatch, error: Exception) -> None:
    def fake_urlopen(request, timeout=None):
        raise error

    monkeypatch.setattr("gitinspect.github.client.urlopen", fake_urlopen)


def test_fetch_sends_versioned_accept_header_and_timeout(monkeypatch) -> None:
    captured: dict = {}
    _install_response(monkeypatch, SAMPLE_PAYLOAD, captured)

    RepositoryMetadataClient().fetch("octocat/Hello-World")

    assert captured["url"] == "https://api.github.com/repos/octocat/Hello-World"
    assert captured["headers"]["accept"] == "application/vnd.github.v3+json"
    assert captured["headers"]["user-agent"] == "GitInspect-App"
    assert "authorization" not in captured["headers"]
    assert captured["timeout"] == 5.0


def test_fetch_uses_token_when_configured(monkeypatch) -> None:
    captured: dict = {}
    _install_response(monkeypatch, SAMPLE_PAYLOAD, captured)

    RepositoryMetadataClient(GitHubConfig(token="gh-token")).fetch("octocat/Hello-World")

    assert captured["headers"]["authorization"] == "Bearer gh-token"


def test_fetch_normalizes_payload(monkeypatch) -> None:
    _install_response(monkeypatch, SAMPLE_PAYLOAD)

    metadata = RepositoryMetadataClient().fetch("octocat/Hello-World")

    assert metadata.name == "Hello-World"
    assert metadata.owner == "octocat"
    assert metadata.full_name == "octocat/Hello-World"
    assert metadata.stars == 2500
    assert metadata.forks == 2100
    assert metadata.open_issues == 42
    assert metadata.license_id == "MIT"
    assert metadata.created_at == date(2011, 1, 26)
    assert metadata.updated_at == date(2024, 5, 1)
    assert metadata.size_kib == 1536.0
    assert metadata.topics == ("demo", "octocat")


def test_normalize_handles_absent_optional_fields() -> None:
    payload = dict(SAMPLE_PAYLOAD, license=None, description=None, language=None, size=12345)
    payload.pop("topics")

    metadata = normalize_repository(payload)

    assert metadata.license_id is None
    assert metadata.description is None
    assert metadata.language is None
    assert metadata.topics == ()
    assert metadata.size_kib == 12345.0


def test_normalize_rounds_fractional_size() -> None:
    metadata = normalize_repository(dict(SAMPLE_PAYLOAD, size=10.26))

    assert metadata.size_kib == 10.3


@pytest.mark.parametrize(
    "status, expected",
    [
        (404, RepositoryNotFoundError),
        (403, RateLimitedError),
        (429, RateLimitedError),
        (500, UpstreamError),
        (502, UpstreamError),
    ],
)
def test_status_codes_map_to_errors(monkeypatch, status: int, expected: type) -> None:
    _install_error(
        monkeypatch,
        HTTPError("https://api.github.com/repos/o/r", status, "error", {}, None),
    )

    with pytest.raises(expected) as excinfo:
        RepositoryMetadataClient().fetch("o/r")

    assert isinstance(excinfo.value, GitHubError)
    assert excinfo.value.status == status


def test_not_found_message(monkeypatch) -> None:
    _install_error(
        monkeypatch,
        HTTPError("https://api.github.com/repos/o/missing", 404, "Not Found", {}, None),
    )

    with pytest.raises(RepositoryNotFoundError, match="not found"):
        RepositoryMetadataClient().fetch("o/missing")


@pytest.mark.parametrize("error", [URLError("dns failure"), TimeoutError("timed out")])
def test_transport_failures_are_upstream_errors(monkeypatch, error: Exception) -> None:
    _install_error(monkeypatch, error)

    with pytest.raises(UpstreamError):
        RepositoryMetadataClient().fetch("o/r")


def test_invalid_json_is_upstream_error(monkeypatch) -> None:
    _install_response(monkeypatch, b"not json")

    with pytest.raises(UpstreamError):
        RepositoryMetadataClient().fetch("o/r")


def test_payload_missing_required_fields_is_upstream_error(monkeypatch) -> None:
    _install_response(monkeypatch, {"owner": {"login": "o"}})

    with pytest.raises(UpstreamError):
        RepositoryMetadataClient().fetch("o/r")


@pytest.mark.parametrize("error", [IncompleteRead(b"{", 200), BadStatusLine("garbage")])
def test_broken_responses_are_upstream_errors(monkeypatch, error: Exception) -> None:
    _install_error(monkeypatch, error)

    with pytest.raises(UpstreamError):
        RepositoryMetadataClient().fetch("o/r")


def test_slow_body_is_cut_off_at_timeout(trickling_server) -> None:
    client = RepositoryMetadataClient(GitHubConfig(api_url=trickling_server, timeout=500))

    started = time.monotonic()
    with pytest.raises(UpstreamError):
        client.fetch("octocat/Hello-World")

    assert time.monotonic() - started < 2.0
