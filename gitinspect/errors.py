"""Exception hierarchy shared by the inspection pipeline."""

from __future__ import annotations


class GitInspectError(RuntimeError):
    """Base class for failures raised inside the inspection pipeline."""


class GitHubError(GitInspectError):
    """Raised when repository metadata cannot be retrieved."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RepositoryNotFoundError(GitHubError):
    """GitHub reported that the repository does not exist or is private."""


class RateLimitedError(GitHubError):
    """GitHub refused the request because the API quota is exhausted."""


class UpstreamError(GitHubError):
    """Any other transport or status failure while talking to GitHub."""


class AnalysisError(GitInspectError):
    """Raised when the model analysis cannot be produced."""


class ConfigurationError(AnalysisError):
    """The completion API is not configured (missing credential)."""


class InvalidMetadataError(AnalysisError):
    """The orchestrator received something other than repository metadata."""


class NetworkExhaustedError(AnalysisError):
    """Every completion attempt failed at the transport or status level."""


class MalformedResponseError(AnalysisError):
    """The completion API answered successfully without usable content."""


__all__ = [
    "AnalysisError",
    "ConfigurationError",
    "GitHubError",
    "GitInspectError",
    "InvalidMetadataError",
    "MalformedResponseError",
    "NetworkExhaustedError",
    "RateLimitedError",
    "RepositoryNotFoundError",
    "UpstreamError",
]
