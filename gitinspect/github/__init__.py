"""GitHub metadata access."""

from .client import RepositoryMetadataClient, normalize_repository

__all__ = ["RepositoryMetadataClient", "normalize_repository"]
