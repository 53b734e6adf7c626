"""Builds the repository analysis prompt sent to the completion API."""

from __future__ import annotations

from typing import List

from ..models import RepositoryMetadata
from .constants import (
    DIAGRAM_REQUIREMENTS,
    NO_DESCRIPTION,
    NOT_SPECIFIED,
    PROMPT_INTRO,
    RESPONSE_FORMAT,
    STRUCTURAL_REQUIREMENTS,
    UNKNOWN,
)


class PromptBuilder:
    """Renders a deterministic analysis request from repository metadata.

    The prompt is a fixed concatenation of four sections: the metadata block,
    the structural-analysis requirements, the diagram requirements and the
    required output format. Equal metadata always yields a byte-identical
    prompt.
    """

    SECTION_SEPARATOR = "\n\n"

    def build(self, metadata: RepositoryMetadata) -> str:
        sections = [
            PROMPT_INTRO,
            self._section("REPOSITORY INFORMATION", self.format_metadata(metadata)),
            self._section("STRUCTURAL REQUIREMENTS", STRUCTURAL_REQUIREMENTS),
            self._section("DIAGRAM REQUIREMENTS", DIAGRAM_REQUIREMENTS),
            self._section("REQUIRED FORMAT", RESPONSE_FORMAT),
        ]
        return self.SECTION_SEPARATOR.join(sections)

    @staticmethod
    def format_metadata(metadata: RepositoryMetadata) -> str:
        topics = ", ".join(metadata.topics) if metadata.topics else NOT_SPECIFIED
        lines: List[str] = [
            f"Name: {metadata.name or NOT_SPECIFIED}",
            f"Owner: {metadata.owner or NOT_SPECIFIED}",
            f"Description: {metadata.description or NO_DESCRIPTION}",
            f"Primary language: {metadata.language or UNKNOWN}",
            f"License: {metadata.license_id or NOT_SPECIFIED}",
            f"Topics: {topics}",
            f"Stars: {metadata.stars}",
            f"Forks: {metadata.forks}",
            f"Open issues: {metadata.open_issues}",
            f"Size: {metadata.size_kib:.1f} KiB",
            f"URL: {metadata.url or NOT_SPECIFIED}",
        ]
        return "\n".join(lines)

    @staticmethod
    def _section(title: str, body: str) -> str:
        return f"--- {title} ---\n{body}"
