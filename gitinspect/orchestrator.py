"""Pipeline orchestration: metadata fetch, completion, extraction and fallbacks."""

from __future__ import annotations

import logging
from typing import Dict, Type

from .config import CompletionConfig, GitInspectConfig
from .errors import (
    AnalysisError,
    ConfigurationError,
    InvalidMetadataError,
    MalformedResponseError,
    NetworkExhaustedError,
)
from .failsafe import build_fallback_result
from .github.client import RepositoryMetadataClient
from .llm.client import CompletionClient
from .logging import get_logger
from .models import (
    AnalysisResult,
    CompletionFailure,
    FailureKind,
    Inspection,
    RepositoryMetadata,
)
from .postproc.diagram import wrap_diagram
from .postproc.extractor import extract_content
from .prompting.builder import PromptBuilder

_FAILURE_ERRORS: Dict[FailureKind, Type[AnalysisError]] = {
    FailureKind.CONFIGURATION: ConfigurationError,
    FailureKind.NETWORK_EXHAUSTED: NetworkExhaustedError,
    FailureKind.MALFORMED_RESPONSE: MalformedResponseError,
}


class Orchestrator:
    """Coordinates one repository inspection and guarantees a renderable result."""

    def __init__(
        self,
        config: GitInspectConfig | None = None,
        *,
        metadata_client: RepositoryMetadataClient | None = None,
        prompt_builder: PromptBuilder | None = None,
        completion_client: CompletionClient | None = None,
    ) -> None:
        self.config = config or GitInspectConfig()
        self.metadata_client = metadata_client or RepositoryMetadataClient(self.config.github)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.completion_client = completion_client or CompletionClient(self.config.llm)
        self.logger = get_logger("orchestrator")

    def inspect(self, owner: str, repo: str) -> Inspection:
        """Fetch metadata for ``owner/repo`` and analyze it. Never raises."""
        repo_path = f"{owner}/{repo}"
        self.logger.info("Starting inspection of %s", repo_path)
        try:
            metadata = self.metadata_client.fetch(repo_path)
        except Exception as exc:
            self._log_exception(f"Metadata fetch failed for {repo_path}", exc)
            return Inspection(repository=None, analysis=build_fallback_result(str(exc)))

        self.logger.debug(
            "GitHub data: name=%s language=%s", metadata.name, metadata.language
        )
        return Inspection(repository=metadata, analysis=self.analyze(metadata))

    def analyze(self, metadata: RepositoryMetadata) -> AnalysisResult:
        """Produce the analysis for ``metadata``; failures become a fallback result."""
        try:
            return self._analyze(metadata)
        except Exception as exc:
            self._log_exception("AI analysis failed", exc)
            return build_fallback_result(str(exc))

    def _analyze(self, metadata: RepositoryMetadata) -> AnalysisResult:
        if not self._completion_settings().api_key:
            raise ConfigurationError("Completion API key not configured")
        if not isinstance(metadata, RepositoryMetadata):
            raise InvalidMetadataError("Invalid repository information")

        prompt = self.prompt_builder.build(metadata)
        outcome = self.completion_client.complete(prompt)
        if isinstance(outcome, CompletionFailure):
            raise _FAILURE_ERRORS[outcome.kind](outcome.message)

        extracted = extract_content(outcome.raw_text)
        has_diagram = bool(extracted.diagram_html)
        self.logger.info(
            "Analysis completed for %s (diagram=%s, recommendations=%d)",
            metadata.full_name,
            has_diagram,
            len(extracted.recommendations),
        )
        return AnalysisResult(
            summary=extracted.summary_text,
            html_schema=wrap_diagram(extracted.diagram_html),
            recommendations=extracted.recommendations,
            diagram_source=has_diagram,
            raw_analysis=outcome.raw_text,
        )

    def _completion_settings(self) -> CompletionConfig:
        # The client that will make the call owns the credential.
        return getattr(self.completion_client, "config", None) or self.config.llm

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)
