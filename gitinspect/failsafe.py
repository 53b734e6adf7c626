"""Fail-safe analysis results used when any pipeline stage fails."""

from __future__ import annotations

from .models import AnalysisResult
from .postproc.diagram import fallback_diagram
from .prompting.constants import FALLBACK_RECOMMENDATIONS


def build_fallback_result(reason: str | None = None) -> AnalysisResult:
    """Return a fully populated result explaining why the analysis failed."""
    cleaned_reason = _format_reason(reason)
    return AnalysisResult(
        summary=f"Analysis failed: {cleaned_reason}",
        html_schema=fallback_diagram(cleaned_reason),
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        diagram_source=False,
        raw_analysis=None,
    )


def _format_reason(reason: str | None) -> str:
    if not reason:
        return "Unknown error"
    cleaned = " ".join(reason.split())
    return cleaned or "Unknown error"


__all__ = ["build_fallback_result"]
