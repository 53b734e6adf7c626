"""Post-processing of model output."""

from .diagram import fallback_diagram, wrap_diagram
from .extractor import (
    extract_content,
    extract_diagram,
    extract_recommendations,
    extract_summary,
)

__all__ = [
    "extract_content",
    "extract_diagram",
    "extract_recommendations",
    "extract_summary",
    "fallback_diagram",
    "wrap_diagram",
]
