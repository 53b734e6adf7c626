"""Tolerant parsing of model output into diagram, summary and recommendations."""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import ExtractedContent
from ..prompting.constants import DEFAULT_RECOMMENDATIONS, DEFAULT_SUMMARY

MAX_RECOMMENDATIONS = 3

_HTML_BLOCK = re.compile(r"```html([\s\S]*?)```")
_DIAGRAM_ELEMENT = re.compile(r'<div[^>]*class="architecture-diagram"[^>]*>[\s\S]*?</div>')
_TEXT_BLOCK = re.compile(r"```text([\s\S]*?)```")
_HEADING_TITLE = re.compile(
    r"^(?:[\w'/]+\s+){0,4}recommendations?(?:\s+[\w'/]+){0,4}$", re.IGNORECASE
)
_BARE_HEADING = re.compile(r"^recommendations?$", re.IGNORECASE)


def extract_diagram(content: str) -> Optional[str]:
    """Return the diagram markup, or ``None`` when the model produced none."""
    match = _HTML_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    fallback = _DIAGRAM_ELEMENT.search(content)
    return fallback.group(0) if fallback else None


def extract_summary(content: str) -> str:
    match = _TEXT_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    return content.split("\n")[0] or DEFAULT_SUMMARY


def extract_recommendations(content: str) -> List[str]:
    """Return at most three recommendations listed under a Recommendations heading.

    Only heading-shaped lines outside fenced blocks count, so prose that
    merely mentions recommendations inside the summary is ignored.
    """
    section = _recommendation_section(content)
    if section is None:
        return list(DEFAULT_RECOMMENDATIONS)
    items = []
    for line in section:
        stripped = line.strip()
        if not stripped or stripped.startswith("```"):
            continue
        if stripped.startswith("- "):
            stripped = stripped[2:].strip()
        if stripped:
            items.append(stripped)
    if not items:
        return list(DEFAULT_RECOMMENDATIONS)
    return items[:MAX_RECOMMENDATIONS]


def _recommendation_section(content: str) -> Optional[List[str]]:
    lines = content.split("\n")
    in_fence = False
    for index, line in enumerate(lines):
        if line.strip().startswith("```"):
            in_fence = not in_fence
            continue
        if not in_fence and _is_heading(line):
            return _lines_until_blank(lines[index + 1:])
    return None


def _is_heading(line: str) -> bool:
    # Titles need a heading marker unless the line is the bare word.
    text = line.strip()
    marked = text.startswith(("#", "**", "__"))
    text = text.lstrip("#").strip().strip("*_").strip()
    if text.endswith(":"):
        marked = True
        text = text[:-1].strip().strip("*_").strip()
    if _BARE_HEADING.match(text):
        return True
    return marked and bool(_HEADING_TITLE.match(text))


def _lines_until_blank(lines: List[str]) -> List[str]:
    section: List[str] = []
    for line in lines:
        if not line.strip():
            if section:
                break
            continue
        section.append(line)
    return section


def extract_content(content: str) -> ExtractedContent:
    """Apply every extractor independently; each falls back on its own."""
    return ExtractedContent(
        diagram_html=extract_diagram(content),
        summary_text=extract_summary(content),
        recommendations=extract_recommendations(content),
    )


__all__ = [
    "MAX_RECOMMENDATIONS",
    "extract_content",
    "extract_diagram",
    "extract_recommendations",
    "extract_summary",
]
