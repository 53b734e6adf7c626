"""Tests for parsing model output."""

from __future__ import annotations

import pytest

from gitinspect.postproc.extractor import (
    extract_content,
    extract_diagram,
    extract_recommendations,
    extract_summary,
)
from gitinspect.prompting.constants import DEFAULT_RECOMMENDATIONS


def test_fenced_html_and_text_blocks_are_extracted() -> None:
    raw = "```html\n<div>X</div>\n``` \n```text\nSummary line\n```"

    content = extract_content(raw)

    assert content.diagram_html == "<div>X</div>"
    assert content.summary_text == "Summary line"
    assert content.recommendations == list(DEFAULT_RECOMMENDATIONS)


def test_diagram_falls_back_to_architecture_element() -> None:
    raw = (
        "Here is the diagram:\n"
        '<div id="root" class="architecture-diagram" style="x">Layers</div>\n'
        "<div>unrelated</div>"
    )

    assert (
        extract_diagram(raw)
        == '<div id="root" class="architecture-diagram" style="x">Layers</div>'
    )


def test_missing_diagram_is_none() -> None:
    assert extract_diagram("Only prose, no markup.") is None


def test_summary_falls_back_to_first_line() -> None:
    raw = "The project is a small CLI.\nMore details follow."

    assert extract_summary(raw) == "The project is a small CLI."


def test_summary_of_empty_text_uses_literal_default() -> None:
    assert extract_summary("") == "Technical summary"


def test_recommendations_follow_heading_until_blank_line() -> None:
    raw = (
        "```text\nA summary\n```\n"
        "\n"
        "## Recommendations\n"
        "- Add CI\n"
        "- Document the API\n"
        "\n"
        "Closing remarks."
    )

    assert extract_recommendations(raw) == ["Add CI", "Document the API"]


def test_recommendation_heading_is_case_insensitive() -> None:
    raw = "RECOMMENDATIONS:\n- Pin dependencies"

    assert extract_recommendations(raw) == ["Pin dependencies"]


def test_recommendations_are_capped_at_three() -> None:
    raw = "Recommendations:\n- one\n- two\n- three\n- four\n- five"

    assert extract_recommendations(raw) == ["one", "two", "three"]


def test_blank_lines_after_heading_are_skipped() -> None:
    raw = "## Recommendations\n\n- Add a changelog\n- Tag releases\n\nThanks."

    assert extract_recommendations(raw) == ["Add a changelog", "Tag releases"]


def test_heading_without_items_uses_defaults() -> None:
    raw = "Recommendations:\n\n   \n"

    assert extract_recommendations(raw) == list(DEFAULT_RECOMMENDATIONS)


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "plain text only",
        "```html\n<div>X</div>\n```",
        "```text\nSummary\n```",
        "```html\n<p>a</p>\n```\n```text\nSummary\n```\nSome closing words.",
    ],
)
def test_no_heading_always_yields_the_three_defaults(raw: str) -> None:
    recommendations = extract_recommendations(raw)

    assert recommendations == [
        "Documentation: Add comments for the main functions",
        "Tests: Implement unit tests for critical modules",
        "Optimization: Analyze the performance of key components",
    ]


@pytest.mark.parametrize(
    "raw",
    [
        "```text\nFollows the Django recommendations closely.\nUses Postgres.\n```",
        "```text\nRecommendations:\n- inside the summary\n```",
        "The authors follow upstream recommendations\n- not a list item",
    ],
)
def test_prose_mentioning_recommendations_is_not_a_heading(raw: str) -> None:
    assert extract_recommendations(raw) == list(DEFAULT_RECOMMENDATIONS)


@pytest.mark.parametrize(
    "heading",
    ["**Recommendations:**", "### Recommendations for improvement", "Recommendations"],
)
def test_heading_variants_are_recognised(heading: str) -> None:
    raw = f"```text\nSummary\n```\n\n{heading}\n- Add CI"

    assert extract_recommendations(raw) == ["Add CI"]


def test_missing_diagram_does_not_block_other_fields() -> None:
    raw = "```text\nSummary only\n```\n\nRecommendations:\n- Write tests"

    content = extract_content(raw)

    assert content.diagram_html is None
    assert content.summary_text == "Summary only"
    assert content.recommendations == ["Write tests"]
