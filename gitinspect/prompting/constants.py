"""Fixed prompt fragments and fallback copy."""

from __future__ import annotations

NOT_SPECIFIED = "Not specified"
NO_DESCRIPTION = "No description"
UNKNOWN = "Unknown"

PROMPT_INTRO = (
    "You are an expert software architect.\n"
    "\n"
    "Analyze the following GitHub repository and produce:\n"
    "1. A concise technical summary\n"
    "2. A detailed HTML/CSS architecture diagram\n"
    "3. Up to three recommendations"
)

STRUCTURAL_REQUIREMENTS = """## Structural analysis
- Detect the main components (controllers, services, etc.)
- Identify the data flows between modules
- Analyze the critical dependencies

## Technical summary
- 5-7 key points maximum
- Main technologies
- Overall architecture
- Entry points"""

DIAGRAM_REQUIREMENTS = """## Visual diagram
- Structure in 3-5 logical layers
- Styled containers with rounded borders
- Directional CSS arrows
- SVG icons for file types
- Consistent color palette"""

RESPONSE_FORMAT = """```html
<div class="architecture-diagram">
  <!-- HTML/CSS diagram here -->
</div>
```

```text
// Technical summary here
```

Recommendations:
- First recommendation
- Second recommendation
- Third recommendation"""

DEFAULT_RECOMMENDATIONS: tuple[str, ...] = (
    "Documentation: Add comments for the main functions",
    "Tests: Implement unit tests for critical modules",
    "Optimization: Analyze the performance of key components",
)

FALLBACK_RECOMMENDATIONS: tuple[str, ...] = (
    "Verify API configuration",
    "Check repository accessibility",
    "Retry analysis later",
)

DEFAULT_SUMMARY = "Technical summary"


__all__ = [
    "DEFAULT_RECOMMENDATIONS",
    "DEFAULT_SUMMARY",
    "DIAGRAM_REQUIREMENTS",
    "FALLBACK_RECOMMENDATIONS",
    "NO_DESCRIPTION",
    "NOT_SPECIFIED",
    "PROMPT_INTRO",
    "RESPONSE_FORMAT",
    "STRUCTURAL_REQUIREMENTS",
    "UNKNOWN",
]
