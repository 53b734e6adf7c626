"""HTML containers wrapped around model diagrams and fallback panels."""

from __future__ import annotations

import html

NO_DIAGRAM_MESSAGE = "No architecture diagram generated"

_DIAGRAM_CONTAINER = """
<div class="architecture-diagram" style="
  font-family: 'Space Grotesk', sans-serif;
  background: rgba(42, 42, 58, 0.8);
  border-radius: 16px;
  padding: 2rem;
  margin: 1rem 0;
  width: 100%;
  box-sizing: border-box;
  border: 1px solid rgba(255, 255, 255, 0.1);
  overflow-x: auto;
">
{content}
</div>
"""

_FALLBACK_PANEL = """
<div class="diagram-fallback" style="
  padding: 2rem;
  text-align: center;
  background: rgba(255, 68, 168, 0.05);
  border-radius: 12px;
  border: 1px dashed var(--accent);
  width: 100%;
  box-sizing: border-box;
">
  <svg width="48" height="48" viewBox="0 0 24 24" fill="none" stroke="var(--accent)" stroke-width="2">
    <path d="M10.29 3.86L1.82 18a2 2 0 0 0 1.71 3h16.94a2 2 0 0 0 1.71-3L13.71 3.86a2 2 0 0 0-3.42 0z"></path>
    <line x1="12" y1="9" x2="12" y2="13"></line>
    <line x1="12" y1="17" x2="12.01" y2="17"></line>
  </svg>
  <p style="color: var(--accent); margin-top: 1rem; width: 100%;">{message}</p>
</div>
"""


def fallback_diagram(message: str) -> str:
    """Warning panel shown in place of a diagram. ``message`` is escaped."""
    return _FALLBACK_PANEL.format(message=html.escape(message or NO_DIAGRAM_MESSAGE))


def wrap_diagram(content: str | None) -> str:
    """Place model markup inside the decorative container, or return the fallback panel."""
    if not content:
        return fallback_diagram(NO_DIAGRAM_MESSAGE)
    return _DIAGRAM_CONTAINER.format(content=content)


__all__ = ["NO_DIAGRAM_MESSAGE", "fallback_diagram", "wrap_diagram"]
