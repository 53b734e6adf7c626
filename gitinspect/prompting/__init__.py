"""Prompt construction for repository analysis."""

from .builder import PromptBuilder

__all__ = ["PromptBuilder"]
