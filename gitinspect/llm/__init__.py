"""Chat-completion access."""

from .client import CompletionClient, PayloadError, TransportError

__all__ = ["CompletionClient", "PayloadError", "TransportError"]
