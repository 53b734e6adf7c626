"""Chat-completion client with per-attempt timeouts and linear backoff."""

from __future__ import annotations

import json
import time
from http.client import HTTPException
from typing import Any, Callable, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import CompletionConfig
from ..deadline import deadline_after, read_before
from ..logging import get_logger
from ..models import (
    CompletionFailure,
    CompletionOutcome,
    CompletionRequest,
    CompletionSuccess,
    FailureKind,
)


class TransportError(RuntimeError):
    """A single attempt failed at the network or HTTP status level. Retryable."""


class PayloadError(RuntimeError):
    """A successful HTTP exchange returned a body that is not usable JSON."""


Transport = Callable[[CompletionRequest], Dict[str, Any]]


class CompletionClient:
    """Sends prompts to an OpenAI-compatible chat-completion endpoint.

    Each attempt is bounded by ``config.timeout``. Transport and status
    failures are retried up to ``config.max_retries`` attempts in total, with
    a ``retry_delay * attempt`` pause between attempts. A missing credential
    and a malformed payload end the sequence immediately.
    """

    def __init__(
        self,
        config: CompletionConfig | None = None,
        *,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or CompletionConfig()
        self._transport = transport or self._http_transport
        self._sleep = sleep
        self.logger = get_logger("llm")

    def complete(self, prompt: str, config: CompletionConfig | None = None) -> CompletionOutcome:
        """Return the model text for ``prompt`` or a typed failure. Never raises."""
        settings = config or self.config
        if not settings.api_key:
            return CompletionFailure(
                kind=FailureKind.CONFIGURATION,
                message="Completion API key not configured",
                attempts=0,
            )

        request = CompletionRequest(
            prompt=prompt,
            model=settings.model,
            temperature=settings.temperature,
            url=settings.url,
            api_key=settings.api_key,
            timeout=settings.timeout / 1000.0,
        )
        max_attempts = max(1, int(settings.max_retries))

        attempt = 1
        while True:
            try:
                payload = self._transport(request)
            except TransportError as exc:
                if attempt >= max_attempts:
                    self.logger.error(
                        "Completion failed after %d attempt(s): %s", attempt, exc
                    )
                    return CompletionFailure(
                        kind=FailureKind.NETWORK_EXHAUSTED,
                        message=f"Completion API unreachable after {attempt} attempt(s): {exc}",
                        attempts=attempt,
                    )
                delay_ms = settings.retry_delay * attempt
                self.logger.warning(
                    "Completion attempt %d/%d failed (%s); retrying in %d ms",
                    attempt,
                    max_attempts,
                    exc,
                    delay_ms,
                )
                self._sleep(delay_ms / 1000.0)
                attempt += 1
                continue
            except PayloadError as exc:
                return CompletionFailure(
                    kind=FailureKind.MALFORMED_RESPONSE,
                    message=str(exc),
                    attempts=attempt,
                )

            content = self._extract_content(payload)
            if not content.strip():
                return CompletionFailure(
                    kind=FailureKind.MALFORMED_RESPONSE,
                    message="Invalid AI response format",
                    attempts=attempt,
                )
            self.logger.info("Completion succeeded on attempt %d", attempt)
            return CompletionSuccess(raw_text=content, attempts=attempt)

    @staticmethod
    def build_payload(request: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": request.model,
            "messages": [{"role": "user", "content": request.prompt}],
            "temperature": request.temperature,
        }

    @staticmethod
    def _http_transport(request: CompletionRequest) -> Dict[str, Any]:
        data = json.dumps(CompletionClient.build_payload(request)).encode("utf-8")
        headers = {
            "Authorization": f"Bearer {request.api_key}",
            "Content-Type": "application/json",
        }
        http_request = Request(request.url, data=data, headers=headers, method="POST")
        deadline = deadline_after(request.timeout)

        try:
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                raw = read_before(response, deadline)
        except HTTPError as exc:
            raise TransportError(f"API request failed with status {exc.code}") from exc
        except URLError as exc:
            raise TransportError(f"API request failed: {exc.reason}") from exc
        except OSError as exc:
            raise TransportError(f"API request failed: {exc}") from exc
        except HTTPException as exc:
            raise TransportError(f"API response was cut short: {exc!r}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PayloadError("Completion API returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise PayloadError("Completion API returned an unexpected payload")
        return payload

    @staticmethod
    def _extract_content(payload: Dict[str, Any]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message: Optional[Any] = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        return ""
