"""
Chat-completion provider for OpenAI-compatible endpoints.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from ..errors import ApiRejectionError, MalformedResponseError, NetworkError
from ..types import BODY_MODE, Prompt
from .base import get_registry

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MAX_TOKENS = 200
DEFAULT_TIMEOUT = 30.0


class OpenAICompletion:
    """
    Completion provider using the OpenAI chat completions API over HTTPS.

    Makes one POST per call, with no retry. Errors are mapped to
    NetworkError (transport), ApiRejectionError (non-2xx, carrying the
    provider's error.message when present) and MalformedResponseError
    (2xx without choices[0].message.content).

    Temperature is chosen per prompt mode: title prompts enumerate
    declensions and default to 0; body prompts ask for varied aliases and
    default to 0.7.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        *,
        base_url: str = DEFAULT_BASE_URL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_TIMEOUT,
        title_temperature: float = 0.0,
        body_temperature: float = 0.7,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("OpenAI API key required")

        self.model = model
        self.max_tokens = max_tokens
        self.title_temperature = title_temperature
        self.body_temperature = body_temperature
        self._base_url = base_url.rstrip("/")

        # Refuse non-HTTPS for remote APIs (bearer token would be sent in cleartext)
        if not self._base_url.startswith("https://"):
            host = urlparse(self._base_url).hostname or ""
            if host not in ("localhost", "127.0.0.1", "::1"):
                raise ValueError(
                    f"Completion API URL must use HTTPS (got {self._base_url}). "
                    "Use HTTPS to protect API credentials, or use localhost for local development."
                )

        self._client = httpx.Client(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def temperature_for(self, prompt: Prompt) -> float:
        """Default sampling temperature for the prompt's mode."""
        if prompt.mode == BODY_MODE:
            return self.body_temperature
        return self.title_temperature

    def build_payload(self, prompt: Prompt, temperature: float | None = None) -> dict:
        """Request body for POST /chat/completions."""
        return {
            "model": self.model,
            "messages": prompt.messages(),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature_for(prompt) if temperature is None else temperature,
        }

    def complete(self, prompt: Prompt, *, temperature: float | None = None) -> str:
        """POST /chat/completions -> reply text."""
        payload = self.build_payload(prompt, temperature)
        logger.debug(
            "Requesting completion (model=%s, mode=%s, temperature=%s)",
            self.model, prompt.mode, payload["temperature"],
        )
        try:
            resp = self._client.post("/chat/completions", json=payload)
        except httpx.TransportError as e:
            raise NetworkError(f"Could not reach {self._base_url}: {e}") from e

        if not resp.is_success:
            message = _error_message(resp)
            logger.warning("Completion rejected: HTTP %d %s", resp.status_code, message)
            raise ApiRejectionError(message, resp.status_code)

        return _reply_text(resp)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()


def _error_message(resp: httpx.Response) -> str:
    """Provider error.message if the body has one, else the HTTP status."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
        if isinstance(error, str) and error:
            return error
    return f"HTTP {resp.status_code}"


def _reply_text(resp: httpx.Response) -> str:
    """Extract choices[0].message.content, checking each level."""
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError("Completion response is not JSON") from e

    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError("Completion response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise MalformedResponseError("Completion response has no message content")
    return content.strip()


# Register providers
_registry = get_registry()
_registry.register_completion("openai", OpenAICompletion)
