"""Client for the text-generation upstream."""
from __future__ import annotations

import logging
from typing import Protocol

from anthropic import Anthropic, APIError

from app.config import get_settings


logger = logging.getLogger(__name__)


class TextGenerationClient(Protocol):
    """Anything that can answer a prompt with raw response text."""

    def ask(self, prompt: str) -> str:
        ...


class UpstreamRequestError(RuntimeError):
    """Raised when the upstream API call itself fails."""


class LLMClient:
    """Sends a single-turn prompt and returns the untouched HTTP response body.

    The body is returned as-is (the full Messages API envelope) so that the
    normalizer, not this client, decides how to dig the answer out of it.
    """

    def __init__(self) -> None:
        settings = get_settings()
        self.client = Anthropic(api_key=settings.anthropic_api_key)
        self.model = settings.anthropic_model
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature

    def ask(self, prompt: str) -> str:
        request_payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        logger.debug("Sending prompt to %s (%d chars)", self.model, len(prompt))

        try:
            raw = self.client.messages.with_raw_response.create(**request_payload)
        except APIError as exc:
            logger.exception("Upstream request to %s failed", self.model)
            raise UpstreamRequestError(str(exc)) from exc

        return raw.http_response.text
