"""
HTTP completion gateway adapter.

Implements CompletionPort against an OpenAI-style chat-completions endpoint
using httpx. Maps 429 and 402 to their dedicated error types.
"""

from __future__ import annotations

import logging
import os

import httpx

from src.components.writing import (
    GatewayError,
    GatewayQuotaExhaustedError,
    GatewayRateLimitedError,
)
from src.rules.models import WritingRules

logger = logging.getLogger(__name__)


class HttpCompletionGateway:
    """CompletionPort over HTTP."""

    def __init__(
        self,
        url: str,
        model: str,
        api_key: str | None,
        timeout_seconds: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._model = model
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._client = client

    @classmethod
    def from_rules(cls, rules: WritingRules, client: httpx.Client | None = None) -> HttpCompletionGateway:
        return cls(
            url=rules.gateway_url,
            model=rules.model,
            api_key=os.environ.get(rules.api_key_env),
            timeout_seconds=rules.timeout_seconds,
            client=client,
        )

    def _post(self, body: dict[str, object], headers: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self._url, json=body, headers=headers, timeout=self._timeout)
        with httpx.Client(timeout=self._timeout) as client:
            return client.post(self._url, json=body, headers=headers)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        if not self._api_key:
            raise GatewayError("AI gateway API key is not configured")

        body: dict[str, object] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            resp = self._post(body, headers)
        except httpx.HTTPError as e:
            raise GatewayError(f"AI gateway request failed: {e}") from e

        if resp.status_code == 429:
            raise GatewayRateLimitedError("Rate limit exceeded. Please try again later.", 429)
        if resp.status_code == 402:
            raise GatewayQuotaExhaustedError("API credits exhausted. Please add funds.", 402)
        if resp.is_error:
            logger.error("AI gateway error: %s %s", resp.status_code, resp.text[:500])
            raise GatewayError(f"AI gateway error: {resp.status_code}", resp.status_code)

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GatewayError(f"Unexpected AI gateway response shape: {e}") from e

        if not content:
            raise GatewayError("No content generated")
        return str(content)
