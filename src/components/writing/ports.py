"""
Writing component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class CompletionPort(Protocol):
    """Opaque text-completion oracle."""

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Return the model's free-form text.

        Raises GatewayRateLimitedError (429), GatewayQuotaExhaustedError (402),
        or GatewayError for any other failure.
        """
        ...
