"""
Writing component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

# --- Enums ---


class WritingKind(str, Enum):
    """AI writing tool types."""

    BLOG = "blog"
    SOCIAL = "social"
    EMAIL = "email"
    REPURPOSE = "repurpose"
    SEO = "seo"


BlogLength = Literal["short", "medium", "long"]
SeoType = Literal["show-notes", "transcript", "timestamps"]


# --- Errors ---


class GatewayError(RuntimeError):
    """Completion gateway failed (network, auth, or non-2xx status)."""

    code = "gateway_error"
    retryable = False

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class GatewayRateLimitedError(GatewayError):
    """HTTP 429. The user may retry later."""

    code = "rate_limited"
    retryable = True


class GatewayQuotaExhaustedError(GatewayError):
    """HTTP 402. Credits exhausted; retrying will not help until topped up."""

    code = "quota_exhausted"


class ContentParseError(ValueError):
    """The completion text held no usable JSON payload."""

    code = "parse_error"


@dataclass(frozen=True)
class WritingError:
    """Writing error carried in outputs."""

    code: str
    message: str
    retryable: bool = False


# --- Input Models ---


@dataclass(frozen=True)
class BlogRequest:
    topic: str
    tone: str = "professional"
    length: BlogLength = "medium"
    keywords: tuple[str, ...] = ()

    kind = WritingKind.BLOG


@dataclass(frozen=True)
class SocialRequest:
    topic: str
    platforms: tuple[str, ...]
    context: str | None = None

    kind = WritingKind.SOCIAL


@dataclass(frozen=True)
class EmailRequest:
    email_type: str
    purpose: str
    recipient: str | None = None
    key_points: str | None = None

    kind = WritingKind.EMAIL


@dataclass(frozen=True)
class RepurposeRequest:
    title: str
    content: str
    formats: tuple[str, ...]

    kind = WritingKind.REPURPOSE


@dataclass(frozen=True)
class SeoRequest:
    """Podcast SEO helpers over an episode script."""

    script: str
    seo_type: SeoType
    title: str | None = None

    kind = WritingKind.SEO


WritingRequest = BlogRequest | SocialRequest | EmailRequest | RepurposeRequest | SeoRequest


# --- Output Models ---


@dataclass(frozen=True)
class SocialCaption:
    platform: str
    caption: str
    hashtags: tuple[str, ...] = ()


@dataclass(frozen=True)
class WritingOutput:
    """Output from a writing tool run."""

    kind: WritingKind
    payload: dict[str, Any] = field(default_factory=dict)
    errors: list[WritingError] = field(default_factory=list)
    success: bool = True
