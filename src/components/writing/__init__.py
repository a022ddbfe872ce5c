"""
Writing component - AI-assisted content tools over a completion gateway.
"""

from ._extract import balanced_span, extract_json
from .component import build_prompts, parse_response, run_generate
from .models import (
    BlogRequest,
    ContentParseError,
    EmailRequest,
    GatewayError,
    GatewayQuotaExhaustedError,
    GatewayRateLimitedError,
    RepurposeRequest,
    SeoRequest,
    SocialCaption,
    SocialRequest,
    WritingError,
    WritingKind,
    WritingOutput,
    WritingRequest,
)
from .ports import CompletionPort

__all__ = [
    # Entry points
    "run_generate",
    "build_prompts",
    "parse_response",
    # Extraction
    "balanced_span",
    "extract_json",
    # Models
    "BlogRequest",
    "EmailRequest",
    "RepurposeRequest",
    "SeoRequest",
    "SocialCaption",
    "SocialRequest",
    "WritingError",
    "WritingKind",
    "WritingOutput",
    "WritingRequest",
    # Errors
    "ContentParseError",
    "GatewayError",
    "GatewayQuotaExhaustedError",
    "GatewayRateLimitedError",
    # Ports
    "CompletionPort",
]
