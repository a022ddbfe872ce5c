"""
Writing component - AI-assisted blog, social, email, repurposing and SEO tools.

Builds a system/user instruction pair, forwards it to the completion
gateway, and extracts the structured payload from the model's text.

Invariants:
- I1: Gateway failures (network, auth, 429, 402) and parse failures are
  reported with distinct error codes
- I2: Only 429 is marked retryable
"""

from __future__ import annotations

import logging
from typing import Any

from ._extract import extract_json
from .models import (
    BlogRequest,
    ContentParseError,
    EmailRequest,
    GatewayError,
    RepurposeRequest,
    SeoRequest,
    SocialCaption,
    SocialRequest,
    WritingError,
    WritingOutput,
    WritingRequest,
)
from .ports import CompletionPort

logger = logging.getLogger(__name__)

BLOG_WORD_COUNTS = {"short": 500, "medium": 1000, "long": 2000}

# Spoken pace used to estimate timestamps from a script
WORDS_PER_MINUTE = 150

SEO_TASKS = {
    "show-notes": (
        "You are an expert podcast SEO specialist writing show notes for search engines "
        "and podcast directories.",
        "Generate SEO-optimized show notes with a description, key topics, notable quotes, "
        "resources mentioned, keywords and a call-to-action. Format as markdown.",
    ),
    "transcript": (
        "You are a professional transcription specialist.",
        "Convert this script into a transcript with speaker labels, paragraph breaks, "
        "section headers and [MM:SS] timestamps every 2-3 minutes.",
    ),
    "timestamps": (
        "You are a podcast editor who creates chapter markers.",
        "List 5-10 chapters, including intro and outro, one per line as "
        "[MM:SS] - Chapter Title. Return only the list.",
    ),
}


# --- Prompt Building ---


def build_prompts(req: WritingRequest) -> tuple[str, str]:
    """Return (system_prompt, user_prompt) for a request."""
    if isinstance(req, BlogRequest):
        keywords = ", ".join(req.keywords) or "none specified"
        return (
            "You are an expert SEO content writer. Write well-structured blog posts "
            "with markdown headings.",
            f'Write a {BLOG_WORD_COUNTS[req.length]} word blog post about: "{req.topic}"\n'
            f"Tone: {req.tone}\nKeywords to include naturally: {keywords}",
        )
    elif isinstance(req, SocialRequest):
        context = f"\nAdditional context: {req.context}" if req.context else ""
        return (
            "You are a social media content creator writing platform-specific captions.",
            f"Create captions for: {', '.join(req.platforms)}\n"
            f'Topic: "{req.topic}"{context}\n'
            'Return as JSON array: [{"platform": "...", "caption": "...", "hashtags": ["#tag"]}]',
        )
    elif isinstance(req, EmailRequest):
        lines = [f"Write a {req.email_type} email.", f"Purpose: {req.purpose}"]
        if req.recipient:
            lines.append(f"Recipient type: {req.recipient}")
        if req.key_points:
            lines.append(f"Key points to include: {req.key_points}")
        lines.append('Return as JSON: {"subject": "...", "body": "..."}')
        return (
            "You are a professional email writer.",
            "\n".join(lines),
        )
    elif isinstance(req, RepurposeRequest):
        return (
            "You are a content repurposing expert.",
            f"Repurpose the following content into these formats: {', '.join(req.formats)}\n"
            f'Original content title: "{req.title}"\nContent:\n{req.content}\n'
            "Return as JSON object keyed by format.",
        )
    elif isinstance(req, SeoRequest):
        system_prompt, task = SEO_TASKS[req.seo_type]
        return (
            system_prompt,
            f'Podcast title: "{req.title or "Untitled"}"\n{task}\n'
            f"Estimate timing at ~{WORDS_PER_MINUTE} words per minute.\nScript:\n{req.script}",
        )
    else:
        raise ValueError(f"Unknown request type: {type(req)}")


# --- Response Parsing ---


def parse_hashtags(value: Any) -> tuple[str, ...]:
    """Hashtags as a tuple; a single string is split on whitespace."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, list):
        return tuple(str(h) for h in value)
    raise ContentParseError("Caption 'hashtags' must be a list of strings")


def parse_social(text: str) -> dict[str, Any]:
    raw = extract_json(text, "[")
    if not isinstance(raw, list):
        raise ContentParseError("Social captions must be a JSON array")

    captions = []
    for entry in raw:
        if not isinstance(entry, dict) or "platform" not in entry or "caption" not in entry:
            raise ContentParseError("Each caption needs 'platform' and 'caption'")
        captions.append(
            SocialCaption(
                platform=str(entry["platform"]),
                caption=str(entry["caption"]),
                hashtags=parse_hashtags(entry.get("hashtags")),
            )
        )
    return {"captions": captions}


def parse_email(text: str) -> dict[str, Any]:
    raw = extract_json(text, "{")
    if "subject" not in raw or "body" not in raw:
        raise ContentParseError("Email must have 'subject' and 'body'")
    return {"subject": str(raw["subject"]), "body": str(raw["body"])}


def parse_repurpose(text: str) -> dict[str, Any]:
    return {"outputs": extract_json(text, "{")}


def parse_response(req: WritingRequest, text: str) -> dict[str, Any]:
    """Turn model text into the payload for the request kind."""
    if isinstance(req, BlogRequest):
        return {"content": text}
    elif isinstance(req, SocialRequest):
        return parse_social(text)
    elif isinstance(req, EmailRequest):
        return parse_email(text)
    elif isinstance(req, RepurposeRequest):
        return parse_repurpose(text)
    elif isinstance(req, SeoRequest):
        return {"content": text, "type": req.seo_type}
    else:
        raise ValueError(f"Unknown request type: {type(req)}")


# --- Component Entry Point ---


def run_generate(req: WritingRequest, *, completion: CompletionPort) -> WritingOutput:
    """
    Run a writing tool end to end.

    Args:
        req: Tool-specific request.
        completion: Completion gateway port.

    Returns:
        WritingOutput with payload, or errors with a code of rate_limited,
        quota_exhausted, gateway_error or parse_error.
    """
    system_prompt, user_prompt = build_prompts(req)
    logger.info("AI writing request: %s", req.kind.value)

    try:
        text = completion.complete(system_prompt, user_prompt)
    except GatewayError as e:
        logger.warning("AI gateway error (%s): %s", e.code, e)
        return WritingOutput(
            kind=req.kind,
            errors=[WritingError(code=e.code, message=str(e), retryable=e.retryable)],
            success=False,
        )

    try:
        payload = parse_response(req, text)
    except ContentParseError as e:
        logger.error("Failed to parse %s response: %s", req.kind.value, e)
        return WritingOutput(
            kind=req.kind,
            errors=[WritingError(code=e.code, message=str(e))],
            success=False,
        )

    return WritingOutput(kind=req.kind, payload=payload)
