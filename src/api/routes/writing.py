"""
AI Writing API.

One endpoint for the writing tools. Gateway failures keep their HTTP
meaning: 429 (rate limited, retry later) and 402 (credits exhausted) pass
through; other gateway and parse failures return 502.
"""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.api.deps import get_completion, get_owner_id
from src.components.writing import (
    BlogRequest,
    CompletionPort,
    EmailRequest,
    RepurposeRequest,
    SeoRequest,
    SocialCaption,
    SocialRequest,
    WritingOutput,
    WritingRequest,
    run_generate,
)

router = APIRouter()

ERROR_STATUS = {
    "rate_limited": status.HTTP_429_TOO_MANY_REQUESTS,
    "quota_exhausted": status.HTTP_402_PAYMENT_REQUIRED,
}


# --- Request Models ---


class BlogBody(BaseModel):
    kind: Literal["blog"]
    topic: str = Field(min_length=1)
    tone: str = "professional"
    length: Literal["short", "medium", "long"] = "medium"
    keywords: list[str] = []


class SocialBody(BaseModel):
    kind: Literal["social"]
    topic: str = Field(min_length=1)
    platforms: list[str] = Field(min_length=1)
    context: str | None = None


class EmailBody(BaseModel):
    kind: Literal["email"]
    email_type: str = Field(min_length=1)
    purpose: str = Field(min_length=1)
    recipient: str | None = None
    key_points: str | None = None


class RepurposeBody(BaseModel):
    kind: Literal["repurpose"]
    title: str
    content: str = Field(min_length=1)
    formats: list[str] = Field(min_length=1)


class SeoBody(BaseModel):
    kind: Literal["seo"]
    seo_type: Literal["show-notes", "transcript", "timestamps"]
    script: str = Field(min_length=1)
    title: str | None = None


AnyBody = BlogBody | SocialBody | EmailBody | RepurposeBody | SeoBody

GenerateBody = Annotated[AnyBody, Body(discriminator="kind")]


class GenerateResponse(BaseModel):
    kind: str
    result: dict[str, Any]


# --- Helper Functions ---


def to_request(body: AnyBody) -> WritingRequest:
    if isinstance(body, BlogBody):
        return BlogRequest(
            topic=body.topic, tone=body.tone, length=body.length, keywords=tuple(body.keywords)
        )
    elif isinstance(body, SocialBody):
        return SocialRequest(topic=body.topic, platforms=tuple(body.platforms), context=body.context)
    elif isinstance(body, EmailBody):
        return EmailRequest(
            email_type=body.email_type,
            purpose=body.purpose,
            recipient=body.recipient,
            key_points=body.key_points,
        )
    elif isinstance(body, RepurposeBody):
        return RepurposeRequest(title=body.title, content=body.content, formats=tuple(body.formats))
    else:
        return SeoRequest(script=body.script, seo_type=body.seo_type, title=body.title)


def to_result(output: WritingOutput) -> dict[str, Any]:
    payload = dict(output.payload)
    if "captions" in payload:
        payload["captions"] = [
            {"platform": c.platform, "caption": c.caption, "hashtags": list(c.hashtags)}
            for c in payload["captions"]
            if isinstance(c, SocialCaption)
        ]
    return payload


# --- Routes ---


@router.post("/generate", response_model=GenerateResponse)
def generate(
    body: GenerateBody,
    owner_id: str = Depends(get_owner_id),
    completion: CompletionPort = Depends(get_completion),
) -> GenerateResponse:
    """Run one writing tool and return its structured result."""
    output = run_generate(to_request(body), completion=completion)

    if not output.success:
        err = output.errors[0]
        raise HTTPException(
            status_code=ERROR_STATUS.get(err.code, status.HTTP_502_BAD_GATEWAY),
            detail={"code": err.code, "message": err.message, "retryable": err.retryable},
        )

    return GenerateResponse(kind=output.kind.value, result=to_result(output))
