"""
JSON payload extraction from free-form model text.

Models wrap JSON in prose and code fences. The scan finds the first opening
bracket whose balanced span parses as JSON, tracking string and escape state
so brackets inside string literals do not count.
"""

from __future__ import annotations

import json
from typing import Any

from .models import ContentParseError

_CLOSERS = {"[": "]", "{": "}"}


def balanced_span(text: str, start: int) -> int | None:
    """
    Return the index one past the bracket closing text[start], or None.

    None if the brackets are mismatched or never closed.
    """
    stack: list[str] = []
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("]", "}"):
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return i + 1

    return None


def extract_json(text: str, opening: str) -> Any:
    """
    Extract the first balanced JSON value starting with `opening`.

    Args:
        text: Model output.
        opening: '[' for arrays, '{' for objects.

    Raises:
        ContentParseError: if no candidate parses.
    """
    if opening not in _CLOSERS:
        raise ValueError(f"opening must be '[' or '{{', got {opening!r}")

    pos = text.find(opening)
    while pos != -1:
        end = balanced_span(text, pos)
        if end is not None:
            try:
                return json.loads(text[pos:end])
            except json.JSONDecodeError:
                # Balanced but not JSON (e.g. "[citation]"); try the next candidate
                pass
        pos = text.find(opening, pos + 1)

    kind = "array" if opening == "[" else "object"
    raise ContentParseError(f"No JSON {kind} found in model response")
