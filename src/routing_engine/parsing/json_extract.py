"""Locate and decode the first JSON object embedded in model output."""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw: str


def find_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` region of ``text``, or None.

    Braces inside JSON string literals are ignored, so ``{"a": "}"}`` is one
    region. An unterminated object yields None.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
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
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def extract_json_object(text: str) -> dict | ParseFailure:
    """Decode the first JSON object in ``text``.

    Only that region is parsed; surrounding prose and code fences are ignored.
    """
    region = find_json_object(text or "")
    if region is None:
        return ParseFailure(reason="no JSON object found", raw=text or "")
    try:
        data = json.loads(region)
    except json.JSONDecodeError as e:
        return ParseFailure(reason=f"invalid JSON: {e.msg}", raw=text)
    if not isinstance(data, dict):
        return ParseFailure(reason="JSON value is not an object", raw=text)
    return data
