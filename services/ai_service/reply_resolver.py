"""
Turns a captioning response body into assistant reply text.
"""

import json
from typing import Any, Optional


GENERATED_TEXT_FIELD = "generated_text"


def extract_generated_text(data: Any) -> Optional[str]:
    """
    Pull the generated text out of a response body.

    Accepts ``{"generated_text": ...}`` and the list form the hosted
    inference API returns for captioning models, ``[{"generated_text": ...}]``.
    A truthy non-string value is returned as its JSON text.
    """
    if isinstance(data, list) and data and isinstance(data[0], dict):
        data = data[0]
    if isinstance(data, dict):
        text = data.get(GENERATED_TEXT_FIELD)
        if isinstance(text, str):
            return text or None
        if text:
            return serialize_body(text)
    return None


def serialize_body(data: Any) -> str:
    """Compact JSON text of a parsed body, empty for no body"""
    if data is None:
        return ""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def resolve_reply_text(data: Any, no_response_reply: str) -> str:
    """
    Resolve reply text with a fixed precedence: generated text,
    then the serialized body, then ``no_response_reply``.
    """
    return extract_generated_text(data) or serialize_body(data) or no_response_reply
