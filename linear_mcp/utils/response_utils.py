"""Helpers for reading Linear API responses and shaping tool results.

`robust_parse_text` handles response bodies that are not clean JSON:
- Normal JSON (json.loads)
- Text containing a JSON object plus extra data (json.JSONDecoder().raw_decode)
- Falls back to returning the original text if parsing fails

`text_content` turns a validated payload into the single text block every tool returns.
"""
from __future__ import annotations

import json
from typing import Any, List

from mcp.types import TextContent
from pydantic import BaseModel


def robust_parse_text(text: str) -> Any:
    """Try to parse text as JSON, then raw_decode the first JSON object, else return raw text."""
    try:
        return json.loads(text)
    except ValueError:
        pass

    # Proxies sometimes append an HTML footer to the GraphQL body
    try:
        decoder = json.JSONDecoder()
        obj, _ = decoder.raw_decode(text.lstrip())
        return obj
    except ValueError:
        pass

    return text


def to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    if isinstance(payload, (list, tuple)):
        return [to_jsonable(item) for item in payload]
    return payload


def text_content(payload: Any) -> List[TextContent]:
    """Wrap a payload (model, list of models or plain JSON value) as one JSON text block."""
    return [TextContent(type="text", text=json.dumps(to_jsonable(payload)))]
