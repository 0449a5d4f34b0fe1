"""JSON Canonicalizer — validation + deterministic re-serialization of page documents.

Invariants:
    - canonicalize() returns None iff the input is not valid JSON or its top level
      is not an object
    - Output is deterministic (sorted keys, compact separators) and idempotent
    - Keys and shape of the object are never interpreted

Design Decisions:
    - NaN/Infinity rejected: they are not JSON and browsers cannot parse them back
    - ensure_ascii=False: CJK text in canvas objects is stored as written
"""

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _encode(document: dict) -> str:
    return json.dumps(
        document, ensure_ascii=False, sort_keys=True, separators=(",", ":"),
    )


def canonicalize(raw: str) -> str | None:
    """Validate raw as a JSON object and re-encode it canonically."""
    try:
        document = json.loads(raw, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError):
        return None
    if not isinstance(document, dict):
        return None
    return _encode(document)


def default_page_content(image_url: str) -> str:
    """Canvas document for a freshly created page: one background image."""
    background = {
        "type": "image",
        "originX": "left",
        "originY": "top",
        "left": 0,
        "top": 0,
        "fill": "rgb(0,0,0)",
        "stroke": None,
        "strokeWidth": 0,
        "strokeDashArray": None,
        "strokeLineCap": "butt",
        "strokeLineJoin": "miter",
        "strokeMiterLimit": 10,
        "scaleX": 1,
        "scaleY": 1,
        "angle": 0,
        "flipX": False,
        "flipY": False,
        "opacity": 1,
        "shadow": None,
        "visible": True,
        "clipTo": None,
        "backgroundColor": "",
        "fillRule": "nonzero",
        "globalCompositeOperation": "source-over",
        "transformMatrix": None,
        "skewX": 0,
        "skewY": 0,
        "crossOrigin": "",
        "alignX": "none",
        "alignY": "none",
        "meetOrSlice": "meet",
        "src": image_url,
        "filters": [],
    }
    return _encode({"backgroundImage": background})
