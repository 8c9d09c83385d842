# projectinsight/services/llm_chain/llm_utils.py
from __future__ import annotations

import json
from typing import Any, Dict

from projectinsight.errors import MalformedResponseError


# ---------------- Message shaping ----------------
def shape_system(content: str) -> Dict[str, Any]:
    return {"role": "system", "content": content}


def shape_user(content: str) -> Dict[str, Any]:
    return {"role": "user", "content": content}


# ---------------- Extractors (raw SDK) ----------------
def extract_assistant_text_chat(resp: Any) -> str:
    choice0 = (getattr(resp, "choices", None) or [None])[0]
    if not choice0:
        return ""
    return (getattr(getattr(choice0, "message", None), "content", None) or "").strip()


# ---------------- JSON out of free text ----------------
_CLOSERS = {"{": "}", "[": "]"}


def extract_json_block(text: str, opener: str = "{") -> str:
    """Greedy scan: everything from the first ``opener`` to the last matching closer.

    Models wrap JSON in prose or code fences; this keeps only the outermost
    block. Raises :class:`MalformedResponseError` when there is none.
    """
    closer = _CLOSERS[opener]
    text = text or ""
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end < start:
        raise MalformedResponseError(
            "Invalid JSON format in the analysis service response"
        )
    return text[start : end + 1]


def parse_json_block(text: str, opener: str = "{") -> Any:
    """:func:`extract_json_block` followed by ``json.loads``."""
    block = extract_json_block(text, opener)
    try:
        return json.loads(block)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Analysis service returned invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e
