# projectinsight/utils/helper.py
from __future__ import annotations

import json
import re
import tiktoken
from typing import Any
from datetime import datetime, timezone
from quart import jsonify


def truncate_by_tokens(text: str, max_tokens: int, model: str = "gpt-4o-mini") -> str:
    """
    Cut text to at most ``max_tokens`` tokens so it is safe to embed in a prompt.
    Falls back to the cl100k_base encoding when tiktoken does not know the model.
    """
    text = text or ""
    # a token covers at least one UTF-8 byte
    if len(text.encode("utf-8")) <= max_tokens:
        return text

    try:
        enc = tiktoken.encoding_for_model(model)
    except KeyError:
        enc = tiktoken.get_encoding("cl100k_base")

    tokens = enc.encode(text)
    if len(tokens) <= max_tokens:
        return text

    return enc.decode(tokens[:max_tokens])


def stringify(obj: Any, limit: int = 400) -> str:
    try:
        s = obj if isinstance(obj, str) else json.dumps(obj, ensure_ascii=False)
    except (TypeError, ValueError):
        s = str(obj)
    return s if len(s) <= limit else s[: limit - 3] + "..."


def slugify(name: str) -> str:
    """Lowercase and replace whitespace runs with ``-`` (``My App`` -> ``my-app``)."""
    return re.sub(r"\s+", "-", (name or "").strip().lower())


def utc_now_iso() -> str:
    """UTC now as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


def parse_iso(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; unparseable values sort as the oldest."""
    if isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            dt = None
        if dt is not None:
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return datetime.min.replace(tzinfo=timezone.utc)


def response_error(code: str, message: str, http_status: int = 500):
    return jsonify(
        {"status": "error", "code": code, "message": message, "time": utc_now_iso()}
    ), http_status
