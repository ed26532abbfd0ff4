import json
import re
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    # Naive UTC, matching what sqlite's CURRENT_TIMESTAMP stores.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def serialize_body(body: Any) -> str:
    """Flatten a rich-text body to the string form that is persisted.

    Editors post block documents as JSON objects or arrays; the store only keeps
    strings, so structured bodies are encoded as JSON text.
    """
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, ensure_ascii=False)
    return str(body)


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").strip().lower())
    return slug.strip("-")
