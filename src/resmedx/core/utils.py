# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

_TRUTHY = {"1", "true", "yes", "y", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    """Integer env var; empty/absent or unparseable values fall back to default."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def canon_email(email: str) -> str:
    """Trim an email for lookups. Case is preserved, matching is exact."""
    return (email or "").strip()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return an ObjectId, or None when the string is not a valid id."""
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def to_json_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Render a Mongo document with JSON-friendly ``_id`` and datetimes."""
    out: Dict[str, Any] = {}
    for k, v in doc.items():
        if isinstance(v, ObjectId):
            out[k] = str(v)
        elif isinstance(v, datetime):
            out[k] = v.isoformat()
        else:
            out[k] = v
    return out


def to_json_docs(docs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [to_json_doc(d) for d in docs]
