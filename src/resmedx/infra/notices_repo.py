# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.database import Database

from resmedx.core.errors import MissingTitle, NotFound
from resmedx.core.utils import parse_object_id, utcnow
from resmedx.infra.mongo import NOTICES


def create(
    db: Database,
    *,
    title: str,
    original_name: str,
    file_name: str,
    file_path: str,
    uploaded_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Insert a notice metadata record and return it with its ``_id``."""
    title = (title or "").strip()
    if not title:
        raise MissingTitle()

    doc: Dict[str, Any] = {
        "title": title,
        "originalName": original_name,
        "fileName": file_name,
        "filePath": file_path,
        "uploadedAt": uploaded_at or utcnow(),
    }
    result = db[NOTICES].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def list_all(db: Database) -> List[Dict[str, Any]]:
    return list(db[NOTICES].find({}))


def get_by_id(db: Database, notice_id: str) -> Optional[Dict[str, Any]]:
    oid = parse_object_id(notice_id)
    if oid is None:
        return None
    return db[NOTICES].find_one({"_id": oid})


def get_by_file_name(db: Database, file_name: str) -> Optional[Dict[str, Any]]:
    return db[NOTICES].find_one({"fileName": file_name})


def delete_by_id(db: Database, notice_id: str) -> None:
    oid = parse_object_id(notice_id)
    if oid is None:
        raise NotFound()
    result = db[NOTICES].delete_one({"_id": oid})
    if not result.deleted_count:
        raise NotFound()
