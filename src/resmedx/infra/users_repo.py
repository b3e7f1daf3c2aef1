# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from resmedx.core.errors import DuplicateEmail
from resmedx.infra.mongo import USERS


def find_by_email(db: Database, email: str) -> Optional[Dict[str, Any]]:
    if not email:
        return None
    return db[USERS].find_one({"email": email})


def insert_user(db: Database, *, name: str, email: str, password_hash: str) -> Any:
    """Insert a user document; the unique index on ``email`` is authoritative."""
    try:
        result = db[USERS].insert_one({"name": name, "email": email, "password": password_hash})
    except DuplicateKeyError as e:
        raise DuplicateEmail(detail=str(e)) from e
    return result.inserted_id
