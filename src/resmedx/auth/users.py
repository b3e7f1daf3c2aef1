# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pymongo.database import Database

from resmedx.auth.passwords import hash_password, verify_password
from resmedx.core.errors import DuplicateEmail, InvalidCredentials
from resmedx.core.utils import canon_email
from resmedx.infra import users_repo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    password_hash: str

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(doc.get("_id") or ""),
            name=str(doc.get("name") or ""),
            email=str(doc.get("email") or ""),
            password_hash=str(doc.get("password") or ""),
        )


def get_user(db: Database, email: str) -> Optional[UserRecord]:
    e = canon_email(email)
    if not e:
        return None
    doc = users_repo.find_by_email(db, e)
    return UserRecord.from_doc(doc) if doc else None


def register(db: Database, *, name: str, email: str, password: str) -> Dict[str, Any]:
    """Create a user. The existence check is a fast path; the index decides races."""
    e = canon_email(email)
    if not e:
        raise ValueError("Email is required")
    if users_repo.find_by_email(db, e):
        raise DuplicateEmail()
    users_repo.insert_user(db, name=name, email=e, password_hash=hash_password(password))
    logger.info("Registered user %s", e)
    return {"success": True, "message": "User registered successfully"}


def authenticate(db: Database, *, email: str, password: str) -> UserRecord:
    u = get_user(db, email)
    if not u or not verify_password(u.password_hash, password):
        logger.info("Failed login for %s", canon_email(email))
        raise InvalidCredentials()
    return u
