# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from pymongo.database import Database

from resmedx.auth.tokens import COOKIE_MAX_AGE_SECONDS, COOKIE_NAME, verify_token
from resmedx.auth.users import get_user
from resmedx.core.errors import Unauthorized
from resmedx.core.utils import env_flag
from resmedx.infra.mongo import get_db


@dataclass(frozen=True)
class CurrentUser:
    email: str
    name: str


def _token_from_request(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(COOKIE_NAME, "")


def load_user_from_request(request: Request, db: Database) -> Optional[CurrentUser]:
    data = verify_token(_token_from_request(request))
    if not data:
        return None
    u = get_user(db, data.email)
    if not u:
        return None
    return CurrentUser(email=u.email, name=u.name)


def require_user(request: Request, db: Database = Depends(get_db)) -> CurrentUser:
    u = load_user_from_request(request, db)
    if u:
        return u
    raise Unauthorized()


def notices_guard(request: Request, db: Database = Depends(get_db)) -> Optional[CurrentUser]:
    """Route guard for notice mutations; open unless RESMEDX_PROTECT_NOTICES is set."""
    if not env_flag("RESMEDX_PROTECT_NOTICES"):
        return None
    return require_user(request, db)


def cookie_settings() -> dict:
    secure = env_flag("RESMEDX_COOKIE_SECURE")
    return {"httponly": True, "samesite": "lax", "secure": secure, "max_age": COOKIE_MAX_AGE_SECONDS}
