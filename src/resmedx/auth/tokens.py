# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadPayload, BadSignature, BadTimeSignature, URLSafeTimedSerializer

from resmedx.core.utils import env_int

COOKIE_NAME = os.getenv("RESMEDX_COOKIE_NAME", "token")
COOKIE_MAX_AGE_SECONDS = env_int("RESMEDX_COOKIE_MAX_AGE", 24 * 60 * 60) or 24 * 60 * 60
# None = tokens never expire. Set RESMEDX_TOKEN_MAX_AGE to enforce a lifetime.
TOKEN_MAX_AGE_SECONDS: Optional[int] = env_int("RESMEDX_TOKEN_MAX_AGE") or None


def _serializer() -> URLSafeTimedSerializer:
    secret = os.getenv("JWT_SECRET") or os.getenv("RESMEDX_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing JWT_SECRET (or RESMEDX_SECRET_KEY) in environment")
    salt = os.getenv("RESMEDX_TOKEN_SALT", "resmedx.token.v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


@dataclass(frozen=True)
class TokenData:
    email: str


def sign_token(email: str) -> str:
    return _serializer().dumps({"email": email})


def verify_token(token: str, *, max_age: Optional[int] = TOKEN_MAX_AGE_SECONDS) -> Optional[TokenData]:
    if not token:
        return None
    s = _serializer()
    try:
        data = s.loads(token, max_age=max_age)
    except (BadSignature, BadTimeSignature, BadPayload):
        return None
    email = str((data or {}).get("email") or "").strip() if isinstance(data, dict) else ""
    if not email:
        return None
    return TokenData(email=email)
