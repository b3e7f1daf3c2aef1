# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from resmedx.core.utils import env_int


def _hasher() -> PasswordHasher:
    time_cost = env_int("RESMEDX_PASSWORD_TIME_COST")
    if time_cost and time_cost > 0:
        return PasswordHasher(time_cost=time_cost)
    return PasswordHasher()


_PH = _hasher()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False
