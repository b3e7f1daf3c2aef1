# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""MongoDB client lifecycle.

One ``MongoClient`` per process, opened by the application lifespan and shared
by every request (the driver pools connections internally).
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)

DEFAULT_URI = "mongodb://localhost:27017"
DEFAULT_DB_NAME = "resmedx"

USERS = "users"
NOTICES = "notices"

_CLIENT: Optional[MongoClient] = None


def db_name() -> str:
    return os.getenv("RESMEDX_DB_NAME", DEFAULT_DB_NAME)


def connect(uri: Optional[str] = None) -> MongoClient:
    global _CLIENT
    if _CLIENT is None:
        _CLIENT = MongoClient(uri or os.getenv("MONGODB_URI", DEFAULT_URI))
        logger.info("Connected to MongoDB (db=%s)", db_name())
    return _CLIENT


def close() -> None:
    global _CLIENT
    if _CLIENT is not None:
        _CLIENT.close()
        _CLIENT = None


def get_db() -> Database:
    """FastAPI dependency returning the application database."""
    return connect()[db_name()]


def ensure_indexes(db: Database) -> None:
    """Create the unique indexes the stores rely on for correctness."""
    db[USERS].create_index([("email", ASCENDING)], unique=True, name="uniq_email")
    db[NOTICES].create_index([("fileName", ASCENDING)], unique=True, name="uniq_file_name")
