# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Notice workflows pairing a blob on disk with a metadata record.

The two stores are not transactional. Upload compensates by removing the blob
when the metadata insert fails; delete removes the record even when the unlink
fails unless ``strict_blob_delete`` is set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from pymongo.database import Database
from pymongo.errors import PyMongoError

from resmedx.core.errors import FileNotFound, MissingTitle, NoFile, NotFound, PersistenceFailure
from resmedx.infra import blob_storage, notices_repo
from resmedx.infra.blob_storage import BlobStorage

logger = logging.getLogger(__name__)


def upload_notice(
    db: Database,
    storage: BlobStorage,
    *,
    title: Optional[str],
    stream: Optional[BinaryIO],
    original_name: Optional[str],
    content_type: Optional[str],
) -> Dict[str, Any]:
    # Validate everything before touching the disk.
    if stream is None or not original_name:
        raise NoFile()
    if not (title or "").strip():
        raise MissingTitle()
    blob_storage.validate(original_name, content_type)

    blob = storage.store(stream, original_name)
    try:
        doc = notices_repo.create(
            db,
            title=title or "",
            original_name=original_name,
            file_name=blob.file_name,
            file_path=blob.file_path,
        )
    except PyMongoError as e:
        _discard_blob(storage, blob.file_name)
        raise PersistenceFailure("Failed to save file data in database", detail=str(e)) from e
    except Exception:
        _discard_blob(storage, blob.file_name)
        raise

    logger.info("Uploaded notice %s (%s -> %s)", doc["_id"], original_name, blob.file_name)
    return doc


def _discard_blob(storage: BlobStorage, file_name: str) -> None:
    try:
        storage.delete(file_name)
        logger.warning("Removed blob %s after failed metadata insert", file_name)
    except FileNotFound as e:
        logger.error("Could not remove orphaned blob %s: %s", file_name, e.detail)


def list_notices(db: Database) -> List[Dict[str, Any]]:
    return notices_repo.list_all(db)


def get_notice(db: Database, notice_id: str) -> Dict[str, Any]:
    doc = notices_repo.get_by_id(db, notice_id)
    if doc is None:
        raise NotFound()
    return doc


def notice_file_path(db: Database, storage: BlobStorage, file_name: str) -> Path:
    """Blob path for a stored notice; files without a notice record are not served."""
    path = storage.resolve(file_name)
    if notices_repo.get_by_file_name(db, path.name) is None:
        raise FileNotFound(detail=f"no notice for {file_name!r}")
    return storage.open_path(path.name)


def delete_notice(
    db: Database,
    storage: BlobStorage,
    notice_id: str,
    *,
    strict_blob_delete: bool = False,
) -> Dict[str, Any]:
    """Delete a notice and its blob. Returns whether the blob was removed."""
    doc = get_notice(db, notice_id)
    file_name = str(doc.get("fileName") or "")

    blob_deleted = True
    try:
        storage.delete(file_name)
    except FileNotFound as e:
        blob_deleted = False
        logger.error("Error deleting file %s for notice %s: %s", file_name, notice_id, e.detail)
        if strict_blob_delete:
            raise PersistenceFailure("Failed to delete file", detail=e.detail) from e

    notices_repo.delete_by_id(db, notice_id)
    logger.info("Deleted notice %s (blob_deleted=%s)", notice_id, blob_deleted)
    return {"message": "File deleted successfully", "blobDeleted": blob_deleted}
