# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Flat on-disk storage for uploaded notice files.

Blobs are addressed by a generated name (uuid4 hex + original extension) in a
single upload directory; no sharding.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from resmedx.core.errors import FileNotFound, UnsupportedType

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf"}
ALLOWED_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


@dataclass(frozen=True)
class StoredBlob:
    file_name: str
    file_path: str


def validate(original_name: str, content_type: Optional[str]) -> None:
    """Both the extension and the declared MIME type must be allow-listed."""
    ext = Path(original_name or "").suffix.lower()
    ctype = (content_type or "").split(";", 1)[0].strip().lower()
    if ext not in ALLOWED_EXTENSIONS or ctype not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedType(detail=f"name={original_name!r} content_type={content_type!r}")


class BlobStorage:
    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def _ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, file_name: str) -> Path:
        """Absolute path for a blob name, confined to the upload directory."""
        name = (file_name or "").strip()
        if not name:
            raise FileNotFound(detail="empty file name")
        candidate = (self.root / name).resolve()
        if candidate.parent != self.root:
            raise FileNotFound(detail=f"path escapes upload dir: {file_name!r}")
        return candidate

    def store(self, stream: BinaryIO, original_name: str) -> StoredBlob:
        self._ensure_root()
        ext = Path(original_name or "").suffix.lower()
        file_name = f"{uuid.uuid4().hex}{ext}"
        path = self.resolve(file_name)
        try:
            with path.open("wb") as fh:
                shutil.copyfileobj(stream, fh)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        logger.debug("Stored blob %s (%s)", file_name, original_name)
        return StoredBlob(file_name=file_name, file_path=str(path))

    def open_path(self, file_name: str) -> Path:
        """Path of an existing blob; FileNotFound if it is not on disk."""
        path = self.resolve(file_name)
        if not path.is_file():
            raise FileNotFound(detail=str(path))
        return path

    def delete(self, file_name: str) -> None:
        path = self.resolve(file_name)
        try:
            path.unlink()
        except OSError as e:
            raise FileNotFound(detail=f"{path}: {e}") from e
