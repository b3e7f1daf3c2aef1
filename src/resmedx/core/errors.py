# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by services and routes.

Every failure a route can report is an ``AppError`` subclass carrying the HTTP
status and the short public message. The exception handler in ``resmedx.app``
renders them as ``{"success": false, "error": <name>, "message": <text>}``.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    status_code: int = 500
    message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None, *, detail: str = "") -> None:
        self.message = message or type(self).message
        # Server-side detail; never sent to the client.
        self.detail = detail
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"success": False, "error": self.name, "message": self.message}


class DuplicateEmail(AppError):
    status_code = 400
    message = "User already exists"


class InvalidCredentials(AppError):
    status_code = 401
    message = "Invalid email or password"


class Unauthorized(AppError):
    status_code = 401
    message = "Authentication required"


class MissingTitle(AppError):
    status_code = 400
    message = "Title is required"


class NoFile(AppError):
    status_code = 400
    message = "No file uploaded"


class UnsupportedType(AppError):
    status_code = 400
    message = "Only PDFs are allowed"


class FileNotFound(AppError):
    status_code = 404
    message = "File not found"


class NotFound(AppError):
    status_code = 404
    message = "Notice not found"


class PersistenceFailure(AppError):
    status_code = 500
    message = "Database operation failed"


class UnexpectedFailure(AppError):
    status_code = 500
    message = "An unexpected error occurred"
