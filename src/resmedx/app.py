# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field, field_validator
from pymongo.database import Database
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from resmedx.auth import users
from resmedx.auth.tokens import COOKIE_NAME, sign_token
from resmedx.core.errors import AppError, PersistenceFailure, UnexpectedFailure
from resmedx.core.logging import setup_logging
from resmedx.core.utils import canon_email, env_flag, to_json_doc, to_json_docs, utcnow
from resmedx.infra import mongo
from resmedx.infra.blob_storage import BlobStorage
from resmedx.infra.mongo import get_db
from resmedx.permissions import cookie_settings, notices_guard
from resmedx.services import notice_service

setup_logging()
logger = logging.getLogger(__name__)

UPLOAD_DIR = Path(os.getenv("RESMEDX_UPLOAD_DIR", "uploads")).resolve()
STRICT_BLOB_DELETE = env_flag("RESMEDX_STRICT_BLOB_DELETE")
CORS_ORIGINS = [o.strip() for o in os.getenv("RESMEDX_CORS_ORIGINS", "*").split(",") if o.strip()]

STORAGE = BlobStorage(UPLOAD_DIR)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    client = mongo.connect()
    try:
        await run_in_threadpool(mongo.ensure_indexes, client[mongo.db_name()])
    except PyMongoError:
        logger.exception(
            "Could not ensure MongoDB indexes; email and file name uniqueness is NOT enforced "
            "until the indexes exist (restart once MongoDB is reachable)"
        )
    logger.info("Uploads stored in %s", UPLOAD_DIR)
    try:
        yield
    finally:
        mongo.close()


app = FastAPI(title="resmedx", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_storage() -> BlobStorage:
    return STORAGE


# ------------------ Error handling ------------------


def _error_response(err: AppError) -> JSONResponse:
    return JSONResponse(err.to_dict(), status_code=err.status_code)


@app.exception_handler(AppError)
async def _app_error_handler(request: Request, exc: AppError):
    extra = {"http_method": request.method, "path": request.url.path, "status_code": exc.status_code}
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.name, request.url.path, exc.detail or exc.message,
                     exc_info=exc if exc.__cause__ is not None else None, extra=extra)
    else:
        logger.info("%s on %s", exc.name, request.url.path, extra=extra)
    return _error_response(exc)


@app.exception_handler(PyMongoError)
async def _mongo_error_handler(request: Request, exc: PyMongoError):
    logger.error("Database error on %s", request.url.path, exc_info=exc)
    return _error_response(PersistenceFailure())


@app.exception_handler(Exception)
async def _unexpected_error_handler(request: Request, exc: Exception):
    logger.error("%s on %s", type(exc).__name__, request.url.path, exc_info=exc)
    return _error_response(UnexpectedFailure())


# ------------------ Schemas ------------------


class RegisterIn(BaseModel):
    name: str = ""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _email_not_blank(cls, v: str) -> str:
        v = canon_email(v)
        if not v:
            raise ValueError("email must not be blank")
        return v


class LoginIn(BaseModel):
    email: str
    password: str


# ------------------ Routes ------------------


@app.get("/")
def status():
    return {"message": "Server is running smoothly", "timestamp": utcnow().isoformat()}


@app.post("/api/v1/register", status_code=201)
def register(payload: RegisterIn, db: Database = Depends(get_db)):
    return users.register(db, name=payload.name, email=payload.email, password=payload.password)


@app.post("/api/v1/login")
def login(payload: LoginIn, db: Database = Depends(get_db)):
    u = users.authenticate(db, email=payload.email, password=payload.password)
    token = sign_token(u.email)
    resp = JSONResponse({"success": True, "message": "Login successful", "token": token})
    resp.set_cookie(COOKIE_NAME, token, **cookie_settings())
    return resp


@app.post("/api/v1/notices", status_code=201)
def upload_notice(
    pdf: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    db: Database = Depends(get_db),
    storage: BlobStorage = Depends(get_storage),
    user=Depends(notices_guard),
):
    doc = notice_service.upload_notice(
        db,
        storage,
        title=title,
        stream=pdf.file if pdf is not None else None,
        original_name=pdf.filename if pdf is not None else None,
        content_type=pdf.content_type if pdf is not None else None,
    )
    return {"message": "File uploaded successfully", "data": to_json_doc(doc)}


@app.get("/api/v1/notices")
def list_notices(db: Database = Depends(get_db)):
    return to_json_docs(notice_service.list_notices(db))


@app.get("/api/v1/notices/{filename}")
def download_notice(
    filename: str,
    db: Database = Depends(get_db),
    storage: BlobStorage = Depends(get_storage),
):
    path = notice_service.notice_file_path(db, storage, filename)
    return FileResponse(path=str(path))


@app.delete("/api/v1/notices/{notice_id}")
def delete_notice(
    notice_id: str,
    db: Database = Depends(get_db),
    storage: BlobStorage = Depends(get_storage),
    user=Depends(notices_guard),
):
    return notice_service.delete_notice(db, storage, notice_id, strict_blob_delete=STRICT_BLOB_DELETE)
