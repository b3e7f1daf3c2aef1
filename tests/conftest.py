import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# Cheap hashes for the test run; read when resmedx.auth.passwords is imported.
os.environ.setdefault("RESMEDX_PASSWORD_TIME_COST", "1")
os.environ.setdefault("JWT_SECRET", "test-secret")

import copy
import importlib
from pathlib import Path
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, OperationFailure


class FakeCollection:
    """In-memory stand-in for the pymongo Collection calls the stores make."""

    def __init__(self, name: str):
        self.name = name
        self.docs = []
        self.unique_fields = set()
        self.fail_inserts = False
        self.fail_finds = False

    @staticmethod
    def _matches(doc, flt):
        return all(doc.get(k) == v for k, v in (flt or {}).items())

    def create_index(self, keys, unique=False, name=None, **kwargs):
        if unique:
            for field, _direction in keys:
                self.unique_fields.add(field)
        return name or "_".join(f for f, _ in keys)

    def insert_one(self, doc):
        if self.fail_inserts:
            raise OperationFailure("insert refused")
        for field in self.unique_fields:
            if any(d.get(field) == doc.get(field) for d in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} index: {field}")
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def find_one(self, flt=None):
        for d in self.docs:
            if self._matches(d, flt):
                return copy.deepcopy(d)
        return None

    def find(self, flt=None):
        if self.fail_finds:
            raise OperationFailure("find refused")
        return iter([copy.deepcopy(d) for d in self.docs if self._matches(d, flt)])

    def delete_one(self, flt):
        for i, d in enumerate(self.docs):
            if self._matches(d, flt):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


@pytest.fixture()
def fake_db():
    from resmedx.infra.mongo import ensure_indexes

    db = FakeDatabase()
    ensure_indexes(db)
    return db


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def app_module(upload_dir, monkeypatch):
    monkeypatch.setenv("RESMEDX_UPLOAD_DIR", str(upload_dir))
    monkeypatch.delenv("RESMEDX_STRICT_BLOB_DELETE", raising=False)
    monkeypatch.delenv("RESMEDX_PROTECT_NOTICES", raising=False)

    import resmedx.app as app_module
    importlib.reload(app_module)
    return app_module


@pytest.fixture()
def client(app_module, fake_db):
    from resmedx.infra.mongo import get_db

    app_module.app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


@pytest.fixture()
def pdf_bytes() -> bytes:
    return b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
