"""Shared fixtures: in-memory database, fake asset store, signed tokens."""

import time
from typing import List, Tuple

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models.content_models  # noqa: F401
import app.models.enquiry_models  # noqa: F401
from app.assets.store import AssetStore, StoredAsset, get_asset_store
from app.config import settings
from app.core.errors import StoreError
from app.database import get_session
from app.main import app as fastapi_app


class FakeAssetStore(AssetStore):
    """Records calls instead of talking to a media host."""

    def __init__(self, fail_deletes: bool = False):
        self.fail_deletes = fail_deletes
        self.uploads: List[Tuple[int, str]] = []
        self.deleted: List[Tuple[str, str]] = []

    async def upload(self, data, kind, filename="upload"):
        self.uploads.append((len(data), kind.value))
        n = len(self.uploads)
        return StoredAsset(
            url=f"https://cdn.example.com/{kind.value}/{n}.bin",
            public_id=f"voyage/{kind.value}-{n}",
            kind=kind,
        )

    async def delete(self, public_id, kind):
        if self.fail_deletes:
            raise StoreError("store unreachable")
        self.deleted.append((public_id, kind.value))
        return True

    def is_available(self):
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store():
    return FakeAssetStore()


@pytest.fixture
def client(session, store):
    def _session():
        yield session

    fastapi_app.dependency_overrides[get_session] = _session
    fastapi_app.dependency_overrides[get_asset_store] = lambda: store
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


def make_token(role="admin", user_id=1, expires_in=3600, secret=None):
    payload = {"userId": user_id, "role": role, "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return bearer(make_token("admin", user_id=7))


@pytest.fixture
def main_admin_headers():
    return bearer(make_token("main_admin", user_id=1))
