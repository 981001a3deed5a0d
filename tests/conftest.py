"""Shared test fixtures: in-memory database, fake object storage and tokens."""

from datetime import UTC, datetime, timedelta
from urllib.parse import quote, unquote

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from expensify.database import Base, get_db
from expensify.exceptions import StorageError
from expensify.main import app
from expensify.rate_limiter import limiter
from expensify.services.identity_provider import IdentityProvider, get_identity_provider
from expensify.services.object_storage import ObjectStorage, get_object_storage

TEST_SECRET = "expensify-test-secret-0123456789abcdef"


class FakeObjectStorage(ObjectStorage):
    """In-memory object store with failure injection.

    Set ``fail_uploads`` to make every upload fail, or add keys to
    ``broken_keys`` to make their removal fail.
    """

    public_prefix = "https://storage.test/storage/v1/object/public/documents/"

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.removed: list[str] = []
        self.broken_keys: set[str] = set()
        self.fail_uploads = False

    def upload(self, key: str, content: bytes, content_type: str, upsert: bool = False) -> str:
        if self.fail_uploads:
            raise StorageError("Failed to upload document")
        if key in self.objects and not upsert:
            raise StorageError("The resource already exists")
        self.objects[key] = content
        self.content_types[key] = content_type
        return key

    def public_url(self, key: str) -> str:
        return self.public_prefix + quote(key, safe="/")

    def remove(self, key: str) -> None:
        if key in self.broken_keys:
            raise StorageError(f"Failed to delete {key}")
        self.objects.pop(key, None)
        self.removed.append(key)

    def key_from_url(self, url: str) -> str | None:
        if not url.startswith(self.public_prefix):
            return None
        return unquote(url[len(self.public_prefix) :]) or None


def make_token(subject: str, expires_in: timedelta = timedelta(hours=1), **claims) -> str:
    """Mint an HS256 token accepted by the test identity provider."""
    payload = {"sub": subject, "exp": datetime.now(UTC) + expires_in, **claims}
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def engine():
    """Create in-memory SQLite engine with all tables."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """Create database session for testing."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeObjectStorage()


@pytest.fixture
def identity_provider():
    return IdentityProvider(secret_key=TEST_SECRET, algorithm="HS256")


@pytest.fixture
def token_for():
    return make_token


@pytest.fixture
def auth_headers():
    """Build bearer headers for a principal id."""

    def _headers(subject: str = "user_owner") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(subject)}"}

    return _headers


@pytest.fixture
def client(session_factory, storage, identity_provider):
    """Create test client with database, storage and identity overrides."""
    limiter.reset()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_storage] = lambda: storage
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
