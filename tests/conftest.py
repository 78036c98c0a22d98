import os

# Settings are read at import time, so the test environment has to be in
# place before anything from filebox is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_filebox.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from filebox.database import Base, SessionLocal, engine, get_db
from filebox.dependencies.storage import get_blob_store, get_staging_area
from filebox.main import app
from filebox.models.user import User
from filebox.storage.base import BlobStore, Classification, StoredObject
from filebox.storage.exceptions import BlobStoreError
from filebox.storage.staging import UploadStagingArea


class FakeBlobStore(BlobStore):
    """
    In-memory blob store double.

    Records every call, keeps uploaded bytes in a dict and can be switched
    into failure mode for uploads and deletes independently.
    """

    base_url = "https://blobs.test"

    def __init__(self):
        self.objects: dict[tuple[str, Classification], bytes] = {}
        self.put_calls: list[dict] = []
        self.delete_calls: list[tuple[str, Classification]] = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def put(self, file_path, *, remote_id, content_type, filename, classification):
        self.put_calls.append(
            {
                "file_path": Path(file_path),
                "staged_exists": Path(file_path).exists(),
                "remote_id": remote_id,
                "content_type": content_type,
                "filename": filename,
                "classification": classification,
            }
        )
        if self.fail_uploads:
            raise BlobStoreError("upload", remote_id, "simulated outage")

        self.objects[(remote_id, classification)] = Path(file_path).read_bytes()
        return StoredObject(
            locator=f"{self.base_url}/{classification.value}/{remote_id}",
            remote_id=remote_id,
            format=Path(filename).suffix.lstrip("."),
            classification=classification,
        )

    async def delete(self, remote_id, classification):
        self.delete_calls.append((remote_id, classification))
        if self.fail_deletes:
            raise BlobStoreError("delete", remote_id, "simulated outage")
        if (remote_id, classification) not in self.objects:
            raise BlobStoreError("delete", remote_id, "object not found")
        del self.objects[(remote_id, classification)]

    def remote_id_from_locator(self, locator):
        prefix = f"{self.base_url}/"
        if not locator.startswith(prefix):
            return None
        _, _, remote_id = locator[len(prefix):].partition("/")
        return remote_id or None


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Run Alembic migrations at the start of the test session."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(os.path.join(os.getcwd(), "alembic.ini"))

    # Migrations, not create_all(): the schema under test is the deployed one
    command.upgrade(alembic_cfg, "head")

    yield

    try:
        command.downgrade(alembic_cfg, "base")
    except Exception:
        # Fall back to drop_all and reset the Alembic version state
        Base.metadata.drop_all(bind=engine)
        try:
            command.stamp(alembic_cfg, "base")
        except Exception:
            # Teardown is best-effort
            pass


@pytest.fixture
def db():
    """Each test uses an independent transaction that gets rolled back after."""
    connection = engine.connect()
    transaction = connection.begin()
    session = SessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def staging_area(tmp_path):
    return UploadStagingArea(base_path=str(tmp_path / "staging"))


@pytest.fixture
def client(db, blob_store, staging_area):
    """Test client with database, blob store and staging dependency overrides."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_staging_area] = lambda: staging_area
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    user = User(name="Alice", email="alice@example.com", hashed_password="test_hash")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_user(db):
    user = User(name="Bob", email="bob@example.com", hashed_password="test_hash")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
