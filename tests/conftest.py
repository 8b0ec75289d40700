import os
import tempfile
from datetime import timedelta

# Must be set before anything imports app.config (settings are read once).
_TMP_DIR = tempfile.mkdtemp(prefix="audio-catalog-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'catalog-test.db')}"
os.environ["ENVIRONMENT"] = "testing"
os.environ["USE_JSON_LOGGING"] = "false"
os.environ["S3_BUCKETNAME"] = "test-bucket"
os.environ["S3_PUBLIC_BASE_URL"] = "https://cdn.example.test"

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_object_storage
from app.exceptions import StorageError
from infrastructure.database import models  # noqa: F401
from infrastructure.database.base_model import Base
from infrastructure.database.models import AudioClipModel
from infrastructure.database.session import SessionLocal, sync_engine
from infrastructure.utils.datetime_utils import utc_now
from presentation.main import app


class FakeStorage:
    """In-memory stand-in for ObjectStorage."""

    def __init__(self):
        self.objects = {}
        self.fail = False

    async def upload(self, data, key, content_type=None):
        if self.fail:
            raise StorageError()
        self.objects[key] = (data, content_type)
        return f"https://cdn.example.test/{key}"


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_object_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seed_clips(session):
    """Inserts clips; later entries in the list are newer."""
    def _seed(*clips):
        base_time = utc_now() - timedelta(days=1)
        created = []
        for offset, overrides in enumerate(clips):
            values = {
                "title": "Untitled",
                "category": "General",
                "type": "music",
                "duration": 30,
                "audio_url": f"https://cdn.example.test/audio/{offset}.mp3",
                "source": "ai_generated",
                "license_type": "Envato MusicGen – Commercial License",
                "license_url": f"https://cdn.example.test/licenses/{offset}.txt",
                "created_at": base_time + timedelta(seconds=offset),
            }
            values.update(overrides)
            model = AudioClipModel(**values)
            session.add(model)
            created.append(model)
        session.commit()
        return [model.id for model in created]
    return _seed
