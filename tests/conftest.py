"""
Pytest configuration for Tubely tests.

Environment is set before tubely is imported so the cached Settings, the engine and
the /assets mount all point into a throwaway directory.
"""
import os
import shutil
import tempfile
from pathlib import Path

_TEST_ROOT = tempfile.mkdtemp(prefix="tubely-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT}/test.db"
os.environ["ASSETS_ROOT"] = os.path.join(_TEST_ROOT, "assets")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["S3_BUCKET"] = "tubely-test"
os.environ["S3_CF_DISTRIBUTION"] = "d111111abcdef8.cloudfront.net"
os.environ["PORT"] = "8091"

import pytest
from fastapi.testclient import TestClient

from tubely.auth import create_access_token
from tubely.config import Settings, get_settings
from tubely.database import Base, SessionLocal, engine
from tubely.main import app
from tubely.repositories.user_repository import create_user
from tubely.repositories.video_repository import create_video
from tubely.routers.uploads import get_upload_pipeline
from tubely.services.asset_store import LocalAssetStore
from tubely.services.media_tools import PROCESSING_SUFFIX, Dimensions
from tubely.services.upload_pipeline import UploadPipeline


class FakeInspector:
    def __init__(self, dimensions: Dimensions = Dimensions(1280, 720)):
        self.dimensions = dimensions
        self.inspected: list[Path] = []

    def inspect(self, path: Path) -> Dimensions:
        self.inspected.append(path)
        return self.dimensions


class FakeNormalizer:
    """Copies the input to <input>.processing, like the ffmpeg remux does."""

    def __init__(self):
        self.outputs: list[Path] = []

    def normalize(self, path: Path) -> Path:
        output = path.with_name(path.name + PROCESSING_SUFFIX)
        shutil.copyfile(path, output)
        self.outputs.append(output)
        return output


class FakeObjectStore:
    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}

    def put(self, key, body, content_type):
        self.objects[key] = (body.read(), content_type)


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


@pytest.fixture
def settings(tmp_path) -> Settings:
    staging = tmp_path / "staging"
    staging.mkdir()
    return get_settings().model_copy(update={"staging_dir": str(staging)})


@pytest.fixture
def staging_dir(settings) -> Path:
    return Path(settings.staging_dir)


@pytest.fixture
def inspector() -> FakeInspector:
    return FakeInspector()


@pytest.fixture
def normalizer() -> FakeNormalizer:
    return FakeNormalizer()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def pipeline(settings, inspector, normalizer, object_store) -> UploadPipeline:
    return UploadPipeline(
        settings=settings,
        inspector=inspector,
        normalizer=normalizer,
        object_store=object_store,
        asset_store=LocalAssetStore(settings),
    )


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db, pipeline):
    app.dependency_overrides[get_upload_pipeline] = lambda: pipeline
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def owner(db):
    return create_user(db, "owner@example.com", "hunter22")


@pytest.fixture
def stranger(db):
    return create_user(db, "stranger@example.com", "hunter22")


@pytest.fixture
def owner_headers(owner) -> dict:
    return {"Authorization": f"Bearer {create_access_token(owner.id, get_settings())}"}


@pytest.fixture
def stranger_headers(stranger) -> dict:
    return {"Authorization": f"Bearer {create_access_token(stranger.id, get_settings())}"}


@pytest.fixture
def video(db, owner):
    return create_video(db, owner.id, "Boot.dev boots", "Review of boots")
