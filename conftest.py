import io
import os

os.environ.setdefault("JWT_SECRET_KEY", "test_secret_key_which_is_at_least_32_bytes_long")

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers

import crud
import crypto_utils
from auth import create_access_token
from config import Settings
from database import Base, get_db
from main import create_app
from media import ImageRef, MediaDelegateError, get_media_client
from models import Role

TEST_SECRET = "test_secret_key_which_is_at_least_32_bytes_long"


class FakeMediaClient:
    """Records every call instead of talking to the image host."""

    def __init__(self):
        self.uploads = []
        self.deletes = []
        self.fail_upload = False
        self.fail_delete = False

    def upload(self, content: bytes, filename: str = "image", content_type: str = "application/octet-stream"):
        if self.fail_upload:
            raise MediaDelegateError("upload refused")
        self.uploads.append((filename, content_type, len(content)))
        n = len(self.uploads)
        return ImageRef(url=f"https://i.imgur.com/img{n}.png", delete_hash=f"delhash{n}")

    def delete(self, delete_hash: str):
        if self.fail_delete:
            raise MediaDelegateError("delete refused")
        self.deletes.append(delete_hash)


def create_test_image(name: str = "test.png", color: str = "red"):
    file = io.BytesIO()
    image = Image.new('RGB', (32, 32), color=color)
    image.save(file, 'png')
    file.name = name
    file.seek(0)
    return file


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(crypto_utils, "ITERATIONS", 1000)


@pytest.fixture
def settings():
    return Settings(jwt_secret_key=TEST_SECRET, database_url="sqlite://")


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def media_client():
    return FakeMediaClient()


@pytest.fixture
def app(settings, db_session, media_client):
    application = create_app(settings)

    def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_media_client] = lambda: media_client
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role: Role = Role.USER, first_name: str = "Jane", last_name: str = "Doe",
                   email: str = None, password: str = "secret123"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return crud.create_user(db_session, first_name, last_name, email, password, role)

    return _make_user


@pytest.fixture
def auth_headers(settings):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user, settings)}"}

    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, "Ada", "Admin", "admin@example.com")


@pytest.fixture
def user(make_user):
    return make_user(Role.USER, "Jane", "Doe", "jane@example.com")


@pytest.fixture
def upload_file():
    def _upload_file(content: bytes = None, filename: str = "test.png", content_type: str = "image/png"):
        if content is None:
            content = create_test_image(filename).getvalue()
        return UploadFile(file=io.BytesIO(content), filename=filename,
                          headers=Headers({"content-type": content_type}))

    return _upload_file


@pytest.fixture
def png_image():
    return create_test_image()


@pytest.fixture
def make_image():
    return create_test_image
