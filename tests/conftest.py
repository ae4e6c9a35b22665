import os
import tempfile

# Settings are read at import time, so the environment has to be in place
# before anything under app/ is imported.
_TMP = tempfile.mkdtemp(prefix="valentine-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'test.db')}")
os.environ.setdefault("BLOB_BACKEND", "local")
os.environ.setdefault("BLOB_LOCAL_DIR", os.path.join(_TMP, "media"))
os.environ.setdefault("PUBLIC_BASE_URL", "http://testserver")

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.core.database import Base, SessionLocal, engine
from app.models.quiz_db.quiz_db import Quiz  # noqa: F401  registers the table
from app.schemas.quiz.quiz_base import QuizQuestion, ValentineQuiz
from app.services.blob_store import LocalBlobStore, get_blob_store
from app.services.quiz_store import SqlQuizStore


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "blobs"), "http://testserver/media")


@pytest.fixture
def store(db_session, blob_store):
    return SqlQuizStore(db_session, blob_store)


@pytest.fixture
def client(db_session, blob_store):
    from main import app

    app.dependency_overrides[get_blob_store] = lambda: blob_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_quiz():
    return ValentineQuiz(
        partner_name="Sam",
        sender_name="Alex",
        final_message="Thanks for playing ❤️",
        questions=[
            QuizQuestion(
                id="q0",
                question="Where did we first meet?",
                options=["At a café", "On a train"],
                correct_index=0,
                hint="Think coffee",
                love_note="Best latte of my life.",
            ),
            QuizQuestion(
                id="k3j9x2a",
                question="Favourite dessert?",
                options=["Tiramisù", "Crème brûlée", "Mochi", "Pie"],
                correct_index=2,
            ),
        ],
    )


@pytest.fixture
def make_png():
    def _make_png(size=(4, 4)) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", size, (200, 30, 60)).save(buf, format="PNG")
        return buf.getvalue()

    return _make_png
