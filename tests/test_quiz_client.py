from unittest.mock import MagicMock

import pytest
import requests

from app.core.errors import NotFoundError, StoreError, UploadError, ValidationError
from app.services.quiz_client import HttpQuizStore


def make_response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = body if body is not None else {}
    if not response.ok:
        response.raise_for_status.side_effect = requests.HTTPError(str(status_code))
    return response


def test_create_quiz_posts_wire_format(sample_quiz):
    session = MagicMock()
    session.post.return_value = make_response(200, {"id": "abc"})
    store = HttpQuizStore("https://api.example/", timeout=3, session=session)

    assert store.create_quiz(sample_quiz) == "abc"

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.example/quizzes"
    assert kwargs["json"]["partnerName"] == "Sam"
    assert kwargs["timeout"] == 3


def test_create_quiz_maps_errors(sample_quiz):
    session = MagicMock()
    store = HttpQuizStore("https://api.example", session=session)

    session.post.return_value = make_response(400, {"detail": "Invalid quiz"})
    with pytest.raises(ValidationError):
        store.create_quiz(sample_quiz)

    session.post.return_value = make_response(500, {"detail": "Failed to save quiz"})
    with pytest.raises(StoreError):
        store.create_quiz(sample_quiz)

    session.post.return_value = make_response(200, {})
    with pytest.raises(StoreError):
        store.create_quiz(sample_quiz)

    session.post.side_effect = requests.ConnectionError("offline")
    with pytest.raises(StoreError):
        store.create_quiz(sample_quiz)


def test_fetch_quiz(sample_quiz):
    session = MagicMock()
    session.get.return_value = make_response(200, sample_quiz.model_dump(by_alias=True, exclude_none=True))
    store = HttpQuizStore("https://api.example", session=session)

    quiz = store.fetch_quiz("abc 123")

    assert session.get.call_args[0][0] == "https://api.example/quizzes/abc%20123"
    assert quiz.id == "abc 123"
    assert quiz.questions == sample_quiz.questions


@pytest.mark.parametrize(
    "response",
    [
        make_response(404, {"detail": "Quiz not found or link expired"}),
        make_response(500, {"detail": "Server error"}),
        make_response(200, {"partnerName": "Sam"}),
    ],
)
def test_fetch_quiz_failures_are_not_found(response):
    session = MagicMock()
    session.get.return_value = response
    store = HttpQuizStore("https://api.example", session=session)

    with pytest.raises(NotFoundError):
        store.fetch_quiz("abc")


def test_upload_image_targets_slot():
    session = MagicMock()
    session.put.return_value = make_response(200, {"url": "https://cdn/x/final.jpg"})
    store = HttpQuizStore("https://api.example", session=session)

    url = store.upload_image("draft-1/final.jpg", b"img", "image/jpeg", filename="me.jpg")

    assert url == "https://cdn/x/final.jpg"
    args, kwargs = session.put.call_args
    assert args[0] == "https://api.example/uploads/draft-1/final"
    assert kwargs["files"] == {"file": ("me.jpg", b"img", "image/jpeg")}


def test_upload_image_maps_errors():
    session = MagicMock()
    store = HttpQuizStore("https://api.example", session=session)

    session.put.return_value = make_response(400, {"detail": "Image must be under 7MB"})
    with pytest.raises(UploadError, match="7MB"):
        store.upload_image("draft-1/question-q0.png", b"img", "image/png")

    session.put.return_value = make_response(500, {"detail": "Upload failed"})
    with pytest.raises(StoreError):
        store.upload_image("draft-1/question-q0.png", b"img", "image/png")
