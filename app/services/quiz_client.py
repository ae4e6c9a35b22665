from typing import Optional
from urllib.parse import quote

import requests

from app.core.errors import NotFoundError, StoreError, UploadError, ValidationError
from app.core.logging_config import logger
from app.schemas.quiz.quiz_base import ValentineQuiz
from app.services.quiz_store import QuizStore


class HttpQuizStore(QuizStore):
    """QuizStore backed by a remote deployment of this API."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_quiz(self, quiz: ValentineQuiz) -> str:
        try:
            response = self.session.post(
                f"{self.base_url}/quizzes",
                json=quiz.model_dump(by_alias=True, exclude_none=True),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Could not reach quiz API: {e}")
            raise StoreError("Could not connect. Try again.") from e

        if response.status_code == 400:
            raise ValidationError([_detail(response, "Invalid quiz")])
        if not response.ok:
            raise StoreError(_detail(response, "Failed to save quiz"))

        quiz_id = _json(response).get("id")
        if not quiz_id:
            raise StoreError("Invalid response from server")
        return quiz_id

    def fetch_quiz(self, quiz_id: str) -> ValentineQuiz:
        try:
            response = self.session.get(
                f"{self.base_url}/quizzes/{quote(quiz_id, safe='')}",
                timeout=self.timeout,
            )
            response.raise_for_status()
            quiz = ValentineQuiz.model_validate(response.json())
        except (requests.RequestException, ValueError) as e:
            logger.info(f"Quiz {quiz_id!r} could not be loaded: {e}")
            raise NotFoundError() from e
        return quiz.model_copy(update={"id": quiz_id})

    def upload_image(self, path: str, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        draft_id, _, name = path.partition("/")
        slot = name.rsplit(".", 1)[0]
        try:
            response = self.session.put(
                f"{self.base_url}/uploads/{quote(draft_id, safe='')}/{quote(slot, safe='')}",
                files={"file": (filename or name, data, content_type)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError("Upload failed") from e

        if response.status_code == 400:
            raise UploadError(_detail(response, "Upload failed"))
        if not response.ok:
            raise StoreError(_detail(response, "Upload failed"))

        url = _json(response).get("url")
        if not url:
            raise StoreError("Invalid response from server")
        return url


def _json(response: requests.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _detail(response: requests.Response, default: str) -> str:
    return _json(response).get("detail") or default
