"""
Quiz persistence: one record per quiz plus its images in blob storage.

``QuizStore`` is the interface the flow controller and the HTTP routes work
against. ``SqlQuizStore`` is the server-side implementation; the HTTP client in
``app.services.quiz_client`` implements the same interface remotely.

Inline images arrive as ``data:`` URLs on create and are decoded and stored
server-side. Images already uploaded through ``upload_image`` arrive as
absolute http(s) URLs and are kept as-is. Anything else in an image field is
dropped rather than persisted.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotFoundError, StoreError, UploadError, ValidationError
from app.core.logging_config import logger
from app.models.quiz_db.quiz_crud import get_quiz_by_id, insert_quiz, row_to_quiz
from app.schemas.quiz.quiz_base import ValentineQuiz, completeness_errors
from app.services.blob_store import BlobStore, get_blob_store
from app.services.images import (
    content_type_for_ext,
    ext_for_content_type,
    is_data_url,
    is_heic,
    is_remote_url,
    normalize_image,
    parse_data_url,
)


class QuizStore(ABC):
    @abstractmethod
    def create_quiz(self, quiz: ValentineQuiz) -> str:
        """Persist a complete quiz and return its id."""

    @abstractmethod
    def fetch_quiz(self, quiz_id: str) -> ValentineQuiz:
        """Return the stored quiz, or raise NotFoundError."""

    @abstractmethod
    def upload_image(self, path: str, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        """Store an image at ``path`` (overwriting) and return its public URL."""


def parse_quiz_id(value: Optional[str]) -> Optional[str]:
    """Canonical UUID text for ``value``, or None if it is not a v1-v5 UUID."""
    if not value:
        return None
    try:
        parsed = uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None
    if parsed.version not in (1, 2, 3, 4, 5):
        return None
    return str(parsed)


def question_image_path(draft_id: str, question_id: str, ext: str) -> str:
    return f"{draft_id}/question-{question_id}.{ext}"


def final_image_path(draft_id: str, ext: str) -> str:
    return f"{draft_id}/final.{ext}"


def check_blob_path(path: str) -> None:
    parts = path.split("/") if path else []
    if (
        not parts
        or path.startswith("/")
        or "\\" in path
        or any(p in ("", ".", "..") for p in parts)
    ):
        raise UploadError("Invalid image path")


class SqlQuizStore(QuizStore):
    def __init__(
        self,
        db: Session,
        blobs: BlobStore,
        max_inline_bytes: int = settings.MAX_INLINE_IMAGE_BYTES,
        max_upload_bytes: int = settings.MAX_UPLOAD_IMAGE_BYTES,
    ):
        self.db = db
        self.blobs = blobs
        self.max_inline_bytes = max_inline_bytes
        self.max_upload_bytes = max_upload_bytes

    def create_quiz(self, quiz: ValentineQuiz) -> str:
        errors = completeness_errors(quiz)
        if errors:
            raise ValidationError(errors)

        quiz_id = parse_quiz_id(quiz.id) or str(uuid.uuid4())

        questions = [
            q.model_copy(update={"image_url": self._store_inline_image(q.image_url, quiz_id, f"q-{i}")})
            for i, q in enumerate(quiz.questions)
        ]
        final_image_url = self._store_inline_image(quiz.final_image_url, quiz_id, "final")
        resolved = quiz.model_copy(update={"questions": questions, "final_image_url": final_image_url})

        try:
            insert_quiz(self.db, quiz_id, resolved)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save quiz {quiz_id}: {e}", exc_info=True)
            raise StoreError("Failed to save quiz") from e

        logger.info(f"Saved quiz {quiz_id} with {len(questions)} questions")
        return quiz_id

    def _store_inline_image(self, value: Optional[str], quiz_id: str, name: str) -> Optional[str]:
        if value is None or is_remote_url(value):
            return value
        if not is_data_url(value):
            logger.warning(f"Dropping unsupported image reference for {quiz_id}/{name}")
            return None

        parsed = parse_data_url(value, self.max_inline_bytes)
        if parsed is None:
            logger.warning(f"Dropping invalid or oversized inline image for {quiz_id}/{name}")
            return None

        data, content_type = parsed
        try:
            data, content_type = normalize_image(data, content_type)
            ext = ext_for_content_type(content_type)
            return self.blobs.put(f"{quiz_id}/{name}.{ext}", data, content_type_for_ext(ext))
        except (UploadError, StoreError) as e:
            logger.warning(f"Dropping inline image for {quiz_id}/{name}: {e}")
            return None

    def fetch_quiz(self, quiz_id: str) -> ValentineQuiz:
        canonical = parse_quiz_id(quiz_id)
        if canonical is None:
            raise NotFoundError()
        try:
            row = get_quiz_by_id(self.db, canonical)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load quiz {canonical}: {e}", exc_info=True)
            raise NotFoundError() from e
        if row is None:
            raise NotFoundError()
        stored = row_to_quiz(row)
        if not stored.questions:
            logger.warning(f"Quiz {canonical} has no playable questions")
            raise NotFoundError()
        return ValentineQuiz(id=row.id, **stored.model_dump())

    def upload_image(self, path: str, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        check_blob_path(path)
        content_type = (content_type or "").lower()
        if not content_type.startswith("image/") and not is_heic(content_type, filename):
            raise UploadError("Only image files can be uploaded")
        if len(data) > self.max_upload_bytes:
            raise UploadError(f"Image must be under {self.max_upload_bytes // (1024 * 1024)}MB")

        data, content_type = normalize_image(data, content_type, filename)
        url = self.blobs.put(path, data, content_type)
        logger.info(f"Uploaded image {path} ({len(data)} bytes)")
        return url


def get_quiz_store(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
) -> QuizStore:
    return SqlQuizStore(db, blobs)
