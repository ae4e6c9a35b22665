from fastapi import APIRouter, Depends, HTTPException

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.core.logging_config import logger
from app.schemas.quiz.quiz_base import QuizCreate, QuizCreated, QuizOut
from app.services.quiz_store import QuizStore, get_quiz_store

quiz_router = APIRouter(prefix="/quizzes", tags=["Quizzes"])


@quiz_router.post("", response_model=QuizCreated)
def create_quiz(quiz_in: QuizCreate, store: QuizStore = Depends(get_quiz_store)):
    try:
        quiz_id = store.create_quiz(quiz_in)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail="Invalid quiz: partnerName, senderName, and at least one complete question required",
        ) from e
    except StoreError as e:
        raise HTTPException(status_code=500, detail="Failed to save quiz") from e

    return QuizCreated(id=quiz_id)


@quiz_router.get("/{quiz_id}", response_model=QuizOut, response_model_exclude_none=True)
def get_quiz(quiz_id: str, store: QuizStore = Depends(get_quiz_store)):
    if not quiz_id.strip():
        raise HTTPException(status_code=400, detail="Missing quiz id")

    try:
        quiz = store.fetch_quiz(quiz_id)
    except NotFoundError as e:
        logger.info(f"Quiz lookup missed for id {quiz_id!r}")
        raise HTTPException(status_code=404, detail="Quiz not found or link expired") from e

    return QuizOut(**quiz.model_dump(exclude={"id"}))
