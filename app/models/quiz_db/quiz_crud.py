from typing import List, Optional

from pydantic import ValidationError as ModelValidationError
from sqlalchemy.orm import Session

from app.core.logging_config import logger
from app.models.quiz_db.quiz_db import Quiz
from app.schemas.quiz.quiz_base import QuizOut, QuizQuestion, ValentineQuiz


def insert_quiz(db: Session, quiz_id: str, quiz: ValentineQuiz) -> Quiz:
    row = Quiz(
        id=quiz_id,
        partner_name=quiz.partner_name,
        sender_name=quiz.sender_name,
        final_message=quiz.final_message,
        final_image_url=quiz.final_image_url,
        questions=[q.model_dump(by_alias=True, exclude_none=True) for q in quiz.questions],
    )
    db.add(row)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    return row


def get_quiz_by_id(db: Session, quiz_id: str) -> Optional[Quiz]:
    return db.query(Quiz).filter(Quiz.id == quiz_id).first()


def _questions_from_row(raw) -> List[QuizQuestion]:
    if not isinstance(raw, list):
        return []
    questions = []
    for entry in raw:
        try:
            questions.append(QuizQuestion.model_validate(entry))
        except ModelValidationError:
            logger.warning("Skipping stored question that no longer validates")
    return questions


def row_to_quiz(row: Quiz) -> QuizOut:
    return QuizOut(
        partner_name=row.partner_name,
        sender_name=row.sender_name,
        final_message=row.final_message,
        final_image_url=row.final_image_url,
        questions=_questions_from_row(row.questions),
    )
