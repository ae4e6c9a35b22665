"""
Three-step quiz builder: names, questions, final message.

Each step is validated before moving on. Images are uploaded as soon as they
are attached, under paths namespaced by the draft id, and the resulting URL is
written into the slot that requested it.
"""
import secrets
import string
import uuid
from typing import Dict, List, Optional

from app.core.errors import StoreError, UploadError
from app.core.logging_config import logger
from app.flow.stages import SETUP_STEPS, SetupStep
from app.schemas.quiz.quiz_base import (
    MAX_OPTIONS,
    MAX_QUESTIONS,
    MIN_OPTIONS,
    QuizQuestion,
    ValentineQuiz,
    completeness_errors,
    question_errors,
)
from app.services.images import ext_for_upload
from app.services.quiz_store import QuizStore, final_image_path, question_image_path

INITIAL_QUESTION_ID = "q0"
FINAL_SLOT = "final"

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_question_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))


def empty_question(question_id: Optional[str] = None) -> QuizQuestion:
    return QuizQuestion(id=question_id or generate_question_id(), question="", options=["", ""], correct_index=0)


class SetupWizard:
    def __init__(self, store: QuizStore, draft_id: Optional[str] = None):
        self.store = store
        self.draft_id = draft_id or str(uuid.uuid4())
        self.step = SetupStep.names
        self.partner_name = ""
        self.sender_name = ""
        self.questions: List[QuizQuestion] = [empty_question(INITIAL_QUESTION_ID)]
        self.final_message = ""
        self.final_image_url: Optional[str] = None
        self.errors: List[str] = []
        self.upload_errors: Dict[str, str] = {}

    @property
    def step_index(self) -> int:
        return SETUP_STEPS.index(self.step)

    # Navigation

    def validate_step(self) -> bool:
        errors = []
        if self.step == SetupStep.names:
            if not self.partner_name.strip():
                errors.append("Please add your partner's name")
            if not self.sender_name.strip():
                errors.append("Please add your name")
        elif self.step == SetupStep.questions:
            errors = question_errors(self.questions)
        self.errors = errors
        return not errors

    def next_step(self) -> bool:
        if not self.validate_step():
            return False
        if self.step_index + 1 < len(SETUP_STEPS):
            self.step = SETUP_STEPS[self.step_index + 1]
        return True

    def previous_step(self) -> bool:
        """Go back one step. Returns False when already on the first step."""
        self.errors = []
        if self.step_index == 0:
            return False
        self.step = SETUP_STEPS[self.step_index - 1]
        return True

    def finish(self) -> Optional[ValentineQuiz]:
        if not self.validate_step():
            return None
        quiz = ValentineQuiz(
            id=self.draft_id,
            partner_name=self.partner_name.strip(),
            sender_name=self.sender_name.strip(),
            questions=list(self.questions),
            final_message=self.final_message.strip() or None,
            final_image_url=self.final_image_url,
        )
        self.errors = completeness_errors(quiz)
        return None if self.errors else quiz

    # Question editing

    def _index_of(self, question_id: str) -> Optional[int]:
        for i, q in enumerate(self.questions):
            if q.id == question_id:
                return i
        return None

    def _replace(self, question_id: str, **changes) -> QuizQuestion:
        index = self._require(question_id)
        # Revalidate so correctIndex and option bounds hold after every edit.
        updated = QuizQuestion.model_validate({**self.questions[index].model_dump(), **changes})
        self.questions[index] = updated
        return updated

    def add_question(self) -> Optional[QuizQuestion]:
        if len(self.questions) >= MAX_QUESTIONS:
            return None
        question = empty_question()
        self.questions.append(question)
        return question

    def delete_question(self, question_id: str) -> bool:
        index = self._index_of(question_id)
        if index is None or len(self.questions) <= 1:
            return False
        del self.questions[index]
        self.upload_errors.pop(question_id, None)
        return True

    def set_question_text(self, question_id: str, text: str) -> QuizQuestion:
        return self._replace(question_id, question=text)

    def set_option(self, question_id: str, option_index: int, text: str) -> QuizQuestion:
        options = list(self.questions[self._require(question_id)].options)
        options[option_index] = text
        return self._replace(question_id, options=options)

    def set_correct_index(self, question_id: str, option_index: int) -> QuizQuestion:
        return self._replace(question_id, correct_index=option_index)

    def set_hint(self, question_id: str, hint: Optional[str]) -> QuizQuestion:
        return self._replace(question_id, hint=hint or None)

    def set_love_note(self, question_id: str, note: Optional[str]) -> QuizQuestion:
        return self._replace(question_id, love_note=note or None)

    def add_option(self, question_id: str) -> QuizQuestion:
        question = self.questions[self._require(question_id)]
        if len(question.options) >= MAX_OPTIONS:
            return question
        return self._replace(question_id, options=question.options + [""])

    def remove_option(self, question_id: str, option_index: int) -> QuizQuestion:
        question = self.questions[self._require(question_id)]
        if len(question.options) <= MIN_OPTIONS:
            return question
        options = [o for i, o in enumerate(question.options) if i != option_index]
        correct = question.correct_index
        if option_index == correct:
            correct = 0
        elif option_index < correct:
            correct -= 1
        return self._replace(question_id, options=options, correct_index=correct)

    def _require(self, question_id: str) -> int:
        index = self._index_of(question_id)
        if index is None:
            raise KeyError(question_id)
        return index

    # Images

    def attach_question_image(
        self, question_id: str, data: bytes, content_type: str, filename: Optional[str] = None
    ) -> Optional[str]:
        ext = ext_for_upload(content_type, filename)
        path = question_image_path(self.draft_id, question_id, ext)
        url = self._upload(question_id, path, data, content_type, filename)
        if url is None:
            return None
        # The question may have been deleted while the upload was in flight.
        if self._index_of(question_id) is None:
            logger.info(f"Discarding upload for removed question {question_id}")
            return None
        self._replace(question_id, image_url=url)
        return url

    def attach_final_image(self, data: bytes, content_type: str, filename: Optional[str] = None) -> Optional[str]:
        ext = ext_for_upload(content_type, filename)
        url = self._upload(FINAL_SLOT, final_image_path(self.draft_id, ext), data, content_type, filename)
        if url is not None:
            self.final_image_url = url
        return url

    def remove_question_image(self, question_id: str) -> QuizQuestion:
        return self._replace(question_id, image_url=None)

    def remove_final_image(self) -> None:
        self.final_image_url = None

    def _upload(self, slot: str, path: str, data: bytes, content_type: str, filename: Optional[str]) -> Optional[str]:
        self.upload_errors.pop(slot, None)
        try:
            return self.store.upload_image(path, data, content_type, filename=filename)
        except (UploadError, StoreError) as e:
            self.upload_errors[slot] = str(e) or "Upload failed"
            return None
