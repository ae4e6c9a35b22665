from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

MIN_OPTIONS = 2
MAX_OPTIONS = 4
MAX_QUESTIONS = 10


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuizQuestion(CamelModel):
    id: str
    question: str = ""
    options: List[str] = Field(default_factory=lambda: ["", ""])
    correct_index: int = 0
    image_url: Optional[str] = None
    hint: Optional[str] = None
    love_note: Optional[str] = None

    @model_validator(mode="after")
    def check_options(self):
        if not MIN_OPTIONS <= len(self.options) <= MAX_OPTIONS:
            raise ValueError(f"options must have between {MIN_OPTIONS} and {MAX_OPTIONS} entries")
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError("correctIndex must point at one of the options")
        return self


class QuizBase(CamelModel):
    partner_name: str
    sender_name: str
    questions: List[QuizQuestion]
    final_message: Optional[str] = None
    final_image_url: Optional[str] = None


class ValentineQuiz(QuizBase):
    id: Optional[str] = None


class QuizCreate(ValentineQuiz):
    # Lenient on presence so missing fields surface through the completeness check.
    partner_name: str = ""
    sender_name: str = ""
    questions: List[QuizQuestion] = Field(default_factory=list)


class QuizOut(QuizBase):
    pass


class QuizCreated(BaseModel):
    id: str


class ImageUploaded(BaseModel):
    url: str


def completeness_errors(quiz: QuizBase) -> List[str]:
    errors = []
    if not quiz.partner_name.strip():
        errors.append("Please add your partner's name")
    if not quiz.sender_name.strip():
        errors.append("Please add your name")
    if not quiz.questions:
        errors.append("Add at least one question")
    errors.extend(question_errors(quiz.questions))
    return errors


def question_errors(questions: List[QuizQuestion]) -> List[str]:
    errors = []
    for i, q in enumerate(questions):
        if not q.question.strip():
            errors.append(f"Question {i + 1} needs a question")
        if any(not o.strip() for o in q.options):
            errors.append(f"Question {i + 1} has empty options")
    return errors


def is_complete(quiz: QuizBase) -> bool:
    return not completeness_errors(quiz)


def strip_images(quiz: ValentineQuiz) -> ValentineQuiz:
    return quiz.model_copy(
        update={
            "final_image_url": None,
            "questions": [q.model_copy(update={"image_url": None}) for q in quiz.questions],
        }
    )
