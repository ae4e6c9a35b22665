from typing import List, Optional

from app.schemas.quiz.quiz_base import QuizQuestion


class QuizPlay:
    """
    Walks the partner through the questions.

    ``index`` is -1 while the intro is showing. After an answer is selected the
    result is shown; ``next()`` then shows the question's love note (once, if
    it has one) before moving on. Score and streak only feed the reveal and
    feedback, they are never stored.
    """

    def __init__(self, questions: List[QuizQuestion]):
        self.questions = questions
        self.index = -1
        self.selected: Optional[int] = None
        self.showing_hint = False
        self.showing_love_note = False
        self.score = 0
        self.streak = 0
        self.finished = False

    @property
    def current(self) -> Optional[QuizQuestion]:
        if 0 <= self.index < len(self.questions):
            return self.questions[self.index]
        return None

    @property
    def answered(self) -> bool:
        return self.selected is not None

    @property
    def last_answer_correct(self) -> Optional[bool]:
        if self.current is None or self.selected is None:
            return None
        return self.selected == self.current.correct_index

    @property
    def progress(self) -> float:
        if self.index < 0 or not self.questions:
            return 0.0
        return (self.index + 1) / len(self.questions)

    def start(self) -> None:
        if self.index == -1 and self.questions:
            self.index = 0

    def show_hint(self) -> Optional[str]:
        question = self.current
        if question is None or self.answered or not question.hint:
            return None
        self.showing_hint = True
        return question.hint

    def select(self, option_index: int) -> bool:
        """Answer the current question. Returns whether the answer was correct."""
        question = self.current
        if question is None or self.answered:
            raise RuntimeError("No question is waiting for an answer")
        if not 0 <= option_index < len(question.options):
            raise IndexError(option_index)

        self.selected = option_index
        self.showing_hint = False
        if option_index == question.correct_index:
            self.score += 1
            self.streak += 1
            return True
        self.streak = 0
        return False

    def next(self) -> bool:
        """Advance past the answered question. Returns True once the quiz is over."""
        question = self.current
        if question is None or not self.answered:
            raise RuntimeError("Answer the question before moving on")

        if question.love_note and not self.showing_love_note:
            self.showing_love_note = True
            return False

        if self.index + 1 >= len(self.questions):
            self.finished = True
            return True

        self.index += 1
        self.selected = None
        self.showing_hint = False
        self.showing_love_note = False
        return False
