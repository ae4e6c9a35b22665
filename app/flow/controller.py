"""
App-level screen flow.

landing -> setup -> preview -> quiz -> final-reveal, with share links
(``?id=`` or ``?v=``) jumping straight to the quiz. The launch query is passed
in as a ``LaunchContext``; time only moves through ``tick()``.
"""
import uuid
from typing import Optional

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.core.logging_config import logger
from app.flow.final_reveal import FinalReveal
from app.flow.quiz_play import QuizPlay
from app.flow.setup_wizard import SetupWizard
from app.flow.stages import Screen
from app.schemas.quiz.quiz_base import ValentineQuiz
from app.services.quiz_store import QuizStore
from app.services.share_link import (
    LaunchContext,
    build_share_url_from_id,
    build_share_url_from_quiz,
    decode_quiz,
)


class FlowController:
    def __init__(self, store: QuizStore, base_url: str, launch: Optional[LaunchContext] = None):
        self.store = store
        self.base_url = base_url
        self.launch = launch or LaunchContext()
        self.screen = Screen.landing
        self.quiz: Optional[ValentineQuiz] = None
        self.from_link = False
        self.wizard: Optional[SetupWizard] = None
        self.play: Optional[QuizPlay] = None
        self.reveal: Optional[FinalReveal] = None
        self.share_url: Optional[str] = None
        self.save_error: Optional[str] = None
        self._pending_id: Optional[str] = None
        self._boot()

    def _boot(self) -> None:
        if self.launch.id_param:
            self._pending_id = self.launch.id_param
            self.screen = Screen.loading
            return
        if self.launch.v_param:
            quiz = decode_quiz(self.launch.v_param)
            # The embedded quiz is consumed once; a reload starts fresh.
            self.launch = LaunchContext()
            if quiz is not None:
                self._enter_quiz(quiz, from_link=True)

    def resolve_pending_load(self) -> Screen:
        if self.screen != Screen.loading or self._pending_id is None:
            return self.screen
        quiz_id, self._pending_id = self._pending_id, None
        try:
            quiz = self.store.fetch_quiz(quiz_id)
        except (NotFoundError, StoreError):
            self.screen = Screen.invalid_link
            return self.screen
        self._enter_quiz(quiz, from_link=True)
        return self.screen

    def recover_from_invalid_link(self) -> None:
        self.launch = LaunchContext()
        self.screen = Screen.landing

    # Creator path

    def create_new(self) -> SetupWizard:
        self._expect(Screen.landing)
        self.wizard = SetupWizard(self.store)
        self.screen = Screen.setup
        return self.wizard

    def setup_back(self) -> None:
        self._expect(Screen.setup)
        if not self.wizard.previous_step():
            self.screen = Screen.landing

    def setup_complete(self) -> bool:
        self._expect(Screen.setup)
        quiz = self.wizard.finish()
        if quiz is None:
            return False
        self.quiz = quiz
        self.share_url = None
        self.save_error = None
        self.screen = Screen.preview
        return True

    def edit(self) -> None:
        self._expect(Screen.preview)
        self.screen = Screen.setup

    def generate_share_link(self) -> Optional[str]:
        self._expect(Screen.preview)
        self.save_error = None
        try:
            quiz_id = self.store.create_quiz(self.quiz)
        except ValidationError as e:
            self.save_error = str(e)
            return None
        except StoreError as e:
            logger.warning(f"Saving quiz failed: {e}")
            self.save_error = str(e) or "Failed to save quiz"
            return None
        self.share_url = build_share_url_from_id(quiz_id, self.base_url)
        # A saved id is taken; later saves of an edited draft need a new one.
        next_id = str(uuid.uuid4())
        self.quiz = self.quiz.model_copy(update={"id": next_id})
        if self.wizard is not None:
            self.wizard.draft_id = next_id
        return self.share_url

    def offline_share_link(self) -> str:
        return build_share_url_from_quiz(self.quiz, self.base_url)

    def play_preview(self) -> None:
        self._expect(Screen.preview)
        self._enter_quiz(self.quiz, from_link=False)

    # Player path

    def _enter_quiz(self, quiz: ValentineQuiz, from_link: bool) -> None:
        self.quiz = quiz
        self.from_link = from_link
        self.play = QuizPlay(quiz.questions)
        self.reveal = None
        self.screen = Screen.quiz

    def next_question(self) -> None:
        self._expect(Screen.quiz)
        if self.play.next():
            self.reveal = FinalReveal(self.play.score, self.quiz.questions)
            self.screen = Screen.final_reveal

    def tick(self, seconds: float) -> None:
        if self.screen == Screen.final_reveal:
            self.reveal.tick(seconds)

    def restart(self) -> None:
        self.screen = Screen.landing
        self.quiz = None
        self.from_link = False
        self.wizard = None
        self.play = None
        self.reveal = None
        self.share_url = None
        self.save_error = None

    def _expect(self, screen: Screen) -> None:
        if self.screen != screen:
            raise RuntimeError(f"Not available on the {self.screen.value} screen")
