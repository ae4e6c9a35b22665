from typing import List, Optional

from app.flow.stages import Answer, RevealStage
from app.schemas.quiz.quiz_base import QuizQuestion

SCORE_REVEAL_MS = 2500
MEMORY_INTERVAL_MS = 400


class FinalReveal:
    def __init__(self, score: int, questions: List[QuizQuestion]):
        self.score = score
        self.total = len(questions)
        self.memories = [q for q in questions if q.image_url or q.love_note]
        self.stage = RevealStage.score
        self.response: Optional[Answer] = None
        self.visible_memories = 0
        self._elapsed_ms = 0

    def tick(self, seconds: float) -> None:
        self._elapsed_ms += int(round(seconds * 1000))
        if self.stage == RevealStage.score:
            if self._elapsed_ms >= SCORE_REVEAL_MS:
                self.stage = RevealStage.envelope
                self._elapsed_ms = 0
        elif self.stage == RevealStage.memory_wall:
            while self.visible_memories < len(self.memories) and self._elapsed_ms >= MEMORY_INTERVAL_MS:
                self.visible_memories += 1
                self._elapsed_ms -= MEMORY_INTERVAL_MS
            if self.visible_memories >= len(self.memories):
                self._elapsed_ms = 0
        else:
            self._elapsed_ms = 0

    @property
    def all_memories_visible(self) -> bool:
        return self.visible_memories >= len(self.memories)

    def open_envelope(self) -> None:
        self._expect(RevealStage.envelope)
        self.stage = RevealStage.big_question

    def respond(self, answer) -> None:
        self._expect(RevealStage.big_question)
        self.response = Answer(answer)
        self.stage = RevealStage.response

    def show_memories(self) -> None:
        self._expect(RevealStage.response)
        self.stage = RevealStage.memory_wall
        self.visible_memories = 0
        self._elapsed_ms = 0

    def _expect(self, stage: RevealStage) -> None:
        if self.stage != stage:
            raise RuntimeError(f"Cannot do that during the {self.stage.value} stage")
