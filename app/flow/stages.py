from enum import Enum


class Screen(str, Enum):
    landing = "landing"
    loading = "loading"
    invalid_link = "invalid-link"
    setup = "setup"
    preview = "preview"
    quiz = "quiz"
    final_reveal = "final-reveal"


class SetupStep(str, Enum):
    names = "names"
    questions = "questions"
    final_message = "final-message"


SETUP_STEPS = [SetupStep.names, SetupStep.questions, SetupStep.final_message]


class RevealStage(str, Enum):
    score = "score"
    envelope = "envelope"
    big_question = "big-question"
    response = "response"
    memory_wall = "memory-wall"


class Answer(str, Enum):
    yes = "yes"
    no = "no"
