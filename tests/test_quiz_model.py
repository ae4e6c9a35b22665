import pytest
from pydantic import ValidationError as ModelValidationError

from app.schemas.quiz.quiz_base import (
    QuizQuestion,
    ValentineQuiz,
    completeness_errors,
    is_complete,
    strip_images,
)


def test_complete_quiz(sample_quiz):
    assert is_complete(sample_quiz)
    assert completeness_errors(sample_quiz) == []


def test_empty_names_are_incomplete(sample_quiz):
    quiz = sample_quiz.model_copy(update={"partner_name": "   "})
    assert not is_complete(quiz)
    assert "Please add your partner's name" in completeness_errors(quiz)

    quiz = sample_quiz.model_copy(update={"sender_name": ""})
    assert "Please add your name" in completeness_errors(quiz)


def test_quiz_without_questions_is_incomplete(sample_quiz):
    quiz = sample_quiz.model_copy(update={"questions": []})
    assert not is_complete(quiz)


def test_empty_question_text_is_incomplete(sample_quiz):
    questions = list(sample_quiz.questions)
    questions[1] = questions[1].model_copy(update={"question": " "})
    quiz = sample_quiz.model_copy(update={"questions": questions})
    assert completeness_errors(quiz) == ["Question 2 needs a question"]


def test_empty_option_is_incomplete(sample_quiz):
    questions = list(sample_quiz.questions)
    questions[0] = questions[0].model_copy(update={"options": ["At a café", ""]})
    quiz = sample_quiz.model_copy(update={"questions": questions})
    assert completeness_errors(quiz) == ["Question 1 has empty options"]


@pytest.mark.parametrize("correct_index", [-1, 2, 5])
def test_correct_index_out_of_bounds_cannot_be_built(correct_index):
    with pytest.raises(ModelValidationError):
        QuizQuestion(id="q0", question="?", options=["a", "b"], correct_index=correct_index)


@pytest.mark.parametrize("options", [["only"], ["a", "b", "c", "d", "e"]])
def test_option_count_is_bounded(options):
    with pytest.raises(ModelValidationError):
        QuizQuestion(id="q0", question="?", options=options, correct_index=0)


def test_wire_format_is_camel_case(sample_quiz):
    dumped = sample_quiz.model_dump(by_alias=True, exclude_none=True)
    assert dumped["partnerName"] == "Sam"
    assert dumped["questions"][0]["correctIndex"] == 0
    assert dumped["questions"][0]["loveNote"] == "Best latte of my life."
    assert "finalImageUrl" not in dumped

    parsed = ValentineQuiz.model_validate(dumped)
    assert parsed == sample_quiz


def test_strip_images_clears_every_image_field(sample_quiz):
    questions = [q.model_copy(update={"image_url": f"https://x/{q.id}.jpg"}) for q in sample_quiz.questions]
    quiz = sample_quiz.model_copy(update={"questions": questions, "final_image_url": "https://x/y.jpg"})

    stripped = strip_images(quiz)

    assert stripped.final_image_url is None
    assert all(q.image_url is None for q in stripped.questions)
    assert quiz.final_image_url == "https://x/y.jpg"
    assert stripped.questions[0].hint == "Think coffee"
