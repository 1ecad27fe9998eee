from datetime import datetime, timedelta

import pytest

from conftest import COURSE_ID, USER_ID
from fakes import FakeAttemptStore, FakeCatalog
from progress_engine.courses.models import ExamQuestion, FinalExam
from progress_engine.errors import ExamNotAvailable, ExamNotFound, InvalidExam
from progress_engine.exams.grader import FinalExamGrader, grade_exam, is_correct, letter_grade


def _exam(n_questions=3, published=True, passing_score=70, exam_id="exam-1"):
    return FinalExam(
        final_exam_id=exam_id,
        course_id=COURSE_ID,
        title="Final",
        questions=[
            ExamQuestion(question_id=f"q{i}", question=f"Question {i}", options=["a", "b", "c"], correct_answer=1)
            for i in range(n_questions)
        ],
        passing_score=passing_score,
        is_published=published,
    )


def _grader(*exams):
    return FinalExamGrader(FakeCatalog(exams=exams), FakeAttemptStore())


@pytest.mark.parametrize("score,grade", [
    (100, "A+"), (97, "A+"), (96, "A"), (93, "A"), (92, "A-"), (90, "A-"),
    (89, "B+"), (87, "B+"), (83, "B"), (80, "B-"), (79, "C+"), (77, "C+"),
    (73, "C"), (70, "C-"), (69, "D+"), (67, "D+"), (66, "D"), (65, "D"),
    (64, "F"), (0, "F"),
])
def test_letter_grade_boundaries(score, grade):
    assert letter_grade(score) == grade


def test_zero_question_exam_is_invalid():
    with pytest.raises(InvalidExam):
        grade_exam(_exam(n_questions=0), {})


def test_answers_must_match_exactly():
    assert is_correct(1, 1)
    assert not is_correct("1", 1)
    assert not is_correct(True, 1)
    assert not is_correct(None, 1)
    assert is_correct("Paris", "Paris")
    assert not is_correct("paris", "Paris")


def test_score_is_rounded_percentage_of_correct_answers():
    result = grade_exam(_exam(n_questions=3), {"q0": 1, "q1": 1, "q2": 0})

    assert result.correct_count == 2
    assert result.score == 67
    assert result.grade == "D+"
    assert not result.passed


def test_passing_score_is_inclusive():
    exam = _exam(n_questions=4, passing_score=75)
    result = grade_exam(exam, {"q0": 1, "q1": 1, "q2": 1, "q3": 2})
    assert result.score == 75
    assert result.passed


def test_unanswered_questions_count_as_wrong():
    result = grade_exam(_exam(n_questions=2), {"q0": 1})
    assert result.score == 50


@pytest.mark.anyio
async def test_unpublished_exam_cannot_be_submitted():
    grader = _grader(_exam(published=False))
    with pytest.raises(ExamNotAvailable):
        await grader.submit(USER_ID, "exam-1", {"q0": 1})
    assert grader.attempts.attempts == []


@pytest.mark.anyio
async def test_missing_exam_is_not_found():
    with pytest.raises(ExamNotFound):
        await _grader().grade("nope", {})


@pytest.mark.anyio
async def test_grade_does_not_persist_anything():
    grader = _grader(_exam())
    result = await grader.grade("exam-1", {"q0": 1, "q1": 1, "q2": 1})
    assert result.score == 100
    assert grader.attempts.attempts == []


@pytest.mark.anyio
async def test_submit_stores_an_answer_key_snapshot():
    exam = _exam(n_questions=2)
    grader = _grader(exam)

    attempt = await grader.submit(USER_ID, "exam-1", {"q0": 1, "q1": 1})
    assert attempt.score == 100 and attempt.passed and attempt.grade == "A+"

    # an instructor edits the answer key afterwards
    exam.questions[0].correct_answer = 2

    stored = grader.attempts.attempts[0]
    assert stored.questions[0].correct_answer == 1
    assert stored.score == 100
    assert stored.answers == {"q0": 1, "q1": 1}
    assert stored.course_id == COURSE_ID


@pytest.mark.anyio
async def test_history_is_newest_first_and_best_prefers_higher_score():
    grader = _grader(_exam(n_questions=2))
    first = await grader.submit(USER_ID, "exam-1", {"q0": 1, "q1": 1})
    second = await grader.submit(USER_ID, "exam-1", {"q0": 0})
    second.completed_at = first.completed_at + timedelta(minutes=5)

    history = await grader.history(USER_ID, COURSE_ID)
    assert [a.attempt_id for a in history] == [second.attempt_id, first.attempt_id]

    best = await grader.best_attempt(USER_ID, COURSE_ID)
    assert best.attempt_id == first.attempt_id


@pytest.mark.anyio
async def test_best_attempt_is_none_without_attempts():
    assert await _grader(_exam()).best_attempt(USER_ID, COURSE_ID) is None
