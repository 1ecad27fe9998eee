"""
Final exam grading

Exact-match scoring against the exam's answer key, a fixed letter-grade
table, and pass/fail against the exam's passing score.
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from progress_engine.courses.models import Answer, ExamQuestion, FinalExam
from progress_engine.errors import ExamNotAvailable, ExamNotFound, InvalidExam
from progress_engine.exams.models import ExamResult, FinalExamAttempt
from progress_engine.scoring import percent

logger = logging.getLogger(__name__)

# Checked top-down; a score equal to a threshold earns that grade
GRADE_THRESHOLDS = [
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (65, "D"),
]


def letter_grade(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def is_correct(submitted: Optional[Answer], correct: Answer) -> bool:
    # 1 and "1" are different answers; so are True and 1
    return type(submitted) is type(correct) and submitted == correct


def count_correct(questions: List[ExamQuestion], answers: Dict[str, Optional[Answer]]) -> int:
    return sum(1 for q in questions if is_correct(answers.get(q.question_id), q.correct_answer))


def grade_exam(exam: FinalExam, answers: Dict[str, Optional[Answer]]) -> ExamResult:
    total = len(exam.questions)
    if total == 0:
        raise InvalidExam(f"Final exam {exam.final_exam_id} has no questions")

    correct = count_correct(exam.questions, answers)
    score = percent(correct, total)
    return ExamResult(
        final_exam_id=exam.final_exam_id,
        total_questions=total,
        correct_count=correct,
        score=score,
        passed=score >= exam.passing_score,
        grade=letter_grade(score),
    )


class FinalExamGrader:
    def __init__(self, catalog, attempts):
        self.catalog = catalog
        self.attempts = attempts

    async def load_exam(self, final_exam_id: str) -> FinalExam:
        exam = await self.catalog.get_final_exam_by_id(final_exam_id)
        if exam is None:
            raise ExamNotFound(final_exam_id)
        if not exam.is_published:
            raise ExamNotAvailable(f"Final exam {final_exam_id} is not published")
        return exam

    async def grade(self, final_exam_id: str, answers: Dict[str, Optional[Answer]]) -> ExamResult:
        exam = await self.load_exam(final_exam_id)
        return grade_exam(exam, answers)

    async def submit(
        self, user_id: str, final_exam_id: str, answers: Dict[str, Optional[Answer]]
    ) -> FinalExamAttempt:
        """Grade and persist one attempt. Attempt-count policy belongs to the caller."""
        exam = await self.load_exam(final_exam_id)
        result = grade_exam(exam, answers)

        attempt = FinalExamAttempt(
            attempt_id=f"ATT_{uuid.uuid4().hex[:12].upper()}",
            user_id=user_id,
            final_exam_id=exam.final_exam_id,
            course_id=exam.course_id,
            answers=dict(answers),
            # snapshot, so later edits to the exam never regrade history
            questions=[q.copy(deep=True) for q in exam.questions],
            correct_count=result.correct_count,
            total_questions=result.total_questions,
            score=result.score,
            passed=result.passed,
            grade=result.grade,
            completed_at=datetime.utcnow(),
        )
        await self.attempts.insert_attempt(attempt)
        logger.info(
            "Final exam attempt %s recorded: user=%s exam=%s score=%s grade=%s passed=%s",
            attempt.attempt_id, user_id, final_exam_id, attempt.score, attempt.grade, attempt.passed,
        )
        return attempt

    async def history(self, user_id: str, course_id: str) -> List[FinalExamAttempt]:
        return await self.attempts.list_attempts(user_id, course_id)

    async def best_attempt(self, user_id: str, course_id: str) -> Optional[FinalExamAttempt]:
        return await self.attempts.find_best_attempt(user_id, course_id)
