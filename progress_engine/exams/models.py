from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from progress_engine.courses.models import Answer, ExamQuestion

class ExamSubmission(BaseModel):
    answers: Dict[str, Optional[Answer]] = Field(default_factory=dict)

class ExamResult(BaseModel):
    final_exam_id: str
    total_questions: int
    correct_count: int
    score: int
    passed: bool
    grade: str

class FinalExamAttempt(BaseModel):
    """Immutable record of one submission, with the answer key it was graded against"""
    attempt_id: str
    user_id: str
    final_exam_id: str
    course_id: str
    answers: Dict[str, Optional[Answer]]
    questions: List[ExamQuestion]
    correct_count: int
    total_questions: int
    score: int
    passed: bool
    grade: str
    completed_at: datetime

class AttemptSummary(BaseModel):
    attempt_id: str
    final_exam_id: str
    score: int
    passed: bool
    grade: str
    completed_at: datetime

    @classmethod
    def from_attempt(cls, attempt: FinalExamAttempt) -> "AttemptSummary":
        return cls(
            attempt_id=attempt.attempt_id,
            final_exam_id=attempt.final_exam_id,
            score=attempt.score,
            passed=attempt.passed,
            grade=attempt.grade,
            completed_at=attempt.completed_at,
        )
