from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from enum import Enum

# ==================== ELIGIBILITY ====================

class EligibilityReason(str, Enum):
    """Unmet conditions, in the order they are reported"""
    CHAPTERS = "chapters"
    QUIZZES = "quizzes"
    ASSIGNMENTS = "assignments"
    FINAL_EXAM = "final_exam"
    PERCENTAGE = "percentage"

class EligibilityResult(BaseModel):
    eligible: bool
    reason: Optional[EligibilityReason] = None
    detail: Optional[str] = None
    unmet: List[EligibilityReason] = []
    percent: int = 0

# ==================== CERTIFICATE ====================

class Certificate(BaseModel):
    certificate_id: str
    user_id: str
    course_id: str
    student_name: str
    total_chapters: int
    completed_chapters: int
    total_quizzes: int
    completed_quizzes: int
    total_assignments: int
    completed_assignments: int
    total_score: int
    achieved_score: float
    percentage: float
    final_exam_grade: Optional[str] = None
    verification_code: str
    issue_date: datetime

class CertificateVerification(BaseModel):
    valid: bool
    message: str
    verification_code: Optional[str] = None
    student_name: Optional[str] = None
    course_id: Optional[str] = None
    issued_at: Optional[datetime] = None
