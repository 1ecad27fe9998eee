from pydantic import BaseModel, Field, validator
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum

from progress_engine.courses.models import SubmissionType

# ==================== ENUMS ====================

class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    GRADED = "graded"
    RESUBMITTED = "resubmitted"

# Any of these establishes the assignment unit as done; grading is not required
COMPLETED_SUBMISSION_STATUSES = {s.value for s in SubmissionStatus}

# ==================== SUBMISSION RECORD ====================

class AssignmentSubmission(BaseModel):
    submission_id: str
    assignment_id: str
    course_id: str
    chapter_id: str
    user_id: str
    student_name: str = "Student"
    submission_type: SubmissionType
    text_content: Optional[str] = None
    link_url: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    is_late: bool = False
    days_late: int = 0
    submitted_at: datetime
    score: Optional[int] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[str] = None
    plagiarism_score: Optional[int] = None
    plagiarism_report: Optional[Dict[str, Any]] = None
    plagiarism_checked_at: Optional[datetime] = None

# ==================== REQUESTS ====================

class SubmissionCreate(BaseModel):
    submission_type: SubmissionType
    text_content: Optional[str] = None
    link_url: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None

    @validator("text_content", always=True)
    def text_required_for_text_submissions(cls, v, values):
        if values.get("submission_type") == SubmissionType.TEXT and not (v or "").strip():
            raise ValueError("text_content is required for text submissions")
        return v

    @validator("link_url", always=True)
    def link_required_for_link_submissions(cls, v, values):
        if values.get("submission_type") == SubmissionType.LINK and not v:
            raise ValueError("link_url is required for link submissions")
        return v

    @validator("file_url", always=True)
    def file_required_for_file_submissions(cls, v, values):
        if values.get("submission_type") == SubmissionType.FILE and not v:
            raise ValueError("file_url is required for file submissions")
        return v

class GradeRequest(BaseModel):
    score: int = Field(..., ge=0)
    feedback: Optional[str] = None
