import logging
import math
import uuid
from datetime import datetime
from typing import Optional

from progress_engine.assignments.models import AssignmentSubmission, SubmissionCreate
from progress_engine.assignments.state import GRADE_FIELDS, SubmissionEvent, next_status
from progress_engine.courses.models import AssignmentOutline, SubmissionType
from progress_engine.errors import (
    AssignmentNotAvailable, InvalidGrade, InvalidTransition, SubmissionNotFound, SubmissionRejected
)
from progress_engine.scoring import round_half_up

logger = logging.getLogger(__name__)

_TYPE_FLAGS = {
    SubmissionType.TEXT: ("allow_text_submission", "Text submissions"),
    SubmissionType.LINK: ("allow_link_submission", "Link submissions"),
    SubmissionType.FILE: ("allow_file_upload", "File uploads"),
}


def days_late(due_date: Optional[datetime], now: datetime) -> int:
    if due_date is None or now <= due_date:
        return 0
    return math.ceil((now - due_date).total_seconds() / 86400)


def _read_guard(submission: AssignmentSubmission) -> dict:
    """Identifies the version of a submission the caller read"""
    return {"status": submission.status.value, "submitted_at": submission.submitted_at}


def apply_late_penalty(score: int, assignment: AssignmentOutline, late_days: int) -> int:
    """Percent-per-day penalty, floored at zero and rounded half up"""
    final = float(score)
    if late_days and assignment.allow_late_submission:
        final = max(0.0, score - score * assignment.late_penalty * late_days / 100)
    return int(round_half_up(final))


class SubmissionService:
    def __init__(self, catalog, submissions, directory):
        self.catalog = catalog
        self.submissions = submissions
        self.directory = directory

    async def _assignment(self, assignment_id: str) -> AssignmentOutline:
        assignment = await self.catalog.get_assignment(assignment_id)
        if assignment is None or not assignment.is_published:
            raise AssignmentNotAvailable(f"Assignment {assignment_id} is not available")
        return assignment

    async def submit(
        self,
        user_id: str,
        assignment_id: str,
        payload: SubmissionCreate,
        now: Optional[datetime] = None,
    ) -> AssignmentSubmission:
        now = now or datetime.utcnow()
        assignment = await self._assignment(assignment_id)

        flag, label = _TYPE_FLAGS[payload.submission_type]
        if not getattr(assignment, flag):
            raise SubmissionRejected(f"{label} not allowed for this assignment")

        late_days = days_late(assignment.due_date, now)
        if late_days and not assignment.allow_late_submission:
            raise AssignmentNotAvailable("This assignment no longer accepts submissions")

        existing = await self.submissions.find_user_submission(assignment_id, user_id)
        status = next_status(existing.status if existing else None, SubmissionEvent.SUBMIT)

        fields = {
            **payload.dict(),
            "submission_type": payload.submission_type.value,
            "status": status.value,
            "is_late": late_days > 0,
            "days_late": late_days,
            "submitted_at": now,
            "plagiarism_score": None,
            "plagiarism_report": None,
            "plagiarism_checked_at": None,
        }
        fields.update({name: None for name in GRADE_FIELDS})

        if existing:
            submission = await self.submissions.update_submission(
                existing.submission_id, _read_guard(existing), fields
            )
            if submission is None:
                raise InvalidTransition(
                    f"Submission {existing.submission_id} changed while resubmitting; try again"
                )
        else:
            submission = AssignmentSubmission(
                submission_id=f"SUB_{uuid.uuid4().hex[:12].upper()}",
                assignment_id=assignment_id,
                course_id=assignment.course_id,
                chapter_id=assignment.chapter_id,
                user_id=user_id,
                student_name=await self.directory.get_display_name(user_id),
                **fields,
            )
            await self.submissions.insert_submission(submission)

        logger.info(
            "Submission %s for assignment %s by user %s -> %s",
            submission.submission_id, assignment_id, user_id, status.value,
        )
        return submission

    async def grade(
        self,
        submission_id: str,
        grader_id: str,
        score: int,
        feedback: Optional[str] = None,
    ) -> AssignmentSubmission:
        submission = await self.submissions.get_submission(submission_id)
        if submission is None:
            raise SubmissionNotFound(submission_id)
        assignment = await self.catalog.get_assignment(submission.assignment_id)
        if assignment is None:
            raise AssignmentNotAvailable(f"Assignment {submission.assignment_id} is not available")

        if score < 0 or score > assignment.max_score:
            raise InvalidGrade(f"Score must be between 0 and {assignment.max_score}")

        status = next_status(submission.status, SubmissionEvent.GRADE)
        # grade fields only; text and plagiarism report stay as stored
        graded = await self.submissions.update_submission(submission_id, _read_guard(submission), {
            "status": status.value,
            "score": apply_late_penalty(score, assignment, submission.days_late),
            "feedback": feedback,
            "graded_at": datetime.utcnow(),
            "graded_by": grader_id,
        })
        if graded is None:
            raise InvalidTransition(f"Submission {submission_id} changed while it was being graded")
        logger.info("Submission %s graded by %s: %s", submission_id, grader_id, graded.score)
        return graded
