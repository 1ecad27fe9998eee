"""
Submission lifecycle

    (none) --submit--> SUBMITTED --grade--> GRADED --submit--> RESUBMITTED --grade--> GRADED

Submitting again before grading keeps the current state; a graded
submission may be re-graded. Every submit clears the grade fields.
"""

from enum import Enum
from typing import Optional

from progress_engine.assignments.models import SubmissionStatus
from progress_engine.errors import InvalidTransition


class SubmissionEvent(str, Enum):
    SUBMIT = "submit"
    GRADE = "grade"


TRANSITIONS = {
    None: {
        SubmissionEvent.SUBMIT: SubmissionStatus.SUBMITTED,
    },
    SubmissionStatus.SUBMITTED: {
        SubmissionEvent.SUBMIT: SubmissionStatus.SUBMITTED,
        SubmissionEvent.GRADE: SubmissionStatus.GRADED,
    },
    SubmissionStatus.GRADED: {
        SubmissionEvent.SUBMIT: SubmissionStatus.RESUBMITTED,
        SubmissionEvent.GRADE: SubmissionStatus.GRADED,
    },
    SubmissionStatus.RESUBMITTED: {
        SubmissionEvent.SUBMIT: SubmissionStatus.RESUBMITTED,
        SubmissionEvent.GRADE: SubmissionStatus.GRADED,
    },
}

GRADE_FIELDS = ("score", "feedback", "graded_at", "graded_by")


def next_status(current: Optional[SubmissionStatus], event: SubmissionEvent) -> SubmissionStatus:
    allowed = TRANSITIONS.get(current, {})
    if event not in allowed:
        state = current.value if current else "none"
        raise InvalidTransition(f"Cannot {event.value} a submission in state {state}")
    return allowed[event]
