"""
Engine error taxonomy

Validation errors are surfaced to the caller; VerificationCodeCollision and
StorageConflict are retried inside the certificate issuer.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for every error raised by the engine"""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class CourseNotFound(EngineError):
    def __init__(self, course_id: str):
        super().__init__(f"Course {course_id} has no published chapters")
        self.course_id = course_id


class ExamNotFound(EngineError):
    def __init__(self, exam_id: str):
        super().__init__(f"Final exam {exam_id} not found")
        self.exam_id = exam_id


class InvalidExam(EngineError):
    """A final exam must have at least one question to be gradable"""


class ExamNotAvailable(EngineError):
    """The final exam exists but is not published"""


class NotEligible(EngineError):
    def __init__(self, reason: str, detail: Optional[str] = None):
        super().__init__(detail or reason)
        self.reason = reason
        self.detail = detail or reason


class VerificationCodeCollision(EngineError):
    pass


class StorageConflict(EngineError):
    pass


class SubmissionNotFound(EngineError):
    def __init__(self, submission_id: str):
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class AssignmentNotAvailable(EngineError):
    pass


class InvalidTransition(EngineError):
    pass


class InvalidGrade(EngineError):
    pass


class SubmissionRejected(EngineError):
    """The assignment does not accept this kind of submission"""
