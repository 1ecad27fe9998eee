"""
Certificate issuance

At most one certificate per (user, course). Storage enforces that with a
unique index; the issuer treats losing an insert race as success and returns
the winner's record.
"""

import logging
import secrets
import string
import time
import uuid
from datetime import datetime
from typing import Callable, Tuple

from progress_engine import config
from progress_engine.certificates.gate import Assessment
from progress_engine.certificates.models import Certificate
from progress_engine.errors import NotEligible, StorageConflict, VerificationCodeCollision
from progress_engine.scoring import round_half_up

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_SUFFIX_LENGTH = 10


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(CODE_ALPHABET[26 + rem] if rem < 10 else CODE_ALPHABET[rem - 10])
    return "".join(reversed(digits)) or "0"


def generate_verification_code() -> str:
    """CERT-<millisecond timestamp, base36>-<random suffix>"""
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_SUFFIX_LENGTH))
    return f"CERT-{stamp}-{suffix}"


def certificate_scores(assessment: Assessment) -> Tuple[float, int, float]:
    """
    (achieved, total, percentage) from the most recent *passed* final exam
    attempt, else from quiz points. A later failing attempt never lowers the
    score of a learner who already qualified.
    """
    attempt = assessment.passed_attempt
    if attempt is not None:
        achieved, total = float(attempt.correct_count), attempt.total_questions
    else:
        achieved = float(assessment.progress.quiz_points_achieved)
        total = assessment.progress.quiz_points_possible
    if total > 0:
        percentage = round_half_up(100 * achieved / total, 2)
    else:
        percentage = float(assessment.progress.percent)
    return achieved, total, percentage


class CertificateIssuer:
    def __init__(
        self,
        gate,
        certificates,
        directory,
        code_factory: Callable[[], str] = generate_verification_code,
        max_attempts: int = config.CERTIFICATE_MAX_ISSUE_ATTEMPTS,
    ):
        self.gate = gate
        self.certificates = certificates
        self.directory = directory
        self.code_factory = code_factory
        self.max_attempts = max_attempts

    async def issue_or_get(self, user_id: str, course_id: str) -> Certificate:
        existing = await self.certificates.find_certificate(user_id, course_id)
        if existing is not None:
            return existing

        assessment = await self.gate.assess(user_id, course_id)
        if not assessment.result.eligible:
            raise NotEligible(assessment.result.reason.value, assessment.result.detail)

        student_name = await self.directory.get_display_name(user_id)
        draft = self._draft(user_id, course_id, student_name, assessment)

        for attempt in range(1, self.max_attempts + 1):
            record = draft.copy(update={
                "certificate_id": f"CERT_{uuid.uuid4().hex[:12].upper()}",
                "verification_code": self.code_factory(),
            })
            try:
                inserted, stored = await self.certificates.insert_certificate_if_absent(record)
            except VerificationCodeCollision:
                logger.warning(
                    "Verification code collision for user=%s course=%s (attempt %s/%s)",
                    user_id, course_id, attempt, self.max_attempts,
                )
                continue
            except StorageConflict:
                # lost the race but the winner is not readable yet
                logger.warning(
                    "Certificate insert conflict for user=%s course=%s (attempt %s/%s)",
                    user_id, course_id, attempt, self.max_attempts,
                )
                existing = await self.certificates.find_certificate(user_id, course_id)
                if existing is not None:
                    return existing
                continue

            if inserted:
                logger.info(
                    "Certificate %s issued: user=%s course=%s code=%s",
                    stored.certificate_id, user_id, course_id, stored.verification_code,
                )
            else:
                logger.info("Certificate for user=%s course=%s already issued concurrently", user_id, course_id)
            return stored

        raise StorageConflict(
            f"Could not persist certificate for user {user_id} course {course_id} "
            f"after {self.max_attempts} attempts"
        )

    def _draft(self, user_id: str, course_id: str, student_name: str, assessment: Assessment) -> Certificate:
        progress = assessment.progress
        achieved, total, percentage = certificate_scores(assessment)
        return Certificate(
            certificate_id="",
            user_id=user_id,
            course_id=course_id,
            student_name=student_name,
            total_chapters=progress.total_chapters,
            completed_chapters=progress.completed_chapters,
            total_quizzes=progress.total_quizzes,
            completed_quizzes=progress.completed_quizzes,
            total_assignments=progress.total_assignments,
            completed_assignments=progress.completed_assignments,
            total_score=total,
            achieved_score=achieved,
            percentage=percentage,
            final_exam_grade=assessment.passed_attempt.grade if assessment.passed_attempt else None,
            verification_code="",
            issue_date=datetime.utcnow(),
        )
