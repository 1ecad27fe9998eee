"""
Certification gate

Decides whether a learner qualifies for a course certificate. Reads only;
never writes.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from progress_engine.certificates.models import EligibilityReason, EligibilityResult
from progress_engine.courses.models import CertificatePolicy
from progress_engine.exams.models import FinalExamAttempt
from progress_engine.progress.models import CourseProgress


@dataclass
class Assessment:
    """Everything the gate looked at, so the issuer does not recompute it"""
    result: EligibilityResult
    progress: CourseProgress
    policy: CertificatePolicy
    exam_required: bool
    passed_attempt: Optional[FinalExamAttempt]


def _content_checks(progress: CourseProgress, require_chapters: bool, require_quizzes: bool,
                    require_assignments: bool) -> List[Tuple[EligibilityReason, str]]:
    failures = []
    if require_chapters and progress.completed_chapters < progress.total_chapters:
        failures.append((
            EligibilityReason.CHAPTERS,
            f"Complete all chapters ({progress.completed_chapters}/{progress.total_chapters})",
        ))
    if require_quizzes and progress.completed_quizzes < progress.total_quizzes:
        failures.append((
            EligibilityReason.QUIZZES,
            f"Complete all chapter quizzes ({progress.completed_quizzes}/{progress.total_quizzes})",
        ))
    if require_assignments and progress.completed_assignments < progress.total_assignments:
        failures.append((
            EligibilityReason.ASSIGNMENTS,
            f"Submit all assignments ({progress.completed_assignments}/{progress.total_assignments})",
        ))
    return failures


def _result(progress: CourseProgress, failures: List[Tuple[EligibilityReason, str]]) -> EligibilityResult:
    if not failures:
        return EligibilityResult(eligible=True, percent=progress.percent)
    reason, detail = failures[0]
    return EligibilityResult(
        eligible=False,
        reason=reason,
        detail=detail,
        unmet=[r for r, _ in failures],
        percent=progress.percent,
    )


def check_eligibility(
    progress: CourseProgress,
    policy: CertificatePolicy,
    exam_required: bool,
    passed_attempt: Optional[FinalExamAttempt],
) -> EligibilityResult:
    """
    Every condition is evaluated; the first failure in the order
    chapters, quizzes, assignments, final exam, percentage is the reason.
    """
    failures = _content_checks(
        progress,
        policy.require_all_chapters,
        policy.require_all_quizzes,
        policy.require_all_assignments,
    )
    if exam_required and passed_attempt is None:
        failures.append((EligibilityReason.FINAL_EXAM, "Pass the final exam"))
    if progress.percent < policy.min_percentage:
        failures.append((
            EligibilityReason.PERCENTAGE,
            f"Reach {policy.min_percentage}% course progress (currently {progress.percent}%)",
        ))
    return _result(progress, failures)


class CertificationGate:
    def __init__(self, aggregator, catalog, policies, attempts):
        self.aggregator = aggregator
        self.catalog = catalog
        self.policies = policies
        self.attempts = attempts

    async def assess(self, user_id: str, course_id: str) -> Assessment:
        progress = await self.aggregator.compute_course_progress(user_id, course_id)
        policy = await self.policies.get_policy(course_id)

        exam = await self.catalog.get_final_exam(course_id)
        exam_required = exam is not None and exam.is_published
        passed_attempt = None
        if exam_required:
            passed_attempt = await self.attempts.find_latest_passed_attempt(user_id, course_id)

        return Assessment(
            result=check_eligibility(progress, policy, exam_required, passed_attempt),
            progress=progress,
            policy=policy,
            exam_required=exam_required,
            passed_attempt=passed_attempt,
        )

    async def evaluate(self, user_id: str, course_id: str) -> EligibilityResult:
        assessment = await self.assess(user_id, course_id)
        return assessment.result

    async def exam_readiness(self, user_id: str, course_id: str) -> EligibilityResult:
        """Whether the learner has done all coursework needed before sitting the final exam"""
        progress = await self.aggregator.compute_course_progress(user_id, course_id)
        return _result(progress, _content_checks(progress, True, True, True))
