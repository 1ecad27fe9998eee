import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, ROOT / "tests"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from fakes import (  # noqa: E402
    FakeAttemptStore, FakeCatalog, FakeCertificateStore, FakeFactStore,
    FakePolicyStore, FakeSubmissionStore, FakeUserDirectory,
)
from progress_engine.assignments.service import SubmissionService  # noqa: E402
from progress_engine.certificates.gate import CertificationGate  # noqa: E402
from progress_engine.certificates.issuer import CertificateIssuer  # noqa: E402
from progress_engine.courses.models import (  # noqa: E402
    AssignmentOutline, ChapterOutline, QuizOutline, UnitKind,
)
from progress_engine.exams.grader import FinalExamGrader  # noqa: E402
from progress_engine.plagiarism.scorer import PlagiarismScorer  # noqa: E402
from progress_engine.progress.aggregator import ProgressAggregator  # noqa: E402
from progress_engine.progress.models import CompletionFact  # noqa: E402

COURSE_ID = "COURSE_1"
USER_ID = "user-1"


@pytest.fixture
def anyio_backend():
    """Force anyio to use asyncio backend for async tests."""
    return "asyncio"


def video_fact(chapter_id, user_id=USER_ID, course_id=COURSE_ID):
    return CompletionFact(user_id=user_id, unit_id=chapter_id, kind=UnitKind.VIDEO,
                          course_id=course_id, completed_at=datetime(2026, 1, 1))


def quiz_fact(quiz_id, score=None, user_id=USER_ID, course_id=COURSE_ID):
    return CompletionFact(user_id=user_id, unit_id=quiz_id, kind=UnitKind.QUIZ,
                          course_id=course_id, completed_at=datetime(2026, 1, 2), score=score)


def assignment_fact(assignment_id, status="submitted", user_id=USER_ID, course_id=COURSE_ID):
    return CompletionFact(user_id=user_id, unit_id=assignment_id, kind=UnitKind.ASSIGNMENT,
                          course_id=course_id, completed_at=datetime(2026, 1, 3), status=status)


@dataclass
class Engine:
    """One course's worth of fakes plus the components wired over them"""
    catalog: FakeCatalog
    submissions: FakeSubmissionStore = field(default_factory=FakeSubmissionStore)
    policies: FakePolicyStore = field(default_factory=FakePolicyStore)
    directory: FakeUserDirectory = field(default_factory=lambda: FakeUserDirectory({USER_ID: "Ada Lovelace"}))
    attempts: FakeAttemptStore = field(default_factory=FakeAttemptStore)
    certificates: FakeCertificateStore = field(default_factory=FakeCertificateStore)
    facts: FakeFactStore = None

    def __post_init__(self):
        if self.facts is None:
            self.facts = FakeFactStore(submissions=self.submissions)

    @property
    def aggregator(self):
        return ProgressAggregator(self.catalog, self.facts)

    @property
    def grader(self):
        return FinalExamGrader(self.catalog, self.attempts)

    @property
    def gate(self):
        return CertificationGate(self.aggregator, self.catalog, self.policies, self.attempts)

    def issuer(self, **kwargs):
        return CertificateIssuer(self.gate, self.certificates, self.directory, **kwargs)

    @property
    def submission_service(self):
        return SubmissionService(self.catalog, self.submissions, self.directory)

    @property
    def scorer(self):
        return PlagiarismScorer(self.submissions)


@pytest.fixture
def two_chapter_course():
    """Chapter A: video + quiz; chapter B: video + assignment; no final exam"""
    catalog = FakeCatalog(
        chapters=[
            ChapterOutline(chapter_id="ch-a", course_id=COURSE_ID, title="Basics", position=1,
                           quizzes=[QuizOutline(quiz_id="quiz-a", question_count=4)]),
            ChapterOutline(chapter_id="ch-b", course_id=COURSE_ID, title="Practice", position=2,
                           assignment_ids=["asg-b"]),
        ],
        assignments=[
            AssignmentOutline(assignment_id="asg-b", course_id=COURSE_ID, chapter_id="ch-b",
                              title="Essay", max_score=100),
        ],
    )
    return Engine(catalog=catalog)
