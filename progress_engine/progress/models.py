from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from progress_engine.courses.models import UnitKind

# ==================== FACTS ====================

class CompletionFact(BaseModel):
    """One learner interaction per (user_id, unit_id); later facts overwrite earlier ones"""
    user_id: str
    unit_id: str
    kind: UnitKind
    course_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    score: Optional[float] = None
    status: Optional[str] = None  # assignment submissions only

# ==================== DERIVED PROGRESS ====================

class ChapterProgress(BaseModel):
    chapter_id: str
    title: str = ""
    total_units: int
    completed_units: int
    percent: int
    is_complete: bool
    has_video: bool = True
    video_complete: bool
    total_quizzes: int = 0
    completed_quizzes: int = 0
    total_assignments: int = 0
    completed_assignments: int = 0
    # one point per quiz question; attempts carry the points scored
    quiz_points_achieved: float = 0.0
    quiz_points_possible: int = 0

class CourseProgress(BaseModel):
    course_id: str
    user_id: str
    chapters: List[ChapterProgress]
    total_units: int
    completed_units: int
    percent: int
    is_completely_finished: bool

    @property
    def total_chapters(self) -> int:
        return len(self.chapters)

    @property
    def completed_chapters(self) -> int:
        return sum(1 for c in self.chapters if c.video_complete)

    @property
    def total_quizzes(self) -> int:
        return sum(c.total_quizzes for c in self.chapters)

    @property
    def completed_quizzes(self) -> int:
        return sum(c.completed_quizzes for c in self.chapters)

    @property
    def total_assignments(self) -> int:
        return sum(c.total_assignments for c in self.chapters)

    @property
    def completed_assignments(self) -> int:
        return sum(c.completed_assignments for c in self.chapters)

    @property
    def quiz_points_achieved(self) -> float:
        return sum(c.quiz_points_achieved for c in self.chapters)

    @property
    def quiz_points_possible(self) -> int:
        return sum(c.quiz_points_possible for c in self.chapters)

    def summary(self) -> dict:
        return {
            "total_chapters": self.total_chapters,
            "completed_chapters": self.completed_chapters,
            "total_quizzes": self.total_quizzes,
            "completed_quizzes": self.completed_quizzes,
            "total_assignments": self.total_assignments,
            "completed_assignments": self.completed_assignments,
        }

class CourseProgressResponse(CourseProgress):
    has_certificate: bool = False
    certificate_id: Optional[str] = None
