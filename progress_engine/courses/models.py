from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime
from enum import Enum

from progress_engine import config

# ==================== ENUMS ====================

class UnitKind(str, Enum):
    VIDEO = "VIDEO"
    QUIZ = "QUIZ"
    ASSIGNMENT = "ASSIGNMENT"

class SubmissionType(str, Enum):
    TEXT = "text"
    LINK = "link"
    FILE = "file"

# ==================== CONTENT CATALOG ====================

class ContentUnit(BaseModel):
    id: str
    chapter_id: str
    kind: UnitKind
    course_id: str

class QuizOutline(BaseModel):
    quiz_id: str
    question_count: int = 0

class ChapterOutline(BaseModel):
    """A published chapter and the gradable units attached to it"""
    chapter_id: str
    course_id: str
    title: str = ""
    position: int = 0
    has_video: bool = True
    quizzes: List[QuizOutline] = []
    assignment_ids: List[str] = []

    @property
    def quiz_ids(self) -> List[str]:
        return [q.quiz_id for q in self.quizzes]

    def units(self) -> List[ContentUnit]:
        units = []
        if self.has_video:
            # the video unit is keyed by the chapter itself
            units.append(ContentUnit(id=self.chapter_id, chapter_id=self.chapter_id,
                                     kind=UnitKind.VIDEO, course_id=self.course_id))
        for quiz_id in self.quiz_ids:
            units.append(ContentUnit(id=quiz_id, chapter_id=self.chapter_id,
                                     kind=UnitKind.QUIZ, course_id=self.course_id))
        for assignment_id in self.assignment_ids:
            units.append(ContentUnit(id=assignment_id, chapter_id=self.chapter_id,
                                     kind=UnitKind.ASSIGNMENT, course_id=self.course_id))
        return units

class AssignmentOutline(BaseModel):
    assignment_id: str
    course_id: str
    chapter_id: str
    title: str = ""
    is_published: bool = True
    due_date: Optional[datetime] = None
    allow_late_submission: bool = False
    late_penalty: float = 0.0  # percent per day late
    max_score: int = 100
    allow_text_submission: bool = True
    allow_link_submission: bool = True
    allow_file_upload: bool = True

# ==================== FINAL EXAM ====================

Answer = Union[int, str]

class ExamQuestion(BaseModel):
    question_id: str
    question: str = ""
    options: List[str] = []
    correct_answer: Answer
    points: Optional[int] = None

class FinalExam(BaseModel):
    final_exam_id: str
    course_id: str
    title: str = ""
    questions: List[ExamQuestion] = []
    passing_score: int = Field(70, ge=0, le=100)
    is_published: bool = False

class PublicExamQuestion(BaseModel):
    question_id: str
    question: str = ""
    options: List[str] = []
    points: Optional[int] = None

class PublicFinalExam(BaseModel):
    """Final exam as shown to a learner (no answer key)"""
    final_exam_id: str
    course_id: str
    title: str
    passing_score: int
    questions: List[PublicExamQuestion]

    @classmethod
    def from_exam(cls, exam: FinalExam) -> "PublicFinalExam":
        return cls(
            final_exam_id=exam.final_exam_id,
            course_id=exam.course_id,
            title=exam.title,
            passing_score=exam.passing_score,
            questions=[
                PublicExamQuestion(question_id=q.question_id, question=q.question,
                                   options=q.options, points=q.points)
                for q in exam.questions
            ],
        )

# ==================== CERTIFICATE POLICY ====================

class CertificatePolicy(BaseModel):
    course_id: str
    min_percentage: int = Field(config.DEFAULT_MIN_PERCENTAGE, ge=0, le=100)
    require_all_chapters: bool = config.DEFAULT_REQUIRE_ALL_CHAPTERS
    require_all_quizzes: bool = config.DEFAULT_REQUIRE_ALL_QUIZZES
    require_all_assignments: bool = config.DEFAULT_REQUIRE_ALL_ASSIGNMENTS

class CertificatePolicyUpdate(BaseModel):
    min_percentage: Optional[int] = Field(None, ge=0, le=100)
    require_all_chapters: Optional[bool] = None
    require_all_quizzes: Optional[bool] = None
    require_all_assignments: Optional[bool] = None
