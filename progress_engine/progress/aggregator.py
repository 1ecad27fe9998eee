"""
Progress aggregation

The only place completion percentages are derived. Certificate eligibility,
dashboards and the progress endpoint all go through ProgressAggregator so
the numbers never drift between call sites.
"""

import logging
from typing import Dict, Iterable, List

from progress_engine.assignments.models import COMPLETED_SUBMISSION_STATUSES
from progress_engine.courses.models import ChapterOutline, UnitKind
from progress_engine.errors import CourseNotFound
from progress_engine.progress.models import ChapterProgress, CompletionFact, CourseProgress
from progress_engine.scoring import percent

logger = logging.getLogger(__name__)


def fact_completes_unit(fact: CompletionFact) -> bool:
    if fact.kind == UnitKind.VIDEO:
        return fact.completed_at is not None
    if fact.kind == UnitKind.QUIZ:
        # any attempt completes a quiz; re-attempts only move the score
        return True
    if fact.kind == UnitKind.ASSIGNMENT:
        return fact.status in COMPLETED_SUBMISSION_STATUSES
    return False


def index_facts(facts: Iterable[CompletionFact]) -> Dict[tuple, CompletionFact]:
    return {(f.kind, f.unit_id): f for f in facts}


def _is_done(indexed: Dict[tuple, CompletionFact], kind: UnitKind, unit_id: str) -> bool:
    fact = indexed.get((kind, unit_id))
    return fact is not None and fact_completes_unit(fact)


def chapter_progress(chapter: ChapterOutline, indexed: Dict[tuple, CompletionFact]) -> ChapterProgress:
    video_done = _is_done(indexed, UnitKind.VIDEO, chapter.chapter_id) if chapter.has_video else False
    quizzes_done = sum(1 for q in chapter.quiz_ids if _is_done(indexed, UnitKind.QUIZ, q))
    assignments_done = sum(
        1 for a in chapter.assignment_ids if _is_done(indexed, UnitKind.ASSIGNMENT, a)
    )
    quiz_points = sum(
        indexed[(UnitKind.QUIZ, q.quiz_id)].score or 0
        for q in chapter.quizzes if (UnitKind.QUIZ, q.quiz_id) in indexed
    )

    total = (1 if chapter.has_video else 0) + len(chapter.quiz_ids) + len(chapter.assignment_ids)
    completed = (1 if video_done else 0) + quizzes_done + assignments_done
    # a content-free chapter is 0/0; report it complete rather than penalize it
    chapter_percent = percent(completed, total) if total else 100

    return ChapterProgress(
        chapter_id=chapter.chapter_id,
        title=chapter.title,
        total_units=total,
        completed_units=completed,
        percent=chapter_percent,
        is_complete=completed == total,
        has_video=chapter.has_video,
        video_complete=video_done or not chapter.has_video,
        total_quizzes=len(chapter.quiz_ids),
        completed_quizzes=quizzes_done,
        total_assignments=len(chapter.assignment_ids),
        completed_assignments=assignments_done,
        quiz_points_achieved=quiz_points,
        quiz_points_possible=sum(q.question_count for q in chapter.quizzes),
    )


def summarize_progress(
    user_id: str,
    course_id: str,
    chapters: List[ChapterOutline],
    facts: Iterable[CompletionFact],
) -> CourseProgress:
    """Pure function of the catalog and the learner's facts"""
    indexed = index_facts(facts)
    per_chapter = [chapter_progress(c, indexed) for c in chapters]

    # weighted by unit count, not an average of chapter percentages
    total = sum(c.total_units for c in per_chapter)
    completed = sum(c.completed_units for c in per_chapter)
    course_percent = percent(completed, total) if total else 100

    return CourseProgress(
        course_id=course_id,
        user_id=user_id,
        chapters=per_chapter,
        total_units=total,
        completed_units=completed,
        percent=course_percent,
        is_completely_finished=course_percent == 100,
    )


class ProgressAggregator:
    def __init__(self, catalog, facts):
        self.catalog = catalog
        self.facts = facts

    async def compute_course_progress(self, user_id: str, course_id: str) -> CourseProgress:
        chapters = await self.catalog.list_published_chapters(course_id)
        if not chapters:
            raise CourseNotFound(course_id)
        facts = await self.facts.get_completion_facts(user_id, course_id)
        progress = summarize_progress(user_id, course_id, chapters, facts)
        logger.debug(
            "Progress for user=%s course=%s: %s/%s units (%s%%)",
            user_id, course_id, progress.completed_units, progress.total_units, progress.percent,
        )
        return progress
