from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime
from typing import List, Optional

from progress_engine.courses.models import (
    ChapterOutline, QuizOutline, AssignmentOutline, FinalExam, CertificatePolicy
)

# ==================== CONTENT CATALOG (READ-ONLY) ====================

class MongoCatalog:
    """Read-only view of a course's gradable units, owned by the authoring store"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def list_published_chapters(self, course_id: str) -> List[ChapterOutline]:
        chapters = await self.db.chapters.find(
            {"course_id": course_id, "is_published": True}
        ).sort("position", 1).to_list(length=None)
        if not chapters:
            return []

        chapter_ids = [c["chapter_id"] for c in chapters]
        quizzes = await self.db.quizzes.find(
            {"chapter_id": {"$in": chapter_ids}, "is_published": True}
        ).to_list(length=None)
        assignments = await self.db.assignments.find(
            {"chapter_id": {"$in": chapter_ids}, "is_published": True}
        ).to_list(length=None)

        outlines = []
        for chapter in chapters:
            cid = chapter["chapter_id"]
            outlines.append(ChapterOutline(
                chapter_id=cid,
                course_id=course_id,
                title=chapter.get("title", ""),
                position=chapter.get("position", 0),
                has_video=chapter.get(
                    "has_video", bool(chapter.get("video_url") or chapter.get("chapter_videos"))
                ),
                quizzes=[
                    QuizOutline(quiz_id=q["quiz_id"], question_count=q.get("question_count", 0))
                    for q in quizzes if q["chapter_id"] == cid
                ],
                assignment_ids=[a["assignment_id"] for a in assignments if a["chapter_id"] == cid],
            ))
        return outlines

    async def get_final_exam(self, course_id: str) -> Optional[FinalExam]:
        """The course's final exam; a published one wins over drafts"""
        doc = await self.db.final_exams.find_one(
            {"course_id": course_id},
            sort=[("is_published", -1), ("created_at", -1)]
        )
        return FinalExam(**doc) if doc else None

    async def get_final_exam_by_id(self, final_exam_id: str) -> Optional[FinalExam]:
        doc = await self.db.final_exams.find_one({"final_exam_id": final_exam_id})
        return FinalExam(**doc) if doc else None

    async def get_assignment(self, assignment_id: str) -> Optional[AssignmentOutline]:
        doc = await self.db.assignments.find_one({"assignment_id": assignment_id})
        return AssignmentOutline(**doc) if doc else None

# ==================== CERTIFICATE POLICY ====================

class MongoPolicyStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def get_policy(self, course_id: str) -> CertificatePolicy:
        """Stored policy, or the defaults when the instructor never set one"""
        doc = await self.db.certificate_policies.find_one({"course_id": course_id})
        if not doc:
            return CertificatePolicy(course_id=course_id)
        return CertificatePolicy(**doc)

    async def save_policy(self, policy: CertificatePolicy) -> CertificatePolicy:
        await self.db.certificate_policies.update_one(
            {"course_id": policy.course_id},
            {"$set": {**policy.dict(), "updated_at": datetime.utcnow()}},
            upsert=True
        )
        return policy

# ==================== USER DIRECTORY ====================

class MongoUserDirectory:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def get_display_name(self, user_id: str) -> str:
        profile = await self.db.users_profile.find_one({"user_id": user_id})
        return profile.get("username", "Student") if profile else "Student"
