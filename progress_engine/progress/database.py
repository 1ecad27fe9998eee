from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from progress_engine.courses.models import UnitKind
from progress_engine.progress.models import CompletionFact

# ==================== COMPLETION FACTS (READ) ====================

class MongoFactStore:
    """
    Learner facts for one course.

    Video and quiz facts are upserted into `completion_facts` by the video
    tracker and the quiz submission handler. Assignment facts come from the
    submission records themselves.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def get_completion_facts(self, user_id: str, course_id: str) -> List[CompletionFact]:
        docs = await self.db.completion_facts.find(
            {"user_id": user_id, "course_id": course_id}
        ).to_list(length=None)
        facts = [CompletionFact(**doc) for doc in docs]

        submissions = await self.db.assignment_submissions.find(
            {"user_id": user_id, "course_id": course_id},
            {"assignment_id": 1, "submitted_at": 1, "score": 1, "status": 1}
        ).to_list(length=None)
        for sub in submissions:
            facts.append(CompletionFact(
                user_id=user_id,
                unit_id=sub["assignment_id"],
                kind=UnitKind.ASSIGNMENT,
                course_id=course_id,
                completed_at=sub.get("submitted_at"),
                score=sub.get("score"),
                status=sub.get("status"),
            ))
        return facts
