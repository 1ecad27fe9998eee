from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional

from progress_engine.exams.models import FinalExamAttempt

# ==================== FINAL EXAM ATTEMPTS ====================

class MongoAttemptStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def insert_attempt(self, attempt: FinalExamAttempt) -> str:
        await self.db.final_exam_attempts.insert_one(attempt.dict())
        return attempt.attempt_id

    async def find_latest_passed_attempt(self, user_id: str, course_id: str) -> Optional[FinalExamAttempt]:
        doc = await self.db.final_exam_attempts.find_one(
            {"user_id": user_id, "course_id": course_id, "passed": True},
            sort=[("completed_at", -1)]
        )
        return FinalExamAttempt(**doc) if doc else None

    async def list_attempts(self, user_id: str, course_id: str) -> List[FinalExamAttempt]:
        cursor = self.db.final_exam_attempts.find(
            {"user_id": user_id, "course_id": course_id}
        ).sort("completed_at", -1)
        return [FinalExamAttempt(**doc) for doc in await cursor.to_list(length=None)]

    async def find_best_attempt(self, user_id: str, course_id: str) -> Optional[FinalExamAttempt]:
        doc = await self.db.final_exam_attempts.find_one(
            {"user_id": user_id, "course_id": course_id},
            sort=[("score", -1), ("completed_at", 1)]
        )
        return FinalExamAttempt(**doc) if doc else None
