from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from typing import Any, Dict, List, Optional

from progress_engine.assignments.models import AssignmentSubmission
from progress_engine.errors import InvalidTransition
from progress_engine.plagiarism.models import CandidateText, PlagiarismReport

# ==================== ASSIGNMENT SUBMISSIONS ====================

class MongoSubmissionStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def get_submission(self, submission_id: str) -> Optional[AssignmentSubmission]:
        doc = await self.db.assignment_submissions.find_one({"submission_id": submission_id})
        return AssignmentSubmission(**doc) if doc else None

    async def find_user_submission(self, assignment_id: str, user_id: str) -> Optional[AssignmentSubmission]:
        doc = await self.db.assignment_submissions.find_one(
            {"assignment_id": assignment_id, "user_id": user_id}
        )
        return AssignmentSubmission(**doc) if doc else None

    async def insert_submission(self, submission: AssignmentSubmission) -> None:
        """First submission; the unique (assignment, user) index rejects a concurrent twin"""
        try:
            await self.db.assignment_submissions.insert_one(submission.dict())
        except DuplicateKeyError:
            raise InvalidTransition(
                f"A submission for assignment {submission.assignment_id} already exists"
            )

    async def update_submission(
        self,
        submission_id: str,
        expected: Dict[str, Any],
        fields: Dict[str, Any]
    ) -> Optional[AssignmentSubmission]:
        """
        $set only the given fields, and only while the record still matches
        what the caller read. None when it changed in between.
        """
        doc = await self.db.assignment_submissions.find_one_and_update(
            {"submission_id": submission_id, **expected},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )
        return AssignmentSubmission(**doc) if doc else None

    async def list_text_candidates(self, assignment_id: str, exclude_submission_id: str) -> List[CandidateText]:
        cursor = self.db.assignment_submissions.find(
            {
                "assignment_id": assignment_id,
                "submission_id": {"$ne": exclude_submission_id},
                "text_content": {"$ne": None},
            },
            {"submission_id": 1, "student_name": 1, "text_content": 1}
        )
        return [
            CandidateText(
                submission_id=doc["submission_id"],
                student_name=doc.get("student_name") or "Unknown",
                text=doc["text_content"],
            )
            for doc in await cursor.to_list(length=None)
        ]

    async def save_plagiarism_report(self, report: PlagiarismReport) -> None:
        await self.db.assignment_submissions.update_one(
            {"submission_id": report.submission_id},
            {"$set": {
                "plagiarism_score": report.similarity_score,
                "plagiarism_report": report.dict(),
                "plagiarism_checked_at": report.checked_at,
            }}
        )
