from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from typing import List, Optional, Tuple

from progress_engine.certificates.models import Certificate
from progress_engine.errors import StorageConflict, VerificationCodeCollision

# ==================== CERTIFICATES ====================

class MongoCertificateStore:
    """
    Relies on the unique indexes created at startup:
    (user_id, course_id), certificate_id and verification_code.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def find_certificate(self, user_id: str, course_id: str) -> Optional[Certificate]:
        doc = await self.db.certificates.find_one({"user_id": user_id, "course_id": course_id})
        return Certificate(**doc) if doc else None

    async def insert_certificate_if_absent(self, record: Certificate) -> Tuple[bool, Certificate]:
        try:
            await self.db.certificates.insert_one(record.dict())
            return True, record
        except DuplicateKeyError as e:
            key_pattern = (e.details or {}).get("keyPattern") or {}
            if "verification_code" in key_pattern or "certificate_id" in key_pattern:
                raise VerificationCodeCollision(str(e))
            existing = await self.find_certificate(record.user_id, record.course_id)
            if existing is None:
                raise StorageConflict(str(e))
            return False, existing

    async def find_by_verification_code(self, code: str) -> Optional[Certificate]:
        doc = await self.db.certificates.find_one({"verification_code": code})
        return Certificate(**doc) if doc else None

    async def list_user_certificates(self, user_id: str) -> List[Certificate]:
        cursor = self.db.certificates.find({"user_id": user_id}).sort("issue_date", -1)
        return [Certificate(**doc) for doc in await cursor.to_list(length=None)]

    async def list_course_certificates(self, course_id: str) -> List[Certificate]:
        cursor = self.db.certificates.find({"course_id": course_id}).sort("issue_date", -1)
        return [Certificate(**doc) for doc in await cursor.to_list(length=None)]
