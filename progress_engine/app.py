"""
Learning Progress & Certification Engine - route and index setup
"""

import logging
from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorDatabase

from progress_engine.progress.progress_router import router as progress_router
from progress_engine.courses.policy_router import router as policy_router
from progress_engine.exams.exam_router import router as exam_router
from progress_engine.certificates.certificate_router import router as certificate_router
from progress_engine.assignments.submission_router import router as submission_router
from progress_engine.plagiarism.plagiarism_router import router as plagiarism_router

logger = logging.getLogger(__name__)

# ==================== DATABASE INDEXES ====================

async def create_engine_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes; the unique ones carry engine invariants"""

    # Catalog (owned by the authoring service, read here)
    await db.chapters.create_index("chapter_id", unique=True)
    await db.chapters.create_index([("course_id", 1), ("is_published", 1), ("position", 1)])
    await db.quizzes.create_index("quiz_id", unique=True)
    await db.quizzes.create_index("chapter_id")
    await db.assignments.create_index("assignment_id", unique=True)
    await db.assignments.create_index("chapter_id")
    await db.final_exams.create_index("final_exam_id", unique=True)
    await db.final_exams.create_index("course_id")

    # Policies
    await db.certificate_policies.create_index("course_id", unique=True)

    # Facts: one per (user, unit)
    await db.completion_facts.create_index([("user_id", 1), ("unit_id", 1)], unique=True)
    await db.completion_facts.create_index([("user_id", 1), ("course_id", 1)])

    # Submissions: one per (assignment, user)
    await db.assignment_submissions.create_index("submission_id", unique=True)
    await db.assignment_submissions.create_index([("assignment_id", 1), ("user_id", 1)], unique=True)
    await db.assignment_submissions.create_index([("user_id", 1), ("course_id", 1)])

    # Final exam attempts
    await db.final_exam_attempts.create_index("attempt_id", unique=True)
    await db.final_exam_attempts.create_index([("user_id", 1), ("course_id", 1), ("completed_at", -1)])

    # Certificates: at most one per (user, course)
    await db.certificates.create_index("certificate_id", unique=True)
    await db.certificates.create_index([("user_id", 1), ("course_id", 1)], unique=True)
    await db.certificates.create_index("verification_code", unique=True)
    await db.certificates.create_index([("course_id", 1), ("issue_date", -1)])

    logger.info("Engine indexes created")

# ==================== ROUTER SETUP ====================

def setup_engine_routes(app: FastAPI):
    """Register all engine routers"""

    app.include_router(progress_router)
    app.include_router(policy_router)
    app.include_router(exam_router)
    app.include_router(certificate_router)
    app.include_router(submission_router)
    app.include_router(plagiarism_router)

    logger.info("Engine routes registered")

# ==================== STARTUP ====================

async def startup_engine(db: AsyncIOMotorDatabase):
    """Initialize the engine on app startup"""
    await create_engine_indexes(db)
    logger.info("Progress & certification engine initialized")
