import asyncio
from fastapi import Depends, Header, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from progress_engine import config
from progress_engine.errors import (
    EngineError, CourseNotFound, ExamNotFound, SubmissionNotFound,
    ExamNotAvailable, AssignmentNotAvailable, NotEligible,
    InvalidExam, InvalidGrade, SubmissionRejected, InvalidTransition,
    StorageConflict, VerificationCodeCollision
)
from progress_engine.courses.database import MongoCatalog, MongoPolicyStore, MongoUserDirectory
from progress_engine.progress.database import MongoFactStore
from progress_engine.progress.aggregator import ProgressAggregator
from progress_engine.exams.database import MongoAttemptStore
from progress_engine.exams.grader import FinalExamGrader
from progress_engine.certificates.database import MongoCertificateStore
from progress_engine.certificates.gate import CertificationGate
from progress_engine.certificates.issuer import CertificateIssuer
from progress_engine.assignments.database import MongoSubmissionStore
from progress_engine.assignments.service import SubmissionService
from progress_engine.plagiarism.scorer import PlagiarismScorer

def get_db_instance():
    """Get database from main module"""
    from progress_engine.main import db
    return db

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()

async def get_current_user_id(x_user_id: str = Header(None)) -> str:
    """
    Authenticated user id, set by the gateway after session verification.
    Authentication itself happens upstream.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return x_user_id

# ==================== STORAGE HANDLES ====================

def get_catalog(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoCatalog:
    return MongoCatalog(db)

def get_policy_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoPolicyStore:
    return MongoPolicyStore(db)

def get_user_directory(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoUserDirectory:
    return MongoUserDirectory(db)

def get_fact_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoFactStore:
    return MongoFactStore(db)

def get_attempt_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoAttemptStore:
    return MongoAttemptStore(db)

def get_certificate_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoCertificateStore:
    return MongoCertificateStore(db)

def get_submission_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> MongoSubmissionStore:
    return MongoSubmissionStore(db)

# ==================== ENGINE COMPONENTS ====================

def get_progress_aggregator(catalog=Depends(get_catalog), facts=Depends(get_fact_store)) -> ProgressAggregator:
    return ProgressAggregator(catalog, facts)

def get_grader(catalog=Depends(get_catalog), attempts=Depends(get_attempt_store)) -> FinalExamGrader:
    return FinalExamGrader(catalog, attempts)

def get_gate(
    aggregator=Depends(get_progress_aggregator),
    catalog=Depends(get_catalog),
    policies=Depends(get_policy_store),
    attempts=Depends(get_attempt_store)
) -> CertificationGate:
    return CertificationGate(aggregator, catalog, policies, attempts)

def get_issuer(
    gate=Depends(get_gate),
    certificates=Depends(get_certificate_store),
    directory=Depends(get_user_directory)
) -> CertificateIssuer:
    return CertificateIssuer(gate, certificates, directory)

def get_plagiarism_scorer(submissions=Depends(get_submission_store)) -> PlagiarismScorer:
    return PlagiarismScorer(submissions)

def get_submission_service(
    catalog=Depends(get_catalog),
    submissions=Depends(get_submission_store),
    directory=Depends(get_user_directory)
) -> SubmissionService:
    return SubmissionService(catalog, submissions, directory)

# ==================== ERROR MAPPING ====================

_STATUS_CODES = [
    ((CourseNotFound, ExamNotFound, SubmissionNotFound), 404),
    ((ExamNotAvailable, AssignmentNotAvailable), 403),
    ((InvalidExam, InvalidGrade), 422),
    ((SubmissionRejected,), 400),
    ((InvalidTransition,), 409),
    ((StorageConflict, VerificationCodeCollision), 503),
]

def to_http_exception(error: EngineError) -> HTTPException:
    if isinstance(error, NotEligible):
        return HTTPException(status_code=403, detail={"reason": error.reason, "detail": error.detail})
    for error_types, status_code in _STATUS_CODES:
        if isinstance(error, error_types):
            return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)

async def engine_call(awaitable):
    """Run an engine operation under the request time bound, mapping engine errors to HTTP"""
    try:
        return await asyncio.wait_for(awaitable, timeout=config.ENGINE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Engine operation timed out")
    except EngineError as e:
        raise to_http_exception(e)
