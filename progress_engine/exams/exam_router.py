from fastapi import APIRouter, Depends, HTTPException
from typing import List

from progress_engine.courses.models import PublicFinalExam
from progress_engine.dependencies import (
    get_current_user_id, get_grader, get_gate, engine_call
)
from progress_engine.certificates.models import EligibilityResult
from progress_engine.exams.models import AttemptSummary, ExamSubmission

router = APIRouter(tags=["Final Exams"])


@router.get("/final-exams/{final_exam_id}", response_model=PublicFinalExam)
async def get_final_exam(
    final_exam_id: str,
    user_id: str = Depends(get_current_user_id),
    grader=Depends(get_grader)
):
    exam = await engine_call(grader.load_exam(final_exam_id))
    return PublicFinalExam.from_exam(exam)


@router.post("/final-exams/{final_exam_id}/submit", response_model=AttemptSummary)
async def submit_final_exam(
    final_exam_id: str,
    payload: ExamSubmission,
    user_id: str = Depends(get_current_user_id),
    grader=Depends(get_grader)
):
    """The stored attempt keeps the answer key snapshot; only the summary is returned"""
    attempt = await engine_call(grader.submit(user_id, final_exam_id, payload.answers))
    return AttemptSummary.from_attempt(attempt)


@router.get("/courses/{course_id}/final-exam/attempts", response_model=List[AttemptSummary])
async def list_final_exam_attempts(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    grader=Depends(get_grader)
):
    attempts = await engine_call(grader.history(user_id, course_id))
    return [AttemptSummary.from_attempt(a) for a in attempts]


@router.get("/courses/{course_id}/final-exam/best", response_model=AttemptSummary)
async def get_best_final_exam_attempt(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    grader=Depends(get_grader)
):
    attempt = await engine_call(grader.best_attempt(user_id, course_id))
    if attempt is None:
        raise HTTPException(status_code=404, detail="No final exam attempts")
    return AttemptSummary.from_attempt(attempt)


@router.get("/courses/{course_id}/final-exam/readiness", response_model=EligibilityResult)
async def get_final_exam_readiness(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    gate=Depends(get_gate)
):
    return await engine_call(gate.exam_readiness(user_id, course_id))
