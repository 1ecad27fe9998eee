import logging
from fastapi import APIRouter, BackgroundTasks, Depends

from progress_engine.assignments.models import AssignmentSubmission, GradeRequest, SubmissionCreate
from progress_engine.courses.models import SubmissionType
from progress_engine.dependencies import (
    get_current_user_id, get_submission_service, get_plagiarism_scorer, engine_call
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Assignment Submissions"])


async def run_plagiarism_check(scorer, submission_id: str, text: str):
    """Background task; a scoring failure never affects the stored submission"""
    try:
        await scorer.score(submission_id, text)
    except Exception:
        logger.exception("Plagiarism check failed for submission %s", submission_id)


@router.post("/assignments/{assignment_id}/submissions", response_model=AssignmentSubmission)
async def submit_assignment(
    assignment_id: str,
    payload: SubmissionCreate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    service=Depends(get_submission_service),
    scorer=Depends(get_plagiarism_scorer)
):
    submission = await engine_call(service.submit(user_id, assignment_id, payload))
    if submission.submission_type == SubmissionType.TEXT:
        background_tasks.add_task(
            run_plagiarism_check, scorer, submission.submission_id, submission.text_content
        )
    return submission


@router.post("/assignments/submissions/{submission_id}/grade", response_model=AssignmentSubmission)
async def grade_submission(
    submission_id: str,
    payload: GradeRequest,
    user_id: str = Depends(get_current_user_id),
    service=Depends(get_submission_service)
):
    """Only the course's teacher reaches this route; that check lives in the gateway"""
    return await engine_call(service.grade(submission_id, user_id, payload.score, payload.feedback))
