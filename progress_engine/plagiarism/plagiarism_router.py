from fastapi import APIRouter, Depends, HTTPException

from progress_engine.dependencies import (
    get_current_user_id, get_plagiarism_scorer, get_submission_store, engine_call
)
from progress_engine.plagiarism.models import PlagiarismReport

router = APIRouter(tags=["Plagiarism"])


@router.get("/assignments/submissions/{submission_id}/plagiarism", response_model=PlagiarismReport)
async def get_plagiarism_report(
    submission_id: str,
    user_id: str = Depends(get_current_user_id),
    submissions=Depends(get_submission_store)
):
    submission = await submissions.get_submission(submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    if not submission.plagiarism_report:
        raise HTTPException(status_code=404, detail="Plagiarism check not completed yet")
    return PlagiarismReport(**submission.plagiarism_report)


@router.post("/assignments/submissions/{submission_id}/plagiarism", response_model=PlagiarismReport)
async def rerun_plagiarism_check(
    submission_id: str,
    user_id: str = Depends(get_current_user_id),
    submissions=Depends(get_submission_store),
    scorer=Depends(get_plagiarism_scorer)
):
    submission = await submissions.get_submission(submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    if not submission.text_content:
        raise HTTPException(status_code=400, detail="Only text submissions are checked")
    return await engine_call(scorer.score(submission_id, submission.text_content))
