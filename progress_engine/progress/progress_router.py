from fastapi import APIRouter, Depends

from progress_engine.dependencies import (
    get_current_user_id, get_progress_aggregator, get_certificate_store, engine_call
)
from progress_engine.progress.models import CourseProgressResponse

router = APIRouter(tags=["Progress"])


@router.get("/courses/{course_id}/progress", response_model=CourseProgressResponse)
async def get_course_progress(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    aggregator=Depends(get_progress_aggregator),
    certificates=Depends(get_certificate_store)
):
    progress = await engine_call(aggregator.compute_course_progress(user_id, course_id))
    certificate = await certificates.find_certificate(user_id, course_id)
    return CourseProgressResponse(
        **progress.dict(),
        has_certificate=certificate is not None,
        certificate_id=certificate.certificate_id if certificate else None
    )
