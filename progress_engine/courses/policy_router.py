import logging
from fastapi import APIRouter, Depends

from progress_engine.courses.models import CertificatePolicy, CertificatePolicyUpdate
from progress_engine.dependencies import get_current_user_id, get_policy_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Certificate Policy"])


@router.get("/courses/{course_id}/certificate-policy", response_model=CertificatePolicy)
async def get_certificate_policy(course_id: str, policies=Depends(get_policy_store)):
    return await policies.get_policy(course_id)


@router.put("/courses/{course_id}/certificate-policy", response_model=CertificatePolicy)
async def update_certificate_policy(
    course_id: str,
    payload: CertificatePolicyUpdate,
    user_id: str = Depends(get_current_user_id),
    policies=Depends(get_policy_store)
):
    """Course ownership is checked by the authoring service in front of this one"""
    current = await policies.get_policy(course_id)
    updates = {k: v for k, v in payload.dict().items() if v is not None}
    saved = await policies.save_policy(current.copy(update=updates))
    logger.info("Certificate policy for course %s changed by user %s: %s", course_id, user_id, updates)
    return saved
