from fastapi import APIRouter, Depends, HTTPException
from typing import List

from progress_engine.certificates.models import Certificate, CertificateVerification
from progress_engine.dependencies import (
    get_current_user_id, get_gate, get_issuer, get_certificate_store, engine_call
)

router = APIRouter(tags=["Certificates"])


@router.post("/courses/{course_id}/certificate", response_model=Certificate)
async def issue_certificate(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    issuer=Depends(get_issuer)
):
    """Issue the learner's certificate, or return the one already issued"""
    return await engine_call(issuer.issue_or_get(user_id, course_id))


@router.get("/courses/{course_id}/certificate", response_model=Certificate)
async def get_certificate(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    certificates=Depends(get_certificate_store)
):
    certificate = await certificates.find_certificate(user_id, course_id)
    if not certificate:
        raise HTTPException(status_code=404, detail="Certificate not found")
    return certificate


@router.get("/courses/{course_id}/certificate/eligibility")
async def check_certificate_eligibility(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    gate=Depends(get_gate)
):
    assessment = await engine_call(gate.assess(user_id, course_id))
    return {
        **assessment.result.dict(),
        "min_percentage": assessment.policy.min_percentage,
        "final_exam_required": assessment.exam_required,
        "progress": assessment.progress.summary(),
    }


@router.get("/courses/{course_id}/certificates", response_model=List[Certificate])
async def list_issued_certificates(
    course_id: str,
    user_id: str = Depends(get_current_user_id),
    certificates=Depends(get_certificate_store)
):
    return await certificates.list_course_certificates(course_id)


@router.get("/certificates/mine", response_model=List[Certificate])
async def get_my_certificates(
    user_id: str = Depends(get_current_user_id),
    certificates=Depends(get_certificate_store)
):
    return await certificates.list_user_certificates(user_id)


@router.get("/certificates/verify/{verification_code}", response_model=CertificateVerification)
async def verify_certificate(verification_code: str, certificates=Depends(get_certificate_store)):
    certificate = await certificates.find_by_verification_code(verification_code)
    if not certificate:
        return CertificateVerification(valid=False, message="Certificate not found")
    return CertificateVerification(
        valid=True,
        message="Certificate is valid",
        verification_code=certificate.verification_code,
        student_name=certificate.student_name,
        course_id=certificate.course_id,
        issued_at=certificate.issue_date
    )
