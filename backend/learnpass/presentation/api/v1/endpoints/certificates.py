"""Certificate listing and public verification endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from learnpass.application.schemas import CertificateResponse
from learnpass.application.services import CertificateQueryService
from learnpass.domain.exceptions import EntityNotFoundError
from learnpass.infrastructure.dependencies import get_certificate_query_service

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.get("", response_model=list[CertificateResponse])
async def list_certificates(
    external_id: str = Query(..., min_length=1, description="Identity-provider subject id"),
    service: CertificateQueryService = Depends(get_certificate_query_service),
) -> list[CertificateResponse]:
    """Issued certificates plus passed courses without one."""
    views = await service.list_for_user(external_id)
    return [CertificateResponse.model_validate(v, from_attributes=True) for v in views]


@router.get("/verify/{code}", response_model=CertificateResponse)
async def verify_certificate(
    code: str,
    service: CertificateQueryService = Depends(get_certificate_query_service),
) -> CertificateResponse:
    try:
        view = await service.verify(code)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CertificateResponse.model_validate(view, from_attributes=True)
