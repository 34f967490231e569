"""Custom design request routes"""

from fastapi import APIRouter, Depends

from ..core.rate_limit import RateLimit
from ..models.custom_request import CreateCustomRequestRequest, CreateCustomRequestResponse
from ..services.custom_requests import CustomRequestService
from .deps import get_custom_request_service

router = APIRouter(prefix="/api/custom-requests", tags=["Custom Requests"])


@router.post(
    "",
    response_model=CreateCustomRequestResponse,
    status_code=201,
    dependencies=[Depends(RateLimit("custom-requests", limit=5, window_seconds=60))],
)
async def create_custom_request(
    request: CreateCustomRequestRequest,
    service: CustomRequestService = Depends(get_custom_request_service),
):
    """Submit a custom design request with its uploaded files"""
    return await service.submit(request)
