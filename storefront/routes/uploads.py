"""Upload presigning routes"""

from fastapi import APIRouter, Depends

from ..core.rate_limit import RateLimit
from ..models.custom_request import PresignUploadRequest, PresignUploadResponse
from ..services.uploads import UploadService
from .deps import get_upload_service

router = APIRouter(prefix="/api/uploads", tags=["Uploads"])


@router.post(
    "/presign",
    response_model=PresignUploadResponse,
    dependencies=[Depends(RateLimit("uploads-presign", limit=20, window_seconds=60))],
)
async def presign_upload(
    request: PresignUploadRequest,
    service: UploadService = Depends(get_upload_service),
):
    """Issue a short-lived signed URL for uploading one design file"""
    return await service.presign_upload(request)
