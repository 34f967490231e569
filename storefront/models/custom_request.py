"""Custom design request and upload models"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadedFileMeta(BaseModel):
    """Metadata of a file already uploaded through a signed URL"""
    model_config = ConfigDict(extra="forbid")

    bucket: str = ""
    path: str = ""
    original_name: str = ""
    mime_type: str = ""
    size_bytes: int = 0


class CreateCustomRequestRequest(BaseModel):
    """Request for a quote on a custom design run"""
    model_config = ConfigDict(extra="forbid")

    requester_name: str = ""
    whatsapp: str = ""
    org_name: Optional[str] = None
    upload_group_id: Optional[str] = None
    product_types: list[str] = []
    quantity_estimate: int = 0
    deadline_date: Optional[date] = None
    notes: Optional[str] = None
    files: list[UploadedFileMeta] = []
    company_website: Optional[str] = None


class CreateCustomRequestResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: str = Field(serialization_alias="requestId")
    request_number: str = Field(serialization_alias="requestNumber")


class PresignUploadRequest(BaseModel):
    """Request for a signed upload URL"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    owner_type: Literal["custom_request"] = Field(alias="ownerType")
    upload_group_id: str = Field(default="", alias="uploadGroupId")
    file_name: str = Field(default="", alias="fileName")
    mime_type: str = Field(default="", alias="mimeType")
    size_bytes: int = Field(default=0, alias="sizeBytes")


class PresignUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bucket: str
    path: str
    signed_url: str = Field(serialization_alias="signedUrl")
    expires_at: datetime = Field(serialization_alias="expiresAt")
