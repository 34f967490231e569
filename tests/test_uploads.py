import re
from datetime import datetime

from storefront.models.custom_request import PresignUploadRequest
from storefront.services.references import generate_reference
from storefront.services.uploads import (
    MAX_FILE_SIZE_BYTES,
    get_file_extension,
    sanitize_file_name,
    validate_presign_request,
)


def _request(**overrides) -> PresignUploadRequest:
    data = {
        "ownerType": "custom_request",
        "uploadGroupId": "group-1",
        "fileName": "logo tim.png",
        "mimeType": "image/png",
        "sizeBytes": 1024,
    }
    data.update(overrides)
    return PresignUploadRequest.model_validate(data)


def test_valid_request_has_no_errors():
    assert validate_presign_request(_request()) == {}


def test_extension_must_be_allowed():
    assert "fileName" in validate_presign_request(_request(fileName="payload.exe"))
    assert "fileName" in validate_presign_request(_request(fileName="noextension"))
    assert validate_presign_request(_request(fileName="DESAIN.AI", mimeType="application/postscript")) == {}


def test_size_limits():
    assert "sizeBytes" in validate_presign_request(_request(sizeBytes=0))
    assert "sizeBytes" in validate_presign_request(_request(sizeBytes=MAX_FILE_SIZE_BYTES + 1))
    assert validate_presign_request(_request(sizeBytes=MAX_FILE_SIZE_BYTES)) == {}


def test_mime_type_must_be_allowed():
    assert "mimeType" in validate_presign_request(_request(mimeType="text/html"))


def test_file_name_helpers():
    assert get_file_extension("a.b.JPEG") == "jpeg"
    assert get_file_extension("README") == ""
    assert sanitize_file_name(" logo tim (final).png ") == "logo_tim_final.png"
    assert sanitize_file_name("###") == "file"


def test_reference_format():
    reference = generate_reference("EUY", now=datetime(2026, 3, 7))

    assert re.fullmatch(r"EUY-20260307-\d{4}", reference)


def test_upload_group_id_must_be_a_plain_token():
    assert validate_presign_request(_request(uploadGroupId="3f0c1d9e-8a7b-4c55-9e21-0b6f4f2d7a10")) == {}
    assert validate_presign_request(_request(uploadGroupId="tim_futsal-2026")) == {}

    for value in ("../../orders/x", "group/1", "group 1", "g" * 65, "%2e%2e"):
        assert "uploadGroupId" in validate_presign_request(_request(uploadGroupId=value)), value
