import re


def _file(name: str = "logo.png") -> dict:
    return {
        "bucket": "uploads",
        "path": f"custom-requests/group-1/1700000000000_{name}",
        "original_name": name,
        "mime_type": "image/png",
        "size_bytes": 2048,
    }


def _request_body(**overrides) -> dict:
    body = {
        "requester_name": "Sari",
        "whatsapp": "0812000111",
        "org_name": "Himpunan Mahasiswa",
        "upload_group_id": "group-1",
        "product_types": ["kaos", "hoodie"],
        "quantity_estimate": 120,
        "deadline_date": "2026-12-01",
        "notes": "Sablon dua warna",
        "files": [_file()],
    }
    body.update(overrides)
    return body


def test_submit_custom_request(client, backend, notifier):
    response = client.post("/api/custom-requests", json=_request_body())

    body = response.json()
    assert response.status_code == 201
    assert re.fullmatch(r"EUY-CR-\d{8}-\d{4}", body["requestNumber"])

    stored = backend.custom_requests[body["requestId"]]
    assert stored["status"] == "pending"
    assert stored["product_types"] == ["kaos", "hoodie"]

    [file] = backend.files
    assert file["owner_type"] == "custom_request"
    assert file["owner_id"] == body["requestId"]
    assert notifier.messages[0].startswith("NEW CUSTOM REQUEST")


def test_missing_required_fields(client, backend):
    response = client.post(
        "/api/custom-requests",
        json=_request_body(requester_name="", whatsapp=" ", product_types=[""], quantity_estimate=0),
    )

    assert response.status_code == 400
    assert set(response.json()["fieldErrors"]) == {
        "requester_name",
        "whatsapp",
        "product_types",
        "quantity_estimate",
    }
    assert backend.custom_requests == {}


def test_upload_group_id_must_be_a_plain_token(client, backend):
    response = client.post("/api/custom-requests", json=_request_body(upload_group_id="../orders"))

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "upload_group_id" in response.json()["fieldErrors"]
    assert backend.custom_requests == {}


def test_too_many_files(client):
    files = [_file(f"design-{i}.png") for i in range(11)]

    response = client.post("/api/custom-requests", json=_request_body(files=files))

    assert response.status_code == 400
    assert "files" in response.json()["fieldErrors"]


def test_incomplete_file_metadata(client):
    response = client.post("/api/custom-requests", json=_request_body(files=[{"bucket": "uploads"}]))

    field_errors = response.json()["fieldErrors"]
    assert "files.0.path" in field_errors
    assert "files.0.size_bytes" in field_errors


def test_honeypot(client, backend):
    response = client.post("/api/custom-requests", json=_request_body(company_website="x"))

    assert response.json()["code"] == "SPAM_DETECTED"
    assert backend.custom_requests == {}


def test_failed_file_insert_deletes_request(client, backend, notifier):
    backend.fail_files = True

    response = client.post("/api/custom-requests", json=_request_body())

    assert response.status_code == 500
    assert len(backend.deleted_custom_requests) == 1
    assert backend.custom_requests == {}
    assert notifier.messages == []


def test_presign_upload(client):
    response = client.post(
        "/api/uploads/presign",
        json={
            "ownerType": "custom_request",
            "uploadGroupId": "group-1",
            "fileName": "Logo Tim.PNG",
            "mimeType": "image/png",
            "sizeBytes": 4096,
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["bucket"] == "uploads"
    assert re.fullmatch(r"custom-requests/group-1/\d+_Logo_Tim\.PNG", body["path"])
    assert body["signedUrl"].endswith("?token=up")
    assert body["expiresAt"]


def test_presign_rejects_bad_file(client):
    response = client.post(
        "/api/uploads/presign",
        json={
            "ownerType": "custom_request",
            "uploadGroupId": "group-1",
            "fileName": "run.exe",
            "mimeType": "application/x-msdownload",
            "sizeBytes": 4096,
        },
    )

    assert response.status_code == 400
    assert set(response.json()["fieldErrors"]) == {"fileName", "mimeType"}


def test_presign_rejects_path_in_upload_group_id(client, backend):
    response = client.post(
        "/api/uploads/presign",
        json={
            "ownerType": "custom_request",
            "uploadGroupId": "../../orders/x",
            "fileName": "logo.png",
            "mimeType": "image/png",
            "sizeBytes": 4096,
        },
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert set(response.json()["fieldErrors"]) == {"uploadGroupId"}


def test_presign_requires_owner_type(client):
    response = client.post(
        "/api/uploads/presign",
        json={"uploadGroupId": "group-1", "fileName": "a.png", "mimeType": "image/png", "sizeBytes": 1},
    )

    assert response.status_code == 400
    assert "ownerType" in response.json()["fieldErrors"]
