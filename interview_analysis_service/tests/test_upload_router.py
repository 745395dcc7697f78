import io
import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

import crud
from schemas import UploadRecordCreate

KEY_PATTERN = re.compile(r"^videos/interview-\d+-[0-9a-f]{8}\.(\w+)$")

def client_error(code: str, operation: str = "HeadObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)

@pytest.mark.asyncio
async def test_presigned_url_uses_same_key_for_url_and_response(async_client: AsyncClient, mock_s3: MagicMock):
    mock_s3.generate_presigned_url.return_value = "https://test-recordings.s3.amazonaws.com/signed"

    response = await async_client.post(
        "/api/upload/presigned-url",
        json={"file_name": "answer.mp4", "file_type": "video/mp4"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["presigned_url"] == "https://test-recordings.s3.amazonaws.com/signed"
    assert data["bucket"] == "test-recordings"
    assert data["expires_in"] == 3600
    assert KEY_PATTERN.match(data["s3_key"]).group(1) == "mp4"

    mock_s3.generate_presigned_url.assert_called_once_with(
        "put_object",
        Params={"Bucket": "test-recordings", "Key": data["s3_key"], "ContentType": "video/mp4"},
        ExpiresIn=3600
    )

@pytest.mark.asyncio
async def test_presigned_url_rejects_blank_file_name(async_client: AsyncClient):
    response = await async_client.post(
        "/api/upload/presigned-url",
        json={"file_name": "   ", "file_type": "video/webm"}
    )
    assert response.status_code == 422

@pytest.mark.asyncio
async def test_presigned_url_failure_returns_empty_response(async_client: AsyncClient, mock_s3: MagicMock):
    mock_s3.generate_presigned_url.side_effect = RuntimeError("signing failed")

    response = await async_client.post(
        "/api/upload/presigned-url",
        json={"file_name": "answer.webm", "file_type": "video/webm"}
    )

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["presigned_url"] == ""
    assert data["s3_key"] == ""
    assert data["expires_in"] == 0

@pytest.mark.asyncio
async def test_direct_upload_successful(async_client: AsyncClient, db_session: AsyncSession, mock_s3: MagicMock):
    content = b"fake webm bytes" * 100
    files = {"video": ("answer.webm", io.BytesIO(content), "video/webm")}

    response = await async_client.post("/api/upload/direct", files=files)

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    assert data["bucket"] == "test-recordings"
    assert data["file_size"] == len(content)
    assert KEY_PATTERN.match(data["s3_key"])
    assert data["s3_url"] == f"https://test-recordings.s3.amazonaws.com/{data['s3_key']}"
    assert data["upload_time"] >= 0
    assert data["upload_speed"] >= 0

    mock_s3.upload_fileobj.assert_called_once()
    args, kwargs = mock_s3.upload_fileobj.call_args
    assert args[1] == "test-recordings"
    assert args[2] == data["s3_key"]
    assert kwargs["ExtraArgs"] == {"ContentType": "video/webm"}

    record = await crud.get_upload_record_by_s3_key(db_session, data["s3_key"])
    assert record is not None
    assert record.original_filename == "answer.webm"
    assert record.file_size == len(content)
    assert record.content_type == "video/webm"

@pytest.mark.asyncio
async def test_direct_upload_empty_file_returns_400(async_client: AsyncClient, mock_s3: MagicMock):
    files = {"video": ("empty.webm", io.BytesIO(b""), "video/webm")}

    response = await async_client.post("/api/upload/direct", files=files)

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "No file provided"
    mock_s3.upload_fileobj.assert_not_called()

@pytest.mark.asyncio
async def test_direct_upload_storage_failure_returns_500(async_client: AsyncClient, mock_s3: MagicMock):
    mock_s3.upload_fileobj.side_effect = RuntimeError("s3 unavailable")
    files = {"video": ("answer.webm", io.BytesIO(b"data"), "video/webm")}

    response = await async_client.post("/api/upload/direct", files=files)

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "s3 unavailable"

@pytest.mark.asyncio
async def test_upload_status_existing_object_with_record(async_client: AsyncClient, db_session: AsyncSession, mock_s3: MagicMock):
    s3_key = "videos/interview-1700000000000-abcd1234.webm"
    await crud.create_upload_record(db_session, UploadRecordCreate(
        s3_key=s3_key, bucket="test-recordings", original_filename="answer.webm",
        file_size=10, content_type="video/webm"
    ))
    mock_s3.head_object.return_value = {"ContentLength": 10}

    response = await async_client.get(f"/api/upload/status/{s3_key}")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["exists"] is True
    assert data["s3_key"] == s3_key
    assert data["record"]["original_filename"] == "answer.webm"
    assert data["record"]["upload_status"] == "COMPLETED"
    mock_s3.head_object.assert_called_once_with(Bucket="test-recordings", Key=s3_key)

@pytest.mark.asyncio
async def test_upload_status_missing_object(async_client: AsyncClient, mock_s3: MagicMock):
    mock_s3.head_object.side_effect = client_error("404")

    response = await async_client.get("/api/upload/status/videos/missing.webm")

    assert response.status_code == 200
    data = response.json()
    assert data["exists"] is False
    assert data["record"] is None

@pytest.mark.asyncio
async def test_upload_status_with_bucket_query(async_client: AsyncClient, db_session: AsyncSession, mock_s3: MagicMock):
    s3_key = "videos/interview-1-abcd1234.webm"
    await crud.create_upload_record(db_session, UploadRecordCreate(
        s3_key=s3_key, bucket="test-recordings", original_filename="answer.webm",
        file_size=10, content_type="video/webm"
    ))

    response = await async_client.get(f"/api/upload/status/{s3_key}", params={"bucket": "other-bucket"})

    assert response.status_code == 200
    assert response.json()["record"] is None
    mock_s3.head_object.assert_called_once_with(Bucket="other-bucket", Key=s3_key)

@pytest.mark.asyncio
async def test_upload_status_access_denied_returns_500(async_client: AsyncClient, mock_s3: MagicMock):
    mock_s3.head_object.side_effect = client_error("403")

    response = await async_client.get("/api/upload/status/videos/secret.webm")

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert "403" in data["error"]
