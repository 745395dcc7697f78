import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from crud import (
    create_upload_record,
    get_upload_record_by_s3_key,
    get_upload_record_by_bucket_and_s3_key
)
from models import UploadRecord, UploadStatus
from schemas import UploadRecordCreate

def make_record(s3_key: str = "videos/interview-1-abcd1234.webm", bucket: str = "test-recordings") -> UploadRecordCreate:
    return UploadRecordCreate(
        s3_key=s3_key,
        bucket=bucket,
        original_filename="answer.webm",
        file_size=2048,
        content_type="video/webm"
    )

@pytest.mark.asyncio
async def test_create_upload_record(db_session: AsyncSession):
    db_obj = await create_upload_record(db_session, make_record())

    assert db_obj.id is not None
    assert db_obj.upload_status == UploadStatus.COMPLETED.value
    assert db_obj.created_at is not None

    result = await db_session.execute(select(UploadRecord).filter(UploadRecord.id == db_obj.id))
    retrieved = result.scalar_one_or_none()
    assert retrieved is not None
    assert retrieved.s3_key == "videos/interview-1-abcd1234.webm"
    assert retrieved.file_size == 2048

@pytest.mark.asyncio
async def test_get_upload_record_by_s3_key(db_session: AsyncSession):
    created = await create_upload_record(db_session, make_record())

    retrieved = await get_upload_record_by_s3_key(db_session, created.s3_key)
    assert retrieved is not None
    assert retrieved.id == created.id

@pytest.mark.asyncio
async def test_get_upload_record_by_s3_key_missing(db_session: AsyncSession):
    assert await get_upload_record_by_s3_key(db_session, "videos/missing.webm") is None

@pytest.mark.asyncio
async def test_get_upload_record_by_bucket_and_s3_key(db_session: AsyncSession):
    created = await create_upload_record(db_session, make_record())

    found = await get_upload_record_by_bucket_and_s3_key(db_session, "test-recordings", created.s3_key)
    assert found is not None
    assert found.id == created.id

    other_bucket = await get_upload_record_by_bucket_and_s3_key(db_session, "other-bucket", created.s3_key)
    assert other_bucket is None
