from typing import Optional

from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

import models, schemas

async def create_upload_record(db: AsyncSession, record: schemas.UploadRecordCreate) -> models.UploadRecord:
    db_record = models.UploadRecord(
        s3_key=record.s3_key,
        bucket=record.bucket,
        original_filename=record.original_filename,
        file_size=record.file_size,
        content_type=record.content_type,
        upload_status=record.upload_status.value
    )
    db.add(db_record)
    await db.commit()
    await db.refresh(db_record)
    return db_record

async def get_upload_record_by_s3_key(db: AsyncSession, s3_key: str) -> Optional[models.UploadRecord]:
    result = await db.execute(select(models.UploadRecord).filter(models.UploadRecord.s3_key == s3_key))
    return result.scalars().first()

async def get_upload_record_by_bucket_and_s3_key(db: AsyncSession, bucket: str, s3_key: str) -> Optional[models.UploadRecord]:
    result = await db.execute(
        select(models.UploadRecord).filter(
            models.UploadRecord.bucket == bucket,
            models.UploadRecord.s3_key == s3_key
        )
    )
    return result.scalars().first()
