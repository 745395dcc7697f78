import time
from typing import Optional

from fastapi import APIRouter, UploadFile, File, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

import crud, schemas, storage
from aws_clients import get_s3_client
from config import Settings, get_settings
from database import get_db
from logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    tags=["upload"],
)

def upload_speed_mbps(size_bytes: int, seconds: float) -> float:
    if seconds <= 0:
        return 0.0
    return (size_bytes / 1024 / 1024 * 8) / seconds

@router.post("/presigned-url", response_model=schemas.PresignedUrlResponse)
async def generate_presigned_url(
    request: schemas.PresignedUrlRequest,
    s3_client=Depends(get_s3_client),
    settings: Settings = Depends(get_settings)
):
    logger.info(f"Presigned URL request for file_name: '{request.file_name}', file_type: '{request.file_type}'")
    try:
        s3_key = storage.generate_s3_key(request.file_name)
        presigned_url = storage.generate_presigned_put_url(
            s3_client, settings.RECORDING_BUCKET, s3_key, request.file_type, settings.PRESIGNED_URL_EXPIRES_IN
        )
    except Exception:
        logger.exception(f"Failed to generate presigned URL for '{request.file_name}'")
        failure = schemas.PresignedUrlResponse(success=False, presigned_url="", s3_key="", bucket="", expires_in=0)
        return JSONResponse(status_code=500, content=failure.model_dump(mode="json"))

    return schemas.PresignedUrlResponse(
        success=True,
        presigned_url=presigned_url,
        s3_key=s3_key,
        bucket=settings.RECORDING_BUCKET,
        expires_in=settings.PRESIGNED_URL_EXPIRES_IN
    )

@router.post("/direct", response_model=schemas.UploadResponse)
async def upload_direct(
    video: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    s3_client=Depends(get_s3_client),
    settings: Settings = Depends(get_settings)
):
    logger.info(f"Direct upload request for filename: '{video.filename}', content_type: '{video.content_type}'")
    if not video.size:
        logger.warning("Direct upload rejected: empty file")
        failure = schemas.UploadResponse(success=False, error="No file provided")
        return JSONResponse(status_code=400, content=failure.model_dump(mode="json"))

    bucket = settings.RECORDING_BUCKET
    content_type = video.content_type or "video/webm"
    try:
        start = time.monotonic()
        s3_key = storage.generate_s3_key(video.filename)
        s3_url = await run_in_threadpool(
            storage.upload_fileobj, s3_client, video.file, bucket, s3_key, content_type, video.size
        )
        upload_time = time.monotonic() - start

        await crud.create_upload_record(db, schemas.UploadRecordCreate(
            s3_key=s3_key,
            bucket=bucket,
            original_filename=video.filename or "unknown",
            file_size=video.size,
            content_type=content_type
        ))
        logger.info(f"Saved upload record for {s3_key}")
    except Exception as e:
        logger.exception(f"Direct upload failed for '{video.filename}'")
        failure = schemas.UploadResponse(success=False, error=str(e))
        return JSONResponse(status_code=500, content=failure.model_dump(mode="json"))
    finally:
        await video.close()

    return schemas.UploadResponse(
        success=True,
        s3_url=s3_url,
        s3_key=s3_key,
        bucket=bucket,
        file_size=video.size,
        upload_time=upload_time,
        upload_speed=upload_speed_mbps(video.size, upload_time)
    )

@router.get("/status/{s3_key:path}", response_model=schemas.UploadStatusResponse)
async def get_upload_status(
    s3_key: str,
    bucket: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    s3_client=Depends(get_s3_client),
    settings: Settings = Depends(get_settings)
):
    logger.info(f"Upload status request for s3_key: {s3_key}, bucket: {bucket}")
    try:
        exists = await run_in_threadpool(storage.object_exists, s3_client, bucket or settings.RECORDING_BUCKET, s3_key)
        if bucket:
            record = await crud.get_upload_record_by_bucket_and_s3_key(db, bucket=bucket, s3_key=s3_key)
        else:
            record = await crud.get_upload_record_by_s3_key(db, s3_key=s3_key)
    except Exception as e:
        logger.exception(f"Upload status check failed for s3_key: {s3_key}")
        return JSONResponse(status_code=500, content=schemas.ErrorResponse(error=str(e)).model_dump(mode="json"))

    return schemas.UploadStatusResponse(
        success=True,
        exists=exists,
        record=schemas.UploadRecordInDB.model_validate(record) if record else None,
        s3_key=s3_key
    )
