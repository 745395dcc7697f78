import time
import uuid
from typing import BinaryIO, Optional

from botocore.exceptions import ClientError

from logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = "webm"
MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}

def generate_s3_key(original_filename: Optional[str]) -> str:
    name = original_filename or "video"
    extension = (name.rsplit(".", 1)[1] if "." in name else "") or DEFAULT_EXTENSION
    timestamp = int(time.time() * 1000)
    random_id = uuid.uuid4().hex[:8]
    return f"videos/interview-{timestamp}-{random_id}.{extension}"

def build_object_url(bucket: str, s3_key: str) -> str:
    return f"https://{bucket}.s3.amazonaws.com/{s3_key}"

def generate_presigned_put_url(s3_client, bucket: str, s3_key: str, content_type: str, expires_in: int) -> str:
    logger.info(f"Generating presigned PUT URL: s3_key={s3_key}, content_type={content_type}")
    url = s3_client.generate_presigned_url(
        "put_object",
        Params={"Bucket": bucket, "Key": s3_key, "ContentType": content_type},
        ExpiresIn=expires_in,
    )
    logger.info(f"Presigned URL generated: length={len(url)}")
    return url

def upload_fileobj(s3_client, fileobj: BinaryIO, bucket: str, s3_key: str, content_type: str, size: int = 0) -> str:
    logger.info(f"Uploading to S3: s3_key={s3_key}, size={size / 1024 / 1024:.2f}MB")
    s3_client.upload_fileobj(fileobj, bucket, s3_key, ExtraArgs={"ContentType": content_type})
    s3_url = build_object_url(bucket, s3_key)
    logger.info(f"Upload finished: {s3_url}")
    return s3_url

def object_exists(s3_client, bucket: str, s3_key: str) -> bool:
    try:
        s3_client.head_object(Bucket=bucket, Key=s3_key)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
            logger.debug(f"Object not found: s3://{bucket}/{s3_key}")
            return False
        raise
    return True
