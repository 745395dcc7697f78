import json
import time
from typing import Any, Dict

from fastapi.concurrency import run_in_threadpool

import schemas
from config import Settings
from logging_config import get_logger
from storage import build_object_url

logger = get_logger(__name__)

TRANSCRIBE_MEDIA_FORMATS = {"mp3", "mp4", "wav", "flac", "ogg", "amr", "webm", "m4a"}
DEFAULT_MEDIA_FORMAT = "webm"
SEGMENT_TYPES = ["TECHNICAL_CUE", "SHOT"]

def media_format_for(s3_key: str) -> str:
    extension = s3_key.rsplit(".", 1)[-1].lower() if "." in s3_key else ""
    return extension if extension in TRANSCRIBE_MEDIA_FORMATS else DEFAULT_MEDIA_FORMAT

def _s3_video(bucket: str, s3_key: str) -> dict:
    return {"S3Object": {"Bucket": bucket, "Name": s3_key}}

def start_transcription_job(transcribe_client, bucket: str, s3_key: str, settings: Settings) -> schemas.JobStatus:
    try:
        job_name = f"interview-stt-{int(time.time() * 1000)}"
        transcribe_client.start_transcription_job(
            TranscriptionJobName=job_name,
            Media={"MediaFileUri": build_object_url(bucket, s3_key)},
            MediaFormat=media_format_for(s3_key),
            LanguageCode=settings.TRANSCRIBE_LANGUAGE_CODE,
            OutputBucketName=settings.ANALYSIS_BUCKET,
        )
        logger.info(f"STT job started: job_name={job_name}")
        return schemas.JobStatus(job_id=job_name, status="IN_PROGRESS")
    except Exception as e:
        logger.exception(f"Failed to start STT job for s3_key: {s3_key}")
        return schemas.JobStatus(job_id=None, status="FAILED", error=str(e))

def start_face_detection(rekognition_client, bucket: str, s3_key: str) -> schemas.JobStatus:
    try:
        response = rekognition_client.start_face_detection(
            Video=_s3_video(bucket, s3_key),
            FaceAttributes="ALL",
        )
        logger.info(f"Face detection job started: job_id={response['JobId']}")
        return schemas.JobStatus(job_id=response["JobId"], status="IN_PROGRESS")
    except Exception as e:
        logger.exception(f"Failed to start face detection for s3_key: {s3_key}")
        return schemas.JobStatus(job_id=None, status="FAILED", error=str(e))

def start_segment_detection(rekognition_client, bucket: str, s3_key: str) -> schemas.JobStatus:
    try:
        response = rekognition_client.start_segment_detection(
            Video=_s3_video(bucket, s3_key),
            SegmentTypes=SEGMENT_TYPES,
        )
        logger.info(f"Segment detection job started: job_id={response['JobId']}")
        return schemas.JobStatus(job_id=response["JobId"], status="IN_PROGRESS")
    except Exception as e:
        logger.exception(f"Failed to start segment detection for s3_key: {s3_key}")
        return schemas.JobStatus(job_id=None, status="FAILED", error=str(e))

async def start_analysis(
    s3_key: str,
    bucket: str,
    transcribe_client,
    rekognition_client,
    settings: Settings
) -> Dict[str, schemas.JobStatus]:
    """Starts the three analysis jobs one after another.

    Nothing waits for the jobs to finish; a failure in one job is reported in
    its own status and does not stop the others.
    """
    logger.info(f"Starting analysis jobs for s3://{bucket}/{s3_key}")
    stt = await run_in_threadpool(start_transcription_job, transcribe_client, bucket, s3_key, settings)
    face_detection = await run_in_threadpool(start_face_detection, rekognition_client, bucket, s3_key)
    segment_detection = await run_in_threadpool(start_segment_detection, rekognition_client, bucket, s3_key)
    return {"stt": stt, "face_detection": face_detection, "segment_detection": segment_detection}

def fetch_transcription_result(s3_client, analysis_bucket: str, job_name: str) -> Dict[str, Any]:
    key = f"{job_name}.json"
    logger.info(f"Fetching transcription result from s3://{analysis_bucket}/{key}")
    response = s3_client.get_object(Bucket=analysis_bucket, Key=key)
    return json.loads(response["Body"].read())

def fetch_face_detection_result(rekognition_client, job_id: str) -> Dict[str, Any]:
    logger.info(f"Fetching face detection result for job_id: {job_id}")
    response = rekognition_client.get_face_detection(JobId=job_id)
    faces = list(response.get("Faces", []))
    while response.get("NextToken"):
        response = rekognition_client.get_face_detection(JobId=job_id, NextToken=response["NextToken"])
        faces.extend(response.get("Faces", []))

    job_status = response.get("JobStatus")
    if job_status != "SUCCEEDED":
        logger.warning(f"Face detection job {job_id} is {job_status}; evaluating with {len(faces)} face(s)")
    return {"JobStatus": job_status, "Faces": faces}
