from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

import analysis_jobs, schemas
from aws_clients import get_transcribe_client, get_rekognition_client
from config import Settings, get_settings
from logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    tags=["analysis"],
)

@router.post("/start", response_model=schemas.AnalysisResponse)
async def start_analysis(
    request: schemas.AnalysisRequest,
    transcribe_client=Depends(get_transcribe_client),
    rekognition_client=Depends(get_rekognition_client),
    settings: Settings = Depends(get_settings)
):
    logger.info(f"Analysis start request for s3_key: {request.s3_key}")
    try:
        jobs = await analysis_jobs.start_analysis(
            request.s3_key,
            request.bucket or settings.RECORDING_BUCKET,
            transcribe_client,
            rekognition_client,
            settings
        )
    except Exception as e:
        logger.exception(f"Failed to start analysis for s3_key: {request.s3_key}")
        failed = schemas.JobStatus(job_id=None, status="FAILED", error=str(e))
        failure = schemas.AnalysisResponse(success=False, stt=failed, face_detection=failed, segment_detection=failed)
        return JSONResponse(status_code=500, content=failure.model_dump(mode="json"))

    return schemas.AnalysisResponse(success=True, **jobs)

@router.get("/status/{job_type}/{job_id}", response_model=schemas.AnalysisStatusResponse)
async def get_analysis_status(job_type: str, job_id: str):
    # Job progress is not tracked; every job is reported as in progress.
    logger.info(f"Analysis status request: job_type={job_type}, job_id={job_id}")
    return schemas.AnalysisStatusResponse(
        success=True,
        job_type=job_type,
        job_id=job_id,
        status="IN_PROGRESS",
        message="Analysis in progress"
    )
