from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

import analysis_jobs, evaluation, schemas
from aws_clients import get_s3_client, get_rekognition_client
from config import Settings, get_settings
from logging_config import get_logger
from sample_results import (
    DEMO_INTERVIEW_ID, DEMO_CANDIDATE_NAME, sample_transcribe_result, sample_rekognition_result
)
from scoring_rules import ScoringRules, get_scoring_rules

logger = get_logger(__name__)

router = APIRouter(
    tags=["evaluation"],
)

async def resolve_transcribe_result(request: schemas.EvaluationRequest, s3_client, settings: Settings) -> Dict[str, Any]:
    if request.transcribe_result is not None:
        return request.transcribe_result
    if request.transcribe_job_id:
        return await run_in_threadpool(
            analysis_jobs.fetch_transcription_result, s3_client, settings.ANALYSIS_BUCKET, request.transcribe_job_id
        )
    logger.info(f"No transcription source for {request.interview_id}; using sample document")
    return sample_transcribe_result()

async def resolve_rekognition_result(request: schemas.EvaluationRequest, rekognition_client) -> Dict[str, Any]:
    if request.rekognition_result is not None:
        return request.rekognition_result
    if request.rekognition_job_id:
        return await run_in_threadpool(
            analysis_jobs.fetch_face_detection_result, rekognition_client, request.rekognition_job_id
        )
    logger.info(f"No face detection source for {request.interview_id}; using sample document")
    return sample_rekognition_result()

def _failure(e: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content=schemas.ErrorResponse(error=str(e)).model_dump(mode="json"))

@router.post("/analyze", response_model=schemas.InterviewEvaluationResult)
async def analyze_interview(
    request: schemas.EvaluationRequest,
    s3_client=Depends(get_s3_client),
    rekognition_client=Depends(get_rekognition_client),
    settings: Settings = Depends(get_settings),
    rules: ScoringRules = Depends(get_scoring_rules)
):
    logger.info(f"Evaluation request for interview_id: {request.interview_id}")
    try:
        transcribe_result = await resolve_transcribe_result(request, s3_client, settings)
        rekognition_result = await resolve_rekognition_result(request, rekognition_client)
        result = evaluation.evaluate_interview(
            transcribe_result,
            rekognition_result,
            interview_id=request.interview_id,
            candidate_name=request.candidate_name,
            rules=rules
        )
    except Exception as e:
        logger.exception(f"Evaluation failed for interview_id: {request.interview_id}")
        return _failure(e)

    logger.info(f"Evaluation completed for {request.interview_id}: overall_score={result.overall_score}")
    return result

@router.get("/demo", response_model=schemas.InterviewEvaluationResult)
async def demo_evaluation(rules: ScoringRules = Depends(get_scoring_rules)):
    try:
        return evaluation.evaluate_interview(
            sample_transcribe_result(),
            sample_rekognition_result(),
            interview_id=DEMO_INTERVIEW_ID,
            candidate_name=DEMO_CANDIDATE_NAME,
            rules=rules
        )
    except Exception as e:
        logger.exception("Demo evaluation failed")
        return _failure(e)
