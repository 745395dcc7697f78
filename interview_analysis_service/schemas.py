from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import UploadStatus

# Upload

class PresignedUrlRequest(BaseModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    file_type: str = Field(..., min_length=1)

    @field_validator('file_name', 'file_type')
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

class PresignedUrlResponse(BaseModel):
    success: bool
    presigned_url: str
    s3_key: str
    bucket: str
    expires_in: int
    timestamp: datetime = Field(default_factory=datetime.utcnow)

class UploadResponse(BaseModel):
    success: bool
    s3_url: Optional[str] = None
    s3_key: Optional[str] = None
    bucket: Optional[str] = None
    file_size: Optional[int] = None
    upload_time: Optional[float] = None
    upload_speed: Optional[float] = None
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

class UploadRecordCreate(BaseModel):
    s3_key: str
    bucket: str
    original_filename: str
    file_size: int
    content_type: str
    upload_status: UploadStatus = UploadStatus.COMPLETED

class UploadRecordInDB(UploadRecordCreate):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UploadStatusResponse(BaseModel):
    success: bool
    exists: bool
    record: Optional[UploadRecordInDB] = None
    s3_key: str

# Analysis jobs

class AnalysisRequest(BaseModel):
    s3_key: str = Field(..., min_length=1)
    bucket: Optional[str] = None

    @field_validator('s3_key')
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

class JobStatus(BaseModel):
    job_id: Optional[str] = None
    status: str = Field(..., description="Status of the job: IN_PROGRESS or FAILED")
    error: Optional[str] = None

class AnalysisResponse(BaseModel):
    success: bool
    stt: JobStatus
    face_detection: JobStatus
    segment_detection: JobStatus
    timestamp: datetime = Field(default_factory=datetime.utcnow)

class AnalysisStatusResponse(BaseModel):
    success: bool
    job_type: str
    job_id: str
    status: str
    message: str

# Evaluation

class EvaluationRequest(BaseModel):
    interview_id: str
    candidate_name: str
    transcribe_job_id: Optional[str] = None
    rekognition_job_id: Optional[str] = None
    transcribe_result: Optional[Dict[str, Any]] = None
    rekognition_result: Optional[Dict[str, Any]] = None

class ScoreDetail(BaseModel):
    score: float = Field(..., ge=0.0, le=100.0)
    grade: str
    description: str
    improvement_suggestion: str
    placeholder: bool = Field(False, description="True when the score is a fixed value, not a measurement")

class PauseAnalysis(BaseModel):
    total_pauses: int = 0
    average_pause_duration: float = 0.0
    longest_pause: float = 0.0
    pause_frequency: float = 0.0
    appropriate_pauses: int = 0
    excessive_pauses: int = 0

class MovementDetail(BaseModel):
    frequency: str = Field(..., description="HIGH, MEDIUM or LOW")
    appropriateness: str = Field(..., description="APPROPRIATE, EXCESSIVE or INSUFFICIENT")
    description: str

class FacingDetail(BaseModel):
    average_yaw: float
    average_pitch: float
    average_roll: float
    stability: str = Field(..., description="STABLE or UNSTABLE")
    eye_contact_percentage: float

class GestureAnalysis(BaseModel):
    head_movement: MovementDetail
    hand_gestures: MovementDetail
    body_stability: MovementDetail
    facing_direction: FacingDetail

class DetectedKeyword(BaseModel):
    keyword: str
    count: int
    timestamps: List[float] = []
    context: str
    appropriateness: str = "APPROPRIATE"

class KeywordAnalysis(BaseModel):
    service_keywords: List[DetectedKeyword] = []
    professional_keywords: List[DetectedKeyword] = []
    positive_keywords: List[DetectedKeyword] = []
    confidence_keywords: List[DetectedKeyword] = []
    formal_language_usage: float

class SpeechAnalysisResult(BaseModel):
    clarity: ScoreDetail
    fluency: ScoreDetail
    pace: ScoreDetail
    volume: ScoreDetail
    pause_analysis: PauseAnalysis
    total_speaking_time: float
    word_count: int
    average_words_per_minute: float

class VisualAnalysisResult(BaseModel):
    posture: ScoreDetail
    eye_contact: ScoreDetail
    facial_expression: ScoreDetail
    professional_appearance: ScoreDetail
    confidence: ScoreDetail
    emotion_stability: ScoreDetail
    gesture_analysis: GestureAnalysis

class ContentAnalysisResult(BaseModel):
    answer_completeness: ScoreDetail
    relevance: ScoreDetail
    professional_term_usage: ScoreDetail
    service_orientation: ScoreDetail
    problem_solving_skill: ScoreDetail
    communication_skill: ScoreDetail
    keyword_analysis: KeywordAnalysis

class InterviewEvaluationResult(BaseModel):
    interview_id: str
    candidate_name: str
    evaluation_date: datetime
    overall_score: float
    overall_grade: str
    speech_analysis: SpeechAnalysisResult
    visual_analysis: VisualAnalysisResult
    content_analysis: ContentAnalysisResult
    recommendations: List[str] = []
    detailed_feedback: str
    placeholder_metrics: List[str] = []

class ErrorResponse(BaseModel):
    success: bool = False
    error: Optional[str] = None

# Health

class BucketInfo(BaseModel):
    video: str
    analysis: str
    profile: str

class EnvironmentInfo(BaseModel):
    aws_region: str
    aws_configured: bool
    buckets: BucketInfo

class HealthResponse(BaseModel):
    status: str = "OK"
    message: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    environment: EnvironmentInfo
