"""Interview scoring engine.

Combines a transcription result document (AWS Transcribe JSON) and a face
detection result document (AWS Rekognition ``GetFaceDetection`` output) into
an ``InterviewEvaluationResult``.

Only clarity, pace, service orientation and the keyword scan are measured
from the documents. The remaining scores are fixed values from the ruleset;
they are returned with ``placeholder=True`` and listed in
``placeholder_metrics`` so callers can tell them apart.

Extraction helpers never raise on malformed documents. They log a warning and
fall back to an empty transcript or an empty list.
"""
import math
from datetime import datetime
from statistics import fmean
from typing import Any, Dict, List, Optional

import schemas
from logging_config import get_logger
from scoring_rules import ScoringRules, DEFAULT_SCORING_RULES

logger = get_logger(__name__)

FEEDBACK_TEMPLATE = """[음성 평가]
- 발음 명확도: {clarity}
- 말하기 속도: {pace}

[시각 평가]
- 자신감: {confidence}
- 표정: {facial_expression}

[내용 평가]
- 서비스 지향성: {service_orientation}
- 의사소통 능력: {communication_skill}"""

# Report fields that are always fixed values, regardless of the input documents.
PLACEHOLDER_FIELDS = [
    "speech_analysis.total_speaking_time",
    "speech_analysis.pause_analysis",
    "visual_analysis.gesture_analysis",
    "content_analysis.keyword_analysis.formal_language_usage",
]

def calculate_grade(score: float, rules: ScoringRules = DEFAULT_SCORING_RULES) -> str:
    for band in rules.grade_bands:
        if score >= band.min_score:
            return band.grade
    return rules.failing_grade

def clamp_score(value: float) -> float:
    return min(max(value, 0.0), 100.0)

# Document extraction

def extract_transcript(transcribe_result: Any) -> str:
    try:
        transcript = transcribe_result["results"]["transcripts"][0]["transcript"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Could not extract transcript from transcription result")
        return ""
    if not isinstance(transcript, str):
        logger.warning(f"Transcript has unexpected type {type(transcript).__name__}")
        return ""
    return transcript

def extract_items(transcribe_result: Any) -> List[Dict[str, Any]]:
    try:
        items = transcribe_result["results"]["items"]
    except (KeyError, TypeError):
        logger.warning("Could not extract items from transcription result")
        return []
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]

def extract_faces(rekognition_result: Any) -> List[Dict[str, Any]]:
    try:
        faces = rekognition_result["Faces"]
    except (KeyError, TypeError):
        logger.warning("Could not extract faces from face detection result")
        return []
    if not isinstance(faces, list):
        return []
    return [face for face in faces if isinstance(face, dict)]

def _first_alternative(item: Dict[str, Any]) -> Dict[str, Any]:
    alternatives = item.get("alternatives")
    if isinstance(alternatives, list) and alternatives and isinstance(alternatives[0], dict):
        return alternatives[0]
    return {}

def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None

def item_confidence(item: Dict[str, Any]) -> Optional[float]:
    return _to_float(_first_alternative(item).get("confidence"))

def tokenize(transcript: str) -> List[str]:
    return transcript.lower().split()

def count_keyword_hits(tokens: List[str], keywords: List[str]) -> int:
    return sum(1 for keyword in keywords for token in tokens if keyword in token)

# Speech

def calculate_speaking_time(items: List[Dict[str, Any]], rules: ScoringRules = DEFAULT_SCORING_RULES) -> float:
    # TODO: measure from item start_time/end_time once pause analysis is implemented
    return rules.assumed_speaking_time

def words_per_minute(word_count: int, speaking_time: float) -> float:
    return (word_count * 60.0) / speaking_time if speaking_time > 0 else 0.0

def evaluate_clarity(items: List[Dict[str, Any]], rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.ScoreDetail:
    confidences = [c for c in (item_confidence(item) for item in items) if c is not None]
    if confidences:
        score = clamp_score(fmean(confidences) * 100)
    else:
        score = rules.clarity_default_score

    description = rules.clarity_fallback_description
    for band in rules.clarity_descriptions:
        if score >= band.min_score:
            description = band.description
            break

    return schemas.ScoreDetail(
        score=score,
        grade=calculate_grade(score, rules),
        description=description,
        improvement_suggestion=(
            rules.clarity_low_suggestion if score < rules.clarity_suggestion_threshold
            else rules.clarity_ok_suggestion
        )
    )

def evaluate_pace(wpm: float, rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.ScoreDetail:
    score = rules.pace_fallback_score
    for band in rules.pace_bands:
        if band.min_wpm <= wpm <= band.max_wpm:
            score = band.score
            break

    if wpm < rules.slow_wpm:
        description, suggestion = rules.pace_slow_description, rules.pace_slow_suggestion
    elif wpm > rules.fast_wpm:
        description, suggestion = rules.pace_fast_description, rules.pace_fast_suggestion
    else:
        description, suggestion = rules.pace_ok_description, rules.pace_ok_suggestion

    return schemas.ScoreDetail(
        score=score,
        grade=calculate_grade(score, rules),
        description=description,
        improvement_suggestion=suggestion
    )

def placeholder_score(name: str, rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.ScoreDetail:
    value = rules.placeholders[name]
    return schemas.ScoreDetail(
        score=value.score,
        grade=calculate_grade(value.score, rules),
        description=value.description,
        improvement_suggestion=value.improvement_suggestion,
        placeholder=True
    )

def analyze_pauses(items: List[Dict[str, Any]]) -> schemas.PauseAnalysis:
    return schemas.PauseAnalysis()

def analyze_speech(transcribe_result: Any, rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.SpeechAnalysisResult:
    transcript = extract_transcript(transcribe_result)
    items = extract_items(transcribe_result)

    speaking_time = calculate_speaking_time(items, rules)
    word_count = len(transcript.split())
    wpm = words_per_minute(word_count, speaking_time)
    logger.debug(f"Speech: {word_count} words, {len(items)} items, {wpm:.1f} wpm")

    return schemas.SpeechAnalysisResult(
        clarity=evaluate_clarity(items, rules),
        fluency=placeholder_score("fluency", rules),
        pace=evaluate_pace(wpm, rules),
        volume=placeholder_score("volume", rules),
        pause_analysis=analyze_pauses(items),
        total_speaking_time=speaking_time,
        word_count=word_count,
        average_words_per_minute=wpm
    )

# Visual

def analyze_gestures(faces: List[Dict[str, Any]]) -> schemas.GestureAnalysis:
    return schemas.GestureAnalysis(
        head_movement=schemas.MovementDetail(frequency="MEDIUM", appropriateness="APPROPRIATE", description="적절한 머리 움직임"),
        hand_gestures=schemas.MovementDetail(frequency="LOW", appropriateness="APPROPRIATE", description="절제된 손동작"),
        body_stability=schemas.MovementDetail(frequency="HIGH", appropriateness="APPROPRIATE", description="안정적인 자세"),
        facing_direction=schemas.FacingDetail(
            average_yaw=2.0, average_pitch=-1.0, average_roll=0.5,
            stability="STABLE", eye_contact_percentage=85.0
        )
    )

def analyze_visual(rekognition_result: Any, rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.VisualAnalysisResult:
    faces = extract_faces(rekognition_result)
    logger.debug(f"Visual: {len(faces)} face detection(s)")

    return schemas.VisualAnalysisResult(
        posture=placeholder_score("posture", rules),
        eye_contact=placeholder_score("eye_contact", rules),
        facial_expression=placeholder_score("facial_expression", rules),
        professional_appearance=placeholder_score("professional_appearance", rules),
        confidence=placeholder_score("confidence", rules),
        emotion_stability=placeholder_score("emotion_stability", rules),
        gesture_analysis=analyze_gestures(faces)
    )

# Content

def evaluate_service_orientation(transcript: str, rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.ScoreDetail:
    hits = count_keyword_hits(tokenize(transcript), rules.service_keywords)
    score = clamp_score(hits * rules.keyword_points)

    return schemas.ScoreDetail(
        score=score,
        grade=calculate_grade(score, rules),
        description=(
            rules.service_strong_description if hits > rules.service_strong_hits
            else rules.service_weak_description
        ),
        improvement_suggestion=(
            rules.service_low_suggestion if hits < rules.service_weak_hits
            else rules.service_ok_suggestion
        )
    )

def _item_start_time(item: Dict[str, Any]) -> Optional[float]:
    return _to_float(item.get("start_time"))

def detect_keywords(
    tokens: List[str],
    items: List[Dict[str, Any]],
    keywords: List[str],
    context_window: int = 1
) -> List[schemas.DetectedKeyword]:
    detected = []
    for keyword in keywords:
        positions = [i for i, token in enumerate(tokens) if keyword in token]
        if not positions:
            continue

        first = positions[0]
        context = " ".join(tokens[max(0, first - context_window):first + context_window + 1])

        timestamps = []
        for item in items:
            content = str(_first_alternative(item).get("content", "")).lower()
            start_time = _item_start_time(item)
            if keyword in content and start_time is not None:
                timestamps.append(start_time)

        detected.append(schemas.DetectedKeyword(
            keyword=keyword,
            count=len(positions),
            timestamps=timestamps,
            context=context
        ))
    return detected

def analyze_keywords(
    transcript: str,
    items: List[Dict[str, Any]],
    rules: ScoringRules = DEFAULT_SCORING_RULES
) -> schemas.KeywordAnalysis:
    tokens = tokenize(transcript)
    window = rules.keyword_context_window
    return schemas.KeywordAnalysis(
        service_keywords=detect_keywords(tokens, items, rules.service_keywords, window),
        professional_keywords=detect_keywords(tokens, items, rules.professional_keywords, window),
        positive_keywords=detect_keywords(tokens, items, rules.positive_keywords, window),
        confidence_keywords=[],
        formal_language_usage=rules.formal_language_usage
    )

def analyze_content(transcribe_result: Any, rules: ScoringRules = DEFAULT_SCORING_RULES) -> schemas.ContentAnalysisResult:
    transcript = extract_transcript(transcribe_result)
    items = extract_items(transcribe_result)

    return schemas.ContentAnalysisResult(
        answer_completeness=placeholder_score("answer_completeness", rules),
        relevance=placeholder_score("relevance", rules),
        professional_term_usage=placeholder_score("professional_term_usage", rules),
        service_orientation=evaluate_service_orientation(transcript, rules),
        problem_solving_skill=placeholder_score("problem_solving_skill", rules),
        communication_skill=placeholder_score("communication_skill", rules),
        keyword_analysis=analyze_keywords(transcript, items, rules)
    )

# Aggregation

def calculate_overall_score(
    speech: schemas.SpeechAnalysisResult,
    visual: schemas.VisualAnalysisResult,
    content: schemas.ContentAnalysisResult,
    rules: ScoringRules = DEFAULT_SCORING_RULES
) -> float:
    weights = rules.weights
    return math.fsum([
        speech.clarity.score * weights.clarity,
        speech.fluency.score * weights.fluency,
        visual.confidence.score * weights.visual_confidence,
        visual.facial_expression.score * weights.facial_expression,
        content.service_orientation.score * weights.service_orientation,
    ])

def generate_recommendations(
    speech: schemas.SpeechAnalysisResult,
    visual: schemas.VisualAnalysisResult,
    content: schemas.ContentAnalysisResult,
    rules: ScoringRules = DEFAULT_SCORING_RULES
) -> List[str]:
    advice = rules.recommendations
    recommendations = []
    if speech.clarity.score < advice.threshold:
        recommendations.append(advice.clarity)
    if visual.confidence.score < advice.threshold:
        recommendations.append(advice.visual_confidence)
    if content.service_orientation.score < advice.threshold:
        recommendations.append(advice.service_orientation)
    return recommendations

def generate_detailed_feedback(
    speech: schemas.SpeechAnalysisResult,
    visual: schemas.VisualAnalysisResult,
    content: schemas.ContentAnalysisResult
) -> str:
    return FEEDBACK_TEMPLATE.format(
        clarity=speech.clarity.description,
        pace=speech.pace.description,
        confidence=visual.confidence.description,
        facial_expression=visual.facial_expression.description,
        service_orientation=content.service_orientation.description,
        communication_skill=content.communication_skill.description
    )

def collect_placeholder_metrics(
    speech: schemas.SpeechAnalysisResult,
    visual: schemas.VisualAnalysisResult,
    content: schemas.ContentAnalysisResult
) -> List[str]:
    names = []
    for section, analysis in (("speech_analysis", speech), ("visual_analysis", visual), ("content_analysis", content)):
        for field_name in type(analysis).model_fields:
            value = getattr(analysis, field_name)
            if isinstance(value, schemas.ScoreDetail) and value.placeholder:
                names.append(f"{section}.{field_name}")
    return names + PLACEHOLDER_FIELDS

def evaluate_interview(
    transcribe_result: Any,
    rekognition_result: Any,
    interview_id: str,
    candidate_name: str,
    rules: ScoringRules = DEFAULT_SCORING_RULES
) -> schemas.InterviewEvaluationResult:
    logger.info(f"Evaluating interview: interview_id={interview_id}, candidate={candidate_name}")

    speech = analyze_speech(transcribe_result, rules)
    visual = analyze_visual(rekognition_result, rules)
    content = analyze_content(transcribe_result, rules)

    overall_score = calculate_overall_score(speech, visual, content, rules)
    overall_grade = calculate_grade(overall_score, rules)

    result = schemas.InterviewEvaluationResult(
        interview_id=interview_id,
        candidate_name=candidate_name,
        evaluation_date=datetime.utcnow(),
        overall_score=overall_score,
        overall_grade=overall_grade,
        speech_analysis=speech,
        visual_analysis=visual,
        content_analysis=content,
        recommendations=generate_recommendations(speech, visual, content, rules),
        detailed_feedback=generate_detailed_feedback(speech, visual, content),
        placeholder_metrics=collect_placeholder_metrics(speech, visual, content)
    )
    logger.info(f"Evaluation finished for {interview_id}: score={overall_score}, grade={overall_grade}")
    return result
