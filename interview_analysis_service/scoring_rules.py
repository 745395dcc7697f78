"""Scoring constants for interview evaluation.

Every threshold, weight, keyword list and placeholder value used by
``evaluation`` lives here, so the whole ruleset can be replaced by a JSON
file (``SCORING_RULES_PATH``) without touching the scoring code. A file only
needs the fields it overrides.
"""
import math
from pathlib import Path
from typing import Any, Dict, List

import aiofiles
from pydantic import BaseModel, Field, field_validator, model_validator

from logging_config import get_logger

logger = get_logger(__name__)

class GradeBand(BaseModel):
    min_score: float
    grade: str

class DescriptionBand(BaseModel):
    min_score: float
    description: str

class PaceBand(BaseModel):
    min_wpm: float
    max_wpm: float
    score: float

class PlaceholderScore(BaseModel):
    score: float = Field(..., ge=0.0, le=100.0)
    description: str
    improvement_suggestion: str

class OverallWeights(BaseModel):
    clarity: float = 0.20
    fluency: float = 0.15
    visual_confidence: float = 0.25
    facial_expression: float = 0.15
    service_orientation: float = 0.25

    @model_validator(mode='after')
    def weights_sum_to_one(self):
        total = math.fsum(self.model_dump().values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"overall weights must sum to 1.0, got {total}")
        return self

class Recommendations(BaseModel):
    threshold: float = 75.0
    clarity: str = "발음을 더욱 명확하게 하기 위한 발성 연습을 권장합니다"
    visual_confidence: str = "자신감 있는 표정과 자세를 연습해 보세요"
    service_orientation: str = "고객 서비스에 대한 구체적인 경험과 사례를 준비해 보세요"

def _default_placeholders() -> Dict[str, PlaceholderScore]:
    values = {
        "fluency": (75.0, "원활한 유창성", "계속 유지하세요"),
        "volume": (80.0, "적절한 음성 크기", "현 수준 유지"),
        "posture": (75.0, "안정적인 자세", "현 상태 유지"),
        "eye_contact": (80.0, "적절한 시선 처리", "좋습니다"),
        "facial_expression": (85.0, "긍정적인 표정", "훌륭합니다"),
        "professional_appearance": (90.0, "전문적인 외모", "완벽합니다"),
        "confidence": (78.0, "적절한 자신감", "더 당당하게"),
        "emotion_stability": (82.0, "안정적인 감정", "좋습니다"),
        "answer_completeness": (70.0, "답변 완성도 보통", "더 구체적인 답변 필요"),
        "relevance": (80.0, "질문과 연관성 높음", "좋습니다"),
        "professional_term_usage": (65.0, "전문용어 사용 부족", "항공 관련 용어 학습 권장"),
        "problem_solving_skill": (75.0, "문제해결 능력 양호", "사례 중심 답변 권장"),
        "communication_skill": (80.0, "원활한 의사소통", "현 수준 유지"),
    }
    return {
        name: PlaceholderScore(score=score, description=description, improvement_suggestion=suggestion)
        for name, (score, description, suggestion) in values.items()
    }

class ScoringRules(BaseModel):
    grade_bands: List[GradeBand] = [
        GradeBand(min_score=90, grade="A"),
        GradeBand(min_score=80, grade="B"),
        GradeBand(min_score=70, grade="C"),
        GradeBand(min_score=60, grade="D"),
    ]
    failing_grade: str = "F"

    # Clarity (recognition confidence)
    clarity_default_score: float = 0.0
    clarity_descriptions: List[DescriptionBand] = [
        DescriptionBand(min_score=90, description="매우 명확한 발음"),
        DescriptionBand(min_score=80, description="명확한 발음"),
        DescriptionBand(min_score=70, description="보통 수준의 발음"),
        DescriptionBand(min_score=60, description="다소 불명확한 발음"),
    ]
    clarity_fallback_description: str = "발음 개선 필요"
    clarity_suggestion_threshold: float = 80.0
    clarity_low_suggestion: str = "발음 연습과 정확한 발성 훈련을 권장합니다."
    clarity_ok_suggestion: str = "현재 수준을 유지하세요."

    # Pace (words per minute)
    assumed_speaking_time: float = 60.0
    pace_bands: List[PaceBand] = [
        PaceBand(min_wpm=120, max_wpm=180, score=100),
        PaceBand(min_wpm=100, max_wpm=220, score=85),
        PaceBand(min_wpm=80, max_wpm=250, score=70),
    ]
    pace_fallback_score: float = 50.0
    slow_wpm: float = 80.0
    fast_wpm: float = 250.0
    pace_slow_description: str = "말하기 속도가 너무 느립니다"
    pace_fast_description: str = "말하기 속도가 너무 빠릅니다"
    pace_ok_description: str = "적절한 말하기 속도입니다"
    pace_slow_suggestion: str = "조금 더 활발하게 말씀해 보세요"
    pace_fast_suggestion: str = "천천히 또박또박 말씀해 보세요"
    pace_ok_suggestion: str = "현재 속도를 유지하세요"

    # Keywords
    service_keywords: List[str] = [
        "고객", "서비스", "안전", "친절", "도움", "배려", "소통", "협력",
        "책임감", "정확성", "신속성", "전문성", "예의", "미소", "감사",
    ]
    professional_keywords: List[str] = [
        "승무원", "항공", "비행", "기내", "안전벨트", "구명조끼", "비상상황",
        "응급처치", "기장", "부기장", "승객", "탑승", "착륙", "이륙",
    ]
    positive_keywords: List[str] = [
        "좋다", "훌륭하다", "최선", "열정", "노력", "성장", "발전", "개선",
        "향상", "긍정적", "적극적", "자신감", "도전", "성취",
    ]
    keyword_points: float = 10.0
    service_strong_hits: int = 5
    service_weak_hits: int = 3
    service_strong_description: str = "서비스 지향적 답변"
    service_weak_description: str = "서비스 마인드 보완 필요"
    service_low_suggestion: str = "고객 서비스와 관련된 경험을 더 구체적으로 언급해 보세요"
    service_ok_suggestion: str = "훌륭한 서비스 마인드입니다"
    keyword_context_window: int = 1
    formal_language_usage: float = 0.8

    placeholders: Dict[str, PlaceholderScore] = Field(default_factory=_default_placeholders)

    weights: OverallWeights = OverallWeights()
    recommendations: Recommendations = Recommendations()

    @model_validator(mode='after')
    def grade_bands_descending(self):
        scores = [band.min_score for band in self.grade_bands]
        if scores != sorted(scores, reverse=True):
            raise ValueError("grade_bands must be ordered from highest to lowest min_score")
        return self

    @field_validator('placeholders', mode='before')
    @classmethod
    def merge_placeholder_defaults(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        merged = {name: p.model_dump() for name, p in _default_placeholders().items()}
        merged.update(v)
        return merged

DEFAULT_SCORING_RULES = ScoringRules()

rules_store = {}

async def load_scoring_rules(path: Path) -> ScoringRules:
    logger.info(f"Loading scoring rules from {path}")
    async with aiofiles.open(path, 'r', encoding='utf-8') as f:
        raw = await f.read()
    return ScoringRules.model_validate_json(raw)

def get_scoring_rules() -> ScoringRules:
    return rules_store.get("rules", DEFAULT_SCORING_RULES)
