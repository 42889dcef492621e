"""
동작 분석 파이프라인 DTO
Stage ↔ Orchestrator ↔ Router 간 데이터 전달용

JSON 직렬화는 camelCase (keyPoints, correctionPoints, referenceImageUrl ...)
입력은 snake_case / camelCase 둘 다 허용
"""
import math
from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.domain.constants import DEFAULT_SCORE, SCORE_MAX, SCORE_MIN

T = TypeVar("T")

StageName = Literal[
    "frame_extraction",
    "movement_identification",
    "reference_image",
    "form_analysis",
    "comparison_image",
]
StageStatus = Literal["ok", "degraded"]
Severity = Literal["minor", "moderate", "major"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


# ============ Stage 결과 ============
class MovementProfile(_CamelModel):
    """동작 식별 결과"""
    movement: str = Field(..., min_length=1, description="동작 이름 (예: Back Squat)")
    key_points: list[str] = Field(default_factory=list, description="핵심 기술 포인트")
    common_errors: list[str] = Field(default_factory=list, description="흔한 실수")

    @field_validator("movement")
    @classmethod
    def _strip_movement(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("movement must not be empty")
        return v


class CorrectionPoint(_CamelModel):
    """문제점 → 교정 방법"""
    issue: str = Field(..., min_length=1)
    correction: str = Field(..., min_length=1)


class FormAssessment(_CamelModel):
    """폼 분석 결과"""
    feedback: list[str] = Field(default_factory=list, description="피드백 3~5개")
    correction_points: list[CorrectionPoint] = Field(default_factory=list)
    score: float = Field(..., description="폼 점수 (0-10)")

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, v) -> float:
        return clamp_score(float(v))

    @property
    def severity(self) -> Severity:
        # 교정 포인트 개수 기준 (1개 이하 minor, 2개 moderate, 3개 이상 major)
        n = len(self.correction_points)
        if n <= 1:
            return "minor"
        if n == 2:
            return "moderate"
        return "major"


def clamp_score(score: float) -> float:
    # NaN 은 점수 없음으로 취급
    if math.isnan(score):
        return DEFAULT_SCORE
    return max(SCORE_MIN, min(SCORE_MAX, score))


class StageOutcome(BaseModel, Generic[T]):
    """
    Stage 실행 결과 (tagged result)
    - ok:       외부 호출/파싱 모두 성공
    - degraded: 실패해서 대체값(fallback)을 담고 있음 → reason 참고
    실패 자체(Err)는 예외로 표현한다.
    """
    stage: StageName
    status: StageStatus = "ok"
    value: T
    reason: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"

    @classmethod
    def ok(cls, stage: StageName, value: T) -> "StageOutcome[T]":
        return cls(stage=stage, value=value)

    @classmethod
    def fallback(cls, stage: StageName, value: T, reason: str) -> "StageOutcome[T]":
        return cls(stage=stage, status="degraded", value=value, reason=reason)


# ============ Service Request DTO ============
class DegradedStage(_CamelModel):
    stage: StageName
    reason: str


class AnalyzeMovementRequest(BaseModel):
    """동작 분석 요청 (Router → Service)"""
    identification_frame: str = Field(..., description="동작 식별 프레임 경로")
    analysis_frame: str = Field(..., description="폼 분석 프레임 경로")
    frame_source: Literal["video", "image", "demo"] = "demo"
    movement_hint: Optional[str] = Field(None, description="사용자가 알려준 동작 이름 (선택)")
    # 프레임 추출 단계에서 이미 발생한 degraded 사유
    upstream_degraded: list[DegradedStage] = Field(default_factory=list)


# ============ API Response DTO ============
class AnalysisResult(_CamelModel):
    """동작 분석 응답 (Service → FastAPI Router)"""
    analysis_id: str = Field(..., description="분석 결과 고유 ID")

    # MovementProfile
    movement: str
    key_points: list[str]
    common_errors: list[str]

    # FormAssessment
    feedback: list[str]
    correction_points: list[CorrectionPoint]
    score: float = Field(..., ge=SCORE_MIN, le=SCORE_MAX, description="폼 점수 (0-10)")
    severity: Severity

    # 생성 이미지 (외부 URL, 만료될 수 있음)
    reference_image_url: str
    comparison_image_url: str

    # 결과 품질 표시: 대체값이 섞였으면 degraded
    status: StageStatus = "ok"
    degraded_stages: list[DegradedStage] = Field(default_factory=list)
    frame_source: Literal["video", "image", "demo"]
    provider: str

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "analysisId": "movement_20250101_120000_1a2b3c4d",
                "movement": "Barbell Back Squat",
                "keyPoints": ["Brace the core before descending"],
                "commonErrors": ["Knees caving inward"],
                "feedback": ["Depth is good, reaching parallel"],
                "correctionPoints": [
                    {"issue": "Heels lifting", "correction": "Drive through mid-foot"}
                ],
                "score": 7.5,
                "severity": "minor",
                "referenceImageUrl": "https://.../reference.png",
                "comparisonImageUrl": "https://.../comparison.png",
                "status": "ok",
                "degradedStages": [],
                "frameSource": "video",
                "provider": "openai",
            }
        },
    )


class DemoAnalysisResult(AnalysisResult):
    demo: bool = True

