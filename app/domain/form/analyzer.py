"""
폼 분석 (Form Analyzer)
동작 이름 + 분석 프레임 → vision completion 1회 → FormAssessment
실패 시 일반 피드백 + 기본 점수 7.0 을 degraded 로 반환.
"""
import logging

from app.domain.constants import DEFAULT_SCORE, FALLBACK_FEEDBACK
from app.domain.movement import prompts
from app.domain.movement.parsing import parse_form_assessment
from app.schemas.analysis_dto import FormAssessment, StageOutcome

logger = logging.getLogger(__name__)

STAGE = "form_analysis"


def fallback_form_assessment() -> FormAssessment:
    return FormAssessment(
        feedback=list(FALLBACK_FEEDBACK),
        correction_points=[],
        score=DEFAULT_SCORE,
    )


class FormAnalyzer:
    def __init__(self, vision_client, structured_output: bool = True):
        self.vision_client = vision_client
        self.structured_output = structured_output

    async def analyze(self, movement: str, frame_path: str) -> StageOutcome[FormAssessment]:
        try:
            text = await self.vision_client.complete(
                task="analyze",
                system_prompt=prompts.analysis_system_prompt(movement, self.structured_output),
                user_prompt=prompts.analysis_user_prompt(movement),
                image_path=frame_path,
                json_mode=self.structured_output,
            )
            assessment = parse_form_assessment(text)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning(f"⚠️ [{STAGE}] 폼 분석 실패 → fallback 사용: {reason}")
            return StageOutcome.fallback(STAGE, fallback_form_assessment(), reason)

        logger.info(
            f"📋 [{STAGE}] {movement}: score={assessment.score:.1f}, "
            f"feedback={len(assessment.feedback)}, corrections={len(assessment.correction_points)}"
        )
        return StageOutcome.ok(STAGE, assessment)
