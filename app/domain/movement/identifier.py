"""
동작 식별 (Movement Identifier)
대표 프레임 1장 → vision completion 1회 → MovementProfile
실패(네트워크/파싱) 시 고정 fallback 프로파일을 degraded 로 반환, 예외를 올리지 않는다.
"""
import logging
from typing import Optional

from app.domain.constants import FALLBACK_COMMON_ERRORS, FALLBACK_KEY_POINTS, FALLBACK_MOVEMENT
from app.domain.movement import prompts
from app.domain.movement.parsing import parse_movement_profile
from app.schemas.analysis_dto import MovementProfile, StageOutcome

logger = logging.getLogger(__name__)

STAGE = "movement_identification"


def fallback_movement_profile() -> MovementProfile:
    return MovementProfile(
        movement=FALLBACK_MOVEMENT,
        key_points=list(FALLBACK_KEY_POINTS),
        common_errors=list(FALLBACK_COMMON_ERRORS),
    )


class MovementIdentifier:
    def __init__(self, vision_client, structured_output: bool = True):
        self.vision_client = vision_client
        self.structured_output = structured_output

    async def identify(
        self, frame_path: str, movement_hint: Optional[str] = None
    ) -> StageOutcome[MovementProfile]:
        try:
            text = await self.vision_client.complete(
                task="identify",
                system_prompt=prompts.identification_system_prompt(self.structured_output),
                user_prompt=prompts.identification_user_prompt(movement_hint),
                image_path=frame_path,
                json_mode=self.structured_output,
            )
            profile = parse_movement_profile(text)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning(f"⚠️ [{STAGE}] 동작 식별 실패 → fallback 사용: {reason}")
            return StageOutcome.fallback(STAGE, fallback_movement_profile(), reason)

        logger.info(
            f"🏋️ [{STAGE}] {profile.movement} "
            f"(key points {len(profile.key_points)}, errors {len(profile.common_errors)})"
        )
        return StageOutcome.ok(STAGE, profile)
