"""
이미지 생성 Stage
- ReferenceImageSynthesizer: 올바른 폼 blueprint 일러스트
- ComparisonImageSynthesizer: 이상적 폼 vs 잘못된 폼 2패널 비교
실패 시 placeholder URL 을 degraded 로 반환.
"""
import logging
from typing import Sequence

from app.domain.constants import (
    PLACEHOLDER_COMPARISON_IMAGE_URL,
    PLACEHOLDER_REFERENCE_IMAGE_URL,
)
from app.domain.movement import prompts
from app.schemas.analysis_dto import StageOutcome

logger = logging.getLogger(__name__)


class _ImageSynthesizer:
    stage = ""
    placeholder_url = ""

    def __init__(self, image_client):
        self.image_client = image_client

    async def _generate(self, prompt: str) -> StageOutcome[str]:
        try:
            url = await self.image_client.generate(prompt)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning(f"⚠️ [{self.stage}] 이미지 생성 실패 → placeholder 사용: {reason}")
            return StageOutcome.fallback(self.stage, self.placeholder_url, reason)

        logger.info(f"🖼️ [{self.stage}] 이미지 생성 완료")
        return StageOutcome.ok(self.stage, url)


class ReferenceImageSynthesizer(_ImageSynthesizer):
    stage = "reference_image"
    placeholder_url = PLACEHOLDER_REFERENCE_IMAGE_URL

    async def synthesize(self, movement: str) -> StageOutcome[str]:
        return await self._generate(prompts.reference_image_prompt(movement))


class ComparisonImageSynthesizer(_ImageSynthesizer):
    stage = "comparison_image"
    placeholder_url = PLACEHOLDER_COMPARISON_IMAGE_URL

    async def synthesize(self, movement: str, issues: Sequence[str] = ()) -> StageOutcome[str]:
        return await self._generate(prompts.comparison_image_prompt(movement, issues))
