import hashlib
import logging
from typing import Optional

from app.common.errors import ExternalServiceError
from app.llm.providers.openai_runtime import get_openai_adapter

logger = logging.getLogger(__name__)


class OpenAIImageClient:
    """text-to-image 생성 클라이언트 (이미지 1장, 고정 해상도)"""

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "dall-e-3",
        size: str = "1024x1024",
        timeout: Optional[float] = None,
    ):
        self._adapter = get_openai_adapter(api_key)
        self.model = model
        self.size = size
        self.timeout = timeout
        logger.info(f"🚀 Image Client: openai / {model} ({size})")

    async def generate(self, prompt: str) -> str:
        """
        이미지 생성 요청 1회 (재시도 없음)

        Returns:
            생성된 이미지 URL (외부, 만료됨 - 다운로드/저장하지 않음)

        Raises:
            ExternalServiceError: SDK/네트워크 오류, URL 없음
        """
        try:
            url = await self._adapter.generate_image(
                model=self.model,
                prompt=prompt,
                size=self.size,
                timeout=self.timeout,
            )
        except Exception as e:
            raise ExternalServiceError(f"image generation failed: {type(e).__name__}: {e}") from e

        if not url:
            raise ExternalServiceError("image generation returned no URL")
        return url

    async def aclose(self) -> None:
        await self._adapter.aclose()


class NoopImageClient:
    """noop 모드: 프롬프트 해시 기반의 고정 Mock URL 반환"""

    provider = "noop"

    def __init__(self, base_url: str = "https://example.com/mock-images"):
        self.base_url = base_url.rstrip("/")

    async def generate(self, prompt: str) -> str:
        digest = hashlib.sha1(prompt.encode("utf-8")).hexdigest()[:12]
        logger.info("Noop 모드: Mock 이미지 URL 반환 (과금 없음)")
        return f"{self.base_url}/{digest}.png"

    async def aclose(self) -> None:
        return None
