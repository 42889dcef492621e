import base64
import json
import logging
import mimetypes
from pathlib import Path
from typing import Literal, Optional

from app.common.errors import ExternalServiceError
from app.domain.constants import VISION_TEMPERATURE
from app.llm.providers.openai_runtime import get_openai_adapter
from app.utils.types.types import Message

logger = logging.getLogger(__name__)

VisionTask = Literal["identify", "analyze"]


def encode_image_data_url(image_path: str) -> str:
    """로컬 이미지 → data URL (base64)"""
    path = Path(image_path)
    mime_type, _ = mimetypes.guess_type(path.name)
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type or 'image/jpeg'};base64,{encoded}"


class OpenAIVisionClient:
    """멀티모달(텍스트+이미지) chat completion 클라이언트"""

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o",
        max_tokens: int = 800,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            api_key: OpenAI API 키
            model: vision 지원 모델명
            max_tokens: 응답 최대 토큰
            timeout: 요청 타임아웃(초), None이면 SDK 기본값
        """
        self._adapter = get_openai_adapter(api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        logger.info(f"🚀 Vision Client: openai / {model}")

    async def complete(
        self,
        *,
        task: VisionTask,
        system_prompt: str,
        user_prompt: str,
        image_path: str,
        json_mode: bool = False,
    ) -> str:
        """
        이미지 1장 + 지시문으로 completion 1회 요청 (재시도 없음)

        Raises:
            ExternalServiceError: 이미지 읽기/네트워크/SDK 오류, 빈 응답
        """
        try:
            messages: list[Message] = [
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": user_prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": encode_image_data_url(image_path)},
                        },
                    ],
                },
            ]
            text = await self._adapter.chat(
                model=self.model,
                messages=messages,
                temperature=VISION_TEMPERATURE,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                json_mode=json_mode,
            )
        except Exception as e:
            raise ExternalServiceError(f"{task} completion failed: {type(e).__name__}: {e}") from e

        if not text:
            raise ExternalServiceError(f"{task} completion returned empty content")
        return text

    async def aclose(self) -> None:
        await self._adapter.aclose()


class NoopVisionClient:
    """noop 모드: 외부 호출 없이 Mock 응답 반환 (테스트, 과금 없음)"""

    provider = "noop"

    _IDENTIFY = {
        "movement": "Bodyweight Squat",
        "keyPoints": [
            "Feet shoulder-width apart with toes slightly turned out",
            "Hips travel back and down while the chest stays tall",
            "Knees track in line with the toes",
        ],
        "commonErrors": [
            "Knees caving inward during the descent",
            "Heels lifting off the floor",
        ],
    }
    _ANALYZE = {
        "feedback": [
            "Good depth, hips reach parallel at the bottom",
            "Torso stays fairly upright through the rep",
            "Tempo is controlled on the way down",
        ],
        "correctionPoints": [
            {
                "issue": "Slight knee valgus at the bottom",
                "correction": "Push the knees out over the little toes",
            }
        ],
        "score": 7.5,
    }

    async def complete(
        self,
        *,
        task: VisionTask,
        system_prompt: str,
        user_prompt: str,
        image_path: str,
        json_mode: bool = False,
    ) -> str:
        logger.info(f"Noop 모드: {task} Mock 응답 반환 (과금 없음)")
        payload = self._IDENTIFY if task == "identify" else self._ANALYZE
        if json_mode:
            return json.dumps(payload)
        return self._as_text(task, payload)

    @staticmethod
    def _as_text(task: VisionTask, payload: dict) -> str:
        if task == "identify":
            lines = [f"Movement: {payload['movement']}", "", "Key technique points:"]
            lines += [f"- {p}" for p in payload["keyPoints"]]
            lines += ["", "Common errors:"]
            lines += [f"- {e}" for e in payload["commonErrors"]]
            return "\n".join(lines)

        lines = ["Feedback:"]
        lines += [f"- {f}" for f in payload["feedback"]]
        lines += ["", "Corrections:"]
        lines += [f"- {c['issue']}: {c['correction']}" for c in payload["correctionPoints"]]
        lines += ["", f"Score: {payload['score']}/10"]
        return "\n".join(lines)

    async def aclose(self) -> None:
        return None
