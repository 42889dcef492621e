"""
OpenAI SDK를 필요할 때만 동적으로 import하고, 그 성공/실패 결과를 전역 캐시에 저장해 다음 호출부터는 즉시 재사용하는 지연 로딩(lazy import) + 캐시 헬퍼
"""

from __future__ import annotations
import importlib, threading, logging
from typing import Any, Optional, List, Dict
from app.utils.types.types import Message

logger = logging.getLogger(__name__)
_lock = threading.Lock()

_cache: Dict[str, Any] = {
    "AsyncOpenAI": None,  # openai.AsyncOpenAI 클래스
    "available": None,  # import 가능 여부
}


def _import_openai_cls() -> Optional[type]:
    if _cache["available"] is True:
        return _cache["AsyncOpenAI"]
    if _cache["available"] is False:
        return None
    with _lock:
        if _cache["available"] is not None:
            return _cache["AsyncOpenAI"]
        try:
            mod = importlib.import_module("openai")
            AsyncOpenAI = getattr(mod, "AsyncOpenAI")
            _cache["AsyncOpenAI"] = AsyncOpenAI
            _cache["available"] = True
            logger.info("[LLM] OpenAI SDK loaded (lazy)")
            return AsyncOpenAI
        except Exception as e:
            _cache["available"] = False
            logger.warning(f"[LLM] OpenAI SDK import failed: {e}")
            return None


class _OpenAIAdapter:
    """SDK 차단/의존성 분리를 위한 어댑터: .chat() / .generate_image() 만 노출"""

    def __init__(self, api_key: Optional[str]):
        AsyncOpenAI = _import_openai_cls()
        if not AsyncOpenAI:
            raise RuntimeError("OpenAI SDK unavailable")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")
        self._client = AsyncOpenAI(api_key=api_key)

    async def chat(
        self,
        *,
        model: str,
        messages: List[Message],
        temperature: float,
        max_tokens: Optional[int],
        timeout: Optional[float],
        json_mode: bool = False,
    ) -> str:
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if timeout is not None:
            kwargs["timeout"] = timeout
        resp = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        return (resp.choices[0].message.content or "").strip()

    async def generate_image(
        self,
        *,
        model: str,
        prompt: str,
        size: str,
        timeout: Optional[float],
    ) -> Optional[str]:
        kwargs: Dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        resp = await self._client.images.generate(
            model=model,
            prompt=prompt,
            n=1,
            size=size,
            **kwargs,
        )
        return resp.data[0].url if resp.data else None

    async def aclose(self) -> None:
        await self._client.close()


def get_openai_adapter(api_key: Optional[str]) -> _OpenAIAdapter:
    """성공 시 SDK 래퍼, 실패 시 예외(상위에서 noop/Fallback)"""
    return _OpenAIAdapter(api_key=api_key)
