import logging
from typing import Optional

from app.config.settings import settings
from app.domain.form.analyzer import FormAnalyzer
from app.domain.imagery.synthesizer import (
    ComparisonImageSynthesizer,
    ReferenceImageSynthesizer,
)
from app.domain.media.frame_extractor import FrameExtractor
from app.domain.media.ingestion import MediaIngestor
from app.domain.movement.identifier import MovementIdentifier
from app.infrastructure.llm.image_client import NoopImageClient, OpenAIImageClient
from app.infrastructure.llm.vision_client import NoopVisionClient, OpenAIVisionClient
from app.services.movement_analysis_service import MovementAnalysisService

logger = logging.getLogger(__name__)


def create_clients(provider: Optional[str] = None):
    """
    외부 AI 클라이언트 생성 (요청마다 새로 만들고 서비스가 닫는다)

    Returns:
        (vision_client, image_client, provider)
    """
    provider = (provider or settings.LLM_PROVIDER).lower()
    if provider == "openai":
        if not settings.OPENAI_API_KEY:
            logger.warning("⚠️ OPENAI_API_KEY 없음 → noop 모드로 동작")
        else:
            vision = OpenAIVisionClient(
                api_key=settings.OPENAI_API_KEY,
                model=settings.OPENAI_VISION_MODEL,
                max_tokens=settings.LLM_MAX_TOKENS,
                timeout=settings.OPENAI_TIMEOUT,
            )
            image = OpenAIImageClient(
                api_key=settings.OPENAI_API_KEY,
                model=settings.OPENAI_IMAGE_MODEL,
                size=settings.OPENAI_IMAGE_SIZE,
                timeout=settings.OPENAI_TIMEOUT,
            )
            return vision, image, "openai"
    elif provider != "noop":
        raise ValueError(f"Unknown LLM provider: {provider}")

    return NoopVisionClient(), NoopImageClient(), "noop"


def create_movement_analysis_service(
    vision_client=None,
    image_client=None,
    provider: Optional[str] = None,
    structured_output: Optional[bool] = None,
    parallel_stages: Optional[bool] = None,
) -> MovementAnalysisService:
    """
    MovementAnalysisService 인스턴스 생성

    Args:
        vision_client: 멀티모달 completion 클라이언트 (None이면 settings 기준 생성)
        image_client: 이미지 생성 클라이언트 (None이면 settings 기준 생성)
        provider: LLM 제공자 (openai, noop)
        structured_output: JSON 응답 요청 여부
        parallel_stages: 레퍼런스 이미지/폼 분석 동시 실행 여부

    Returns:
        MovementAnalysisService 인스턴스
    """
    if vision_client is None or image_client is None:
        default_vision, default_image, provider = create_clients(provider)
        vision_client = vision_client or default_vision
        image_client = image_client or default_image
    provider = provider or getattr(vision_client, "provider", "custom")

    structured = settings.LLM_STRUCTURED_OUTPUT if structured_output is None else structured_output
    parallel = settings.PARALLEL_STAGES if parallel_stages is None else parallel_stages

    return MovementAnalysisService(
        identifier=MovementIdentifier(vision_client, structured_output=structured),
        form_analyzer=FormAnalyzer(vision_client, structured_output=structured),
        reference_synthesizer=ReferenceImageSynthesizer(image_client),
        comparison_synthesizer=ComparisonImageSynthesizer(image_client),
        provider=provider,
        parallel_stages=parallel,
        clients=(vision_client, image_client),
    )


def create_media_ingestor() -> MediaIngestor:
    return MediaIngestor(
        upload_dir=settings.UPLOADS_DIR,
        max_bytes=settings.max_upload_bytes,
        allowed_types=settings.ALLOWED_UPLOAD_TYPES,
    )


def create_frame_extractor() -> FrameExtractor:
    return FrameExtractor(
        frames_dir=settings.FRAMES_DIR,
        demo_movement_frame=settings.DEMO_MOVEMENT_FRAME,
        demo_form_frame=settings.DEMO_FORM_FRAME,
        positions=settings.FRAME_POSITIONS,
        max_height=settings.FRAME_MAX_HEIGHT,
    )
