from typing import AsyncIterator

from app.domain.media.frame_extractor import FrameExtractor
from app.domain.media.ingestion import MediaIngestor
from app.services.movement_analysis_service import MovementAnalysisService
from app.services.service_factory import (
    create_frame_extractor,
    create_media_ingestor,
    create_movement_analysis_service,
)


# 요청 단위 서비스: 응답 후 외부 클라이언트 정리
# 테스트에서는 app.dependency_overrides 로 Fake 주입
async def get_movement_analysis_service() -> AsyncIterator[MovementAnalysisService]:
    service = create_movement_analysis_service()
    try:
        yield service
    finally:
        await service.aclose()


def get_media_ingestor() -> MediaIngestor:
    return create_media_ingestor()


def get_frame_extractor() -> FrameExtractor:
    return create_frame_extractor()
