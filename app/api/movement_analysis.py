from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.common.dependencies import (
    get_frame_extractor,
    get_media_ingestor,
    get_movement_analysis_service,
)
from app.common.errors import (
    AnalysisError,
    DemoAssetNotFoundError,
    FrameExtractionError,
    InputError,
)
from app.config.settings import settings
from app.domain.media.frame_extractor import FrameExtractor
from app.domain.media.ingestion import MediaIngestor
from app.schemas.analysis_dto import AnalysisResult, DegradedStage, DemoAnalysisResult
from app.services.movement_analysis_service import MovementAnalysisService, build_request

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/movement-analysis", tags=["Movement Analysis"])


# ========== API Endpoint ==========
@router.post("/upload", response_model=AnalysisResult)
async def upload_and_analyze(
        video: Optional[UploadFile] = File(None, description="운동 영상 또는 이미지 파일"),
        file: Optional[UploadFile] = File(None, description="video 필드 대체 이름"),
        movement: Optional[str] = Form(None, description="동작 이름 힌트 (선택)"),
        service: MovementAnalysisService = Depends(get_movement_analysis_service),
        ingestor: MediaIngestor = Depends(get_media_ingestor),
        extractor: FrameExtractor = Depends(get_frame_extractor),
) -> AnalysisResult:
    """
    업로드 영상 동작 분석

    - 400: 파일 없음 / 허용되지 않는 타입 / 크기 초과
    - 500: 파이프라인 밖으로 새어나온 예외
    외부 AI 호출 실패는 대체값으로 채워지고 status="degraded" 로 표시된다.
    """
    # 1. 파일 저장 (없으면 InputError → 400)
    artifact = await ingestor.save(video or file)
    logger.info(f"📥 분석 요청: {artifact.filename} ({artifact.mime_type}, {artifact.size} bytes)")

    frames = None
    try:
        # 2. 대표 프레임 추출
        upstream = []
        if settings.FRAME_SOURCE == "demo":
            frames = extractor.demo_frames()
        else:
            try:
                frames = await extractor.extract(artifact)
            except FrameExtractionError as e:
                logger.warning(f"⚠️ 프레임 추출 실패 → 데모 프레임 사용: {e.message}")
                frames = extractor.demo_frames()
                upstream.append(DegradedStage(stage="frame_extraction", reason=e.message))

        # 3. 분석 실행
        return await service.analyze(build_request(frames, movement, upstream))

    except DemoAssetNotFoundError as e:
        # 업로드 요청에서 데모 에셋이 없는 건 서버 설정 문제
        raise AnalysisError(e.message) from e
    except (InputError, AnalysisError):
        raise
    except Exception as e:
        logger.error(f"❌ 분석 실패: {e}", exc_info=True)
        raise AnalysisError(f"{type(e).__name__}: {e}") from e

    finally:
        if frames is not None:
            extractor.cleanup(frames)
        ingestor.discard(artifact)


@router.post("/demo", response_model=DemoAnalysisResult)
async def analyze_demo(
        movement: Optional[str] = Query(None, description="동작 이름 힌트 (선택)"),
        service: MovementAnalysisService = Depends(get_movement_analysis_service),
        extractor: FrameExtractor = Depends(get_frame_extractor),
) -> DemoAnalysisResult:
    """
    번들 데모 프레임으로 동일 파이프라인 실행 (업로드 없이 테스트용)

    - 404: 데모 에셋 없음
    - 500: 예상치 못한 오류
    """
    frames = extractor.demo_frames()
    logger.info(f"📥 데모 분석 요청 (hint={movement})")

    try:
        result = await service.analyze(build_request(frames, movement))
    except AnalysisError:
        raise
    except Exception as e:
        logger.error(f"❌ 데모 분석 실패: {e}", exc_info=True)
        raise AnalysisError(f"{type(e).__name__}: {e}") from e

    return DemoAnalysisResult.model_validate({**result.model_dump(), "demo": True})


ROUTERS = [router]
