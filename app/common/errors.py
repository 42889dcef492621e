"""
Movement Analysis 예외 계층 + FastAPI 예외 핸들러

- InputError            → 400 {"error": ...}
- DemoAssetNotFoundError → 404 {"error": ...}
- AnalysisError         → 500 {"error": ..., "message": ...}
- ExternalServiceError / ResponseParseError / FrameExtractionError 는
  파이프라인 내부에서 대체값으로 흡수되며 HTTP로 노출되지 않는다.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MovementAnalysisError(Exception):
    """모든 도메인 예외의 베이스"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(MovementAnalysisError):
    """요청 입력 누락/형식 오류"""

    status_code = 400


class DemoAssetNotFoundError(MovementAnalysisError):
    """번들 데모 에셋 없음"""

    status_code = 404


class ExternalServiceError(MovementAnalysisError):
    """외부 AI 호출 실패 (네트워크, SDK, 빈 응답)"""


class ResponseParseError(MovementAnalysisError):
    """모델 응답을 MovementProfile / FormAssessment 로 해석할 수 없음"""


class FrameExtractionError(MovementAnalysisError):
    """업로드 영상에서 프레임을 읽을 수 없음"""


class AnalysisError(MovementAnalysisError):
    """오케스트레이터 밖으로 새어나온 예외"""

    public_error = "Movement analysis failed"


async def _input_error_handler(request: Request, exc: InputError) -> JSONResponse:
    logger.warning(f"⚠️ 잘못된 요청 ({request.url.path}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _demo_asset_handler(
    request: Request, exc: DemoAssetNotFoundError
) -> JSONResponse:
    logger.error(f"❌ 데모 에셋 없음: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_error, "message": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InputError, _input_error_handler)
    app.add_exception_handler(DemoAssetNotFoundError, _demo_asset_handler)
    app.add_exception_handler(AnalysisError, _analysis_error_handler)
