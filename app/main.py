import logging

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from app.api import include_all_routers
from app.common.errors import register_exception_handlers
from app.config.settings import settings

# ---------- 로거 ----------
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# 앱 생성
app = FastAPI(debug=settings.DEBUG_MODE)

# InputError → 400, DemoAssetNotFoundError → 404, AnalysisError → 500
register_exception_handlers(app)

# 자동으로 app/api/* 모듈을 스캔해 라우터 전부 등록
include_all_routers(app)

app.openapi = lambda: get_openapi(
    title="AI Movement Analysis API",
    version="1.0.0",
    description="AI 운동 동작 식별 / 폼 분석 API",
    routes=app.routes,
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.FASTAPI_PORT, reload=True)
