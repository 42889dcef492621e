import asyncio
from contextlib import asynccontextmanager

from app.config.settings import settings

# OpenCV 프레임 추출 동시 실행 상한
_extraction_semaphore = asyncio.Semaphore(max(1, settings.FRAME_EXTRACTION_CONCURRENCY))


@asynccontextmanager
async def extraction_slot():
    """
    프레임 추출(디코딩) 작업의 동시 실행 개수를 제한 (혼잡 방지, 서버 안정성↑)
    """
    await _extraction_semaphore.acquire()
    try:
        yield
    finally:
        _extraction_semaphore.release()
