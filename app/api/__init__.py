import importlib
import logging
import pkgutil
from typing import Iterator, List

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)


def _routers_in(module) -> Iterator[APIRouter]:
    # ROUTERS 리스트 우선, 없으면 모듈 전역의 APIRouter
    declared = getattr(module, "ROUTERS", None)
    candidates = declared if isinstance(declared, (list, tuple)) else vars(module).values()
    for obj in candidates:
        if isinstance(obj, APIRouter):
            yield obj


def include_all_routers(app: FastAPI) -> List[str]:
    """
    app/api 하위 모듈(_로 시작하는 모듈 제외)의 라우터를 전부 등록한다.

    Returns:
        라우터를 등록한 모듈 이름 목록
    """
    registered: List[str] = []
    for info in pkgutil.iter_modules(__path__):
        if info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{__name__}.{info.name}")
        routers = list(_routers_in(module))
        for router in routers:
            app.include_router(router)
        if routers:
            registered.append(info.name)

    logger.info(f"🔌 라우터 등록: {', '.join(registered)}")
    return registered
