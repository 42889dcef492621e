from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# helpers
from app.config.env_utils import (
    env_bool,
    env_float_list,
    env_int,
    env_list,
    env_optional_float,
    env_path,
)
from app.domain.constants import (
    DEFAULT_FRAME_MAX_HEIGHT,
    DEFAULT_FRAME_POSITIONS,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_MAX_UPLOAD_MB,
    DEFAULT_VISION_MODEL,
)


# ─────────────────────────────────────────────────────────
# Project root 탐색
#   - .git / pyproject.toml / requirements.txt 중 하나가 보이는 최상단을 루트로 간주
#   - 실패 시 BASE_DIR 환경변수 → 현재 작업 디렉토리
# ─────────────────────────────────────────────────────────
def find_project_root() -> Path:
    env_root = os.getenv("BASE_DIR")
    if env_root:
        return Path(env_root).resolve()
    cur = Path(__file__).resolve()
    for parent in cur.parents:
        if any(
            (parent / m).exists()
            for m in (".git", "pyproject.toml", "requirements.txt")
        ):
            return parent
    return Path.cwd().resolve()


ROOT: Path = find_project_root()
PACKAGE_DIR: Path = Path(__file__).resolve().parents[1]

# ─────────────────────────────────────────────────────────
# .env 로딩
#   - ENV_FILE 지정 시 우선
#   - 없으면 ROOT/.env.<ENV> → 없으면 ROOT/.env
# ─────────────────────────────────────────────────────────
_DEFAULT_ENV = os.getenv("ENV", "test")
_env_file_candidate = ROOT / f".env.{_DEFAULT_ENV}"
_ENV_FILE = (
    Path(os.getenv("ENV_FILE")).resolve()
    if os.getenv("ENV_FILE")
    else (_env_file_candidate if _env_file_candidate.exists() else (ROOT / ".env"))
)
load_dotenv(dotenv_path=_ENV_FILE, override=False)


class Settings:
    # ── App / Runtime ─────────────────────────────────────
    ENV: str = os.getenv("ENV", _DEFAULT_ENV)
    FASTAPI_PORT: int = env_int("FASTAPI_PORT", 8000)
    DEBUG_MODE: bool = env_bool("DEBUG_MODE", False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # ── Base Paths ────────────────────────────────────────
    ROOT: Path = ROOT
    DATA_DIR: Path = env_path("DATA_DIR", ROOT / "data")

    # 업로드(외부 입력) / 추출 프레임 임시 폴더
    UPLOADS_DIR: Path = env_path("UPLOADS_DIR", ROOT / "uploads")
    FRAMES_DIR: Path = env_path("FRAMES_DIR", DATA_DIR / "frames")

    # 번들 데모 에셋 (패키지 내부)
    ASSETS_DIR: Path = env_path("ASSETS_DIR", PACKAGE_DIR / "assets")
    DEMO_MOVEMENT_FRAME: Path = env_path(
        "DEMO_MOVEMENT_FRAME", ASSETS_DIR / "demo" / "movement_frame.png"
    )
    DEMO_FORM_FRAME: Path = env_path(
        "DEMO_FORM_FRAME", ASSETS_DIR / "demo" / "form_frame.png"
    )

    # ── Upload 제한 ───────────────────────────────────────
    MAX_UPLOAD_MB: int = env_int("MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB)
    ALLOWED_UPLOAD_TYPES = env_list("ALLOWED_UPLOAD_TYPES", ["video/", "image/"])

    # ── Frame extraction ──────────────────────────────────
    FRAME_SOURCE: str = os.getenv("FRAME_SOURCE", "video")  # "video" | "demo"
    # (식별용, 분석용) 프레임의 상대 위치 0.0~1.0
    FRAME_POSITIONS = env_float_list("FRAME_POSITIONS", DEFAULT_FRAME_POSITIONS)
    FRAME_MAX_HEIGHT: int = env_int("FRAME_MAX_HEIGHT", DEFAULT_FRAME_MAX_HEIGHT)
    FRAME_EXTRACTION_CONCURRENCY: int = env_int("FRAME_EXTRACTION_CONCURRENCY", 2)

    # ── LLM / Image generation ────────────────────────────
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    # 키가 없으면 noop (테스트, 무과금)
    LLM_PROVIDER: str = os.getenv(
        "LLM_PROVIDER", "openai" if os.getenv("OPENAI_API_KEY") else "noop"
    ).lower()
    OPENAI_VISION_MODEL: str = os.getenv("OPENAI_VISION_MODEL", DEFAULT_VISION_MODEL)
    OPENAI_IMAGE_MODEL: str = os.getenv("OPENAI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL)
    OPENAI_IMAGE_SIZE: str = os.getenv("OPENAI_IMAGE_SIZE", DEFAULT_IMAGE_SIZE)
    # None이면 SDK 기본 타임아웃 사용
    OPENAI_TIMEOUT: Optional[float] = env_optional_float("OPENAI_TIMEOUT")
    LLM_STRUCTURED_OUTPUT: bool = env_bool("LLM_STRUCTURED_OUTPUT", True)
    LLM_MAX_TOKENS: int = env_int("LLM_MAX_TOKENS", 800)

    # 레퍼런스 이미지 생성 ∥ 폼 분석 동시 실행
    PARALLEL_STAGES: bool = env_bool("PARALLEL_STAGES", True)

    def __init__(self) -> None:
        # 자주 쓰는 디렉토리 존재 보장
        for d in (self.UPLOADS_DIR, self.FRAMES_DIR):
            Path(d).mkdir(parents=True, exist_ok=True)

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024


# 전역 싱글톤처럼 사용
settings = Settings()
