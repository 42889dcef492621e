import os
from pathlib import Path
from typing import Optional

_TRUTHY = ("1", "true", "yes", "y", "on")


def env_bool(name: str, default: bool = False) -> bool:
    """환경 변수에서 bool 타입을 안전하게 읽는다."""
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return int(v)


def env_optional_float(name: str) -> Optional[float]:
    """값이 없으면 None (SDK 기본 타임아웃을 그대로 쓰고 싶을 때)"""
    v = os.getenv(name)
    if v is None or not v.strip():
        return None
    return float(v)


def env_list(name: str, default_list):
    """환경 변수에서 콤마/개행 구분 리스트를 안전하게 읽는다."""
    v = os.getenv(name)
    if not v:
        return list(default_list)
    parts = [p.strip() for p in v.replace("\n", ",").split(",") if p.strip()]
    return parts or list(default_list)


def env_float_list(name: str, default_list):
    return [float(p) for p in env_list(name, default_list)]


def env_path(name: str, default: Path) -> Path:
    """환경 변수에서 파일 경로를 Path 객체로 변환."""
    v = os.getenv(name)
    return Path(v) if v else default
