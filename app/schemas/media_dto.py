"""
업로드/프레임 관련 DTO
MediaIngestor, FrameExtractor 입출력용
"""
from typing import Literal

from pydantic import BaseModel, Field

FrameSource = Literal["video", "image", "demo"]


class UploadedArtifact(BaseModel):
    """업로드된 영상/이미지의 임시 파일 핸들"""
    path: str = Field(..., description="임시 저장 경로")
    filename: str = Field(..., description="원본 파일명")
    mime_type: str = Field(..., description="MIME 타입 (video/mp4, image/jpeg ...)")
    size: int = Field(..., ge=0, description="바이트 크기")

    model_config = {"frozen": True}

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class FramePair(BaseModel):
    """식별용 / 분석용 대표 프레임"""
    identification_frame: str = Field(..., description="동작 식별에 쓰는 프레임 경로")
    analysis_frame: str = Field(..., description="폼 분석에 쓰는 프레임 경로")
    source: FrameSource = Field(..., description="프레임 출처")
    # 추출 프레임을 담은 임시 폴더 (정리 대상, 데모/이미지는 None)
    work_dir: str | None = None

    model_config = {"frozen": True}
