"""
대표 프레임 추출
업로드 영상에서 식별용/분석용 프레임 2장을 JPEG로 떼어낸다.
이미지 업로드는 그대로 두 단계에 사용하고, 데모 요청은 번들 에셋을 쓴다.
"""
import asyncio
import logging
import shutil
import uuid
from pathlib import Path
from typing import Sequence

import cv2
import numpy as np

from app.common.errors import DemoAssetNotFoundError, FrameExtractionError
from app.schemas.media_dto import FramePair, UploadedArtifact
from app.utils.concurrency import extraction_slot

logger = logging.getLogger(__name__)


class FrameExtractor:
    """OpenCV 기반 대표 프레임 추출기"""

    def __init__(
        self,
        frames_dir: Path,
        demo_movement_frame: Path,
        demo_form_frame: Path,
        positions: Sequence[float] = (0.35, 0.6),
        max_height: int = 720,
    ):
        """
        Args:
            frames_dir: 추출 프레임 임시 폴더
            demo_movement_frame: 데모 식별용 프레임
            demo_form_frame: 데모 분석용 프레임
            positions: (식별, 분석) 프레임의 상대 위치 0.0~1.0
            max_height: 저장 프레임 최대 높이(px)
        """
        if len(positions) != 2:
            raise ValueError("positions must contain exactly two values")
        self.frames_dir = Path(frames_dir)
        self.demo_movement_frame = Path(demo_movement_frame)
        self.demo_form_frame = Path(demo_form_frame)
        self.positions = tuple(min(1.0, max(0.0, float(p))) for p in positions)
        self.max_height = max_height

    async def extract(self, artifact: UploadedArtifact) -> FramePair:
        """업로드 아티팩트 → FramePair (디코딩은 worker thread에서)"""
        if artifact.is_image:
            return FramePair(
                identification_frame=artifact.path,
                analysis_frame=artifact.path,
                source="image",
            )
        async with extraction_slot():
            return await asyncio.to_thread(self._extract_video_frames, artifact.path)

    def demo_frames(self) -> FramePair:
        """번들 데모 프레임 (없으면 404)"""
        for p in (self.demo_movement_frame, self.demo_form_frame):
            if not p.is_file():
                raise DemoAssetNotFoundError(f"Demo asset not found: {p.name}")
        return FramePair(
            identification_frame=str(self.demo_movement_frame),
            analysis_frame=str(self.demo_form_frame),
            source="demo",
        )

    def cleanup(self, pair: FramePair) -> None:
        """추출 프레임 폴더만 삭제 (데모 에셋/업로드 원본은 건드리지 않음)"""
        if pair.work_dir:
            shutil.rmtree(pair.work_dir, ignore_errors=True)
            logger.info(f"🗑️ 프레임 폴더 삭제: {pair.work_dir}")

    def _extract_video_frames(self, video_path: str) -> FramePair:
        cap = cv2.VideoCapture(video_path)
        if not cap.isOpened():
            raise FrameExtractionError(f"Cannot open video: {video_path}")

        work_dir = self.frames_dir / uuid.uuid4().hex[:12]
        try:
            frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
            frames = [self._read_frame_at(cap, frame_count, pos) for pos in self.positions]

            work_dir.mkdir(parents=True, exist_ok=True)
            paths = []
            for name, frame in zip(("identification", "analysis"), frames):
                out = work_dir / f"{name}.jpg"
                if not cv2.imwrite(str(out), self._resize(frame)):
                    raise FrameExtractionError(f"Cannot write frame: {out}")
                paths.append(str(out))
        except FrameExtractionError:
            shutil.rmtree(work_dir, ignore_errors=True)
            raise
        finally:
            cap.release()

        logger.info(f"🎞️ 프레임 추출 완료: {video_path} → {work_dir}")
        return FramePair(
            identification_frame=paths[0],
            analysis_frame=paths[1],
            source="video",
            work_dir=str(work_dir),
        )

    @staticmethod
    def _read_frame_at(cap, frame_count: int, position: float) -> np.ndarray:
        # 일부 컨테이너는 프레임 수를 0으로 보고 → 첫 프레임 사용
        index = int((frame_count - 1) * position) if frame_count > 1 else 0
        cap.set(cv2.CAP_PROP_POS_FRAMES, index)
        ret, frame = cap.read()
        if not ret or frame is None:
            # seek 실패 시 처음부터 다시
            cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
            ret, frame = cap.read()
        if not ret or frame is None:
            raise FrameExtractionError(f"No readable frame at position {position:.2f}")
        return frame

    def _resize(self, frame: np.ndarray) -> np.ndarray:
        height, width = frame.shape[:2]
        if height <= self.max_height:
            return frame
        scale = self.max_height / height
        return cv2.resize(frame, (int(width * scale), self.max_height))
