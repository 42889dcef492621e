"""
업로드 파일 수신 (Media Ingestion)
multipart 파일 1개를 임시 폴더에 저장하고 UploadedArtifact 핸들을 돌려준다.
"""
import logging
import mimetypes
import os
import re
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from fastapi import UploadFile

from app.common.errors import InputError
from app.schemas.media_dto import UploadedArtifact

logger = logging.getLogger(__name__)

NO_UPLOAD_MESSAGE = "No video uploaded"
_CHUNK_SIZE = 1024 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class MediaIngestor:
    """업로드 파일 저장/삭제"""

    def __init__(
        self,
        upload_dir: Path,
        max_bytes: int,
        allowed_types: Sequence[str] = ("video/", "image/"),
    ):
        """
        Args:
            upload_dir: 임시 저장 폴더
            max_bytes: 업로드 최대 크기 (바이트)
            allowed_types: 허용 MIME prefix 목록
        """
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.allowed_types = tuple(allowed_types)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save(self, upload: Optional[UploadFile]) -> UploadedArtifact:
        """
        업로드된 파일 저장

        Args:
            upload: FastAPI UploadFile 객체 (필드가 없으면 None)

        Returns:
            UploadedArtifact (경로, MIME, 크기)

        Raises:
            InputError: 파일 없음 / 허용되지 않는 타입 / 크기 초과
        """
        if upload is None or not upload.filename:
            raise InputError(NO_UPLOAD_MESSAGE)

        mime_type = self._detect_mime(upload)
        if not mime_type.startswith(self.allowed_types):
            raise InputError(f"Unsupported file type: {mime_type}")

        # 파일명 생성 (타임스탬프 + UUID + 원본 파일명)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        unique_id = str(uuid.uuid4())[:8]
        safe_name = _UNSAFE_CHARS.sub("_", os.path.basename(upload.filename)) or "upload"
        filepath = self.upload_dir / f"{timestamp}_{unique_id}_{safe_name}"

        size = 0
        try:
            with open(filepath, "wb") as f:
                while True:
                    chunk = await upload.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise InputError(
                            f"File too large (limit {self.max_bytes // (1024 * 1024)}MB)"
                        )
                    f.write(chunk)
        except InputError:
            filepath.unlink(missing_ok=True)
            raise

        if size == 0:
            filepath.unlink(missing_ok=True)
            raise InputError(NO_UPLOAD_MESSAGE)

        logger.info(f"✅ 파일 저장: {filepath} ({mime_type}, {size} bytes)")
        return UploadedArtifact(
            path=str(filepath),
            filename=upload.filename,
            mime_type=mime_type,
            size=size,
        )

    def discard(self, artifact: Optional[UploadedArtifact]) -> bool:
        """
        임시 파일 삭제

        Returns:
            삭제 성공 여부
        """
        if artifact is None:
            return False
        try:
            if os.path.exists(artifact.path):
                os.remove(artifact.path)
                logger.info(f"🗑️ 임시 파일 삭제: {artifact.path}")
                return True
        except OSError as e:
            logger.warning(f"⚠️ 임시 파일 삭제 실패: {e}")
        return False

    @staticmethod
    def _detect_mime(upload: UploadFile) -> str:
        # 브라우저가 보낸 content_type이 generic이면 확장자로 추정
        content_type = (upload.content_type or "").lower()
        if content_type and content_type != "application/octet-stream":
            return content_type
        guessed, _ = mimetypes.guess_type(upload.filename or "")
        return guessed or "application/octet-stream"
