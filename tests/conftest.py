"""
Pytest Configuration & Shared Fixtures

이 파일은 모든 테스트에서 재사용 가능한 fixture를 정의합니다.
외부 AI 호출은 전부 Fake 클라이언트로 대체합니다 (네트워크 없음).
"""
import pytest
from fastapi.testclient import TestClient
from typing import Dict, List, Optional, Union

from app.common.dependencies import (
    get_frame_extractor,
    get_media_ingestor,
    get_movement_analysis_service,
)
from app.domain.media.frame_extractor import FrameExtractor
from app.domain.media.ingestion import MediaIngestor
from app.services.service_factory import create_movement_analysis_service


# ========================================
# Sample Model Responses
# ========================================

IDENTIFY_TEXT = """This is a Barbell Back Squat.

Key technique points:
- Brace the core before unracking
- Sit the hips back and down
- Keep the knees tracking over the toes

Common errors:
1. Knees caving inward
2. Heels lifting off the floor
"""

ANALYZE_TEXT = """Feedback:
- Depth reaches parallel
- Bar path stays over mid-foot
- Chest drops slightly out of the hole

Corrections:
- Knees caving: push the knees out over the little toes
- Chest dropping: lead the ascent with the upper back

Score: 8.5/10
"""

GARBAGE_TEXT = "   \n"


# ========================================
# Fake External Clients
# ========================================

Scripted = Union[str, Exception]


class FakeVisionClient:
    """task(identify/analyze)별로 정해둔 응답을 돌려주는 Fake"""

    provider = "fake"

    def __init__(self, responses: Optional[Dict[str, Scripted]] = None):
        self.responses = responses or {"identify": IDENTIFY_TEXT, "analyze": ANALYZE_TEXT}
        self.calls: List[dict] = []
        self.closed = False

    async def complete(self, *, task, system_prompt, user_prompt, image_path, json_mode=False):
        self.calls.append(
            {
                "task": task,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "image_path": image_path,
                "json_mode": json_mode,
            }
        )
        response = self.responses[task]
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self):
        self.closed = True


class FakeImageClient:
    """프롬프트를 기록하고 순서대로 URL(또는 예외)을 돌려주는 Fake"""

    provider = "fake"

    def __init__(self, responses: Optional[List[Scripted]] = None):
        self.responses = list(responses or [])
        self.prompts: List[str] = []
        self.closed = False

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.responses:
            response = self.responses.pop(0)
        else:
            response = f"https://images.test/generated-{len(self.prompts)}.png"
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self):
        self.closed = True



# ========================================
# Application Fixtures
# ========================================

@pytest.fixture(scope="session")
def app():
    """FastAPI 애플리케이션 인스턴스"""
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def make_vision():
    """응답을 지정한 FakeVisionClient 생성 (예: {"identify": "...", "analyze": RuntimeError()})"""
    return FakeVisionClient


@pytest.fixture
def make_images():
    """응답 순서를 지정한 FakeImageClient 생성"""
    return FakeImageClient


@pytest.fixture
def fake_vision():
    return FakeVisionClient()


@pytest.fixture
def fake_images():
    return FakeImageClient()


@pytest.fixture
def failing_vision():
    """모든 vision 호출이 실패하는 Fake"""
    return FakeVisionClient(
        {"identify": RuntimeError("vision down"), "analyze": RuntimeError("vision down")}
    )


@pytest.fixture
def failing_images():
    """모든 이미지 생성이 실패하는 Fake"""
    return FakeImageClient([RuntimeError("images down"), RuntimeError("images down")])


@pytest.fixture
def make_service():
    """Fake 클라이언트로 MovementAnalysisService 생성"""
    def _make(vision, images, **kwargs):
        kwargs.setdefault("structured_output", False)
        return create_movement_analysis_service(
            vision_client=vision, image_client=images, provider="fake", **kwargs
        )
    return _make


@pytest.fixture
def demo_frames_dir(tmp_path):
    """데모 에셋 사본 (테스트마다 독립)"""
    from app.config.settings import settings

    d = tmp_path / "demo"
    d.mkdir()
    (d / "movement_frame.png").write_bytes(settings.DEMO_MOVEMENT_FRAME.read_bytes())
    (d / "form_frame.png").write_bytes(settings.DEMO_FORM_FRAME.read_bytes())
    return d


@pytest.fixture
def frame_extractor(tmp_path, demo_frames_dir):
    return FrameExtractor(
        frames_dir=tmp_path / "frames",
        demo_movement_frame=demo_frames_dir / "movement_frame.png",
        demo_form_frame=demo_frames_dir / "form_frame.png",
    )


@pytest.fixture
def media_ingestor(tmp_path):
    return MediaIngestor(upload_dir=tmp_path / "uploads", max_bytes=1024 * 1024)


@pytest.fixture
def override_service(app, make_service, frame_extractor, media_ingestor):
    """
    dependency_overrides 로 Fake 서비스/임시 폴더 주입

    사용법:
        client = override_service(FakeVisionClient(), FakeImageClient())
    """
    def _override(vision, images, **kwargs):
        service = make_service(vision, images, **kwargs)

        async def _service():
            yield service

        app.dependency_overrides[get_movement_analysis_service] = _service
        app.dependency_overrides[get_frame_extractor] = lambda: frame_extractor
        app.dependency_overrides[get_media_ingestor] = lambda: media_ingestor
        return TestClient(app)

    yield _override
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_service, fake_vision, fake_images):
    """정상 응답 Fake 가 주입된 TestClient (API 테스트용)"""
    return override_service(fake_vision, fake_images)


@pytest.fixture
def sample_image_bytes(demo_frames_dir) -> bytes:
    return (demo_frames_dir / "form_frame.png").read_bytes()
