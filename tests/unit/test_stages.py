# tests/unit/test_stages.py
import pytest

from app.common.errors import ExternalServiceError
from app.domain.constants import (
    FALLBACK_COMMON_ERRORS,
    FALLBACK_FEEDBACK,
    FALLBACK_KEY_POINTS,
    FALLBACK_MOVEMENT,
    PLACEHOLDER_COMPARISON_IMAGE_URL,
    PLACEHOLDER_REFERENCE_IMAGE_URL,
)
from app.domain.form.analyzer import FormAnalyzer
from app.domain.imagery.synthesizer import ComparisonImageSynthesizer, ReferenceImageSynthesizer
from app.domain.movement.identifier import MovementIdentifier
from app.infrastructure.llm.image_client import NoopImageClient


@pytest.mark.asyncio
async def test_identifier_ok(make_vision):
    vision = make_vision({"identify": "Movement: Plank\nKey points:\n- Neutral spine"})
    outcome = await MovementIdentifier(vision, structured_output=False).identify("frame.jpg")

    assert outcome.stage == "movement_identification"
    assert not outcome.degraded
    assert outcome.value.movement == "Plank"
    assert vision.calls[0]["json_mode"] is False


@pytest.mark.asyncio
async def test_identifier_structured_mode_requests_json(make_vision):
    vision = make_vision({"identify": '{"movement": "Plank", "keyPoints": ["Neutral spine"]}'})
    outcome = await MovementIdentifier(vision, structured_output=True).identify("frame.jpg")

    assert outcome.value.movement == "Plank"
    assert vision.calls[0]["json_mode"] is True
    assert "JSON" in vision.calls[0]["system_prompt"]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [ExternalServiceError("timeout"), "", "Key points:\n- a"])
async def test_identifier_fallback(make_vision, response):
    """네트워크 실패 / 빈 응답 / 이름 없는 응답 → 고정 fallback"""
    vision = make_vision({"identify": response})
    outcome = await MovementIdentifier(vision, structured_output=False).identify("frame.jpg")

    assert outcome.degraded
    assert outcome.value.movement == FALLBACK_MOVEMENT
    assert outcome.value.key_points == list(FALLBACK_KEY_POINTS)
    assert outcome.value.common_errors == list(FALLBACK_COMMON_ERRORS)
    assert outcome.reason


@pytest.mark.asyncio
async def test_analyzer_fallback(make_vision):
    vision = make_vision({"analyze": RuntimeError("rate limited")})
    outcome = await FormAnalyzer(vision, structured_output=False).analyze("Squat", "frame.jpg")

    assert outcome.stage == "form_analysis"
    assert outcome.degraded
    assert outcome.value.feedback == list(FALLBACK_FEEDBACK)
    assert outcome.value.correction_points == []
    assert outcome.value.score == 7.0
    assert "rate limited" in outcome.reason


@pytest.mark.asyncio
async def test_analyzer_prompt_names_movement(make_vision):
    vision = make_vision({"analyze": "Feedback:\n- fine\nScore: 9"})
    outcome = await FormAnalyzer(vision, structured_output=False).analyze("Pull-up", "frame.jpg")

    assert not outcome.degraded
    assert outcome.value.score == 9.0
    assert "Pull-up" in vision.calls[0]["system_prompt"]


@pytest.mark.asyncio
async def test_reference_synthesizer_ok(make_images):
    images = make_images(["https://images.test/ref.png"])
    outcome = await ReferenceImageSynthesizer(images).synthesize("Squat")

    assert outcome.value == "https://images.test/ref.png"
    assert "Squat" in images.prompts[0]
    assert "blueprint" in images.prompts[0].lower()


@pytest.mark.asyncio
async def test_image_synthesizers_fallback_to_placeholders(make_images):
    images = make_images([ExternalServiceError("no url"), ExternalServiceError("no url")])
    reference = await ReferenceImageSynthesizer(images).synthesize("Squat")
    comparison = await ComparisonImageSynthesizer(images).synthesize("Squat", ["Knees in"])

    assert reference.degraded and comparison.degraded
    assert reference.value == PLACEHOLDER_REFERENCE_IMAGE_URL
    assert comparison.value == PLACEHOLDER_COMPARISON_IMAGE_URL


@pytest.mark.asyncio
async def test_comparison_prompt_without_issues(make_images):
    images = make_images()
    await ComparisonImageSynthesizer(images).synthesize("Squat")

    assert "showing these issues" not in images.prompts[0]


@pytest.mark.asyncio
async def test_noop_image_client_is_deterministic():
    client = NoopImageClient()

    first = await client.generate("same prompt")
    second = await client.generate("same prompt")

    assert first == second
    assert first.startswith("https://example.com/mock-images/")
