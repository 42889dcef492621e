# re-exports: 다른 모듈에서 짧게 import 하도록

from .model_params import (
    DEFAULT_VISION_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_MAX_UPLOAD_MB,
    DEFAULT_FRAME_POSITIONS,
    DEFAULT_FRAME_MAX_HEIGHT,
    VISION_TEMPERATURE,
    DEFAULT_SCORE,
    SCORE_MIN,
    SCORE_MAX,
)

from .fallbacks import (
    FALLBACK_MOVEMENT,
    FALLBACK_KEY_POINTS,
    FALLBACK_COMMON_ERRORS,
    FALLBACK_FEEDBACK,
    PLACEHOLDER_REFERENCE_IMAGE_URL,
    PLACEHOLDER_COMPARISON_IMAGE_URL,
    PLACEHOLDER_IMAGE_URLS,
)
