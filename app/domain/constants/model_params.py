# Fallback defaults (settings에서 ENV 미지정 시 사용)
DEFAULT_VISION_MODEL = "gpt-4o"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_IMAGE_SIZE = "1024x1024"

# 업로드 상한 (MB)
DEFAULT_MAX_UPLOAD_MB = 50

# 식별 프레임 / 분석 프레임의 영상 내 상대 위치
DEFAULT_FRAME_POSITIONS = (0.35, 0.6)
DEFAULT_FRAME_MAX_HEIGHT = 720

VISION_TEMPERATURE = 0.2

# 폼 점수 (/10)
DEFAULT_SCORE = 7.0
SCORE_MIN = 0.0
SCORE_MAX = 10.0
