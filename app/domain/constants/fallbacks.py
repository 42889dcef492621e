# 외부 AI 호출 실패/파싱 실패 시 대체값

FALLBACK_MOVEMENT = "Unidentified Movement"

FALLBACK_KEY_POINTS = [
    "Maintain a neutral spine and braced core throughout the movement",
    "Move through a controlled, pain-free range of motion",
]

FALLBACK_COMMON_ERRORS = [
    "Rushing the repetition and losing control of the tempo",
    "Letting joints collapse out of alignment under load",
]

FALLBACK_FEEDBACK = [
    "We could not complete a detailed analysis of this recording.",
    "Keep a steady tempo and stay in control through the full range of motion.",
    "Film from the side in good lighting for a more accurate assessment.",
]

PLACEHOLDER_REFERENCE_IMAGE_URL = (
    "https://placehold.co/1024x1024/0b2545/ffffff?text=Reference+Form+Unavailable"
)
PLACEHOLDER_COMPARISON_IMAGE_URL = (
    "https://placehold.co/1024x1024/0b2545/ffffff?text=Form+Comparison+Unavailable"
)
PLACEHOLDER_IMAGE_URLS = (
    PLACEHOLDER_REFERENCE_IMAGE_URL,
    PLACEHOLDER_COMPARISON_IMAGE_URL,
)
