"""
동작 식별 / 폼 분석 / 이미지 생성 프롬프트

structured=True  → JSON 객체 응답 요청 (response_format=json_object 와 함께 사용)
structured=False → 헤딩 기반 자유 텍스트 (휴리스틱 파서 대상)
"""
from typing import Optional, Sequence

# ── 동작 식별 ─────────────────────────────────────────────
_IDENTIFY_BASE = (
    "You are an expert strength and conditioning coach. "
    "Identify the exercise being performed in the image, list the key technique "
    "points for performing it correctly, and list the most common errors people make."
)

_IDENTIFY_JSON = (
    "Respond with a JSON object with exactly these keys:\n"
    '  "movement": the exercise name (string),\n'
    '  "keyPoints": 3-5 key technique points (array of strings),\n'
    '  "commonErrors": 2-4 common errors (array of strings).'
)

_IDENTIFY_TEXT = (
    "Use this layout:\n"
    "<exercise name on the first line>\n"
    "Key technique points:\n"
    "- <point>\n"
    "Common errors:\n"
    "- <error>"
)


def identification_system_prompt(structured: bool) -> str:
    return f"{_IDENTIFY_BASE}\n\n{_IDENTIFY_JSON if structured else _IDENTIFY_TEXT}"


def identification_user_prompt(movement_hint: Optional[str] = None) -> str:
    prompt = "Identify the exercise in this frame."
    if movement_hint:
        prompt += f" The athlete says they are performing: {movement_hint}."
    return prompt


# ── 폼 분석 ──────────────────────────────────────────────
_ANALYZE_JSON = (
    "Respond with a JSON object with exactly these keys:\n"
    '  "feedback": 3-5 feedback points (array of strings),\n'
    '  "correctionPoints": array of {"issue": string, "correction": string},\n'
    '  "score": overall form score from 0 to 10 (number).'
)

_ANALYZE_TEXT = (
    "Use this layout:\n"
    "Feedback:\n"
    "- <feedback point>\n"
    "Corrections:\n"
    "- <issue>: <how to correct it>\n"
    "Score: <number>/10"
)


def analysis_system_prompt(movement: str, structured: bool) -> str:
    return (
        f"You are an expert coach analysing an athlete's {movement} technique. "
        "Give 3-5 specific feedback points about the form shown in the image, "
        "pair each problem you see with a concrete correction, and rate the overall "
        "form on a scale of 0 to 10.\n\n"
        f"{_ANALYZE_JSON if structured else _ANALYZE_TEXT}"
    )


def analysis_user_prompt(movement: str) -> str:
    return f"Analyse the {movement} form in this frame."


# ── 이미지 생성 ───────────────────────────────────────────
def reference_image_prompt(movement: str) -> str:
    return (
        f"Blueprint style technical illustration of a person performing a perfect {movement} "
        "on a transparent background. Show clean light-blue outlines of the human figure "
        "with precise lines indicating ideal form, dotted lines for the movement path, "
        "and angle markers at the key joints. Looks like an exercise diagram a fitness "
        "professional would use. No text labels."
    )


def comparison_image_prompt(movement: str, issues: Sequence[str] = ()) -> str:
    prompt = (
        f"Side-by-side blueprint style technical illustration comparing correct and incorrect "
        f"form for a {movement}. Left panel: ideal form with proper joint angles and alignment. "
        "Right panel: the same exercise performed incorrectly"
    )
    if issues:
        prompt += f", showing these issues: {', '.join(issues)}"
    prompt += (
        ". Light-blue outlines for both figures with red highlights on the problem areas, "
        "angle markers at key joints, dark blueprint background. No text labels."
    )
    return prompt
