"""
모델 응답 → MovementProfile / FormAssessment 파서

1) JSON 객체(structured output)면 스키마 검증
2) 아니면 헤딩 기반 휴리스틱 파싱
3) 둘 다 안 되면 ResponseParseError (상위 Stage가 fallback 처리)
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from app.common.errors import ResponseParseError
from app.domain.constants import DEFAULT_SCORE
from app.schemas.analysis_dto import CorrectionPoint, FormAssessment, MovementProfile

# "- foo", "* foo", "• foo", "1. foo", "2) foo"
_BULLET = re.compile(r"^\s*(?:[-*•–]+|\d+[.)])\s+")
_EMPHASIS = re.compile(r"[*_`]+")
_MD_HEADING = re.compile(r"^\s*#+\s*")
_LEADING_PHRASES = re.compile(
    r"^(?:this\s+is\s+an?\b|this\s+is\b|the\s+exercise\s+is\b|the\s+movement\s+is\b"
    r"|identified\s+movement\s*:|movement\s*:|exercise\s*:)\s*",
    re.IGNORECASE,
)
_SCORE_TOKEN = re.compile(r"score", re.IGNORECASE)
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
# "out of 10", "/10" 의 분모
_DENOMINATOR_PREFIX = re.compile(r"(?:out\s+of|/)\s*$", re.IGNORECASE)
_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

# 섹션 헤딩 (대소문자 무시)
_SECTION_PATTERNS: Dict[str, str] = {
    "key_points": r"key\s+(?:technique\s+)?points|technique\s+points",
    "common_errors": r"common\s+(?:errors|mistakes)",
    "feedback": r"feedback(?:\s+points)?",
    "corrections": r"corrections?(?:\s+points)?|correction\s+points|corrective\s+cues",
}
_HEADING = re.compile(
    r"^(?P<name>" + "|".join(f"(?P<{k}>{v})" for k, v in _SECTION_PATTERNS.items()) + r")"
    r"\s*(?::\s*(?P<rest>.*)|$)",
    re.IGNORECASE,
)
# "Score: 8/10", "Score - 8", "Final score 8/10", "Score (out of 10): 6" 모두 score 헤딩
_SCORE_HEADING = re.compile(
    r"^(?:(?:overall|final|form)\s+)*score\b\s*[:=\-–]?\s*(?P<rest>.*)$",
    re.IGNORECASE,
)


# ========== 공통 헬퍼 ==========
def clean_line(line: str) -> str:
    """불릿/마크다운 강조 제거 + 공백 정리"""
    line = _MD_HEADING.sub("", line)
    line = _BULLET.sub("", line)
    line = _EMPHASIS.sub("", line)
    return line.strip()


def match_heading(line: str) -> Optional[Tuple[str, str]]:
    """헤딩이면 (섹션 키, 같은 줄 나머지), 아니면 None"""
    line = clean_line(line)
    m = _SCORE_HEADING.match(line)
    if m:
        return "score", m.group("rest").strip()
    m = _HEADING.match(line)
    if not m:
        return None
    for key in _SECTION_PATTERNS:
        if m.group(key):
            return key, (m.group("rest") or "").strip()
    return None


def split_sections(text: str) -> Tuple[List[str], Dict[str, List[str]]]:
    """
    헤딩 기준으로 본문을 나눈다.

    Returns:
        (첫 헤딩 이전 줄들, {섹션 키: 정리된 줄 리스트})
    """
    preamble: List[str] = []
    sections: Dict[str, List[str]] = {}
    current: Optional[str] = None

    for raw in text.splitlines():
        heading = match_heading(raw)
        if heading:
            current, rest = heading
            sections.setdefault(current, [])
            if rest:
                sections[current].append(rest)
            continue
        line = clean_line(raw)
        if not line:
            continue
        if current is None:
            preamble.append(line)
        else:
            sections[current].append(line)
    return preamble, sections


def first_score_number(text: str) -> Optional[float]:
    """첫 숫자 (분모 "out of 10", "/10" 은 건너뜀), 없으면 None"""
    for m in _NUMBER.finditer(text):
        if _DENOMINATOR_PREFIX.search(text[: m.start()]):
            continue
        return float(m.group())
    return None


def extract_score(text: str, default: float = DEFAULT_SCORE) -> float:
    """'score' 토큰이 있는 줄에서 그 뒤 첫 점수, 없으면 기본값 (clamp는 FormAssessment에서)"""
    for m in _SCORE_TOKEN.finditer(text):
        rest_of_line = text[m.end():].split("\n", 1)[0]
        value = first_score_number(rest_of_line)
        if value is not None:
            return value
    return default


def split_correction(line: str) -> Optional[CorrectionPoint]:
    """'issue: correction' → CorrectionPoint (첫 콜론 기준, 한쪽이라도 비면 None)"""
    issue, sep, correction = clean_line(line).partition(":")
    issue, correction = issue.strip(), correction.strip()
    if not sep or not issue or not correction:
        return None
    return CorrectionPoint(issue=issue, correction=correction)


def _load_json_object(text: str) -> Optional[Dict[str, Any]]:
    stripped = _CODE_FENCE.sub("", text.strip())
    start, end = stripped.find("{"), stripped.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        data = json.loads(stripped[start : end + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [clean_line(str(v)) for v in value if isinstance(v, (str, int, float)) and clean_line(str(v))]


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in data:
            return data[k]
    return None


# ========== MovementProfile ==========
def clean_movement_label(line: str) -> str:
    label = _LEADING_PHRASES.sub("", clean_line(line))
    return label.strip(" \t\"'.:")


def parse_movement_profile(text: str) -> MovementProfile:
    """
    동작 식별 응답 파싱

    Raises:
        ResponseParseError: 빈 응답, 동작 이름 없음, 스키마 위반
    """
    if not text or not text.strip():
        raise ResponseParseError("empty identification response")

    data = _load_json_object(text)
    if data is not None:
        return _movement_from_json(data)

    first = next((ln for ln in text.splitlines() if ln.strip()), "")
    if match_heading(first):
        raise ResponseParseError("identification response has no movement label")
    movement = clean_movement_label(first)
    if not movement:
        raise ResponseParseError("identification response has no movement label")

    _, sections = split_sections(text)
    return MovementProfile(
        movement=movement,
        key_points=sections.get("key_points", []),
        common_errors=sections.get("common_errors", []),
    )


def _movement_from_json(data: Dict[str, Any]) -> MovementProfile:
    movement = _pick(data, "movement", "exercise", "name")
    try:
        return MovementProfile(
            movement=clean_movement_label(str(movement or "")),
            key_points=_string_list(_pick(data, "keyPoints", "key_points")),
            common_errors=_string_list(_pick(data, "commonErrors", "common_errors")),
        )
    except ValidationError as e:
        raise ResponseParseError(f"identification JSON violates schema: {e.errors()[0]['msg']}") from e


# ========== FormAssessment ==========
def parse_form_assessment(text: str) -> FormAssessment:
    """
    폼 분석 응답 파싱

    Raises:
        ResponseParseError: 빈 응답, 피드백/교정 포인트 모두 없음, 스키마 위반
    """
    if not text or not text.strip():
        raise ResponseParseError("empty analysis response")

    data = _load_json_object(text)
    if data is not None:
        return _assessment_from_json(data)

    _, sections = split_sections(text)
    feedback = sections.get("feedback", [])
    corrections = [
        cp for cp in (split_correction(ln) for ln in sections.get("corrections", [])) if cp
    ]
    if not feedback and not corrections:
        raise ResponseParseError("analysis response has no feedback or corrections")

    # Score 섹션 우선, 없으면 본문 전체에서 탐색
    score = first_score_number(" ".join(sections.get("score", [])))
    if score is None:
        score = extract_score(text)

    return FormAssessment(
        feedback=feedback,
        correction_points=corrections,
        score=score,
    )


def _assessment_from_json(data: Dict[str, Any]) -> FormAssessment:
    feedback = _string_list(_pick(data, "feedback"))

    corrections: List[CorrectionPoint] = []
    raw_corrections = _pick(data, "correctionPoints", "correction_points", "corrections")
    if not isinstance(raw_corrections, list):
        raw_corrections = []
    for item in raw_corrections:
        if isinstance(item, dict):
            issue = clean_line(str(item.get("issue") or ""))
            correction = clean_line(str(item.get("correction") or ""))
            if issue and correction:
                corrections.append(CorrectionPoint(issue=issue, correction=correction))
        elif isinstance(item, str):
            cp = split_correction(item)
            if cp:
                corrections.append(cp)

    if not feedback and not corrections:
        raise ResponseParseError("analysis JSON has no feedback or corrections")

    raw_score = _pick(data, "score")
    if (
        isinstance(raw_score, (int, float))
        and not isinstance(raw_score, bool)
        and math.isfinite(raw_score)
    ):
        score = float(raw_score)
    elif isinstance(raw_score, str):
        score = extract_score(f"score {raw_score}")
    else:
        score = DEFAULT_SCORE

    return FormAssessment(feedback=feedback, correction_points=corrections, score=score)
