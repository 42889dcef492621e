# tests/unit/test_parsing.py
import json

import pytest

from app.common.errors import ResponseParseError
from app.domain.movement.parsing import (
    clean_line,
    clean_movement_label,
    extract_score,
    parse_form_assessment,
    parse_movement_profile,
    split_correction,
    split_sections,
)
from app.schemas.analysis_dto import clamp_score


# ========== 헬퍼 ==========
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("- Brace the core", "Brace the core"),
        ("* Brace the core", "Brace the core"),
        ("• Brace the core", "Brace the core"),
        ("1. Brace the core", "Brace the core"),
        ("2) Brace the core", "Brace the core"),
        ("**Brace** the core  ", "Brace the core"),
        ("## Key points", "Key points"),
    ],
)
def test_clean_line_strips_bullets_and_emphasis(raw, expected):
    assert clean_line(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("This is a Barbell Back Squat.", "Barbell Back Squat"),
        ("This is an Overhead Press", "Overhead Press"),
        ("The exercise is Romanian Deadlift", "Romanian Deadlift"),
        ("Movement: Kettlebell Swing", "Kettlebell Swing"),
        ("**Push-up**", "Push-up"),
    ],
)
def test_clean_movement_label_removes_leading_phrases(raw, expected):
    assert clean_movement_label(raw) == expected


def test_split_sections_groups_lines_under_headings():
    text = "Squat\n\nKey points:\n- a\n- b\nCommon mistakes: c\n- d\n"
    preamble, sections = split_sections(text)

    assert preamble == ["Squat"]
    assert sections["key_points"] == ["a", "b"]
    # 헤딩과 같은 줄의 내용도 포함
    assert sections["common_errors"] == ["c", "d"]


def test_split_correction_uses_first_colon():
    cp = split_correction("- Knee valgus: push knees out: over the toes")

    assert cp.issue == "Knee valgus"
    assert cp.correction == "push knees out: over the toes"


@pytest.mark.parametrize("line", ["no colon here", ": missing issue", "missing correction:"])
def test_split_correction_rejects_incomplete_lines(line):
    assert split_correction(line) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Score: 8/10", 8.0),
        ("Overall form score is 6.5 out of 10", 6.5),
        ("SCORE = 9", 9.0),
        ("no rating given", 7.0),
    ],
)
def test_extract_score(text, expected):
    assert extract_score(text) == expected


# ========== MovementProfile ==========
def test_parse_movement_profile_text():
    text = (
        "This is a Barbell Back Squat.\n\n"
        "Key technique points:\n- Brace\n- Sit back\n\n"
        "Common errors:\n1. Knees in\n"
    )
    profile = parse_movement_profile(text)

    assert profile.movement == "Barbell Back Squat"
    assert profile.key_points == ["Brace", "Sit back"]
    assert profile.common_errors == ["Knees in"]


def test_parse_movement_profile_label_only():
    """섹션이 없어도 동작 이름만 있으면 성공"""
    profile = parse_movement_profile("Lunge")

    assert profile.movement == "Lunge"
    assert profile.key_points == []
    assert profile.common_errors == []


def test_parse_movement_profile_json():
    payload = {"movement": "Deadlift", "keyPoints": ["Flat back"], "commonErrors": ["Rounding"]}
    profile = parse_movement_profile(f"```json\n{json.dumps(payload)}\n```")

    assert profile.movement == "Deadlift"
    assert profile.key_points == ["Flat back"]
    assert profile.common_errors == ["Rounding"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n  ",
        "Key points:\n- a",
        '{"movement": "", "keyPoints": []}',
    ],
)
def test_parse_movement_profile_rejects_missing_label(text):
    with pytest.raises(ResponseParseError):
        parse_movement_profile(text)


# ========== FormAssessment ==========
def test_parse_form_assessment_text():
    text = (
        "Feedback:\n- Good depth\n- Stable bar path\n\n"
        "Corrections:\n- Heels rise: sit back more\n- not a correction\n\n"
        "Score: 6/10"
    )
    assessment = parse_form_assessment(text)

    assert assessment.feedback == ["Good depth", "Stable bar path"]
    assert len(assessment.correction_points) == 1
    assert assessment.correction_points[0].issue == "Heels rise"
    assert assessment.score == 6.0
    assert assessment.severity == "minor"


def test_parse_form_assessment_default_score():
    assessment = parse_form_assessment("Feedback:\n- Solid rep")

    assert assessment.score == 7.0


@pytest.mark.parametrize("raw, expected", [(15, 10.0), (-3, 0.0), ("12/10", 10.0), (4.25, 4.25)])
def test_parse_form_assessment_json_score_clamped(raw, expected):
    payload = {"feedback": ["ok"], "correctionPoints": [], "score": raw}
    assessment = parse_form_assessment(json.dumps(payload))

    assert assessment.score == expected


def test_parse_form_assessment_json_corrections():
    payload = {
        "feedback": ["Good tempo"],
        "correctionPoints": [
            {"issue": "Hips rise first", "correction": "Drive chest up"},
            {"issue": "", "correction": "ignored"},
            "Knees in: push them out",
        ],
        "score": 5,
    }
    assessment = parse_form_assessment(json.dumps(payload))

    assert [cp.issue for cp in assessment.correction_points] == ["Hips rise first", "Knees in"]
    assert assessment.severity == "moderate"


@pytest.mark.parametrize(
    "text",
    ["", "I cannot evaluate this image.", '{"feedback": [], "correctionPoints": []}'],
)
def test_parse_form_assessment_rejects_empty_content(text):
    with pytest.raises(ResponseParseError):
        parse_form_assessment(text)


# ========== Score 줄 형식 ==========
@pytest.mark.parametrize(
    "score_line, expected",
    [
        ("Score - 8/10", 8.0),
        ("Score (out of 10): 6", 6.0),
        ("Final score: 8", 8.0),
        ("Form score 8/10", 8.0),
        ("Overall score = 5.5", 5.5),
        ("**Score:** 9 out of 10", 9.0),
    ],
)
def test_score_line_formats_close_feedback_section(score_line, expected):
    assessment = parse_form_assessment(f"Feedback:\n- ok\n\n{score_line}")

    assert assessment.feedback == ["ok"]
    assert assessment.score == expected


def test_score_section_wins_over_score_mentioned_in_feedback():
    text = (
        "Feedback:\n- Bracing would score 2 points higher on stability\n\n"
        "Corrections:\n- Loose core: brace before descending\n\n"
        "Score: 8/10"
    )
    assessment = parse_form_assessment(text)

    assert assessment.score == 8.0
    assert assessment.feedback == ["Bracing would score 2 points higher on stability"]


def test_score_falls_back_to_inline_mention():
    """Score 헤딩이 없으면 본문의 score 언급에서 추출"""
    assessment = parse_form_assessment("Feedback:\n- Overall I would score this 6 out of 10")

    assert assessment.score == 6.0


@pytest.mark.parametrize(
    "text, expected",
    [("Score (out of 10): 6", 6.0), ("score: 10/10", 10.0), ("score out of 10", 7.0)],
)
def test_extract_score_skips_denominator(text, expected):
    assert extract_score(text) == expected


def test_parse_form_assessment_json_nan_score_defaults():
    assessment = parse_form_assessment('{"feedback": ["ok"], "score": NaN}')

    assert assessment.score == 7.0


def test_clamp_score_nan_is_default():
    assert clamp_score(float("nan")) == 7.0
    assert clamp_score(11.0) == 10.0


@pytest.mark.parametrize("raw", ["Knees in: push out", 3, {"issue": "a", "correction": "b"}])
def test_parse_form_assessment_json_corrections_must_be_list(raw):
    payload = {"feedback": ["ok"], "correctionPoints": raw, "score": 6}
    assessment = parse_form_assessment(json.dumps(payload))

    assert assessment.correction_points == []
    assert assessment.feedback == ["ok"]
