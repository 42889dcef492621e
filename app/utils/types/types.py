from __future__ import annotations
from typing import TypedDict, Literal, Union, List

# LLM 메시지 역할(문자열 리터럴 유니온)
Role = Literal["system", "user", "assistant"]


class ImageURL(TypedDict):
    url: str  # https://... 또는 data:image/jpeg;base64,...


class TextPart(TypedDict):
    type: Literal["text"]
    text: str


class ImagePart(TypedDict):
    type: Literal["image_url"]
    image_url: ImageURL


ContentPart = Union[TextPart, ImagePart]


# 공통 LLM 메시지 스키마 (멀티모달이면 content가 파트 리스트)
class Message(TypedDict):
    role: Role
    content: Union[str, List[ContentPart]]
