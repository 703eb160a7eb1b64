"""PDF 파싱 이벤트 모델

PDF 협력자가 생성하는 이벤트 스트림의 원소:
- PageBreak: 페이지 경계 마커
- TextFragment: 위치 정보를 가진 텍스트 조각
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PageBreak:
    """페이지 경계 마커 (새 페이지 시작)"""

    page_index: int


@dataclass(frozen=True)
class TextFragment:
    """위치 정보를 가진 단일 텍스트 조각"""

    x: float
    y: float
    content: str
    page_index: int = 0


ParseEvent = Union[PageBreak, TextFragment]


__all__ = [
    "PageBreak",
    "TextFragment",
    "ParseEvent",
]
