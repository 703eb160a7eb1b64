"""
라인 재조립 모듈

PDF 협력자가 내보낸 이벤트 스트림(PageBreak | TextFragment)을 페이지별 라인으로 재구성합니다.

- 페이지 경계마다 현재 라인 버퍼와 마지막 y 위치를 초기화
- y 좌표를 양자화(round(y * 10))하여 서브픽셀 흔들림을 흡수
- 양자화 y가 임계값(4)보다 크게 바뀌면 새 라인, 아니면 공백으로 이어 붙임
- 빈 페이지는 빈 라인 리스트 (오류 아님)

구성 옵션을 가진 클래스 API(LineReassembler)와 간단한 함수형 API를 함께 제공합니다.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from labexplain.models.fragments import PageBreak, ParseEvent, TextFragment

from .errors import ExtractionFailure

logger = logging.getLogger(__name__)


# -----------------------
# 결과 모델
# -----------------------

@dataclass
class Line:
    """재조립된 단일 라인 (조각 내용을 공백으로 결합)"""

    text: str
    band: int


@dataclass
class Page:
    """재조립된 페이지 (라인 순서 유지)"""

    index: int
    lines: List[Line] = field(default_factory=list)

    @property
    def line_texts(self) -> List[str]:
        return [ln.text for ln in self.lines]

    @property
    def text(self) -> str:
        return "\n".join(self.line_texts)


@dataclass
class ReassembledDocument:
    """재조립 결과: 페이지 리스트와 페이지 수"""

    pages: List[Page] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def page_texts(self) -> List[str]:
        return [p.text for p in self.pages]

    @property
    def text(self) -> str:
        """전체 텍스트 (페이지 사이 빈 줄)"""
        return "\n\n".join(t for t in self.page_texts if t)


# -----------------------
# 공개 API
# -----------------------

def quantize_y(y: float, factor: int = 10) -> int:
    """y 좌표 양자화 (half-up 반올림)"""
    return int(math.floor(float(y) * factor + 0.5))


def reassemble_lines(
    events: Iterable[ParseEvent],
    y_factor: int = 10,
    threshold: int = 4,
) -> ReassembledDocument:
    """이벤트 스트림을 페이지별 라인으로 재조립.

    Args:
        events: PageBreak | TextFragment 순서 스트림
        y_factor: y 양자화 배율
        threshold: 새 라인으로 판단하는 양자화 y 차이

    Returns:
        ReassembledDocument

    Raises:
        ExtractionFailure: 이벤트 스트림 생성 중 협력자 오류 발생 시 (부분 결과 없음)
    """
    doc = ReassembledDocument()
    current: Optional[Page] = None
    buffer: List[str] = []
    band: Optional[int] = None
    last_y: Optional[int] = None

    def _flush() -> None:
        nonlocal buffer
        if current is not None and buffer:
            current.lines.append(Line(text=" ".join(buffer), band=band if band is not None else 0))
        buffer = []

    try:
        for event in events:
            if isinstance(event, PageBreak):
                _flush()
                current = Page(index=len(doc.pages))
                doc.pages.append(current)
                last_y = None
                band = None
                continue

            if not isinstance(event, TextFragment):
                logger.debug("알 수 없는 이벤트 무시: %r", type(event))
                continue

            content = (event.content or "").strip()
            if not content:
                continue

            # 페이지 마커 이전의 조각은 첫 페이지로 간주
            if current is None:
                current = Page(index=0)
                doc.pages.append(current)

            y = quantize_y(event.y, y_factor)
            if last_y is not None and abs(y - last_y) > threshold:
                _flush()
            last_y = y

            if not buffer:
                band = y
            buffer.append(content)
    except ExtractionFailure:
        raise
    except Exception as exc:
        logger.exception("PDF 조각 스트림 파싱 실패")
        raise ExtractionFailure(f"PDF extraction failed: {exc}") from exc

    _flush()
    logger.debug(
        "라인 재조립 완료: pages=%d, lines=%d",
        doc.page_count,
        sum(len(p.lines) for p in doc.pages),
    )
    return doc


# -----------------------
# 클래스 기반 API
# -----------------------

@dataclass
class Settings:
    """라인 재조립 설정값.

    - y_factor: y 좌표 양자화 배율
    - threshold: 새 라인 판단 임계값 (양자화 단위)
    """
    y_factor: int = 10
    threshold: int = 4


class LineReassembler:
    """라인 재조립 클래스 버전.

    함수형 API와 동일한 동작을 제공하며, 의존성 주입과 설정 공유를 용이하게 합니다.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def reassemble(self, events: Iterable[ParseEvent]) -> ReassembledDocument:
        return reassemble_lines(
            events,
            y_factor=self.settings.y_factor,
            threshold=self.settings.threshold,
        )
