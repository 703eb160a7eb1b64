"""PDF 텍스트 소스 기본 인터페이스

모든 PDF 텍스트 소스(PyMuPdfTextSource, DummyPdfTextSource)가 상속하는 기본 인터페이스.
반환 타입은 파싱 이벤트 이터레이터로 통일합니다.

- 새 페이지가 시작될 때마다 PageBreak 한 번
- 그 페이지의 텍스트 조각마다 TextFragment 한 번 (출현 순서)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from labexplain.models.fragments import ParseEvent

class BasePdfTextSource(ABC):
    """PDF 텍스트 소스 기본 추상 클래스

    필수 구현:
        - iter_events(bytes): 핵심 추상 메서드

    파싱 오류는 이터레이션 도중 예외로 전파되며, 라인 재조립 단계에서
    ExtractionFailure 로 변환됩니다.
    """

    @abstractmethod
    def iter_events(self, pdf_bytes: bytes) -> Iterator[ParseEvent]:
        """PDF 바이트에서 파싱 이벤트 스트림 생성

        Args:
            pdf_bytes: PDF 파일 바이트

        Yields:
            PageBreak 또는 TextFragment
        """
        pass


__all__ = [
    "BasePdfTextSource",
]
