"""PyMuPDF 기반 PDF 텍스트 소스

page.get_text("dict") 의 span 하나를 TextFragment 하나로 내보냅니다.
좌표는 span 기준점(origin)을 unit_scale 로 나눈 값입니다.
기본값 16은 포인트를 재조립 임계값이 가정하는 조각 좌표 단위로 맞춥니다.
"""
from __future__ import annotations

import logging
from typing import Iterator

import fitz  # PyMuPDF

from labexplain.models.fragments import PageBreak, ParseEvent, TextFragment

from .base import BasePdfTextSource

logger = logging.getLogger(__name__)

# get_text("dict") 블록 타입: 0=텍스트, 1=이미지
_TEXT_BLOCK = 0


class PyMuPdfTextSource(BasePdfTextSource):
    """PyMuPDF(fitz) PDF 텍스트 소스"""

    def __init__(self, unit_scale: float = 16.0):
        """
        Args:
            unit_scale: 포인트 좌표를 나눌 비율 (0 이하이면 ValueError)
        """
        if unit_scale <= 0:
            raise ValueError(f"unit_scale must be positive: {unit_scale}")
        self.unit_scale = unit_scale

    def iter_events(self, pdf_bytes: bytes) -> Iterator[ParseEvent]:
        if not pdf_bytes:
            raise ValueError("empty PDF byte stream")

        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        try:
            logger.debug("PDF 열기: pages=%d", doc.page_count)
            for page_index, page in enumerate(doc):
                yield PageBreak(page_index=page_index)
                page_dict = page.get_text("dict")
                for block in page_dict.get("blocks", []):
                    if block.get("type") != _TEXT_BLOCK:
                        continue
                    for line in block.get("lines", []):
                        for span in line.get("spans", []):
                            text = span.get("text", "")
                            if not text.strip():
                                continue
                            x, y = span.get("origin", (0.0, 0.0))
                            yield TextFragment(
                                x=x / self.unit_scale,
                                y=y / self.unit_scale,
                                content=text,
                                page_index=page_index,
                            )
        finally:
            doc.close()
