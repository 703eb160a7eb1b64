"""PDF 텍스트 조각 소스 패키지

PDF 바이트를 PageBreak | TextFragment 이벤트 스트림으로 변환하는 협력자들.
"""

from .base import BasePdfTextSource
from .dummy import DummyPdfTextSource
from .factory import get_pdf_text_source
from .pymupdf_source import PyMuPdfTextSource

__all__ = [
    "BasePdfTextSource",
    "DummyPdfTextSource",
    "PyMuPdfTextSource",
    "get_pdf_text_source",
]
