"""PDF 텍스트 소스 팩토리"""

from labexplain.settings import settings

from .base import BasePdfTextSource
from .pymupdf_source import PyMuPdfTextSource


def get_pdf_text_source() -> BasePdfTextSource:
    """설정에 따라 PDF 텍스트 소스 반환

    Returns:
        BasePdfTextSource 인스턴스
    """
    return PyMuPdfTextSource(unit_scale=settings.pdf_unit_scale)
