"""설명 PDF 렌더링 패키지"""

from .pdf_renderer import PdfReportRenderer, wrap_words
from .styles import LineStyle, match_record, style_line

__all__ = [
    "PdfReportRenderer",
    "LineStyle",
    "match_record",
    "style_line",
    "wrap_words",
]
