"""설명 PDF 렌더러 (PyMuPDF)

원본 결과지 PDF 뒤에 교육용 설명 페이지를 덧붙입니다.

- 첫 페이지: 머리 띠(브랜드명, 부제, 발행일), 제목, 안내 상자
- 본문: LineStyle 에 따라 아이콘/배경 상자/단어 줄바꿈, 하단 여백 부족 시 새 페이지
- 마지막 페이지: 경고 상자 + 바닥글(브랜드명, 생성일, 페이지 번호)

PyMuPDF 좌표계는 좌상단 원점, y 는 아래로 증가합니다.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import fitz  # PyMuPDF

from labexplain.services.lab_report.models import LabRecord
from labexplain.services.lab_report.report_date import UNKNOWN_DATE_LABEL
from labexplain.settings import settings

from .styles import (
    BLUE, CHARCOAL, FONT_BOLD, FONT_ITALIC, FONT_REGULAR, GRAY, GREEN, GREEN_BG,
    LIGHT_BLUE, LIGHT_GRAY, NAVY, ORANGE, ORANGE_BG, RED, RED_BG, RED_LIGHT, SILVER,
    WHITE, LineStyle, style_line,
)

logger = logging.getLogger(__name__)

# A4 (pt)
DEFAULT_PAGE_SIZE = (595.0, 842.0)

MARGIN = 55
LINE_HEIGHT = 16
BLANK_LINE_HEIGHT = 8
BOTTOM_RESERVE = 100
DISCLAIMER_HEIGHT = 110

SUBTITLE = "Comprendre vos Analyses Biologiques"
TITLE = "Guide Pédagogique de vos Résultats"
NOTICE_TITLE = "DOCUMENT PÉDAGOGIQUE"
NOTICE_TEXT = "- Aide à la compréhension des termes médicaux"
DISCLAIMER_TITLE = "IMPORTANT : AVERTISSEMENT"
DISCLAIMER_LINES = [
    "Ce résumé a pour objectif d'aider à comprendre les analyses",
    "figurant sur ce compte-rendu. Il ne constitue pas une interprétation",
    "médicale. Pour toute question concernant vos résultats,",
    "veuillez consulter votre médecin.",
]


def text_width(text: str, font: str = FONT_REGULAR, size: float = 10) -> float:
    return fitz.get_text_length(text, fontname=font, fontsize=size)


def wrap_words(text: str, width: float, font: str = FONT_REGULAR, size: float = 10) -> list[str]:
    """단어 단위 줄바꿈 (한 단어가 폭을 넘으면 그대로 한 줄)"""
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if current and text_width(candidate, font, size) > width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


class _Canvas:
    """렌더 1회분의 문서/페이지/커서 상태

    렌더러 인스턴스는 공유될 수 있으므로 호출마다 새 캔버스를 만듭니다.
    """

    def __init__(self, doc: fitz.Document):
        self.doc = doc
        self.page: Optional[fitz.Page] = None
        self.y = 0.0
        if doc.page_count:
            rect = doc[0].rect
            self.width, self.height = rect.width, rect.height
        else:
            self.width, self.height = DEFAULT_PAGE_SIZE

    @property
    def max_width(self) -> float:
        return self.width - MARGIN * 2

    def new_page(self) -> None:
        self.page = self.doc.new_page(width=self.width, height=self.height)
        self.y = MARGIN + 20

    def ensure_space(self, reserve: float = BOTTOM_RESERVE) -> None:
        if self.y > self.height - (MARGIN + reserve):
            self.new_page()

    def text(self, x: float, y: float, text: str, font: str = FONT_REGULAR, size: float = 10, color=CHARCOAL) -> None:
        self.page.insert_text((x, y), text, fontname=font, fontsize=size, color=color)

    def rect(self, x0: float, y0: float, x1: float, y1: float, fill=None, border=None, width: float = 1) -> None:
        self.page.draw_rect(fitz.Rect(x0, y0, x1, y1), color=border, fill=fill, width=width if border else 0)


class PdfReportRenderer:
    """설명 페이지 렌더러 (상태 없음, 스레드 간 공유 가능)"""

    def __init__(self, brand_name: Optional[str] = None):
        self.brand_name = brand_name or settings.brand_name

    # ---------- 고정 영역 ----------
    def _draw_header(self, canvas: _Canvas, date_label: str) -> None:
        w = canvas.width
        canvas.rect(0, 0, w, 100, fill=NAVY)
        canvas.rect(0, 100, w, 105, fill=BLUE)

        brand = self.brand_name.upper().split(" ", 1)
        canvas.text(MARGIN, 45, brand[0], FONT_BOLD, 28, WHITE)
        if len(brand) > 1:
            offset = text_width(brand[0] + " ", FONT_BOLD, 28)
            canvas.text(MARGIN + offset, 45, brand[1], FONT_REGULAR, 28, LIGHT_BLUE)
        canvas.text(MARGIN, 70, SUBTITLE, FONT_ITALIC, 10, LIGHT_BLUE)

        date_w = text_width(date_label, FONT_REGULAR, 9)
        canvas.rect(w - MARGIN - date_w - 25, 48, w - MARGIN, 72, fill=BLUE)
        canvas.text(w - MARGIN - date_w - 12, 64, date_label, FONT_REGULAR, 9, WHITE)

        y = 140
        canvas.rect(MARGIN - 10, y - 27, MARGIN - 4, y + 5, fill=BLUE)
        canvas.text(MARGIN + 5, y, TITLE, FONT_BOLD, 18, NAVY)
        canvas.page.draw_line((MARGIN + 5, y + 8), (MARGIN + 320, y + 8), color=BLUE, width=2)

        y += 50
        canvas.rect(MARGIN, y, MARGIN + canvas.max_width, y + 32, fill=LIGHT_BLUE, border=BLUE)
        canvas.rect(MARGIN + 12, y + 12, MARGIN + 20, y + 20, fill=NAVY)
        canvas.text(MARGIN + 30, y + 20, NOTICE_TITLE, FONT_BOLD, 9, NAVY)
        canvas.text(MARGIN + 165, y + 20, NOTICE_TEXT, FONT_REGULAR, 8, GRAY)
        canvas.y = y + 60

    @staticmethod
    def _draw_icon(canvas: _Canvas, icon: str, x: float, y: float) -> None:
        page = canvas.page
        if icon == "alert":
            page.draw_circle((x, y), 7, color=RED, fill=RED_LIGHT, width=1.5)
            canvas.text(x - 2, y + 4, "!", FONT_BOLD, 10, RED)
        elif icon == "check":
            page.draw_circle((x, y), 7, color=GREEN, fill=GREEN_BG, width=1.5)
            canvas.text(x - 3, y + 4, "+", FONT_BOLD, 11, GREEN)
        elif icon == "info":
            page.draw_circle((x, y), 7, color=BLUE, fill=LIGHT_BLUE, width=1.5)
            canvas.text(x - 1.5, y + 3, "i", FONT_ITALIC, 9, BLUE)
        elif icon == "bullet":
            page.draw_circle((x, y), 3, color=None, fill=BLUE, width=0)

    def _draw_line(self, canvas: _Canvas, style: LineStyle, section_number: int) -> None:
        if style.kind == "section":
            canvas.rect(MARGIN - 5, canvas.y - 24, MARGIN + 27, canvas.y + 8, fill=BLUE)
            label = str(section_number)
            canvas.text(MARGIN - 5 + (8 if section_number > 9 else 11), canvas.y - 2, label, FONT_BOLD, 16, WHITE)
        elif style.kind == "subsection":
            canvas.rect(MARGIN + 5, canvas.y - 16, MARGIN + 9, canvas.y + 6, fill=BLUE)

        if style.box:
            canvas.rect(MARGIN, canvas.y - 14, MARGIN + canvas.max_width, canvas.y + 6, fill=RED_BG, border=RED_LIGHT)
        if style.icon:
            self._draw_icon(canvas, style.icon, MARGIN + style.left_pad - 16, canvas.y - 4)

        wrapped = wrap_words(style.text, canvas.max_width - style.left_pad, style.font, style.size)
        for i, chunk in enumerate(wrapped):
            if i > 0:
                canvas.ensure_space()
            canvas.text(MARGIN + style.left_pad, canvas.y, chunk, style.font, style.size, style.color)
            canvas.y += LINE_HEIGHT
        canvas.y += style.extra_space

    @staticmethod
    def _draw_disclaimer(canvas: _Canvas) -> None:
        canvas.y += 50
        canvas.ensure_space(reserve=DISCLAIMER_HEIGHT + 30)
        top = canvas.y
        x1 = MARGIN + canvas.max_width
        canvas.rect(MARGIN + 4, top + 4, x1 + 4, top + DISCLAIMER_HEIGHT + 4, fill=(0.85, 0.85, 0.87))
        canvas.rect(MARGIN, top, x1, top + DISCLAIMER_HEIGHT, fill=ORANGE_BG, border=ORANGE, width=2)
        canvas.rect(MARGIN + 18, top + 12, MARGIN + 20, top + 26, fill=ORANGE)
        canvas.rect(MARGIN + 13, top + 17, MARGIN + 25, top + 21, fill=ORANGE)
        canvas.text(MARGIN + 40, top + 22, DISCLAIMER_TITLE, FONT_BOLD, 10, ORANGE)
        for i, line in enumerate(DISCLAIMER_LINES):
            canvas.text(MARGIN + 25, top + 49 + i * 14, line, FONT_REGULAR, 9, GRAY)
        canvas.y = top + DISCLAIMER_HEIGHT

    def _draw_footer(self, canvas: _Canvas, date_label: str) -> None:
        width = canvas.width
        footer_y = canvas.height - 35
        canvas.page.draw_line((MARGIN, footer_y - 18), (width - MARGIN, footer_y - 18), color=SILVER, width=1.5)
        canvas.text(MARGIN, footer_y, self.brand_name, FONT_BOLD, 8, NAVY)

        center = f"Document généré le {date_label}"
        center_w = text_width(center, FONT_REGULAR, 7)
        canvas.text((width - center_w) / 2, footer_y, center, FONT_REGULAR, 7, LIGHT_GRAY)

        page_label = f"Page {canvas.doc.page_count}"
        page_w = text_width(page_label, FONT_REGULAR, 8)
        canvas.text(width - MARGIN - page_w, footer_y, page_label, FONT_REGULAR, 8, LIGHT_GRAY)

    # ---------- 공개 API ----------
    def render(
        self,
        explanation: str,
        records: Sequence[LabRecord] = (),
        *,
        original_pdf: Optional[bytes] = None,
        date_label: str = UNKNOWN_DATE_LABEL,
    ) -> bytes:
        """설명 페이지를 덧붙인 PDF 바이트 반환

        Args:
            explanation: LLM 설명 텍스트
            records: 판정된 레코드 (글머리표 스타일 결정)
            original_pdf: 원본 결과지 PDF (None이면 설명 페이지만 생성)
            date_label: 머리 띠/바닥글에 표시할 발행일
        """
        if original_pdf:
            doc = fitz.open(stream=original_pdf, filetype="pdf")
        else:
            doc = fitz.open()
        try:
            canvas = _Canvas(doc)
            original_pages = doc.page_count

            canvas.new_page()
            self._draw_header(canvas, date_label)

            section_number = 0
            for index, line in enumerate(explanation.split("\n")):
                style = style_line(line, records, index)
                if style.kind == "skip":
                    continue
                if style.kind == "blank":
                    canvas.y += BLANK_LINE_HEIGHT
                    continue
                canvas.ensure_space()
                if style.kind == "section":
                    section_number += 1
                self._draw_line(canvas, style, section_number)

            self._draw_disclaimer(canvas)
            self._draw_footer(canvas, date_label)

            logger.info(
                "설명 PDF 생성: original_pages=%d, added_pages=%d",
                original_pages,
                doc.page_count - original_pages,
            )
            return doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()
