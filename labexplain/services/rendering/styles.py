"""설명 텍스트 라인 스타일 결정

LLM 설명 텍스트의 각 라인을 렌더링 스타일로 변환합니다.
글머리표(•, *, -) 라인의 색/아이콘은 텍스트의 섹션 위치가 아니라
라인이 가리키는 LabRecord 의 status 로 결정합니다.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from labexplain.services.lab_report.models import LabRecord, RecordStatus

# 색상 팔레트 (RGB 0~1)
NAVY = (0.05, 0.20, 0.35)
BLUE = (0.0, 209 / 255, 220 / 255)
LIGHT_BLUE = (0.88, 0.94, 0.98)
GREEN = (0.11, 0.56, 0.25)
GREEN_BG = (0.94, 0.98, 0.95)
RED = (0.78, 0.10, 0.10)
RED_BG = (0.99, 0.95, 0.95)
RED_LIGHT = (0.95, 0.75, 0.75)
ORANGE = (0.85, 0.50, 0.10)
ORANGE_BG = (0.99, 0.97, 0.93)
CHARCOAL = (0.15, 0.15, 0.18)
GRAY = (0.35, 0.35, 0.40)
LIGHT_GRAY = (0.55, 0.55, 0.58)
SILVER = (0.88, 0.88, 0.90)
WHITE = (1.0, 1.0, 1.0)

# PyMuPDF base-14 글꼴
FONT_REGULAR = "helv"
FONT_BOLD = "hebo"
FONT_ITALIC = "heit"

_SECTION_RE = re.compile(r"^\d+\.\s+[A-ZÉÈÊ]")
_BULLET_RE = re.compile(r"^[•*-]\s*")
_CATEGORY_RE = re.compile(r"^[A-ZÉÈÊ].*:$")
_VALUE_LABEL_RE = re.compile(r"^(Votre|Repères|Position|Qu'est-ce|Nombre|Valeurs|Catégories)", re.IGNORECASE)
_CATEGORY_EXCLUDED = ("Vue", "Nombre", "Catégories")


@dataclass
class LineStyle:
    """렌더링할 라인 하나의 스타일"""

    kind: str
    text: str
    font: str = FONT_REGULAR
    size: float = 10
    color: tuple = CHARCOAL
    left_pad: float = 0
    extra_space: float = 0
    icon: Optional[str] = None
    box: bool = False
    status: Optional[RecordStatus] = None


def match_record(text: str, records: Sequence[LabRecord]) -> Optional[LabRecord]:
    """글머리표 텍스트가 가리키는 레코드 (이름이 가장 길게 일치하는 것)"""
    lowered = text.lower()
    best: Optional[LabRecord] = None
    for record in records:
        name = record.name.lower()
        if not name or not lowered.startswith(name):
            continue
        if best is None or len(record.name) > len(best.name):
            best = record
    return best


def section_icon(text: str) -> Optional[str]:
    """섹션 제목 아이콘 (표시용, 라인 상태 판정에는 쓰지 않음)"""
    upper = text.upper()
    if "DEHORS" in upper:
        return "alert"
    if "DANS" in upper:
        return "check"
    if "RÉCAPITULATIF" in upper or "RECAPITULATIF" in upper:
        return "info"
    return None


def bullet_style(text: str, records: Sequence[LabRecord]) -> LineStyle:
    """글머리표 라인 스타일 (매칭된 레코드의 status 기준)"""
    record = match_record(text, records)
    status = record.status if record is not None else None

    if status == RecordStatus.OUT_OF_RANGE:
        return LineStyle(
            kind="bullet", text=text, font=FONT_BOLD, size=11 if ":" in text else 10,
            color=RED, left_pad=25, icon="alert", box=True, status=status,
        )
    if status == RecordStatus.IN_RANGE:
        return LineStyle(
            kind="bullet", text=text, font=FONT_BOLD if ":" in text else FONT_REGULAR,
            color=GREEN, left_pad=25, icon="check", status=status,
        )
    return LineStyle(kind="bullet", text=text, left_pad=25, icon="bullet", status=status)


def style_line(line: str, records: Sequence[LabRecord], index: int = 0) -> LineStyle:
    """설명 텍스트 라인 하나를 스타일로 변환

    Args:
        line: 원본 라인
        records: 판정된 레코드 (글머리표 스타일 결정용)
        index: 설명 텍스트 내 라인 번호 (첫 줄은 정의문으로 보지 않음)
    """
    text = line.strip()
    if not text:
        return LineStyle(kind="blank", text="")
    if "====" in text:
        return LineStyle(kind="skip", text="")

    if _SECTION_RE.match(text):
        return LineStyle(
            kind="section", text=text, font=FONT_BOLD, size=15, color=NAVY,
            left_pad=40, extra_space=20, icon=section_icon(text),
        )

    if text.startswith("---"):
        return LineStyle(
            kind="subsection", text=re.sub(r"^---\s*", "", text), font=FONT_BOLD,
            size=12, color=NAVY, left_pad=18, extra_space=15,
        )

    if _BULLET_RE.match(text):
        return bullet_style(_BULLET_RE.sub("", text, count=1), records)

    if _CATEGORY_RE.match(text) and not text.startswith(_CATEGORY_EXCLUDED):
        return LineStyle(
            kind="category", text=text, font=FONT_BOLD, size=10, color=BLUE,
            left_pad=15, extra_space=10,
        )

    if _VALUE_LABEL_RE.match(text) and ":" in text:
        if re.match(r"^Qu'est-ce", text, re.IGNORECASE):
            return LineStyle(
                kind="label", text=text, font=FONT_BOLD, size=9, color=NAVY,
                left_pad=30, extra_space=5,
            )
        return LineStyle(kind="label", text=text, size=9, color=GRAY, left_pad=30)

    if index > 0 and not re.match(r"^[A-ZÉÈÊ][A-ZÉÈÊ]", text):
        return LineStyle(kind="definition", text=text, size=9, left_pad=30)

    return LineStyle(kind="text", text=text)
