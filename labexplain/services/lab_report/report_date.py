"""결과지 발행일 추출 ("Édité le 12 mars 2024")

발행일 라인은 노이즈 필터에서 제거되므로 필터링 전 원문 텍스트에서 읽습니다.
"""

import re
from datetime import date

FRENCH_MONTHS = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]

UNKNOWN_DATE_LABEL = "Date inconnue"

_EDITED_RE = re.compile(r"[ÉE]dit[ée] le (\d{1,2}) (\w+) (\d{4})", re.IGNORECASE)


def extract_report_date(text: str) -> date | None:
    """원문 텍스트에서 발행일 추출, 없거나 잘못되면 None"""
    m = _EDITED_RE.search(text or "")
    if not m:
        return None
    month_name = m.group(2).lower()
    if month_name not in FRENCH_MONTHS:
        return None
    try:
        return date(int(m.group(3)), FRENCH_MONTHS.index(month_name) + 1, int(m.group(1)))
    except ValueError:
        return None


def format_french_date(value: date | None) -> str:
    """프랑스어 날짜 표기 (예: 12 mars 2024)"""
    if value is None:
        return UNKNOWN_DATE_LABEL
    return f"{value.day} {FRENCH_MONTHS[value.month - 1]} {value.year}"
