"""
프랑스어 로케일 숫자 처리 모듈

검사결과지는 쉼표를 소수점으로 사용합니다(예: 29,23).
- parse_decimal: "29,23" / "29.23" → 29.23
- format_decimal: 29.23 → "29,23"
- localize_numbers: 문장 안의 숫자를 원문 자릿수 그대로 쉼표 소수로 다시 표기
- repair_numeric_token: 숫자 토큰 내부의 OCR성 문자 치환(O→0, l→1)

문자 치환은 이미 숫자로 식별된 토큰에만 적용합니다.
검사명 같은 일반 텍스트는 절대 변경하지 않습니다.
"""

import re
from typing import Any

# 부호 + 정수부 + (선택) 소수부
NUMBER_PATTERN = r"[-+]?\d+(?:[.,]\d+)?"
_NUMBER_RE = re.compile(rf"^\s*({NUMBER_PATTERN})\s*$")
# 문장 안의 소수 (부호는 건드리지 않음)
_DECIMAL_IN_TEXT_RE = re.compile(r"(?<![\d.,])\d+[.,]\d+(?![.,]?\d)")

# 숫자처럼 보이는 토큰: 비교기(선택) + 숫자/O/l + (선택) 소수부
_NUMERIC_LIKE_RE = re.compile(r"^([<>]?)([\dOl]+(?:[.,][\dOl]+)?)$")


def parse_decimal(token: Any) -> float | None:
    """숫자로 변환, 불가하면 None"""
    if token is None:
        return None
    if isinstance(token, (int, float)):
        return float(token)
    if not isinstance(token, str):
        return None
    m = _NUMBER_RE.match(token)
    if not m:
        return None
    return float(m.group(1).replace(",", "."))


def decimals_of(token: str) -> int | None:
    """원문 숫자 토큰의 소수 자릿수 (정수면 0, 숫자가 아니면 None)"""
    m = _NUMBER_RE.match(token or "")
    if not m:
        return None
    s = m.group(1)
    for sep in (",", "."):
        if sep in s:
            return len(s.split(sep, 1)[1])
    return 0


def format_decimal(value: float, decimals: int | None = None) -> str:
    """쉼표 소수점 형식으로 렌더링

    Args:
        value: 숫자 값
        decimals: 소수 자릿수 (None이면 불필요한 0 제거)
    """
    if decimals is not None:
        s = f"{value:.{decimals}f}"
    else:
        s = f"{value:.6f}".rstrip("0").rstrip(".")
        if s in ("-0", ""):
            s = "0"
    return s.replace(".", ",")


def localize_numbers(text: str) -> str:
    """문장 안의 소수를 쉼표 소수로 다시 표기 (자릿수 유지)

    예) "5.13 à 14.23" → "5,13 à 14,23", "< 5" → "< 5"
    """

    def _render(m: re.Match) -> str:
        token = m.group(0)
        return format_decimal(parse_decimal(token), decimals_of(token))

    return _DECIMAL_IN_TEXT_RE.sub(_render, text or "")


def repair_numeric_token(token: str) -> str:
    """숫자로 식별된 토큰의 OCR 치환 복구 (O→0, l→1)

    실제 숫자가 2개 이상 포함된 토큰만 대상으로 합니다.
    예) "1O,5" → "10,5", "4,l5" → "4,15", "Ol" → "Ol" (변경 없음)
    """
    m = _NUMERIC_LIKE_RE.match(token)
    if not m:
        return token
    body = m.group(2)
    if "O" not in body and "l" not in body:
        return token
    if sum(ch.isdigit() for ch in body) < 2:
        return token
    return m.group(1) + body.replace("O", "0").replace("l", "1")
