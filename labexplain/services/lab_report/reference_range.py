"""
참고범위 표현 해석 모듈

지원하는 표현 (프랑스어 검사결과지):
- 양측(BOUNDED): "5,13 à 14,23", "4,05 - 11,00", "entre 1 et 2"
- 상한(UPPER_ONLY): "< 5" (미만), "<= 5" / "≤ 5" / "Inf à 5" / "inférieur à 5" (이하)
- 하한(LOWER_ONLY): "> 60" (초과), ">= 60" / "≥ 60" / "Sup à 60" / "supérieur à 60" (이상)
- 그 외(UNSPECIFIED): 정성 결과 등 숫자 범위를 찾을 수 없는 경우

"repères :", "valeurs de référence :" 같은 라벨과 범위 뒤의 단위는 무시합니다.
"""

import logging
import re

from .errors import AmbiguousRange
from .locale_numbers import NUMBER_PATTERN, parse_decimal
from .models import RangeKind, ReferenceRange

logger = logging.getLogger(__name__)

_NUM = rf"({NUMBER_PATTERN})"

_LABEL_RE = re.compile(
    r"^(?:rep[èe]res?|valeurs?\s+(?:de\s+)?r[ée]f[ée]rences?|valeurs?\s+normales?"
    r"|v\.?\s?r\.?|r[ée]f\.?|normales?)\s*:?\s*",
    re.IGNORECASE,
)

_BOUNDED_RE = re.compile(
    rf"^(?:de\s+|entre\s+)?{_NUM}\s*(?:à|a|et|-|–|—)\s*{_NUM}",
    re.IGNORECASE,
)

_UPPER_RE = re.compile(
    rf"^(<=|≤|<|inf\.?(?:[ée]rieure?s?)?(?:\s+ou\s+[ée]gale?s?)?\s*(?:à|a)?)\s*{_NUM}",
    re.IGNORECASE,
)

_LOWER_RE = re.compile(
    rf"^(>=|≥|>|sup\.?(?:[ée]rieure?s?)?(?:\s+ou\s+[ée]gale?s?)?\s*(?:à|a)?)\s*{_NUM}",
    re.IGNORECASE,
)


def strip_label(expression: str) -> str:
    """범위 앞의 라벨(repères :, VR :, ...) 제거"""
    s = (expression or "").strip()
    return _LABEL_RE.sub("", s, count=1).strip()


def looks_like_range(expression: str) -> bool:
    """숫자 참고범위로 해석 가능한 표현인지 검사"""
    s = strip_label(expression)
    return bool(_BOUNDED_RE.match(s) or _UPPER_RE.match(s) or _LOWER_RE.match(s))


def resolve_range(expression: str) -> ReferenceRange:
    """참고범위 표현 해석

    Raises:
        AmbiguousRange: 어떤 범위 종류에도 해당하지 않는 경우
    """
    original = (expression or "").strip()
    s = strip_label(original)

    m = _BOUNDED_RE.match(s)
    if m:
        lower = parse_decimal(m.group(1))
        upper = parse_decimal(m.group(2))
        if lower is not None and upper is not None and lower <= upper:
            return ReferenceRange(
                expression=s,
                kind=RangeKind.BOUNDED,
                lower=lower,
                upper=upper,
            )
        raise AmbiguousRange(original)

    m = _UPPER_RE.match(s)
    if m:
        op = m.group(1).strip()
        # "<" 는 미만(경계 제외), 그 외(<=, ≤, Inf à)는 이하(경계 포함)
        return ReferenceRange(
            expression=s,
            kind=RangeKind.UPPER_ONLY,
            upper=parse_decimal(m.group(2)),
            upper_inclusive=op != "<",
        )

    m = _LOWER_RE.match(s)
    if m:
        op = m.group(1).strip()
        # ">" 는 초과(경계 제외), 그 외(>=, ≥, Sup à)는 이상(경계 포함)
        return ReferenceRange(
            expression=s,
            kind=RangeKind.LOWER_ONLY,
            lower=parse_decimal(m.group(2)),
            lower_inclusive=op != ">",
        )

    raise AmbiguousRange(original)


def parse_range(expression: str) -> ReferenceRange:
    """참고범위 표현 해석 (해석 불가 시 UNSPECIFIED로 복구)"""
    try:
        return resolve_range(expression)
    except AmbiguousRange as exc:
        logger.debug("참고범위 해석 불가 → UNSPECIFIED: %s", exc.expression)
        return ReferenceRange.unspecified(strip_label(expression))
