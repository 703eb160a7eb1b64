"""
검사 레코드 추출 모듈

정제된 문서 텍스트(줄바꿈 구분)에서 검사 항목 레코드를 추출합니다.

레코드 형태:
  <검사명> <값> [단위] [<값> [단위]] <참고범위...>

- 값/단위 분리: 공백 분리형과 붙어있는 형태(4,15Giga/L) 모두 지원
- 참고범위: 괄호 그룹 "(repères : 4,05 à 11,00)" (여러 그룹 또는 ';' 구분) 또는
  값 뒤에 괄호 없이 붙은 표현 "13,0 - 17,0", "< 5"
- 값 2개 + 범위 2개(예: mmol/L 와 g/L 병기)는 위치 순서대로 짝지음
- 값/범위 개수가 맞지 않으면 UnparseableRecord로 보고 해당 라인을 건너뜀
- H/L/* 같은 표시는 판정에 사용하지 않으므로 제거
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import UnparseableRecord
from .locale_numbers import NUMBER_PATTERN, parse_decimal
from .models import LabRecord, Measurement, ReferenceRange
from .reference_range import looks_like_range, parse_range, strip_label

logger = logging.getLogger(__name__)

# 값 토큰: (선택) 비교기 + 숫자
_VALUE_RE = re.compile(rf"^([<>]?)({NUMBER_PATTERN})$")
# 붙어있는형: 값 + 단위 (예: 4,15Giga/L, 7,34%)
_GLUED_RE = re.compile(rf"^([<>]?{NUMBER_PATTERN})([A-Za-zµμ%‰/][\w%‰/µμ.²³^*·-]*)$")
# 괄호 그룹
_GROUP_RE = re.compile(r"\(([^()]*)\)")
# 참고범위 라벨
_REF_LABEL_RE = re.compile(
    r"^\s*(?:rep[èe]res?|valeurs?\s+(?:de\s+)?r[ée]f[ée]rences?|valeurs?\s+normales?|v\.?\s?r\.?|r[ée]f\.?)\s*:",
    re.IGNORECASE,
)
# 값 뒤에 붙은 괄호 없는 참고범위
_TRAILING_RANGE_RE = re.compile(
    rf"(?:^|\s)((?:<=|≤|<|>=|≥|>|(?:inf|sup)[.\w]*\s+(?:à|a))\s*{NUMBER_PATTERN}"
    rf"|{NUMBER_PATTERN}\s*(?:à|-|–|—)\s*{NUMBER_PATTERN})(?:\s+[^\s\d()][^\s()]*)?\s*$",
    re.IGNORECASE,
)
# 판정에 쓰지 않는 경고 표시 토큰
_FLAG_TOKENS = {"*", "**", "H", "L", "↑", "↓"}
_COMPARATORS = ("<", ">")
_NUMBER_TOKEN_RE = re.compile(rf"^{NUMBER_PATTERN}$")

MAX_VALUES = 2


@dataclass
class ExtractionResult:
    """레코드 추출 결과"""

    records: List[LabRecord] = field(default_factory=list)
    unparsed_lines: List[str] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)


def _split_reference_groups(line: str) -> Tuple[str, List[str], bool]:
    """괄호 참고범위 그룹을 분리.

    Returns:
        (범위 그룹을 제거한 본문, 범위 표현 리스트, 라벨 존재 여부)
    """
    expressions: List[str] = []
    labeled = False
    pieces: List[str] = []
    pos = 0
    for m in _GROUP_RE.finditer(line):
        content = m.group(1).strip()
        has_label = bool(_REF_LABEL_RE.match(content))
        if not has_label and not looks_like_range(content):
            continue
        labeled = labeled or has_label
        pieces.append(line[pos:m.start()])
        pos = m.end()
        for part in content.split(";"):
            part = part.strip()
            if part:
                expressions.append(part)
    pieces.append(line[pos:])
    body = " ".join(p.strip() for p in pieces if p.strip())
    return body, expressions, labeled


def _split_glued(tokens: List[str]) -> List[str]:
    """붙어있는 값+단위 토큰 분리 (단일 문자 H/L 경고 접미는 제거)"""
    out: List[str] = []
    for tok in tokens:
        m = _GLUED_RE.match(tok)
        if m:
            value, unit = m.group(1), m.group(2)
            out.append(value)
            if unit not in _FLAG_TOKENS:
                out.append(unit)
            continue
        out.append(tok)
    return out


def _join_comparators(tokens: List[str]) -> List[str]:
    """떨어져 있는 비교기를 뒤따르는 값에 붙임 ("<", "5" → "<5")"""
    out: List[str] = []
    for tok in tokens:
        if out and out[-1] in _COMPARATORS and _NUMBER_TOKEN_RE.match(tok):
            out[-1] += tok
            continue
        out.append(tok)
    return out


def _is_value(token: str) -> bool:
    return _VALUE_RE.match(token) is not None


def _scan_values(tokens: List[str]) -> Tuple[List[str], List[Tuple[str, str]]]:
    """토큰을 (검사명 토큰, [(값, 단위)]) 로 분리"""
    name_tokens: List[str] = []
    pairs: List[Tuple[str, List[str]]] = []
    for tok in _join_comparators(tokens):
        if not pairs:
            if _is_value(tok) and name_tokens:
                pairs.append((tok, []))
            else:
                name_tokens.append(tok)
            continue
        if _is_value(tok):
            pairs.append((tok, []))
        elif tok not in _FLAG_TOKENS:
            pairs[-1][1].append(tok)
    return name_tokens, [(v, " ".join(u)) for v, u in pairs]


def _pop_trailing_ranges(body: str) -> Tuple[str, List[str]]:
    """괄호 없이 값 뒤에 붙은 참고범위를 본문 끝에서 분리"""
    ranges: List[str] = []
    while len(ranges) < MAX_VALUES:
        m = _TRAILING_RANGE_RE.search(body)
        if not m:
            break
        rest = body[:m.start()].rstrip(" ;")
        # 범위 앞에 검사명과 값이 남아 있어야 함
        name_tokens, pairs = _scan_values(_split_glued(rest.split()))
        if not name_tokens or not pairs:
            break
        ranges.insert(0, m.group(1).strip())
        body = rest
    return body, ranges


def _numeric_value(raw: str) -> Tuple[Optional[float], str]:
    """값 토큰 → (숫자, 비교기)"""
    m = _VALUE_RE.match(raw)
    if not m:
        return None, ""
    return parse_decimal(m.group(2)), m.group(1)


def _measurement(raw: str, unit: str, reference: ReferenceRange) -> Measurement:
    value, value_op = _numeric_value(raw)
    return Measurement(raw_value=raw, value=value, unit=unit, reference=reference, value_op=value_op)


def parse_record_line(line: str) -> LabRecord:
    """단일 라인을 LabRecord로 해석

    Raises:
        UnparseableRecord: 레코드 형태에 맞지 않거나 값/범위 개수가 일치하지 않는 경우
    """
    text = (line or "").strip()
    if not text:
        raise UnparseableRecord(line, "empty_line")

    body, expressions, labeled = _split_reference_groups(text)
    if not expressions:
        body, expressions = _pop_trailing_ranges(body)

    name_tokens, pairs = _scan_values(_split_glued(body.split()))
    name = " ".join(name_tokens).strip(" :-")
    if not name or not re.search(r"[A-Za-zÀ-ÿ]", name):
        raise UnparseableRecord(line, "missing_name")

    # 정성 결과: 라벨이 있는 참고범위 + 숫자 값 없음
    if not pairs:
        if labeled and len(name_tokens) >= 2:
            raw_value = name_tokens[-1]
            qualitative_name = " ".join(name_tokens[:-1]).strip(" :-")
            reference = ReferenceRange.unspecified(" ; ".join(strip_label(e) for e in expressions))
            return LabRecord(
                name=qualitative_name,
                measurements=[Measurement(raw_value=raw_value, value=None, unit="", reference=reference)],
                source_line=text,
            )
        raise UnparseableRecord(line, "no_value")

    if len(pairs) > MAX_VALUES:
        raise UnparseableRecord(line, "too_many_values")

    if not expressions:
        # 범위가 없으면 단위가 있는 경우만 레코드로 인정 (UNSPECIFIED)
        if not any(unit for _, unit in pairs):
            raise UnparseableRecord(line, "no_unit_or_range")
        references = [ReferenceRange.unspecified() for _ in pairs]
    elif len(expressions) != len(pairs):
        raise UnparseableRecord(line, "value_range_count_mismatch")
    else:
        references = [parse_range(expr) for expr in expressions]

    measurements = [
        _measurement(raw, unit, ref)
        for (raw, unit), ref in zip(pairs, references)
    ]
    return LabRecord(name=name, measurements=measurements, source_line=text)


def extract_records(text: str) -> ExtractionResult:
    """정제된 문서 텍스트에서 레코드 추출 (해석 불가 라인은 건너뜀)"""
    result = ExtractionResult()
    for line in (text or "").split("\n"):
        if not line.strip():
            continue
        try:
            result.records.append(parse_record_line(line))
        except UnparseableRecord as exc:
            logger.debug("레코드 해석 불가 라인 건너뜀 (%s): %s", exc.reason, exc.line)
            result.unparsed_lines.append(line)
    logger.debug(
        "레코드 추출 완료: records=%d, unparsed=%d",
        result.record_count,
        len(result.unparsed_lines),
    )
    return result


class RecordExtractor:
    """레코드 추출 클래스 버전 (함수형 API의 thin wrapper)"""

    def extract(self, text: str) -> ExtractionResult:
        return extract_records(text)

    def parse_line(self, line: str) -> LabRecord:
        return parse_record_line(line)
