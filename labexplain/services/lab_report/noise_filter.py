"""
머리글/바닥글 노이즈 필터 모듈

검사결과지의 반복되는 상용구(검사실명, 주소, 전화/팩스, 웹사이트, 페이지 번호,
인쇄/채취 일자, 기밀 고지)를 제거합니다. 두 가지 전략을 하나의 NoiseFilter 뒤에 둡니다.

- PatternNoiseStrategy: 알려진 상용구 정규식에 매칭되는 라인을 통째로 제거
- RepeatedPrefixStrategy: 1쪽과 2쪽의 공통 토큰 접두부(>= 10 토큰)를 반복 머리글로 보고
  2쪽 이후에서 제거 (1쪽은 기준으로 유지)

불변식:
- 라인 순서를 바꾸지 않음
- 서로 다른 두 라인을 합치지 않음
- 두 번 적용해도 결과가 같음(멱등)
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Pattern, Sequence

from .locale_numbers import repair_numeric_token

logger = logging.getLogger(__name__)

Pages = List[List[str]]


# 알려진 상용구 패턴 (프랑스 검사실 결과지 기준)
DEFAULT_NOISE_PATTERNS: List[str] = [
    # 검사실 식별
    r"^Laboratoire de Biologie M[ée]dicale",
    r"^LBM\s",
    r"^SELAS\s",
    r"^SELARL\s",
    r"^Biologistes?\b",
    # 주소 (번지 + 도로 유형, 사서함), 우편번호 + 도시
    r"^\d{1,4}(?:\s*(?:bis|ter))?,?\s+(?:rue|avenue|av\.|boulevard|bd|place|chemin|all[ée]e|route|impasse|quai|cours)\s",
    r"^(?:CS|BP)\s*\d+",
    r"(?-i:^\d{5}\s+[A-ZÀ-Ý])",  # 도시명은 대문자 시작 (대소문자 구분)
    # 전화/팩스
    r"^T[ée]l[ée]?(?:phone)?\s*[.:]",
    r"^Fax\s*:",
    # 웹사이트
    r"^www\.",
    r"^https?://",
    # 페이지 번호 (Page 1, Page 1/3, Page 1 sur 3)
    r"^Page\s+\d+(?:\s*(?:/|sur|of)\s*\d+)?\b",
    # 인쇄/채취 일자
    r"^Pr[ée]lev[ée] le\s",
    r"^[ÉE]dit[ée] le\s",
    r"^Imprim[ée] le\s",
    # 기밀 고지
    r"^Les informations contenues dans ce document",
    r"^Document confidentiel",
]

_WS_RE = re.compile(r"\s+")


def normalize_line(line: str) -> str:
    """라인 정규화: 양끝 공백 제거, 내부 공백 축약, 숫자 토큰 OCR 치환 복구"""
    tokens = _WS_RE.split((line or "").strip())
    return " ".join(repair_numeric_token(t) for t in tokens if t)


def split_pages(text: str) -> Pages:
    """빈 줄로 구분된 문서 텍스트를 페이지별 라인 리스트로 분리"""
    pages: Pages = []
    for block in re.split(r"\n\s*\n", text or ""):
        lines = [ln for ln in block.split("\n") if ln.strip()]
        if lines:
            pages.append(lines)
    return pages


def join_pages(pages: Pages) -> str:
    """필터링된 페이지를 한 줄씩 이어 붙인 문서 텍스트로 결합"""
    return "\n".join(line for page in pages for line in page)


# -----------------------
# 전략
# -----------------------

class NoiseStrategy(ABC):
    """노이즈 제거 전략 기본 클래스"""

    name: str = "base"

    @abstractmethod
    def apply(self, pages: Pages) -> Pages:
        """페이지별 라인에서 노이즈를 제거한 새 리스트를 반환"""


class PatternNoiseStrategy(NoiseStrategy):
    """알려진 상용구 정규식 기반 제거"""

    name = "pattern"

    def __init__(self, patterns: Optional[Sequence[str]] = None, extra_patterns: Optional[Sequence[str]] = None):
        raw = list(patterns) if patterns is not None else list(DEFAULT_NOISE_PATTERNS)
        if extra_patterns:
            raw.extend(extra_patterns)
        self.patterns: List[Pattern[str]] = [re.compile(p, re.IGNORECASE) for p in raw]

    def is_noise(self, line: str) -> bool:
        return any(p.search(line) for p in self.patterns)

    def apply(self, pages: Pages) -> Pages:
        out: Pages = []
        dropped = 0
        for page in pages:
            kept = [ln for ln in page if not self.is_noise(ln)]
            dropped += len(page) - len(kept)
            out.append(kept)
        if dropped:
            logger.debug("패턴 노이즈 제거: %d lines", dropped)
        return out


class RepeatedPrefixStrategy(NoiseStrategy):
    """페이지 간 반복 접두부(머리글) 제거

    1쪽과 2쪽의 앞쪽 window 토큰을 비교하여 가장 긴 공통 접두부를 찾습니다.
    min_tokens 미만이면 아무것도 제거하지 않습니다.
    """

    name = "prefix"

    def __init__(self, window: int = 100, min_tokens: int = 10):
        self.window = window
        self.min_tokens = min_tokens

    @staticmethod
    def _tokens(page: Iterable[str]) -> List[str]:
        return [tok for line in page for tok in line.split()]

    def common_prefix(self, pages: Pages) -> List[str]:
        """1쪽과 2쪽의 공통 토큰 접두부 (min_tokens 미만이면 빈 리스트)"""
        if len(pages) < 2:
            return []
        first = self._tokens(pages[0])[: self.window]
        second = self._tokens(pages[1])[: self.window]
        n = 0
        for a, b in zip(first, second):
            if a != b:
                break
            n += 1
        if n < self.min_tokens:
            return []
        return first[:n]

    @staticmethod
    def _strip_prefix(page: List[str], count: int) -> List[str]:
        """앞쪽 count개 토큰 제거 (완전히 덮인 라인은 삭제, 일부만 덮이면 나머지 토큰 유지)"""
        out: List[str] = []
        remaining = count
        for line in page:
            if remaining <= 0:
                out.append(line)
                continue
            toks = line.split()
            if len(toks) <= remaining:
                remaining -= len(toks)
                continue
            out.append(" ".join(toks[remaining:]))
            remaining = 0
        return out

    def apply(self, pages: Pages) -> Pages:
        prefix = self.common_prefix(pages)
        if not prefix:
            return [list(p) for p in pages]
        n = len(prefix)
        out: Pages = [list(pages[0])]
        stripped = 0
        for page in pages[1:]:
            if self._tokens(page)[:n] == prefix:
                out.append(self._strip_prefix(page, n))
                stripped += 1
            else:
                out.append(list(page))
        logger.debug("반복 머리글 제거: prefix_tokens=%d, pages=%d", n, stripped)
        return out


# -----------------------
# 필터
# -----------------------

class NoiseFilter:
    """플러그형 전략을 순서대로 적용하는 노이즈 필터"""

    def __init__(self, strategies: Optional[Sequence[NoiseStrategy]] = None):
        if strategies is None:
            strategies = [PatternNoiseStrategy(), RepeatedPrefixStrategy()]
        self.strategies: List[NoiseStrategy] = list(strategies)

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        *,
        window: int = 100,
        min_tokens: int = 10,
        extra_patterns: Optional[Sequence[str]] = None,
    ) -> "NoiseFilter":
        """전략 이름 목록(pattern, prefix)으로 필터 생성"""
        strategies: List[NoiseStrategy] = []
        for name in names:
            if name == "pattern":
                strategies.append(PatternNoiseStrategy(extra_patterns=extra_patterns))
            elif name == "prefix":
                strategies.append(RepeatedPrefixStrategy(window=window, min_tokens=min_tokens))
            else:
                raise ValueError(f"지원하지 않는 노이즈 필터 전략: {name}")
        return cls(strategies)

    def filter_pages(self, pages: Sequence[Sequence[str]]) -> Pages:
        """페이지별 라인 리스트 필터링"""
        current: Pages = []
        for page in pages:
            normalized = [normalize_line(ln) for ln in page]
            current.append([ln for ln in normalized if ln])
        for strategy in self.strategies:
            current = strategy.apply(current)
        return current

    def filter_text(self, text: str) -> str:
        """문서 텍스트 필터링 (빈 줄을 페이지 경계로 간주)"""
        return join_pages(self.filter_pages(split_pages(text)))
