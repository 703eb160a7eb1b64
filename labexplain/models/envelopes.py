"""파이프라인 Envelope 모델

파이프라인 각 단계(재조립/필터/추출/판정)별 데이터와 메타데이터를
일관되고 타입 안전하게 관리하는 Pydantic 모델 정의.
"""
from __future__ import annotations

from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar
from typing_extensions import TypeAlias

from pydantic import BaseModel, Field


# =============================================================================
# 기본 타입 정의
# =============================================================================

Stage: TypeAlias = Literal['parse', 'reassemble', 'filter', 'extract', 'classify']
"""파이프라인 처리 단계"""

TData = TypeVar('TData')
TMeta = TypeVar('TMeta')


class Envelope(BaseModel, Generic[TData, TMeta]):
    """파이프라인 단계별 데이터와 메타데이터를 감싸는 공통 Envelope 모델"""
    stage: Stage
    data: TData
    meta: TMeta
    version: str = '1.0'


# =============================================================================
# 검사결과지 분석 모델
# =============================================================================

class LabReportData(BaseModel):
    """판정까지 끝난 검사결과지 데이터"""
    text: str = Field(default="", description="노이즈 제거된 문서 텍스트")
    records: List[Dict[str, Any]] = Field(default_factory=list, description="판정된 검사 레코드 리스트")
    report_date: Optional[str] = Field(default=None, description="결과지 발행일 (ISO 8601)")
    assessments: List[Dict[str, Any]] = Field(default_factory=list, description="값/범위 쌍별 판정 상세")


class LabReportMeta(BaseModel):
    """검사결과지 분석 메타데이터"""
    pages: int = Field(default=0, description="페이지 수")
    lines: int = Field(default=0, description="필터링 후 라인 수")
    records: int = Field(default=0, description="추출된 레코드 수")
    out_of_range: int = Field(default=0, description="참고범위 밖 레코드 수")
    unparsed_lines: int = Field(default=0, description="레코드로 해석하지 못한 라인 수")
    strategies: List[str] = Field(default_factory=list, description="적용된 노이즈 필터 전략")
    source: Optional[Literal['pdf', 'text']] = Field(default=None, description="입력 소스 타입")


# =============================================================================
# 타입 별칭 (Type Aliases)
# =============================================================================

LabReportEnvelope = Envelope[LabReportData, LabReportMeta]


__all__ = [
    'Stage',
    'Envelope',
    'LabReportData',
    'LabReportMeta',
    'LabReportEnvelope',
]
