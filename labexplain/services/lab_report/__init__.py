"""검사결과지 처리 패키지

PDF 파싱 이벤트를 받아 검사 레코드를 추출하고 참고범위 내/외를 판정합니다.

주요 모듈:
- line_reassembler: 위치 정보 조각 → 페이지별 라인 (y 양자화 기반 그룹핑)
- noise_filter: 머리글/바닥글 노이즈 제거 (패턴 + 반복 접두부 전략)
- record_extractor: 라인 → LabRecord (값/단위/참고범위)
- reference_range: 참고범위 표현 해석
- assessment: 결정론적 참고범위 판정
- pipeline: 전체 파이프라인 오케스트레이션
"""

from .assessment import assess_record, classify_records, classify_value
from .errors import (
    AmbiguousRange,
    EmptyOrTooShortText,
    ExtractionFailure,
    LabReportError,
    SummarizationError,
    UnparseableRecord,
)
from .line_reassembler import LineReassembler, ReassembledDocument, reassemble_lines
from .models import LabRecord, Measurement, RangeKind, RecordStatus, ReferenceRange
from .noise_filter import NoiseFilter, PatternNoiseStrategy, RepeatedPrefixStrategy
from .pipeline import LabReportAnalysis, LabReportPipeline
from .record_extractor import RecordExtractor, extract_records, parse_record_line
from .reference_range import parse_range, resolve_range

__all__ = [
    # errors
    "LabReportError",
    "ExtractionFailure",
    "EmptyOrTooShortText",
    "UnparseableRecord",
    "AmbiguousRange",
    "SummarizationError",
    # models
    "LabRecord",
    "Measurement",
    "RangeKind",
    "RecordStatus",
    "ReferenceRange",
    # line_reassembler
    "LineReassembler",
    "ReassembledDocument",
    "reassemble_lines",
    # noise_filter
    "NoiseFilter",
    "PatternNoiseStrategy",
    "RepeatedPrefixStrategy",
    # record_extractor
    "RecordExtractor",
    "extract_records",
    "parse_record_line",
    # reference_range
    "parse_range",
    "resolve_range",
    # assessment
    "assess_record",
    "classify_records",
    "classify_value",
    # pipeline
    "LabReportAnalysis",
    "LabReportPipeline",
]
