"""
검사결과지 분석 파이프라인 (LabReportPipeline)

PDF 바이트(또는 텍스트)를 받아 다음 단계를 순서대로 실행합니다.

1) parse:      PDF 텍스트 소스 → PageBreak | TextFragment 이벤트
2) reassemble: 이벤트 → 페이지별 라인
3) filter:     머리글/바닥글 노이즈 제거
4) extract:    라인 → LabRecord
5) classify:   참고범위 판정 (record.status 한 번 설정)

각 단계의 시작/종료는 progress 이벤트({'stage', 'status', 'ts', ...})로 알립니다.
의존성은 __init__ 에 명시 주입하거나 create_with_deps() 로 설정값에서 생성합니다.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from labexplain.models.envelopes import LabReportData, LabReportEnvelope, LabReportMeta

from .assessment import assess_records_to_dicts
from .line_reassembler import LineReassembler, ReassembledDocument
from .line_reassembler import Settings as ReassemblerSettings
from .models import LabRecord, RecordStatus
from .noise_filter import NoiseFilter
from .record_extractor import ExtractionResult, RecordExtractor
from .report_date import extract_report_date, format_french_date
from .validation import DEFAULT_MIN_TEXT_LENGTH, ensure_text_length, validate_records

logger = logging.getLogger(__name__)

Event = Dict[str, Any]
ProgressCB = Optional[Callable[[Event], None]]


@dataclass
class ExtractedText:
    """PDF 텍스트 추출 결과 (재조립 + 필터까지)"""

    raw_text: str
    text: str
    pages: int


@dataclass
class LabReportAnalysis:
    """파이프라인 최종 결과"""

    text: str
    records: List[LabRecord] = field(default_factory=list)
    assessments: List[Dict[str, Any]] = field(default_factory=list)
    unparsed_lines: List[str] = field(default_factory=list)
    pages: int = 0
    report_date: Optional[date] = None
    strategies: List[str] = field(default_factory=list)
    source: str = "text"

    @property
    def out_of_range(self) -> List[LabRecord]:
        return [r for r in self.records if r.status == RecordStatus.OUT_OF_RANGE]

    @property
    def report_date_label(self) -> str:
        """렌더러용 프랑스어 날짜 (없으면 'Date inconnue')"""
        return format_french_date(self.report_date)

    def to_envelope(self) -> LabReportEnvelope:
        """직렬화용 Envelope 로 변환"""
        return LabReportEnvelope(
            stage="classify",
            data=LabReportData(
                text=self.text,
                records=[r.to_dict() for r in self.records],
                assessments=self.assessments,
                report_date=self.report_date.isoformat() if self.report_date else None,
            ),
            meta=LabReportMeta(
                pages=self.pages,
                lines=len([ln for ln in self.text.split("\n") if ln.strip()]),
                records=len(self.records),
                out_of_range=len(self.out_of_range),
                unparsed_lines=len(self.unparsed_lines),
                strategies=self.strategies,
                source=self.source,
            ),
        )


class LabReportPipeline:
    """검사결과지 분석 파이프라인"""

    def __init__(
        self,
        *,
        source=None,
        reassembler: Optional[LineReassembler] = None,
        noise_filter: Optional[NoiseFilter] = None,
        extractor: Optional[RecordExtractor] = None,
        min_text_length: int = DEFAULT_MIN_TEXT_LENGTH,
        progress_cb: ProgressCB = None,
    ) -> None:
        """
        Args:
            source: BasePdfTextSource 구현체 (PDF 입력에만 필요)
            reassembler: 라인 재조립기
            noise_filter: 노이즈 필터
            extractor: 레코드 추출기
            min_text_length: PDF 입력의 필터링 후 최소 텍스트 길이
            progress_cb: 기본 progress 콜백
        """
        self.source = source
        self.reassembler = reassembler or LineReassembler()
        self.noise_filter = noise_filter or NoiseFilter()
        self.extractor = extractor or RecordExtractor()
        self.min_text_length = min_text_length
        self._progress_cb = progress_cb

    # ---------- DI 편의 생성자 ----------
    @classmethod
    def create_with_deps(cls, *, source=None, progress_cb: ProgressCB = None) -> "LabReportPipeline":
        """설정값(labexplain.settings)으로 모든 구성 요소를 생성합니다.

        테스트나 커스터마이징이 필요하면 __init__ 에 명시 주입하세요.
        """
        from labexplain.services.pdf.factory import get_pdf_text_source
        from labexplain.settings import settings

        return cls(
            source=source or get_pdf_text_source(),
            reassembler=LineReassembler(
                ReassemblerSettings(
                    y_factor=settings.reassembly_y_factor,
                    threshold=settings.reassembly_line_threshold,
                )
            ),
            noise_filter=NoiseFilter.from_names(
                settings.noise_strategy_names,
                window=settings.prefix_window_tokens,
                min_tokens=settings.prefix_min_tokens,
            ),
            min_text_length=settings.min_text_length,
            progress_cb=progress_cb,
        )

    # ---------- 내부 유틸 ----------
    @staticmethod
    def _ts() -> float:
        return time.time()

    def _emit(self, event: Event, progress_cb: ProgressCB = None) -> None:
        cb = progress_cb or self._progress_cb
        if cb:
            try:
                cb(event)
            except Exception:
                # 콜백 오류는 파이프라인을 중단시키지 않음
                logger.warning("progress 콜백 오류 무시: stage=%s", event.get("stage"), exc_info=True)

    @property
    def strategy_names(self) -> List[str]:
        return [s.name for s in self.noise_filter.strategies]

    # ---------- 단계 ----------
    def reassemble(self, pdf_bytes: bytes, *, progress_cb: ProgressCB = None) -> ReassembledDocument:
        """parse + reassemble 단계

        Raises:
            ExtractionFailure: PDF 바이트 스트림을 파싱할 수 없는 경우
        """
        if self.source is None:
            raise ValueError("PDF text source is not configured")
        self._emit({'stage': 'parse', 'status': 'start', 'ts': self._ts(), 'bytes': len(pdf_bytes or b'')}, progress_cb)
        events = self.source.iter_events(pdf_bytes)
        self._emit({'stage': 'reassemble', 'status': 'start', 'ts': self._ts()}, progress_cb)
        doc = self.reassembler.reassemble(events)
        lines = sum(len(p.lines) for p in doc.pages)
        self._emit({'stage': 'reassemble', 'status': 'end', 'ts': self._ts(), 'pages': doc.page_count, 'lines': lines}, progress_cb)
        return doc

    def filter_text(self, text: str, *, progress_cb: ProgressCB = None) -> str:
        """filter 단계"""
        self._emit({'stage': 'filter', 'status': 'start', 'ts': self._ts()}, progress_cb)
        cleaned = self.noise_filter.filter_text(text)
        self._emit({'stage': 'filter', 'status': 'end', 'ts': self._ts(), 'chars': len(cleaned)}, progress_cb)
        return cleaned

    def extract_text(self, pdf_bytes: bytes, *, progress_cb: ProgressCB = None) -> ExtractedText:
        """PDF → 정제된 텍스트 (길이 검사 없음)"""
        doc = self.reassemble(pdf_bytes, progress_cb=progress_cb)
        raw_text = doc.text
        cleaned = self.filter_text(raw_text, progress_cb=progress_cb)
        return ExtractedText(raw_text=raw_text, text=cleaned.strip(), pages=doc.page_count)

    def classify(self, text: str, *, progress_cb: ProgressCB = None) -> Tuple[ExtractionResult, List[Dict[str, Any]]]:
        """extract + classify 단계

        Returns:
            (추출 결과, 값/범위 쌍별 판정 dict 리스트)
        """
        self._emit({'stage': 'extract', 'status': 'start', 'ts': self._ts()}, progress_cb)
        result = self.extractor.extract(text)
        self._emit({'stage': 'extract', 'status': 'end', 'ts': self._ts(), 'records': result.record_count, 'unparsed': len(result.unparsed_lines)}, progress_cb)

        self._emit({'stage': 'classify', 'status': 'start', 'ts': self._ts()}, progress_cb)
        assessments = assess_records_to_dicts(result.records)
        out = sum(1 for r in result.records if r.status == RecordStatus.OUT_OF_RANGE)
        qa = validate_records(result.records)
        logger.debug("레코드 QA: %s", qa.summary())
        self._emit({'stage': 'classify', 'status': 'end', 'ts': self._ts(), 'out_of_range': out, 'accepted': qa.accepted_count}, progress_cb)
        return result, assessments

    # ---------- 전체 실행 ----------
    def analyze_pdf(self, pdf_bytes: bytes, *, progress_cb: ProgressCB = None) -> LabReportAnalysis:
        """PDF 바이트 전체 분석

        Raises:
            ExtractionFailure: PDF 파싱 실패
            EmptyOrTooShortText: 필터링 후 텍스트가 min_text_length 미만
        """
        extracted = self.extract_text(pdf_bytes, progress_cb=progress_cb)
        text = ensure_text_length(extracted.text, self.min_text_length)
        result, assessments = self.classify(text, progress_cb=progress_cb)

        analysis = LabReportAnalysis(
            text=text,
            records=result.records,
            assessments=assessments,
            unparsed_lines=result.unparsed_lines,
            pages=extracted.pages,
            report_date=extract_report_date(extracted.raw_text),
            strategies=self.strategy_names,
            source="pdf",
        )
        logger.info(
            "PDF 분석 완료: pages=%d, records=%d, out_of_range=%d",
            analysis.pages,
            len(analysis.records),
            len(analysis.out_of_range),
        )
        return analysis

    def analyze_text(self, text: str, *, progress_cb: ProgressCB = None) -> LabReportAnalysis:
        """붙여넣은 텍스트 분석 (빈 텍스트만 거부)

        Raises:
            EmptyOrTooShortText: 필터링 후 텍스트가 비어 있는 경우
        """
        raw_text = text or ""
        cleaned = ensure_text_length(self.filter_text(raw_text, progress_cb=progress_cb), 1)
        result, assessments = self.classify(cleaned, progress_cb=progress_cb)

        analysis = LabReportAnalysis(
            text=cleaned,
            records=result.records,
            assessments=assessments,
            unparsed_lines=result.unparsed_lines,
            pages=len([p for p in raw_text.split("\n\n") if p.strip()]) or 1,
            report_date=extract_report_date(raw_text),
            strategies=self.strategy_names,
            source="text",
        )
        logger.info("텍스트 분석 완료: records=%d, out_of_range=%d", len(analysis.records), len(analysis.out_of_range))
        return analysis
