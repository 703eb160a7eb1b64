"""공통 데이터 모델 (파싱 이벤트, 파이프라인 Envelope)"""

from .envelopes import Envelope, LabReportData, LabReportEnvelope, LabReportMeta, Stage
from .fragments import PageBreak, ParseEvent, TextFragment

__all__ = [
    "PageBreak",
    "TextFragment",
    "ParseEvent",
    "Stage",
    "Envelope",
    "LabReportData",
    "LabReportMeta",
    "LabReportEnvelope",
]
