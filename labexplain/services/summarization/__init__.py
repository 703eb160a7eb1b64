"""검사결과 설명 생성 패키지"""

from .summarizer import LabReportSummarizer, build_classification_block

__all__ = [
    "LabReportSummarizer",
    "build_classification_block",
]
