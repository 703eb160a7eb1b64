"""검사결과지 처리 예외 정의

- ExtractionFailure: PDF 바이트 스트림 파싱 실패 (문서 단위 치명적 오류)
- EmptyOrTooShortText: 필터링 후 텍스트가 너무 짧음 (사용자 입력 오류)
- UnparseableRecord: 검사 라인이 레코드 형태에 맞지 않음 (라인 건너뜀)
- AmbiguousRange: 참고범위 표현을 해석할 수 없음 (UNSPECIFIED로 복구)
- SummarizationError: 설명 생성(LLM) 실패 (문서 단위 치명적 오류)
"""


class LabReportError(Exception):
    """검사결과지 처리 예외의 기본 클래스"""


class ExtractionFailure(LabReportError):
    """PDF 조각 스트림을 파싱하지 못함"""


class EmptyOrTooShortText(LabReportError):
    """필터링 후 텍스트 길이가 최소 기준 미만"""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(f"Extracted text too short or empty ({length} < {minimum})")


class UnparseableRecord(LabReportError):
    """레코드 형태로 해석할 수 없는 라인"""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line!r}")


class AmbiguousRange(LabReportError):
    """참고범위 종류를 결정할 수 없는 표현"""

    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(f"ambiguous reference range: {expression!r}")


class SummarizationError(LabReportError):
    """설명 생성 협력자(LLM) 실패"""
