"""
분석 입력 검증 모듈 (Quality Gate)

1) 텍스트 게이트: 노이즈 제거 후 텍스트가 최소 길이(기본 50자) 미만이면
   EmptyOrTooShortText 를 발생시켜 사용자 입력 오류로 처리합니다.
2) 레코드 게이트: LLM 설명 payload에 넣기 전에 판정된 레코드를 분리합니다.
   - accepted: 숫자 값이 하나 이상이고 참고범위가 해석된 레코드
   - rejected: 정성 결과 또는 참고범위가 없는 레코드 (사유 기록)
"""

from dataclasses import dataclass, field

from .errors import EmptyOrTooShortText
from .models import LabRecord, RangeKind, RecordStatus

DEFAULT_MIN_TEXT_LENGTH = 50


def ensure_text_length(text: str, minimum: int = DEFAULT_MIN_TEXT_LENGTH) -> str:
    """앞뒤 공백을 제거한 텍스트를 반환, 최소 길이 미만이면 예외

    Raises:
        EmptyOrTooShortText: 텍스트가 비었거나 minimum 미만인 경우
    """
    stripped = (text or "").strip()
    if len(stripped) < minimum:
        raise EmptyOrTooShortText(len(stripped), minimum)
    return stripped


@dataclass
class ValidationResult:
    """레코드 게이트 검증 결과"""

    accepted_records: list[LabRecord] = field(default_factory=list)
    rejected_records: list[tuple[LabRecord, list[str]]] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted_records)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected_records)

    @property
    def total_count(self) -> int:
        return self.accepted_count + self.rejected_count

    def summary(self) -> dict:
        """QA 요약 반환"""
        return {
            "total": self.total_count,
            "accepted": self.accepted_count,
            "rejected": self.rejected_count,
        }


def rejection_reasons(record: LabRecord) -> list[str]:
    """레코드 제외 사유 목록 (빈 리스트면 accepted)"""
    reasons = []
    if not record.numeric_values:
        reasons.append("no_numeric_value")
    if all(m.reference.kind == RangeKind.UNSPECIFIED for m in record.measurements):
        reasons.append("reference_range_unspecified")
    if record.status == RecordStatus.UNKNOWN and not reasons:
        reasons.append("not_classified")
    return reasons


def validate_records(records: list[LabRecord]) -> ValidationResult:
    """판정된 레코드를 accepted/rejected 로 분리 (입력 순서 유지)"""
    result = ValidationResult()
    for record in records:
        reasons = rejection_reasons(record)
        if reasons:
            result.rejected_records.append((record, reasons))
        else:
            result.accepted_records.append(record)
    return result
