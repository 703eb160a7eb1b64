"""
Deterministic 판정 모듈 (Assessment)

추출된 LabRecord의 숫자 값만으로 참고범위 내/외를 판정합니다.
LLM은 이 판정 결과를 설명만 하고, 판정 자체를 생성하지 않습니다.
결과지의 *, H/L 같은 표시는 일관되지 않으므로 사용하지 않습니다.

판정 규칙 (값 v):
- BOUNDED [L, U]: v < L 또는 v > U 이면 OUT_OF_RANGE (경계값은 IN_RANGE)
- UPPER_ONLY "< X": v >= X 이면 OUT_OF_RANGE
- UPPER_ONLY "Inf à X" / "<= X": v > X 이면 OUT_OF_RANGE
- LOWER_ONLY "> X": v <= X 이면 OUT_OF_RANGE
- LOWER_ONLY "Sup à X" / ">= X": v < X 이면 OUT_OF_RANGE
- UNSPECIFIED: 항상 IN_RANGE (표시하지 않음)

검출한계 값("<5", ">90"):
- "<v": 실제 값은 v 미만. v <= U 이면 상한 범위 안, v <= L 이면 하한 아래
- ">v": 실제 값은 v 초과. v >= L 이면 하한 범위 안, v >= U 이면 상한 위
- 그 외에는 v 자체로 위 규칙 적용

레코드 상태:
- 값/범위 쌍 중 하나라도 OUT_OF_RANGE 이면 OUT_OF_RANGE (논리합)
- 모든 범위가 UNSPECIFIED 이면 UNKNOWN
- 그 외 IN_RANGE
"""

from dataclasses import dataclass
from enum import Enum

from .locale_numbers import format_decimal
from .models import LabRecord, Measurement, RangeKind, RecordStatus, ReferenceRange


class AssessmentDirection(Enum):
    """판정 방향"""
    UP = "↑"
    DOWN = "↓"
    NONE = "-"


@dataclass
class Assessment:
    """단일 값/범위 쌍의 판정 결과"""

    name: str
    value: float | None
    unit: str
    range_expression: str
    range_kind: RangeKind
    status: RecordStatus
    direction: AssessmentDirection
    reason: str
    display_value: str | None = None
    display_range: str | None = None

    def to_dict(self) -> dict:
        """딕셔너리로 변환"""
        display_value = self.display_value
        if display_value is None and self.value is not None:
            display_value = format_decimal(self.value)
        return {
            "name": self.name,
            "value": self.value,
            "display_value": display_value,
            "unit": self.unit,
            "range_expression": self.range_expression,
            "display_range": self.display_range if self.display_range is not None else self.range_expression,
            "range_kind": self.range_kind.value,
            "status": self.status.value,
            "direction": self.direction.value,
            "reason": self.reason,
        }


def _classify_censored(value: float, value_op: str, reference: ReferenceRange):
    """검출한계 값으로 확정 가능한 판정 (확정 불가면 None)"""
    kind, lower, upper = reference.kind, reference.lower, reference.upper
    if value_op == "<":
        if kind == RangeKind.UPPER_ONLY and upper is not None and value <= upper:
            return RecordStatus.IN_RANGE, AssessmentDirection.NONE, f"censored_under_upper_bound (<{value} vs {upper})"
        if kind in (RangeKind.BOUNDED, RangeKind.LOWER_ONLY) and lower is not None and value <= lower:
            return RecordStatus.OUT_OF_RANGE, AssessmentDirection.DOWN, f"censored_below_lower_bound (<{value} vs {lower})"
    elif value_op == ">":
        if kind == RangeKind.LOWER_ONLY and lower is not None and value >= lower:
            return RecordStatus.IN_RANGE, AssessmentDirection.NONE, f"censored_over_lower_bound (>{value} vs {lower})"
        if kind in (RangeKind.BOUNDED, RangeKind.UPPER_ONLY) and upper is not None and value >= upper:
            return RecordStatus.OUT_OF_RANGE, AssessmentDirection.UP, f"censored_above_upper_bound (>{value} vs {upper})"
    return None


def classify_value(
    value: float,
    reference: ReferenceRange,
    value_op: str = "",
) -> tuple[RecordStatus, AssessmentDirection, str]:
    """값 하나를 참고범위와 비교

    Args:
        value: 숫자 값
        reference: 참고범위
        value_op: 값의 비교기 ("<", ">" 또는 "")

    Returns:
        (상태, 방향, 사유)
    """
    if value_op:
        censored = _classify_censored(value, value_op, reference)
        if censored is not None:
            return censored

    kind = reference.kind
    lower = reference.lower
    upper = reference.upper

    if kind == RangeKind.BOUNDED and lower is not None and upper is not None:
        if value < lower:
            return RecordStatus.OUT_OF_RANGE, AssessmentDirection.DOWN, f"below_lower_bound ({value} < {lower})"
        if value > upper:
            return RecordStatus.OUT_OF_RANGE, AssessmentDirection.UP, f"above_upper_bound ({value} > {upper})"
        return RecordStatus.IN_RANGE, AssessmentDirection.NONE, f"within_bounds ({lower} <= {value} <= {upper})"

    if kind == RangeKind.UPPER_ONLY and upper is not None:
        out = value > upper if reference.upper_inclusive else value >= upper
        if out:
            return RecordStatus.OUT_OF_RANGE, AssessmentDirection.UP, f"above_upper_bound ({value} vs {upper})"
        return RecordStatus.IN_RANGE, AssessmentDirection.NONE, f"under_upper_bound ({value} vs {upper})"

    if kind == RangeKind.LOWER_ONLY and lower is not None:
        out = value < lower if reference.lower_inclusive else value <= lower
        if out:
            return RecordStatus.OUT_OF_RANGE, AssessmentDirection.DOWN, f"below_lower_bound ({value} vs {lower})"
        return RecordStatus.IN_RANGE, AssessmentDirection.NONE, f"over_lower_bound ({value} vs {lower})"

    return RecordStatus.IN_RANGE, AssessmentDirection.NONE, "reference_range_unspecified"


def assess_measurement(name: str, measurement: Measurement) -> Assessment:
    """값/범위 쌍 하나를 판정하여 Measurement.status를 설정하고 Assessment 반환"""
    reference = measurement.reference
    if measurement.value is None:
        status, direction, reason = RecordStatus.IN_RANGE, AssessmentDirection.NONE, "value_not_numeric"
    else:
        status, direction, reason = classify_value(measurement.value, reference, measurement.value_op)

    if reference.kind == RangeKind.UNSPECIFIED:
        measurement.status = RecordStatus.UNKNOWN
    else:
        measurement.status = status

    return Assessment(
        name=name,
        value=measurement.value,
        unit=measurement.unit,
        range_expression=reference.expression,
        range_kind=reference.kind,
        status=measurement.status,
        direction=direction,
        reason=reason,
        display_value=measurement.display_value,
        display_range=reference.display,
    )


def assess_record(record: LabRecord) -> list[Assessment]:
    """레코드를 판정하여 record.status를 설정하고 쌍별 Assessment 리스트 반환"""
    assessments = [assess_measurement(record.name, m) for m in record.measurements]

    if any(a.status == RecordStatus.OUT_OF_RANGE for a in assessments):
        record.status = RecordStatus.OUT_OF_RANGE
    elif assessments and all(a.range_kind == RangeKind.UNSPECIFIED for a in assessments):
        record.status = RecordStatus.UNKNOWN
    else:
        record.status = RecordStatus.IN_RANGE

    return assessments


def classify_records(records: list[LabRecord]) -> list[LabRecord]:
    """여러 레코드를 판정 (각 레코드의 status를 한 번 설정)"""
    for record in records:
        assess_record(record)
    return records


def assess_records_to_dicts(records: list[LabRecord]) -> list[dict]:
    """
    여러 레코드를 판정하여 dict 리스트를 반환합니다.
    (JSON 직렬화에 편리)
    """
    return [a.to_dict() for r in records for a in assess_record(r)]


def partition_by_status(records: list[LabRecord]) -> dict[RecordStatus, list[LabRecord]]:
    """판정된 레코드를 상태별로 분류 (입력 순서 유지)"""
    groups: dict[RecordStatus, list[LabRecord]] = {s: [] for s in RecordStatus}
    for record in records:
        groups[record.status].append(record)
    return groups
