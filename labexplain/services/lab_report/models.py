"""검사 레코드 데이터 모델"""

from dataclasses import dataclass, field
from enum import Enum

from .locale_numbers import decimals_of, format_decimal, localize_numbers


class RangeKind(Enum):
    """참고범위 종류"""

    BOUNDED = "bounded"  # L à U, L - U
    LOWER_ONLY = "lower_only"  # > X, Sup à X
    UPPER_ONLY = "upper_only"  # < X, Inf à X
    UNSPECIFIED = "unspecified"  # 정성 결과 등 숫자 범위 없음


class RecordStatus(Enum):
    """참고범위 대비 판정 상태"""

    IN_RANGE = "in_range"
    OUT_OF_RANGE = "out_of_range"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ReferenceRange:
    """해석된 참고범위 표현"""

    expression: str
    kind: RangeKind = RangeKind.UNSPECIFIED
    lower: float | None = None
    upper: float | None = None
    lower_inclusive: bool = True
    upper_inclusive: bool = True

    @classmethod
    def unspecified(cls, expression: str = "") -> "ReferenceRange":
        return cls(expression=expression, kind=RangeKind.UNSPECIFIED)

    @property
    def display(self) -> str:
        """쉼표 소수로 다시 표기한 범위 표현"""
        return localize_numbers(self.expression)


@dataclass
class Measurement:
    """값/단위/참고범위 한 쌍

    value_op 는 검출한계 표기("<5", ">90")의 비교기입니다.
    """

    raw_value: str
    value: float | None
    unit: str
    reference: ReferenceRange
    status: RecordStatus = RecordStatus.UNKNOWN
    value_op: str = ""

    @property
    def display_value(self) -> str:
        """쉼표 소수로 다시 표기한 값 (원문 소수 자릿수 유지)"""
        if self.value is None:
            return self.raw_value
        return self.value_op + format_decimal(self.value, decimals_of(self.raw_value.lstrip("<>")))


@dataclass
class LabRecord:
    """검사 항목 하나 (측정값 1~2개)"""

    name: str
    measurements: list[Measurement] = field(default_factory=list)
    source_line: str = ""
    status: RecordStatus = RecordStatus.UNKNOWN

    @property
    def primary(self) -> Measurement | None:
        return self.measurements[0] if self.measurements else None

    @property
    def raw_value(self) -> str:
        return " ; ".join(m.raw_value for m in self.measurements)

    @property
    def display_value(self) -> str:
        return " ; ".join(m.display_value for m in self.measurements)

    @property
    def numeric_values(self) -> list[float]:
        return [m.value for m in self.measurements if m.value is not None]

    @property
    def units(self) -> list[str]:
        return [m.unit for m in self.measurements]

    @property
    def range_expressions(self) -> list[str]:
        return [m.reference.expression for m in self.measurements]

    @property
    def range_expression(self) -> str:
        return " ; ".join(e for e in self.range_expressions if e)

    @property
    def display_range(self) -> str:
        return localize_numbers(self.range_expression)

    @property
    def range_kind(self) -> RangeKind:
        return self.primary.reference.kind if self.primary else RangeKind.UNSPECIFIED

    @property
    def lower_bound(self) -> float | None:
        return self.primary.reference.lower if self.primary else None

    @property
    def upper_bound(self) -> float | None:
        return self.primary.reference.upper if self.primary else None

    @property
    def is_dual(self) -> bool:
        return len(self.measurements) == 2

    @property
    def is_flagged(self) -> bool:
        """참고범위 밖으로 표시해야 하는지 (UNKNOWN은 표시하지 않음)"""
        return self.status == RecordStatus.OUT_OF_RANGE

    def to_dict(self) -> dict:
        """딕셔너리로 변환 (display_* 는 쉼표 소수 표기)"""
        return {
            "name": self.name,
            "raw_value": self.raw_value,
            "display_value": self.display_value,
            "numeric_values": self.numeric_values,
            "units": self.units,
            "range_expression": self.range_expression,
            "display_range": self.display_range,
            "range_kind": self.range_kind.value,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "dual": self.is_dual,
            "status": self.status.value,
            "measurements": [
                {
                    "raw_value": m.raw_value,
                    "display_value": m.display_value,
                    "value": m.value,
                    "value_op": m.value_op,
                    "unit": m.unit,
                    "range_expression": m.reference.expression,
                    "display_range": m.reference.display,
                    "range_kind": m.reference.kind.value,
                    "lower_bound": m.reference.lower,
                    "upper_bound": m.reference.upper,
                    "status": m.status.value,
                }
                for m in self.measurements
            ],
        }
