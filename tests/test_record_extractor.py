"""검사 레코드 추출 테스트"""

import pytest

from labexplain.services.lab_report.assessment import assess_record
from labexplain.services.lab_report.errors import UnparseableRecord
from labexplain.services.lab_report.models import RangeKind, RecordStatus
from labexplain.services.lab_report.noise_filter import NoiseFilter
from labexplain.services.lab_report.record_extractor import (
    RecordExtractor,
    extract_records,
    parse_record_line,
)


class TestParseRecordLine:
    """단일 라인 해석 테스트"""

    def test_leucocytes_in_range(self):
        record = parse_record_line("Leucocytes 4,15 Giga/L (repères : 4,05 à 11,00)")
        assert record.name == "Leucocytes"
        assert record.raw_value == "4,15"
        assert record.numeric_values == [pytest.approx(4.15)]
        assert record.units == ["Giga/L"]
        assert record.range_expression == "4,05 à 11,00"
        assert record.range_kind == RangeKind.BOUNDED
        assess_record(record)
        assert record.status == RecordStatus.IN_RANGE

    def test_neutrophils_below_lower_bound(self):
        record = parse_record_line("Polynucléaires neutrophiles 1,15 Giga/L (repères : 1,50 à 7,50)")
        assert record.name == "Polynucléaires neutrophiles"
        assert record.lower_bound == pytest.approx(1.5)
        assert record.upper_bound == pytest.approx(7.5)
        assess_record(record)
        assert record.status == RecordStatus.OUT_OF_RANGE

    def test_creatinine_above_upper_bound(self):
        record = parse_record_line("Créatinine urinaire 29,23 mmol/L (repères : 5,13 à 14,23)")
        assert record.name == "Créatinine urinaire"
        assert record.numeric_values == [pytest.approx(29.23)]
        assert record.units == ["mmol/L"]
        assess_record(record)
        assert record.status == RecordStatus.OUT_OF_RANGE

    def test_trailing_range_without_parentheses(self):
        record = parse_record_line("Hémoglobine 14,2 g/dL 13,0 - 17,0")
        assert record.name == "Hémoglobine"
        assert record.units == ["g/dL"]
        assert record.range_expression == "13,0 - 17,0"
        assert record.range_kind == RangeKind.BOUNDED

    def test_upper_only_group(self):
        record = parse_record_line("CRP 3 mg/L (< 5)")
        assert record.name == "CRP"
        assert record.range_kind == RangeKind.UPPER_ONLY
        assert record.upper_bound == 5.0

    def test_glued_value_and_unit(self):
        record = parse_record_line("Hématocrite 42,1% (repères : 40 à 52)")
        assert record.raw_value == "42,1"
        assert record.units == ["%"]

    def test_flag_suffix_dropped(self):
        """H/L/* 표시는 판정에 사용하지 않음"""
        record = parse_record_line("Glucose 1,30H g/L (repères : 0,70 à 1,10)")
        assert record.raw_value == "1,30"
        assert record.units == ["g/L"]

    def test_flag_token_dropped(self):
        record = parse_record_line("Ferritine 450 * µg/L (repères : 30 à 400)")
        assert record.units == ["µg/L"]

    def test_dual_values_paired_in_order(self):
        """값 2개 + 범위 2개는 위치 순서대로 짝지음"""
        record = parse_record_line("Créatinine 88 µmol/L 9,9 mg/L (repères : 59 à 104 ; 6,7 à 11,8)")
        assert record.is_dual
        first, second = record.measurements
        assert (first.raw_value, first.unit) == ("88", "µmol/L")
        assert (first.reference.lower, first.reference.upper) == (59.0, 104.0)
        assert (second.raw_value, second.unit) == ("9,9", "mg/L")
        assert second.reference.lower == pytest.approx(6.7)

    def test_dual_values_separate_groups(self):
        record = parse_record_line("Créatinine 88 µmol/L (59 à 104) 9,9 mg/L (6,7 à 11,8)")
        assert record.units == ["µmol/L", "mg/L"]
        assert record.range_expressions == ["59 à 104", "6,7 à 11,8"]

    def test_qualitative_record(self):
        record = parse_record_line("Aspect du sérum Limpide (valeurs de référence : Limpide)")
        assert record.name == "Aspect du sérum"
        assert record.raw_value == "Limpide"
        assert record.numeric_values == []
        assert record.range_kind == RangeKind.UNSPECIFIED
        assess_record(record)
        assert record.status == RecordStatus.UNKNOWN
        assert not record.is_flagged

    def test_unit_without_range_is_unspecified(self):
        record = parse_record_line("Sodium 140 mmol/L")
        assert record.range_kind == RangeKind.UNSPECIFIED
        assess_record(record)
        assert record.status == RecordStatus.UNKNOWN

    @pytest.mark.parametrize("line", ["CRP <5 mg/L (repères : < 5)", "CRP < 5 mg/L (repères : < 5)"])
    def test_censored_value(self, line):
        """검출한계 값은 비교기와 함께 읽고 범위 안으로 판정"""
        record = parse_record_line(line)
        assert record.name == "CRP"
        assert record.raw_value == "<5"
        assert record.primary.value_op == "<"
        assert record.units == ["mg/L"]
        assess_record(record)
        assert record.status == RecordStatus.IN_RANGE

    def test_censored_value_above_lower_bound(self):
        record = parse_record_line("DFG > 90 mL/min (repères : Sup à 60)")
        assert record.name == "DFG"
        assert record.primary.value_op == ">"
        assess_record(record)
        assert record.status == RecordStatus.IN_RANGE

    def test_display_uses_comma_decimals(self):
        record = parse_record_line("Créatinine urinaire 29.23 mmol/L (repères : 5.13 à 14.23)")
        d = record.to_dict()
        assert d["raw_value"] == "29.23"
        assert d["display_value"] == "29,23"
        assert d["display_range"] == "5,13 à 14,23"
        assert d["measurements"][0]["display_range"] == "5,13 à 14,23"
        assert d["dual"] is False

    def test_source_line_kept(self):
        line = "CRP 3 mg/L (< 5)"
        assert parse_record_line(line).source_line == line


class TestUnparseableLines:
    """레코드 형태가 아닌 라인 테스트"""

    @pytest.mark.parametrize(
        "line,reason",
        [
            ("", "empty_line"),
            ("Hématologie", "no_value"),
            ("12,5 (1 à 2)", "missing_name"),
            ("Sodium 140", "no_unit_or_range"),
            ("Test 1 2 3 (repères : 1 à 2)", "too_many_values"),
            ("Créatinine 88 µmol/L 9,9 mg/L (repères : 59 à 104)", "value_range_count_mismatch"),
        ],
    )
    def test_reason(self, line, reason):
        with pytest.raises(UnparseableRecord) as exc_info:
            parse_record_line(line)
        assert exc_info.value.reason == reason


class TestExtractRecords:
    """문서 단위 추출 테스트"""

    def test_sample_report(self, sample_report_text):
        text = NoiseFilter().filter_text(sample_report_text)
        result = extract_records(text)
        assert [r.name for r in result.records] == [
            "Leucocytes",
            "Polynucléaires neutrophiles",
            "Hémoglobine",
            "Créatinine urinaire",
            "CRP",
        ]
        assert result.unparsed_lines == ["Hématologie", "Biochimie"]
        assert result.record_count == 5

    def test_blank_lines_ignored(self):
        result = extract_records("\n\nCRP 3 mg/L (< 5)\n   \n")
        assert result.record_count == 1
        assert result.unparsed_lines == []

    def test_empty_text(self):
        result = extract_records("")
        assert result.records == []
        assert result.unparsed_lines == []

    def test_class_wrapper(self):
        extractor = RecordExtractor()
        assert extractor.extract("CRP 3 mg/L (< 5)").record_count == 1
        assert extractor.parse_line("CRP 3 mg/L (< 5)").name == "CRP"
