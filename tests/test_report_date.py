"""결과지 발행일 추출 테스트"""

from datetime import date

import pytest

from labexplain.services.lab_report.report_date import (
    UNKNOWN_DATE_LABEL,
    extract_report_date,
    format_french_date,
)


class TestExtractReportDate:
    def test_edited_line(self, sample_report_text):
        assert extract_report_date(sample_report_text) == date(2024, 3, 12)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Edité le 1 août 2023", date(2023, 8, 1)),
            ("ÉDITÉ LE 5 Décembre 2022", date(2022, 12, 5)),
            ("Dossier 42 - Édité le 30 juin 2024 à 10:12", date(2024, 6, 30)),
        ],
    )
    def test_variants(self, text, expected):
        assert extract_report_date(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "",
            None,
            "Prélevé le 10/03/2024",
            "Édité le 12 march 2024",
            "Édité le 31 février 2024",
        ],
    )
    def test_missing_or_invalid(self, text):
        assert extract_report_date(text) is None


class TestFormatFrenchDate:
    def test_format(self):
        assert format_french_date(date(2024, 3, 12)) == "12 mars 2024"
        assert format_french_date(date(2024, 2, 1)) == "1 février 2024"

    def test_unknown(self):
        assert format_french_date(None) == UNKNOWN_DATE_LABEL == "Date inconnue"
