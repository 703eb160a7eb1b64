"""설명 PDF 렌더러 테스트"""

from concurrent.futures import ThreadPoolExecutor

import fitz
import pytest

from labexplain.services.lab_report.assessment import classify_records
from labexplain.services.lab_report.models import RecordStatus
from labexplain.services.lab_report.record_extractor import parse_record_line
from labexplain.services.rendering import PdfReportRenderer, match_record, style_line, wrap_words
from labexplain.services.rendering.pdf_renderer import DISCLAIMER_TITLE, TITLE, text_width
from labexplain.services.rendering.styles import GREEN, RED

EXPLANATION = """1. RÉSULTATS EN DEHORS DES REPÈRES
• Polynucléaires neutrophiles : 1,15 Giga/L
Votre valeur : 1,15 Giga/L
Les polynucléaires neutrophiles sont des globules blancs.

2. RÉSULTATS DANS LES REPÈRES
Hématologie :
• Leucocytes : 4,15 Giga/L

3. RÉCAPITULATIF
Nombre d'analyses : 2
=========="""


@pytest.fixture
def records():
    return classify_records([
        parse_record_line("Leucocytes 4,15 Giga/L (repères : 4,05 à 11,00)"),
        parse_record_line("Polynucléaires neutrophiles 1,15 Giga/L (repères : 1,50 à 7,50)"),
        parse_record_line("Polynucléaires éosinophiles 0,10 Giga/L (repères : 0,04 à 0,80)"),
    ])


def page_texts(pdf_bytes):
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return [page.get_text() for page in doc]


class TestStyleLine:
    """라인 스타일 결정 테스트"""

    @pytest.mark.parametrize(
        "line,kind",
        [
            ("", "blank"),
            ("   ", "blank"),
            ("==========", "skip"),
            ("1. RÉSULTATS EN DEHORS DES REPÈRES", "section"),
            ("--- Hématologie", "subsection"),
            ("Hématologie :", "category"),
            ("Votre valeur : 1,15 Giga/L", "label"),
            ("Nombre d'analyses : 2", "label"),
            ("Les leucocytes sont des globules blancs.", "definition"),
            ("CRP élevée", "text"),
        ],
    )
    def test_kind(self, line, kind, records):
        assert style_line(line, records, index=1).kind == kind

    def test_first_line_is_not_definition(self, records):
        assert style_line("Bonjour", records, index=0).kind == "text"

    def test_section_icon(self, records):
        assert style_line("1. RÉSULTATS EN DEHORS DES REPÈRES", records).icon == "alert"
        assert style_line("2. RÉSULTATS DANS LES REPÈRES", records).icon == "check"
        assert style_line("3. RÉCAPITULATIF", records).icon == "info"

    def test_subsection_prefix_removed(self, records):
        assert style_line("--- Hématologie", records).text == "Hématologie"

    def test_question_label_bold(self, records):
        style = style_line("Qu'est-ce que c'est : un globule blanc", records, index=3)
        assert style.kind == "label"
        assert style.font == "hebo"


class TestBulletStyle:
    """글머리표 색은 레코드 status 로 결정"""

    def test_out_of_range_bullet(self, records):
        style = style_line("• Polynucléaires neutrophiles : 1,15 Giga/L", records)
        assert style.kind == "bullet"
        assert style.status == RecordStatus.OUT_OF_RANGE
        assert style.color == RED
        assert style.box
        assert style.icon == "alert"
        assert style.text == "Polynucléaires neutrophiles : 1,15 Giga/L"

    def test_in_range_bullet(self, records):
        style = style_line("- Leucocytes : 4,15 Giga/L", records)
        assert style.status == RecordStatus.IN_RANGE
        assert style.color == GREEN
        assert style.icon == "check"
        assert not style.box

    def test_status_wins_over_section_position(self, records):
        """범위 밖 레코드는 어느 섹션 아래에 있어도 빨간색"""
        explanation = "2. RÉSULTATS DANS LES REPÈRES\n• Polynucléaires neutrophiles : 1,15 Giga/L"
        styles = [style_line(line, records, i) for i, line in enumerate(explanation.split("\n"))]
        assert styles[1].color == RED

    def test_unmatched_bullet(self, records):
        style = style_line("* Une remarque générale", records)
        assert style.status is None
        assert style.icon == "bullet"

    def test_longest_name_wins(self, records):
        record = match_record("Polynucléaires éosinophiles : 0,10", records)
        assert record.name == "Polynucléaires éosinophiles"
        assert match_record("polynucléaires neutrophiles", records).name == "Polynucléaires neutrophiles"
        assert match_record("Inconnu", records) is None


class TestWrapWords:
    def test_wraps_to_width(self):
        text = " ".join(["globules"] * 30)
        lines = wrap_words(text, 120)
        assert len(lines) > 1
        assert all(text_width(line) <= 120 for line in lines)
        assert " ".join(lines) == text

    def test_long_word_kept(self):
        assert wrap_words("anticonstitutionnellement", 10) == ["anticonstitutionnellement"]

    def test_empty(self):
        assert wrap_words("", 100) == []


class TestPdfReportRenderer:
    """PdfReportRenderer 테스트"""

    def test_render_without_original(self, records):
        pdf = PdfReportRenderer(brand_name="Avencio Health").render(EXPLANATION, records, date_label="12 mars 2024")
        assert pdf.startswith(b"%PDF")
        texts = page_texts(pdf)
        assert len(texts) == 1
        assert TITLE in texts[0]
        assert DISCLAIMER_TITLE in texts[0]
        assert "Document généré le 12 mars 2024" in texts[0]
        assert "Page 1" in texts[0]
        assert "==========" not in texts[0]

    def test_appends_after_original(self, records, sample_pdf_bytes):
        pdf = PdfReportRenderer().render(
            EXPLANATION, records, original_pdf=sample_pdf_bytes, date_label="12 mars 2024"
        )
        texts = page_texts(pdf)
        assert len(texts) == 3
        assert "Leucocytes 4,15 Giga/L" in texts[0]
        assert "IMPORTANT : AVERTISSEMENT" in texts[-1]
        assert "12 mars 2024" in texts[-1]
        assert "Page 3" in texts[-1]

    def test_default_brand_and_date(self, records):
        texts = page_texts(PdfReportRenderer().render(EXPLANATION, records))
        assert "Avencio Health" in texts[0]
        assert "Date inconnue" in texts[0]

    def test_long_explanation_adds_pages(self, records):
        body = "\n".join(f"• Leucocytes : ligne {i}" for i in range(120))
        texts = page_texts(PdfReportRenderer().render("1. RÉSULTATS DANS LES REPÈRES\n" + body, records))
        assert len(texts) > 1
        assert "ligne 119" in "".join(texts)
        assert DISCLAIMER_TITLE in texts[-1]
        assert f"Page {len(texts)}" in texts[-1]

    def test_page_size_follows_original(self, records):
        original = fitz.open()
        original.new_page(width=612, height=792)
        data = original.tobytes()
        original.close()

        pdf = PdfReportRenderer().render(EXPLANATION, records, original_pdf=data)
        with fitz.open(stream=pdf, filetype="pdf") as doc:
            assert doc.page_count == 2
            assert doc[-1].rect.width == pytest.approx(612)
            assert doc[-1].rect.height == pytest.approx(792)

    def test_renderer_reusable(self, records):
        renderer = PdfReportRenderer()
        first = renderer.render(EXPLANATION, records)
        second = renderer.render(EXPLANATION, records)
        assert len(page_texts(first)) == len(page_texts(second)) == 1

    def test_shared_renderer_across_threads(self, records):
        """하나의 렌더러를 여러 스레드가 동시에 사용"""
        body = "\n".join(f"• Leucocytes : ligne {i}" for i in range(400))
        explanation = "1. RÉSULTATS DANS LES REPÈRES\n" + body
        renderer = PdfReportRenderer()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: renderer.render(explanation, records), range(8)))

        page_counts = {len(page_texts(pdf)) for pdf in results}
        assert len(page_counts) == 1
        assert page_counts.pop() > 1
