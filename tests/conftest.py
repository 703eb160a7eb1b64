"""테스트 픽스처 및 설정"""

from pathlib import Path

import fitz
import pytest
from dotenv import load_dotenv

from labexplain.services.llm.dummy_llm import DummyLLM
from labexplain.services.pdf.dummy import DummyPdfTextSource

# 프로젝트 루트의 .env 파일 로드
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


SAMPLE_REPORT_TEXT = """Laboratoire de Biologie Médicale Cerballiance
12 rue de la République
69002 LYON
Tél : 04 72 00 00 00
Édité le 12 mars 2024
Hématologie
Leucocytes 4,15 Giga/L (repères : 4,05 à 11,00)
Polynucléaires neutrophiles 1,15 Giga/L (repères : 1,50 à 7,50)
Hémoglobine 14,2 g/dL 13,0 - 17,0
Biochimie
Créatinine urinaire 29,23 mmol/L (repères : 5,13 à 14,23)
CRP 3 mg/L (< 5)
Page 1/1"""


SAMPLE_PDF_PAGES = [
    [
        "Laboratoire de Biologie Médicale Cerballiance",
        "69002 LYON",
        "Édité le 12 mars 2024",
        "Hématologie",
        "Leucocytes 4,15 Giga/L (repères : 4,05 à 11,00)",
        "Polynucléaires neutrophiles 1,15 Giga/L (repères : 1,50 à 7,50)",
    ],
    [
        "Laboratoire de Biologie Médicale Cerballiance",
        "Biochimie",
        "Créatinine urinaire 29,23 mmol/L (repères : 5,13 à 14,23)",
        "Page 2/2",
    ],
]


def make_pdf(pages, *, top: float = 72, line_gap: float = 14) -> bytes:
    """라인 리스트로 PDF 생성 (페이지별 한 줄에 텍스트 조각 하나)"""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page(width=595, height=842)
        y = top
        for line in lines:
            page.insert_text((50, y), line, fontname="helv", fontsize=10)
            y += line_gap
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def dummy_llm_service():
    """더미 LLM 서비스 픽스처"""
    return DummyLLM()


@pytest.fixture
def dummy_pdf_source():
    """더미 PDF 텍스트 소스 픽스처"""
    return DummyPdfTextSource()


@pytest.fixture
def sample_report_text():
    """샘플 결과지 텍스트 픽스처 (머리글 포함 한 페이지)"""
    return SAMPLE_REPORT_TEXT


@pytest.fixture
def sample_pdf_bytes():
    """두 페이지짜리 샘플 결과지 PDF 픽스처"""
    return make_pdf(SAMPLE_PDF_PAGES)


@pytest.fixture
def pdf_factory():
    """라인 리스트 → PDF 바이트 생성 함수 픽스처"""
    return make_pdf
