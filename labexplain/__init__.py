"""labexplain: 프랑스어 검사결과지 PDF 교육용 설명 생성기"""

__version__ = "0.1.0"
