"""
Lab explanation prompts module.

이 패키지는 검사결과 설명 생성에 사용되는 LLM 프롬프트를 중앙 관리합니다.
"""

from .lab_explanation import (
    LAB_EXPLANATION_SYSTEM_PROMPT,
    LAB_EXPLANATION_USER_TEMPLATE,
    SECTION_IN_RANGE,
    SECTION_OUT_OF_RANGE,
    SECTION_SUMMARY,
    format_lab_explanation_user_prompt,
)

__all__ = [
    # 검사결과 설명
    "LAB_EXPLANATION_SYSTEM_PROMPT",
    "LAB_EXPLANATION_USER_TEMPLATE",
    "format_lab_explanation_user_prompt",
    # 섹션 제목
    "SECTION_OUT_OF_RANGE",
    "SECTION_IN_RANGE",
    "SECTION_SUMMARY",
]
