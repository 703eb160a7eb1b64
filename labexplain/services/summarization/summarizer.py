"""검사결과 설명 생성기 (LabReportSummarizer)

정제된 결과지 텍스트와 판정된 레코드로 프랑스어 프롬프트를 구성하여
LLM에 교육적 설명을 요청합니다. 섹션 구분은 레코드 status 를 접어서(fold)
만들며, LLM은 판정을 바꾸지 않고 설명만 작성합니다.
"""

import logging
from typing import TYPE_CHECKING

from labexplain.prompts import LAB_EXPLANATION_SYSTEM_PROMPT, format_lab_explanation_user_prompt
from labexplain.services.lab_report.assessment import partition_by_status
from labexplain.services.lab_report.errors import SummarizationError
from labexplain.services.lab_report.models import LabRecord, RecordStatus
from labexplain.services.llm.base import ExplanationRequest
from labexplain.settings import settings

if TYPE_CHECKING:
    from labexplain.services.llm.base import BaseLLMService

logger = logging.getLogger(__name__)

# 상태별 판정 블록 제목 (출력 순서)
STATUS_HEADINGS = [
    (RecordStatus.OUT_OF_RANGE, "[EN DEHORS DES REPÈRES]"),
    (RecordStatus.IN_RANGE, "[DANS LES REPÈRES]"),
    (RecordStatus.UNKNOWN, "[SANS REPÈRE]"),
]


def describe_record(record: LabRecord) -> str:
    """레코드 한 줄 요약 (예: Leucocytes : 4,15 Giga/L (repères : 4,05 à 11,00))

    값과 범위는 쉼표 소수로 다시 표기합니다.
    """
    values = " ; ".join(
        f"{m.display_value} {m.unit}".strip() for m in record.measurements
    )
    line = f"{record.name} : {values}"
    if record.range_expression:
        line += f" (repères : {record.display_range})"
    return line


def build_classification_block(records: list[LabRecord]) -> str:
    """판정된 레코드를 상태별 블록으로 정리 (빈 상태는 생략)"""
    groups = partition_by_status(records)
    blocks = []
    for status, heading in STATUS_HEADINGS:
        if groups[status]:
            blocks.append("\n".join([heading, *(f"- {describe_record(r)}" for r in groups[status])]))
    return "\n\n".join(blocks)


class LabReportSummarizer:
    """검사결과 설명 생성기"""

    def __init__(
        self,
        llm_service: "BaseLLMService",
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        """
        Args:
            llm_service: LLM 서비스 인스턴스
            temperature: 생성 temperature (None이면 설정값)
            max_tokens: 최대 토큰 수 (None이면 설정값)
        """
        self.llm_service = llm_service
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = settings.llm_max_tokens if max_tokens is None else max_tokens

    def build_request(self, text: str, records: list[LabRecord]) -> ExplanationRequest:
        """LLM 요청 구성 (system 지시문 + 결과지/판정 블록 프롬프트)"""
        return ExplanationRequest(
            instructions=LAB_EXPLANATION_SYSTEM_PROMPT,
            prompt=format_lab_explanation_user_prompt(text, build_classification_block(records)),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    def summarize(self, text: str, records: list[LabRecord]) -> str:
        """교육적 설명 생성

        Raises:
            SummarizationError: LLM 호출 실패 또는 빈 응답
        """
        request = self.build_request(text, records)
        try:
            response = self.llm_service.explain(request)
        except Exception as exc:
            logger.exception("설명 생성 LLM 호출 실패: provider=%s", self.llm_service.provider)
            raise SummarizationError(f"Analysis failed: {exc}") from exc

        content = (response.content or "").strip()
        if not content:
            raise SummarizationError("Analysis failed: empty response from language model")

        logger.info(
            "설명 생성 완료: records=%d, chars=%d, model=%s",
            len(records),
            len(content),
            response.model,
        )
        return content
