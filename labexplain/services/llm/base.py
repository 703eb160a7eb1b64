"""설명 생성 LLM 인터페이스

설명 생성기(LabReportSummarizer)는 system 지시문 하나와 결과지 프롬프트 하나로
이루어진 단일 요청을 보내고 설명 텍스트 하나를 돌려받습니다.
대화 이력이나 스트리밍은 다루지 않습니다.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ExplanationRequest:
    """설명 생성 요청"""

    instructions: str  # system 지시문 (섹션 구성/어조)
    prompt: str  # 정제된 결과지 텍스트 + 판정 블록
    temperature: float
    max_tokens: int
    model: str | None = None  # None이면 구현체 기본 모델


@dataclass
class LLMResponse:
    """LLM 응답 데이터 클래스"""

    content: str
    model: str | None = None
    usage: dict | None = None
    metadata: dict | None = None


class BaseLLMService(ABC):
    """설명 생성 LLM 추상 클래스

    구현체는 요청 하나에 응답 하나를 돌려주며 재시도하지 않습니다.
    호출 실패는 예외로 그대로 전파되고, 설명 생성기가 SummarizationError 로 감쌉니다.
    """

    provider: str = ""

    @abstractmethod
    def explain(self, request: ExplanationRequest) -> LLMResponse:
        """설명 생성 (동기, 논-스트리밍)

        Returns:
            LLMResponse 객체 (content 는 앞뒤 공백 제거)
        """
