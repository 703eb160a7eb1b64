"""OpenAI API LLM 구현"""

from openai import OpenAI

from labexplain.settings import settings

from .base import BaseLLMService, ExplanationRequest, LLMResponse


class OpenAILLM(BaseLLMService):
    """OpenAI Chat Completions API를 사용한 설명 생성"""

    provider = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        """
        Args:
            api_key: OpenAI API 키 (None이면 설정값)
            model: 모델명 (None이면 설정값)
        """
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.client = OpenAI(api_key=self.api_key)

    def explain(self, request: ExplanationRequest) -> LLMResponse:
        response = self.client.chat.completions.create(
            model=request.model or self.model,
            messages=[
                {"role": "system", "content": request.instructions},
                {"role": "user", "content": request.prompt},
            ],
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )

        usage = None
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        choice = response.choices[0]
        return LLMResponse(
            content=(choice.message.content or "").strip(),
            model=response.model,
            usage=usage,
            metadata={"provider": self.provider, "finish_reason": choice.finish_reason},
        )
