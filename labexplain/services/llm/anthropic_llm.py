"""Anthropic API LLM 구현"""

from anthropic import Anthropic

from labexplain.settings import settings

from .base import BaseLLMService, ExplanationRequest, LLMResponse


class AnthropicLLM(BaseLLMService):
    """Anthropic Messages API를 사용한 설명 생성

    system 지시문은 messages 가 아닌 system 인자로 전달합니다.
    """

    provider = "anthropic"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = api_key or settings.anthropic_api_key
        self.model = model or settings.anthropic_model
        self.client = Anthropic(api_key=self.api_key)

    def explain(self, request: ExplanationRequest) -> LLMResponse:
        kwargs = {
            "model": request.model or self.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.instructions:
            kwargs["system"] = request.instructions

        response = self.client.messages.create(**kwargs)

        # text 블록만 이어붙임
        text = "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
        return LLMResponse(
            content=text.strip(),
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            metadata={"provider": self.provider, "stop_reason": response.stop_reason},
        )
