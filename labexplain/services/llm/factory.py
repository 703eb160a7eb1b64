"""LLM 서비스 팩토리

제공자 이름 → (모듈, 클래스) 표. 선택된 제공자의 SDK만 import 합니다.
"""

import importlib

from labexplain.settings import settings

from .base import BaseLLMService

PROVIDERS: dict[str, tuple[str, str]] = {
    "openai": (".openai_llm", "OpenAILLM"),
    "anthropic": (".anthropic_llm", "AnthropicLLM"),
    "dummy": (".dummy_llm", "DummyLLM"),
}


def get_llm_service(provider: str | None = None, **kwargs) -> BaseLLMService:
    """설명 생성 LLM 서비스 생성

    Args:
        provider: 제공자 이름 (None이면 LLM_PROVIDER 설정값)
        **kwargs: 구현체 생성자 인자 (api_key, model 등)

    Raises:
        ValueError: 등록되지 않은 제공자
    """
    name = (provider or settings.llm_provider).strip().lower()
    if name not in PROVIDERS:
        raise ValueError(f"지원하지 않는 LLM 제공자: {name} (가능: {', '.join(PROVIDERS)})")
    module_name, class_name = PROVIDERS[name]
    module = importlib.import_module(module_name, __package__)
    return getattr(module, class_name)(**kwargs)
