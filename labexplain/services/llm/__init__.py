"""LLM 서비스 패키지"""

from .base import BaseLLMService, ExplanationRequest, LLMResponse
from .factory import PROVIDERS, get_llm_service

__all__ = [
    "BaseLLMService",
    "ExplanationRequest",
    "LLMResponse",
    "PROVIDERS",
    "get_llm_service",
]
