"""LLM 서비스 테스트"""

from types import SimpleNamespace

import pytest

from labexplain.prompts import SECTION_IN_RANGE, SECTION_OUT_OF_RANGE, SECTION_SUMMARY
from labexplain.services.llm import PROVIDERS, get_llm_service
from labexplain.services.llm.base import ExplanationRequest
from labexplain.services.llm.dummy_llm import DummyLLM


def make_request(prompt="Bonjour", instructions="Soyez pédagogique.", **kwargs):
    params = {"temperature": 0.1, "max_tokens": 3500}
    params.update(kwargs)
    return ExplanationRequest(instructions=instructions, prompt=prompt, **params)


class TestDummyLLM:
    """더미 LLM 테스트"""

    def test_explain(self, dummy_llm_service):
        response = dummy_llm_service.explain(make_request())

        assert SECTION_SUMMARY in response.content
        assert response.model == "dummy-model"
        assert response.usage["prompt_tokens"] > 0
        assert response.metadata == {"provider": "dummy", "max_tokens": 3500}

    def test_follows_classification(self, dummy_llm_service):
        """판정 블록의 항목을 해당 섹션에 그대로 옮김"""
        prompt = (
            "Voici les résultats\n\nClassement des analyses (à respecter strictement) :\n"
            "[EN DEHORS DES REPÈRES]\n- CRP : 10 mg/L (repères : < 5)\n\n"
            "[DANS LES REPÈRES]\n- Leucocytes : 4,15 Giga/L\n\n"
            "[SANS REPÈRE]\n- Aspect : Limpide"
        )
        lines = dummy_llm_service.explain(make_request(prompt)).content.split("\n")

        out_idx = lines.index(SECTION_OUT_OF_RANGE)
        in_idx = lines.index(SECTION_IN_RANGE)
        assert lines[out_idx + 1] == "• CRP : 10 mg/L (repères : < 5)"
        assert lines[in_idx + 1] == "• Leucocytes : 4,15 Giga/L"
        assert "• Aspect : Limpide" not in lines
        assert "Nombre d'analyses : 2" in lines

    def test_empty_sections(self, dummy_llm_service):
        response = dummy_llm_service.explain(make_request("Pas de classement"))
        assert response.content.count("Aucune analyse concernée.") == 2

    def test_request_is_immutable(self):
        request = make_request()
        with pytest.raises(AttributeError):
            request.prompt = "autre"


class TestFactory:
    """LLM 팩토리 테스트"""

    def test_dummy_from_settings(self, monkeypatch):
        from labexplain.settings import settings

        monkeypatch.setattr(settings, "llm_provider", "dummy")
        assert isinstance(get_llm_service(), DummyLLM)

    def test_explicit_provider_wins(self, monkeypatch):
        from labexplain.settings import settings

        monkeypatch.setattr(settings, "llm_provider", "openai")
        assert isinstance(get_llm_service(" Dummy "), DummyLLM)

    def test_openai_provider(self, monkeypatch):
        from labexplain.services.llm.openai_llm import OpenAILLM
        from labexplain.settings import settings

        monkeypatch.setattr(settings, "llm_provider", "openai")
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        service = get_llm_service()
        assert isinstance(service, OpenAILLM)
        assert service.provider == "openai"

    def test_constructor_arguments(self):
        from labexplain.services.llm.anthropic_llm import AnthropicLLM

        service = get_llm_service("anthropic", api_key="sk-ant-test", model="claude-test")
        assert isinstance(service, AnthropicLLM)
        assert service.model == "claude-test"

    def test_unknown_provider(self, monkeypatch):
        from labexplain.settings import settings

        monkeypatch.setattr(settings, "llm_provider", "mistral")
        with pytest.raises(ValueError) as exc_info:
            get_llm_service()
        assert "mistral" in str(exc_info.value)

    def test_registered_providers(self):
        assert set(PROVIDERS) == {"openai", "anthropic", "dummy"}


class _FakeCreate:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.response


class TestOpenAILLM:
    """OpenAI 구현 테스트 (가짜 클라이언트)"""

    def _service(self, usage):
        from labexplain.services.llm.openai_llm import OpenAILLM

        response = SimpleNamespace(
            model="gpt-4o-2024",
            usage=usage,
            choices=[SimpleNamespace(message=SimpleNamespace(content="  Explication  "), finish_reason="stop")],
        )
        completions = _FakeCreate(response)
        service = OpenAILLM(api_key="sk-test", model="gpt-4o")
        service.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        return service, completions

    def test_request_mapping(self):
        service, completions = self._service(SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15))
        response = service.explain(make_request())

        call = completions.calls[0]
        assert call["model"] == "gpt-4o"
        assert call["temperature"] == 0.1
        assert call["max_tokens"] == 3500
        assert call["messages"] == [
            {"role": "system", "content": "Soyez pédagogique."},
            {"role": "user", "content": "Bonjour"},
        ]
        assert response.content == "Explication"
        assert response.usage["total_tokens"] == 15
        assert response.metadata == {"provider": "openai", "finish_reason": "stop"}

    def test_model_override(self):
        service, completions = self._service(None)
        response = service.explain(make_request(temperature=0.5, model="gpt-4o-mini"))

        call = completions.calls[0]
        assert call["model"] == "gpt-4o-mini"
        assert call["temperature"] == 0.5
        assert response.usage is None


class TestAnthropicLLM:
    """Anthropic 구현 테스트 (가짜 클라이언트)"""

    def _service(self):
        from labexplain.services.llm.anthropic_llm import AnthropicLLM

        response = SimpleNamespace(
            model="claude-test",
            content=[
                SimpleNamespace(type="text", text="Première partie. "),
                SimpleNamespace(type="tool_use", id="x"),
                SimpleNamespace(type="text", text="Seconde partie."),
            ],
            usage=SimpleNamespace(input_tokens=12, output_tokens=7),
            stop_reason="end_turn",
        )
        messages = _FakeCreate(response)
        service = AnthropicLLM(api_key="sk-ant-test", model="claude-test")
        service.client = SimpleNamespace(messages=messages)
        return service, messages

    def test_instructions_sent_as_system(self):
        service, messages = self._service()
        response = service.explain(make_request())

        call = messages.calls[0]
        assert call["system"] == "Soyez pédagogique."
        assert call["messages"] == [{"role": "user", "content": "Bonjour"}]
        assert call["temperature"] == 0.1
        assert call["max_tokens"] == 3500
        assert response.content == "Première partie. Seconde partie."
        assert response.usage == {"input_tokens": 12, "output_tokens": 7}
        assert response.metadata["stop_reason"] == "end_turn"

    def test_without_instructions(self):
        service, messages = self._service()
        service.explain(make_request(instructions="", max_tokens=100))

        call = messages.calls[0]
        assert "system" not in call
        assert call["max_tokens"] == 100
