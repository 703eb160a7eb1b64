"""더미 LLM 구현 (테스트용)"""

from labexplain.prompts import SECTION_IN_RANGE, SECTION_OUT_OF_RANGE, SECTION_SUMMARY

from .base import BaseLLMService, ExplanationRequest, LLMResponse

_CLASSIFICATION_MARKER = "Classement des analyses"


def _read_classification(prompt: str) -> tuple[list[str], list[str]]:
    """판정 블록에서 ([범위 밖 항목], [범위 내 항목]) 추출"""
    out_items: list[str] = []
    in_items: list[str] = []
    target = None
    _, _, classification = prompt.partition(_CLASSIFICATION_MARKER)
    for line in classification.splitlines():
        line = line.strip()
        if line.startswith("[EN DEHORS"):
            target = out_items
        elif line.startswith("[DANS"):
            target = in_items
        elif line.startswith("["):
            target = None
        elif line.startswith("- ") and target is not None:
            target.append(line[2:])
    return out_items, in_items


class DummyLLM(BaseLLMService):
    """테스트용 더미 LLM 서비스

    프롬프트의 판정 블록("[EN DEHORS]" / "[DANS]" 아래 '- ' 라인)을 그대로
    섹션 형식으로 옮겨 적습니다. 외부 호출이 없으므로 결과가 결정적입니다.
    """

    provider = "dummy"

    def explain(self, request: ExplanationRequest) -> LLMResponse:
        out_items, in_items = _read_classification(request.prompt)

        def _section(title: str, items: list[str]) -> list[str]:
            body = [f"• {item}" for item in items] or ["Aucune analyse concernée."]
            return [title, *body, ""]

        lines = [
            *_section(SECTION_OUT_OF_RANGE, out_items),
            *_section(SECTION_IN_RANGE, in_items),
            SECTION_SUMMARY,
            f"Nombre d'analyses : {len(out_items) + len(in_items)}",
            "[Mode démonstration : réponse générée sans modèle de langage]",
        ]

        prompt_tokens = (len(request.instructions) + len(request.prompt)) // 4
        return LLMResponse(
            content="\n".join(lines),
            model="dummy-model",
            usage={"prompt_tokens": prompt_tokens, "completion_tokens": 0, "total_tokens": prompt_tokens},
            metadata={"provider": self.provider, "max_tokens": request.max_tokens},
        )
