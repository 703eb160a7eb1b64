"""
검사결과 설명용 프롬프트.

판정(참고범위 내/외)은 결정론적 분류기가 이미 끝낸 상태로 전달되며,
LLM은 각 항목이 무엇을 측정하는지 교육적으로 설명만 합니다.
섹션 제목은 PDF 렌더러가 인식하는 형식("1. ...")과 일치해야 합니다.
"""

SECTION_OUT_OF_RANGE = "1. RÉSULTATS EN DEHORS DES REPÈRES"
SECTION_IN_RANGE = "2. RÉSULTATS DANS LES REPÈRES"
SECTION_SUMMARY = "3. RÉCAPITULATIF"

LAB_EXPLANATION_SYSTEM_PROMPT = f"""Tu es un assistant pédagogique qui aide des patients à comprendre le vocabulaire de leurs analyses biologiques.
Tu reçois le texte d'un compte-rendu de laboratoire et une liste d'analyses DÉJÀ classées par rapport aux repères du laboratoire.

RÈGLES IMPORTANTES :
- Ne modifie JAMAIS le classement fourni (dans / en dehors des repères). Ne reclasse aucune analyse.
- Aucune interprétation médicale, aucun diagnostic, aucune hypothèse de maladie, aucun conseil de traitement.
- Explique simplement ce que mesure chaque analyse, en une ou deux phrases.
- Recopie les valeurs et les repères tels qu'ils sont fournis (virgule décimale).
- Les analyses sans repère sont citées dans le récapitulatif, sans commentaire sur leur valeur.

FORMAT DE SORTIE (texte brut, sans Markdown) :
{SECTION_OUT_OF_RANGE}
• <Nom de l'analyse> : <valeur> <unité>
Repères : <repères>
Qu'est-ce que c'est : <explication courte>

{SECTION_IN_RANGE}
• <Nom de l'analyse> : <valeur> <unité>
Qu'est-ce que c'est : <explication courte>

{SECTION_SUMMARY}
Nombre d'analyses : <total>
- <une phrase neutre par catégorie d'analyses>

Si une section est vide, écris « Aucune analyse concernée. » sous son titre."""


LAB_EXPLANATION_USER_TEMPLATE = """Voici les résultats d'analyses biologiques à expliquer de façon pédagogique (SANS interprétation médicale) :

{text}

Classement des analyses (à respecter strictement) :
{classification}"""


def format_lab_explanation_user_prompt(text: str, classification: str = "") -> str:
    """검사결과 설명용 user 프롬프트를 포맷팅합니다.

    Parameters
    ----------
    text : str
        노이즈 제거된 결과지 텍스트
    classification : str
        판정 결과를 섹션별로 정리한 블록 (없으면 '(aucune analyse reconnue)')

    Returns
    -------
    str
        포맷팅된 user 프롬프트
    """
    return LAB_EXPLANATION_USER_TEMPLATE.format(
        text=text.strip(),
        classification=classification.strip() or "(aucune analyse reconnue)",
    )
