"""Oracle Prompt Construction.

Builds the judgment prompt sent to the external oracle. One template per
lexicon language; unknown languages fall back to English.
"""
import logging

logger = logging.getLogger(__name__)


SYSTEM_PROMPTS = {
    "en": """You are an expert in distinguishing human writing from AI-generated text.
Judge the text you are given for signs of AI generation. Look specifically at:
- Natural sentence structure and rhythm
- Generic or boilerplate business language
- Concrete, context-relevant detail
- Personal tone and voice
- Informal writing markers (emoticons, exclamation marks, hedges)

Respond with ONLY a JSON object, no preamble:
{"probability": <integer 0-100>, "confidence": "Low" | "Medium" | "High", "explanations": [<short reasons>]}
A bare integer between 0 and 100 is also accepted.""",

    "da": """Du er en ekspert i at skelne menneskeskrevet tekst fra AI-genereret tekst.
Vurder den givne tekst for tegn på AI-generering. Se specifikt efter:
- Naturlig dansk sætningsstruktur
- Forretningsspecifikt sprog
- Kontekstrelevante detaljer
- Personlig tone
- Naturlige skrivemarkører (smileys, udråbstegn, etc.)

Svar KUN med et JSON-objekt, uden indledning:
{"probability": <heltal 0-100>, "confidence": "Low" | "Medium" | "High", "explanations": [<korte begrundelser>]}
Et enkelt heltal mellem 0 og 100 accepteres også.""",
}

USER_TEMPLATES = {
    "en": "Text:\n{text}",
    "da": "Tekst:\n{text}",
}

DEFAULT_LANGUAGE = "en"


def build_oracle_prompt(language: str = DEFAULT_LANGUAGE) -> tuple[str, str]:
    """Return (system prompt, user template) for a language."""
    if language not in SYSTEM_PROMPTS:
        logger.debug(f"No oracle prompt for '{language}', using '{DEFAULT_LANGUAGE}'")
        language = DEFAULT_LANGUAGE
    return SYSTEM_PROMPTS[language], USER_TEMPLATES[language]


def build_oracle_messages(text: str, language: str = DEFAULT_LANGUAGE) -> list[dict]:
    """Build chat messages for one oracle judgment.

    Args:
        text: Text to judge
        language: Lexicon language of the text

    Returns:
        Messages [{"role": "...", "content": "..."}]
    """
    system_prompt, user_template = build_oracle_prompt(language)
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_template.format(text=text)},
    ]
