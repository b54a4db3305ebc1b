"""Translator agent - cleans the input sentence and translates it to the other language."""

import logging

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from sentence_breaker.config import get_model, get_model_settings, get_settings
from sentence_breaker.models.language import Language

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional translator working between {source_name} and {target_name}.

Your task: clean the input sentence if needed and translate it to the OPPOSITE language.

CLEANING:
- Fix grammar errors, spelling mistakes, punctuation issues and formatting problems
- Keep the cleaned sentence in the language it was written in
- Preserve the meaning and tone

LANGUAGE DETECTION:
- The input is either {source_name} or {target_name}
- Report the language of the cleaned sentence and of the translation using exactly these names

TRANSLATION QUALITY:
- Translate naturally and fluently, as a native speaker would
- Idiomatic, not word-for-word
- The cleaned sentence and the translation MUST be in different languages
"""


class TranslationStep(BaseModel):
    input_language: str = Field(
        description="The language of the input sentence, one of the two language names given"
    )
    cleaned_sentence: str = Field(
        description="The input sentence after cleaning, in the original input language "
        "(grammar, spelling, punctuation, formatting fixed)"
    )
    translation: str = Field(
        description="Natural, fluent translation to the opposite language"
    )
    translation_language: str = Field(
        description="The language of the translation, one of the two language names given"
    )


def get_translator_agent(source: Language, target: Language) -> Agent:
    """Create translator agent for a source/target language pair."""
    settings = get_settings()
    prompt = SYSTEM_PROMPT.format(source_name=source.name, target_name=target.name)
    return Agent(
        get_model(settings.translation_model),
        output_type=TranslationStep,
        system_prompt=prompt,
        model_settings=get_model_settings(settings.translation_temperature),
    )


async def translate_sentence(
    sentence: str,
    source: Language,
    target: Language,
) -> TranslationStep:
    """Clean a sentence written in either language and translate it to the other one.

    Args:
        sentence: Raw user input
        source: Language the user knows well
        target: Language the user is learning
    """
    prompt = f"""Clean and translate this sentence.

Sentence: "{sentence}"
User's language: {source.name}
Target language: {target.name}
"""

    agent = get_translator_agent(source, target)
    result = await agent.run(prompt)
    step = result.output
    logger.debug(
        "translate_sentence: %s -> %s",
        step.input_language,
        step.translation_language,
    )
    return step
