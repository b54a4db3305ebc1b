"""Word analyzer agent - explains each word of the foreign-language sentence."""

import logging

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from sentence_breaker.config import get_model, get_model_settings, get_settings
from sentence_breaker.models.language import Language

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a {target_name} language teacher for a native {source_name} speaker.

Your task: analyze each word of a {target_name} sentence.

For every word, in {source_name}:
- Give its translation or meaning
- Give a brief grammatical explanation in the context of the whole sentence

RULES:
- Analyze only actual words, in the order they appear
- Copy each word exactly as it appears in the sentence
- Keep each analysis short and direct
"""


class WordAnalysisItem(BaseModel):
    word: str = Field(description="Exact word from the foreign-language sentence")
    analysis: str = Field(
        description="Short analysis in the user's language: meaning and brief grammatical explanation"
    )


class WordAnalysisStep(BaseModel):
    word_analysis: list[WordAnalysisItem] = Field(default_factory=list)


def get_word_analyzer_agent(source: Language, target: Language) -> Agent:
    """Create word analyzer agent explaining `target` words in `source`."""
    settings = get_settings()
    prompt = SYSTEM_PROMPT.format(source_name=source.name, target_name=target.name)
    return Agent(
        get_model(settings.analysis_model),
        output_type=WordAnalysisStep,
        system_prompt=prompt,
        model_settings=get_model_settings(settings.analysis_temperature),
    )


async def analyze_words(
    foreign_sentence: str,
    source: Language,
    target: Language,
) -> WordAnalysisStep:
    """Word-by-word analysis of a sentence written in the target language."""
    prompt = f"""Analyze each word of this sentence.

{target.name} sentence: "{foreign_sentence}"
Explain in: {source.name}
"""

    agent = get_word_analyzer_agent(source, target)
    result = await agent.run(prompt)
    logger.debug("analyze_words: %d entries", len(result.output.word_analysis))
    return result.output
