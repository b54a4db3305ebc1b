"""Two-step translate-then-analyze pipeline used by the terminal app."""

import time
import unicodedata
from collections.abc import Awaitable
from contextlib import contextmanager
from enum import Enum
from typing import TypeVar

import httpx
from pydantic_ai.exceptions import AgentRunError, UnexpectedModelBehavior

from sentence_breaker.agents import analyze_words, translate_sentence
from sentence_breaker.agents.translator import TranslationStep
from sentence_breaker.agents.word_analyzer import WordAnalysisStep
from sentence_breaker.config import ConfigError, logger
from sentence_breaker.models import Language, SentenceBreakdown, WordInfo, get_language

T = TypeVar("T")

TRANSLATION_STAGE = "translation"
ANALYSIS_STAGE = "word analysis"


class ErrorKind(str, Enum):
    REQUEST = "request"
    EMPTY_RESPONSE = "empty response"
    MALFORMED_OUTPUT = "malformed output"


class TranslationError(Exception):
    """A failed pipeline stage. The message is shown to the user as-is."""

    def __init__(self, stage: str, kind: ErrorKind, detail: str = ""):
        self.stage = stage
        self.kind = kind
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        if self.kind is ErrorKind.EMPTY_RESPONSE:
            return f"no response from {self.stage} API"
        if self.kind is ErrorKind.MALFORMED_OUTPUT:
            return f"failed to parse {self.stage} output: {self.detail}"
        return f"{self.stage} API error: {self.detail}"


@contextmanager
def log_time(operation: str):
    start = time.perf_counter()
    yield
    elapsed = time.perf_counter() - start
    logger.debug(f"{operation}: {elapsed:.2f}s")


async def _guarded(stage: str, call: Awaitable[T]) -> T:
    """Await one model call, mapping failures to TranslationError."""
    try:
        with log_time(stage):
            return await call
    except UnexpectedModelBehavior as e:
        raise TranslationError(stage, ErrorKind.MALFORMED_OUTPUT, str(e)) from e
    except (AgentRunError, ConfigError, httpx.HTTPError) as e:
        raise TranslationError(stage, ErrorKind.REQUEST, str(e)) from e


def remove_punctuation(text: str) -> str:
    """Keep letters, digits and their combining marks; collapse whitespace runs to one space.

    A mark is kept only directly after a kept letter, digit or mark. The result
    is NFC-normalized, so applying this twice gives the same string.
    """
    chars = []
    prev_was_space = False
    prev_kept_word_char = False
    for ch in unicodedata.normalize("NFC", text):
        category = unicodedata.category(ch)[0]
        if category in ("L", "N") or (category == "M" and prev_kept_word_char):
            chars.append(ch)
            prev_was_space = False
            prev_kept_word_char = True
        elif ch.isspace():
            if not prev_was_space:
                chars.append(" ")
                prev_was_space = True
            prev_kept_word_char = False
        else:
            prev_kept_word_char = False
    return unicodedata.normalize("NFC", "".join(chars).strip())


def foreign_sentence(step: TranslationStep, target: Language) -> str:
    """Pick whichever of the two sentences is in the language being learned."""
    if step.input_language.strip().casefold() == target.name.casefold():
        return step.cleaned_sentence
    return step.translation


def process_word_analysis(step: WordAnalysisStep) -> list[WordInfo]:
    """Strip punctuation from words, dropping entries that were punctuation only."""
    words = []
    for item in step.word_analysis:
        cleaned = remove_punctuation(item.word)
        if not cleaned:
            continue
        words.append(WordInfo(word=cleaned, explanation=item.analysis.strip()))
    return words


async def break_down_sentence(
    source_code: str,
    target_code: str,
    sentence: str,
) -> SentenceBreakdown:
    """
    Translate a sentence and explain the foreign-language version word by word.

    Args:
        source_code: Code of the language the user knows well
        target_code: Code of the language the user is learning
        sentence: Raw input, in either language

    Returns:
        SentenceBreakdown with the cleaned original, its translation and the word analysis

    Raises:
        TranslationError: if either step fails. No partial result is returned.
    """
    try:
        source = get_language(source_code)
        target = get_language(target_code)
    except ValueError as e:
        raise TranslationError(TRANSLATION_STAGE, ErrorKind.REQUEST, str(e)) from e
    logger.debug(f"Breaking down sentence ({source.name} <-> {target.name})")

    step = await _guarded(TRANSLATION_STAGE, translate_sentence(sentence, source, target))
    if not step.cleaned_sentence.strip() or not step.translation.strip():
        raise TranslationError(TRANSLATION_STAGE, ErrorKind.EMPTY_RESPONSE)

    foreign = foreign_sentence(step, target)
    analysis = await _guarded(ANALYSIS_STAGE, analyze_words(foreign, source, target))

    words = process_word_analysis(analysis)
    logger.debug(
        f"Analysis kept {len(words)}/{len(analysis.word_analysis)} entries"
    )
    return SentenceBreakdown(
        original_sentence=step.cleaned_sentence,
        translation=step.translation,
        word_analysis=words,
    )
