"""Tests for the translate-then-analyze pipeline and its agents."""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior

from sentence_breaker.agents.translator import SYSTEM_PROMPT as TRANSLATOR_PROMPT, TranslationStep
from sentence_breaker.agents.word_analyzer import (
    SYSTEM_PROMPT as ANALYZER_PROMPT,
    WordAnalysisItem,
    WordAnalysisStep,
)
from sentence_breaker.models import SentenceBreakdown, WordInfo, get_language
from sentence_breaker.orchestration import (
    ErrorKind,
    TranslationError,
    foreign_sentence,
    process_word_analysis,
    remove_punctuation,
)


@pytest.fixture
def swedish():
    return get_language("sv")


@pytest.fixture
def german():
    return get_language("de")


@pytest.fixture
def german_input_step():
    return TranslationStep(
        input_language="German",
        cleaned_sentence="Wie spät ist es?",
        translation="What time is it?",
        translation_language="English",
    )


# ── Punctuation post-processing ───────────────────────────────────────────────


class TestRemovePunctuation:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("spät", "spät"),
            ("es?", "es"),
            ("«Hallo»", "Hallo"),
            ("l'homme", "lhomme"),
            ("  viel   zu  ", "viel zu"),
            ("1990,", "1990"),
            ("—", ""),
            ("...", ""),
            ("?", ""),
            ("\u0308", ""),
            ("spa-\u0308t", "spat"),
            ("", ""),
        ],
    )
    def test_remove_punctuation(self, raw, expected):
        assert remove_punctuation(raw) == expected

    @pytest.mark.parametrize(
        "word", ["spät", "viel zu", "Straße", "2024", "हिंदी", "spa-\u0308t", "\u0308"]
    )
    def test_idempotent(self, word):
        once = remove_punctuation(word)
        assert remove_punctuation(once) == once

    def test_clean_word_unchanged(self):
        assert remove_punctuation("klockan") == "klockan"

    def test_keeps_combining_marks(self):
        # Decomposed "ä" is normalized, not stripped of its diaeresis
        assert remove_punctuation("spa\u0308t") == "sp\u00e4t"

    def test_tabs_and_newlines_collapse(self):
        assert remove_punctuation("a\t\n b") == "a b"


class TestProcessWordAnalysis:
    def test_drops_punctuation_only_entries(self):
        step = WordAnalysisStep(word_analysis=[
            WordAnalysisItem(word="spät", analysis="late, adjective"),
            WordAnalysisItem(word="?", analysis=""),
            WordAnalysisItem(word="...", analysis="ellipsis"),
        ])
        assert process_word_analysis(step) == [
            WordInfo(word="spät", explanation="late, adjective"),
        ]

    def test_strips_trailing_punctuation(self):
        step = WordAnalysisStep(word_analysis=[
            WordAnalysisItem(word="es?", analysis="it, pronoun"),
        ])
        assert process_word_analysis(step)[0].word == "es"

    def test_preserves_order(self):
        step = WordAnalysisStep(word_analysis=[
            WordAnalysisItem(word=w, analysis=w.upper()) for w in ["wie", "spät", "ist", "es"]
        ])
        assert [w.word for w in process_word_analysis(step)] == ["wie", "spät", "ist", "es"]

    def test_empty(self):
        assert process_word_analysis(WordAnalysisStep()) == []

    def test_drops_lone_combining_mark(self):
        step = WordAnalysisStep(word_analysis=[
            WordAnalysisItem(word="\u0308", analysis="x"),
            WordAnalysisItem(word="spa-\u0308t", analysis="y"),
        ])
        words = process_word_analysis(step)
        assert words == [WordInfo(word="spat", explanation="y")]
        assert [remove_punctuation(w.word) for w in words] == ["spat"]


class TestForeignSentence:
    def test_input_in_target_language(self, german_input_step, german):
        assert foreign_sentence(german_input_step, german) == "Wie spät ist es?"

    def test_input_in_source_language(self, german):
        step = TranslationStep(
            input_language="Swedish",
            cleaned_sentence="Vad är klockan?",
            translation="Wie spät ist es?",
            translation_language="German",
        )
        assert foreign_sentence(step, german) == "Wie spät ist es?"

    def test_language_match_ignores_case(self, german_input_step, german):
        step = german_input_step.model_copy(update={"input_language": " german "})
        assert foreign_sentence(step, german) == "Wie spät ist es?"


# ── Prompt tests ──────────────────────────────────────────────────────────────


class TestPrompts:
    def test_translator_prompt_placeholders(self):
        assert "{source_name}" in TRANSLATOR_PROMPT
        assert "{target_name}" in TRANSLATOR_PROMPT

    def test_translator_prompt_formatting(self):
        formatted = TRANSLATOR_PROMPT.format(source_name="Swedish", target_name="German")
        assert "Swedish" in formatted
        assert "German" in formatted
        assert "{source_name}" not in formatted
        assert "OPPOSITE" in formatted

    def test_analyzer_prompt_formatting(self):
        formatted = ANALYZER_PROMPT.format(source_name="Swedish", target_name="German")
        assert "German sentence" in formatted
        assert "{target_name}" not in formatted


# ── Agents (mocked) ───────────────────────────────────────────────────────────


def agent_returning(output):
    mock_result = MagicMock()
    mock_result.output = output
    mock_agent = AsyncMock()
    mock_agent.run.return_value = mock_result
    return mock_agent


class TestTranslateSentence:
    @pytest.mark.asyncio
    async def test_translate_sentence_calls_agent(self, german_input_step, swedish, german):
        mock_agent = agent_returning(german_input_step)
        with patch("sentence_breaker.agents.translator.get_translator_agent") as mock_get:
            mock_get.return_value = mock_agent

            from sentence_breaker.agents.translator import translate_sentence

            result = await translate_sentence("Wie spat ist es?", swedish, german)

            assert result == german_input_step
            mock_get.assert_called_once_with(swedish, german)
            prompt = mock_agent.run.call_args[0][0]
            assert "Wie spat ist es?" in prompt
            assert "Swedish" in prompt


class TestAnalyzeWords:
    @pytest.mark.asyncio
    async def test_analyze_words_calls_agent(self, swedish, german):
        output = WordAnalysisStep(word_analysis=[WordAnalysisItem(word="spät", analysis="sen")])
        mock_agent = agent_returning(output)
        with patch("sentence_breaker.agents.word_analyzer.get_word_analyzer_agent") as mock_get:
            mock_get.return_value = mock_agent

            from sentence_breaker.agents.word_analyzer import analyze_words

            result = await analyze_words("Wie spät ist es?", swedish, german)

            assert result.word_analysis[0].word == "spät"
            assert "Wie spät ist es?" in mock_agent.run.call_args[0][0]


class TestAgentConstruction:
    def test_translator_agent_uses_configured_model(self, swedish, german):
        with patch("sentence_breaker.agents.translator.get_model") as mock_model, \
             patch("sentence_breaker.agents.translator.Agent") as mock_agent_cls:
            from sentence_breaker.agents.translator import get_translator_agent
            from sentence_breaker.config import get_settings

            get_translator_agent(swedish, german)

            mock_model.assert_called_once_with(get_settings().translation_model)
            kwargs = mock_agent_cls.call_args.kwargs
            assert kwargs["output_type"] is TranslationStep
            assert "Swedish" in kwargs["system_prompt"]
            assert kwargs["model_settings"]["temperature"] == get_settings().translation_temperature

    def test_word_analyzer_agent_uses_configured_model(self, swedish, german):
        with patch("sentence_breaker.agents.word_analyzer.get_model") as mock_model, \
             patch("sentence_breaker.agents.word_analyzer.Agent") as mock_agent_cls:
            from sentence_breaker.agents.word_analyzer import get_word_analyzer_agent
            from sentence_breaker.config import get_settings

            get_word_analyzer_agent(swedish, german)

            mock_model.assert_called_once_with(get_settings().analysis_model)
            assert mock_agent_cls.call_args.kwargs["output_type"] is WordAnalysisStep


# ── Pipeline ──────────────────────────────────────────────────────────────────


class TestBreakDownSentence:
    @pytest.mark.asyncio
    async def test_happy_path(self, german_input_step):
        """Scenario: punctuation-only entries are dropped from the final analysis."""
        analysis = WordAnalysisStep(word_analysis=[
            WordAnalysisItem(word="spät", analysis="..."),
            WordAnalysisItem(word="?", analysis=""),
        ])
        with patch("sentence_breaker.orchestration.translate_sentence", new_callable=AsyncMock) as mock_tr, \
             patch("sentence_breaker.orchestration.analyze_words", new_callable=AsyncMock) as mock_an:
            mock_tr.return_value = german_input_step
            mock_an.return_value = analysis

            from sentence_breaker.orchestration import break_down_sentence

            result = await break_down_sentence("sv", "de", "Wie spat ist es?")

            assert result == SentenceBreakdown(
                original_sentence="Wie spät ist es?",
                translation="What time is it?",
                word_analysis=[WordInfo(word="spät", explanation="...")],
            )
            mock_tr.assert_called_once_with("Wie spat ist es?", get_language("sv"), get_language("de"))

    @pytest.mark.asyncio
    async def test_analysis_uses_foreign_sentence(self, swedish, german):
        step = TranslationStep(
            input_language="Swedish",
            cleaned_sentence="Vad är klockan?",
            translation="Wie spät ist es?",
            translation_language="German",
        )
        with patch("sentence_breaker.orchestration.translate_sentence", new_callable=AsyncMock) as mock_tr, \
             patch("sentence_breaker.orchestration.analyze_words", new_callable=AsyncMock) as mock_an:
            mock_tr.return_value = step
            mock_an.return_value = WordAnalysisStep()

            from sentence_breaker.orchestration import break_down_sentence

            result = await break_down_sentence("sv", "de", "vad ar klockan")

            mock_an.assert_called_once_with("Wie spät ist es?", swedish, german)
            assert result.original_sentence == "Vad är klockan?"
            assert result.word_analysis == []

    @pytest.mark.asyncio
    async def test_translation_request_error(self):
        with patch("sentence_breaker.orchestration.translate_sentence", new_callable=AsyncMock) as mock_tr, \
             patch("sentence_breaker.orchestration.analyze_words", new_callable=AsyncMock) as mock_an:
            mock_tr.side_effect = httpx.ConnectError("connection refused")

            from sentence_breaker.orchestration import break_down_sentence

            with pytest.raises(TranslationError) as exc_info:
                await break_down_sentence("sv", "de", "Hej")

            assert exc_info.value.stage == "translation"
            assert exc_info.value.kind is ErrorKind.REQUEST
            assert "translation API error" in str(exc_info.value)
            mock_an.assert_not_called()

    @pytest.mark.asyncio
    async def test_http_status_error(self):
        with patch("sentence_breaker.orchestration.translate_sentence", new_callable=AsyncMock) as mock_tr:
            mock_tr.side_effect = ModelHTTPError(status_code=503, model_name="gemini-2.5-flash-lite")

            from sentence_breaker.orchestration import break_down_sentence

            with pytest.raises(TranslationError) as exc_info:
                await break_down_sentence("sv", "de", "Hej")

            assert exc_info.value.kind is ErrorKind.REQUEST

    @pytest.mark.asyncio
    async def test_empty_translation(self, german_input_step):
        empty = german_input_step.model_copy(update={"translation": "  "})
        with patch("sentence_breaker.orchestration.translate_sentence", new_callable=AsyncMock) as mock_tr, \
             patch("sentence_breaker.orchestration.analyze_words", new_callable=AsyncMock) as mock_an:
            mock_tr.return_value = empty

            from sentence_breaker.orchestration import break_down_sentence

            with pytest.raises(TranslationError) as exc_info:
                await break_down_sentence("sv", "de", "Hej")

            assert exc_info.value.kind is ErrorKind.EMPTY_RESPONSE
            assert str(exc_info.value) == "no response from translation API"
            mock_an.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_analysis_gives_no_partial_result(self, german_input_step):
        with patch("sentence_breaker.orchestration.translate_sentence", new_callable=AsyncMock) as mock_tr, \
             patch("sentence_breaker.orchestration.analyze_words", new_callable=AsyncMock) as mock_an:
            mock_tr.return_value = german_input_step
            mock_an.side_effect = UnexpectedModelBehavior("Exceeded maximum retries (1) for output validation")

            from sentence_breaker.orchestration import break_down_sentence

            with pytest.raises(TranslationError) as exc_info:
                await break_down_sentence("sv", "de", "Hej")

            assert exc_info.value.stage == "word analysis"
            assert exc_info.value.kind is ErrorKind.MALFORMED_OUTPUT
            assert str(exc_info.value).startswith("failed to parse word analysis output")

    @pytest.mark.asyncio
    async def test_unknown_language_code(self):
        from sentence_breaker.orchestration import break_down_sentence

        with pytest.raises(TranslationError, match="Unsupported language") as exc_info:
            await break_down_sentence("zz", "de", "Hej")
        assert exc_info.value.stage == "translation"
        assert exc_info.value.kind is ErrorKind.REQUEST
