"""Interactive session state: language selection, sentence entry and results.

The Session is a plain state machine. It consumes one event at a time, mutates
itself in place and returns at most one command for the app to execute. It
never blocks and never performs I/O, so every transition is testable without
a terminal.
"""

import logging
from enum import Enum

from sentence_breaker.models import (
    KNOWN_LANGUAGES,
    Language,
    SentenceBreakdown,
    filter_languages,
    learnable_targets,
    name_of,
)
from sentence_breaker.tui.events import (
    Command,
    Event,
    Key,
    KeyPress,
    Quit,
    RequestTranslation,
    TextInput,
    TranslationCompleted,
)

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    SELECT_SOURCE_LANGUAGE = "select_source_language"
    SELECT_TARGET_LANGUAGE = "select_target_language"
    ENTER_SENTENCE = "enter_sentence"
    SHOW_RESULT = "show_result"


SELECTION_SCREENS = (Screen.SELECT_SOURCE_LANGUAGE, Screen.SELECT_TARGET_LANGUAGE)


class Session:
    def __init__(self):
        self.screen = Screen.SELECT_SOURCE_LANGUAGE
        self.source_language: str | None = None
        self.target_language: str | None = None
        self.input_text = ""
        self.active_list: list[Language] = []
        self.filter_text = ""
        self.filtered_list: list[Language] = []
        self.highlight_index = 0
        self.result: SentenceBreakdown | None = None
        self.error: str | None = None
        self.pending_request: int | None = None
        self._next_request_id = 1
        self._show_list(KNOWN_LANGUAGES)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def in_flight(self) -> bool:
        return self.pending_request is not None

    @property
    def highlighted(self) -> Language | None:
        if not self.filtered_list:
            return None
        return self.filtered_list[self.highlight_index]

    def source_name(self) -> str:
        return name_of(self.source_language or "")

    def target_name(self) -> str:
        return name_of(self.target_language or "")

    # ── Dispatch ─────────────────────────────────────────────────────────

    def handle(self, event: Event) -> Command | None:
        """Apply one event and return the command the app should run, if any."""
        if isinstance(event, TranslationCompleted):
            self._complete(event)
            return None
        if isinstance(event, KeyPress) and event.key is Key.INTERRUPT:
            if self.screen is Screen.SHOW_RESULT:
                self._leave_result()
                return None
            return Quit()

        if self.screen in SELECTION_SCREENS:
            return self._handle_selection(event)
        if self.screen is Screen.ENTER_SENTENCE:
            return self._handle_sentence(event)
        return self._handle_result(event)

    # ── Selection screens ────────────────────────────────────────────────

    def _handle_selection(self, event: Event) -> Command | None:
        if isinstance(event, TextInput):
            text = _printable(event.text)
            if text:
                self.filter_text += text
                self._refilter()
                self.highlight_index = 0
            return None

        key = event.key
        if key is Key.BACKSPACE:
            if self.filter_text:
                self.filter_text = self.filter_text[:-1]
                self._refilter()
                self._clamp_highlight()
        elif key is Key.UP:
            if self.highlight_index > 0:
                self.highlight_index -= 1
        elif key is Key.DOWN:
            if self.highlight_index < len(self.filtered_list) - 1:
                self.highlight_index += 1
        elif key is Key.ENTER:
            self._select_highlighted()
        elif key is Key.ESCAPE:
            if self.screen is Screen.SELECT_SOURCE_LANGUAGE:
                return Quit()
            self.target_language = None
            self.screen = Screen.SELECT_SOURCE_LANGUAGE
            self._show_list(KNOWN_LANGUAGES)
        return None

    def _select_highlighted(self) -> None:
        lang = self.highlighted
        if lang is None:
            return
        if self.screen is Screen.SELECT_SOURCE_LANGUAGE:
            self.source_language = lang.code
            self.screen = Screen.SELECT_TARGET_LANGUAGE
            self._show_list(learnable_targets(lang.code))
        else:
            self.target_language = lang.code
            self.screen = Screen.ENTER_SENTENCE
            self._show_list([])

    def _show_list(self, languages: list[Language]) -> None:
        self.active_list = list(languages)
        self.filter_text = ""
        self.filtered_list = list(languages)
        self.highlight_index = 0

    def _refilter(self) -> None:
        self.filtered_list = filter_languages(self.active_list, self.filter_text)

    def _clamp_highlight(self) -> None:
        last = max(0, len(self.filtered_list) - 1)
        self.highlight_index = min(max(self.highlight_index, 0), last)

    # ── Sentence entry ───────────────────────────────────────────────────

    def _handle_sentence(self, event: Event) -> Command | None:
        if isinstance(event, TextInput):
            self.input_text += _printable(event.text)
            return None

        key = event.key
        if key is Key.BACKSPACE:
            self.input_text = self.input_text[:-1]
        elif key is Key.ENTER:
            return self._dispatch()
        elif key is Key.ESCAPE:
            if self.pending_request is not None:
                logger.debug(f"Abandoning request {self.pending_request}")
            self.pending_request = None
            self.input_text = ""
            self.error = None
            self.screen = Screen.SELECT_TARGET_LANGUAGE
            self._show_list(learnable_targets(self.source_language or ""))
        return None

    def _dispatch(self) -> RequestTranslation | None:
        if self.in_flight or not self.input_text.strip():
            return None
        request_id = self._next_request_id
        self._next_request_id += 1
        self.pending_request = request_id
        self.error = None
        logger.debug(f"Dispatching request {request_id}")
        return RequestTranslation(
            request_id=request_id,
            source_code=self.source_language or "",
            target_code=self.target_language or "",
            sentence=self.input_text,
        )

    def _complete(self, event: TranslationCompleted) -> None:
        if event.request_id != self.pending_request:
            # Abandoned by backward navigation, or already delivered
            logger.debug(f"Discarding stale result for request {event.request_id}")
            return
        self.pending_request = None
        if event.succeeded:
            self.result = event.breakdown
            self.error = None
            self.input_text = ""
            self.screen = Screen.SHOW_RESULT
        else:
            self.result = None
            self.error = event.error or "translation failed"

    # ── Result screen ────────────────────────────────────────────────────

    def _handle_result(self, event: Event) -> Command | None:
        if isinstance(event, TextInput):
            if event.text == "q":
                self._leave_result()
        elif event.key is Key.ESCAPE:
            self._leave_result()
        return None

    def _leave_result(self) -> None:
        self.result = None
        self.input_text = ""
        self.screen = Screen.ENTER_SENTENCE


def _printable(text: str) -> str:
    """Keep printable characters; line breaks from a paste become spaces."""
    text = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return "".join(ch for ch in text if ch.isprintable())
