"""Render a Session as prompt_toolkit formatted text."""

from prompt_toolkit.formatted_text import StyleAndTextTuples

from sentence_breaker.tui.session import Screen, Session

CURSOR = "█"

HELP_SOURCE = "↑/↓: Navigate | Enter: Select | Esc: Quit | Type to filter"
HELP_TARGET = "↑/↓: Navigate | Enter: Select | Esc: Back | Type to filter"
HELP_SENTENCE = "Enter: Translate | Esc: Back | Ctrl+C: Quit"
HELP_RESULT = "Press 'q' or Ctrl+C to translate another | Esc: Back"


class SessionRenderer:
    """Builds the screen for the Session's current state.

    Styles are referenced by class name only; the Theme maps them to colors.
    """

    def __init__(self):
        self._out: StyleAndTextTuples = []

    def render(self, session: Session) -> StyleAndTextTuples:
        self._out = []
        if session.screen is Screen.SELECT_SOURCE_LANGUAGE:
            self._selection(session, "Select A Language You Know Well:", HELP_SOURCE)
        elif session.screen is Screen.SELECT_TARGET_LANGUAGE:
            self._selection(
                session,
                "Select The Language You Want To Learn:",
                HELP_TARGET,
                header=f"From: {session.source_name()}",
            )
        elif session.screen is Screen.ENTER_SENTENCE:
            self._sentence(session)
        else:
            self._result(session)
        return self._out

    def _write(self, text: str, style: str = "") -> None:
        self._out.append((f"class:{style}" if style else "", text))

    def _title(self, text: str) -> None:
        self._write(f"\n  {text}\n\n", "title")

    def _selection(self, session: Session, title: str, help_line: str, header: str | None = None) -> None:
        self._title(title)
        if header:
            self._write(f"{header}\n\n")
        if session.filter_text:
            self._write(f"Filter: {session.filter_text}\n\n")
        for i, lang in enumerate(session.filtered_list):
            if i == session.highlight_index:
                self._write(f"> {lang.name} ({lang.code})", "selected")
            else:
                self._write(f"  {lang.name} ({lang.code})", "normal")
            self._write("\n")
        self._write("\n")
        self._write(help_line, "normal")

    def _pair(self, session: Session) -> None:
        self._write(f"{session.source_name()} ↔ {session.target_name()}\n\n")

    def _sentence(self, session: Session) -> None:
        self._title("Enter Sentence in Either Language:")
        self._pair(session)
        self._write(f"Sentence: {session.input_text}{CURSOR}\n\n")
        if session.in_flight:
            self._write("Translating...\n\n", "status")
        if session.error:
            self._write(f"Error: {session.error}\n\n", "error")
        self._write(HELP_SENTENCE, "normal")

    def _result(self, session: Session) -> None:
        self._title("Translation Results")
        self._pair(session)
        result = session.result
        if result is not None:
            self._write("Original: ", "label")
            self._write(result.original_sentence, "value")
            self._write("\n\n")
            self._write("Translation: ", "label")
            self._write(result.translation, "success")
            self._write("\n\n")
            if result.word_analysis:
                self._write("Word-by-Word Analysis:\n", "label")
                self._write("\n")
                for info in result.word_analysis:
                    self._write("  ")
                    self._write(info.word, "value")
                    if info.explanation:
                        self._write(" - ")
                        self._write(info.explanation, "normal")
                    self._write("\n")
        self._write("\n")
        self._write(HELP_RESULT, "normal")
