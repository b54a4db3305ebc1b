"""Full-screen terminal app: key bindings feed one event queue drained by the Session."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from prompt_toolkit.application import Application
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.output import Output

from sentence_breaker.models import SentenceBreakdown
from sentence_breaker.orchestration import TranslationError, break_down_sentence
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
from sentence_breaker.tui.renderer import SessionRenderer
from sentence_breaker.tui.session import Session
from sentence_breaker.tui.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

Translate = Callable[[str, str, str], Awaitable[SentenceBreakdown]]


class TranslatorApp:
    """Owns the Session and is the only code that touches it.

    Keystrokes and translation results both arrive as events on `self.events`
    and are applied one at a time by `_pump`.
    """

    def __init__(
        self,
        session: Session | None = None,
        translate: Translate = break_down_sentence,
        theme: Theme = DEFAULT_THEME,
        input: Input | None = None,
        output: Output | None = None,
    ):
        self.session = session or Session()
        self.events: asyncio.Queue[Event] = asyncio.Queue()
        self.renderer = SessionRenderer()
        self._translate = translate
        self._tasks: set[asyncio.Task] = set()
        self.application = Application(
            layout=Layout(Window(FormattedTextControl(self._render), wrap_lines=True)),
            key_bindings=self._key_bindings(),
            style=theme.to_style(),
            full_screen=True,
            input=input,
            output=output,
        )

    @property
    def pending_tasks(self) -> set[asyncio.Task]:
        return set(self._tasks)

    def _render(self):
        return self.renderer.render(self.session)

    def _key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        def bind(keys: str, key: Key, eager: bool = False) -> None:
            @kb.add(keys, eager=eager)
            def _(event) -> None:
                self.post(KeyPress(key))

        bind("enter", Key.ENTER)
        bind("backspace", Key.BACKSPACE)
        bind("escape", Key.ESCAPE, eager=True)
        bind("up", Key.UP)
        bind("down", Key.DOWN)
        bind("c-c", Key.INTERRUPT)

        @kb.add(Keys.Any)
        def _(event) -> None:
            # Unbound special keys arrive here as escape sequences
            if event.data.isprintable():
                self.post(TextInput(event.data))

        @kb.add(Keys.BracketedPaste)
        def _(event) -> None:
            self.post(TextInput(event.data))

        return kb

    def post(self, event: Event) -> None:
        self.events.put_nowait(event)

    def handle_event(self, event: Event) -> None:
        """Apply one event to the Session and run the resulting command."""
        command = self.session.handle(event)
        if command is not None:
            self._execute(command)
        self.application.invalidate()

    def _execute(self, command: Command) -> None:
        if isinstance(command, Quit):
            if self.application.is_running:
                self.application.exit()
        elif isinstance(command, RequestTranslation):
            task = asyncio.create_task(self._run_translation(command))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run_translation(self, request: RequestTranslation) -> None:
        """Background task: always posts exactly one TranslationCompleted."""
        try:
            breakdown = await self._translate(
                request.source_code, request.target_code, request.sentence
            )
        except TranslationError as e:
            logger.debug(f"Request {request.request_id} failed: {e}")
            self.post(TranslationCompleted(request.request_id, error=str(e)))
        except Exception as e:
            logger.exception(f"Request {request.request_id} raised unexpectedly")
            self.post(
                TranslationCompleted(request.request_id, error=f"{type(e).__name__}: {e}")
            )
        else:
            self.post(TranslationCompleted(request.request_id, breakdown=breakdown))

    async def _pump(self) -> None:
        while True:
            event = await self.events.get()
            self.handle_event(event)

    async def run(self) -> None:
        pump = asyncio.create_task(self._pump())
        try:
            await self.application.run_async()
        finally:
            pump.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pump
