"""Events consumed by the Session and commands it hands back to the app."""

from dataclasses import dataclass
from enum import Enum

from sentence_breaker.models import SentenceBreakdown


class Key(str, Enum):
    ENTER = "enter"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    INTERRUPT = "c-c"


@dataclass(frozen=True)
class KeyPress:
    key: Key


@dataclass(frozen=True)
class TextInput:
    """Printable text: a single keystroke or a bracketed paste."""

    text: str


@dataclass(frozen=True)
class TranslationCompleted:
    """Delivered exactly once per dispatched request."""

    request_id: int
    breakdown: SentenceBreakdown | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.breakdown is not None


Event = KeyPress | TextInput | TranslationCompleted


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class RequestTranslation:
    request_id: int
    source_code: str
    target_code: str
    sentence: str


Command = Quit | RequestTranslation
