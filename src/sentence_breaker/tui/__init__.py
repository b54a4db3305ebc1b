from .app import TranslatorApp
from .session import Screen, Session

__all__ = [
    "TranslatorApp",
    "Screen",
    "Session",
]
