"""Translate a sentence and break it down word by word, in the terminal."""

__version__ = "0.1.0"
