from .translator import translate_sentence
from .word_analyzer import analyze_words

__all__ = [
    "translate_sentence",
    "analyze_words",
]
