from .breakdown import SentenceBreakdown, WordInfo
from .language import (
    KNOWN_LANGUAGES,
    LEARNABLE_LANGUAGES,
    Language,
    filter_languages,
    get_language,
    learnable_targets,
    name_of,
)

__all__ = [
    "SentenceBreakdown",
    "WordInfo",
    "Language",
    "KNOWN_LANGUAGES",
    "LEARNABLE_LANGUAGES",
    "filter_languages",
    "get_language",
    "learnable_targets",
    "name_of",
]
