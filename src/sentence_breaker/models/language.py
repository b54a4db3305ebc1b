"""Language catalogs for source and target selection."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """A selectable language."""

    code: str  # ISO 639-1 code: "de", "sv"
    name: str  # "German", "Swedish"


# Languages the user knows well (source side)
KNOWN_LANGUAGES = [
    Language(code="de", name="German"),
    Language(code="sv", name="Swedish"),
    Language(code="en", name="English"),
    Language(code="es", name="Spanish"),
]

# Languages available for learning (target side)
LEARNABLE_LANGUAGES = [
    Language(code="sr", name="Serbian"),
    Language(code="es", name="Spanish"),
    Language(code="fr", name="French"),
    Language(code="it", name="Italian"),
    Language(code="pt", name="Portuguese"),
    Language(code="en", name="English"),
    Language(code="sv", name="Swedish"),
    Language(code="de", name="German"),
]

_BY_CODE: dict[str, Language] = {}
for _lang in KNOWN_LANGUAGES + LEARNABLE_LANGUAGES:
    _BY_CODE.setdefault(_lang.code, _lang)
del _lang


def name_of(code: str) -> str:
    """Display name for a code, or the code itself if it is not in any catalog."""
    lang = _BY_CODE.get(code)
    return lang.name if lang else code


def get_language(code: str) -> Language:
    """Get a Language by its ISO code. Raises ValueError if unsupported."""
    try:
        return _BY_CODE[code]
    except KeyError:
        raise ValueError(f"Unsupported language: {code}") from None


def learnable_targets(source_code: str) -> list[Language]:
    """All learnable languages except the one the user already selected as source."""
    return [lang for lang in LEARNABLE_LANGUAGES if lang.code != source_code]


def filter_languages(languages: list[Language], filter_text: str) -> list[Language]:
    """Case-insensitive substring match on name or code, catalog order kept."""
    if not filter_text:
        return list(languages)
    needle = filter_text.lower()
    return [
        lang
        for lang in languages
        if needle in lang.name.lower() or needle in lang.code.lower()
    ]
