from pydantic import BaseModel, Field


class WordInfo(BaseModel):
    """One word of the foreign-language sentence with its explanation."""

    word: str
    explanation: str = ""


class SentenceBreakdown(BaseModel):
    """Combined result of translation and word analysis."""

    original_sentence: str  # Cleaned input, in whichever language the user typed
    translation: str  # Always in the opposite language
    word_analysis: list[WordInfo] = Field(default_factory=list)
