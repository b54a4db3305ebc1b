from dataclasses import asdict, dataclass

from prompt_toolkit.styles import Style


@dataclass(frozen=True)
class Theme:
    """Presentation styles, one prompt_toolkit style string per class name."""

    title: str = "#00ffff bold"
    selected: str = "#ffffff bg:#00afff bold"
    normal: str = "#ffffff"
    error: str = "#ff0000 bold"
    success: str = "#00ff00"
    label: str = "#5fffff bold"
    value: str = "#ffffff"
    status: str = "#808080 italic"

    def to_style(self) -> Style:
        return Style.from_dict(asdict(self))


DEFAULT_THEME = Theme()
