from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Theme(str, Enum):
    light = "light"
    dark = "dark"


class Language(str, Enum):
    es = "es"
    en = "en"


@dataclass(frozen=True)
class WidgetOptions:
    """Embedding hints passed through from the host page. They never affect scheduling."""

    theme: Theme = Theme.light
    lang: Language = Language.es
    api_key: str | None = None
