"""Specifier classification and protocol-prefix translation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re


class SpecifierKind(Enum):
    """How a specifier is interpreted."""

    BARE = "bare"
    RELATIVE = "relative"
    ABSOLUTE = "absolute"


# C:\foo, C:/foo, and the bare drive "C:"
_DRIVE_PATTERN = re.compile(r'^[A-Za-z]:(?:[\\/]|$)')


@dataclass(frozen=True)
class ModuleSpecifier:
    """A module specifier as written in an import, plus its classification."""

    raw: str
    kind: SpecifierKind
    translated: Optional[str] = None

    @property
    def effective(self) -> str:
        """The string used for every resolution step after classification."""
        return self.translated if self.translated is not None else self.raw

    @property
    def is_bare(self) -> bool:
        return self.kind == SpecifierKind.BARE

    def __str__(self) -> str:
        return self.raw


def is_drive_path(text: str) -> bool:
    """Check if text starts with a Windows drive letter."""
    return bool(_DRIVE_PATTERN.match(text))


def translate_colons(text: str) -> str:
    """Rewrite a ``scheme:name`` style specifier to ``scheme/name``.

    Windows drive paths and strings without a colon are returned unchanged,
    so applying the translation twice is the same as applying it once.
    """
    if ":" not in text or is_drive_path(text):
        return text
    return text.replace(":", "/")


def kind_of(text: str) -> SpecifierKind:
    """Classify a specifier string by its leading characters."""
    if text in (".", "..") or text.startswith(("./", "../", ".\\", "..\\")):
        return SpecifierKind.RELATIVE
    if text.startswith(("/", "\\")) or is_drive_path(text):
        return SpecifierKind.ABSOLUTE
    return SpecifierKind.BARE


def classify(raw: str) -> ModuleSpecifier:
    """Classify a raw specifier, translating any protocol prefix first."""
    translated = translate_colons(raw)
    if translated == raw:
        return ModuleSpecifier(raw=raw, kind=kind_of(raw))
    return ModuleSpecifier(raw=raw, kind=kind_of(translated), translated=translated)
