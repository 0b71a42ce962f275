"""IR module initialization."""

from .fact import ImportFact, ImportKind, STATIC_KINDS
from .store import ImportStore

__all__ = ["ImportFact", "ImportKind", "STATIC_KINDS", "ImportStore"]
