"""Import facts extracted from module sources."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ImportKind(Enum):
    """Kinds of module references found in a source."""

    STATIC_IMPORT = "STATIC_IMPORT"      # import x from "a"
    SIDE_EFFECT_IMPORT = "SIDE_EFFECT_IMPORT"  # import "a"
    EXPORT_FROM = "EXPORT_FROM"          # export { x } from "a"
    DYNAMIC_IMPORT = "DYNAMIC_IMPORT"    # import("a")


STATIC_KINDS = frozenset({
    ImportKind.STATIC_IMPORT,
    ImportKind.SIDE_EFFECT_IMPORT,
    ImportKind.EXPORT_FROM,
})


@dataclass(frozen=True)
class ImportFact:
    """A single module reference in a source file."""

    specifier: str
    kind: ImportKind = ImportKind.STATIC_IMPORT
    source_file: str = ""
    line_number: int = 0
    evidence: str = ""  # Code snippet that matched

    @property
    def is_static(self) -> bool:
        return self.kind in STATIC_KINDS

    def to_dict(self) -> Dict[str, Any]:
        """Convert fact to dictionary."""
        return {
            "specifier": self.specifier,
            "kind": self.kind.value,
            "source_file": self.source_file,
            "line_number": self.line_number,
            "evidence": self.evidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportFact":
        """Create fact from dictionary."""
        data = data.copy()
        data["kind"] = ImportKind(data["kind"])
        return cls(**data)
