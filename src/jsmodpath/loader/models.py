"""Resolved module data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import os

from jsmodpath.errors import ModuleLoadError


class ModuleOrigin(Enum):
    """Where a resolved module's content comes from."""

    EMBEDDED = "EMBEDDED"
    FILESYSTEM = "FILESYSTEM"
    ENGINE = "ENGINE"


class LoaderState(Enum):
    """States of the runtime resolution state machine."""

    CLASSIFY = "CLASSIFY"
    EMBEDDED_LOOKUP = "EMBEDDED_LOOKUP"
    SEARCH_PATH_PROBE = "SEARCH_PATH_PROBE"
    DIRECT_PROBE = "DIRECT_PROBE"
    ENGINE_DEFAULT = "ENGINE_DEFAULT"
    RESOLVED = "RESOLVED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ModuleMeta:
    """Identity a module sees for itself (import.meta equivalent)."""

    filename: str
    dirname: str

    @classmethod
    def for_path(cls, path: str) -> "ModuleMeta":
        return cls(filename=path, dirname=os.path.dirname(path))

    def to_dict(self) -> Dict[str, str]:
        return {"filename": self.filename, "dirname": self.dirname}


@dataclass(frozen=True)
class ResolvedModule:
    """Result of a successful resolution."""

    specifier: str
    canonical_key: str
    path: str
    origin: ModuleOrigin
    content: Optional[bytes] = field(default=None, repr=False)

    @property
    def meta(self) -> ModuleMeta:
        return ModuleMeta.for_path(self.path)

    def read(self) -> bytes:
        """Return the module bytes.

        Raises:
            ModuleLoadError: A filesystem module can no longer be read
        """
        if self.content is not None:
            return self.content
        try:
            with open(self.path, "rb") as f:
                return f.read()
        except OSError as e:
            raise ModuleLoadError(self.path, e) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "specifier": self.specifier,
            "canonical_key": self.canonical_key,
            "path": self.path,
            "origin": self.origin.value,
            "meta": self.meta.to_dict(),
        }


@dataclass
class Resolution:
    """A resolution attempt: the result plus the states visited."""

    specifier: str
    module: Optional[ResolvedModule] = None
    trace: List[LoaderState] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.module is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "specifier": self.specifier,
            "resolved": self.resolved,
            "module": self.module.to_dict() if self.module else None,
            "trace": [state.value for state in self.trace],
        }
