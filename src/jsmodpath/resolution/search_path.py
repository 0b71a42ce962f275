"""Search path parsing and bare-specifier resolution."""

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple
import logging
import os

from .probe import ProbeMode, join_candidate, probe

logger = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "JSMODPATH"


@dataclass(frozen=True)
class SearchPath:
    """Ordered, immutable list of search roots. First match wins."""

    roots: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, value: Optional[str], delimiter: str = os.pathsep) -> "SearchPath":
        """Parse a delimited search path value.

        Empty entries are dropped; an empty or missing value gives an
        empty search path.
        """
        if not value:
            return cls()
        return cls(tuple(part for part in value.split(delimiter) if part))

    @classmethod
    def from_environ(
        cls,
        env_var: str = DEFAULT_ENV_VAR,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SearchPath":
        """Snapshot the search path from the environment."""
        env = os.environ if environ is None else environ
        return cls.parse(env.get(env_var))

    @classmethod
    def of(cls, *roots: str) -> "SearchPath":
        return cls(tuple(str(root) for root in roots))

    def __iter__(self) -> Iterator[str]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)

    def __bool__(self) -> bool:
        return bool(self.roots)

    def __str__(self) -> str:
        return os.pathsep.join(self.roots)


def strip_trailing_separators(root: str) -> str:
    """Remove trailing slashes from a search root, keeping a bare root."""
    stripped = root.rstrip("/\\")
    return stripped or root[:1]


class SearchPathResolver:
    """Resolves bare specifiers against an ordered list of search roots."""

    def __init__(self, search_path: SearchPath) -> None:
        self.search_path = search_path

    def resolve(self, name: str) -> Optional[str]:
        """Resolve a bare name against each root in order.

        Returns:
            Path of the first match, or None if no root has the module
        """
        for root in self.search_path:
            base = join_candidate(strip_trailing_separators(root), name)
            path = probe(base, ProbeMode.SEARCH)
            if path:
                logger.debug(f"[module:search] {name} -> {path} (root {root})")
                return path

        return None

    def __repr__(self) -> str:
        return f"SearchPathResolver({self.search_path.roots!r})"
