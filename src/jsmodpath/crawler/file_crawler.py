"""Walks a module directory to collect everything --embed-dir should embed."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence
import fnmatch
import os

from .type_detector import SourceKind, TypeDetector

LOADABLE_KINDS = (SourceKind.MODULE, SourceKind.SCRIPT)


@dataclass
class ModuleFile:
    """A loadable source found under the crawl root."""

    path: Path
    source_kind: SourceKind
    relative_path: Path
    size_bytes: int

    def as_specifier(self, root_specifier: str) -> str:
        """Specifier naming this file relative to the crawled root."""
        return f"{root_specifier.rstrip('/')}/{self.relative_path.as_posix()}"


class FileCrawler:
    """Finds ES modules and scripts below a directory, in path order.

    Ignore patterns are globs matched against the POSIX path relative to
    the root; a pattern without a leading ``**/`` matches at any depth.
    Ignored directories are pruned rather than walked.
    """

    DEFAULT_IGNORE_PATTERNS = (
        "**/.git/**",
        "**/node_modules/**",
        "**/.idea/**",
        "**/.vscode/**",
    )

    def __init__(
        self,
        root_path: Path,
        ignore_patterns: Optional[Sequence[str]] = None,
        ignore_extensions: Optional[Sequence[str]] = None,
    ) -> None:
        self.root_path = Path(root_path)
        patterns = self.DEFAULT_IGNORE_PATTERNS if ignore_patterns is None else ignore_patterns
        self._patterns = [p if p.startswith("**/") else f"**/{p}" for p in patterns]
        self._skip_suffixes = frozenset(ignore_extensions or ())
        self.type_detector = TypeDetector()

    def _ignored(self, relative: str) -> bool:
        # "**/x" also has to match "x" at the top of the root
        return any(
            fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(relative, pattern[3:])
            for pattern in self._patterns
        )

    def _ignored_dir(self, relative: str) -> bool:
        return self._ignored(f"{relative}/")

    def crawl(self) -> Iterator[ModuleFile]:
        """Yield loadable module files sorted by relative path.

        Raises:
            ValueError: The root is missing or not a directory
        """
        if not self.root_path.exists():
            raise ValueError(f"Module directory does not exist: {self.root_path}")
        if not self.root_path.is_dir():
            raise ValueError(f"Module directory is not a directory: {self.root_path}")

        found: List[ModuleFile] = []
        for dirpath, dirnames, filenames in os.walk(self.root_path):
            base = Path(dirpath)
            rel_dir = base.relative_to(self.root_path)
            dirnames[:] = [
                d for d in dirnames if not self._ignored_dir((rel_dir / d).as_posix())
            ]

            for name in filenames:
                path = base / name
                relative = rel_dir / name
                if path.suffix in self._skip_suffixes or self._ignored(relative.as_posix()):
                    continue
                if not path.is_file():
                    continue

                kind = self.type_detector.detect_file_type(path)
                if kind in LOADABLE_KINDS:
                    found.append(ModuleFile(path, kind, relative, path.stat().st_size))

        yield from sorted(found, key=lambda f: f.relative_path.as_posix())

    def specifiers(self, root_specifier: str) -> List[str]:
        """Relative specifiers for every crawled module."""
        return [module.as_specifier(root_specifier) for module in self.crawl()]
