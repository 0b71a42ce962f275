"""Source kind detection for module files."""

from enum import Enum
from pathlib import Path
from typing import Optional
import re

from jsmodpath.extractors import strip_comments


class SourceKind(Enum):
    """How the engine should treat a source file."""

    MODULE = "module"
    SCRIPT = "script"
    JSON = "json"
    UNKNOWN = "unknown"


class TypeDetector:
    """Detects whether a source is an ES module, a classic script or JSON."""

    EXTENSION_MAP = {
        ".mjs": SourceKind.MODULE,
        ".cjs": SourceKind.SCRIPT,
        ".json": SourceKind.JSON,
    }

    # Extensions whose kind depends on the content
    SNIFFED_EXTENSIONS = (".js", "")

    SHEBANG_PATTERN = re.compile(r"^#!.*\b(?:qjs\w*|node|deno|bun)\b")

    # A top-level import/export declaration makes a source a module
    MODULE_PATTERNS = [
        re.compile(r"^[ \t]*import\s*[\w*{'\"]", re.MULTILINE),
        re.compile(r"^[ \t]*export\s+(?:default\b|const\b|let\b|var\b|function\b|class\b|async\b|\{|\*)", re.MULTILINE),
    ]

    def detect_from_extension(self, file_path: Path) -> Optional[SourceKind]:
        """Detect kind from extension; None means the content decides."""
        return self.EXTENSION_MAP.get(file_path.suffix.lower())

    def detect_from_content(self, content: str) -> SourceKind:
        """Detect module vs script from content."""
        code = strip_comments(content)
        for pattern in self.MODULE_PATTERNS:
            if pattern.search(code):
                return SourceKind.MODULE
        return SourceKind.SCRIPT

    def has_engine_shebang(self, file_path: Path) -> bool:
        """Check for a shebang naming a JavaScript runtime."""
        try:
            with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
                first_line = f.readline().strip()
        except OSError:
            return False
        return bool(self.SHEBANG_PATTERN.match(first_line))

    def detect_file_type(self, file_path: Path) -> SourceKind:
        """Detect source kind using extension, then shebang, then content."""
        file_path = Path(file_path)

        kind = self.detect_from_extension(file_path)
        if kind:
            return kind

        suffix = file_path.suffix.lower()
        if suffix not in self.SNIFFED_EXTENSIONS:
            return SourceKind.UNKNOWN

        if suffix == "" and not self.has_engine_shebang(file_path):
            return SourceKind.UNKNOWN

        try:
            with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
                content = f.read()
        except OSError:
            return SourceKind.UNKNOWN

        return self.detect_from_content(content)
