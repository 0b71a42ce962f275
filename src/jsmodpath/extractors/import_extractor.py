"""Static import/export scanner for ES modules."""

from typing import List, Tuple
import re

from .base import BaseExtractor
from jsmodpath.ir import ImportFact, ImportKind


def strip_comments(source: str) -> str:
    """Blank out comments and template literal bodies.

    Quoted strings are kept as written because they carry the specifiers.
    Removed text is replaced by spaces, and newlines are kept, so offsets and
    line numbers in the result match the original source.
    """
    out = []
    i = 0
    n = len(source)

    def blank(text: str) -> str:
        return "".join(ch if ch == "\n" else " " for ch in text)

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""

        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            end = n if end == -1 else end
            out.append(blank(source[i:end]))
            i = end
        elif ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append(blank(source[i:end]))
            i = end
        elif ch in ("'", '"'):
            end = _string_end(source, i, ch)
            out.append(source[i:end])
            i = end
        elif ch == "`":
            end = _string_end(source, i, "`")
            if end - i >= 2 and source[end - 1] == "`":
                out.append("`" + blank(source[i + 1:end - 1]) + "`")
            else:
                out.append("`" + blank(source[i + 1:end]))
            i = end
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def _string_end(source: str, start: int, quote: str) -> int:
    """Index just past the closing quote of the literal starting at start."""
    i = start + 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            # Unterminated single-line string; stop at the line end
            return i
        i += 1
    return n


class ImportExtractor(BaseExtractor):
    """Finds top-level import/export declarations and literal dynamic imports.

    Only literal, top-level declarations count as static edges. Dynamic
    ``import("x")`` calls are reported separately so callers can warn about
    modules that static discovery cannot follow.
    """

    # Statement start: beginning of a line, or just after ; or }
    _START = r'(?:^|(?<=[;}]))[ \t]*'
    _SPEC = r'(?P<q>[\'"])(?P<spec>[^\'"\n]+)(?P=q)'

    FROM_PATTERN = re.compile(
        _START
        + r'(?P<keyword>import|export)\b'
        + r'(?P<clause>(?:(?!\b(?:import|export)\b)[^;\'"`])*?)'
        + r'\bfrom\s*' + _SPEC,
        re.MULTILINE,
    )
    SIDE_EFFECT_PATTERN = re.compile(
        _START + r'import\s*' + _SPEC,
        re.MULTILINE,
    )
    DYNAMIC_PATTERN = re.compile(
        r'(?<![\w$.])import\s*\(\s*' + r'(?P<q>[\'"])(?P<spec>[^\'"\s]+)(?P=q)' + r'\s*[,)]',
    )

    def extract_from_content(self, content: str, source_file: str) -> List[ImportFact]:
        code = strip_comments(content)
        found: List[Tuple[int, ImportFact]] = []

        for match in self.FROM_PATTERN.finditer(code):
            clause = match.group("clause").strip()
            if match.group("keyword") == "export":
                # export {a} from "x", export * from "x", export * as ns from "x"
                if not clause.startswith(("{", "*")):
                    continue
                kind = ImportKind.EXPORT_FROM
            else:
                if not clause:
                    continue
                kind = ImportKind.STATIC_IMPORT
            found.append(self._fact(code, match, kind, source_file))

        for match in self.SIDE_EFFECT_PATTERN.finditer(code):
            found.append(self._fact(code, match, ImportKind.SIDE_EFFECT_IMPORT, source_file))

        for match in self.DYNAMIC_PATTERN.finditer(code):
            found.append(self._fact(code, match, ImportKind.DYNAMIC_IMPORT, source_file))

        found.sort(key=lambda item: item[0])
        return [fact for _, fact in found]

    def get_static_specifiers(self, content: str, source_file: str = "") -> List[str]:
        """Static specifiers in declaration order, without duplicates."""
        seen = set()
        specifiers = []
        for fact in self.extract_from_content(content, source_file):
            if fact.is_static and fact.specifier not in seen:
                seen.add(fact.specifier)
                specifiers.append(fact.specifier)
        return specifiers

    @staticmethod
    def _fact(
        code: str,
        match: "re.Match[str]",
        kind: ImportKind,
        source_file: str,
    ) -> Tuple[int, ImportFact]:
        start = match.start()
        # Skip the leading whitespace the statement-start anchor consumed
        while start < len(code) and code[start] in " \t":
            start += 1
        line_number = code.count("\n", 0, start) + 1
        evidence = " ".join(match.group(0).split())
        return start, ImportFact(
            specifier=match.group("spec"),
            kind=kind,
            source_file=source_file,
            line_number=line_number,
            evidence=evidence[:200],
        )
