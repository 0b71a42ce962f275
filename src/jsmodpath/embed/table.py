"""Embedded module table and its length-prefixed binary format."""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
import io
import struct

from jsmodpath.errors import EmbeddedTableError

TABLE_MAGIC = b"JSMPTBL1"
TRAILER_MAGIC = b"JSMPEND\x00"
FORMAT_VERSION = 1

_U32 = struct.Struct("<I")
_TRAILER = struct.Struct("<Q8s")


@dataclass(frozen=True)
class EmbeddedModuleEntry:
    """A module stored in the table."""

    key: str
    path: str
    bytecode: bytes = field(repr=False)

    @property
    def length(self) -> int:
        return len(self.bytecode)


class EmbeddedTable:
    """Read-only mapping from canonical key to embedded module.

    Lookups are exact key matches against the entries and the alias map;
    nothing is probed at run time.
    """

    def __init__(
        self,
        entries: Iterable[EmbeddedModuleEntry] = (),
        aliases: Optional[Mapping[str, str]] = None,
        entry_points: Iterable[str] = (),
    ) -> None:
        by_key: Dict[str, EmbeddedModuleEntry] = {}
        for entry in entries:
            if entry.key in by_key:
                raise EmbeddedTableError(f"Duplicate embedded key: {entry.key}")
            by_key[entry.key] = entry

        alias_map = dict(aliases or {})
        for alias, target in alias_map.items():
            if target not in by_key:
                raise EmbeddedTableError(f"Alias {alias} points at unknown key {target}")
            if alias in by_key:
                raise EmbeddedTableError(f"Alias {alias} shadows an embedded key")

        points = tuple(entry_points)
        for key in points:
            if key not in by_key and key not in alias_map:
                raise EmbeddedTableError(f"Entry point {key} is not embedded")

        self._entries = MappingProxyType(by_key)
        self._aliases = MappingProxyType(alias_map)
        self._entry_points = points

    @classmethod
    def empty(cls) -> "EmbeddedTable":
        return cls()

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def entry_points(self) -> Tuple[str, ...]:
        return self._entry_points

    def lookup(self, key: str) -> Optional[EmbeddedModuleEntry]:
        """Find an entry by exact key or alias."""
        entry = self._entries.get(key)
        if entry is None and key in self._aliases:
            entry = self._entries[self._aliases[key]]
        return entry

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def entries(self) -> List[EmbeddedModuleEntry]:
        return list(self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries or key in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"EmbeddedTable({len(self._entries)} modules, {len(self._aliases)} aliases)"

    def get_stats(self) -> Dict[str, int]:
        """Get table statistics."""
        return {
            "modules": len(self._entries),
            "aliases": len(self._aliases),
            "entry_points": len(self._entry_points),
            "total_bytes": sum(entry.length for entry in self._entries.values()),
        }

    # Serialization

    def to_bytes(self) -> bytes:
        """Serialize the table payload (without trailer)."""
        out = io.BytesIO()
        out.write(TABLE_MAGIC)
        out.write(_U32.pack(FORMAT_VERSION))

        out.write(_U32.pack(len(self._entries)))
        for entry in self._entries.values():
            _write_field(out, entry.key.encode("utf-8"))
            _write_field(out, entry.path.encode("utf-8"))
            _write_field(out, entry.bytecode)

        out.write(_U32.pack(len(self._aliases)))
        for alias, target in self._aliases.items():
            _write_field(out, alias.encode("utf-8"))
            _write_field(out, target.encode("utf-8"))

        out.write(_U32.pack(len(self._entry_points)))
        for key in self._entry_points:
            _write_field(out, key.encode("utf-8"))

        return out.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "EmbeddedTable":
        """Parse a table payload produced by to_bytes()."""
        reader = _Reader(data)
        if reader.take(len(TABLE_MAGIC)) != TABLE_MAGIC:
            raise EmbeddedTableError("Not an embedded module table (bad magic)")

        version = reader.u32()
        if version != FORMAT_VERSION:
            raise EmbeddedTableError(f"Unsupported table format version {version}")

        entries = []
        for _ in range(reader.u32()):
            key = reader.text()
            path = reader.text()
            bytecode = reader.field()
            entries.append(EmbeddedModuleEntry(key=key, path=path, bytecode=bytecode))

        aliases = {}
        for _ in range(reader.u32()):
            alias = reader.text()
            aliases[alias] = reader.text()

        entry_points = [reader.text() for _ in range(reader.u32())]

        if reader.remaining:
            raise EmbeddedTableError(f"{reader.remaining} trailing bytes after table")

        return cls(entries, aliases, entry_points)

    @staticmethod
    def trailer(payload_offset: int) -> bytes:
        """Build the trailer that locates a payload appended to a file."""
        return _TRAILER.pack(payload_offset, TRAILER_MAGIC)

    @classmethod
    def from_executable(cls, path: Union[str, Path]) -> "EmbeddedTable":
        """Read the table appended to an executable (or a bare table file)."""
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise EmbeddedTableError(f"Cannot read {path}: {e}") from e

        if len(data) < _TRAILER.size:
            raise EmbeddedTableError(f"{path} has no embedded module table")

        offset, magic = _TRAILER.unpack_from(data, len(data) - _TRAILER.size)
        if magic != TRAILER_MAGIC:
            raise EmbeddedTableError(f"{path} has no embedded module table")
        if offset > len(data) - _TRAILER.size:
            raise EmbeddedTableError(f"{path} has a corrupt table trailer")

        return cls.from_bytes(data[offset:len(data) - _TRAILER.size])


def _write_field(out: io.BytesIO, value: bytes) -> None:
    out.write(_U32.pack(len(value)))
    out.write(value)


class _Reader:
    """Bounds-checked cursor over a table payload."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise EmbeddedTableError("Embedded module table is truncated")
        chunk = self.data[self.pos:self.pos + size]
        self.pos += size
        return chunk

    def u32(self) -> int:
        return _U32.unpack(self.take(_U32.size))[0]

    def field(self) -> bytes:
        return self.take(self.u32())

    def text(self) -> str:
        try:
            return self.field().decode("utf-8")
        except UnicodeDecodeError as e:
            raise EmbeddedTableError(f"Invalid key encoding in table: {e}") from e
