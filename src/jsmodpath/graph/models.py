"""Dependency graph data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jsmodpath.ir import ImportKind, ImportStore
from jsmodpath.loader.models import ModuleOrigin


@dataclass
class ModuleNode:
    """A module in the dependency graph, identified by its resolved path."""

    node_id: str
    origin: ModuleOrigin = ModuleOrigin.FILESYSTEM
    keys: List[str] = field(default_factory=list)
    embedded: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "node_id": self.node_id,
            "origin": self.origin.value,
            "keys": list(self.keys),
            "embedded": self.embedded,
            "metadata": self.metadata,
        }


@dataclass
class ImportEdge:
    """A static import/export reference between two modules."""

    source_node_id: str
    target_node_id: str
    specifier: str
    kind: ImportKind = ImportKind.STATIC_IMPORT
    line_number: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source_node_id": self.source_node_id,
            "target_node_id": self.target_node_id,
            "specifier": self.specifier,
            "kind": self.kind.value,
            "line_number": self.line_number,
        }


@dataclass
class DiscoveredModule:
    """A module selected for embedding.

    ``key`` is the lookup key of the first specifier that reached the module;
    ``aliases`` are the keys of other specifiers that resolved to the same file.
    """

    key: str
    path: str
    source: bytes = field(repr=False)
    aliases: List[str] = field(default_factory=list)
    is_entry: bool = False
    forced: bool = False

    @property
    def keys(self) -> List[str]:
        return [self.key] + self.aliases

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "path": self.path,
            "size_bytes": len(self.source),
            "aliases": list(self.aliases),
            "is_entry": self.is_entry,
            "forced": self.forced,
        }


@dataclass
class UnresolvedImport:
    """A static import that no strategy could resolve at build time."""

    specifier: str
    referrer: Optional[str]
    line_number: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "specifier": self.specifier,
            "referrer": self.referrer,
            "line_number": self.line_number,
        }


@dataclass
class DiscoveryResult:
    """Everything dependency discovery found."""

    graph: Any  # DependencyGraph
    modules: List[DiscoveredModule] = field(default_factory=list)
    entry_keys: List[str] = field(default_factory=list)
    forced_keys: List[str] = field(default_factory=list)
    unresolved: List[UnresolvedImport] = field(default_factory=list)
    imports: ImportStore = field(default_factory=ImportStore)

    def get_module(self, key: str) -> Optional[DiscoveredModule]:
        """Find a discovered module by primary key or alias."""
        for module in self.modules:
            if key == module.key or key in module.aliases:
                return module
        return None

    def embedded_keys(self) -> List[str]:
        return [module.key for module in self.modules]

    def get_stats(self) -> Dict[str, int]:
        return {
            "modules": len(self.modules),
            "aliases": sum(len(m.aliases) for m in self.modules),
            "unresolved": len(self.unresolved),
            "total_bytes": sum(len(m.source) for m in self.modules),
            **self.imports.get_stats(),
        }
