"""Graph module initialization."""

from .models import ModuleNode, ImportEdge, DiscoveredModule, DiscoveryResult, UnresolvedImport
from .graph import DependencyGraph
from .discovery import DependencyDiscovery

__all__ = [
    "ModuleNode", "ImportEdge", "DiscoveredModule", "DiscoveryResult",
    "UnresolvedImport", "DependencyGraph", "DependencyDiscovery"
]
