"""Module dependency graph operations."""

from typing import Dict, List, Optional, Set
import networkx as nx

from .models import ImportEdge, ModuleNode


class DependencyGraph:
    """Graph of modules and the static imports between them."""

    def __init__(self) -> None:
        self.nodes: Dict[str, ModuleNode] = {}
        self.edges: List[ImportEdge] = []
        self.graph = nx.DiGraph()
        self._key_to_node: Dict[str, str] = {}  # lookup key -> node_id

    def add_node(self, node: ModuleNode) -> None:
        """Add a node to the graph."""
        self.nodes[node.node_id] = node
        self.graph.add_node(node.node_id, **node.to_dict())

        for key in node.keys:
            self._key_to_node[key] = node.node_id

    def add_key(self, node_id: str, key: str) -> None:
        """Record another lookup key for an existing node."""
        node = self.nodes[node_id]
        if key not in node.keys:
            node.keys.append(key)
        self._key_to_node[key] = node_id

    def add_edge(self, edge: ImportEdge) -> None:
        """Add an edge to the graph."""
        self.edges.append(edge)
        self.graph.add_edge(
            edge.source_node_id,
            edge.target_node_id,
            **edge.to_dict()
        )

    def get_node_by_key(self, key: str) -> Optional[ModuleNode]:
        """Get node by lookup key."""
        node_id = self._key_to_node.get(key)
        return self.nodes.get(node_id) if node_id else None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def get_dependencies(self, node_id: str) -> List[ModuleNode]:
        """Get the modules a module imports directly."""
        if node_id not in self.graph:
            return []

        return [self.nodes[nid] for nid in self.graph.successors(node_id) if nid in self.nodes]

        return [self.nodes[nid] for nid in self.graph.predecessors(node_id) if nid in self.nodes]

    def get_transitive_dependencies(self, node_id: str) -> Set[str]:
        """Get all transitively imported modules."""
        if node_id not in self.graph:
            return set()

        return set(nx.descendants(self.graph, node_id))

    def find_cycles(self) -> List[List[str]]:
        """Get import cycles (each as a list of node IDs)."""
        return [list(cycle) for cycle in nx.simple_cycles(self.graph)]

    def get_embedded_nodes(self) -> List[ModuleNode]:
        return [node for node in self.nodes.values() if node.embedded]

    def get_stats(self) -> Dict[str, int]:
        """Get graph statistics."""
        return {
            "total_nodes": len(self.nodes),
            "total_edges": len(self.edges),
            "embedded_nodes": len(self.get_embedded_nodes()),
            "native_nodes": len(self.nodes) - len(self.get_embedded_nodes()),
            "cycles": len(self.find_cycles()),
        }
