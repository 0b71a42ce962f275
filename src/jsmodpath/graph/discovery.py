"""Build-time dependency discovery."""

from collections import deque
from pathlib import Path
from typing import Deque, Dict, Iterable, Optional
import logging

from jsmodpath.crawler import TypeDetector
from jsmodpath.embed.table import EmbeddedTable
from jsmodpath.errors import BuildTimeUnresolvable, ModuleLoadError, ResolutionError
from jsmodpath.extractors import ImportExtractor
from jsmodpath.loader import HostEngine, ResolvedModule, RuntimeLoader
from jsmodpath.resolution import SearchPath, canonical_key, classify

from .graph import DependencyGraph
from .models import DiscoveredModule, DiscoveryResult, ImportEdge, ModuleNode, UnresolvedImport

logger = logging.getLogger(__name__)


class DependencyDiscovery:
    """Walks static imports from entry and forced roots to pick modules to embed.

    Edges are resolved with the same RuntimeLoader used at run time, bound to
    the build-time search path and an empty table, so the keys recorded here
    are the keys the runtime computes.
    """

    def __init__(
        self,
        search_path: Optional[SearchPath] = None,
        engine: Optional[HostEngine] = None,
        bare_direct_fallback: bool = True,
    ) -> None:
        self.engine = engine or HostEngine()
        self.loader = RuntimeLoader(
            search_path=search_path,
            table=EmbeddedTable.empty(),
            engine=self.engine,
            bare_direct_fallback=bare_direct_fallback,
        )
        self.extractor = ImportExtractor()
        self.type_detector = TypeDetector()

    def discover(
        self,
        entry_roots: Iterable[str],
        forced_roots: Iterable[str] = (),
    ) -> DiscoveryResult:
        """Discover the modules reachable from the roots.

        Args:
            entry_roots: Specifiers of the program's entry modules
            forced_roots: Specifiers to embed even though no static import
                reaches them

        Returns:
            DiscoveryResult with modules in breadth-first order

        Raises:
            BuildTimeUnresolvable: A root cannot be resolved or read
        """
        result = DiscoveryResult(graph=DependencyGraph())
        by_path: Dict[str, DiscoveredModule] = {}
        queue: Deque[DiscoveredModule] = deque()

        for specifier in entry_roots:
            key = self._add_root(specifier, result, by_path, queue, forced=False)
            if key and key not in result.entry_keys:
                result.entry_keys.append(key)

        for specifier in forced_roots:
            key = self._add_root(specifier, result, by_path, queue, forced=True)
            if key and key not in result.forced_keys:
                result.forced_keys.append(key)

        while queue:
            module = queue.popleft()
            self._scan(module, result, by_path, queue)

        logger.info(
            f"[module:discover] {len(result.modules)} modules, "
            f"{len(result.unresolved)} unresolved imports"
        )
        return result

    def _add_root(
        self,
        specifier: str,
        result: DiscoveryResult,
        by_path: Dict[str, DiscoveredModule],
        queue: Deque[DiscoveredModule],
        forced: bool,
    ) -> Optional[str]:
        key = canonical_key(classify(specifier))
        try:
            resolved = self.loader.load(specifier)
        except ResolutionError as e:
            raise BuildTimeUnresolvable(specifier, str(e)) from e

        try:
            module = self._add_module(resolved, key, result, by_path, queue)
        except ModuleLoadError as e:
            raise BuildTimeUnresolvable(specifier, str(e)) from e

        if module is None:
            return None
        if forced:
            module.forced = True
        else:
            module.is_entry = True
        return key

    def _scan(
        self,
        module: DiscoveredModule,
        result: DiscoveryResult,
        by_path: Dict[str, DiscoveredModule],
        queue: Deque[DiscoveredModule],
    ) -> None:
        source = module.source.decode("utf-8", errors="replace")
        facts = self.extractor.extract_from_content(source, module.path)
        result.imports.add_facts(facts)

        for fact in facts:
            if not fact.is_static:
                logger.debug(
                    f"[module:discover] dynamic import of '{fact.specifier}' in "
                    f"{module.path}:{fact.line_number} is not followed"
                )
                continue

            key = canonical_key(classify(fact.specifier), module.path)
            try:
                target = self.loader.resolve(fact.specifier, module.path).module
            except ResolutionError as e:
                logger.debug(f"[module:discover] {e}")
                target = None
            if target is None:
                logger.warning(
                    f"Cannot resolve '{fact.specifier}' imported from "
                    f"{module.path}:{fact.line_number}"
                )
                result.unresolved.append(
                    UnresolvedImport(fact.specifier, module.path, fact.line_number)
                )
                continue

            try:
                self._add_module(target, key, result, by_path, queue)
            except ModuleLoadError as e:
                logger.warning(str(e))
                result.unresolved.append(
                    UnresolvedImport(fact.specifier, module.path, fact.line_number)
                )
                continue

            result.graph.add_edge(ImportEdge(
                source_node_id=module.path,
                target_node_id=target.path,
                specifier=fact.specifier,
                kind=fact.kind,
                line_number=fact.line_number,
            ))

    def _add_module(
        self,
        resolved: ResolvedModule,
        key: str,
        result: DiscoveryResult,
        by_path: Dict[str, DiscoveredModule],
        queue: Deque[DiscoveredModule],
    ) -> Optional[DiscoveredModule]:
        """Record a resolved module, enqueueing it on first visit.

        Returns None for engine-native modules, which are never embedded.
        """
        graph = result.graph

        if self.engine.is_native(resolved):
            if resolved.path not in graph:
                graph.add_node(ModuleNode(
                    node_id=resolved.path,
                    origin=resolved.origin,
                    keys=[key],
                    embedded=False,
                ))
            return None

        existing = by_path.get(resolved.path)
        if existing is not None:
            self._add_alias(existing, key, graph)
            return existing

        module = DiscoveredModule(key=key, path=resolved.path, source=resolved.read())
        by_path[resolved.path] = module
        result.modules.append(module)
        queue.append(module)

        graph.add_node(ModuleNode(
            node_id=resolved.path,
            origin=resolved.origin,
            keys=[key],
            embedded=True,
            metadata={
                "size_bytes": len(module.source),
                "source_kind": self.type_detector.detect_file_type(Path(resolved.path)).value,
            },
        ))
        # the resolved path is a lookup key as well
        self._add_alias(module, resolved.path, graph)
        logger.debug(f"[module:discover] {key} -> {resolved.path}")
        return module

    @staticmethod
    def _add_alias(module: DiscoveredModule, key: str, graph: DependencyGraph) -> None:
        if key not in module.keys and graph.get_node_by_key(key) is None:
            module.aliases.append(key)
            graph.add_key(module.path, key)
