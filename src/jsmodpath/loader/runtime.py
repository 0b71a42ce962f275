"""Runtime loader: one resolution state machine over two backing stores."""

from typing import Optional
import logging

from jsmodpath.embed.table import EmbeddedTable
from jsmodpath.errors import ModuleNotFound
from jsmodpath.resolution import (
    ProbeMode,
    SearchPath,
    SearchPathResolver,
    canonical_key,
    classify,
    probe,
    specifier_path,
)
from jsmodpath.resolution.specifier import ModuleSpecifier

from .engine import HostEngine
from .models import LoaderState, ModuleOrigin, Resolution, ResolvedModule

logger = logging.getLogger(__name__)


class RuntimeLoader:
    """Resolves every import: embedded table first, then the filesystem.

    Resolution order (first match wins):
    1. Embedded table, by canonical key
    2. Search path (bare specifiers only)
    3. Direct path probe (relative/absolute, and bare names that missed
       the search path when bare_direct_fallback is on)
    4. The engine's own default loader, given the untranslated specifier

    The loader holds no mutable state, so it can be re-entered from nested
    imports and shared between engines.
    """

    def __init__(
        self,
        search_path: Optional[SearchPath] = None,
        table: Optional[EmbeddedTable] = None,
        engine: Optional[HostEngine] = None,
        bare_direct_fallback: bool = True,
    ) -> None:
        self.search_path = search_path if search_path is not None else SearchPath()
        self.table = table if table is not None else EmbeddedTable.empty()
        self.engine = engine
        self.bare_direct_fallback = bare_direct_fallback
        self._search = SearchPathResolver(self.search_path)

    def install(self, engine: HostEngine) -> HostEngine:
        """Install this loader as the engine's module loader callback."""
        self.engine = engine
        engine.set_module_loader(self.load)
        return engine

    def load(self, specifier: str, referrer: Optional[str] = None) -> ResolvedModule:
        """Loader callback: resolve or raise ModuleNotFound."""
        resolution = self.resolve(specifier, referrer)
        if resolution.module is None:
            raise ModuleNotFound(specifier, referrer)
        return resolution.module

    def resolve(self, specifier: str, referrer: Optional[str] = None) -> Resolution:
        """Run the state machine for one import.

        Args:
            specifier: The specifier as written in the import
            referrer: Path of the importing module, or None for imports
                made relative to the working directory

        Returns:
            Resolution with the module (None if every strategy failed) and
            the states visited
        """
        resolution = Resolution(specifier=specifier)
        trace = resolution.trace

        trace.append(LoaderState.CLASSIFY)
        spec = classify(specifier)

        trace.append(LoaderState.EMBEDDED_LOOKUP)
        module = self._embedded_lookup(spec, referrer)

        if module is None and spec.is_bare:
            trace.append(LoaderState.SEARCH_PATH_PROBE)
            module = self._search_path_probe(spec)

        if module is None and (not spec.is_bare or self.bare_direct_fallback):
            trace.append(LoaderState.DIRECT_PROBE)
            module = self._direct_probe(spec, referrer)

        if module is None:
            trace.append(LoaderState.ENGINE_DEFAULT)
            module = self._engine_default(spec, referrer)

        if module is None:
            trace.append(LoaderState.FAILED)
            logger.debug(f"[module:resolve] {specifier} -> not found")
        else:
            trace.append(LoaderState.RESOLVED)
            logger.debug(
                f"[module:resolve] {specifier} -> {module.path} ({module.origin.value})"
            )
            resolution.module = module

        return resolution

    def _embedded_lookup(
        self, spec: ModuleSpecifier, referrer: Optional[str]
    ) -> Optional[ResolvedModule]:
        key = canonical_key(spec, referrer)
        entry = self.table.lookup(key)
        if entry is None:
            return None
        return ResolvedModule(
            specifier=spec.raw,
            canonical_key=entry.key,
            path=entry.path,
            origin=ModuleOrigin.EMBEDDED,
            content=entry.bytecode,
        )

    def _search_path_probe(self, spec: ModuleSpecifier) -> Optional[ResolvedModule]:
        path = self._search.resolve(spec.effective)
        if path is None:
            return None
        return self._filesystem_module(spec, path)

    def _direct_probe(
        self, spec: ModuleSpecifier, referrer: Optional[str]
    ) -> Optional[ResolvedModule]:
        # Bare names fall back to a path under the working directory
        base = specifier_path(spec, None if spec.is_bare else referrer)
        path = probe(base, ProbeMode.DIRECT)
        if path is None:
            return None
        return self._filesystem_module(spec, path)

    def _engine_default(
        self, spec: ModuleSpecifier, referrer: Optional[str]
    ) -> Optional[ResolvedModule]:
        if self.engine is None:
            return None
        try:
            return self.engine.load_default(spec.raw, referrer)
        except ModuleNotFound:
            return None

    @staticmethod
    def _filesystem_module(spec: ModuleSpecifier, path: str) -> ResolvedModule:
        return ResolvedModule(
            specifier=spec.raw,
            canonical_key=path,
            path=path,
            origin=ModuleOrigin.FILESYSTEM,
        )

    def __repr__(self) -> str:
        return (
            f"RuntimeLoader(search_path={self.search_path.roots!r}, "
            f"table={self.table!r})"
        )
