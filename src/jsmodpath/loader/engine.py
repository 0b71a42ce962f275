"""Host engine interface.

The engine owns parsing and evaluation. Resolution is plugged in through a
single capability: replacing the module loader callback with a function of
(specifier, referrer) that returns a resolved module or raises.
"""

from typing import Callable, Dict, FrozenSet, Iterable, List, Optional
import logging
import os

from jsmodpath.errors import JsModPathError, ModuleNotFound
from jsmodpath.extractors import ImportExtractor
from jsmodpath.resolution import file_exists

from .models import ModuleOrigin, ResolvedModule

logger = logging.getLogger(__name__)

ModuleLoaderFunc = Callable[[str, Optional[str]], ResolvedModule]

DEFAULT_NATIVE_MODULES = frozenset({"std", "os"})


class HostEngine:
    """Minimal module host: a module map, a loader hook and a linker.

    The default loader treats a specifier the way a stock engine does: a
    native module name, or otherwise a plain file name relative to the
    working directory.
    """

    def __init__(self, native_modules: Optional[Iterable[str]] = None) -> None:
        self.native_modules: FrozenSet[str] = (
            frozenset(native_modules) if native_modules is not None else DEFAULT_NATIVE_MODULES
        )
        self.modules: Dict[str, ResolvedModule] = {}
        self.load_order: List[str] = []
        self._loader: Optional[ModuleLoaderFunc] = None
        self._extractor = ImportExtractor()

    def set_module_loader(self, loader: Optional[ModuleLoaderFunc]) -> None:
        """Replace the module loader callback (None restores the default)."""
        self._loader = loader

    def load_default(self, specifier: str, referrer: Optional[str] = None) -> ResolvedModule:
        """Built-in loading used when the installed loader finds nothing.

        Raises:
            ModuleNotFound: The specifier is neither native nor a readable file
        """
        if specifier in self.native_modules:
            return ResolvedModule(
                specifier=specifier,
                canonical_key=specifier,
                path=specifier,
                origin=ModuleOrigin.ENGINE,
                content=b"",
            )

        if file_exists(specifier):
            path = os.path.normpath(os.path.abspath(specifier))
            return ResolvedModule(
                specifier=specifier,
                canonical_key=path,
                path=path,
                origin=ModuleOrigin.ENGINE,
            )

        raise ModuleNotFound(specifier, referrer)

    def is_native(self, module: ResolvedModule) -> bool:
        return module.origin == ModuleOrigin.ENGINE and module.path in self.native_modules

    def compile(self, source: bytes, filename: str) -> bytes:
        """Turn module source into the engine's loadable form.

        The default engine loads source text directly.
        """
        return source

    def resolve(self, specifier: str, referrer: Optional[str] = None) -> ResolvedModule:
        """Run the installed loader callback for one import."""
        if self._loader is None:
            return self.load_default(specifier, referrer)
        return self._loader(specifier, referrer)

    def import_module(self, specifier: str, referrer: Optional[str] = None) -> ResolvedModule:
        """Resolve a module and link its static imports.

        Dynamic imports use the same entry point with no static parent, so
        embedded and filesystem modules go through identical resolution.
        """
        module = self.resolve(specifier, referrer)
        self.link(module)
        return module

    def link(self, module: ResolvedModule) -> None:
        """Register a module and load its static imports depth-first.

        A module whose source or imports fail to load is unregistered again,
        so a later import retries it from scratch.
        """
        if module.canonical_key in self.modules:
            return

        self.modules[module.canonical_key] = module
        self.load_order.append(module.canonical_key)
        logger.debug(f"[module:link] {module.canonical_key} ({module.origin.value})")

        if self.is_native(module):
            return

        try:
            source = module.read().decode("utf-8", errors="replace")
            for specifier in self._extractor.get_static_specifiers(source, module.path):
                self.import_module(specifier, module.path)
        except JsModPathError:
            del self.modules[module.canonical_key]
            self.load_order.remove(module.canonical_key)
            raise

    def __repr__(self) -> str:
        return f"HostEngine({len(self.modules)} modules)"
