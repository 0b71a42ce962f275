"""Loader module initialization."""

from .models import LoaderState, ModuleMeta, ModuleOrigin, Resolution, ResolvedModule
from .engine import HostEngine, ModuleLoaderFunc, DEFAULT_NATIVE_MODULES
from .runtime import RuntimeLoader

__all__ = [
    "LoaderState",
    "ModuleMeta",
    "ModuleOrigin",
    "Resolution",
    "ResolvedModule",
    "HostEngine",
    "ModuleLoaderFunc",
    "DEFAULT_NATIVE_MODULES",
    "RuntimeLoader",
]
