"""Exception types raised during resolution, loading and building."""

from typing import Optional


class JsModPathError(Exception):
    """Base class for all jsmodpath errors."""


class ResolutionError(JsModPathError):
    """A specifier could not be turned into a module."""


class ModuleNotFound(ResolutionError):
    """Every resolution strategy was exhausted."""

    def __init__(self, specifier: str, referrer: Optional[str] = None) -> None:
        self.specifier = specifier
        self.referrer = referrer
        message = f"Cannot find module '{specifier}'"
        if referrer:
            message += f" imported from {referrer}"
        super().__init__(message)


class PathJoinError(ResolutionError):
    """A candidate path could not be built (e.g. it is too long)."""


class BuildTimeUnresolvable(JsModPathError):
    """A module that must be embedded cannot be resolved at build time."""

    def __init__(self, specifier: str, reason: str = "") -> None:
        self.specifier = specifier
        message = f"Cannot embed '{specifier}': module not found on the build-time search path"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ModuleLoadError(JsModPathError):
    """A resolved module could not be read."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        message = f"Failed to read module {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class EmbeddedTableError(JsModPathError):
    """An embedded module table is missing or malformed."""


class ConfigError(JsModPathError):
    """A configuration file could not be loaded."""
