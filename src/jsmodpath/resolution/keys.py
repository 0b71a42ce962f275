"""Canonical keys shared by the table builder and the runtime lookup.

Both sides must compute byte-identical keys for the same logical module,
so this is the only place keys are made.
"""

from typing import Optional
import os

from .specifier import ModuleSpecifier


def base_directory(referrer: Optional[str]) -> str:
    """Directory relative specifiers are interpreted against."""
    if referrer:
        return os.path.dirname(referrer)
    return os.getcwd()


def specifier_path(specifier: ModuleSpecifier, referrer: Optional[str] = None) -> str:
    """Interpret the effective specifier as a filesystem path."""
    path = os.path.join(base_directory(referrer), specifier.effective)
    return os.path.normpath(path)


def canonical_key(specifier: ModuleSpecifier, referrer: Optional[str] = None) -> str:
    """Compute the embedded-table key for a specifier.

    Bare specifiers are keyed by their translated name (``node:fs`` and
    ``node/fs`` share the key ``node/fs``). Relative and absolute specifiers
    are keyed by the absolute, normalised path they name, taken relative to
    the referrer's directory or the working directory.
    """
    if specifier.is_bare:
        return specifier.effective
    return specifier_path(specifier, referrer)
