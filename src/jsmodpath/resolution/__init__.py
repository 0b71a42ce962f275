"""Resolution module initialization."""

from .specifier import ModuleSpecifier, SpecifierKind, classify, translate_colons
from .probe import ProbeMode, probe, file_exists, join_candidate
from .search_path import SearchPath, SearchPathResolver, DEFAULT_ENV_VAR
from .keys import canonical_key, specifier_path

__all__ = [
    "ModuleSpecifier",
    "SpecifierKind",
    "classify",
    "translate_colons",
    "ProbeMode",
    "probe",
    "file_exists",
    "join_candidate",
    "SearchPath",
    "SearchPathResolver",
    "DEFAULT_ENV_VAR",
    "canonical_key",
    "specifier_path",
]
