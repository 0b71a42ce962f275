"""Filesystem probing with Node-style index and extension fallbacks."""

from enum import Enum
from typing import List, Optional
import logging
import os
import stat

from jsmodpath.errors import PathJoinError

logger = logging.getLogger(__name__)

INDEX_FILE = "index.js"
MODULE_EXTENSION = ".js"

# Longest candidate path we are willing to build.
MAX_PATH_LENGTH = 4096


class ProbeMode(Enum):
    """Order in which candidate forms are tried."""

    # root/name/index.js, root/name.js, root/name
    SEARCH = "search"
    # path, path/index.js, path.js
    DIRECT = "direct"


def join_candidate(base: str, *parts: str, suffix: str = "") -> str:
    """Join path parts into a candidate path.

    Raises:
        PathJoinError: If the result would exceed MAX_PATH_LENGTH.
    """
    path = os.path.join(base, *parts) + suffix if parts else base + suffix
    if len(path) > MAX_PATH_LENGTH:
        raise PathJoinError(
            f"Candidate path is {len(path)} characters long "
            f"(limit {MAX_PATH_LENGTH}): {path[:80]}..."
        )
    return path


def file_exists(path: str) -> bool:
    """Check that path is an existing, regular, readable file."""
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return False
    return stat.S_ISREG(st.st_mode) and os.access(path, os.R_OK)


def candidates(base: str, mode: ProbeMode) -> List[str]:
    """List the candidate paths for base in probe order."""
    index = join_candidate(base, INDEX_FILE)
    with_ext = join_candidate(base, suffix=MODULE_EXTENSION)
    exact = join_candidate(base)

    if mode == ProbeMode.SEARCH:
        return [index, with_ext, exact]
    return [exact, index, with_ext]


def probe(base: str, mode: ProbeMode = ProbeMode.DIRECT) -> Optional[str]:
    """Return the first candidate for base that is a readable file.

    Args:
        base: Candidate base path (a search root joined with a name, or a
            specifier interpreted as a path)
        mode: Which candidate order to use

    Returns:
        Absolute, normalised path of the match, or None
    """
    if not base:
        return None

    # ".." is resolved lexically, intermediate directories need not exist
    base = os.path.normpath(base)
    for candidate in candidates(base, mode):
        if file_exists(candidate):
            logger.debug(f"[module:probe] {base} -> {candidate}")
            return os.path.normpath(os.path.abspath(candidate))

    logger.debug(f"[module:probe] {base} -> no match ({mode.value})")
    return None
