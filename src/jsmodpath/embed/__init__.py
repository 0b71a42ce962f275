"""Embed module initialization."""

from .table import EmbeddedModuleEntry, EmbeddedTable, TABLE_MAGIC, TRAILER_MAGIC
from .emitter import ExecutableEmitter, EmitReport

__all__ = [
    "EmbeddedModuleEntry",
    "EmbeddedTable",
    "TABLE_MAGIC",
    "TRAILER_MAGIC",
    "ExecutableEmitter",
    "EmitReport",
]
