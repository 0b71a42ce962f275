"""Executable emitter: appends the embedded module table to a runtime stub."""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union
import logging
import os
import stat

from jsmodpath.errors import EmbeddedTableError

from .table import EmbeddedModuleEntry, EmbeddedTable

if TYPE_CHECKING:
    from jsmodpath.graph.models import DiscoveryResult
    from jsmodpath.loader.engine import HostEngine

logger = logging.getLogger(__name__)


@dataclass
class EmitReport:
    """What the emitter wrote."""

    output: Path
    table: EmbeddedTable
    stub_bytes: int
    payload_bytes: int

    @property
    def total_bytes(self) -> int:
        return self.stub_bytes + self.payload_bytes + len(EmbeddedTable.trailer(0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output": str(self.output),
            "stub_bytes": self.stub_bytes,
            "payload_bytes": self.payload_bytes,
            "total_bytes": self.total_bytes,
            **self.table.get_stats(),
        }


class ExecutableEmitter:
    """Serializes discovered modules into a table appended to a stub.

    Layout of the output file::

        [stub bytes][table payload][u64 payload offset]["JSMPEND\\0"]

    Without a stub the output is a bare table file that
    ``EmbeddedTable.from_executable`` reads the same way.
    """

    def __init__(self, engine: Optional["HostEngine"] = None) -> None:
        self.engine = engine

    def compile(self, source: bytes, filename: str) -> bytes:
        if self.engine is None:
            return source
        return self.engine.compile(source, filename)

    def build_table(self, result: "DiscoveryResult") -> EmbeddedTable:
        """Compile every discovered module into an immutable table."""
        entries = []
        aliases: Dict[str, str] = {}

        for module in result.modules:
            entries.append(EmbeddedModuleEntry(
                key=module.key,
                path=module.path,
                bytecode=self.compile(module.source, module.path),
            ))
            for alias in module.aliases:
                aliases[alias] = module.key

        return EmbeddedTable(entries, aliases, result.entry_keys)

    def emit(
        self,
        result: "DiscoveryResult",
        output: Union[str, Path],
        stub: Optional[Union[str, Path]] = None,
    ) -> EmitReport:
        """Write the stub followed by the table to output."""
        return self.write_table(self.build_table(result), output, stub)

    def write_table(
        self,
        table: EmbeddedTable,
        output: Union[str, Path],
        stub: Optional[Union[str, Path]] = None,
    ) -> EmitReport:
        output = Path(output)
        stub_data = b""
        if stub is not None:
            try:
                stub_data = Path(stub).read_bytes()
            except OSError as e:
                raise EmbeddedTableError(f"Cannot read runtime stub {stub}: {e}") from e

        payload = table.to_bytes()

        output.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = output.with_name(output.name + ".tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(stub_data)
                f.write(payload)
                f.write(EmbeddedTable.trailer(len(stub_data)))
            os.replace(tmp_path, output)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise EmbeddedTableError(f"Cannot write executable {output}: {e}") from e

        if stub is not None:
            mode = os.stat(stub).st_mode
            os.chmod(output, stat.S_IMODE(mode) | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        logger.info(
            f"[module:emit] {len(table)} modules ({len(payload)} bytes) -> {output}"
        )
        return EmitReport(
            output=output,
            table=table,
            stub_bytes=len(stub_data),
            payload_bytes=len(payload),
        )
