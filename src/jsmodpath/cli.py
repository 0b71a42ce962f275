"""CLI for jsmodpath."""

import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from typing import List, Optional, Tuple
import os
import sys

from jsmodpath import __version__
from jsmodpath.config import JsModPathConfig, expand_placeholder, load_config
from jsmodpath.crawler import FileCrawler
from jsmodpath.embed import EmbeddedTable, ExecutableEmitter
from jsmodpath.errors import JsModPathError
from jsmodpath.exporters import ManifestExporter
from jsmodpath.graph import DependencyDiscovery, DiscoveryResult
from jsmodpath.loader import HostEngine, RuntimeLoader
from jsmodpath.logging_setup import init_logging

console = Console()


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    sys.exit(1)


def _make_loader(cfg: JsModPathConfig, table: Optional[EmbeddedTable] = None) -> RuntimeLoader:
    loader = RuntimeLoader(
        search_path=cfg.get_search_path(),
        table=table,
        bare_direct_fallback=cfg.resolver.bare_direct_fallback,
    )
    loader.install(HostEngine())
    return loader


def _embed_dir_roots(cfg: JsModPathConfig, directory: str) -> List[str]:
    """Specifiers for every module file under directory."""
    crawler = FileCrawler(
        Path(directory),
        ignore_patterns=cfg.ignore_patterns.paths,
        ignore_extensions=cfg.ignore_patterns.extensions,
    )
    return crawler.specifiers(expand_placeholder("%", directory))


def _build_roots(
    cfg: JsModPathConfig,
    entries: Tuple[str, ...],
    force_embed: Tuple[str, ...],
    embed_dir: Optional[str],
) -> Tuple[List[str], List[str]]:
    """Combine command-line and configured roots, expanding '%'."""
    entry_roots = list(entries) or list(cfg.build.entries)
    forced_roots = list(cfg.build.force_embed) + list(force_embed)
    embed_dir = embed_dir or cfg.build.embed_dir

    if embed_dir:
        entry_roots = [expand_placeholder(spec, embed_dir) for spec in entry_roots]
        forced_roots = [expand_placeholder(spec, embed_dir) for spec in forced_roots]
        forced_roots.extend(_embed_dir_roots(cfg, embed_dir))

    return entry_roots, forced_roots


def _discover(cfg: JsModPathConfig, entry_roots: List[str], forced_roots: List[str]) -> DiscoveryResult:
    discovery = DependencyDiscovery(
        search_path=cfg.get_search_path(),
        bare_direct_fallback=cfg.resolver.bare_direct_fallback,
    )
    return discovery.discover(entry_roots, forced_roots)


def _print_modules(result: DiscoveryResult) -> None:
    table = Table(title="Embedded Modules")
    table.add_column("Key", style="cyan")
    table.add_column("Path")
    table.add_column("Aliases", style="magenta")
    table.add_column("Bytes", justify="right", style="green")
    table.add_column("Role", justify="center")

    for module in result.modules:
        role = "entry" if module.is_entry else "forced" if module.forced else ""
        table.add_row(
            module.key,
            module.path,
            ", ".join(module.aliases),
            str(len(module.source)),
            role,
        )

    console.print(table)

    for item in result.unresolved:
        console.print(
            f"[yellow]Warning: unresolved import '{item.specifier}' "
            f"in {item.referrer}:{item.line_number}[/yellow]"
        )
    for fact in result.imports.get_dynamic_facts():
        console.print(
            f"[dim]Dynamic import '{fact.specifier}' in "
            f"{fact.source_file}:{fact.line_number} is resolved at run time[/dim]"
        )


def _print_imports(result: DiscoveryResult) -> None:
    graph = result.graph
    table = Table(title="Imports")
    table.add_column("Module", style="cyan")
    table.add_column("Imports")
    table.add_column("Reachable", justify="right", style="green")

    for module in result.modules:
        imported = [node.keys[0] for node in graph.get_dependencies(module.path)]
        table.add_row(
            module.key,
            ", ".join(imported),
            str(len(graph.get_transitive_dependencies(module.path))),
        )

    console.print(table)


@click.group()
@click.version_option(__version__, prog_name="jsmodpath")
@click.option("--config", "config_path", default=None, help="Path to configuration file")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """ES module resolution through a search path, with embedded module tables."""
    try:
        cfg = load_config(config_path)
    except JsModPathError as e:
        _fail(str(e))

    init_logging(log_level or os.environ.get("JSMODPATH_LOG_LEVEL") or cfg.logging.level)
    ctx.obj = cfg


@main.command()
@click.argument("specifier")
@click.option("--referrer", default=None, help="Path of the importing module")
@click.option("--table", "table_path", default=None, help="Executable or table file to consult first")
@click.pass_obj
def resolve(cfg: JsModPathConfig, specifier: str, referrer: Optional[str], table_path: Optional[str]) -> None:
    """Resolve SPECIFIER and show the strategies tried."""
    try:
        table = EmbeddedTable.from_executable(table_path) if table_path else None
        loader = _make_loader(cfg, table)
        resolution = loader.resolve(
            specifier, os.path.abspath(referrer) if referrer else None
        )
    except JsModPathError as e:
        _fail(str(e))

    console.print(" → ".join(state.value for state in resolution.trace))

    module = resolution.module
    if module is None:
        _fail(f"Cannot find module '{specifier}'")

    table_out = Table(title=f"Resolved '{specifier}'")
    table_out.add_column("Field", style="cyan")
    table_out.add_column("Value")
    table_out.add_row("key", module.canonical_key)
    table_out.add_row("path", module.path)
    table_out.add_row("origin", module.origin.value)
    table_out.add_row("dirname", module.meta.dirname)
    console.print(table_out)


@main.command()
@click.argument("entries", nargs=-1)
@click.option("-D", "--force-embed", "force_embed", multiple=True, help="Module to include although no static import reaches it")
@click.pass_obj
def deps(cfg: JsModPathConfig, entries: Tuple[str, ...], force_embed: Tuple[str, ...]) -> None:
    """List the modules reachable from ENTRIES."""
    try:
        entry_roots, forced_roots = _build_roots(cfg, entries, force_embed, None)
    except ValueError as e:
        _fail(str(e))
    if not entry_roots and not forced_roots:
        _fail("No entry modules given")

    try:
        result = _discover(cfg, entry_roots, forced_roots)
    except JsModPathError as e:
        _fail(str(e))

    _print_modules(result)
    _print_imports(result)

    for cycle in result.graph.find_cycles():
        console.print(f"[dim]Import cycle: {' → '.join(cycle)}[/dim]")


@main.command()
@click.argument("entries", nargs=-1)
@click.option("-o", "--output", default=None, help="Executable to write")
@click.option("-D", "--force-embed", "force_embed", multiple=True, help="Module to embed although no static import reaches it")
@click.option("--embed-dir", default=None, help="Embed every module under this directory ('%' in ENTRIES expands to it)")
@click.option("--stub", default=None, help="Runtime executable to append the module table to")
@click.option("--manifest", default=None, help="Write a JSON manifest of the embedded modules")
@click.pass_obj
def build(
    cfg: JsModPathConfig,
    entries: Tuple[str, ...],
    output: Optional[str],
    force_embed: Tuple[str, ...],
    embed_dir: Optional[str],
    stub: Optional[str],
    manifest: Optional[str],
) -> None:
    """Embed ENTRIES and their static imports into one executable."""
    output = output or cfg.build.output
    if not output:
        _fail("No output file given (use -o or build.output)")

    try:
        entry_roots, forced_roots = _build_roots(cfg, entries, force_embed, embed_dir)
    except ValueError as e:
        _fail(str(e))
    if not entry_roots and not forced_roots:
        _fail("No entry modules given")

    stub = stub or cfg.build.stub
    manifest = manifest or cfg.build.manifest

    try:
        result = _discover(cfg, entry_roots, forced_roots)
        emitter = ExecutableEmitter(HostEngine())
        report = emitter.emit(result, output, stub)
    except JsModPathError as e:
        _fail(str(e))

    if manifest:
        ManifestExporter().export(result, Path(manifest), output=str(report.output))

    _print_modules(result)
    console.print(
        f"[bold green]✓ Wrote {report.output}[/bold green] "
        f"({len(report.table)} modules, {report.total_bytes} bytes)"
    )


@main.command()
@click.argument("executable")
def inspect(executable: str) -> None:
    """List the module table embedded in EXECUTABLE."""
    try:
        table = EmbeddedTable.from_executable(executable)
    except JsModPathError as e:
        _fail(str(e))

    out = Table(title=f"Embedded Modules in {executable}")
    out.add_column("Key", style="cyan")
    out.add_column("Path")
    out.add_column("Bytes", justify="right", style="green")
    out.add_column("Entry", justify="center")

    for entry in table.entries():
        out.add_row(
            entry.key,
            entry.path,
            str(entry.length),
            "✓" if entry.key in table.entry_points else "",
        )
    console.print(out)

    for alias, target in table.aliases.items():
        console.print(f"[magenta]{alias}[/magenta] → {target}")


@main.command()
@click.argument("executable")
@click.option("--import", "imports", multiple=True, help="Specifier to import after the entry points, as a dynamic import would")
@click.pass_obj
def run(cfg: JsModPathConfig, executable: str, imports: Tuple[str, ...]) -> None:
    """Link the entry points embedded in EXECUTABLE and show the load order."""
    try:
        table = EmbeddedTable.from_executable(executable)
        loader = _make_loader(cfg, table)
        engine = loader.engine
        for key in table.entry_points:
            engine.import_module(key)
        for specifier in imports:
            engine.import_module(specifier)
    except JsModPathError as e:
        _fail(str(e))

    out = Table(title="Load Order")
    out.add_column("#", justify="right")
    out.add_column("Key", style="cyan")
    out.add_column("Origin")
    out.add_column("Path")

    for index, key in enumerate(engine.load_order, 1):
        module = engine.modules[key]
        out.add_row(str(index), key, module.origin.value, module.path)
    console.print(out)


if __name__ == "__main__":
    main()
