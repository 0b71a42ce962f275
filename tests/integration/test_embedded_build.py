"""Integration tests for building and running embedded module tables."""

import os
import pytest
from click.testing import CliRunner
from jsmodpath.cli import main
from jsmodpath.embed import EmbeddedTable, ExecutableEmitter
from jsmodpath.graph import DependencyDiscovery
from jsmodpath.loader import HostEngine, ModuleOrigin, RuntimeLoader
from jsmodpath.resolution import SearchPath


@pytest.fixture
def node_compat(tmp_path, monkeypatch):
    shims = tmp_path / "shims"
    (shims / "node").mkdir(parents=True)
    (shims / "node" / "fs.js").write_text(
        'import * as std from "std";\nexport function readFileSync(p) { return std.loadFile(p); }\n'
    )
    (shims / "node" / "process.js").write_text(
        'import * as os from "os";\nexport const argv = [];\n'
    )
    (tmp_path / "bootstrap.js").write_text("globalThis.BOOTSTRAPPED = true;\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COLUMNS", "200")
    return tmp_path


def build_executable(root, output):
    discovery = DependencyDiscovery(SearchPath.of(root / "shims"))
    result = discovery.discover(["./bootstrap.js"], ["node:fs", "node:process"])
    return ExecutableEmitter(HostEngine()).emit(result, output)


class TestForceEmbed:
    def test_table_holds_forced_keys(self, node_compat):
        report = build_executable(node_compat, node_compat / "app")
        table = EmbeddedTable.from_executable(report.output)

        bootstrap = os.path.join(os.getcwd(), "bootstrap.js")
        assert table.entry_points == (bootstrap,)
        assert set(table.keys()) - {bootstrap} == {"node/fs", "node/process"}

    def test_bare_entry_table_keys(self, node_compat):
        discovery = DependencyDiscovery(SearchPath.of(node_compat / "shims"))
        result = discovery.discover(["bootstrap"], ["node:fs", "node:process"])
        report = ExecutableEmitter(HostEngine()).emit(result, node_compat / "app")
        table = EmbeddedTable.from_executable(report.output)

        # entry modules are embedded next to the forced ones
        assert set(table.keys()) == {"bootstrap", "node/fs", "node/process"}
        assert table.entry_points == ("bootstrap",)
        assert table.lookup(os.path.join(os.getcwd(), "bootstrap.js")).key == "bootstrap"

    def test_dynamic_import_without_search_path(self, node_compat, monkeypatch):
        build_executable(node_compat, node_compat / "app")
        monkeypatch.delenv("JSMODPATH", raising=False)

        table = EmbeddedTable.from_executable(node_compat / "app")
        engine = RuntimeLoader(SearchPath.from_environ(), table).install(HostEngine())
        for key in table.entry_points:
            engine.import_module(key)

        module = engine.import_module("node:fs")
        assert module.origin == ModuleOrigin.EMBEDDED
        assert engine.modules["std"].origin == ModuleOrigin.ENGINE

    def test_embedded_content_wins(self, node_compat):
        build_executable(node_compat, node_compat / "app")
        (node_compat / "shims" / "node" / "fs.js").write_text("export const changed = 1;\n")

        table = EmbeddedTable.from_executable(node_compat / "app")
        loader = RuntimeLoader(SearchPath.of(node_compat / "shims"), table)
        for specifier in ("node:fs", "node/fs"):
            assert b"readFileSync" in loader.load(specifier).read()

    def test_runs_after_sources_are_removed(self, node_compat):
        build_executable(node_compat, node_compat / "app")
        for path in (node_compat / "shims" / "node").iterdir():
            path.unlink()
        os.remove(node_compat / "bootstrap.js")

        table = EmbeddedTable.from_executable(node_compat / "app")
        engine = RuntimeLoader(table=table).install(HostEngine())
        engine.import_module("node:process")
        assert engine.load_order == ["node/process", "os"]


class TestAutoLaunchDirectory:
    @pytest.fixture
    def app_libs(self, tmp_path, monkeypatch):
        libs = tmp_path / "app_libs"
        libs.mkdir()
        (libs / "main.js").write_text(
            '// Import utility from same directory\n'
            'import { appName } from "./utils.js";\n'
            'console.log("Auto-launched app from %");\n'
        )
        (libs / "utils.js").write_text(
            'export const appName = "TestApp";\nexport const version = "1.0.0";\n'
        )
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.delenv("JSMODPATH", raising=False)
        monkeypatch.setenv("COLUMNS", "200")
        return libs

    def test_build_and_run(self, app_libs, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["build", "%/main.js", "--embed-dir", "app_libs", "-o", "test-app"])
        assert result.exit_code == 0, result.output

        table = EmbeddedTable.from_executable(tmp_path / "test-app")
        assert table.entry_points == (str(app_libs / "main.js"),)

        result = runner.invoke(main, ["run", "test-app"])
        assert result.exit_code == 0, result.output
        assert "EMBEDDED" in result.output
        assert "FILESYSTEM" not in result.output


class TestEmbeddedAliases:
    def test_exact_file_name_hits_table(self, tmp_path, monkeypatch):
        app = tmp_path / "app"
        app.mkdir()
        (app / "main.js").write_text('import "./helper";\n')
        (app / "helper.js").write_text("export const helper = 1;\n")
        monkeypatch.chdir(tmp_path)

        result = DependencyDiscovery().discover(["./app/main.js"])
        ExecutableEmitter(HostEngine()).emit(result, tmp_path / "app.bin")
        for path in app.iterdir():
            path.unlink()

        table = EmbeddedTable.from_executable(tmp_path / "app.bin")
        engine = RuntimeLoader(table=table).install(HostEngine())
        engine.import_module(str(app / "main.js"))
        module = engine.import_module("./helper.js", str(app / "main.js"))
        assert module.origin == ModuleOrigin.EMBEDDED
        assert module.canonical_key == str(app / "helper")
        assert engine.load_order == [str(app / "main.js"), str(app / "helper")]
