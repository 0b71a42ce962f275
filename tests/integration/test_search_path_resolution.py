"""Integration tests for search-path resolution through the host engine."""

import os
import pytest
from jsmodpath.embed import EmbeddedModuleEntry, EmbeddedTable
from jsmodpath.loader import HostEngine, ModuleOrigin, RuntimeLoader
from jsmodpath.resolution import SearchPath


@pytest.fixture
def project(tmp_path, monkeypatch):
    mods = tmp_path / "mods"
    (mods / "math").mkdir(parents=True)
    (mods / "node").mkdir()
    (mods / "math" / "index.js").write_text("export function add(a, b) { return a + b; }\n")
    (mods / "utils.js").write_text(
        "export function capitalize(s) { return s[0].toUpperCase() + s.slice(1); }\n"
    )
    (mods / "node" / "fs.js").write_text("export function readFileSync() {}\n")
    (tmp_path / "main.js").write_text(
        'import { add } from "math";\n'
        'import { capitalize } from "utils";\n'
        'import { readFileSync } from "node:fs";\n'
        'console.log(capitalize("sum"), add(1, 2));\n'
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JSMODPATH", "./mods")
    return tmp_path


class TestSearchPathResolution:
    def test_script_with_bare_imports(self, project):
        engine = RuntimeLoader(SearchPath.from_environ()).install(HostEngine())
        engine.import_module("./main.js")

        cwd = os.getcwd()
        assert engine.load_order == [
            os.path.join(cwd, "main.js"),
            os.path.join(cwd, "mods", "math", "index.js"),
            os.path.join(cwd, "mods", "utils.js"),
            os.path.join(cwd, "mods", "node", "fs.js"),
        ]
        assert all(m.origin == ModuleOrigin.FILESYSTEM for m in engine.modules.values())

    def test_protocol_specifier(self, project):
        module = RuntimeLoader(SearchPath.from_environ()).load("node:fs")
        assert module.path == os.path.join(os.getcwd(), "mods", "node", "fs.js")

    def test_directory_style_wins(self, project):
        (project / "mods" / "math.js").write_text("export const wrong = true;\n")
        module = RuntimeLoader(SearchPath.from_environ()).load("math")
        assert module.path.endswith(os.path.join("math", "index.js"))

    def test_search_path_snapshot(self, project, monkeypatch):
        loader = RuntimeLoader(SearchPath.from_environ())
        monkeypatch.delenv("JSMODPATH")
        assert loader.load("utils").path.endswith("utils.js")

    def test_module_identity_matches_across_stores(self, project):
        disk = RuntimeLoader(SearchPath.from_environ()).load("utils")
        table = EmbeddedTable([EmbeddedModuleEntry("utils", disk.path, disk.read())])
        embedded = RuntimeLoader(table=table).load("utils")

        assert embedded.origin == ModuleOrigin.EMBEDDED
        assert embedded.meta == disk.meta
        assert disk.meta.dirname == os.path.join(os.getcwd(), "mods")
