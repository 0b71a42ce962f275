"""Unit tests for the host engine interface."""

import os
import pytest
from jsmodpath.errors import ModuleLoadError, ModuleNotFound
from jsmodpath.loader import HostEngine, ModuleOrigin, ResolvedModule, RuntimeLoader
from jsmodpath.resolution import SearchPath


@pytest.fixture
def app(tmp_path):
    app_dir = tmp_path / "app"
    app_dir.mkdir()
    (app_dir / "main.js").write_text('import "./a.js";\nimport { b } from "./b.js";\n')
    (app_dir / "a.js").write_text('import "./c.js";\n')
    (app_dir / "b.js").write_text('import "./c.js";\nimport * as std from "std";\nexport const b = 1;\n')
    (app_dir / "c.js").write_text("export const c = 1;\n")
    return app_dir


class TestHostEngine:
    def setup_method(self):
        self.engine = HostEngine()

    def test_link_is_depth_first_in_declaration_order(self, app):
        RuntimeLoader().install(self.engine)
        self.engine.import_module(str(app / "main.js"))

        assert self.engine.load_order == [
            str(app / "main.js"),
            str(app / "a.js"),
            str(app / "c.js"),
            str(app / "b.js"),
            "std",
        ]

    def test_cycles_terminate(self, tmp_path):
        (tmp_path / "x.js").write_text('import "./y.js";\n')
        (tmp_path / "y.js").write_text('import "./x.js";\n')
        RuntimeLoader().install(self.engine)
        self.engine.import_module(str(tmp_path / "x.js"))
        assert len(self.engine.load_order) == 2

    def test_dynamic_import_uses_same_loader(self, tmp_path):
        mods = tmp_path / "mods"
        mods.mkdir()
        (mods / "lazy.js").write_text("export default 1;\n")
        RuntimeLoader(SearchPath.of(mods)).install(self.engine)

        module = self.engine.import_module("lazy")
        assert module.path == str(mods / "lazy.js")
        assert str(mods / "lazy.js") in self.engine.modules

    def test_default_loader_native(self):
        module = self.engine.resolve("os")
        assert module.origin == ModuleOrigin.ENGINE
        assert self.engine.is_native(module)
        assert module.read() == b""

    def test_default_loader_plain_file(self, tmp_path, monkeypatch):
        (tmp_path / "plain.js").write_text("")
        monkeypatch.chdir(tmp_path)
        module = self.engine.load_default("plain.js")
        assert module.path == os.path.join(os.getcwd(), "plain.js")
        assert not self.engine.is_native(module)

    def test_default_loader_does_not_add_extensions(self, tmp_path, monkeypatch):
        (tmp_path / "plain.js").write_text("")
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ModuleNotFound):
            self.engine.load_default("plain")

    def test_custom_native_modules(self):
        engine = HostEngine(native_modules=["bjson"])
        assert engine.resolve("bjson").origin == ModuleOrigin.ENGINE
        with pytest.raises(ModuleNotFound):
            engine.resolve("std")

    def test_unset_loader_restores_default(self, tmp_path):
        loader = RuntimeLoader(SearchPath.of(tmp_path))
        loader.install(self.engine)
        self.engine.set_module_loader(None)
        assert self.engine.resolve("std").path == "std"

    def test_compile_is_identity(self):
        assert self.engine.compile(b"export {};", "/a.js") == b"export {};"

    def test_missing_static_import_raises(self, tmp_path):
        (tmp_path / "broken.js").write_text('import "./gone.js";\n')
        RuntimeLoader().install(self.engine)
        with pytest.raises(ModuleNotFound, match="gone.js"):
            self.engine.import_module(str(tmp_path / "broken.js"))

    def test_failed_import_is_retried_in_full(self, tmp_path):
        app_dir = tmp_path / "app"
        mods = tmp_path / "mods"
        app_dir.mkdir()
        mods.mkdir()
        (app_dir / "main.js").write_text(
            'import "./a.js";\nimport "missing";\nimport "./b.js";\n'
        )
        (app_dir / "a.js").write_text("export const a = 1;\n")
        (app_dir / "b.js").write_text("export const b = 1;\n")
        RuntimeLoader(SearchPath.of(mods), bare_direct_fallback=False).install(self.engine)

        with pytest.raises(ModuleNotFound, match="missing"):
            self.engine.import_module(str(app_dir / "main.js"))
        assert str(app_dir / "main.js") not in self.engine.modules
        assert self.engine.load_order == [str(app_dir / "a.js")]

        with pytest.raises(ModuleNotFound):
            self.engine.import_module(str(app_dir / "main.js"))

        (mods / "missing.js").write_text("export default 0;\n")
        self.engine.import_module(str(app_dir / "main.js"))
        assert self.engine.load_order == [
            str(app_dir / "a.js"),
            str(app_dir / "main.js"),
            str(mods / "missing.js"),
            str(app_dir / "b.js"),
        ]

    def test_unreadable_module_is_not_registered(self, tmp_path):
        module = ResolvedModule(
            specifier="./gone.js",
            canonical_key=str(tmp_path / "gone.js"),
            path=str(tmp_path / "gone.js"),
            origin=ModuleOrigin.FILESYSTEM,
        )
        with pytest.raises(ModuleLoadError):
            self.engine.link(module)
        assert self.engine.modules == {}
        assert self.engine.load_order == []
