"""Unit tests for the static import scanner."""

from jsmodpath.extractors import ImportExtractor, strip_comments
from jsmodpath.ir import ImportKind


class TestImportExtractor:
    def setup_method(self):
        self.extractor = ImportExtractor()

    def test_named_import(self):
        facts = self.extractor.extract_from_content('import { add } from "./math.js";\n', "main.js")
        assert len(facts) == 1
        assert facts[0].specifier == "./math.js"
        assert facts[0].kind == ImportKind.STATIC_IMPORT
        assert facts[0].line_number == 1
        assert facts[0].source_file == "main.js"

    def test_default_and_namespace_imports(self):
        content = '''
import math from 'math';
import * as utils from "utils";
import def, { a as b } from "./mixed.js";
'''
        facts = self.extractor.extract_from_content(content, "main.js")
        assert [f.specifier for f in facts] == ["math", "utils", "./mixed.js"]
        assert [f.line_number for f in facts] == [2, 3, 4]

    def test_side_effect_import(self):
        facts = self.extractor.extract_from_content('import "./polyfill.js";', "main.js")
        assert len(facts) == 1
        assert facts[0].kind == ImportKind.SIDE_EFFECT_IMPORT

    def test_export_from(self):
        content = '''
export { readFile } from "node:fs";
export * from "./all.js";
export * as ns from "./ns.js";
export const local = 1;
'''
        facts = self.extractor.extract_from_content(content, "index.js")
        assert [f.specifier for f in facts] == ["node:fs", "./all.js", "./ns.js"]
        assert all(f.kind == ImportKind.EXPORT_FROM for f in facts)

    def test_multiline_import(self):
        content = '''import {
    one,
    two,
} from "./numbers.js";
'''
        facts = self.extractor.extract_from_content(content, "main.js")
        assert len(facts) == 1
        assert facts[0].specifier == "./numbers.js"
        assert facts[0].line_number == 1

    def test_dynamic_import(self):
        content = 'const mod = await import("./lazy.js");\n'
        facts = self.extractor.extract_from_content(content, "main.js")
        assert len(facts) == 1
        assert facts[0].kind == ImportKind.DYNAMIC_IMPORT
        assert not facts[0].is_static

    def test_non_literal_dynamic_import_is_ignored(self):
        content = 'const name = "x";\nimport(name);\nimport(`./${name}.js`);\n'
        assert self.extractor.extract_from_content(content, "main.js") == []

    def test_comments_are_ignored(self):
        content = '''
// import x from "./commented.js";
/* import y from "./block.js"; */
import z from "./real.js";
'''
        facts = self.extractor.extract_from_content(content, "main.js")
        assert [f.specifier for f in facts] == ["./real.js"]

    def test_strings_are_not_imports(self):
        content = 'const s = "import x from \'./fake.js\'";\n'
        assert self.extractor.extract_from_content(content, "main.js") == []

    def test_member_import_call_is_ignored(self):
        content = 'loader.import("./nope.js");\n'
        assert self.extractor.extract_from_content(content, "main.js") == []

    def test_statements_on_one_line(self):
        content = 'import a from "./a.js";import b from "./b.js";\n'
        facts = self.extractor.extract_from_content(content, "main.js")
        assert [f.specifier for f in facts] == ["./a.js", "./b.js"]

    def test_static_specifiers_are_unique_and_ordered(self):
        content = '''
import { a } from "./a.js";
import "./b.js";
export { c } from "./a.js";
const d = import("./d.js");
'''
        assert self.extractor.get_static_specifiers(content) == ["./a.js", "./b.js"]
