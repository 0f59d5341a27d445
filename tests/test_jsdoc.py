"""Tests for JSDoc parsing and comment attachment."""

import pytest

pytest.importorskip("tree_sitter_typescript")

from tsdoc.checker.jsdoc import DocTag, find_doc_comment, first_line, parse_jsdoc, parse_param_tag
from tsdoc.checker.parser import parse_source_text


class TestParseJsdoc:
    def test_body_and_tags(self):
        doc = parse_jsdoc("/**\n * Adds numbers.\n * @param a First\n * @returns Sum\n */")
        assert doc.body == "Adds numbers."
        assert doc.tags == (DocTag("param", "a First"), DocTag("returns", "Sum"))

    def test_plain_block_comment_is_not_jsdoc(self):
        assert parse_jsdoc("/* not docs */") is None
        assert parse_jsdoc("// line") is None

    def test_single_line(self):
        doc = parse_jsdoc("/** The person's full name */")
        assert doc.body == "The person's full name"
        assert doc.tags == ()

    def test_example_keeps_code_fence_verbatim(self):
        raw = (
            "/**\n"
            " * @example\n"
            " * ```ts\n"
            " * greet(\"Alice\") // Returns \"Hello, Alice!\"\n"
            " * ```\n"
            " */"
        )
        doc = parse_jsdoc(raw)
        assert doc.tags_named("example")[0].text == '```ts\ngreet("Alice") // Returns "Hello, Alice!"\n```'

    def test_at_sign_inside_fence_is_not_a_tag(self):
        raw = "/**\n * @example\n * ```\n * @decorator()\n * ```\n */"
        doc = parse_jsdoc(raw)
        assert [tag.name for tag in doc.tags] == ["example"]
        assert "@decorator()" in doc.tags[0].text

    def test_multiline_body(self):
        doc = parse_jsdoc("/**\n * First line.\n *\n * Second paragraph.\n */")
        assert doc.body == "First line.\n\nSecond paragraph."
        assert first_line(doc.body) == "First line."

    def test_deprecated_without_text(self):
        doc = parse_jsdoc("/** @deprecated */")
        assert doc.tags == (DocTag("deprecated", ""),)
        assert doc.tags[0].render() == "@deprecated"


class TestParamTags:
    def test_named_param(self):
        assert parse_param_tag("name The name") == ("name", "The name")

    def test_typed_param_with_dash(self):
        assert parse_param_tag("{string} name - The name") == ("name", "The name")

    def test_optional_param_with_default(self):
        assert parse_param_tag("[radix=10] The base") == ("radix", "The base")

    def test_param_doc_lookup(self):
        doc = parse_jsdoc("/**\n * @param a First number\n * @param b Second number\n * @returns Sum\n */")
        assert doc.param_doc("b") == "Second number"
        assert doc.param_doc("c") is None
        assert doc.returns_doc() == "Sum"


class TestFindDocComment:
    def test_exported_function(self):
        sf = parse_source_text("/** Says hi. */\nexport function hi(): void {}\n", "mod.ts")
        export = sf.root.named_children[1]
        function = export.child_by_field_name("declaration")
        assert find_doc_comment(function).body == "Says hi."

    def test_exported_const_declarator(self):
        sf = parse_source_text("/** Adds. */\nexport const add = (a: number) => a;\n", "mod.ts")
        lexical = sf.root.named_children[1].child_by_field_name("declaration")
        declarator = next(c for c in lexical.named_children if c.type == "variable_declarator")
        assert find_doc_comment(declarator).body == "Adds."

    def test_line_comment_is_ignored(self):
        sf = parse_source_text("// helper\ndeclare function f(): void;\n", "lib.d.ts")
        ambient = sf.root.named_children[1]
        signature = ambient.named_children[0]
        assert find_doc_comment(signature) is None

    def test_interface_member(self):
        sf = parse_source_text("interface P {\n  /** Full name */\n  name: string;\n}\n", "p.d.ts")
        body = sf.root.named_children[0].child_by_field_name("body")
        member = next(c for c in body.named_children if c.type == "property_signature")
        assert find_doc_comment(member).body == "Full name"
