"""Tests for description extraction."""

import pytest

pytest.importorskip("tree_sitter_typescript")

from tsdoc.checker import build_program
from tsdoc.models import MEMBER_LIMIT
from tsdoc.queries import DescribeQuery, LookupQuery, describe, resolve
from tsdoc.universe import DeclarationUniverse

from conftest import write


def describe_in(tmp_path, text: str, *segments: str):
    """Describe ``segments`` resolved against a single declaration file."""
    path = write(tmp_path / "mod.d.ts", text)
    universe = DeclarationUniverse(package_files=(path,))
    checker = build_program(universe)
    result = resolve(universe, list(segments), checker)
    assert result.found, result.reason
    return describe(result.entity, checker)


class TestLocalExample:
    def test_function(self, config):
        description = LookupQuery(config).execute("example.greet").description
        assert description.kind == "function"
        assert description.documentation == "A simple greeting function that says hello"
        assert description.file.endswith("example.ts")
        (signature,) = description.call_signatures
        assert signature.text == "(name: string): string"
        assert signature.return_type == "string"
        assert signature.parameters[0].doc == "The name of the person to greet"
        assert signature.returns_doc == "A greeting message"
        assert description.examples == ['```ts\ngreet("Alice") // Returns "Hello, Alice!"\n```']
        assert description.type_text is None

    def test_arrow_function_variable(self, config):
        description = LookupQuery(config).execute("example.add").description
        assert description.kind == "variable"
        assert description.documentation == "Calculate the sum of two numbers"
        (signature,) = description.call_signatures
        assert signature.text == "(a: number, b: number): number"
        assert [p.doc for p in signature.parameters] == ["First number", "Second number"]
        assert signature.returns_doc == "The sum of a and b"

    def test_interface_members(self, config):
        description = LookupQuery(config).execute("example.Person").description
        assert description.kind == "interface"
        assert description.type_text is None
        assert [(m.name, m.type, m.optional) for m in description.members] == [
            ("name", "string", False),
            ("age", "number", False),
            ("email", "string", True),
        ]
        assert description.members[0].doc == "The person's full name"

    def test_type_alias(self, config):
        description = LookupQuery(config).execute("example.Config").description
        assert description.kind == "type-alias"
        assert description.type_text == "{ debug: boolean; port: number; }"
        assert [m.name for m in description.members] == ["debug", "port"]
        assert description.members[1].doc == "Port number"


class TestStandardLibrary:
    def test_deprecated(self, stdlib):
        universe, checker = stdlib
        entity = resolve(universe, ["String", "substr"], checker).entity
        description = describe(entity, checker)
        assert description.deprecated
        assert description.deprecated_note == "A legacy feature for browser compatibility"
        assert description.other_tags == []
        params = description.call_signatures[0].parameters
        assert [(p.name, p.optional) for p in params] == [("from", False), ("length", True)]

    def test_static_function(self, stdlib):
        universe, checker = stdlib
        description = describe(resolve(universe, ["Array", "isArray"], checker).entity, checker)
        assert description.kind == "function"
        assert description.is_static

    def test_constructor_value_members(self, stdlib):
        universe, checker = stdlib
        description = describe(resolve(universe, ["Promise"], checker).entity, checker)
        assert description.documentation == "Represents the completion of an asynchronous operation"
        assert [m.name for m in description.members] == ["then"]

    def test_since_tag(self, stdlib):
        universe, checker = stdlib
        description = describe(resolve(universe, ["Promise", "resolve"], checker).entity, checker)
        assert description.since == "2015"

    def test_repeated_calls_are_equal(self, stdlib):
        universe, checker = stdlib
        entity = resolve(universe, ["Array", "map"], checker).entity
        assert describe(entity, checker) == describe(entity, checker)
        assert DescribeQuery(checker).execute(entity) == describe(entity, checker)


class TestPackage:
    def test_class(self, config):
        description = LookupQuery(config).execute("fakepkg.Server").description
        assert description.kind == "class"
        assert description.documentation == "A running server."
        (construct,) = description.construct_signatures
        assert construct.text == "(port: number): Server"
        assert construct.return_type is None
        assert description.call_signatures == []
        assert [(m.name, m.static) for m in description.members] == [
            ("port", False),
            ("listen", False),
            ("instances", True),
        ]
        port = description.members[0]
        assert port.readonly
        assert port.doc == "Port the server listens on."
        assert description.members[1].kind == "method"

    def test_other_tags(self, config):
        description = LookupQuery(config).execute("fakepkg.Request").description
        assert description.since == "2.0.0"
        assert description.other_tags == ["@internal"]
        query = description.members[1]
        assert query.type == "Record<string, string>"
        assert query.optional


class TestTags:
    def test_throws_see_and_custom(self, tmp_path):
        description = describe_in(tmp_path, (
            "/**\n"
            " * Parses input.\n"
            " * @throws {SyntaxError} When invalid\n"
            " * @see other\n"
            " * @custom value\n"
            " */\n"
            "export declare function parse(text: string): number;\n"
        ), "parse")
        assert description.throws == ["{SyntaxError} When invalid"]
        assert description.see == ["other"]
        assert description.other_tags == ["@custom value"]

    def test_overloads(self, tmp_path):
        description = describe_in(tmp_path, (
            "export declare function pick(a: string): string;\n"
            "export declare function pick(a: number): number;\n"
        ), "pick")
        assert [s.text for s in description.call_signatures] == ["(a: string): string", "(a: number): number"]

    def test_overloaded_member_type(self, tmp_path):
        description = describe_in(tmp_path, (
            "export interface Picker {\n"
            "    pick(a: string): void;\n"
            "    pick(a: number): void;\n"
            "}\n"
        ), "Picker")
        assert description.members[0].type == "(a: string): void (+1 overloads)"

    def test_type_parameters(self, tmp_path):
        description = describe_in(tmp_path, (
            "export declare function first<T extends object = {}>(items: T[], ...rest: T[]): T;\n"
        ), "first")
        (signature,) = description.call_signatures
        (type_parameter,) = signature.type_parameters
        assert (type_parameter.name, type_parameter.constraint, type_parameter.default) == ("T", "object", "{}")
        assert signature.parameters[1].rest
        assert signature.text == "<T extends object = {}>(items: T[], ...rest: T[]): T"


class TestMemberLimit:
    def test_members_are_capped(self, tmp_path):
        fields = "".join(f"    field{i}: number;\n" for i in range(MEMBER_LIMIT + 5))
        description = describe_in(tmp_path, f"export interface Wide {{\n{fields}}}\n", "Wide")
        assert len(description.members) == MEMBER_LIMIT
        assert description.members[0].name == "field0"
        assert description.more_members == 5

    def test_under_limit(self, tmp_path):
        description = describe_in(tmp_path, "export interface Small { a: string; }\n", "Small")
        assert description.more_members == 0
