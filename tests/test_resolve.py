"""Tests for symbol path resolution."""

import pytest

pytest.importorskip("tree_sitter_typescript")

from tsdoc.checker import build_program
from tsdoc.checker.parser import parse_source_text
from tsdoc.models import EntityKind
from tsdoc.queries import ExportsQuery, NodeShape, ResolveQuery, describe, parse_symbol_path, resolve
from tsdoc.queries.resolve import classify
from tsdoc.universe import DeclarationUniverse, load_universe

from conftest import write


@pytest.fixture
def fakepkg(config):
    universe = load_universe(config, package_name="fakepkg")
    return universe, build_program(universe)


class TestParseSymbolPath:
    def test_segments(self):
        assert parse_symbol_path("Array.prototype.map") == ["Array", "prototype", "map"]
        assert parse_symbol_path(" fs ") == ["fs"]

    def test_empty(self):
        with pytest.raises(ValueError):
            parse_symbol_path("")
        with pytest.raises(ValueError):
            parse_symbol_path("   ")

    def test_empty_segment(self):
        with pytest.raises(ValueError, match="Invalid symbol path"):
            parse_symbol_path("Array..map")
        with pytest.raises(ValueError):
            parse_symbol_path("Array.")


class TestClassify:
    def test_shapes(self):
        sf = parse_source_text(
            "interface I {}\ndeclare class C {}\ntype T = string;\ndeclare const v: number;\n"
            "declare namespace N {}\nfunction f(): void;\n",
            "lib.d.ts",
        )
        shapes = []
        for node in sf.root.named_children:
            if node.type == "ambient_declaration":
                node = node.named_children[0]
            shapes.append(classify(node))
        assert shapes == [
            NodeShape.INTERFACE,
            NodeShape.CLASS,
            NodeShape.TYPE_ALIAS,
            NodeShape.VARIABLE,
            NodeShape.MODULE,
            NodeShape.OTHER,
        ]


class TestStandardLibrary:
    def test_static_method_of_constructor_value(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["Array", "isArray"], checker)
        assert result.found
        assert result.entity.kind == EntityKind.FUNCTION
        assert result.entity.is_static
        (signature,) = describe(result.entity, checker).call_signatures
        assert signature.return_type == "boolean"
        assert signature.predicate == "arg is any[]"
        assert [p.name for p in signature.parameters] == ["arg"]

    def test_instance_method_through_interface(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["Array", "map"], checker)
        assert result.found
        assert result.entity.kind == EntityKind.METHOD
        assert not result.entity.is_static

    def test_root_is_interface(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["Array"], checker)
        assert result.entity.kind == EntityKind.INTERFACE
        assert result.entity.file.endswith("lib.es5.d.ts")

    def test_missing_member(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["Array", "doesNotExist"], checker)
        assert not result.found
        assert result.query == "Array.doesNotExist"
        assert result.reason == "'Array' has no member 'doesNotExist'"

    def test_missing_root(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["NoSuchThing"], checker)
        assert not result.found
        assert result.reason == "Symbol 'NoSuchThing' not found"

    def test_global_function_found_through_exports(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["parseInt"], checker)
        assert result.entity.kind == EntityKind.FUNCTION

    def test_namespace_members(self, stdlib):
        universe, checker = stdlib
        collator = resolve(universe, ["Intl", "Collator"], checker)
        assert collator.entity.kind == EntityKind.INTERFACE
        compare = resolve(universe, ["Intl", "Collator", "compare"], checker)
        assert compare.entity.kind == EntityKind.METHOD

    def test_primitive_member_uses_apparent_type(self, stdlib):
        universe, checker = stdlib
        result = resolve(universe, ["String", "length", "toFixed"], checker)
        assert result.found
        assert result.entity.kind == EntityKind.METHOD

    def test_query_object(self, stdlib):
        universe, checker = stdlib
        result = ResolveQuery(checker, universe).execute("Promise.all")
        assert result.found
        assert result.entity.is_static


class TestPackages:
    def test_class_declaration(self, fakepkg):
        universe, checker = fakepkg
        result = resolve(universe, ["Server"], checker)
        assert result.entity.kind == EntityKind.CLASS
        assert result.entity.file.endswith("index.d.ts")

    def test_reexport_resolves_to_target(self, fakepkg):
        universe, checker = fakepkg
        result = resolve(universe, ["Options"], checker)
        assert result.entity.kind == EntityKind.INTERFACE
        assert result.entity.file.endswith("options.d.ts")

    def test_star_export(self, fakepkg):
        universe, checker = fakepkg
        result = resolve(universe, ["legacyServer"], checker)
        assert result.entity.kind == EntityKind.FUNCTION
        assert result.entity.file.endswith("helpers.d.ts")

    def test_static_class_member(self, fakepkg):
        universe, checker = fakepkg
        result = resolve(universe, ["Server", "instances"], checker)
        assert result.entity.kind == EntityKind.PROPERTY
        assert result.entity.is_static

    def test_instance_class_member(self, fakepkg):
        universe, checker = fakepkg
        result = resolve(universe, ["Server", "listen"], checker)
        assert result.entity.kind == EntityKind.METHOD
        assert not result.entity.is_static


class TestOrdering:
    def test_earlier_file_wins(self, tmp_path):
        first = write(tmp_path / "first.d.ts", "export interface Thing { a: string; }\n")
        second = write(tmp_path / "second.d.ts", "export interface Thing { b: string; }\n")
        universe = DeclarationUniverse(package_files=(first, second))
        result = resolve(universe, ["Thing"], build_program(universe))
        assert result.entity.file.endswith("first.d.ts")

    def test_declaration_in_tree_before_exports(self, tmp_path):
        index = write(tmp_path / "index.d.ts", (
            'export { Thing as Other } from "./other";\n'
            "export interface Thing { own: string; }\n"
        ))
        other = write(tmp_path / "other.d.ts", "export interface Thing { theirs: string; }\n")
        universe = DeclarationUniverse(package_files=(index, other))
        checker = build_program(universe)
        result = resolve(universe, ["Thing"], checker)
        assert result.entity.file.endswith("index.d.ts")
        assert "own" in result.entity.symbol.members

    def test_dangling_reexport_is_unresolved(self, tmp_path):
        index = write(tmp_path / "index.d.ts", 'export { gone } from "./missing";\n')
        universe = DeclarationUniverse(package_files=(index,))
        checker = build_program(universe)
        result = resolve(universe, ["gone"], checker)
        assert result.entity.kind == EntityKind.UNRESOLVED_MEMBER
        assert not resolve(universe, ["gone", "x"], checker).found


class TestMergedDeclarations:
    MERGED = (
        "declare var Widget: { new (): Widget };\n"
        "interface Widget { size: number; }\n"
        "declare namespace ns {\n"
        "    var Widget: { new (): Widget };\n"
        "    interface Widget { size: number; }\n"
        "}\n"
    )

    def test_kind_does_not_depend_on_path(self, tmp_path):
        lib = write(tmp_path / "lib.d.ts", self.MERGED)
        universe = DeclarationUniverse(stdlib_files=(lib,))
        checker = build_program(universe)
        root = resolve(universe, ["Widget"], checker).entity
        member = resolve(universe, ["ns", "Widget"], checker).entity
        assert root.kind == EntityKind.INTERFACE
        assert member.kind == EntityKind.INTERFACE
        assert root.line == 2
        assert member.line == 5

    def test_listing_uses_same_kind(self, tmp_path):
        lib = write(tmp_path / "lib.d.ts", self.MERGED)
        universe = DeclarationUniverse(stdlib_files=(lib,))
        checker = build_program(universe)
        namespace = resolve(universe, ["ns"], checker).entity
        (entry,) = ExportsQuery(checker).execute(namespace.symbol, "ns").entries
        assert (entry.name, entry.kind) == ("Widget", "interface")
