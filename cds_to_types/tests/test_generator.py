"""
End-to-end tests of the generator on a small bookshop model.
"""

import json
from pathlib import Path

import pytest

from cds_to_types.pipeline import (
    GeneratorConfig,
    Layout,
    ModuleFormat,
    OutputMode,
    OutputPathError,
    PipelineGenerator,
)
from cds_to_types.pipeline.analyzer import DiagnosticKind, EnumDeclaration, InterfaceDeclaration, NamespaceBlock

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def csn():
    with open(TEST_DATA / "bookshop.json") as f:
        return json.load(f)


def make_config(**kwargs):
    config = GeneratorConfig(interface_prefix="I", add_generation_comment=False)
    for key, value in kwargs.items():
        setattr(config, key, value)
    return config


def unit_of(result, namespace):
    return next(u for u in result.units if u.namespace == namespace)


def declaration(unit, name):
    return next(d for d in unit.declarations if d.name == name)


class TestAnalysis:
    def test_unit_order(self, csn):
        result = PipelineGenerator(csn, make_config()).generate()
        assert [u.namespace for u in result.units] == ["sap.common", "my.bookshop", "CatalogService", ""]

    def test_no_diagnostics(self, csn):
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).generate()
        assert len(result.diagnostics) == 0

    def test_declaration_order(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "my.bookshop")
        assert [d.name for d in unit.declarations] == [
            "Price",
            "Genre",
            "BooksGenre",
            "IBooks",
            "IBooks.actions",
            "IAuthors",
            "IBooks_texts",
            "Entity",
            "SanitizedEntity",
        ]

    def test_heritage(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "my.bookshop")
        books = declaration(unit, "IBooks")
        assert books.extends == ["managed", "cuid"]
        assert books.heritage == ["Imanaged", "Icuid"]

    def test_foreign_keys(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "my.bookshop")
        properties = {p.name: p for p in declaration(unit, "IBooks").properties}
        assert properties["currency_code"].type == "string"
        assert properties["currency_code"].optional
        assert properties["author_ID"].type == "number"
        assert "texts_ID" not in properties

    def test_without_foreign_keys(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config(emit_foreign_keys=False)).generate(), "my.bookshop")
        names = [p.name for p in declaration(unit, "IBooks").properties]
        assert "currency_code" not in names
        assert "author_ID" not in names

    def test_entity_enums(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "my.bookshop")
        entity = declaration(unit, "Entity")
        sanitized = declaration(unit, "SanitizedEntity")
        assert [(m.name, m.value) for m in entity.members] == [
            ("Books", "my.bookshop.Books"),
            ("Authors", "my.bookshop.Authors"),
            ("Books_texts", "my.bookshop.Books.texts"),
        ]
        assert [(m.name, m.value) for m in sanitized.members] == [
            ("Books", "Books"),
            ("Authors", "Authors"),
            ("Books_texts", "Books_texts"),
        ]

    def test_namespace_without_entities_has_no_entity_enums(self):
        csn = {"definitions": {"x.Code": {"kind": "type", "type": "cds.String"}}}
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "x")
        assert [d.name for d in unit.declarations] == ["Code"]

    def test_enum_member_without_value_uses_its_name(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "my.bookshop")
        genre = declaration(unit, "BooksGenre")
        assert [(m.name, m.value) for m in genre.members] == [("fiction", "fiction"), ("poetry", "P")]

    def test_bound_actions(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "my.bookshop")
        block = declaration(unit, "IBooks.actions")
        assert isinstance(block, NamespaceBlock)
        assert [d.name for d in block.declarations] == ["ActionOrder", "IActionOrderParams", "ActionOrderReturn"]
        params = block.declarations[1]
        assert params.qualified_name == "my.bookshop.IActionOrderParams"
        assert params.namespace == "my.bookshop"

    def test_service_actions_and_functions(self, csn):
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "CatalogService")
        assert [d.name for d in unit.declarations] == [
            "IBooks",
            "ActionSubmitOrder",
            "IActionSubmitOrderParams",
            "ActionSubmitOrderReturn",
            "FuncCountBooks",
            "IFuncCountBooksParams",
            "FuncCountBooksReturn",
            "Entity",
            "SanitizedEntity",
        ]
        action = declaration(unit, "ActionSubmitOrder")
        assert [(m.name, m.value) for m in action.members] == [
            ("name", "submitOrder"),
            ("paramBook", "book"),
            ("paramQuantity", "quantity"),
        ]

    def test_action_without_params_or_return(self):
        csn = {"definitions": {"S": {"kind": "service"}, "S.ping": {"kind": "action"}}}
        unit = unit_of(PipelineGenerator(csn, make_config()).generate(), "S")
        assert [d.name for d in unit.declarations] == ["ActionPing"]

    def test_singular_names(self, csn):
        unit = unit_of(
            PipelineGenerator(csn, make_config(use_singular_names=True)).generate(), "my.bookshop"
        )
        interfaces = [d for d in unit.declarations if isinstance(d, InterfaceDeclaration)]
        assert [i.name for i in interfaces][:2] == ["IBook", "IWriter"]
        properties = {p.name: p.type for p in interfaces[0].properties}
        assert properties["author"] == "IWriter"

    def test_absent_association_target(self):
        csn = {
            "definitions": {
                "x.A": {
                    "kind": "entity",
                    "elements": {
                        "ID": {"key": True, "type": "cds.Integer"},
                        "b": {"type": "cds.Association", "target": "x.Missing", "keys": [{"ref": ["ID"]}]},
                    },
                }
            }
        }
        result = PipelineGenerator(csn, make_config()).generate()
        properties = {p.name: p.type for p in declaration(unit_of(result, "x"), "IA").properties}
        assert properties == {"ID": "number", "b": "any", "b_ID": "any"}
        assert result.diagnostics.of_kind(DiagnosticKind.UNRESOLVED_REFERENCE)

    def test_empty_model(self):
        result = PipelineGenerator({"definitions": {}}, make_config()).generate()
        assert result.units == []


class TestFileLayout:
    def render(self, csn, **kwargs):
        return PipelineGenerator(csn, make_config(**kwargs)).render()["index.ts"]

    def test_namespace_blocks(self, csn):
        code = self.render(csn)
        assert "export namespace sap.common {" in code
        assert "export namespace my.bookshop {" in code
        assert "export namespace CatalogService {" in code
        assert code.index("export namespace sap.common {") < code.index("export namespace my.bookshop {")
        assert "import " not in code

    def test_root_declarations_at_top_level(self, csn):
        code = self.render(csn)
        assert "\nexport interface Icuid {\n    ID: string;\n}\n" in code
        assert "\nexport enum Entity {\n    cuid = \"cuid\",\n    managed = \"managed\",\n}\n" in code

    def test_references_use_namespace_path(self, csn):
        code = self.render(csn)
        assert "export interface IBooks extends Imanaged, Icuid {" in code
        assert "currency?: sap.common.ICurrencies;" in code
        assert "author?: my.bookshop.IAuthors;" in code
        assert "genre?: my.bookshop.Genre;" in code
        assert "export type ActionSubmitOrderReturn = sap.common.Locale;" in code

    def test_nested_declarations_are_indented(self, csn):
        code = self.render(csn)
        assert "\n    /** Type for a language code */\n    export type Locale = string;\n" in code
        assert "\n    export namespace IBooks.actions {\n        export enum ActionOrder {\n" in code
        assert '\n            name = "order",\n            paramQuantity = "quantity",\n' in code

    def test_generation_comment(self, csn):
        code = PipelineGenerator(csn, GeneratorConfig(), generation_comment="// generated").render()["index.ts"]
        assert code.startswith("// generated\n\n")

    def test_default_generation_comment(self, csn):
        code = PipelineGenerator(csn, GeneratorConfig()).render()["index.ts"]
        assert code.startswith("// Generated by cds_to_types v")
        assert code.splitlines()[0].endswith(": cds_to_types")


class TestTreeLayout:
    def render(self, csn, **kwargs):
        return PipelineGenerator(csn, make_config(layout=Layout.TREE, **kwargs)).render()

    def test_files(self, csn):
        assert sorted(self.render(csn)) == [
            "CatalogService/index.d.ts",
            "CatalogService/index.js",
            "index.d.ts",
            "index.js",
            "my/bookshop/index.d.ts",
            "my/bookshop/index.js",
            "sap/common/index.d.ts",
            "sap/common/index.js",
        ]

    def test_declaration_file(self, csn):
        code = self.render(csn)["my/bookshop/index.d.ts"]
        expected_start = (
            'import * as _ from "../..";\n'
            'import * as _sap_common from "../../sap/common";\n'
            "\n"
            "export type Price = number;\n"
            "\n"
            "export enum Genre {\n"
            "    Fiction = 1,\n"
            "    Poetry = 2,\n"
            "}\n"
            "\n"
            "export enum BooksGenre {\n"
            '    fiction = "fiction",\n'
            '    poetry = "P",\n'
            "}\n"
            "\n"
            "/** Books on sale */\n"
            "export interface IBooks extends _.Imanaged, _.Icuid {\n"
            "    ID: string;\n"
            "    createdAt?: Date;\n"
            "    modifiedBy?: string;\n"
            "    title: string;\n"
            "    stock?: number;\n"
            "    price?: Price;\n"
            "    genre?: BooksGenre;\n"
            "    currency?: _sap_common.ICurrencies;\n"
            "    author?: IAuthors;\n"
            "    texts?: IBooks_texts[];\n"
            "    currency_code?: string;\n"
            "    author_ID?: number;\n"
            "}\n"
            "\n"
            "export namespace IBooks.actions {\n"
            "    export enum ActionOrder {\n"
            '        name = "order",\n'
            '        paramQuantity = "quantity",\n'
            "    }\n"
            "\n"
            "    export interface IActionOrderParams {\n"
            "        quantity?: number;\n"
            "    }\n"
            "\n"
            "    export type ActionOrderReturn = number;\n"
            "}\n"
        )
        assert code.startswith(expected_start)
        assert code.endswith("}\n")

    def test_imports_of_a_service(self, csn):
        code = self.render(csn)["CatalogService/index.d.ts"]
        assert code.startswith(
            'import * as _my_bookshop from "../my/bookshop";\n'
            'import * as _sap_common from "../sap/common";\n\n'
        )
        assert "author?: _my_bookshop.IAuthors;" in code
        assert "genre?: _my_bookshop.Genre;" in code
        assert "export type ActionSubmitOrderReturn = _sap_common.Locale;" in code

    def test_root_declarations_have_no_imports(self, csn):
        code = self.render(csn)["index.d.ts"]
        assert "import " not in code
        assert code.startswith("export interface Icuid {")

    def test_runtime_file_commonjs(self, csn):
        code = self.render(csn)["index.js"]
        assert code == (
            '"use strict";\n'
            "\n"
            "const Entity = Object.freeze({\n"
            '    cuid: "cuid",\n'
            '    managed: "managed",\n'
            "});\n"
            "\n"
            "const SanitizedEntity = Object.freeze({\n"
            '    cuid: "cuid",\n'
            '    managed: "managed",\n'
            "});\n"
            "\n"
            "class Icuid {\n"
            "    ID;\n"
            "}\n"
            "\n"
            "class Imanaged {\n"
            "    createdAt;\n"
            "    modifiedBy;\n"
            "}\n"
            "\n"
            "module.exports = {\n"
            "    Entity,\n"
            "    SanitizedEntity,\n"
            "    Icuid,\n"
            "    Imanaged,\n"
            "};\n"
        )

    def test_runtime_file_esm(self, csn):
        code = self.render(csn, module_format=ModuleFormat.ESM)["index.js"]
        assert code.startswith("const Entity = Object.freeze({\n")
        assert code.endswith("export {\n    Entity,\n    SanitizedEntity,\n    Icuid,\n    Imanaged,\n};\n")
        assert "use strict" not in code

    def test_runtime_classes_are_flattened(self, csn):
        code = self.render(csn)["my/bookshop/index.js"]
        assert "class IBooks {\n    ID;\n    createdAt;\n    modifiedBy;\n    title;\n" in code
        assert "extends" not in code
        assert "const Genre = Object.freeze({\n    Fiction: 1,\n    Poetry: 2,\n});" in code

    def test_runtime_enums_and_exports(self, csn):
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).generate()
        unit = unit_of(result, "my.bookshop")
        assert [e.name for e in unit.runtime_enums] == ["Genre", "BooksGenre", "Entity", "SanitizedEntity"]
        assert [c.name for c in unit.classes] == ["IBooks", "IAuthors", "IBooks_texts"]
        assert unit.exports == [
            "Genre",
            "BooksGenre",
            "Entity",
            "SanitizedEntity",
            "IBooks",
            "IAuthors",
            "IBooks_texts",
        ]

    def test_conflicting_ancestor_types_become_union(self):
        csn = {
            "definitions": {
                "a.Person": {"kind": "aspect", "elements": {"id": {"type": "cds.String"}}},
                "b.Counted": {"kind": "aspect", "elements": {"id": {"type": "cds.Integer"}}},
                "c.Employee": {"kind": "entity", "includes": ["a.Person", "b.Counted"], "elements": {}},
            }
        }
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).generate()
        (employee,) = unit_of(result, "c").classes
        assert [(p.name, p.type) for p in employee.properties] == [("id", "string | number")]
        assert "class IEmployee {\n    id;\n}" in result.files["c/index.js"]

    def test_same_local_name_in_different_namespaces_becomes_union(self):
        csn = {
            "definitions": {
                "a.Addr": {"kind": "entity", "elements": {"street": {"type": "cds.String"}}},
                "c.Addr": {"kind": "entity", "elements": {"city": {"type": "cds.String"}}},
                "a.Person": {
                    "kind": "aspect",
                    "elements": {"home": {"type": "cds.Association", "target": "a.Addr"}},
                },
                "c.Employee": {
                    "kind": "entity",
                    "includes": ["a.Person"],
                    "elements": {"home": {"type": "cds.Association", "target": "c.Addr"}},
                },
            }
        }
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).generate()
        unit = unit_of(result, "c")
        employee = next(c for c in unit.classes if c.name == "IEmployee")
        assert [(p.name, p.type) for p in employee.properties] == [("home", "c.IAddr | a.IAddr")]
        # The structural form keeps the spelling of its own namespace
        assert [(p.name, p.type) for p in declaration(unit, "IEmployee").properties] == [("home", "IAddr")]

    def test_same_type_in_one_namespace_collapses(self):
        csn = {
            "definitions": {
                "x.Addr": {"kind": "entity", "elements": {"street": {"type": "cds.String"}}},
                "x.Person": {
                    "kind": "aspect",
                    "elements": {"home": {"type": "cds.Association", "target": "x.Addr"}},
                },
                "y.Employee": {
                    "kind": "entity",
                    "includes": ["x.Person"],
                    "elements": {"home": {"type": "cds.Association", "target": "x.Addr"}},
                },
            }
        }
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).generate()
        (employee,) = unit_of(result, "y").classes
        assert [(p.name, p.type) for p in employee.properties] == [("home", "x.IAddr")]
        assert [(p.name, p.type) for p in declaration(unit_of(result, "y"), "IEmployee").properties] == [
            ("home", "_x.IAddr")
        ]

    def test_localization_elements_into_other_namespaces_are_not_imported(self):
        csn = {
            "definitions": {
                "my.Books": {
                    "kind": "entity",
                    "elements": {
                        "ID": {"key": True, "type": "cds.UUID"},
                        "texts": {
                            "type": "cds.Composition",
                            "cardinality": {"max": "*"},
                            "target": "my.Books.texts",
                        },
                        "localized": {"type": "cds.Association", "target": "localized.my.Books"},
                    },
                },
                "my.Books.texts": {
                    "kind": "entity",
                    "elements": {
                        "locale": {"key": True, "type": "cds.String"},
                        "ID": {"key": True, "type": "cds.UUID"},
                    },
                },
                "localized.my.Books": {"kind": "entity", "elements": {"ID": {"key": True, "type": "cds.UUID"}}},
            }
        }
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).generate()
        unit = unit_of(result, "my")

        assert unit.imports == []
        books = declaration(unit, "IBooks")
        types = {p.name: p.type for p in books.properties}
        assert types["localized"] == "any"
        assert types["texts"] == "IBooks_texts[]"
        (books_class,) = [c for c in unit.classes if c.name == "IBooks"]
        assert {p.name: p.type for p in books_class.properties}["localized"] == "any"
        assert "_localized" not in result.files["my/index.d.ts"]


class TestWrite:
    def test_write_file(self, csn, tmp_path):
        result = PipelineGenerator(csn, make_config()).write(tmp_path / "types")
        path = tmp_path / "types.ts"
        assert path.exists()
        assert list(result.files) == [str(path)]
        assert "export namespace my.bookshop {" in path.read_text()

    def test_write_file_keeps_suffix(self, csn, tmp_path):
        PipelineGenerator(csn, make_config()).write(tmp_path / "model.d.ts")
        assert (tmp_path / "model.d.ts").exists()

    def test_file_output_is_directory(self, csn, tmp_path):
        with pytest.raises(OutputPathError):
            PipelineGenerator(csn, make_config()).write(tmp_path)

    def test_file_output_parent_missing(self, csn, tmp_path):
        with pytest.raises(OutputPathError):
            PipelineGenerator(csn, make_config()).write(tmp_path / "missing" / "types.ts")

    def test_file_exists_error_mode(self, csn, tmp_path):
        path = tmp_path / "types.ts"
        path.write_text("previous")
        config = make_config()
        config.output.mode = OutputMode.ERROR_IF_EXISTS
        with pytest.raises(OutputPathError):
            PipelineGenerator(csn, config).write(path)
        assert path.read_text() == "previous"

    def test_file_exists_force_mode(self, csn, tmp_path):
        path = tmp_path / "types.ts"
        path.write_text("previous")
        PipelineGenerator(csn, make_config()).write(path)
        assert path.read_text() != "previous"

    def test_write_tree(self, csn, tmp_path):
        output = tmp_path / "out"
        result = PipelineGenerator(csn, make_config(layout=Layout.TREE)).write(output)
        assert (output / "my" / "bookshop" / "index.d.ts").exists()
        assert (output / "my" / "bookshop" / "index.js").exists()
        assert (output / "index.d.ts").exists()
        assert len(result.files) == 8

    def test_tree_force_mode_removes_previous_output(self, csn, tmp_path):
        output = tmp_path / "out"
        stale = output / "old" / "ns"
        stale.mkdir(parents=True)
        (stale / "index.d.ts").write_text("export {};\n")
        (stale / "index.js").write_text("")
        (output / "README.md").write_text("kept")

        PipelineGenerator(csn, make_config(layout=Layout.TREE)).write(output)

        assert not (output / "old").exists()
        assert (output / "README.md").read_text() == "kept"
        assert (output / "sap" / "common" / "index.d.ts").exists()

    def test_tree_error_mode(self, csn, tmp_path):
        output = tmp_path / "out"
        output.mkdir()
        (output / "index.d.ts").write_text("export {};\n")
        config = make_config(layout=Layout.TREE)
        config.output.mode = OutputMode.ERROR_IF_EXISTS
        with pytest.raises(OutputPathError):
            PipelineGenerator(csn, config).write(output)
        assert not (output / "my").exists()

    def test_tree_error_mode_empty_directory(self, csn, tmp_path):
        output = tmp_path / "out"
        output.mkdir()
        config = make_config(layout=Layout.TREE)
        config.output.mode = OutputMode.ERROR_IF_EXISTS
        PipelineGenerator(csn, config).write(output)
        assert (output / "index.js").exists()

    def test_tree_output_is_file(self, csn, tmp_path):
        output = tmp_path / "out"
        output.write_text("")
        with pytest.raises(OutputPathError):
            PipelineGenerator(csn, make_config(layout=Layout.TREE)).write(output)

    def test_dump_csn(self, csn, tmp_path):
        PipelineGenerator(csn, make_config(dump_csn=True)).write(tmp_path / "types.ts")
        with open(tmp_path / "types.ts.json") as f:
            assert json.load(f) == csn

    def test_dump_csn_path(self, csn, tmp_path):
        generator = PipelineGenerator(csn, make_config(dump_csn=True))
        assert generator.csn_dump_path(tmp_path / "model") == tmp_path / "model.ts.json"
        assert generator.csn_dump_path(tmp_path / "model.d.ts") == tmp_path / "model.d.ts.json"

        tree = PipelineGenerator(csn, make_config(dump_csn=True, layout=Layout.TREE))
        assert tree.csn_dump_path(tmp_path / "out") == tmp_path / "out.json"

    def test_dump_csn_keeps_file_with_same_stem(self, csn, tmp_path):
        model = tmp_path / "model.json"
        model.write_text("original")
        PipelineGenerator(csn, make_config(dump_csn=True)).write(tmp_path / "model")
        assert model.read_text() == "original"
        assert (tmp_path / "model.ts.json").exists()

    def test_dump_csn_exists_error_mode(self, csn, tmp_path):
        (tmp_path / "types.ts.json").write_text("previous")
        config = make_config(dump_csn=True)
        config.output.mode = OutputMode.ERROR_IF_EXISTS
        with pytest.raises(OutputPathError):
            PipelineGenerator(csn, config).write(tmp_path / "types.ts")
        assert not (tmp_path / "types.ts").exists()

    def test_tree_output_below_a_file(self, csn, tmp_path):
        (tmp_path / "blocker").write_text("")
        with pytest.raises(OutputPathError, match="Cannot create output directory"):
            PipelineGenerator(csn, make_config(layout=Layout.TREE)).write(tmp_path / "blocker" / "out")

    def test_without_atomic_write(self, csn, tmp_path):
        config = make_config()
        config.output.atomic_write = False
        PipelineGenerator(csn, config).write(tmp_path / "types.ts")
        assert (tmp_path / "types.ts").exists()

    def test_written_enums_are_declarations(self, csn, tmp_path):
        result = PipelineGenerator(csn, make_config()).write(tmp_path / "types.ts")
        unit = unit_of(result, "sap.common")
        assert isinstance(declaration(unit, "Entity"), EnumDeclaration)
