"""
Tests for the rendering helpers of the code backends.
"""

import pytest

from cds_to_types.pipeline.analyzer import EnumDeclaration, EnumMember, InterfaceDeclaration, PropertySignature
from cds_to_types.pipeline.backends import TypeScriptBackend
from cds_to_types.pipeline.backends.base import format_doc_comment, format_literal
from cds_to_types.pipeline.config import GeneratorConfig
from cds_to_types.pipeline.formatters import Formatter, PrettierFormatter


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, "1"),
        (2.5, "2.5"),
        ("P", '"P"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("Ä", '"Ä"'),
        (True, '"true"'),
        (None, '"null"'),
    ],
)
def test_format_literal(value, expected):
    assert format_literal(value) == expected


def test_format_doc_comment_single_line():
    assert format_doc_comment("Books on sale") == "/** Books on sale */"


def test_format_doc_comment_multi_line():
    assert format_doc_comment("First line\n\nThird */ line") == "/**\n * First line\n *\n * Third *\\/ line\n */"


def test_render_interface_with_quoted_key():
    backend = TypeScriptBackend(GeneratorConfig())
    interface = InterfaceDeclaration(
        name="IA",
        heritage=["_.Ibase"],
        properties=[
            PropertySignature(name="id", type="string"),
            PropertySignature(name='"odd-name"', type="number", optional=True),
        ],
        comment="An entity",
    )
    assert backend.render_declaration(interface) == (
        "/** An entity */\n"
        "export interface IA extends _.Ibase {\n"
        "    id: string;\n"
        '    "odd-name"?: number;\n'
        "}"
    )


def test_render_enum():
    backend = TypeScriptBackend(GeneratorConfig())
    enum = EnumDeclaration(name="E", members=[EnumMember(name="a", value="x", has_value=True)])
    assert backend.render_declaration(enum) == 'export enum E {\n    a = "x",\n}'


def test_render_unsupported_declaration():
    with pytest.raises(TypeError):
        TypeScriptBackend(GeneratorConfig()).render_declaration(object())


def test_formatter_falls_back_when_unavailable():
    formatter = PrettierFormatter("cds-to-types-missing-prettier")
    assert not formatter.is_available()
    assert formatter.format("export type A=string", GeneratorConfig().formatter, "index.ts") == "export type A=string"


class UpperCaseFormatter(Formatter):
    def __init__(self, available=True):
        self.available = available
        self.seen = []

    def is_available(self):
        return self.available

    def format(self, code, config, filename):
        self.seen.append(filename)
        return code.upper()


def test_format_files_keeps_order_and_skips_other_files():
    formatter = UpperCaseFormatter()
    files = {"a/index.d.ts": "export {};", "a/index.js": "module.exports = {};", "model.ts.json": "{}"}

    formatted = formatter.format_files(files, GeneratorConfig().formatter)

    assert list(formatted) == list(files)
    assert formatted == {"a/index.d.ts": "EXPORT {};", "a/index.js": "MODULE.EXPORTS = {};", "model.ts.json": "{}"}
    assert formatter.seen == ["a/index.d.ts", "a/index.js"]


def test_format_files_without_tool():
    formatter = UpperCaseFormatter(available=False)
    files = {"index.d.ts": "export {};"}

    assert formatter.format_files(files, GeneratorConfig().formatter) == files
    assert formatter.seen == []


def test_missing_prettier_leaves_rendered_files():
    formatter = PrettierFormatter("cds-to-types-missing-prettier")
    files = {"index.d.ts": "export type A=string", "index.js": "module.exports={}"}
    assert formatter.format_files(files, GeneratorConfig().formatter) == files
