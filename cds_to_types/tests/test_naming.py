"""
Tests for the naming heuristics and emitted names.

Singular/plural derivation is a best-effort English heuristic, not a
linguistic guarantee: these tests pin down its rules, not correct English.
"""

import pytest

from cds_to_types.pipeline.analyzer.name_resolver import NameResolver, pluralize, singularize
from cds_to_types.pipeline.schema_ast import CsnParser, Kind
from cds_to_types.utils import property_key, sanitize_identifier, split_namespace, to_pascal_case


def make_resolver(definitions, **kwargs):
    schema = CsnParser().parse({"definitions": definitions})
    return NameResolver(schema, **kwargs)


class TestSingularPlural:
    @pytest.mark.parametrize(
        "word, singular, plural",
        [
            ("Category", "Category", "Categories"),
            ("Categories", "Category", "Categories"),
            ("Address", "Address", "Addresses"),
            ("Addresses", "Address", "Addresses"),
            ("Books", "Book", "Books"),
            ("Employees", "Employee", "Employees"),
            ("Boxes", "Box", "Boxes"),
            ("Matches", "Match", "Matches"),
            ("Status", "Status", "Statuses"),
            ("Days", "Day", "Days"),
        ],
    )
    def test_derivation(self, word, singular, plural):
        assert singularize(word) == singular
        assert pluralize(singularize(word)) == plural

    @pytest.mark.parametrize("word", ["Species", "News", "Series", "MasterData", "Information", "Equipment"])
    def test_uncountable_words_are_unchanged(self, word):
        assert singularize(word) == word
        assert pluralize(word) == word

    def test_empty_word(self):
        assert singularize("") == ""
        assert pluralize("") == ""


class TestNames:
    def test_annotations_are_used_verbatim(self):
        resolver = make_resolver(
            {"my.People": {"kind": "entity", "@singular": "Human", "@plural": "Humanity", "elements": {}}}
        )
        assert resolver.names("People", "my") == ("Human", "Humanity")

    def test_singular_and_plural_annotations_are_distinct(self):
        resolver = make_resolver({"my.People": {"kind": "entity", "@singular": "Person", "elements": {}}})
        assert resolver.names("People", "my") == ("Person", "Persons")

    def test_derived_names(self):
        resolver = make_resolver({"my.Categories": {"kind": "entity", "elements": {}}})
        assert resolver.names("Categories", "my") == ("Category", "Categories")

    def test_root_entity(self):
        resolver = make_resolver({"Addresses": {"kind": "entity", "elements": {}}})
        assert resolver.names("Addresses", "") == ("Address", "Addresses")


class TestEmittedNames:
    def test_entity_type_name_with_prefix(self):
        resolver = make_resolver({"my.Books": {"kind": "entity", "elements": {}}}, interface_prefix="I")
        assert resolver.type_name("my.Books") == "IBooks"

    def test_entity_type_name_singular(self):
        resolver = make_resolver({"my.Books": {"kind": "entity", "elements": {}}}, use_singular_names=True)
        assert resolver.type_name("my.Books") == "Book"

    def test_type_alias_has_no_prefix(self):
        resolver = make_resolver({"my.Price": {"kind": "type", "type": "cds.Decimal"}}, interface_prefix="I")
        assert resolver.type_name("my.Price") == "Price"

    def test_text_entity_local_name(self):
        resolver = make_resolver(
            {
                "my.Books": {"kind": "entity", "elements": {}},
                "my.Books.texts": {"kind": "entity", "elements": {}},
            }
        )
        assert resolver.local_name("my.Books.texts") == "Books.texts"
        assert resolver.sanitized_name("my.Books.texts") == "Books_texts"

    def test_element_enum_name(self):
        resolver = make_resolver({"my.Books": {"kind": "entity", "elements": {}}})
        assert resolver.element_enum_name("my.Books", "genre") == "BooksGenre"

    def test_action_names(self):
        resolver = make_resolver({}, interface_prefix="I")
        assert resolver.action_names("submitOrder", Kind.ACTION) == (
            "ActionSubmitOrder",
            "IActionSubmitOrderParams",
            "ActionSubmitOrderReturn",
        )
        assert resolver.action_names("countBooks", Kind.FUNCTION)[0] == "FuncCountBooks"


class TestUtils:
    @pytest.mark.parametrize(
        "text, expected",
        [("submitOrder", "SubmitOrder"), ("first_name", "FirstName"), ("Books.texts", "BooksTexts"), ("ID", "ID")],
    )
    def test_to_pascal_case(self, text, expected):
        assert to_pascal_case(text) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [("Books.texts", "Books_texts"), ("my-entity", "my_entity"), ("3D", "_3D"), ("", "_"), ("$self", "$self")],
    )
    def test_sanitize_identifier(self, name, expected):
        assert sanitize_identifier(name) == expected

    def test_property_key(self):
        assert property_key("title") == "title"
        assert property_key("up_") == "up_"
        assert property_key("my-prop") == '"my-prop"'

    def test_split_namespace(self):
        assert split_namespace("foo.bar.A") == ("foo.bar", "A")
        assert split_namespace("A") == ("", "A")
