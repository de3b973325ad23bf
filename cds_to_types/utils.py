"""
Utility functions for the CDS to TypeScript generator.
"""

import re

# Anything that may not appear in a TypeScript identifier
_NON_IDENTIFIER_PATTERN = re.compile(r"[^A-Za-z0-9_$]")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _capitalize_first(word: str) -> str:
    """Capitalize the first letter only, keeping the rest of the word intact."""
    return word[:1].upper() + word[1:]


def to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase or dotted text to PascalCase.

    Unlike a plain ``str.capitalize`` the inner casing of each word is kept,
    so CDS names such as ``submitOrder`` stay readable.

    Examples:
        "submitOrder" -> "SubmitOrder"
        "first_name" -> "FirstName"
        "Books.texts" -> "BooksTexts"
        "ID" -> "ID"
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    return "".join(_capitalize_first(word) for word in normalized.split() if word)


def sanitize_identifier(name: str) -> str:
    """Turn an arbitrary CDS name into a legal TypeScript identifier.

    Examples:
        "Books.texts" -> "Books_texts"
        "my-entity" -> "my_entity"
        "3D" -> "_3D"
    """
    if not name:
        return "_"
    sanitized = _NON_IDENTIFIER_PATTERN.sub("_", name)
    if sanitized[0].isdigit():
        sanitized = "_" + sanitized
    return sanitized


def split_namespace(fq_name: str) -> tuple[str, str]:
    """Split the namespace off a fully qualified name.

    Examples:
        "foo.bar.A" -> ("foo.bar", "A")
        "A" -> ("", "A")
    """
    namespace, _, name = fq_name.rpartition(".")
    return namespace, name


def is_identifier(name: str) -> bool:
    """Whether a name can be written as a bare TypeScript identifier."""
    return bool(name) and not name[0].isdigit() and not _NON_IDENTIFIER_PATTERN.search(name)


def property_key(name: str) -> str:
    """Property key as written in an interface: quoted unless it is an identifier."""
    if is_identifier(name):
        return name
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'
