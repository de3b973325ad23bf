"""
Code generation backends.

Each backend renders analyzed namespaces through Jinja2 templates.
"""

from __future__ import annotations

from .base import CodeBackend
from .javascript_backend import JavaScriptBackend
from .typescript_backend import TypeScriptBackend

__all__ = [
    "CodeBackend",
    "JavaScriptBackend",
    "TypeScriptBackend",
]
