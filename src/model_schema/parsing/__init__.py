"""Parsing module for TypeScript model declarations."""

from model_schema.parsing.lexer import SourceLexer
from model_schema.parsing.parser import SourceParser, parse_source

__all__ = [
    "SourceLexer",
    "SourceParser",
    "parse_source",
]
