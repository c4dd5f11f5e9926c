"""Type inference from property initializers."""

from __future__ import annotations

from model_schema.mapper import resolve_alias, resolve_global
from model_schema.options import TransformOptions
from model_schema.symbols import SymbolTable
from model_schema.syntax import (
    BooleanLiteral,
    Expression,
    NewExpression,
    NumericLiteral,
    StringLiteral,
    TemplateLiteral,
    is_literal,
)
from model_schema.types import DEFAULT_NUMERIC_TYPE, PropertyType, TypeDescriptor

# Constructors whose instances the storage engine stores natively
CONSTRUCTOR_TYPES: dict[str, PropertyType] = {
    "Decimal128": PropertyType.DECIMAL128,
    "ObjectId": PropertyType.OBJECT_ID,
    "UUID": PropertyType.UUID,
    "Date": PropertyType.DATE,
    "Data": PropertyType.DATA,
}


def infer_type(
    initializer: Expression, symbols: SymbolTable, options: TransformOptions
) -> TypeDescriptor | None:
    """Infer a descriptor from an initializer when a property has no annotation.

    Booleans, strings and numbers map to their storage types; ``new X()``
    with at most one argument maps when ``X`` is one of the storage engine's
    constructors or the global ``Date``/``ArrayBuffer``.
    """
    if isinstance(initializer, BooleanLiteral):
        return TypeDescriptor(type=PropertyType.BOOL)
    if isinstance(initializer, (StringLiteral, TemplateLiteral)) and is_literal(initializer):
        return TypeDescriptor(type=PropertyType.STRING)
    if isinstance(initializer, NumericLiteral):
        return TypeDescriptor(type=DEFAULT_NUMERIC_TYPE)
    if isinstance(initializer, NewExpression) and len(initializer.arguments) <= 1:
        return _infer_constructed(initializer, symbols, options)
    return None


def _infer_constructed(
    expr: NewExpression, symbols: SymbolTable, options: TransformOptions
) -> TypeDescriptor | None:
    alias = resolve_alias(expr.callee, symbols, options)
    if alias in CONSTRUCTOR_TYPES:
        return TypeDescriptor(type=CONSTRUCTOR_TYPES[alias])
    global_type = resolve_global(expr.callee, symbols)
    if global_type is not None:
        return TypeDescriptor(type=global_type)
    return None
