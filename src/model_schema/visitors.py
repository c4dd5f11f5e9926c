"""Visitors turning class members into schema entries."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from model_schema.defaults import infer_type
from model_schema.mapper import TypeMapper
from model_schema.options import TransformOptions
from model_schema.schema import DeferredDefault, SchemaProperty
from model_schema.symbols import SymbolTable
from model_schema.syntax import (
    BooleanLiteral,
    CallExpression,
    Decorator,
    Identifier,
    PropertyDeclaration,
    StringLiteral,
    is_literal,
)
from model_schema.types import TypeDescriptor


@dataclass(frozen=True)
class VisitedProperty:
    """Schema entry for a property plus the property as it is emitted."""

    schema: SchemaProperty
    declaration: PropertyDeclaration


class PropertyVisitor:
    """Builds schema properties from the instance properties of one class."""

    def __init__(self, symbols: SymbolTable, options: TransformOptions, class_name: str) -> None:
        self.symbols = symbols
        self.options = options
        self.mapper = TypeMapper(symbols, options, class_name)

    def descriptor_for(self, prop: PropertyDeclaration) -> TypeDescriptor | None:
        """Type from the annotation if there is one, else from the initializer."""
        if prop.type is not None:
            return self.mapper.map_property(prop)
        if prop.value is not None:
            return infer_type(prop.value, self.symbols, self.options)
        return None

    def visit(self, prop: PropertyDeclaration) -> VisitedProperty | None:
        """Return None when the property's type cannot be determined."""
        descriptor = self.descriptor_for(prop)
        if descriptor is None:
            return None

        indexed = False
        map_to = None
        kept: list[Decorator] = []
        for decorator in prop.decorators:
            if self._is_index(decorator):
                indexed = True
            elif (name := self._map_to_argument(decorator)) is not None:
                map_to = name
            else:
                kept.append(decorator)

        value = prop.value
        default = None
        if is_literal(value):
            default = value
        elif value is not None:
            default = DeferredDefault(value)
            value = None

        schema = SchemaProperty.from_descriptor(
            descriptor,
            default=default,
            indexed=indexed,
            map_to=map_to,
        )
        if prop.optional and not schema.optional:
            schema = replace(schema, optional=True)
        declaration = replace(prop, decorators=tuple(kept), value=value)
        return VisitedProperty(schema=schema, declaration=declaration)

    def _is_index(self, decorator: Decorator) -> bool:
        expr = decorator.expression
        return isinstance(expr, Identifier) and expr.name == self.options.index_decorator

    def _map_to_argument(self, decorator: Decorator) -> str | None:
        expr = decorator.expression
        if (
            isinstance(expr, CallExpression)
            and isinstance(expr.callee, Identifier)
            and expr.callee.name == self.options.map_to_decorator
            and len(expr.arguments) == 1
            and isinstance(expr.arguments[0], StringLiteral)
        ):
            return expr.arguments[0].value
        return None


STATIC_STRING_PROPERTIES = ("name", "primaryKey")
STATIC_BOOLEAN_PROPERTIES = ("embedded", "asymmetric")


class StaticVisitor:
    """Collects the schema-level statics of a class.

    Statics with other names, or with a value of the wrong kind, are skipped
    without complaint; classes may carry unrelated statics.
    """

    def visit(self, props: list[PropertyDeclaration]) -> dict[str, Any]:
        statics: dict[str, Any] = {}
        for prop in props:
            if prop.name in STATIC_STRING_PROPERTIES and isinstance(prop.value, StringLiteral):
                statics[prop.name] = prop.value.value
            elif prop.name in STATIC_BOOLEAN_PROPERTIES and isinstance(prop.value, BooleanLiteral):
                statics[prop.name] = prop.value.value
        return statics
