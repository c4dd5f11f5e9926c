"""Object schemas extracted from model classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from model_schema.parsing.lexer import unescape_string
from model_schema.printer import print_expression, quote
from model_schema.syntax import (
    ArrowFunction,
    BooleanLiteral,
    Expression,
    Literal,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    ObjectProperty,
    StringLiteral,
    TemplateLiteral,
)
from model_schema.types import PropertyType, TypeDescriptor


@dataclass(frozen=True)
class DeferredDefault:
    """A non-literal default, evaluated afresh for every new object."""

    expression: Expression

    @property
    def source(self) -> str:
        return print_expression(self.expression)


Default = Literal | DeferredDefault


@dataclass(frozen=True)
class SchemaProperty:
    """One entry of a schema's property map."""

    type: PropertyType
    object_type: str | None = None
    inverted_property: str | None = None
    optional: bool = False
    default: Default | None = None
    indexed: bool = False
    map_to: str | None = None

    @classmethod
    def from_descriptor(cls, descriptor: TypeDescriptor, **kwargs: Any) -> SchemaProperty:
        return cls(
            type=descriptor.type,
            object_type=descriptor.object_type,
            inverted_property=descriptor.inverted_property,
            optional=descriptor.optional,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type.value}
        if self.optional:
            result["optional"] = True
        if self.object_type is not None:
            result["objectType"] = self.object_type
        if self.inverted_property is not None:
            result["property"] = self.inverted_property
        if isinstance(self.default, DeferredDefault):
            result["default"] = {"source": self.default.source}
        elif self.default is not None:
            result["default"] = literal_value(self.default)
        if self.indexed:
            result["indexed"] = True
        if self.map_to is not None:
            result["mapTo"] = self.map_to
        return result

    def to_expression(self) -> ObjectExpression:
        properties = [_string_property("type", self.type.value)]
        if self.optional:
            properties.append(ObjectProperty(key="optional", value=BooleanLiteral(True)))
        if self.object_type is not None:
            properties.append(_string_property("objectType", self.object_type))
        if self.inverted_property is not None:
            properties.append(_string_property("property", self.inverted_property))
        if isinstance(self.default, DeferredDefault):
            properties.append(ObjectProperty(key="default", value=ArrowFunction(body=self.default.expression)))
        elif self.default is not None:
            properties.append(ObjectProperty(key="default", value=self.default))
        if self.indexed:
            properties.append(ObjectProperty(key="indexed", value=BooleanLiteral(True)))
        if self.map_to is not None:
            properties.append(_string_property("mapTo", self.map_to))
        return ObjectExpression(properties=tuple(properties))


@dataclass(frozen=True)
class ObjectSchema:
    """Schema of one model class, as handed to the storage engine."""

    name: str
    properties: dict[str, SchemaProperty] = field(default_factory=dict)
    primary_key: str | None = None
    embedded: bool | None = None
    asymmetric: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.primary_key is not None:
            result["primaryKey"] = self.primary_key
        if self.embedded is not None:
            result["embedded"] = self.embedded
        if self.asymmetric is not None:
            result["asymmetric"] = self.asymmetric
        result["properties"] = {name: prop.to_dict() for name, prop in self.properties.items()}
        return result

    def to_expression(self) -> ObjectExpression:
        """Build the object literal assigned to the generated ``static schema``."""
        properties = [_string_property("name", self.name)]
        if self.primary_key is not None:
            properties.append(_string_property("primaryKey", self.primary_key))
        if self.embedded is not None:
            properties.append(ObjectProperty(key="embedded", value=BooleanLiteral(self.embedded)))
        if self.asymmetric is not None:
            properties.append(ObjectProperty(key="asymmetric", value=BooleanLiteral(self.asymmetric)))
        properties.append(
            ObjectProperty(
                key="properties",
                value=ObjectExpression(
                    properties=tuple(
                        ObjectProperty(key=name, value=prop.to_expression())
                        for name, prop in self.properties.items()
                    )
                ),
            )
        )
        return ObjectExpression(properties=tuple(properties))


def literal_value(literal: Literal) -> Any:
    """Python value of a literal node."""
    match literal:
        case StringLiteral(value=value) | BooleanLiteral(value=value) | NumericLiteral(value=value):
            return value
        case TemplateLiteral(raw=raw):
            return unescape_string(raw)
        case NullLiteral():
            return None
    raise TypeError(f"Not a literal: {literal!r}")


def _string_property(key: str, value: str) -> ObjectProperty:
    return ObjectProperty(key=key, value=StringLiteral(value=value, raw=quote(value)))
