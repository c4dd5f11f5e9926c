"""Syntax tree for the model-declaration subset of TypeScript."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


# ---- Expressions ----


@dataclass(frozen=True)
class Identifier:
    """A bare name, e.g. ``Realm`` or ``undefined``."""

    name: str


@dataclass(frozen=True)
class MemberExpression:
    """Property access ``object.property``."""

    object: Expression
    property: str


@dataclass(frozen=True)
class StringLiteral:
    value: str
    raw: str


@dataclass(frozen=True)
class TemplateLiteral:
    """A backtick string, kept as raw text."""

    raw: str


@dataclass(frozen=True)
class NumericLiteral:
    value: int | float
    raw: str


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True)
class NullLiteral:
    pass


@dataclass(frozen=True)
class CallExpression:
    callee: Expression
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class NewExpression:
    """Constructor call; ``has_arguments`` is False for ``new Date``."""

    callee: Expression
    arguments: tuple[Expression, ...] = ()
    has_arguments: bool = True


@dataclass(frozen=True)
class UnaryExpression:
    operator: str
    argument: Expression


@dataclass(frozen=True)
class ObjectProperty:
    key: str
    value: Expression
    shorthand: bool = False


@dataclass(frozen=True)
class ObjectExpression:
    properties: tuple[ObjectProperty, ...] = ()


@dataclass(frozen=True)
class ArrayExpression:
    elements: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ArrowFunction:
    """Zero-parameter arrow function with an expression body."""

    body: Expression


Literal = Union[StringLiteral, TemplateLiteral, NumericLiteral, BooleanLiteral, NullLiteral]

Expression = Union[
    Identifier,
    MemberExpression,
    StringLiteral,
    TemplateLiteral,
    NumericLiteral,
    BooleanLiteral,
    NullLiteral,
    CallExpression,
    NewExpression,
    UnaryExpression,
    ObjectExpression,
    ArrayExpression,
    ArrowFunction,
]

LITERAL_TYPES = (StringLiteral, TemplateLiteral, NumericLiteral, BooleanLiteral, NullLiteral)


def is_literal(expr: Expression | None) -> bool:
    """Return whether an expression is a literal value.

    Template strings only count when they interpolate nothing.
    """
    if isinstance(expr, TemplateLiteral):
        return "${" not in expr.raw
    return isinstance(expr, LITERAL_TYPES)


# ---- Type expressions ----


@dataclass(frozen=True)
class QualifiedName:
    """Dotted type name ``left.right``, e.g. ``Realm.Types.Int``."""

    left: EntityName
    right: str


EntityName = Union[Identifier, QualifiedName]


@dataclass(frozen=True)
class KeywordType:
    """One of ``boolean``, ``string``, ``number``, ``undefined``, ``null``."""

    keyword: str


@dataclass(frozen=True)
class TypeReference:
    type_name: EntityName
    type_arguments: tuple[TypeExpression, ...] | None = None


@dataclass(frozen=True)
class UnionType:
    types: tuple[TypeExpression, ...]


@dataclass(frozen=True)
class ArrayType:
    element_type: TypeExpression


@dataclass(frozen=True)
class LiteralType:
    literal: StringLiteral | NumericLiteral | BooleanLiteral


@dataclass(frozen=True)
class ParenthesizedType:
    type: TypeExpression


TypeExpression = Union[KeywordType, TypeReference, UnionType, ArrayType, LiteralType, ParenthesizedType]


def entity_name_parts(name: EntityName) -> list[str]:
    """Flatten a qualified name into its dotted parts."""
    if isinstance(name, Identifier):
        return [name.name]
    return entity_name_parts(name.left) + [name.right]


# ---- Declarations ----


@dataclass(frozen=True)
class Decorator:
    expression: Expression


@dataclass(frozen=True)
class PropertyDeclaration:
    """A class field such as ``@index name?: string = "x";``."""

    name: str
    type: TypeExpression | None = None
    value: Expression | None = None
    optional: bool = False
    definite: bool = False
    modifiers: tuple[str, ...] = ()
    decorators: tuple[Decorator, ...] = ()

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers


@dataclass(frozen=True)
class MethodDeclaration:
    """A method or constructor; the body is carried through as source text."""

    name: str
    text: str
    modifiers: tuple[str, ...] = ()
    decorators: tuple[Decorator, ...] = ()

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers


ClassMember = Union[PropertyDeclaration, MethodDeclaration]


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    superclass: Expression | None = None
    superclass_type_arguments: tuple[TypeExpression, ...] | None = None
    members: tuple[ClassMember, ...] = ()
    export: str | None = None  # None, "export" or "export default"


@dataclass(frozen=True)
class ImportSpecifier:
    """One binding introduced by an import.

    ``kind`` is ``"default"``, ``"namespace"`` or ``"named"``; ``imported`` is
    the exported name for named imports and equals ``local`` unless renamed.
    """

    kind: str
    local: str
    imported: str | None = None
    type_only: bool = False


@dataclass(frozen=True)
class ImportDeclaration:
    source: StringLiteral
    specifiers: tuple[ImportSpecifier, ...] = ()
    type_only: bool = False


@dataclass(frozen=True)
class RawStatement:
    """Top-level code other than imports and classes, carried through verbatim."""

    text: str


Statement = Union[ImportDeclaration, ClassDeclaration, RawStatement]


@dataclass(frozen=True)
class SourceFile:
    statements: tuple[Statement, ...] = field(default_factory=tuple)

    @property
    def imports(self) -> list[ImportDeclaration]:
        return [s for s in self.statements if isinstance(s, ImportDeclaration)]

    @property
    def classes(self) -> list[ClassDeclaration]:
        return [s for s in self.statements if isinstance(s, ClassDeclaration)]
