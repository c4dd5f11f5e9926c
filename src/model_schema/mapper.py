"""Mapping of TypeScript type expressions onto schema type descriptors."""

from __future__ import annotations

from typing import assert_never

from model_schema.errors import (
    LinkingObjectsArgumentTypeError,
    LinkingObjectsArityError,
    LinkingObjectsOptionalError,
)
from model_schema.options import TransformOptions
from model_schema.symbols import SymbolTable, name_parts
from model_schema.syntax import (
    ArrayType,
    EntityName,
    Expression,
    Identifier,
    KeywordType,
    LiteralType,
    ParenthesizedType,
    PropertyDeclaration,
    StringLiteral,
    TypeExpression,
    TypeReference,
    UnionType,
)
from model_schema.types import DEFAULT_NUMERIC_TYPE, PropertyType, TypeDescriptor

# Marks an alias exported at the root of the module, e.g. ``Realm.List``
ROOT = ""

TYPES_NAMESPACE = "Types"
BSON_NAMESPACE = "BSON"

# Exported type aliases and the namespaces each one may be reached through
ALIAS_NAMESPACES: dict[str, frozenset[str]] = {
    "Bool": frozenset({TYPES_NAMESPACE}),
    "String": frozenset({TYPES_NAMESPACE}),
    "Int": frozenset({TYPES_NAMESPACE}),
    "Float": frozenset({TYPES_NAMESPACE}),
    "Double": frozenset({TYPES_NAMESPACE}),
    "Decimal128": frozenset({TYPES_NAMESPACE, BSON_NAMESPACE}),
    "ObjectId": frozenset({TYPES_NAMESPACE, BSON_NAMESPACE}),
    "UUID": frozenset({TYPES_NAMESPACE, BSON_NAMESPACE}),
    "Date": frozenset({TYPES_NAMESPACE}),
    "Data": frozenset({TYPES_NAMESPACE}),
    "List": frozenset({TYPES_NAMESPACE, ROOT}),
    "Set": frozenset({TYPES_NAMESPACE, ROOT}),
    "Dictionary": frozenset({TYPES_NAMESPACE, ROOT}),
    "Mixed": frozenset({TYPES_NAMESPACE, ROOT}),
    "LinkingObjects": frozenset({TYPES_NAMESPACE, ROOT}),
}

SCALAR_ALIASES: dict[str, PropertyType] = {
    "Bool": PropertyType.BOOL,
    "String": PropertyType.STRING,
    "Int": PropertyType.INT,
    "Float": PropertyType.FLOAT,
    "Double": PropertyType.DOUBLE,
    "Decimal128": PropertyType.DECIMAL128,
    "ObjectId": PropertyType.OBJECT_ID,
    "UUID": PropertyType.UUID,
    "Date": PropertyType.DATE,
    "Data": PropertyType.DATA,
    "Mixed": PropertyType.MIXED,
}

COLLECTION_ALIASES: dict[str, PropertyType] = {
    "List": PropertyType.LIST,
    "Set": PropertyType.SET,
    "Dictionary": PropertyType.DICTIONARY,
}

# Unimported globals the storage engine stores natively
GLOBAL_TYPES: dict[str, PropertyType] = {
    "Date": PropertyType.DATE,
    "ArrayBuffer": PropertyType.DATA,
}

KEYWORD_TYPES: dict[str, PropertyType] = {
    "boolean": PropertyType.BOOL,
    "string": PropertyType.STRING,
    "number": DEFAULT_NUMERIC_TYPE,
}


def resolve_export(
    node: Expression | EntityName,
    symbols: SymbolTable,
    options: TransformOptions,
    namespaces: dict[str, frozenset[str]],
) -> str | None:
    """Return the exported name ``node`` denotes in a recognized module.

    Three spellings are accepted for an export ``Name`` living in namespace
    ``NS`` (``ROOT`` for the module itself):

    * ``Name``, imported by name (possibly renamed with ``as``);
    * ``NS.Name``, with ``NS`` imported by name, or ``Root.Name`` with
      ``Root`` the default or namespace import of the module;
    * ``Root.NS.Name``.

    Only names listed in ``namespaces`` are recognized.
    """
    parts = name_parts(node)
    if not parts or not options.is_recognized_module(symbols.resolve_source(node)):
        return None
    binding = symbols.binding_for(node)

    if len(parts) == 1:
        if binding.kind == "named" and binding.imported in namespaces:
            return binding.imported
        return None

    name = parts[-1]
    allowed = namespaces.get(name)
    if allowed is None:
        return None
    if len(parts) == 2:
        if binding.is_module_root:
            return name if ROOT in allowed else None
        return name if binding.imported in allowed else None
    if len(parts) == 3 and binding.is_module_root:
        return name if parts[1] in allowed else None
    return None


def resolve_alias(node: Expression | EntityName, symbols: SymbolTable, options: TransformOptions) -> str | None:
    """Return the storage type alias ``node`` refers to, if any."""
    return resolve_export(node, symbols, options, ALIAS_NAMESPACES)


def resolve_global(node: Expression | EntityName, symbols: SymbolTable) -> PropertyType | None:
    """Map unimported ``Date`` and ``ArrayBuffer`` to their storage types."""
    if isinstance(node, Identifier) and node.name not in symbols:
        return GLOBAL_TYPES.get(node.name)
    return None


class TypeMapper:
    """Converts the type annotations of one class into type descriptors."""

    def __init__(self, symbols: SymbolTable, options: TransformOptions, class_name: str) -> None:
        self.symbols = symbols
        self.options = options
        self.class_name = class_name

    def map_property(self, prop: PropertyDeclaration) -> TypeDescriptor | None:
        if prop.type is None:
            return None
        return self.map_type(prop.type, prop.name, optional=prop.optional)

    def map_type(self, node: TypeExpression, property_name: str, optional: bool = False) -> TypeDescriptor | None:
        """Map a type expression, or return None when it is not understood.

        ``optional`` is True when the declaring property is optional, which
        back-references do not allow.
        """
        match node:
            case KeywordType(keyword=keyword):
                kind = KEYWORD_TYPES.get(keyword)
                return TypeDescriptor(type=kind) if kind else None
            case TypeReference():
                return self._map_reference(node, property_name, optional)
            case UnionType(types=types):
                return self._map_union(types, property_name)
            case ParenthesizedType(type=inner):
                return self.map_type(inner, property_name, optional)
            case ArrayType() | LiteralType():
                return None
            case _:
                assert_never(node)

    def _map_union(self, types: tuple[TypeExpression, ...], property_name: str) -> TypeDescriptor | None:
        if len(types) != 2:
            return None
        first, last = types
        if _is_undefined(first) and not _is_undefined(last):
            other = last
        elif _is_undefined(last) and not _is_undefined(first):
            other = first
        else:
            return None
        descriptor = self.map_type(other, property_name, optional=True)
        return descriptor.as_optional() if descriptor else None

    def _map_reference(self, node: TypeReference, property_name: str, optional: bool) -> TypeDescriptor | None:
        alias = resolve_alias(node.type_name, self.symbols, self.options)
        if alias in SCALAR_ALIASES:
            return TypeDescriptor(type=SCALAR_ALIASES[alias])
        if alias in COLLECTION_ALIASES:
            return self._map_collection(COLLECTION_ALIASES[alias], node, property_name)
        if alias == "LinkingObjects":
            return self._map_linking_objects(node, property_name, optional)

        global_type = resolve_global(node.type_name, self.symbols)
        if global_type is not None:
            return TypeDescriptor(type=global_type)
        if isinstance(node.type_name, Identifier):
            # Assumed to name another model class; existence is not checked
            return TypeDescriptor.link(node.type_name.name)
        return None

    def _map_collection(self, kind: PropertyType, node: TypeReference, property_name: str) -> TypeDescriptor | None:
        if node.type_arguments is None or len(node.type_arguments) != 1:
            return None
        element = self.map_type(node.type_arguments[0], property_name)
        if element is None:
            return None
        if element.type.is_collection or element.type is PropertyType.LINKING_OBJECTS:
            return None
        return TypeDescriptor(type=kind, object_type=element.element_name, optional=element.optional)

    def _map_linking_objects(self, node: TypeReference, property_name: str, optional: bool) -> TypeDescriptor:
        if optional:
            raise LinkingObjectsOptionalError(
                "Properties of type LinkingObjects cannot be optional", self.class_name, property_name
            )
        if node.type_arguments is None:
            raise LinkingObjectsArityError(
                "Missing type arguments for LinkingObjects", self.class_name, property_name
            )
        if len(node.type_arguments) != 2:
            raise LinkingObjectsArityError(
                "Incorrect number of type arguments for LinkingObjects", self.class_name, property_name
            )

        object_type, inverted = node.type_arguments
        if not (isinstance(object_type, TypeReference) and isinstance(object_type.type_name, Identifier)):
            raise LinkingObjectsArgumentTypeError(
                "First type argument for LinkingObjects should be a reference to the linked object's object type",
                self.class_name,
                property_name,
            )
        if not (isinstance(inverted, LiteralType) and isinstance(inverted.literal, StringLiteral)):
            raise LinkingObjectsArgumentTypeError(
                "Second type argument for LinkingObjects should be the property name of the relationship it inverts",
                self.class_name,
                property_name,
            )
        return TypeDescriptor(
            type=PropertyType.LINKING_OBJECTS,
            object_type=object_type.type_name.name,
            inverted_property=inverted.literal.value,
        )


def _is_undefined(node: TypeExpression) -> bool:
    return isinstance(node, KeywordType) and node.keyword == "undefined"
