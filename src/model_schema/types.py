"""Property types and type descriptors produced by the type mapper."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class PropertyType(Enum):
    """Storage kinds a schema property can have."""

    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL128 = "decimal128"
    OBJECT_ID = "objectId"
    UUID = "uuid"
    DATE = "date"
    DATA = "data"
    LIST = "list"
    SET = "set"
    DICTIONARY = "dictionary"
    MIXED = "mixed"
    LINKING_OBJECTS = "linkingObjects"
    OBJECT = "object"  # link to another entity

    @property
    def is_collection(self) -> bool:
        return self in COLLECTION_TYPES


COLLECTION_TYPES = frozenset({PropertyType.LIST, PropertyType.SET, PropertyType.DICTIONARY})

# The number keyword cannot tell integers from floating point values
DEFAULT_NUMERIC_TYPE = PropertyType.DOUBLE


@dataclass(frozen=True)
class TypeDescriptor:
    """Canonical description of one property's type."""

    type: PropertyType
    object_type: str | None = None
    inverted_property: str | None = None
    optional: bool = False

    def __post_init__(self) -> None:
        if (self.inverted_property is not None) != (self.type is PropertyType.LINKING_OBJECTS):
            raise ValueError("Only linkingObjects descriptors carry an inverted property name")

    @classmethod
    def link(cls, object_type: str) -> TypeDescriptor:
        return cls(type=PropertyType.OBJECT, object_type=object_type)

    def as_optional(self) -> TypeDescriptor:
        return replace(self, optional=True)

    @property
    def element_name(self) -> str:
        """Name used for this descriptor as the element of a collection."""
        if self.type is PropertyType.OBJECT and self.object_type is not None:
            return self.object_type
        return self.type.value
