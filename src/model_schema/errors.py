"""Errors raised while extracting schemas from model classes."""

from __future__ import annotations

from dataclasses import dataclass

LINKING_OBJECTS_USAGE = (
    'Correct syntax is: `fieldName: Realm.LinkingObjects<LinkedObjectType, "invertedPropertyName">`'
)


class SchemaTransformError(ValueError):
    """Base class for fatal errors aborting the transform of one file."""

    def __init__(self, message: str, class_name: str, property_name: str | None = None) -> None:
        self.class_name = class_name
        self.property_name = property_name
        if property_name is None:
            location = f"Class '{class_name}'"
        else:
            location = f"Property '{property_name}' of class '{class_name}'"
        super().__init__(f"{location}: {message}")


class LinkingObjectsError(SchemaTransformError):
    """A ``LinkingObjects`` property is declared incorrectly."""

    def __init__(self, message: str, class_name: str, property_name: str) -> None:
        super().__init__(f"{message}. {LINKING_OBJECTS_USAGE}", class_name, property_name)


class LinkingObjectsArityError(LinkingObjectsError):
    """``LinkingObjects`` was given a wrong number of type arguments."""


class LinkingObjectsOptionalError(LinkingObjectsError):
    """A ``LinkingObjects`` property was marked optional."""


class LinkingObjectsArgumentTypeError(LinkingObjectsError):
    """A ``LinkingObjects`` type argument has the wrong shape."""


class DuplicateSchemaStaticError(SchemaTransformError):
    """The class already declares its own ``static schema``."""

    def __init__(self, class_name: str) -> None:
        super().__init__(
            "Classes extending Realm.Object cannot declare their own 'schema' static; "
            "remove it to use the generated schema",
            class_name,
        )


@dataclass(frozen=True)
class UnresolvedPropertyType:
    """Non-fatal: the type of a property could not be determined."""

    class_name: str
    property_name: str

    @property
    def message(self) -> str:
        return f"Unable to determine type of '{self.property_name}' property on class '{self.class_name}'"
