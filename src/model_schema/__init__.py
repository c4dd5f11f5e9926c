"""Model Schema - static schemas for TypeScript model classes."""

from model_schema.errors import (
    DuplicateSchemaStaticError,
    LinkingObjectsArgumentTypeError,
    LinkingObjectsArityError,
    LinkingObjectsError,
    LinkingObjectsOptionalError,
    SchemaTransformError,
    UnresolvedPropertyType,
)
from model_schema.options import TransformOptions
from model_schema.parsing import SourceParser, parse_source
from model_schema.printer import print_expression, print_source
from model_schema.schema import DeferredDefault, ObjectSchema, SchemaProperty
from model_schema.symbols import Binding, SymbolTable
from model_schema.transform import (
    SchemaTransformer,
    TransformResult,
    extract_schemas,
    transform_source,
)
from model_schema.types import PropertyType, TypeDescriptor

__all__ = [
    # Main API
    "SchemaTransformer",
    "TransformOptions",
    "TransformResult",
    "transform_source",
    "extract_schemas",
    # Parsing and printing
    "SourceParser",
    "parse_source",
    "print_source",
    "print_expression",
    # Schema types
    "ObjectSchema",
    "SchemaProperty",
    "DeferredDefault",
    "PropertyType",
    "TypeDescriptor",
    "Binding",
    "SymbolTable",
    # Errors
    "SchemaTransformError",
    "LinkingObjectsError",
    "LinkingObjectsArityError",
    "LinkingObjectsOptionalError",
    "LinkingObjectsArgumentTypeError",
    "DuplicateSchemaStaticError",
    "UnresolvedPropertyType",
]

__version__ = "0.1.0"
