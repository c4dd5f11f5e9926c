"""Extraction of object schemas from the model classes of one source file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from model_schema.errors import DuplicateSchemaStaticError, UnresolvedPropertyType
from model_schema.mapper import ROOT, resolve_export
from model_schema.options import TransformOptions
from model_schema.parsing import parse_source
from model_schema.printer import print_source
from model_schema.schema import ObjectSchema, SchemaProperty
from model_schema.symbols import SymbolTable
from model_schema.syntax import (
    ClassDeclaration,
    ClassMember,
    PropertyDeclaration,
    SourceFile,
    Statement,
)
from model_schema.visitors import PropertyVisitor, StaticVisitor

logger = logging.getLogger(__name__)

SCHEMA_STATIC = "schema"


@dataclass
class TransformResult:
    """Result of transforming one file."""

    source: SourceFile
    schemas: list[ObjectSchema] = field(default_factory=list)
    warnings: list[UnresolvedPropertyType] = field(default_factory=list)

    @property
    def code(self) -> str:
        """The transformed file as TypeScript source."""
        return print_source(self.source)

    def schema_for(self, class_name: str) -> ObjectSchema | None:
        for schema in self.schemas:
            if schema.name == class_name:
                return schema
        return None


class SchemaTransformer:
    """Adds a ``static schema`` to every class extending the engine's ``Object``.

    The input tree is never modified; :meth:`transform` returns a new one.
    Errors raised for one class abort the whole file.
    """

    def __init__(self, options: TransformOptions | None = None) -> None:
        self.options = options or TransformOptions()

    def transform(self, source_file: SourceFile) -> TransformResult:
        symbols = SymbolTable.from_source(source_file)
        result = TransformResult(source=source_file)

        statements: list[Statement] = []
        for statement in source_file.statements:
            if isinstance(statement, ClassDeclaration) and self.is_model_class(statement, symbols):
                statement = self._transform_class(statement, symbols, result)
            statements.append(statement)

        result.source = SourceFile(statements=tuple(statements))
        return result

    def is_model_class(self, declaration: ClassDeclaration, symbols: SymbolTable) -> bool:
        """True if the class directly extends the recognized base class."""
        if declaration.superclass is None:
            return False
        base = resolve_export(
            declaration.superclass,
            symbols,
            self.options,
            {self.options.base_class: frozenset({ROOT})},
        )
        return base is not None

    def _transform_class(
        self, declaration: ClassDeclaration, symbols: SymbolTable, result: TransformResult
    ) -> ClassDeclaration:
        class_name = declaration.name
        if any(m.is_static and m.name == SCHEMA_STATIC for m in declaration.members):
            raise DuplicateSchemaStaticError(class_name)

        visitor = PropertyVisitor(symbols, self.options, class_name)
        members: list[ClassMember] = []
        properties: dict[str, SchemaProperty] = {}
        statics: list[PropertyDeclaration] = []

        for member in declaration.members:
            if not isinstance(member, PropertyDeclaration):
                members.append(member)
                continue
            if member.is_static:
                statics.append(member)
                members.append(member)
                continue

            visited = visitor.visit(member)
            if visited is None:
                warning = UnresolvedPropertyType(class_name=class_name, property_name=member.name)
                logger.warning(warning.message)
                result.warnings.append(warning)
                members.append(member)
                continue
            properties[member.name] = visited.schema
            members.append(visited.declaration)

        values = StaticVisitor().visit(statics)
        schema = ObjectSchema(
            name=values.get("name", class_name),
            properties=properties,
            primary_key=values.get("primaryKey"),
            embedded=values.get("embedded"),
            asymmetric=values.get("asymmetric"),
        )
        result.schemas.append(schema)
        logger.debug("Generated schema for class '%s' with %d properties", class_name, len(properties))

        members.append(
            PropertyDeclaration(
                name=SCHEMA_STATIC,
                value=schema.to_expression(),
                modifiers=("static",),
            )
        )
        return replace(declaration, members=tuple(members))


def transform_source(text: str, options: TransformOptions | None = None) -> TransformResult:
    """Parse and transform TypeScript source text."""
    return SchemaTransformer(options).transform(parse_source(text))


def extract_schemas(text: str, options: TransformOptions | None = None) -> list[dict]:
    """Return the schemas of all model classes in the source, as plain dicts."""
    return [schema.to_dict() for schema in transform_source(text, options).schemas]
