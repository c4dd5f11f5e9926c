"""TypeScript emitter for syntax trees.

Output is deterministic: the same tree always prints to the same text.
Method bodies are reproduced verbatim from the parsed source.
"""

from __future__ import annotations

import json
import re
from typing import assert_never

from model_schema.syntax import (
    ArrayExpression,
    ArrayType,
    ArrowFunction,
    BooleanLiteral,
    CallExpression,
    ClassDeclaration,
    ClassMember,
    Decorator,
    EntityName,
    Expression,
    Identifier,
    ImportDeclaration,
    KeywordType,
    LiteralType,
    MemberExpression,
    MethodDeclaration,
    NewExpression,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    ParenthesizedType,
    PropertyDeclaration,
    RawStatement,
    SourceFile,
    StringLiteral,
    TemplateLiteral,
    TypeExpression,
    TypeReference,
    UnaryExpression,
    UnionType,
    entity_name_parts,
)

INDENT = "  "

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")


def quote(value: str) -> str:
    """Quote a string as a double-quoted string literal."""
    return json.dumps(value, ensure_ascii=False)


def print_key(key: str) -> str:
    if _IDENTIFIER_RE.match(key) or key.isdigit():
        return key
    if key[:1] in "\"'":
        return key
    return quote(key)


# ---- Expressions ----


def print_expression(expr: Expression, indent: str | None = None) -> str:
    """Print an expression.

    With ``indent`` set, non-empty object literals span multiple lines with
    their closing brace at ``indent``; otherwise everything is on one line.
    """
    match expr:
        case Identifier(name=name):
            return name
        case MemberExpression(object=obj, property=prop):
            return f"{print_expression(obj, indent)}.{prop}"
        case StringLiteral(raw=raw):
            return raw
        case TemplateLiteral(raw=raw):
            return raw
        case NumericLiteral(raw=raw):
            return raw
        case BooleanLiteral(value=value):
            return "true" if value else "false"
        case NullLiteral():
            return "null"
        case CallExpression(callee=callee, arguments=arguments):
            return f"{print_expression(callee, indent)}({_print_arguments(arguments, indent)})"
        case NewExpression(callee=callee, arguments=arguments, has_arguments=has_arguments):
            if not has_arguments:
                return f"new {print_expression(callee, indent)}"
            return f"new {print_expression(callee, indent)}({_print_arguments(arguments, indent)})"
        case UnaryExpression(operator=operator, argument=argument):
            printed = print_expression(argument, indent)
            if printed.startswith(operator):
                return f"{operator} {printed}"
            return f"{operator}{printed}"
        case ObjectExpression(properties=properties):
            if not properties:
                return "{}"
            if indent is None:
                items = ", ".join(f"{print_key(p.key)}: {print_expression(p.value)}" for p in properties)
                return "{ " + items + " }"
            inner = indent + INDENT
            lines = [f"{inner}{print_key(p.key)}: {print_expression(p.value, inner)}" for p in properties]
            return "{\n" + ",\n".join(lines) + "\n" + indent + "}"
        case ArrayExpression(elements=elements):
            return f"[{_print_arguments(elements, indent)}]"
        case ArrowFunction(body=body):
            printed = print_expression(body, indent)
            if isinstance(body, ObjectExpression):
                printed = f"({printed})"
            return f"() => {printed}"
        case _:
            assert_never(expr)


def _print_arguments(arguments: tuple[Expression, ...], indent: str | None) -> str:
    return ", ".join(print_expression(a, indent) for a in arguments)


# ---- Types ----


def print_entity_name(name: EntityName) -> str:
    return ".".join(entity_name_parts(name))


def print_type(node: TypeExpression) -> str:
    match node:
        case KeywordType(keyword=keyword):
            return keyword
        case TypeReference(type_name=type_name, type_arguments=arguments):
            printed = print_entity_name(type_name)
            if arguments is not None:
                printed += "<" + ", ".join(print_type(a) for a in arguments) + ">"
            return printed
        case UnionType(types=types):
            return " | ".join(print_type(t) for t in types)
        case ArrayType(element_type=element):
            printed = print_type(element)
            if isinstance(element, UnionType):
                printed = f"({printed})"
            return f"{printed}[]"
        case LiteralType(literal=literal):
            return print_expression(literal)
        case ParenthesizedType(type=inner):
            return f"({print_type(inner)})"
        case _:
            assert_never(node)


# ---- Declarations ----


def print_decorators(decorators: tuple[Decorator, ...]) -> str:
    return "".join(f"@{print_expression(d.expression)} " for d in decorators)


def print_member(member: ClassMember, indent: str = INDENT) -> str:
    prefix = print_decorators(member.decorators) + "".join(f"{m} " for m in member.modifiers)
    if isinstance(member, MethodDeclaration):
        return f"{indent}{prefix}{member.text}"

    printed = f"{indent}{prefix}{member.name}"
    if member.optional:
        printed += "?"
    elif member.definite:
        printed += "!"
    if member.type is not None:
        printed += f": {print_type(member.type)}"
    if member.value is not None:
        printed += f" = {print_expression(member.value, indent)}"
    return printed + ";"


def print_class(declaration: ClassDeclaration) -> str:
    header = f"class {declaration.name}"
    if declaration.export:
        header = f"{declaration.export} {header}"
    if declaration.superclass is not None:
        header += f" extends {print_expression(declaration.superclass)}"
        if declaration.superclass_type_arguments is not None:
            header += "<" + ", ".join(print_type(t) for t in declaration.superclass_type_arguments) + ">"
    if not declaration.members:
        return header + " {}"
    body = "\n".join(print_member(m) for m in declaration.members)
    return f"{header} {{\n{body}\n}}"


def print_import(declaration: ImportDeclaration) -> str:
    if not declaration.specifiers and not declaration.type_only:
        return f"import {declaration.source.raw};"

    default = [s for s in declaration.specifiers if s.kind == "default"]
    namespace = [s for s in declaration.specifiers if s.kind == "namespace"]
    named = [s for s in declaration.specifiers if s.kind == "named"]

    clauses = [s.local for s in default]
    clauses += [f"* as {s.local}" for s in namespace]
    if named or not clauses:
        items = []
        for s in named:
            item = s.imported if s.imported == s.local else f"{s.imported} as {s.local}"
            if s.type_only and not declaration.type_only:
                item = f"type {item}"
            items.append(item)
        clauses.append("{ " + ", ".join(items) + " }" if items else "{}")

    keyword = "import type" if declaration.type_only else "import"
    return f"{keyword} {', '.join(clauses)} from {declaration.source.raw};"


def print_source(source_file: SourceFile) -> str:
    """Print a whole file."""
    chunks: list[str] = []
    previous = None
    for statement in source_file.statements:
        match statement:
            case ImportDeclaration():
                printed = print_import(statement)
            case ClassDeclaration():
                printed = print_class(statement)
            case RawStatement(text=text):
                printed = text
            case _:
                assert_never(statement)
        if previous is not None:
            both_imports = isinstance(previous, ImportDeclaration) and isinstance(statement, ImportDeclaration)
            chunks.append("\n" if both_imports else "\n\n")
        chunks.append(printed)
        previous = statement
    return "".join(chunks) + "\n" if chunks else ""
