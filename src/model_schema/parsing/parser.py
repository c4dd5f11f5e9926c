"""Parser for the model-declaration subset of TypeScript."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import ply.lex as lex
import ply.yacc as yacc

from model_schema.parsing.lexer import SourceLexer, unescape_string
from model_schema.syntax import (
    ArrayExpression,
    ArrayType,
    ArrowFunction,
    BooleanLiteral,
    CallExpression,
    ClassDeclaration,
    Decorator,
    Identifier,
    ImportDeclaration,
    ImportSpecifier,
    KeywordType,
    LiteralType,
    MemberExpression,
    MethodDeclaration,
    NewExpression,
    NullLiteral,
    NumericLiteral,
    ObjectExpression,
    ObjectProperty,
    ParenthesizedType,
    PropertyDeclaration,
    QualifiedName,
    RawStatement,
    SourceFile,
    StringLiteral,
    TemplateLiteral,
    TypeReference,
    UnaryExpression,
    UnionType,
)

ACCESSOR_KEYWORDS = ("get", "set", "async")
MODIFIER_TOKENS = ("STATIC", "READONLY", "DECLARE", "PUBLIC", "PRIVATE", "PROTECTED")


def _any_token_rule(name: str, exclude: tuple[str, str]) -> str:
    """Grammar for one token of a balanced group, e.g. a method body."""
    open_tok, close_tok = exclude
    alternatives = [t for t in SourceLexer.tokens if t not in exclude]
    alternatives.append(f"{open_tok} {name}s {close_tok}")
    return f"{name} : " + "\n| ".join(alternatives)


def _name_rule() -> str:
    """Property names after a dot or as object keys may be reserved words."""
    return "name : IDENTIFIER\n| " + "\n| ".join(SourceLexer.reserved.values())


def string_literal(raw: str) -> StringLiteral:
    return StringLiteral(value=unescape_string(raw), raw=raw)


def numeric_literal(raw: str) -> NumericLiteral:
    if raw[:2].lower() == "0x":
        return NumericLiteral(value=int(raw, 16), raw=raw)
    if any(c in raw for c in ".eE"):
        return NumericLiteral(value=float(raw), raw=raw)
    return NumericLiteral(value=int(raw), raw=raw)


def negate(expr: Any) -> Any:
    """Fold ``-<number>`` into a numeric literal."""
    if isinstance(expr, NumericLiteral):
        raw = expr.raw[1:] if expr.raw.startswith("-") else "-" + expr.raw
        return NumericLiteral(value=-expr.value, raw=raw)
    return UnaryExpression(operator="-", argument=expr)


class SourceParser:
    """Parser producing a :class:`SourceFile` from TypeScript source text."""

    tokens = SourceLexer.tokens
    start = "source_file"

    def __init__(self) -> None:
        self.lexer = SourceLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self._source = ""
        self._inserted_at = -1
        self._inserted_at_end = False

    # ---- Statements ----

    def p_source_file(self, p: yacc.YaccProduction) -> None:
        """source_file : statements"""
        statements = []
        for item in p[1]:
            if isinstance(item, list):
                start, end = item
                item = RawStatement(text=self._source[start:end].rstrip())
            statements.append(item)
        p[0] = SourceFile(statements=tuple(statements))

    def p_statements_empty(self, p: yacc.YaccProduction) -> None:
        """statements : """
        p[0] = []

    def p_statements_multiple(self, p: yacc.YaccProduction) -> None:
        """statements : statements statement"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_statements_raw(self, p: yacc.YaccProduction) -> None:
        """statements : statements raw_piece"""
        # Consecutive raw tokens form one [start, end] span
        p[0] = p[1]
        start, end = p[2]
        if p[0] and isinstance(p[0][-1], list):
            p[0][-1][1] = end
        else:
            p[0].append([start, end])

    def p_raw_piece(self, p: yacc.YaccProduction) -> None:
        """raw_piece : raw_token"""
        p[0] = p[1]

    def p_raw_piece_export(self, p: yacc.YaccProduction) -> None:
        """raw_piece : EXPORT raw_token
                     | EXPORT DEFAULT raw_token"""
        p[0] = (p.lexpos(1), p[len(p) - 1][1])

    def p_raw_token(self, p: yacc.YaccProduction) -> None:
        p[0] = (p.lexpos(1), p.lexpos(1) + len(p[1]))

    p_raw_token.__doc__ = "raw_token : " + "\n| ".join(
        t for t in SourceLexer.tokens if t not in ("IMPORT", "CLASS", "EXPORT", "DEFAULT", "LBRACE", "RBRACE")
    )

    def p_raw_token_group(self, p: yacc.YaccProduction) -> None:
        """raw_token : LBRACE brace_tokens RBRACE"""
        p[0] = (p.lexpos(1), p.lexpos(3) + 1)

    def p_statement_import(self, p: yacc.YaccProduction) -> None:
        """statement : import_declaration
                     | class_declaration"""
        p[0] = p[1]

    def p_statement_export(self, p: yacc.YaccProduction) -> None:
        """statement : EXPORT class_declaration"""
        p[0] = _with_export(p[2], "export")

    def p_statement_export_default(self, p: yacc.YaccProduction) -> None:
        """statement : EXPORT DEFAULT class_declaration"""
        p[0] = _with_export(p[3], "export default")

    # ---- Imports ----

    def p_import_declaration(self, p: yacc.YaccProduction) -> None:
        """import_declaration : IMPORT import_clause FROM STRING SEMI"""
        specifiers, type_only = p[2]
        p[0] = ImportDeclaration(
            source=string_literal(p[4]), specifiers=tuple(specifiers), type_only=type_only
        )

    def p_import_declaration_bare(self, p: yacc.YaccProduction) -> None:
        """import_declaration : IMPORT STRING SEMI"""
        p[0] = ImportDeclaration(source=string_literal(p[2]))

    def p_import_clause_default(self, p: yacc.YaccProduction) -> None:
        """import_clause : IDENTIFIER"""
        p[0] = ([ImportSpecifier(kind="default", local=p[1])], False)

    def p_import_clause_namespace(self, p: yacc.YaccProduction) -> None:
        """import_clause : STAR AS IDENTIFIER"""
        p[0] = ([ImportSpecifier(kind="namespace", local=p[3])], False)

    def p_import_clause_named(self, p: yacc.YaccProduction) -> None:
        """import_clause : named_imports"""
        p[0] = (p[1], False)

    def p_import_clause_default_named(self, p: yacc.YaccProduction) -> None:
        """import_clause : IDENTIFIER COMMA named_imports"""
        p[0] = ([ImportSpecifier(kind="default", local=p[1])] + p[3], False)

    def p_import_clause_default_namespace(self, p: yacc.YaccProduction) -> None:
        """import_clause : IDENTIFIER COMMA STAR AS IDENTIFIER"""
        p[0] = (
            [
                ImportSpecifier(kind="default", local=p[1]),
                ImportSpecifier(kind="namespace", local=p[5]),
            ],
            False,
        )

    def p_import_clause_type_named(self, p: yacc.YaccProduction) -> None:
        """import_clause : IDENTIFIER named_imports"""
        _expect_type_keyword(p, 1)
        p[0] = ([_type_only(s) for s in p[2]], True)

    def p_import_clause_type_namespace(self, p: yacc.YaccProduction) -> None:
        """import_clause : IDENTIFIER STAR AS IDENTIFIER"""
        _expect_type_keyword(p, 1)
        p[0] = ([ImportSpecifier(kind="namespace", local=p[4], type_only=True)], True)

    def p_import_clause_type_default(self, p: yacc.YaccProduction) -> None:
        """import_clause : IDENTIFIER IDENTIFIER"""
        _expect_type_keyword(p, 1)
        p[0] = ([ImportSpecifier(kind="default", local=p[2], type_only=True)], True)

    def p_named_imports(self, p: yacc.YaccProduction) -> None:
        """named_imports : LBRACE import_specifiers RBRACE
                         | LBRACE import_specifiers COMMA RBRACE"""
        p[0] = p[2]

    def p_named_imports_empty(self, p: yacc.YaccProduction) -> None:
        """named_imports : LBRACE RBRACE"""
        p[0] = []

    def p_import_specifiers_single(self, p: yacc.YaccProduction) -> None:
        """import_specifiers : import_specifier"""
        p[0] = [p[1]]

    def p_import_specifiers_multiple(self, p: yacc.YaccProduction) -> None:
        """import_specifiers : import_specifiers COMMA import_specifier"""
        p[0] = p[1] + [p[3]]

    def p_import_specifier(self, p: yacc.YaccProduction) -> None:
        """import_specifier : import_name"""
        p[0] = ImportSpecifier(kind="named", local=p[1], imported=p[1])

    def p_import_specifier_renamed(self, p: yacc.YaccProduction) -> None:
        """import_specifier : import_name AS IDENTIFIER"""
        p[0] = ImportSpecifier(kind="named", local=p[3], imported=p[1])

    def p_import_specifier_type(self, p: yacc.YaccProduction) -> None:
        """import_specifier : IDENTIFIER import_name"""
        _expect_type_keyword(p, 1)
        p[0] = ImportSpecifier(kind="named", local=p[2], imported=p[2], type_only=True)

    def p_import_specifier_type_renamed(self, p: yacc.YaccProduction) -> None:
        """import_specifier : IDENTIFIER import_name AS IDENTIFIER"""
        _expect_type_keyword(p, 1)
        p[0] = ImportSpecifier(kind="named", local=p[4], imported=p[2], type_only=True)

    def p_import_name(self, p: yacc.YaccProduction) -> None:
        """import_name : IDENTIFIER
                       | DEFAULT"""
        p[0] = p[1]

    # ---- Classes ----

    def p_class_declaration(self, p: yacc.YaccProduction) -> None:
        """class_declaration : CLASS IDENTIFIER heritage LBRACE class_members RBRACE"""
        superclass, type_arguments = p[3]
        p[0] = ClassDeclaration(
            name=p[2],
            superclass=superclass,
            superclass_type_arguments=type_arguments,
            members=tuple(p[5]),
        )

    def p_heritage_empty(self, p: yacc.YaccProduction) -> None:
        """heritage : """
        p[0] = (None, None)

    def p_heritage(self, p: yacc.YaccProduction) -> None:
        """heritage : EXTENDS heritage_expression"""
        p[0] = (p[2], None)

    def p_heritage_type_arguments(self, p: yacc.YaccProduction) -> None:
        """heritage : EXTENDS heritage_expression LT type_list GT"""
        p[0] = (p[2], tuple(p[4]))

    def p_heritage_expression_identifier(self, p: yacc.YaccProduction) -> None:
        """heritage_expression : IDENTIFIER"""
        p[0] = Identifier(p[1])

    def p_heritage_expression_member(self, p: yacc.YaccProduction) -> None:
        """heritage_expression : heritage_expression DOT name"""
        p[0] = MemberExpression(object=p[1], property=p[3])

    def p_class_members_empty(self, p: yacc.YaccProduction) -> None:
        """class_members : """
        p[0] = []

    def p_class_members_multiple(self, p: yacc.YaccProduction) -> None:
        """class_members : class_members class_member"""
        p[0] = p[1]
        if p[2] is not None:
            p[0].append(p[2])

    def p_class_member_semi(self, p: yacc.YaccProduction) -> None:
        """class_member : SEMI"""
        p[0] = None

    def p_class_member_property(self, p: yacc.YaccProduction) -> None:
        """class_member : decorators modifiers member_name property_marker type_annotation initializer SEMI"""
        p[0] = PropertyDeclaration(
            name=p[3],
            type=p[5],
            value=p[6],
            optional=p[4] == "?",
            definite=p[4] == "!",
            modifiers=tuple(p[2]),
            decorators=tuple(p[1]),
        )

    def p_class_member_method(self, p: yacc.YaccProduction) -> None:
        """class_member : decorators modifiers member_name method_tail"""
        p[0] = MethodDeclaration(
            name=p[3],
            text=self._source[p.lexpos(3):p[4]],
            modifiers=tuple(p[2]),
            decorators=tuple(p[1]),
        )

    def p_class_member_accessor(self, p: yacc.YaccProduction) -> None:
        """class_member : decorators modifiers IDENTIFIER member_name method_tail"""
        if p[3] not in ACCESSOR_KEYWORDS:
            raise _ActionError(f"Syntax error at '{p[4]}' (line {p.lineno(4)})")
        p[0] = MethodDeclaration(
            name=p[4],
            text=self._source[p.lexpos(3):p[5]],
            modifiers=tuple(p[2]),
            decorators=tuple(p[1]),
        )

    def p_member_name(self, p: yacc.YaccProduction) -> None:
        p[0] = p[1]
        p.set_lexpos(0, p.lexpos(1))
        p.set_lineno(0, p.lineno(1))

    p_member_name.__doc__ = "member_name : IDENTIFIER\n| " + "\n| ".join(
        t for t in SourceLexer.reserved.values() if t not in MODIFIER_TOKENS
    )

    def p_method_tail(self, p: yacc.YaccProduction) -> None:
        """method_tail : LPAREN paren_tokens RPAREN type_annotation LBRACE brace_tokens RBRACE"""
        # End offset of the method text
        p[0] = p.lexpos(7) + 1

    def p_property_marker(self, p: yacc.YaccProduction) -> None:
        """property_marker : QUESTION
                           | BANG
                           | """
        p[0] = p[1] if len(p) > 1 else None

    def p_type_annotation(self, p: yacc.YaccProduction) -> None:
        """type_annotation : COLON type
                           | """
        p[0] = p[2] if len(p) > 1 else None

    def p_initializer(self, p: yacc.YaccProduction) -> None:
        """initializer : EQUALS expression
                       | """
        p[0] = p[2] if len(p) > 1 else None

    def p_decorators_empty(self, p: yacc.YaccProduction) -> None:
        """decorators : """
        p[0] = []

    def p_decorators_multiple(self, p: yacc.YaccProduction) -> None:
        """decorators : decorators AT decorator_expression"""
        p[0] = p[1] + [Decorator(expression=p[3])]

    def p_decorator_expression_identifier(self, p: yacc.YaccProduction) -> None:
        """decorator_expression : IDENTIFIER"""
        p[0] = Identifier(p[1])

    def p_decorator_expression_member(self, p: yacc.YaccProduction) -> None:
        """decorator_expression : decorator_expression DOT name"""
        p[0] = MemberExpression(object=p[1], property=p[3])

    def p_decorator_expression_call(self, p: yacc.YaccProduction) -> None:
        """decorator_expression : decorator_expression LPAREN arguments RPAREN"""
        p[0] = CallExpression(callee=p[1], arguments=tuple(p[3]))

    def p_modifiers_empty(self, p: yacc.YaccProduction) -> None:
        """modifiers : """
        p[0] = []

    def p_modifiers_multiple(self, p: yacc.YaccProduction) -> None:
        p[0] = p[1] + [p[2]]

    p_modifiers_multiple.__doc__ = "modifiers : " + "\n| ".join(f"modifiers {t}" for t in MODIFIER_TOKENS)

    # ---- Balanced token groups (method parameters and bodies) ----

    def p_paren_tokens_empty(self, p: yacc.YaccProduction) -> None:
        """paren_tokens : """
        p[0] = None

    def p_paren_tokens_multiple(self, p: yacc.YaccProduction) -> None:
        """paren_tokens : paren_tokens paren_token"""
        p[0] = None

    def p_paren_token(self, p: yacc.YaccProduction) -> None:
        p[0] = None

    p_paren_token.__doc__ = _any_token_rule("paren_token", ("LPAREN", "RPAREN"))

    def p_brace_tokens_empty(self, p: yacc.YaccProduction) -> None:
        """brace_tokens : """
        p[0] = None

    def p_brace_tokens_multiple(self, p: yacc.YaccProduction) -> None:
        """brace_tokens : brace_tokens brace_token"""
        p[0] = None

    def p_brace_token(self, p: yacc.YaccProduction) -> None:
        p[0] = None

    p_brace_token.__doc__ = _any_token_rule("brace_token", ("LBRACE", "RBRACE"))

    # ---- Types ----

    def p_type(self, p: yacc.YaccProduction) -> None:
        """type : union_type"""
        if len(p[1]) == 1:
            p[0] = p[1][0]
        else:
            p[0] = UnionType(types=tuple(p[1]))

    def p_union_type_single(self, p: yacc.YaccProduction) -> None:
        """union_type : postfix_type"""
        p[0] = [p[1]]

    def p_union_type_multiple(self, p: yacc.YaccProduction) -> None:
        """union_type : union_type PIPE postfix_type"""
        p[0] = p[1] + [p[3]]

    def p_postfix_type(self, p: yacc.YaccProduction) -> None:
        """postfix_type : primary_type"""
        p[0] = p[1]

    def p_postfix_type_array(self, p: yacc.YaccProduction) -> None:
        """postfix_type : postfix_type LBRACKET RBRACKET"""
        p[0] = ArrayType(element_type=p[1])

    def p_primary_type_keyword(self, p: yacc.YaccProduction) -> None:
        """primary_type : BOOLEAN_TYPE
                        | STRING_TYPE
                        | NUMBER_TYPE
                        | UNDEFINED
                        | NULL"""
        p[0] = KeywordType(keyword=p[1])

    def p_primary_type_string_literal(self, p: yacc.YaccProduction) -> None:
        """primary_type : STRING"""
        p[0] = LiteralType(literal=string_literal(p[1]))

    def p_primary_type_numeric_literal(self, p: yacc.YaccProduction) -> None:
        """primary_type : NUMBER"""
        p[0] = LiteralType(literal=numeric_literal(p[1]))

    def p_primary_type_negative_literal(self, p: yacc.YaccProduction) -> None:
        """primary_type : MINUS NUMBER"""
        p[0] = LiteralType(literal=negate(numeric_literal(p[2])))

    def p_primary_type_boolean_literal(self, p: yacc.YaccProduction) -> None:
        """primary_type : TRUE
                        | FALSE"""
        p[0] = LiteralType(literal=BooleanLiteral(value=p[1] == "true"))

    def p_primary_type_reference(self, p: yacc.YaccProduction) -> None:
        """primary_type : entity_name"""
        p[0] = TypeReference(type_name=p[1])

    def p_primary_type_generic(self, p: yacc.YaccProduction) -> None:
        """primary_type : entity_name LT type_list GT"""
        p[0] = TypeReference(type_name=p[1], type_arguments=tuple(p[3]))

    def p_primary_type_parenthesized(self, p: yacc.YaccProduction) -> None:
        """primary_type : LPAREN type RPAREN"""
        p[0] = ParenthesizedType(type=p[2])

    def p_entity_name_identifier(self, p: yacc.YaccProduction) -> None:
        """entity_name : IDENTIFIER"""
        p[0] = Identifier(p[1])

    def p_entity_name_qualified(self, p: yacc.YaccProduction) -> None:
        """entity_name : entity_name DOT name"""
        p[0] = QualifiedName(left=p[1], right=p[3])

    def p_type_list_single(self, p: yacc.YaccProduction) -> None:
        """type_list : type"""
        p[0] = [p[1]]

    def p_type_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_list : type_list COMMA type"""
        p[0] = p[1] + [p[3]]

    # ---- Expressions ----

    def p_expression_postfix(self, p: yacc.YaccProduction) -> None:
        """expression : postfix_expression"""
        p[0] = p[1]

    def p_expression_negate(self, p: yacc.YaccProduction) -> None:
        """expression : MINUS expression"""
        p[0] = negate(p[2])

    def p_expression_arrow(self, p: yacc.YaccProduction) -> None:
        """expression : LPAREN RPAREN ARROW expression"""
        p[0] = ArrowFunction(body=p[4])

    def p_expression_new(self, p: yacc.YaccProduction) -> None:
        """expression : NEW new_callee"""
        p[0] = NewExpression(callee=p[2], has_arguments=False)

    def p_expression_new_arguments(self, p: yacc.YaccProduction) -> None:
        """expression : NEW new_callee LPAREN arguments RPAREN"""
        p[0] = NewExpression(callee=p[2], arguments=tuple(p[4]))

    def p_new_callee_identifier(self, p: yacc.YaccProduction) -> None:
        """new_callee : IDENTIFIER"""
        p[0] = Identifier(p[1])

    def p_new_callee_member(self, p: yacc.YaccProduction) -> None:
        """new_callee : new_callee DOT name"""
        p[0] = MemberExpression(object=p[1], property=p[3])

    def p_postfix_expression(self, p: yacc.YaccProduction) -> None:
        """postfix_expression : primary_expression"""
        p[0] = p[1]

    def p_postfix_expression_member(self, p: yacc.YaccProduction) -> None:
        """postfix_expression : postfix_expression DOT name"""
        p[0] = MemberExpression(object=p[1], property=p[3])

    def p_postfix_expression_call(self, p: yacc.YaccProduction) -> None:
        """postfix_expression : postfix_expression LPAREN arguments RPAREN"""
        p[0] = CallExpression(callee=p[1], arguments=tuple(p[3]))

    def p_primary_expression_identifier(self, p: yacc.YaccProduction) -> None:
        """primary_expression : IDENTIFIER
                              | UNDEFINED"""
        p[0] = Identifier(p[1])

    def p_primary_expression_string(self, p: yacc.YaccProduction) -> None:
        """primary_expression : STRING"""
        p[0] = string_literal(p[1])

    def p_primary_expression_template(self, p: yacc.YaccProduction) -> None:
        """primary_expression : TEMPLATE"""
        p[0] = TemplateLiteral(raw=p[1])

    def p_primary_expression_number(self, p: yacc.YaccProduction) -> None:
        """primary_expression : NUMBER"""
        p[0] = numeric_literal(p[1])

    def p_primary_expression_boolean(self, p: yacc.YaccProduction) -> None:
        """primary_expression : TRUE
                              | FALSE"""
        p[0] = BooleanLiteral(value=p[1] == "true")

    def p_primary_expression_null(self, p: yacc.YaccProduction) -> None:
        """primary_expression : NULL"""
        p[0] = NullLiteral()

    def p_primary_expression_parenthesized(self, p: yacc.YaccProduction) -> None:
        """primary_expression : LPAREN expression RPAREN"""
        p[0] = p[2]

    def p_primary_expression_object(self, p: yacc.YaccProduction) -> None:
        """primary_expression : LBRACE object_properties RBRACE
                              | LBRACE object_properties COMMA RBRACE"""
        p[0] = ObjectExpression(properties=tuple(p[2]))

    def p_primary_expression_object_empty(self, p: yacc.YaccProduction) -> None:
        """primary_expression : LBRACE RBRACE"""
        p[0] = ObjectExpression()

    def p_primary_expression_array(self, p: yacc.YaccProduction) -> None:
        """primary_expression : LBRACKET argument_list RBRACKET
                              | LBRACKET argument_list COMMA RBRACKET"""
        p[0] = ArrayExpression(elements=tuple(p[2]))

    def p_primary_expression_array_empty(self, p: yacc.YaccProduction) -> None:
        """primary_expression : LBRACKET RBRACKET"""
        p[0] = ArrayExpression()

    def p_object_properties_single(self, p: yacc.YaccProduction) -> None:
        """object_properties : object_property"""
        p[0] = [p[1]]

    def p_object_properties_multiple(self, p: yacc.YaccProduction) -> None:
        """object_properties : object_properties COMMA object_property"""
        p[0] = p[1] + [p[3]]

    def p_object_property(self, p: yacc.YaccProduction) -> None:
        """object_property : name COLON expression"""
        p[0] = ObjectProperty(key=p[1], value=p[3])

    def p_object_property_quoted(self, p: yacc.YaccProduction) -> None:
        """object_property : STRING COLON expression
                           | NUMBER COLON expression"""
        p[0] = ObjectProperty(key=p[1], value=p[3])

    def p_arguments(self, p: yacc.YaccProduction) -> None:
        """arguments : argument_list
                     | argument_list COMMA"""
        p[0] = p[1]

    def p_arguments_empty(self, p: yacc.YaccProduction) -> None:
        """arguments : """
        p[0] = []

    def p_argument_list_single(self, p: yacc.YaccProduction) -> None:
        """argument_list : expression"""
        p[0] = [p[1]]

    def p_argument_list_multiple(self, p: yacc.YaccProduction) -> None:
        """argument_list : argument_list COMMA expression"""
        p[0] = p[1] + [p[3]]

    def p_name(self, p: yacc.YaccProduction) -> None:
        p[0] = p[1]

    p_name.__doc__ = _name_rule()

    def p_error(self, p: lex.LexToken | None) -> lex.LexToken:
        # Statements may omit the semicolon at the end of a line or before "}"
        if p is not None and getattr(p, "inserted", False):
            p = p.origin
        elif p is None and not self._inserted_at_end:
            self._inserted_at_end = True
            return self._insert_semicolon(None)
        elif p is not None and (p.type == "RBRACE" or p.newline_before) and p.lexpos != self._inserted_at:
            return self._insert_semicolon(p)
        if p is None:
            raise SyntaxError("Syntax error at end of input")
        raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")

    def _insert_semicolon(self, before: lex.LexToken | None) -> lex.LexToken:
        tok = lex.LexToken()
        tok.type = "SEMI"
        tok.value = ""
        tok.inserted = True
        tok.origin = before
        if before is None:
            tok.lineno = self.lexer.lexer.lineno
            tok.lexpos = len(self._source)
        else:
            tok.lineno = before.lineno
            tok.lexpos = before.lexpos
            self._inserted_at = before.lexpos
            self.lexer.push_back(before)
        self.parser.errok()
        return tok

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        kwargs.setdefault("debug", False)
        kwargs.setdefault("write_tables", False)
        kwargs.setdefault("errorlog", yacc.NullLogger())
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> SourceFile:
        """Parse TypeScript source text into a syntax tree."""
        if self.parser is None:
            self.build()

        self._source = data
        self._inserted_at = -1
        self._inserted_at_end = False
        self.lexer.input(data)
        try:
            result = self.parser.parse(lexer=self.lexer)
        except _ActionError as e:
            raise SyntaxError(str(e)) from None
        if result is None:
            return SourceFile()
        return result


class _ActionError(Exception):
    """Syntax error detected inside a grammar action.

    ply treats a ``SyntaxError`` raised by an action as a request for error
    recovery, so actions raise this instead and :meth:`SourceParser.parse`
    re-raises it as a ``SyntaxError``.
    """


def _with_export(declaration: ClassDeclaration, export: str) -> ClassDeclaration:
    return replace(declaration, export=export)


def _type_only(specifier: ImportSpecifier) -> ImportSpecifier:
    return replace(specifier, type_only=True)


def _expect_type_keyword(p: yacc.YaccProduction, index: int) -> None:
    if p[index] != "type":
        raise _ActionError(f"Syntax error at '{p[index]}' (line {p.lineno(index)})")


def parse_source(data: str) -> SourceFile:
    """Parse TypeScript source text into a :class:`SourceFile`."""
    return SourceParser().parse(data)
