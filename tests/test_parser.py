"""Tests for the TypeScript lexer and parser."""

import pytest

from model_schema.parsing import SourceLexer, SourceParser, parse_source
from model_schema.parsing.lexer import unescape_string
from model_schema.syntax import (
    ArrayType,
    ArrowFunction,
    BooleanLiteral,
    CallExpression,
    ClassDeclaration,
    Identifier,
    ImportDeclaration,
    KeywordType,
    LiteralType,
    MemberExpression,
    MethodDeclaration,
    NewExpression,
    NumericLiteral,
    ObjectExpression,
    PropertyDeclaration,
    QualifiedName,
    RawStatement,
    StringLiteral,
    TemplateLiteral,
    TypeReference,
    UnaryExpression,
    UnionType,
)


@pytest.fixture
def lexer():
    lex = SourceLexer()
    lex.build()
    return lex


@pytest.fixture
def parser():
    p = SourceParser()
    p.build()
    return p


def first_member(source: str):
    source_file = parse_source(source)
    return source_file.classes[0].members[0]


class TestSourceLexer:
    """Tests for the source lexer."""

    def test_tokenize_import(self, lexer):
        """Test tokenizing an import declaration."""
        tokens = lexer.tokenize('import Realm from "realm";')
        assert [t.type for t in tokens] == ["IMPORT", "IDENTIFIER", "FROM", "STRING", "SEMI"]

    def test_tokenize_property(self, lexer):
        """Test tokenizing an optional property."""
        tokens = lexer.tokenize("name?: string;")
        assert [t.type for t in tokens] == ["IDENTIFIER", "QUESTION", "COLON", "STRING_TYPE", "SEMI"]

    def test_tokenize_arrow(self, lexer):
        """Test that => is a single token."""
        tokens = lexer.tokenize("() => x")
        assert [t.type for t in tokens] == ["LPAREN", "RPAREN", "ARROW", "IDENTIFIER"]

    def test_comments_ignored(self, lexer):
        """Test that line and block comments produce no tokens."""
        tokens = lexer.tokenize("// line comment\nx /* block\ncomment */")
        assert [t.type for t in tokens] == ["IDENTIFIER"]

    def test_line_numbers(self, lexer):
        """Test line numbers across block comments."""
        tokens = lexer.tokenize("a\n/* one\ntwo */\nb")
        assert [t.lineno for t in tokens] == [1, 4]

    def test_newline_before(self, lexer):
        """Test flagging tokens that start a new line."""
        tokens = lexer.tokenize("a b\n  c /* x\n */ d")
        assert [t.newline_before for t in tokens] == [True, False, True, True]

    def test_template_literal(self, lexer):
        """Test tokenizing a template literal."""
        tokens = lexer.tokenize("`hello ${name}`")
        assert [t.type for t in tokens] == ["TEMPLATE"]

    def test_illegal_character(self, lexer):
        """Test rejecting a character outside the language."""
        with pytest.raises(SyntaxError, match="Illegal character"):
            lexer.tokenize("name: string §")

    def test_unescape_string(self):
        """Test decoding escapes in string literals."""
        assert unescape_string('"a\\nb"') == "a\nb"
        assert unescape_string("'it\\'s'") == "it's"
        assert unescape_string('"\\u0041\\x42"') == "AB"
        assert unescape_string('"plain"') == "plain"


class TestImports:
    """Tests for parsing import declarations."""

    def test_default_and_named(self):
        """Test an import with default and named bindings."""
        source_file = parse_source('import Realm, { Types, List as RealmList } from "realm";')
        declaration = source_file.statements[0]
        assert isinstance(declaration, ImportDeclaration)
        assert declaration.source.value == "realm"
        assert [(s.kind, s.local, s.imported) for s in declaration.specifiers] == [
            ("default", "Realm", None),
            ("named", "Types", "Types"),
            ("named", "RealmList", "List"),
        ]

    def test_namespace(self):
        """Test a namespace import."""
        source_file = parse_source("import * as R from 'realm'")
        specifier = source_file.imports[0].specifiers[0]
        assert specifier.kind == "namespace"
        assert specifier.local == "R"

    def test_type_only(self):
        """Test a type-only import."""
        source_file = parse_source('import type { ObjectSchema } from "realm";')
        declaration = source_file.imports[0]
        assert declaration.type_only
        assert declaration.specifiers[0].type_only

    def test_inline_type_specifier(self):
        """Test a type-only named specifier."""
        source_file = parse_source('import { type Types, BSON } from "realm";')
        specifiers = source_file.imports[0].specifiers
        assert specifiers[0].type_only
        assert not specifiers[1].type_only

    def test_side_effect_import(self):
        """Test an import with no bindings."""
        source_file = parse_source('import "reflect-metadata";')
        assert source_file.imports[0].specifiers == ()

    def test_misspelled_type_keyword(self):
        """Test that only "type" may precede named imports."""
        with pytest.raises(SyntaxError):
            parse_source('import typo { X } from "y";')

    def test_misspelled_type_keyword_default(self):
        """Test that only "type" may precede a default import."""
        with pytest.raises(SyntaxError, match="Syntax error at .typo."):
            parse_source('import typo X from "y";')

    def test_without_semicolons(self):
        """Test imports ended by a line break or the end of the file."""
        source = 'import Realm from "realm"\nimport { Types } from "realm"\nclass A extends Realm.Object {}'
        statements = parse_source(source).statements
        assert [type(s) for s in statements] == [ImportDeclaration, ImportDeclaration, ClassDeclaration]
        assert parse_source('import "reflect-metadata"').imports[0].source.value == "reflect-metadata"

    def test_statements_on_one_line_need_semicolons(self):
        """Test that two imports on one line must be separated by a semicolon."""
        with pytest.raises(SyntaxError, match="Syntax error at .import."):
            parse_source('import A from "a" import B from "b";')


class TestClasses:
    """Tests for parsing class declarations."""

    def test_empty_source(self, parser):
        """Test parsing an empty file."""
        assert parser.parse("").statements == ()

    def test_class_with_member_superclass(self):
        """Test an exported class with a generic member superclass."""
        source_file = parse_source("export default class Person extends Realm.Object<Person> {}")
        declaration = source_file.statements[0]
        assert isinstance(declaration, ClassDeclaration)
        assert declaration.export == "export default"
        assert declaration.superclass == MemberExpression(object=Identifier("Realm"), property="Object")
        assert declaration.superclass_type_arguments == (TypeReference(type_name=Identifier("Person")),)

    def test_class_without_superclass(self):
        """Test a class with no extends clause."""
        declaration = parse_source("class Plain { x = 1; }").classes[0]
        assert declaration.superclass is None
        assert len(declaration.members) == 1

    def test_property_declaration(self):
        """Test a property with decorators, modifiers, a type and a value."""
        member = first_member('class A { @index @mapTo("n") static readonly name?: string = "x"; }')
        assert isinstance(member, PropertyDeclaration)
        assert member.name == "name"
        assert member.optional
        assert not member.definite
        assert member.modifiers == ("static", "readonly")
        assert member.type == KeywordType("string")
        assert member.value == StringLiteral(value="x", raw='"x"')
        assert member.decorators[0].expression == Identifier("index")
        assert member.decorators[1].expression == CallExpression(
            callee=Identifier("mapTo"), arguments=(StringLiteral(value="n", raw='"n"'),)
        )

    def test_definite_marker(self):
        """Test a property with a definite assignment marker."""
        member = first_member("class A { name!: string; }")
        assert member.definite
        assert not member.optional

    def test_method_kept_as_text(self):
        """Test that a method is carried through as source text."""
        source = "class A {\n  greet(greeting: string): string {\n    return `${greeting}!`;\n  }\n}"
        member = first_member(source)
        assert isinstance(member, MethodDeclaration)
        assert member.name == "greet"
        assert member.text == "greet(greeting: string): string {\n    return `${greeting}!`;\n  }"

    def test_constructor_and_accessor(self):
        """Test constructors and accessors alongside properties."""
        source = """
        class A {
          constructor(realm: Realm, values: Partial<A>) { super(realm, values); }
          get label(): string { return this.name ?? "none"; }
          name = "a";
        }
        """
        members = parse_source(source).classes[0].members
        assert [type(m) for m in members] == [MethodDeclaration, MethodDeclaration, PropertyDeclaration]
        assert members[1].name == "label"
        assert members[1].text.startswith("get label()")

    def test_syntax_error(self):
        """Test that a syntax error names its line."""
        with pytest.raises(SyntaxError, match="line 2"):
            parse_source("class A {\n  name string;\n}")

    def test_unexpected_end(self):
        """Test a file that ends inside a class."""
        with pytest.raises(SyntaxError, match="end of input"):
            parse_source("class A {")

    def test_members_without_semicolons(self):
        """Test properties ended by a line break or the closing brace."""
        source = """\
class Person extends Realm.Object {
  name!: string
  age!: number
  _id = new Realm.BSON.ObjectId()
  friends!: Realm.List<Person>
  greet() { return this.name }
  static primaryKey = "_id" }
"""
        members = parse_source(source).classes[0].members
        assert [m.name for m in members] == ["name", "age", "_id", "friends", "greet", "primaryKey"]
        assert members[1].type == KeywordType("number")
        assert members[2].value == NewExpression(
            callee=MemberExpression(
                object=MemberExpression(object=Identifier("Realm"), property="BSON"), property="ObjectId"
            ),
        )
        assert members[5].value == StringLiteral(value="_id", raw='"_id"')

    def test_members_on_one_line_need_semicolons(self):
        """Test that two properties on one line must be separated by a semicolon."""
        with pytest.raises(SyntaxError, match="Syntax error at 'age'"):
            parse_source("class A { name!: string age!: number; }")

    @pytest.mark.parametrize("name", ["from", "as", "default", "new", "import", "null", "class", "string", "type"])
    def test_keyword_member_names(self, name):
        """Test properties named with reserved words."""
        member = first_member(f"class Message extends Realm.Object {{ {name}!: string; }}")
        assert member.name == name
        assert member.type == KeywordType("string")

    def test_keyword_method_names(self):
        """Test methods and accessors named with reserved words."""
        source = "class A {\n  delete() {}\n  new(): A { return this; }\n  get default() { return 1; }\n}"
        members = parse_source(source).classes[0].members
        assert [m.name for m in members] == ["delete", "new", "default"]
        assert members[1].text == "new(): A { return this; }"
        assert members[2].text == "get default() { return 1; }"

    def test_two_words_before_a_method(self):
        """Test that only get, set and async may precede a method name."""
        with pytest.raises(SyntaxError, match="Syntax error at 'label'"):
            parse_source("class A { fetch label() {} }")


class TestRawStatements:
    """Tests for top-level code other than imports and classes."""

    def test_kept_as_text(self):
        """Test that other statements are carried through as source text."""
        source = """\
import Realm from "realm";
export type Id = string;

class Person extends Realm.Object { id!: Id; }

export interface Named { name: string }
const LIMIT = 10;
function helper(a: number): number { return { a }.a; }
export default Person;
"""
        statements = parse_source(source).statements
        assert [type(s) for s in statements] == [ImportDeclaration, RawStatement, ClassDeclaration, RawStatement]
        assert statements[1] == RawStatement(text="export type Id = string;")
        assert statements[3].text == source.split("\n", 5)[5].rstrip()

    def test_export_lists(self):
        """Test export lists and re-exports."""
        source = 'export { Person };\nexport * from "./models";'
        assert parse_source(source).statements == (RawStatement(text=source),)

    def test_nested_class_keyword(self):
        """Test that classes inside braces are part of the raw text."""
        source = "function make() { class Inner {} return Inner; }"
        assert parse_source(source).statements == (RawStatement(text=source),)

    def test_unbalanced_brace(self):
        """Test that a stray closing brace is a syntax error."""
        with pytest.raises(SyntaxError, match="Syntax error at '}'"):
            parse_source("const a = 1;\n}")


class TestTypes:
    """Tests for parsing type annotations."""

    def test_qualified_generic_union(self):
        """Test a qualified generic type with a union argument."""
        member = first_member("class A { a: Realm.Types.List<string | undefined>; }")
        assert member.type == TypeReference(
            type_name=QualifiedName(left=QualifiedName(left=Identifier("Realm"), right="Types"), right="List"),
            type_arguments=(UnionType(types=(KeywordType("string"), KeywordType("undefined"))),),
        )

    def test_array_type(self):
        """Test an array type."""
        member = first_member("class A { tags: string[]; }")
        assert member.type == ArrayType(element_type=KeywordType("string"))

    def test_literal_type_arguments(self):
        """Test string literal type arguments."""
        member = first_member('class A { f: LinkingObjects<Person, "friends">; }')
        assert member.type.type_arguments[1] == LiteralType(
            literal=StringLiteral(value="friends", raw='"friends"')
        )

    def test_nested_generics(self):
        """Test nested generic types."""
        member = first_member("class A { m: Dictionary<List<Int>>; }")
        inner = member.type.type_arguments[0]
        assert inner.type_arguments == (TypeReference(type_name=Identifier("Int")),)


class TestExpressions:
    """Tests for parsing initializer expressions."""

    def test_new_expression(self):
        """Test a new expression with a member callee."""
        member = first_member("class A { id = new Realm.BSON.ObjectId(); }")
        assert member.value == NewExpression(
            callee=MemberExpression(
                object=MemberExpression(object=Identifier("Realm"), property="BSON"), property="ObjectId"
            ),
        )

    def test_new_without_arguments(self):
        """Test a new expression without parentheses."""
        member = first_member("class A { at = new Date; }")
        assert member.value == NewExpression(callee=Identifier("Date"), has_arguments=False)

    def test_negative_number(self):
        """Test folding a negated number into a literal."""
        member = first_member("class A { score = -1.5; }")
        assert member.value == NumericLiteral(value=-1.5, raw="-1.5")

    def test_numbers(self):
        """Test hex, integer and exponent numbers."""
        assert first_member("class A { n = 0x1F; }").value.value == 31
        assert first_member("class A { n = 10; }").value.value == 10
        assert first_member("class A { n = 1e3; }").value.value == 1000.0

    def test_booleans_and_templates(self):
        """Test boolean and template literal values."""
        assert first_member("class A { b = false; }").value == BooleanLiteral(False)
        assert first_member("class A { t = `x`; }").value == TemplateLiteral(raw="`x`")

    def test_arrow_function(self):
        """Test an arrow function initializer."""
        member = first_member("class A { make = () => new Date(); }")
        assert member.value == ArrowFunction(body=NewExpression(callee=Identifier("Date")))

    def test_object_literal(self):
        """Test an object literal with reserved-word keys."""
        member = first_member('class A { static schema = { name: "A", properties: {}, default: [1, 2], }; }')
        assert isinstance(member.value, ObjectExpression)
        assert [p.key for p in member.value.properties] == ["name", "properties", "default"]

    def test_call_chain(self):
        """Test a call on a member chain."""
        member = first_member("class A { x = Realm.BSON.ObjectId.generate(1, 'a'); }")
        assert isinstance(member.value, CallExpression)
        assert len(member.value.arguments) == 2

    def test_double_negation(self):
        """Test that negating a negative number folds back to a positive literal."""
        assert first_member("class A { n: number = - -1; }").value == NumericLiteral(value=1, raw="1")
        assert first_member("class A { n = -(-2.5); }").value == NumericLiteral(value=2.5, raw="2.5")

    def test_negated_identifier(self):
        """Test negating something other than a number."""
        member = first_member("class A { n = - -x; }")
        assert member.value == UnaryExpression(
            operator="-", argument=UnaryExpression(operator="-", argument=Identifier("x"))
        )
