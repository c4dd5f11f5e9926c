"""Tests for printing syntax trees back to TypeScript."""

from model_schema import parse_source, print_expression, print_source, transform_source
from model_schema.printer import print_import, print_key, print_type, quote
from model_schema.syntax import (
    ArrayType,
    ArrowFunction,
    Identifier,
    KeywordType,
    NumericLiteral,
    ObjectExpression,
    ObjectProperty,
    UnaryExpression,
    UnionType,
)


class TestPrintExpression:
    """Tests for printing expressions."""

    def test_quote(self):
        """Test quoting strings."""
        assert quote("it's") == '"it\'s"'
        assert quote('say "hi"') == '"say \\"hi\\""'

    def test_print_key(self):
        """Test printing object keys."""
        assert print_key("name") == "name"
        assert print_key("$id") == "$id"
        assert print_key("first-name") == '"first-name"'
        assert print_key("'quoted'") == "'quoted'"

    def test_inline_object(self):
        """Test printing an object on one line."""
        expr = ObjectExpression(properties=(ObjectProperty(key="a", value=Identifier("b")),))
        assert print_expression(expr) == "{ a: b }"
        assert print_expression(ObjectExpression()) == "{}"

    def test_multiline_object(self):
        """Test printing an object over several lines."""
        inner = ObjectExpression(properties=(ObjectProperty(key="x", value=Identifier("y")),))
        expr = ObjectExpression(properties=(ObjectProperty(key="a", value=inner),))
        assert print_expression(expr, indent="") == "{\n  a: {\n    x: y\n  }\n}"

    def test_arrow_returning_object(self):
        """Test wrapping an object returned by an arrow function."""
        assert print_expression(ArrowFunction(body=ObjectExpression())) == "() => ({})"

    def test_parsed_expressions(self):
        """Test printing parsed expressions back to their source."""
        source = "class A { v = new Realm.BSON.ObjectId(); w = f(1, 'a', [true, null]); x = new Date; y = -z; }"
        members = parse_source(source).classes[0].members
        assert [print_expression(m.value) for m in members] == [
            "new Realm.BSON.ObjectId()",
            "f(1, 'a', [true, null])",
            "new Date",
            "-z",
        ]

    def test_repeated_unary_minus(self):
        """Test that consecutive minus signs stay separate."""
        negated = UnaryExpression(operator="-", argument=UnaryExpression(operator="-", argument=Identifier("x")))
        assert print_expression(negated) == "- -x"
        literal = UnaryExpression(operator="-", argument=NumericLiteral(value=-1, raw="-1"))
        assert print_expression(literal) == "- -1"
        source = "class A {\n  n = - -x;\n}\n"
        assert print_source(parse_source(source)) == source
        assert parse_source(print_source(parse_source(source))).classes[0].members[0].value == negated


class TestPrintType:
    """Tests for printing type annotations."""

    def test_array_of_union(self):
        """Test parenthesizing a union inside an array type."""
        node = ArrayType(element_type=UnionType(types=(KeywordType("string"), KeywordType("number"))))
        assert print_type(node) == "(string | number)[]"

    def test_parsed_types(self):
        """Test printing parsed types back to their source."""
        source = "class A { a: Realm.Types.List<string | undefined>; b: (number); c: 'x' | -1; }"
        members = parse_source(source).classes[0].members
        assert [print_type(m.type) for m in members] == [
            "Realm.Types.List<string | undefined>",
            "(number)",
            "'x' | -1",
        ]


class TestPrintImport:
    """Tests for printing import declarations."""

    def test_forms(self):
        """Test every import form."""
        source = (
            'import Realm, { Types, List as RealmList } from "realm";\n'
            "import * as R from 'realm';\n"
            'import type { ObjectSchema } from "realm";\n'
            'import { type BSON, Object } from "realm";\n'
            'import "reflect-metadata";'
        )
        printed = [print_import(d) for d in parse_source(source).imports]
        assert printed == [
            'import Realm, { Types, List as RealmList } from "realm";',
            "import * as R from 'realm';",
            'import type { ObjectSchema } from "realm";',
            'import { type BSON, Object } from "realm";',
            'import "reflect-metadata";',
        ]


class TestPrintSource:
    """Tests for printing whole files."""

    def test_empty(self):
        """Test printing an empty file."""
        assert print_source(parse_source("")) == ""

    def test_untouched_source(self):
        """Test printing a file with no model classes."""
        source = (
            'import { a } from "a";\n'
            'import { b } from "b";\n'
            "\n"
            "class Empty {}\n"
            "\n"
            "export class Shape {\n"
            "  @observable private readonly sides?: number = 3;\n"
            "  area(): number {\n"
            "    return 0;\n"
            "  }\n"
            "}\n"
        )
        assert print_source(parse_source(source)) == source

    def test_raw_statements(self):
        """Test printing top-level code other than imports and classes."""
        source = (
            'import Realm from "realm";\n'
            "\n"
            "export type Id = string;\n"
            "\n"
            "class Empty {}\n"
            "\n"
            "export const LIMIT = 10;\n"
            "function helper() {\n"
            "  return LIMIT;\n"
            "}\n"
        )
        assert print_source(parse_source(source)) == source

    def test_transformed_person(self):
        """Test printing a transformed model class."""
        source = """\
import Realm from "realm";

export class Person extends Realm.Object<Person> {
  @index name!: string;
  age?: number = 42;
  _id = new Realm.BSON.ObjectId();
  greet(): string {
    return `Hi ${this.name}`;
  }
}
"""
        assert transform_source(source).code == """\
import Realm from "realm";

export class Person extends Realm.Object<Person> {
  name!: string;
  age?: number = 42;
  _id;
  greet(): string {
    return `Hi ${this.name}`;
  }
  static schema = {
    name: "Person",
    properties: {
      name: {
        type: "string",
        indexed: true
      },
      age: {
        type: "double",
        optional: true,
        default: 42
      },
      _id: {
        type: "objectId",
        default: () => new Realm.BSON.ObjectId()
      }
    }
  };
}
"""
