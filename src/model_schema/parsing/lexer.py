"""Lexer for the model-declaration subset of TypeScript."""

import re

import ply.lex as lex


_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r?\n|.)", re.DOTALL)


def unescape_string(raw: str) -> str:
    """Decode a quoted string literal (quotes included) into its value."""

    def replace(m: re.Match[str]) -> str:
        seq = m.group(1)
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] in "ux" and len(seq) > 1:
            return chr(int(seq[1:], 16))
        if seq in ("\n", "\r\n"):
            return ""
        return _ESCAPES.get(seq, seq)

    return _ESCAPE_RE.sub(replace, raw[1:-1])


class SourceLexer:
    """Lexer for tokenizing TypeScript model declarations."""

    # Reserved keywords
    reserved = {
        "import": "IMPORT",
        "from": "FROM",
        "as": "AS",
        "export": "EXPORT",
        "default": "DEFAULT",
        "class": "CLASS",
        "extends": "EXTENDS",
        "static": "STATIC",
        "readonly": "READONLY",
        "declare": "DECLARE",
        "public": "PUBLIC",
        "private": "PRIVATE",
        "protected": "PROTECTED",
        "new": "NEW",
        "true": "TRUE",
        "false": "FALSE",
        "null": "NULL",
        "undefined": "UNDEFINED",
        "boolean": "BOOLEAN_TYPE",
        "string": "STRING_TYPE",
        "number": "NUMBER_TYPE",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "STRING",
        "TEMPLATE",
        "NUMBER",
        "LBRACE",
        "RBRACE",
        "LPAREN",
        "RPAREN",
        "LBRACKET",
        "RBRACKET",
        "LT",
        "GT",
        "COMMA",
        "SEMI",
        "COLON",
        "DOT",
        "QUESTION",
        "BANG",
        "EQUALS",
        "ARROW",
        "PIPE",
        "AT",
        "MINUS",
        "STAR",
        "OTHER",
    ] + list(reserved.values())

    # Simple tokens
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LT = r"<"
    t_GT = r">"
    t_COMMA = r","
    t_SEMI = r";"
    t_COLON = r":"
    t_DOT = r"\."
    t_QUESTION = r"\?"
    t_BANG = r"!"
    t_ARROW = r"=>"
    t_EQUALS = r"="
    t_PIPE = r"\|"
    t_AT = r"@"
    t_MINUS = r"-"
    t_STAR = r"\*"
    # Operators that only ever appear inside method bodies
    t_OTHER = r"[+/%&^~\\#]"

    t_ignore = " \t\r"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore
        self._pending: list[lex.LexToken] = []
        self._line = 0

    def t_COMMENT(self, t: lex.LexToken) -> None:
        r"//[^\n]*"

    def t_BLOCK_COMMENT(self, t: lex.LexToken) -> None:
        r"/\*(?:.|\n)*?\*/"
        t.lexer.lineno += t.value.count("\n")

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"\"(?:[^\"\\\n]|\\.)*\"|'(?:[^'\\\n]|\\.)*'"
        return t

    def t_TEMPLATE(self, t: lex.LexToken) -> lex.LexToken:
        r"`(?:[^`\\]|\\.)*`"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_NUMBER(self, t: lex.LexToken) -> lex.LexToken:
        r"0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_$][a-zA-Z0-9_$]*"
        # Check if it's a reserved word
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at line {t.lexer.lineno}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        kwargs.setdefault("errorlog", lex.NullLogger())
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.lineno = 1
        self.lexer.input(data)
        self._pending = []
        self._line = 0

    def token(self) -> lex.LexToken | None:
        """Return the next token.

        Each token gets a ``newline_before`` flag telling whether a line break
        separates it from the previous token.
        """
        if self._pending:
            return self._pending.pop()
        tok = self.lexer.token()
        if tok is not None:
            tok.newline_before = tok.lineno > self._line
            self._line = self.lexer.lineno
        return tok

    def push_back(self, tok: lex.LexToken) -> None:
        """Return a token to the stream; it is the next one :meth:`token` yields."""
        self._pending.append(tok)

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
