"""Lexical analysis for the CORE language: classified lexemes produced one at a time from a program text.

Every lexeme kind is a LexRule, and the rules are tried in registration order at the current scan position:

```
<reserved>   ::= "program" | "begin" | "end" | "int" | "if" | "then" | "else" | "while" | "loop" | "read" | "write"
<symbol>     ::= ";" | "," | "[" | "]" | "&&" | "||" | "(" | ")" | "+" | "-" | "*" | "!=" | "==" | "<=" | ">="
<short_sym>  ::= "=" | "!" | "<" | ">"        ; registered after the two-character symbols they prefix
<integer>    ::= [0-9]+                       ; at most 8 characters
<identifier> ::= [A-Z]+ [0-9]*                ; at most 8 characters
```

The first rule that matches wins, so registration order is part of the language: reserved words come before
identifiers, and "==" comes before "=". A run longer than a rule's maximum length does not match that rule at all.
"""

import re
from dataclasses import dataclass
from enum import IntEnum

from corelang.lang.error import IllegalLexeme


class Kind(IntEnum):
    """Lexeme kinds. Values are part of the external interface (see `--tokens`)."""
    PROGRAM = 1
    BEGIN = 2
    END = 3
    INT = 4
    IF = 5
    THEN = 6
    ELSE = 7
    WHILE = 8
    LOOP = 9
    READ = 10
    WRITE = 11

    SEMICOLON = 12
    COMMA = 13
    ASSIGN = 14
    NOT = 15
    LBRACKET = 16
    RBRACKET = 17
    AND = 18
    OR = 19
    LPAREN = 20
    RPAREN = 21
    PLUS = 22
    MINUS = 23
    STAR = 24
    NEQ = 25
    EQ = 26
    LT = 27
    GT = 28
    LTE = 29
    GTE = 30

    INTEGER = 31
    IDENTIFIER = 32
    EOF = 33


class LexRule:
    """A lexeme kind, its pattern, and an optional maximum lexeme length."""

    def __init__(self, kind, pattern, max_length=None):
        self.kind = kind
        self.pattern = re.compile(pattern)
        self.max_length = max_length

    def match(self, text, pos=0):
        """Returns the lexeme text matched at exactly pos, or None."""
        match = self.pattern.match(text, pos)
        if match is None or not match.group():
            return None
        if self.max_length is not None and len(match.group()) > self.max_length:
            return None
        return match.group()

    def __repr__(self):
        return f"LexRule({self.kind.name}, '{self.pattern.pattern}', max_length={self.max_length})"


@dataclass(frozen=True)
class Lexeme:
    kind: Kind
    text: str
    number: int  # lexemes consumed so far, for diagnostics

    def __repr__(self):
        return f"Lexeme({self.kind.name}, '{self.text}', #{self.number})"


MAX_LENGTH = 8

RULES = [
    LexRule(Kind.PROGRAM, "program"),
    LexRule(Kind.BEGIN, "begin"),
    LexRule(Kind.END, "end"),
    LexRule(Kind.INT, "int"),
    LexRule(Kind.IF, "if"),
    LexRule(Kind.THEN, "then"),
    LexRule(Kind.ELSE, "else"),
    LexRule(Kind.WHILE, "while"),
    LexRule(Kind.LOOP, "loop"),
    LexRule(Kind.READ, "read"),
    LexRule(Kind.WRITE, "write"),

    LexRule(Kind.SEMICOLON, ";"),
    LexRule(Kind.COMMA, ","),
    LexRule(Kind.LBRACKET, r"\["),
    LexRule(Kind.RBRACKET, r"\]"),
    LexRule(Kind.AND, "&&"),
    LexRule(Kind.OR, r"\|\|"),
    LexRule(Kind.LPAREN, r"\("),
    LexRule(Kind.RPAREN, r"\)"),
    LexRule(Kind.PLUS, r"\+"),
    LexRule(Kind.MINUS, "-"),
    LexRule(Kind.STAR, r"\*"),
    LexRule(Kind.NEQ, "!="),
    LexRule(Kind.EQ, "=="),
    LexRule(Kind.LTE, "<="),
    LexRule(Kind.GTE, ">="),

    # prefixes of the symbols above
    LexRule(Kind.ASSIGN, "="),
    LexRule(Kind.NOT, "!"),
    LexRule(Kind.LT, "<"),
    LexRule(Kind.GT, ">"),

    LexRule(Kind.INTEGER, "[0-9]+", MAX_LENGTH),
    LexRule(Kind.IDENTIFIER, "[A-Z]+[0-9]*", MAX_LENGTH),
]

# spelling of every fixed-text kind, used by the printer
SPELLING = {rule.kind: rule.pattern.pattern.replace("\\", "") for rule in RULES[:-2]}

WHITESPACE = re.compile(r"\s*")


class Lexer:
    """Pull-based scanner over one program text. The current lexeme is None until next is first called."""

    def __init__(self, text, rules=None):
        self.text = text
        self.rules = RULES if rules is None else rules

        self.pos = WHITESPACE.match(text).end()  # leading whitespace is never a lexeme
        self.count = 0
        self.current = None

    @property
    def remaining(self):
        return self.text[self.pos:]

    def next(self):
        """Consumes and returns the next lexeme. Returns an EOF lexeme once the text is exhausted, and raises an
        IllegalLexeme if no rule matches at the scan position.
        """
        if self.pos >= len(self.text):
            self.current = Lexeme(Kind.EOF, "", self.count)
            return self.current

        for rule in self.rules:
            match = rule.match(self.text, self.pos)
            if match is not None:
                self.pos = WHITESPACE.match(self.text, self.pos + len(match)).end()
                self.count += 1
                self.current = Lexeme(rule.kind, match, self.count)
                return self.current

        raise IllegalLexeme(self.count, self.remaining)

    def __iter__(self):
        """Yields every lexeme, ending with (and including) EOF."""
        while True:
            lexeme = self.next()
            yield lexeme
            if lexeme.kind is Kind.EOF:
                return


def tokenize(text):
    """Returns all lexemes of text, including the final EOF lexeme."""
    return list(Lexer(text))
