"""State shared by parsing and execution: the symbol table, the input-data stream, and the Context object that
carries both (plus the lexer during parsing) through every parse/execute call.
"""

import re

from corelang.grammar.lexical import Kind, Lexer
from corelang.lang.error import (CoreException, DuplicateDeclaration, InsufficientInputData, UnexpectedToken,
                                 UninitializedRead)


WORD_BITS = 32


def wrap(value):
    """Wraps value to a WORD_BITS-bit two's complement integer."""
    half = 1 << (WORD_BITS - 1)
    return (value + half) % (1 << WORD_BITS) - half


class SymbolTable:
    """Maps declared identifiers to their value, or None if they have not been assigned yet."""

    def __init__(self, names=()):
        self._values = dict.fromkeys(names)

    def declare(self, name):
        if name in self._values:
            raise DuplicateDeclaration(name)
        self._values[name] = None

    def is_declared(self, name):
        return name in self._values

    def read(self, name):
        if name not in self._values:
            raise CoreException("'{}' has no symbol table entry", name, internal=True)

        value = self._values[name]
        if value is None:
            raise UninitializedRead(name)
        return value

    def write(self, name, value):
        self._values[name] = value

    def cleared(self):
        """Returns a new table with the same declarations and no values."""
        return SymbolTable(self._values)

    def __iter__(self):
        return iter(self._values)

    def __repr__(self):
        return f"SymbolTable({self._values})"


class InputData:
    """Free-form text that read statements pull optionally-signed integers out of, left to right."""
    INTEGER = re.compile(r"[+-]?\d+")

    def __init__(self, text=""):
        self.text = text

    def next_integer(self, name):
        """Removes the next integer from the text and returns it. name is the identifier being read into."""
        match = InputData.INTEGER.search(self.text)
        if match is None:
            raise InsufficientInputData(name)

        self.text = self.text[:match.start()] + self.text[match.end():]
        return wrap(int(match.group()))

    def __bool__(self):
        return InputData.INTEGER.search(self.text) is not None


class Context:
    """Everything a parse or execute call needs. During parsing, lexer is the lexeme source and declaring is True
    only inside the declaration section. During execution, data is consumed and write output is appended to output.
    """

    def __init__(self, lexer=None, symbols=None, data=None):
        self.lexer = lexer
        self.symbols = SymbolTable() if symbols is None else symbols
        self.data = InputData() if data is None else data

        self.declaring = False
        self.output = []

    @classmethod
    def for_source(cls, text, symbols=None):
        """Returns a parsing Context positioned at the first lexeme of text."""
        ctx = cls(Lexer(text), symbols)
        ctx.lexer.next()
        return ctx

    @property
    def lookahead(self):
        return self.lexer.current

    def check(self, *kinds):
        """Whether or not the lookahead is one of kinds."""
        return self.lookahead.kind in kinds

    def skip(self):
        """Consumes the lookahead."""
        self.lexer.next()

    def accept(self, *kinds):
        """Consumes and returns the lookahead if it is one of kinds, else returns None."""
        if self.check(*kinds):
            lexeme = self.lookahead
            self.skip()
            return lexeme
        return None

    def expect(self, *kinds):
        """Consumes and returns the lookahead, which must be one of kinds."""
        if not self.check(*kinds):
            raise UnexpectedToken(kinds, self.lookahead)
        return self.accept(*kinds)

    def at_end(self):
        return self.check(Kind.EOF)
