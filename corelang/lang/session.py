"""Session control for the CORE language. A Session owns one program text and one input-data buffer and runs the
pipeline over them: parse, pretty-print, execute. Phase outcomes are returned as ParseResult/ExecutionResult values
rather than raised, so callers (main, Shell) decide how to present them.
"""

from dataclasses import dataclass, field

from corelang.grammar.context import Context, InputData
from corelang.grammar.lexical import Kind, Lexer
from corelang.grammar.syntax import Program
from corelang.lang.error import CoreException, IllegalLexeme, NestingTooDeep


@dataclass
class ParseResult:
    program: Program = None
    error: CoreException = None

    @property
    def ok(self):
        return self.error is None


@dataclass
class ExecutionResult:
    output: list = field(default_factory=list)  # "NAME = value" lines from write statements, in order
    error: CoreException = None

    @property
    def ok(self):
        return self.error is None


class Session:
    """Governs a CORE run over a program and its input data."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, source, data="", path=SH_FILE):
        self.source = source
        self.data = data
        self.path = path  # used for error messages

        self._parsed = None
        self._symbols = None

    @classmethod
    def load(cls, path, data_path=None):
        """Returns a Session over the program at path, with input data read from data_path (if any)."""
        return cls(cls._read(path), cls._read(data_path) if data_path else "", path)

    @staticmethod
    def _read(path):
        try:
            with open(path, "r") as file:
                return file.read()
        except OSError:
            raise CoreException("'{}' could not be opened", path, diagnosis=False)

    def parse(self):
        """Parses self.source once; later calls return the same ParseResult."""
        if self._parsed is None:
            try:
                ctx = Context.for_source(self.source)
                self._parsed = ParseResult(Program.parse(ctx))
                self._symbols = ctx.symbols
            except CoreException as error:
                self._parsed = ParseResult(error=error)
            except RecursionError:
                self._parsed = ParseResult(error=NestingTooDeep("parsing"))
        return self._parsed

    def pretty(self):
        """Canonical text of the parsed program. Must only be called after a successful parse."""
        parsed = self.parse()
        if not parsed.ok:
            raise CoreException("cannot pretty-print '{}': it did not parse", self.path, internal=True)
        return parsed.program.display() + "\n"

    def run(self):
        """Executes the parsed program against a fresh copy of its symbol table and self.data. Nothing is executed if
        the program did not parse: the parse error is returned instead.
        """
        parsed = self.parse()
        if not parsed.ok:
            return ExecutionResult(error=parsed.error)

        ctx = Context(symbols=self._symbols.cleared(), data=InputData(self.data))
        result = ExecutionResult(ctx.output)
        try:
            parsed.program.execute(ctx)
        except CoreException as error:
            result.error = error
        except RecursionError:
            result.error = NestingTooDeep("execution")
        return result

    @staticmethod
    def is_complete(text):
        """Whether or not text closes every block it opens (program/if/while each need an end). Used by the shell to
        decide on line continuations. Text that does not lex is considered complete so that its error is reported.
        """
        depth = 0
        try:
            for lexeme in Lexer(text):
                if lexeme.kind in (Kind.PROGRAM, Kind.IF, Kind.WHILE):
                    depth += 1
                elif lexeme.kind is Kind.END:
                    depth -= 1
        except IllegalLexeme:
            return True
        return depth <= 0
