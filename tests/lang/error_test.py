import io
import unittest
from contextlib import redirect_stdout

from corelang.grammar.lexical import Kind, Lexeme
from corelang.lang.error import (CoreException, ErrorHandler, IllegalLexeme, NestingTooDeep, UnexpectedToken,
                                 UninitializedRead)


class CoreExceptionTestCase(unittest.TestCase):

    def test_init(self):
        error = CoreException("'{}' is bad near '{}'", ("ABC DEF", "X"), start=4)
        self.assertEqual("ABC DEF", error.expr)
        self.assertEqual((4, 7), (error.start, error.end))
        self.assertIn("is bad near", error.msg)
        self.assertEqual(error.msg, str(error))
        self.assertFalse(error.internal)

        self.assertEqual("", CoreException("plain").expr)

    def test_illegal_lexeme(self):
        error = IllegalLexeme(3, "$$ X;\nwrite X;")
        self.assertEqual((3, "$$ X;\nwrite X;"), (error.count, error.remaining))
        self.assertEqual("$$ X;", error.expr)
        self.assertEqual((0, 2), (error.start, error.end))

    def test_unexpected_token(self):
        error = UnexpectedToken((Kind.SEMICOLON, Kind.COMMA), Lexeme(Kind.END, "end", 9))
        self.assertEqual((Kind.SEMICOLON, Kind.COMMA), error.expected)
        self.assertEqual((Kind.END, 9), (error.got, error.count))
        for name in ["SEMICOLON(12)", "COMMA(13)", "END(3)"]:
            self.assertIn(name, error.msg)


class ErrorHandlerTestCase(unittest.TestCase):

    def throw(self, error, handler=None):
        handler = handler if handler else ErrorHandler(fatal=False)
        out = io.StringIO()
        with redirect_stdout(out):
            handler.throw(error)
        return out.getvalue()

    def test_diagnose(self):
        diagnosis = ErrorHandler.diagnose(CoreException("{}", "ABC DEF", start=4))
        first, second = diagnosis.split("\n")
        self.assertIn("ABC", first)
        self.assertIn("DEF", first)
        self.assertIn("^~~", second)

    def test_throw(self):
        output = self.throw(UninitializedRead("A"))
        self.assertIn("error: ", output)
        self.assertIn("is read before it is assigned a value", output)

        output = self.throw(CoreException("'{}' broke", "X", internal=True))
        self.assertIn("[internal] ", output)

    def test_throw_location(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("prog.core")
        handler.register_phase("prog.core", "executing")

        output = self.throw(UninitializedRead("A"), handler)
        self.assertIn("prog.core: while executing: ", output)
        self.assertEqual({"prog.core": None}, handler.traceback)

    def test_fatal(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as raised:
                ErrorHandler().throw(UninitializedRead("A"))
        self.assertEqual(1, raised.exception.code)

    def test_warn(self):
        handler = ErrorHandler(fatal=False)
        out = io.StringIO()
        with redirect_stdout(out):
            handler.warn("'{}' looks odd", "prog.core", diagnosis=False)
        self.assertIn("warning: ", out.getvalue())
        self.assertIn("looks odd", out.getvalue())

    def test_exit(self):
        should_suppress = {
            UninitializedRead("A"): "is read before",
            KeyboardInterrupt(): "keyboard interrupt",
            RecursionError(): "nested too deeply",
        }
        for case, expected in should_suppress.items():
            out = io.StringIO()
            with redirect_stdout(out):
                with ErrorHandler(fatal=False):
                    raise case
            self.assertIn(expected, out.getvalue(), case)

        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False):
                    raise ValueError("boom")
        self.assertIn("unknown error", out.getvalue())

    def test_nesting_too_deep(self):
        self.assertEqual("execution", NestingTooDeep("execution").phase)


if __name__ == '__main__':
    unittest.main()
