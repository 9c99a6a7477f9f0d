import os
import tempfile
import unittest

from corelang.lang.error import (CoreException, IllegalLexeme, InsufficientInputData, NestingTooDeep,
                                 UndeclaredIdentifier, UninitializedRead)
from corelang.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def test_run(self):
        cases = {
            ("program int A, B; begin A = 1 + 2 * 3; B = A; write A, B; end", ""): ["A = 7", "B = 7"],
            ("program int X; begin read X; write X; end", "42"): ["X = 42"],
            ("program int X; begin X = 0; while (X < 3) loop X = X + 1; end; write X; end", ""): ["X = 3"],
            ("program int X; begin X = 5 - 2 - 1; write X; end", ""): ["X = 4"],
            ("program int A, B, C; begin read A, B; read C; write C, B, A; end", "1\n-2 garbage +3"):
                ["C = 3", "B = -2", "A = 1"],
            ("program int A, B, C; begin A = 1; if [(A == A) || (B == C)] then write A; end; end", ""): ["A = 1"],
        }
        for (source, data), expected in cases.items():
            result = Session(source, data).run()
            self.assertTrue(result.ok, source)
            self.assertEqual(expected, result.output, source)

    def test_runtime_errors(self):
        cases = {
            ("program int A, B; begin A = 1; write A, B; end", ""): (UninitializedRead, "B", ["A = 1"]),
            ("program int A, B; begin A = B + 1; write A; end", ""): (UninitializedRead, "B", []),
            ("program int X, Y; begin read X, Y; write X; end", "5"): (InsufficientInputData, "Y", []),
            ("program int X; begin read X; end", "no digits"): (InsufficientInputData, "X", []),
        }
        for (source, data), (error, name, output) in cases.items():
            result = Session(source, data).run()
            self.assertFalse(result.ok, source)
            self.assertIsInstance(result.error, error, source)
            self.assertEqual(name, result.error.name, source)
            self.assertEqual(output, result.output, source)

    def test_parse_error_prevents_run(self):
        sess = Session("program int A; begin A = 1; write A; B = 2; end")
        parsed = sess.parse()
        self.assertFalse(parsed.ok)
        self.assertIsNone(parsed.program)
        self.assertIsInstance(parsed.error, UndeclaredIdentifier)

        result = sess.run()
        self.assertIs(parsed.error, result.error)
        self.assertEqual([], result.output)

        self.assertRaises(CoreException, sess.pretty)

    def test_parse_cached(self):
        sess = Session("program int A; begin A = 1; end")
        self.assertIs(sess.parse(), sess.parse())
        self.assertIsInstance(Session("program int a;").parse().error, IllegalLexeme)

    def test_run_twice(self):
        sess = Session("program int X, Y; begin read X; Y = X * 2; write Y; end", "21 99")
        for __ in range(2):
            result = sess.run()
            self.assertEqual(["Y = 42"], result.output)

    def test_pretty(self):
        sess = Session("program int X; begin read X; write X; end")
        self.assertEqual("program\n    int X;\nbegin\n    read X;\n    write X;\nend\n", sess.pretty())

    def test_nesting_too_deep(self):
        depth = 5000
        sess = Session("program int A; begin A = " + "(" * depth + "1" + ")" * depth + "; end")
        parsed = sess.parse()
        self.assertIsInstance(parsed.error, NestingTooDeep)
        self.assertEqual("parsing", parsed.error.phase)

    def test_is_complete(self):
        cases = {
            "": True,
            "program int X;": False,
            "program int X; begin": False,
            "program int X; begin if (X == 1) then": False,
            "program int X; begin if (X == 1) then X = 2; end;": False,
            "program int X; begin if (X == 1) then X = 2; end; end": True,
            "program int X; begin while (X == 1) loop X = 2; end; end": True,
            "program $": True,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.is_complete(case), case)

    def test_load(self):
        with tempfile.TemporaryDirectory() as tmp:
            program_path = os.path.join(tmp, "prog.core")
            data_path = os.path.join(tmp, "prog.data")
            with open(program_path, "w") as file:
                file.write("program\n  int X;\nbegin\n  read X;\n  write X;\nend\n")
            with open(data_path, "w") as file:
                file.write("-17\n")

            sess = Session.load(program_path, data_path)
            self.assertEqual(program_path, sess.path)
            self.assertEqual(["X = -17"], sess.run().output)

            self.assertEqual("", Session.load(program_path).data)
            self.assertRaises(CoreException, Session.load, os.path.join(tmp, "missing.core"))


if __name__ == '__main__':
    unittest.main()
