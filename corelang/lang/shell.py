"""Handles interactive/command-line mode for the CORE interpreter. Uses cmd as backend."""

import cmd

from corelang.lang.error import ErrorHandler
from corelang.lang.session import Session


class Shell(cmd.Cmd):
    """CORE interpreter shell."""
    intro = "CORE interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, error_handler=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.error_handler = error_handler if error_handler else ErrorHandler()
        self.error_handler.fatal = False
        self.error_handler.register_file(Session.SH_FILE)

        self.data = ""     # input data for the next program's read statements
        self.sess = None   # last complete program

        self._tmp_line = ""

    def default(self, line):
        """Buffers program text until every block is closed, then parses and runs it."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            text = f"{self._tmp_line}\n{line}" if self._tmp_line else line

            if not Session.is_complete(text):
                self._tmp_line = text
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess = Session(text, self.data)

            self.error_handler.register_phase(Session.SH_FILE, "parsing")
            parsed = self.sess.parse()
            if not parsed.ok:
                self.error_handler.throw(parsed.error)
                return

            self.error_handler.register_phase(Session.SH_FILE, "executing")
            result = self.sess.run()
            for line_out in result.output:
                print(line_out)
            if not result.ok:
                self.error_handler.throw(result.error)
                return

            self.error_handler.remove_phase(Session.SH_FILE)

    def do_data(self, arg):
        """Sets the input data read statements pull integers from, e.g. 'data 1 2 -3'."""
        self.data = arg

    def do_pretty(self, arg):
        """Pretty-prints the last program that parsed."""
        if self.sess is None or not self.sess.parse().ok:
            print("no program has been parsed yet")
        else:
            print(self.sess.pretty(), end="")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the CORE interpreter!\n\n"
              "CORE is a small imperative language of integers, declarations, assignments, \n"
              "if/while blocks and read/write statements. Type a whole program, e.g.\n\n"
              "  program int X; begin X = 1 + 2 * 3; write X; end\n\n"
              "Lines are buffered until every 'program', 'if' and 'while' has its 'end'. \n"
              "Use 'data 1 2 3' to set the integers that 'read' statements consume, and \n"
              "'pretty' to print the last program in canonical form.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter. A line like 'EOF = 1;' is program text, since EOF is a legal identifier."""
        if arg:
            return self.default(f"EOF {arg}")
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
