"""Runs CORE programs from files, or the interactive shell when no file is given. Also uses error handling context
manager. Called from the corelang executable script.
"""

import argparse

from termcolor import colored

from corelang.grammar.lexical import tokenize
from corelang.lang.error import ErrorHandler
from corelang.lang.session import Session
from corelang.lang.shell import Shell


def banner(title):
    """Returns a bold section header."""
    return colored(f"{f' {title} ':=^32}", attrs=["bold"])


def main():
    """Runs CORE interpreter. Called from corelang executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(description="Parse, pretty-print and run a CORE program.")
        parser.add_argument("file", help="program to interpret and run (if empty, goes to command-line mode)",
                            nargs="?")
        parser.add_argument("data", help="input data for read statements (default: no data)", nargs="?")
        parser.add_argument("--tokens", action="store_true", help="print the kind of every lexeme and exit")
        parser.add_argument("--no-pretty", action="store_true", help="do not pretty-print the program")
        args = parser.parse_args()

        if args.file is None:
            Shell(error_handler).cmdloop()
            return

        error_handler.register_file(args.file)
        sess = Session.load(args.file, args.data)

        if args.tokens:
            error_handler.register_phase(args.file, "scanning")
            for lexeme in tokenize(sess.source):
                print(int(lexeme.kind))
            return

        error_handler.register_phase(args.file, "parsing")
        parsed = sess.parse()
        if not parsed.ok:
            error_handler.throw(parsed.error)

        print(banner("INPUT DATA"))
        print(sess.data.strip())
        if not sess.data.strip() and parsed.program.reads:
            error_handler.warn("'{}' has read statements but no input data was given", args.file, diagnosis=False)

        if not args.no_pretty:
            print(banner("PRETTY PRINT"))
            print(sess.pretty(), end="")

        print(banner("EXECUTION"))
        error_handler.register_phase(args.file, "executing")
        result = sess.run()
        for line in result.output:
            print(line)
        if not result.ok:
            error_handler.throw(result.error)

        error_handler.remove_phase(args.file)
        print(colored("success", "green", attrs=["bold"]))
