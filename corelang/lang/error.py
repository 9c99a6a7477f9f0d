"""Error handling for the CORE language. Only CoreExceptions should be encountered during a run: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class CoreException(Exception):
    """Templates an error/warning message so that it can be used to throw a CORE error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for CoreException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = str(exprs[0])  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class IllegalLexeme(CoreException):
    """No lexical rule matches at the scan position."""

    def __init__(self, count, remaining):
        self.count = count
        self.remaining = remaining

        snippet = remaining.splitlines()[0] if remaining else remaining
        end = len(snippet.split()[0]) if snippet.split() else 1
        super().__init__("'{}' is not a legal lexeme (after lexeme #{})", (snippet, count), end=end)


class UnexpectedToken(CoreException):
    """Lookahead does not start any of the expected alternatives."""

    def __init__(self, expected, lexeme):
        self.expected = tuple(expected)
        self.got = lexeme.kind
        self.count = lexeme.number

        names = ", ".join(f"{kind.name}({int(kind)})" for kind in self.expected)
        got = f"{lexeme.kind.name}({int(lexeme.kind)})"
        super().__init__("'{}' at lexeme #{}: expected one of {}, got {}", (lexeme.text, self.count, names, got))


class DuplicateDeclaration(CoreException):

    def __init__(self, name):
        self.name = name
        super().__init__("'{}' is already declared", name)


class UndeclaredIdentifier(CoreException):

    def __init__(self, name):
        self.name = name
        super().__init__("'{}' is used after 'begin' but never declared", name)


class UninitializedRead(CoreException):

    def __init__(self, name):
        self.name = name
        super().__init__("'{}' is read before it is assigned a value", name)


class InsufficientInputData(CoreException):

    def __init__(self, name):
        self.name = name
        super().__init__("input data has no integer left to read into '{}'", name, diagnosis=False)


class NestingTooDeep(CoreException):
    """Program nesting exhausted the Python call stack."""

    def __init__(self, phase):
        self.phase = phase
        super().__init__("program is nested too deeply to finish {}: maximum recursion depth exceeded", phase,
                         diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom CORE errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = None

    def register_phase(self, path, phase):
        """Registers the phase (parse/execute) running on path. Should be called prior to Session parse/run."""
        self.traceback[path] = phase

    def remove_phase(self, path):
        """Removes phase from traceback given path. Should be called after successful Session parse/run."""
        self.traceback[path] = None

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        for file, phase in self.traceback.items():
            if phase:
                return colored(f"{file}: while {phase}: ", attrs=["bold"])
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = CoreException(*args, **kwargs)

        error_msg = self._location()
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a CoreException, and self.traceback must be a
        dict of file: phase representing origination of error.
        """
        error_msg = self._location()

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: None for path in self.traceback}  # if error occurred, reset phases

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            pass
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(CoreException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(NestingTooDeep("the current phase"))
        elif issubclass(exc_type, CoreException):
            self.throw(exc_val)
        else:
            self.throw(CoreException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
