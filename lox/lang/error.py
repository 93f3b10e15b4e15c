"""Error handling for the Lox interpreter. Two kinds of errors are reported while running source text:

- static errors (StaticError): found by the Scanner or Parser. They are reported as soon as they are found, and
  scanning/parsing carries on so that further independent errors surface in the same pass. A program with a static
  error is never interpreted.
- runtime errors (LoxRuntimeError): raised by the Interpreter and unwound back to Interpreter.interpret, which reports
  them and abandons the rest of the pass.

Every error reaches ErrorHandler exactly once. If any other type of error makes it all the way to ErrorHandler, it is
assumed to be an internal issue.
"""

import sys

from termcolor import colored

from lox.grammar.tokens import TokenType


class LoxError(Exception):
    """Base class for every error the interpreter reports to the user."""

    def __init__(self, msg, line=None, where="", internal=False):
        super().__init__(msg)
        self.msg = msg
        self.line = line    # source line the error is attributed to (None if unknown)
        self.where = where  # e.g. " at 'x'" or " at end"
        self.internal = internal


class StaticError(LoxError):
    """Error found while scanning or parsing."""


class ParseError(StaticError):
    """Raised by the Parser when a production cannot be completed. Only ever caught at the declaration boundary."""


class LoxRuntimeError(LoxError):
    """Error raised while evaluating a program. token is the offending token, used to attribute the error to a line."""

    def __init__(self, token, msg):
        super().__init__(msg, line=token.line if token is not None else None)
        self.token = token


class ErrorHandler:
    """Error sink for a session. Can also be used as a context manager that turns Python errors escaping the with
    block into reported errors (errors other than LoxErrors are reported as internal).
    """
    ERROR = "red"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream  # defaults to sys.stderr at write time
        self.traceback = {}   # path: source text, used to show the offending line

        self.errors = []  # every error reported since the last reset
        self.had_error = False
        self.had_runtime_error = False

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = None

    def register_source(self, path, source):
        """Registers the source text being run from path. Should be called prior to Session.run."""
        self.traceback[path] = source

    def reset(self):
        """Forgets static errors. Called between lines in interactive mode so one bad line doesn't block the next."""
        self.had_error = False
        self.errors = []

    def error(self, line, message, where=""):
        """Reports a static error found at line."""
        self.report(StaticError(message, line=line, where=where))

    def token_error(self, token, message):
        """Reports a static error at token and returns it, so the caller can raise it."""
        where = " at end" if token.typ is TokenType.EOF else f" at '{token.lexeme}'"
        error = ParseError(message, line=token.line, where=where)
        self.report(error)
        return error

    def report(self, error):
        """Prints static error and marks the current run as failed."""
        self.errors.append(error)
        self.had_error = True

        error_msg = self._source_context(error.line)
        error_msg += colored(f"[line {error.line}] ", attrs=["bold"])
        error_msg += colored("Error", ErrorHandler.ERROR, attrs=["bold"]) + f"{error.where}: {error.msg}"
        self._write(error_msg)

    def runtime_error(self, error):
        """Prints runtime error. Unlike static errors, this doesn't stop later runs in the same session."""
        self.errors.append(error)
        self.had_runtime_error = True

        error_msg = colored(error.msg, ErrorHandler.ERROR, attrs=["bold"])
        if error.line is not None:
            error_msg += "\n" + colored(f"[line {error.line}]", attrs=["bold"])
        self._write(error_msg)

    def throw(self, error):
        """Throws error that stops the driver itself (unreadable file, internal issue). Exits if self.fatal."""
        self.errors.append(error)

        error_msg = ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._write(error_msg)

        if self.fatal:
            sys.exit(1)

    def _source_context(self, line):
        """Returns the registered source line for line, formatted like a traceback entry (empty if unknown)."""
        for path, source in self.traceback.items():
            if source is None or line is None:
                continue
            lines = source.splitlines()
            if 0 < line <= len(lines) and lines[line - 1].strip():
                return f"  File '{path}', line {line}:\n    {lines[line - 1].strip()}\n"
        return ""

    def _write(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LoxError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LoxError("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, LoxRuntimeError):
            self.runtime_error(exc_val)
        elif exc_type is not None and issubclass(exc_type, StaticError):
            self.report(exc_val)
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(LoxError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
