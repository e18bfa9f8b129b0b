"""Error handling for the lox language. Every stage reports through an ErrorHandler: lexical, syntax and resolution
errors are collected (so one run can report several of them), while runtime errors abort the current run. If any other
type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from lox.lang.tokens import TokenType


class LoxError(Exception):
    """Templates a line-numbered diagnostic. where is the location suffix, e.g. " at 'x'" or " at end"."""
    kind = "error"

    def __init__(self, message, line=None, where=""):
        super().__init__(message)
        self.message = message
        self.line = line
        self.where = where

    @classmethod
    def at(cls, token, message):
        """Builds an error located at token."""
        where = " at end" if token.type is TokenType.EOF else f" at '{token.lexeme}'"
        return cls(message, token.line, where)

    def __str__(self):
        location = f"[line {self.line}] " if self.line is not None else ""
        return f"{location}{self.kind}{self.where}: {self.message}"


class LexicalError(LoxError):
    kind = "lexical error"


class ParseError(LoxError):
    """Also used by the parser as its internal unwinding signal during panic-mode recovery."""
    kind = "syntax error"


class ResolutionError(LoxError):
    kind = "resolution error"


class LoxRuntimeError(LoxError):
    kind = "runtime error"

    def __init__(self, token, message):
        if token is None:
            super().__init__(message)
        else:
            super().__init__(message, token.line, f" at '{token.lexeme}'")
        self.token = token


class ErrorHandler:
    """Context manager that collects and prints lox diagnostics, and converts runtime failures escaping the evaluator
    into reported runtime errors.
    """
    ERROR = "red"
    INTERNAL = "magenta"

    def __init__(self, stream=None):
        self.stream = stream  # defaults to sys.stderr at write time
        self.errors = []

        self.had_error = False          # lexical, syntax or resolution error
        self.had_runtime_error = False

    @staticmethod
    def format(error):
        """Returns error as a colored diagnostic line."""
        msg = ""
        if error.line is not None:
            msg += colored(f"[line {error.line}] ", attrs=["bold"])
        msg += colored(error.kind, ErrorHandler.ERROR, attrs=["bold"])
        return msg + f"{error.where}: {error.message}"

    def report(self, error):
        """Prints error and flags this run accordingly."""
        self.errors.append(error)
        if isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
        else:
            self.had_error = True

        print(ErrorHandler.format(error), file=self.stream or sys.stderr)

    def report_io(self, path, error):
        """Reports a source file that could not be read. Not a lox error, so no flag is set."""
        msg = colored("error", ErrorHandler.ERROR, attrs=["bold"])
        print(msg + f": '{path}' could not be opened ({error.strerror})", file=self.stream or sys.stderr)

    def reset(self):
        """Clears the error flags. Called between prompt lines so one bad line doesn't poison the next."""
        self.errors = []
        self.had_error = False
        self.had_runtime_error = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False

        if issubclass(exc_type, LoxRuntimeError):
            self.report(exc_val)
        elif issubclass(exc_type, RecursionError):
            self.report(LoxRuntimeError(None, "Stack overflow."))
        elif issubclass(exc_type, KeyboardInterrupt):
            self.report(LoxRuntimeError(None, "Interrupted."))
        elif issubclass(exc_type, LoxError):
            self.report(exc_val)
        else:
            msg = colored("[internal] ", ErrorHandler.INTERNAL, attrs=["bold"])
            print(msg + f"unknown error: '{exc_type.__name__}: {exc_val}'", file=self.stream or sys.stderr)
            return False

        return True
