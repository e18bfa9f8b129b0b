"""Session control for the lox language: runs source text through the scanner, parser, resolver and evaluator, either
one file at a time or one shell line at a time.
"""

from enum import Enum

from lox.lang.error import ErrorHandler
from lox.lang.evaluator import Interpreter
from lox.lang.lexical import Scanner
from lox.lang.parser import Parser
from lox.lang.printer import AstPrinter
from lox.lang.resolver import Resolver


class RunStatus(Enum):
    OK = 0
    STATIC_ERROR = 65   # lexical, syntax or resolution error: nothing was evaluated
    IO_ERROR = 66
    RUNTIME_ERROR = 70


class Session:
    """Governs a lox session. Globals persist across calls to run, so shell lines can build on each other."""
    SH_FILE = "<in>"  # shell pseudo-filename

    def __init__(self, error_handler=None, out=None, show_ast=False):
        self.error_handler = error_handler if error_handler is not None else ErrorHandler()
        self.interpreter = Interpreter(out)
        self.show_ast = show_ast  # print the parsed tree before resolving it

    def run(self, source):
        """Runs source. Static errors (lexical, syntax, resolution) suppress evaluation entirely; a runtime error aborts
        the rest of the run but leaves the session usable. Every stage runs under the error handler, so source nested
        too deeply for any of them is reported as a stack overflow.
        """
        with self.error_handler:
            self._run(source)

        if self.error_handler.had_runtime_error:
            return RunStatus.RUNTIME_ERROR
        if self.error_handler.had_error:
            return RunStatus.STATIC_ERROR
        return RunStatus.OK

    def _run(self, source):
        tokens = Scanner(source, self.error_handler).scan_tokens()
        statements = Parser(tokens, self.error_handler).parse()
        if self.error_handler.had_error:
            return

        if self.show_ast:
            print(AstPrinter().print(statements), file=self.interpreter.out)

        locals_ = Resolver(self.error_handler).resolve(statements)
        if self.error_handler.had_error:
            return

        self.interpreter.resolve(locals_)
        self.interpreter.interpret(statements)

    def run_file(self, path):
        """Runs the whole contents of the file at path."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read()
        except OSError as e:
            self.error_handler.report_io(path, e)
            return RunStatus.IO_ERROR

        return self.run(source)
