"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd
import io

from lox.lang.error import ErrorHandler
from lox.lang.lexical import Scanner
from lox.lang.session import RunStatus
from lox.lang.tokens import TokenType


class Shell(cmd.Cmd):
    """lox interpreter shell."""
    intro = "lox interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self._tmp_line = ""
        self.last_status = RunStatus.OK

    @staticmethod
    def needs_continuation(source):
        """Whether source has unclosed braces, i.e. the user is still typing a block. Braces are counted on the scanned
        tokens, so those inside strings and comments don't count. Lexical errors are left for the real run to report.
        """
        depth = 0
        for token in Scanner(source, ErrorHandler(io.StringIO())).scan_tokens():
            if token.type is TokenType.LEFT_BRACE:
                depth += 1
            elif token.type is TokenType.RIGHT_BRACE:
                depth -= 1
        return depth > 0

    def default(self, line):
        """Executes arbitrary lox source."""
        source = self._tmp_line + line + "\n"

        if Shell.needs_continuation(source):
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        self.last_status = self.sess.run(source)
        self.sess.error_handler.reset()  # one bad line shouldn't poison the next

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro. 'help' followed by anything else is lox source."""
        if arg:
            self.default(f"help {arg}")
            return False
        print("Welcome to the lox interpreter!\n\n"
              "lox is a small dynamically-typed scripting language with first-class functions, \n"
              "closures and classes. Statements end with ';' and blocks may span several lines.\n\n"
              "Try it out by typing 'var greeting = \"hi\";'. Next, try typing 'print greeting;'.\n"
              "Declarations persist between lines, so functions and classes can be built up \n"
              "one line at a time.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True

    def do_exit(self, arg):
        """Exits interpreter. 'exit' followed by anything else is lox source that happens to start with 'exit'."""
        if arg:
            self.default(f"exit {arg}")
            return False
        return True
