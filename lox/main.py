"""Runs a .lox file, or starts the interactive shell when no file is given. Installed as the `lox` console script.

Exit codes follow sysexits.h: 64 for bad usage, 65 when the script has a lexical, syntax or resolution error, 66 when
it can't be read and 70 when it fails at runtime.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.session import RunStatus, Session
from lox.lang.shell import Shell

EX_USAGE = 64


class ArgumentParser(argparse.ArgumentParser):
    """argparse exits with 2 on bad usage; lox uses EX_USAGE."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = ArgumentParser(prog="lox")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ast", action="store_true", help="print the parsed syntax tree before running")
    return parser


def main(argv=None):
    """Runs lox interpreter. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    sess = Session(ErrorHandler(), show_ast=args.ast)

    if args.file is not None:
        return sess.run_file(args.file).value

    Shell(sess).cmdloop()
    return RunStatus.OK.value


if __name__ == "__main__":
    sys.exit(main())
