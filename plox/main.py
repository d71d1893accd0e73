"""Runs plox source files, or the interactive shell when no file is given. Uses the error handling context manager so
that every error that reaches the top is reported instead of dumping a Python traceback. Installed as the `plox`
console script.
"""

import argparse
import sys

from plox.lang.error import ErrorHandler
from plox.lang.session import Outcome, Session
from plox.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="plox", description="Tree-walking interpreter for the Lox language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")

    group = parser.add_mutually_exclusive_group()
    group.add_argument("--tokens", dest="dump", action="store_const", const="tokens",
                       help="print the scanned tokens instead of running")
    group.add_argument("--ast", dest="dump", action="store_const", const="ast",
                       help="print the parsed syntax tree instead of running")
    return parser


def main(argv=None):
    """Runs plox interpreter. Exits with 65 after a syntax/resolution error and 70 after a runtime error."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        if args.file is not None:
            outcome = Session(error_handler, args.file, cmd_line=False, dump=args.dump).run_file()
            sys.exit(outcome.exit_status)

        Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, dump=args.dump)).cmdloop()
        sys.exit(Outcome.OK.exit_status)


if __name__ == "__main__":
    main()
