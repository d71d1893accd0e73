"""Session control for plox. Runs source text through the whole pipeline (scan, parse, resolve, interpret), either
from a file or line by line in command-line mode.
"""

from enum import Enum

from plox.lang.error import GenericException
from plox.grammar import printer
from plox.grammar.parser import Parser
from plox.grammar.resolver import Resolver
from plox.grammar.scanner import Scanner
from plox.runtime.interpreter import Interpreter


class Outcome(Enum):
    """Result of a single run, with the process exit status it maps to."""
    OK = 0
    STATIC_ERROR = 65
    RUNTIME_ERROR = 70

    @property
    def exit_status(self):
        return self.value


class Session:
    """Governs a plox session: one interpreter whose globals and bindings persist across runs."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, out=None, dump=None):
        """dump is None (execute), "tokens" or "ast" (print the scanned tokens / parsed tree instead)."""
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.dump = dump

        self.interpreter = Interpreter(out=out)
        self.out = self.interpreter.out
        self.line_num = 1         # line number the next run starts at

        if self.cmd_line:
            self.error_handler.fatal = False
            self.error_handler.register_file(path)

        elif path == Session.SH_FILE:
            raise GenericException("'{}' is a reserved filename", path, diagnosis=False)

    def run_file(self):
        """Reads self.path and runs it as a single program."""
        try:
            with open(self.path, "r") as file:
                source = file.read()
        except OSError:
            raise GenericException("'{}' could not be opened", self.path, diagnosis=False)

        self.error_handler.register_file(self.path, source)
        return self.run(source)

    def run(self, source):
        """Runs source and returns its Outcome. Every error found on the way is reported through the error handler;
        syntax and resolution errors prevent the program from being executed at all.
        """
        if self.cmd_line:
            self.error_handler.add_source(self.path, source)

        scanner = Scanner(source, self.line_num)
        tokens = scanner.scan_tokens()
        self.line_num = tokens[-1].line + 1

        if self.dump == "tokens":
            for token in tokens:
                self.out.write(f"{token.line:>4} {token}\n")
            return self._fail(scanner.errors, Outcome.STATIC_ERROR)

        parser = Parser(tokens)
        statements = parser.parse()
        if scanner.errors or parser.errors:
            return self._fail(scanner.errors + parser.errors, Outcome.STATIC_ERROR)

        if self.dump == "ast":
            for line in printer.display(statements):
                self.out.write(line + "\n")
            return Outcome.OK

        resolver = Resolver(self.interpreter)
        if resolver.resolve(statements):
            return self._fail(resolver.errors, Outcome.STATIC_ERROR)

        error = self.interpreter.interpret(statements)
        if error is not None:
            return self._fail([error], Outcome.RUNTIME_ERROR)

        return Outcome.OK

    def _fail(self, errors, outcome):
        """Reports errors in source order. Returns outcome if there were any, Outcome.OK otherwise."""
        for error in sorted(errors, key=lambda error: error.line or 0):
            self.error_handler.report(error)
        return outcome if errors else Outcome.OK
