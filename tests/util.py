"""Helpers shared by the plox test suites."""

import io

from plox.lang.error import ErrorHandler
from plox.lang.session import Session
from plox.grammar.parser import Parser
from plox.grammar.resolver import Resolver
from plox.grammar.scanner import Scanner
from plox.runtime.interpreter import Interpreter


class RecordingHandler(ErrorHandler):
    """Non-fatal ErrorHandler that keeps every reported error and writes its output to a buffer."""

    def __init__(self):
        super().__init__(fatal=False, stream=io.StringIO())
        self.reported = []

    def report(self, error):
        self.reported.append(error)
        super().report(error)

    @property
    def messages(self):
        return [error.message for error in self.reported]


def scan(source):
    return Scanner(source).scan_tokens()


def parse(source):
    """Returns (statements, syntax errors) of source."""
    parser = Parser(scan(source))
    statements = parser.parse()
    return statements, parser.errors


def resolve(source):
    """Returns (statements, interpreter, resolve errors) of source."""
    statements, errors = parse(source)
    assert not errors, [error.message for error in errors]

    interpreter = Interpreter(out=io.StringIO())
    return statements, interpreter, Resolver(interpreter).resolve(statements)


def run(source, path="test.lox"):
    """Runs source in a fresh file-mode session. Returns (outcome, program output, handler)."""
    out = io.StringIO()
    handler = RecordingHandler()
    handler.register_file(path, source)

    outcome = Session(handler, path, cmd_line=False, out=out).run(source)
    return outcome, out.getvalue(), handler
