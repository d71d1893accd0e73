"""Error handling for the plox language. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Lox errors come in three kinds, all of which carry the token they were raised at:
    1. LoxSyntaxError: raised by the scanner/parser, recovered from by synchronization
    2. LoxResolveError: raised by the resolver (static semantic errors)
    3. LoxRuntimeError: raised by the interpreter, aborts the rest of the current run
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a plox error/warning. exprs are the snippets
    that get highlighted when the message is displayed.
    """

    def __init__(self, msg, exprs=None, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        # messages without snippets are used verbatim, so they may contain literal braces
        self.message = msg.format(*self.exprs) if self.exprs else msg

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.message)

    def colored_message(self):
        """Message with the offending snippets bolded."""
        if not self.exprs:
            return self.template
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class LoxError(GenericException):
    """A GenericException raised at a specific token of Lox source."""
    kind = "error"

    def __init__(self, msg, token=None, exprs=None, line=None, where=None):
        super().__init__(msg, exprs)
        self.token = token
        self.line = line if line is not None or token is None else token.line
        self._where = where

    @property
    def where(self):
        """Human readable location of the offending token, e.g. "at 'foo'" or "at end"."""
        if self._where is not None:
            return self._where
        if self.token is None:
            return ""
        if not self.token.lexeme:
            return "at end"
        return f"at '{self.token.lexeme}'"


class LoxSyntaxError(LoxError):
    """Malformed source text or token sequence."""
    kind = "syntax error"


class LoxResolveError(LoxError):
    """Static semantic error: invalid 'this'/'super'/'return' placement, duplicate or self-referencing declaration."""
    kind = "error"


class LoxRuntimeError(LoxError):
    """Type mismatch, undefined variable/property, wrong arity... raised while interpreting."""
    kind = "runtime error"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom plox errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}

    def register_file(self, path, source=None):
        """Registers path (and its source text, used for diagnoses) in traceback."""
        self.traceback[path] = source.splitlines() if source is not None else []

    def add_source(self, path, source):
        """Appends source to path's registered text. Used by the shell, where every line is a separate run."""
        self.traceback.setdefault(path, []).extend(source.split("\n"))

    def source_line(self, line_num):
        """Returns (path, text) of line_num in the most recently registered file, or (path, None)."""
        if not self.traceback:
            return None, None

        path, lines = next(reversed(self.traceback.items()))
        if line_num is None or not 0 < line_num <= len(lines):
            return path, None
        return path, lines[line_num - 1]

    @staticmethod
    def diagnose(line, token, warning=False):
        """Returns line with the offending token highlighted, bolded and underlined with a caret."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        start = min(token.col, len(line))
        end = min(start + max(len(token.lexeme), 1), len(line))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _emit(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stdout)

    def _format(self, error, label, color):
        line_num = getattr(error, "line", None)
        path, line = self.source_line(line_num)

        error_msg = ""
        if path is not None and line_num is not None:
            error_msg += colored(f"{path}:{line_num}: ", attrs=["bold"])
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        where = getattr(error, "where", "")
        error_msg += colored(f"{label}{' ' + where if where else ''}: ", color, attrs=["bold"])
        error_msg += error.colored_message()

        token = getattr(error, "token", None)
        if error.diagnosis and token is not None and line is not None and token.line == line_num and token.lexeme:
            error_msg += "\n" + ErrorHandler.diagnose(line, token, warning=color == ErrorHandler.WARNING)

        return error_msg

    def warn(self, *args, **kwargs):
        """Generates and prints warning message based on args."""
        self._emit(self._format(GenericException(*args, **kwargs), "warning", ErrorHandler.WARNING))

    def report(self, error):
        """Prints a Lox error without exiting. The caller decides what the error means for the current run."""
        self._emit(self._format(error, getattr(error, "kind", "error"), ErrorHandler.ERROR))

    def throw(self, error, status=1):
        """Prints error and, if fatal, exits with status."""
        self.report(error)
        if self.fatal:
            sys.exit(status)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt", diagnosis=False), status=130)
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded", diagnosis=False), status=70)
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
