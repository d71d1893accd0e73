"""Lexical analysis for plox. Turns source text into a list of Tokens terminated by an EOF token. Errors do not stop
scanning: they are collected in Scanner.errors so that a single run reports all of them.
"""

from plox.lang.error import LoxSyntaxError
from plox.grammar.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single-pass scanner over a source string."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }
    # char: (type if followed by "=", type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }

    def __init__(self, source, line=1):
        """line is the line number of the first line of source (the shell numbers lines across inputs)."""
        self.source = source
        self.tokens = []
        self.errors = []

        self._start = 0
        self._current = 0
        self._line = line
        self._line_start = 0

        self._start_line = line
        self._start_col = 0

    def scan_tokens(self):
        """Scans the whole source. Can only be called once per Scanner."""
        while not self._is_at_end():
            self._start = self._current
            self._start_line = self._line
            self._start_col = self._current - self._line_start
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self._line, self._current - self._line_start))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in Scanner.SINGLE:
            self._add_token(Scanner.SINGLE[char])

        elif char in Scanner.DOUBLE:
            matched, single = Scanner.DOUBLE[char]
            self._add_token(matched if self._match("=") else single)

        elif char == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)

        elif char in " \r\t":
            pass

        elif char == "\n":
            self._newline()

        elif char == "\"":
            self._string()

        elif is_digit(char):
            self._number()

        elif is_alpha(char):
            self._identifier()

        else:
            self._error("Unexpected character.")

    def _string(self):
        while self._peek() != "\"" and not self._is_at_end():
            if self._advance() == "\n":
                self._newline()

        if self._is_at_end():
            self._error("Unterminated string.")
            return

        self._advance()  # closing "
        self._add_token(TokenType.STRING, self.source[self._start + 1:self._current - 1])

    def _number(self):
        while is_digit(self._peek()):
            self._advance()

        # a trailing "." is a separate DOT token, so look past it first
        if self._peek() == "." and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self._start:self._current]))

    def _identifier(self):
        while is_alpha(self._peek()) or is_digit(self._peek()):
            self._advance()

        text = self.source[self._start:self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _add_token(self, typ, literal=None):
        text = self.source[self._start:self._current]
        self.tokens.append(Token(typ, text, literal, self._start_line, self._start_col))

    def _error(self, message):
        token = Token(TokenType.EOF, self.source[self._start:self._current], None, self._start_line, self._start_col)
        self.errors.append(LoxSyntaxError(message, token, line=self._start_line, where=""))

    def _newline(self):
        self._line += 1
        self._line_start = self._current

    def _advance(self):
        char = self.source[self._current]
        self._current += 1
        return char

    def _match(self, expected):
        if self._is_at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self):
        return "" if self._is_at_end() else self.source[self._current]

    def _peek_next(self):
        if self._current + 1 >= len(self.source):
            return ""
        return self.source[self._current + 1]

    def _is_at_end(self):
        return self._current >= len(self.source)


def is_digit(char):
    return len(char) == 1 and "0" <= char <= "9"


def is_alpha(char):
    """Identifiers are ASCII only."""
    return len(char) == 1 and ("a" <= char <= "z" or "A" <= char <= "Z" or char == "_")
