"""Recursive descent parser for plox. Consumes the scanner's token list and produces a list of statements.

Grammar, lowest precedence first:

```
<program>     ::= <declaration>* EOF
<declaration> ::= <classDecl> | <funDecl> | <varDecl> | <statement>
<classDecl>   ::= "class" IDENTIFIER ( "<" IDENTIFIER )? "{" <function>* "}"
<funDecl>     ::= "fun" <function>
<function>    ::= IDENTIFIER "(" <parameters>? ")" <block>
<varDecl>     ::= "var" IDENTIFIER ( "=" <expression> )? ";"
<statement>   ::= <exprStmt> | <forStmt> | <ifStmt> | <printStmt> | <returnStmt> | <whileStmt> | <block>

<expression>  ::= <assignment>
<assignment>  ::= ( <call> "." )? IDENTIFIER "=" <assignment> | <logic_or>   ; right associative
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" <arguments>? ")" | "." IDENTIFIER )*
<primary>     ::= "true" | "false" | "nil" | "this" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")"
                | "super" "." IDENTIFIER
```

A syntax error never escapes parse(): it is recorded in Parser.errors and the parser synchronizes to the next
statement boundary, so one run reports every error it can find.
"""

from plox.lang.error import LoxSyntaxError
from plox.grammar import nodes
from plox.grammar.tokens import TokenType


class Parser:
    """Parses a single token list. parse() can only be called once per Parser."""
    MAX_ARGS = 255

    # tokens that start a new statement, used when synchronizing after an error
    BOUNDARIES = {
        TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
        TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
    }

    def __init__(self, tokens):
        self._tokens = tokens
        self._current = 0
        self.errors = []

    def parse(self):
        """Returns the list of statements in the token list. Statements that could not be parsed are left out."""
        statements = []
        while not self._is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ----------------------------------------------------------------------------------------------------------------
    # Statements

    def declaration(self):
        """Parses one declaration. On a syntax error, synchronizes and returns None."""
        try:
            if self._match(TokenType.CLASS):
                return self.class_declaration()
            if self._match(TokenType.FUN):
                return self.function("function")
            if self._match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()

        except LoxSyntaxError:
            self._synchronize()
            return None

    def class_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self._match(TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = nodes.Variable(self._previous())

        self._consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            methods.append(self.function("method"))

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return nodes.Class(name, superclass, methods)

    def function(self, kind):
        """kind is "function" or "method", used in error messages only."""
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self._error(self._peek(), f"Can't have more than {Parser.MAX_ARGS} parameters.")
                params.append(self._consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return nodes.Function(name, params, self.block())

    def var_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self.expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    def statement(self):
        if self._match(TokenType.FOR):
            return self.for_statement()
        if self._match(TokenType.IF):
            return self.if_statement()
        if self._match(TokenType.PRINT):
            return self.print_statement()
        if self._match(TokenType.RETURN):
            return self.return_statement()
        if self._match(TokenType.WHILE):
            return self.while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return nodes.Block(self.block())
        return self.expression_statement()

    def for_statement(self):
        """There is no for node: `for (init; cond; incr) body` becomes `{ init; while (cond) { body; incr; } }`."""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self.expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = nodes.Block([body, nodes.Expression(increment)])
        if condition is None:
            condition = nodes.Literal(True)
        body = nodes.While(condition, body)
        if initializer is not None:
            body = nodes.Block([initializer, body])

        return body

    def if_statement(self):
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self.statement()

        return nodes.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def return_statement(self):
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self.expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def while_statement(self):
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self.statement())

    def block(self):
        """Parses the statements of a block whose '{' has already been consumed."""
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    # ----------------------------------------------------------------------------------------------------------------
    # Expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        """The target is parsed as an ordinary expression first, then validated once an "=" shows up."""
        expr = self.logic_or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self.assignment()

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)
            elif isinstance(expr, nodes.Get):
                return nodes.Set(expr.object, expr.name, value)

            # reported, but the parser is not confused so there is no need to synchronize
            self._error(equals, "Invalid assignment target.")

        return expr

    def logic_or(self):
        return self._logical(self.logic_and, TokenType.OR)

    def logic_and(self):
        return self._logical(self.equality, TokenType.AND)

    def equality(self):
        return self._binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self._binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)

    def term(self):
        return self._binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self._binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def unary(self):
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                return expr

    def primary(self):
        if self._match(TokenType.FALSE):
            return nodes.Literal(False)
        if self._match(TokenType.TRUE):
            return nodes.Literal(True)
        if self._match(TokenType.NIL):
            return nodes.Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self._previous().literal)

        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self._consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return nodes.Super(keyword, method)

        if self._match(TokenType.THIS):
            return nodes.This(self._previous())

        if self._match(TokenType.IDENTIFIER):
            return nodes.Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")

    def _finish_call(self, callee):
        arguments = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self._error(self._peek(), f"Can't have more than {Parser.MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, arguments)

    def _binary(self, operand, *operators):
        """Left associative: a - b - c is ((a - b) - c)."""
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def _logical(self, operand, operator):
        expr = operand()
        while self._match(operator):
            token = self._previous()
            expr = nodes.Logical(expr, token, operand())
        return expr

    # ----------------------------------------------------------------------------------------------------------------
    # Token helpers

    def _synchronize(self):
        """Discards tokens until the next statement boundary: just past a ';' or right before a keyword that starts
        a declaration or statement.
        """
        self._advance()
        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._peek().type in Parser.BOUNDARIES:
                return
            self._advance()

    def _match(self, *types):
        for typ in types:
            if self._check(typ):
                self._advance()
                return True
        return False

    def _consume(self, typ, message):
        if self._check(typ):
            return self._advance()
        raise self._error(self._peek(), message)

    def _check(self, typ):
        if self._is_at_end():
            return False
        return self._peek().type == typ

    def _advance(self):
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _is_at_end(self):
        return self._peek().type == TokenType.EOF

    def _peek(self):
        return self._tokens[self._current]

    def _previous(self):
        return self._tokens[self._current - 1]

    def _error(self, token, message):
        """Records a syntax error at token and returns it, so that callers that need to unwind can raise it."""
        error = LoxSyntaxError(message, token)
        self.errors.append(error)
        return error
