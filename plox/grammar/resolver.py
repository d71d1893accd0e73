"""Static resolution pass for plox. Walks the tree once before execution, mirroring the interpreter's traversal over a
stack of scopes instead of live environments.

For every local variable reference (and every "this"/"super"), it tells the interpreter how many scopes separate the
reference from the scope that defines the name. Names not found in any scope are left unresolved and looked up in the
globals at runtime. Along the way it reports the static errors the interpreter would otherwise hit too late or never:
reading a local in its own initializer, redeclaring a local, misplaced "return"/"this"/"super".
"""

from enum import Enum, auto

from plox.lang.error import LoxResolveError
from plox.grammar import nodes
from plox.runtime.objects import INITIALIZER


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """Resolves statements against interpreter, whose resolve(expr, depth) records each binding."""

    def __init__(self, interpreter):
        self.interpreter = interpreter
        self.errors = []

        self._scopes = []  # each scope is name: whether its initializer has finished
        self._globals = set()  # top-level names declared so far
        self._pending_global = None  # top-level var whose initializer is being resolved
        self._current_function = FunctionType.NONE
        self._current_class = ClassType.NONE

    def resolve(self, statements):
        """Resolves a list of statements. Errors are collected in self.errors and do not stop resolution."""
        for stmt in statements:
            self._resolve_stmt(stmt)
        return self.errors

    # ----------------------------------------------------------------------------------------------------------------
    # Statements

    def _resolve_stmt(self, stmt):
        if isinstance(stmt, nodes.Block):
            self._begin_scope()
            self.resolve(stmt.statements)
            self._end_scope()

        elif isinstance(stmt, nodes.Class):
            self._resolve_class(stmt)

        elif isinstance(stmt, (nodes.Expression, nodes.Print)):
            self._resolve_expr(stmt.expression)

        elif isinstance(stmt, nodes.Function):
            # defined before the body so the function can refer to itself recursively
            self._declare(stmt.name)
            self._define(stmt.name)
            self._resolve_function(stmt, FunctionType.FUNCTION)

        elif isinstance(stmt, nodes.If):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self._resolve_stmt(stmt.else_branch)

        elif isinstance(stmt, nodes.Return):
            if self._current_function == FunctionType.NONE:
                self._error(stmt.keyword, "Can't return from top-level code.")

            if stmt.value is not None:
                if self._current_function == FunctionType.INITIALIZER:
                    self._error(stmt.keyword, "Can't return a value from an initializer.")
                self._resolve_expr(stmt.value)

        elif isinstance(stmt, nodes.Var):
            self._declare(stmt.name)
            if stmt.initializer is not None:
                self._resolve_expr(stmt.initializer)
            self._define(stmt.name)

        elif isinstance(stmt, nodes.While):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.body)

        else:
            raise TypeError(f"unhandled statement {type(stmt).__name__}")

    def _resolve_class(self, stmt):
        enclosing_class = self._current_class
        self._current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self._error(stmt.superclass.name, "A class can't inherit from itself.")

            self._current_class = ClassType.SUBCLASS
            self._resolve_expr(stmt.superclass)

            self._begin_scope()
            self._scopes[-1]["super"] = True

        self._begin_scope()
        self._scopes[-1]["this"] = True

        for method in stmt.methods:
            declaration = FunctionType.METHOD
            if method.name.lexeme == INITIALIZER:
                declaration = FunctionType.INITIALIZER
            self._resolve_function(method, declaration)

        self._end_scope()
        if stmt.superclass is not None:
            self._end_scope()

        self._current_class = enclosing_class

    def _resolve_function(self, function, typ):
        enclosing_function = self._current_function
        self._current_function = typ

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self.resolve(function.body)
        self._end_scope()

        self._current_function = enclosing_function

    # ----------------------------------------------------------------------------------------------------------------
    # Expressions

    def _resolve_expr(self, expr):
        if isinstance(expr, nodes.Variable):
            if self._scopes and self._scopes[-1].get(expr.name.lexeme) is False:
                self._error(expr.name, "Can't read local variable in its own initializer.")
            elif not self._scopes and expr.name.lexeme == self._pending_global:
                self._error(expr.name, "Can't read global variable in its own initializer.")
            self._resolve_local(expr, expr.name)

        elif isinstance(expr, nodes.Assign):
            self._resolve_expr(expr.value)
            self._resolve_local(expr, expr.name)

        elif isinstance(expr, (nodes.Binary, nodes.Logical)):
            self._resolve_expr(expr.left)
            self._resolve_expr(expr.right)

        elif isinstance(expr, nodes.Call):
            self._resolve_expr(expr.callee)
            for argument in expr.arguments:
                self._resolve_expr(argument)

        elif isinstance(expr, nodes.Get):
            # property names are looked up dynamically, only the object is resolved
            self._resolve_expr(expr.object)

        elif isinstance(expr, nodes.Set):
            self._resolve_expr(expr.value)
            self._resolve_expr(expr.object)

        elif isinstance(expr, nodes.Grouping):
            self._resolve_expr(expr.expression)

        elif isinstance(expr, nodes.Unary):
            self._resolve_expr(expr.right)

        elif isinstance(expr, nodes.Literal):
            pass

        elif isinstance(expr, nodes.This):
            if self._current_class == ClassType.NONE:
                self._error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self._resolve_local(expr, expr.keyword)

        elif isinstance(expr, nodes.Super):
            if self._current_class == ClassType.NONE:
                self._error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self._current_class != ClassType.SUBCLASS:
                self._error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self._resolve_local(expr, expr.keyword)

        else:
            raise TypeError(f"unhandled expression {type(expr).__name__}")

    # ----------------------------------------------------------------------------------------------------------------
    # Scopes

    def _begin_scope(self):
        self._scopes.append({})

    def _end_scope(self):
        self._scopes.pop()

    def _declare(self, name):
        """Adds name to the innermost scope as not yet initialized. A global is only tracked while its first
        initializer runs: redefining a global may read the previous value.
        """
        if not self._scopes:
            if name.lexeme not in self._globals and name.lexeme not in self.interpreter.globals.values:
                self._pending_global = name.lexeme
            return

        scope = self._scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name):
        if not self._scopes:
            self._globals.add(name.lexeme)
            self._pending_global = None
            return
        self._scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr, name):
        """Records the distance from the innermost scope to the first scope defining name, if there is one."""
        for distance, scope in enumerate(reversed(self._scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, distance)
                return

    def _error(self, token, message):
        self.errors.append(LoxResolveError(message, token))
