"""Tree-walking interpreter for plox.

Expressions are evaluated to Python values (see objects.py for the mapping); statements are executed for their side
effects. Statement execution returns None, or a ReturnSignal when a return statement ran, which every enclosing
statement passes up untouched until the function call that owns it consumes it.

Variable lookups use the binding table filled in by the resolver: a node with a recorded distance is read exactly
that many frames up the environment chain, any other node is read from the globals.
"""

import math
import sys

from plox.lang.error import LoxRuntimeError
from plox.grammar import nodes
from plox.grammar.tokens import TokenType
from plox.runtime.environment import Environment
from plox.runtime.objects import NATIVES, INITIALIZER, LoxCallable, LoxClass, LoxFunction, LoxInstance, ReturnSignal


class Interpreter:
    """Executes resolved statements. Globals and the binding table persist across interpret() calls."""

    def __init__(self, out=None):
        self.out = out if out is not None else sys.stdout

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}  # expression node: scope distance

        for native in NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, statements):
        """Executes statements in order. Returns the LoxRuntimeError that stopped execution, or None if all of them
        ran. The remaining statements of a failed run are skipped, but the interpreter stays usable.
        """
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                assert signal is None, "return outside of a function should have been rejected by the resolver"
        except LoxRuntimeError as error:
            self.environment = self.globals
            return error
        return None

    def resolve(self, expr, depth):
        """Called by the resolver for every local variable reference."""
        self.locals[expr] = depth

    # ----------------------------------------------------------------------------------------------------------------
    # Statements

    def execute(self, stmt):
        if isinstance(stmt, nodes.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, nodes.Print):
            value = self.evaluate(stmt.expression)
            self.out.write(stringify(value) + "\n")

        elif isinstance(stmt, nodes.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, nodes.Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, nodes.If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)

        elif isinstance(stmt, nodes.While):
            while is_truthy(self.evaluate(stmt.condition)):
                signal = self.execute(stmt.body)
                if signal is not None:
                    return signal

        elif isinstance(stmt, nodes.Function):
            function = LoxFunction(stmt, self.environment)
            self.environment.define(stmt.name.lexeme, function)

        elif isinstance(stmt, nodes.Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return ReturnSignal(value)

        elif isinstance(stmt, nodes.Class):
            self._execute_class(stmt)

        else:
            raise TypeError(f"unhandled statement {type(stmt).__name__}")

        return None

    def execute_block(self, statements, environment):
        """Executes statements with environment as the current one. The previous environment is restored however
        the block exits.
        """
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    def _execute_class(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError("Superclass must be a class.", stmt.superclass.name)

        self.environment.define(stmt.name.lexeme, None)

        enclosing = self.environment
        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == INITIALIZER
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        self.environment = enclosing
        self.environment.assign(stmt.name, klass)

    # ----------------------------------------------------------------------------------------------------------------
    # Expressions

    def evaluate(self, expr):
        if isinstance(expr, nodes.Literal):
            return expr.value

        if isinstance(expr, nodes.Grouping):
            return self.evaluate(expr.expression)

        if isinstance(expr, nodes.Unary):
            return self._unary(expr)

        if isinstance(expr, nodes.Binary):
            return self._binary(expr)

        if isinstance(expr, nodes.Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        if isinstance(expr, nodes.Variable):
            return self._look_up_variable(expr.name, expr)

        if isinstance(expr, nodes.Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr)
            if distance is not None:
                self.environment.assign_at(distance, expr.name.lexeme, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        if isinstance(expr, nodes.Call):
            return self._call(expr)

        if isinstance(expr, nodes.Get):
            obj = self.evaluate(expr.object)
            if isinstance(obj, LoxInstance):
                return obj.get(expr.name)
            raise LoxRuntimeError("Only instances have properties.", expr.name)

        if isinstance(expr, nodes.Set):
            obj = self.evaluate(expr.object)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError("Only instances have fields.", expr.name)
            value = self.evaluate(expr.value)
            obj.set(expr.name, value)
            return value

        if isinstance(expr, nodes.This):
            return self._look_up_variable(expr.keyword, expr)

        if isinstance(expr, nodes.Super):
            return self._super(expr)

        raise TypeError(f"unhandled expression {type(expr).__name__}")

    def _unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type == TokenType.MINUS:
            check_number_operands(expr.operator, right)
            return -right
        if expr.operator.type == TokenType.BANG:
            return not is_truthy(right)

        raise TypeError(f"unhandled unary operator {expr.operator.lexeme}")

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        typ = expr.operator.type

        if typ == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError("Operands must be two numbers or two strings.", expr.operator)

        if typ == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if typ == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        check_number_operands(expr.operator, left, right)

        if typ == TokenType.MINUS:
            return left - right
        if typ == TokenType.STAR:
            return left * right
        if typ == TokenType.SLASH:
            return divide(left, right)
        if typ == TokenType.GREATER:
            return left > right
        if typ == TokenType.GREATER_EQUAL:
            return left >= right
        if typ == TokenType.LESS:
            return left < right
        if typ == TokenType.LESS_EQUAL:
            return left <= right

        raise TypeError(f"unhandled binary operator {expr.operator.lexeme}")

    def _call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError("Can only call functions and classes.", expr.paren)

        if len(arguments) != callee.arity():
            msg = "Expected {} arguments but got {}."
            raise LoxRuntimeError(msg, expr.paren, (str(callee.arity()), str(len(arguments))))

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError("Stack overflow.", expr.paren) from None

    def _super(self, expr):
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        # "this" is always bound in the frame right inside the one holding "super"
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError("Undefined property '{}'.", expr.method, expr.method.lexeme)
        return method.bind(instance)

    def _look_up_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)


def is_number(value):
    """bool is a subclass of int, and Lox numbers are always floats, so a plain isinstance check is enough."""
    return isinstance(value, float)


def check_number_operands(operator, *operands):
    if not all(is_number(operand) for operand in operands):
        raise LoxRuntimeError("Operand must be a number.", operator)


def divide(left, right):
    """IEEE 754 division: Python raises on a zero divisor where Lox produces an infinity or NaN."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def is_truthy(value):
    """nil and false are falsy, everything else (0 and "" included) is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Never raises. Values of different Lox types are never equal, so true != 1 even though Python says otherwise."""
    if left is None or right is None:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return left is right
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value):
    """Display form of a Lox value, as print shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)
