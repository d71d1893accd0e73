"""Runtime object model for plox: callables (user functions, classes, native functions) and class instances.

Lox values map onto Python values as follows:
    nil -> None, booleans -> bool, numbers -> float, strings -> str,
    functions -> LoxFunction/NativeFunction, classes -> LoxClass, instances -> LoxInstance
"""

import time
from abc import ABC, abstractmethod

from plox.lang.error import LoxRuntimeError
from plox.runtime.environment import Environment


INITIALIZER = "init"


class LoxCallable(ABC):
    """Anything that can be called from Lox code."""

    @abstractmethod
    def arity(self):
        """Number of arguments call expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes the callable with exactly arity() evaluated arguments and returns the result value."""


class ReturnSignal:
    """Carries the value of an executed return statement up to the nearest enclosing function call. Statement
    execution returns it instead of raising, so it can never be mistaken for a runtime error.
    """
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"ReturnSignal({self.value!r})"


class LoxFunction(LoxCallable):
    """A function or method declaration paired with the environment it closes over."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self):
        return self.declaration.name.lexeme

    def bind(self, instance):
        """Returns a new LoxFunction with "this" bound to instance. Each call creates a fresh copy."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        """Runs the body in a new frame whose parent is the closure, not the caller's environment."""
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        # initializers always produce the instance, even after an early "return;"
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if signal is not None:
            return signal.value
        return None

    def __str__(self):
        return f"<fn {self.name}>"

    def __repr__(self):
        return f"LoxFunction({self.name!r}, arity={self.arity()})"


class NativeFunction(LoxCallable):
    """A Lox callable implemented in Python. function receives the evaluated arguments."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self._function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self._function(*arguments)

    def __str__(self):
        return "<native fn>"

    def __repr__(self):
        return f"NativeFunction({self.name!r}, arity={self._arity})"


def clock():
    """Seconds since the epoch, as a Lox number."""
    return float(time.time())


NATIVES = [NativeFunction("clock", 0, clock)]


class LoxClass(LoxCallable):
    """A class value. Calling it constructs an instance and runs its initializer, if any."""

    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name):
        """Looks up name in this class, then up the superclass chain. Returns None if no class defines it."""
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self):
        initializer = self.find_method(INITIALIZER)
        return 0 if initializer is None else initializer.arity()

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)

        initializer = self.find_method(INITIALIZER)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __str__(self):
        return self.name

    def __repr__(self):
        superclass = "" if self.superclass is None else f" < {self.superclass.name}"
        return f"LoxClass({self.name}{superclass}, methods={list(self.methods)})"


class LoxInstance:
    """An instance of a LoxClass. Fields are created on first assignment."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Fields shadow methods. Methods come back bound to this instance."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError("Undefined property '{}'.", name, name.lexeme)

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"

    def __repr__(self):
        return f"LoxInstance({self.klass.name}, fields={list(self.fields)})"
