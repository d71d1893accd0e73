"""Chained scope frames. Closures keep a reference to the frame they were created in, so a frame lives as long as any
closure or nested frame refers to it.
"""

from plox.lang.error import LoxRuntimeError


class Environment:
    """A name: value mapping plus an optional enclosing Environment."""

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this frame only. Redefining a name in the same frame overwrites it."""
        self.values[name] = value

    def get(self, name):
        """Looks up name (a Token) in this frame, then in the enclosing frames."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError("Undefined variable '{}'.", name, name.lexeme)

    def assign(self, name, value):
        """Rebinds name (a Token) in the nearest frame that defines it. Never creates a binding."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError("Undefined variable '{}'.", name, name.lexeme)

    def ancestor(self, distance):
        """Returns the frame exactly distance links up the chain."""
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, name):
        """Reads name from the frame distance links up. The resolver guarantees it is there."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name] = value

    def __repr__(self):
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return f"Environment(depth={depth}, names={list(self.values)})"
