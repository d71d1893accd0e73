import unittest

from plox.lang.error import LoxRuntimeError
from plox.grammar.tokens import Token, TokenType
from plox.runtime.environment import Environment


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


class EnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        self.globals = Environment()
        self.globals.define("a", 1.0)
        self.inner = Environment(Environment(self.globals))

    def test_define_and_get(self):
        self.assertEqual(1.0, self.globals.get(name("a")))
        self.assertEqual(1.0, self.inner.get(name("a")), "Lookup walks the enclosing frames")

    def test_redefinition_overwrites(self):
        self.globals.define("a", "again")
        self.assertEqual("again", self.globals.get(name("a")))

    def test_define_nil(self):
        self.globals.define("b", None)
        self.assertIsNone(self.inner.get(name("b")))

    def test_shadowing(self):
        self.inner.define("a", 2.0)
        self.assertEqual(2.0, self.inner.get(name("a")))
        self.assertEqual(1.0, self.globals.get(name("a")))

    def test_assign_updates_nearest_frame(self):
        self.inner.assign(name("a"), 3.0)
        self.assertEqual(3.0, self.globals.get(name("a")))
        self.assertNotIn("a", self.inner.values, "Assignment never creates a binding")

    def test_undefined(self):
        for operation in (lambda: self.inner.get(name("missing")), lambda: self.inner.assign(name("missing"), 1.0)):
            with self.assertRaises(LoxRuntimeError) as context:
                operation()
            self.assertEqual("Undefined variable 'missing'.", context.exception.message)
            self.assertEqual("at 'missing'", context.exception.where)

    def test_distances(self):
        self.assertIs(self.inner, self.inner.ancestor(0))
        self.assertIs(self.globals, self.inner.ancestor(2))

        self.assertEqual(1.0, self.inner.get_at(2, "a"))
        self.inner.assign_at(2, "a", 4.0)
        self.assertEqual(4.0, self.globals.values["a"])

    def test_repr(self):
        self.inner.define("b", 2.0)
        self.assertEqual("Environment(depth=2, names=['b'])", repr(self.inner))
        self.assertEqual("Environment(depth=0, names=['a'])", repr(self.globals))


if __name__ == '__main__':
    unittest.main()
