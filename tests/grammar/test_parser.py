import unittest

from plox.grammar import nodes
from plox.grammar.parser import Parser
from plox.grammar.printer import show
from plox.grammar.tokens import Token, TokenType

from tests.util import parse


class ExpressionTestCase(unittest.TestCase):

    def test_precedence_and_associativity(self):
        cases = {
            "1 + 2 * 3;": "(; (+ 1 (* 2 3)))",
            "1 - 2 - 3;": "(; (- (- 1 2) 3))",
            "8 / 4 / 2;": "(; (/ (/ 8 4) 2))",
            "(1 + 2) * 3;": "(; (* (group (+ 1 2)) 3))",
            "-1 - -2;": "(; (- (- 1) (- 2)))",
            "!true == false;": "(; (== (! true) false))",
            "1 < 2 == 3 >= 4;": "(; (== (< 1 2) (>= 3 4)))",
            "a or b and c;": "(; (or a (and b c)))",
            "a and b or c;": "(; (or (and a b) c))",
            "!!a;": "(; (! (! a)))",
        }
        for case, expected in cases.items():
            statements, errors = parse(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, show(statements), case)

    def test_literals(self):
        cases = {
            "1.5;": "(; 1.5)",
            "10;": "(; 10)",
            "\"hi\";": "(; \"hi\")",
            "nil;": "(; nil)",
            "true;": "(; true)",
            "this;": "(; this)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, show(parse(case)[0]), case)

    def test_assignment_is_right_associative(self):
        self.assertEqual("(; (= a (= b c)))", show(parse("a = b = c;")[0]))

    def test_calls_and_properties_chain(self):
        cases = {
            "f();": "(; (call f))",
            "f(1, 2)(3);": "(; (call (call f 1 2) 3))",
            "a().b.c();": "(; (call (. (. (call a) b) c)))",
            "obj.field = 1;": "(; (= obj field 1))",
            "a.b.c = d;": "(; (= (. a b) c d))",
            "super.method(1);": "(; (call (super method) 1))",
        }
        for case, expected in cases.items():
            statements, errors = parse(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, show(statements), case)

    def test_call_keeps_closing_paren(self):
        statements, __ = parse("f(1);")
        call = statements[0].expression
        self.assertIsInstance(call, nodes.Call)
        self.assertEqual(TokenType.RIGHT_PAREN, call.paren.type)

    def test_invalid_assignment_target(self):
        should_fail = ["1 = 2;", "a + b = c;", "(a) = 1;", "f() = 1;"]
        for case in should_fail:
            statements, errors = parse(case)
            self.assertEqual(["Invalid assignment target."], [error.message for error in errors], case)
            self.assertEqual(1, len(statements), "No synchronization needed: " + case)

    def test_too_many_arguments(self):
        args = ", ".join(["1"] * 256)
        __, errors = parse(f"f({args});")
        self.assertEqual(["Can't have more than 255 arguments."], [error.message for error in errors])


class StatementTestCase(unittest.TestCase):

    def test_statements(self):
        cases = {
            "var a;": "(var a)",
            "var a = 1;": "(var a 1)",
            "print a;": "(print a)",
            "{ var a = 1; print a; }": "(block (var a 1) (print a))",
            "{}": "(block)",
            "if (a) print 1;": "(if a (print 1))",
            "if (a) print 1; else print 2;": "(if a (print 1) (print 2))",
            "while (true) x;": "(while true (; x))",
            "fun add(a, b) { return a + b; }": "(fun add (a b) (return (+ a b)))",
            "fun f() { return; }": "(fun f () (return))",
            "class A {}": "(class A)",
        }
        for case, expected in cases.items():
            statements, errors = parse(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, show(statements), case)

    def test_dangling_else_binds_to_nearest_if(self):
        self.assertEqual("(if a (if b (print 1) (print 2)))", show(parse("if (a) if (b) print 1; else print 2;")[0]))

    def test_class(self):
        source = "class B < A { init(x) { this.x = x; } m() { return super.m(); } }"
        statements, errors = parse(source)
        self.assertEqual([], errors)
        self.assertEqual(
            "(class B < A (fun init (x) (; (= this x x))) (fun m () (return (call (super m)))))",
            show(statements)
        )

        klass = statements[0]
        self.assertIsInstance(klass.superclass, nodes.Variable)
        self.assertEqual(["init", "m"], [method.name.lexeme for method in klass.methods])

    def test_for_is_desugared_to_while(self):
        cases = {
            "for (var i = 0; i < 3; i = i + 1) print i;":
                "(block (var i 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))",
            "for (;;) x;": "(while true (; x))",
            "for (i = 0; i < 3;) x;": "(block (; (= i 0)) (while (< i 3) (; x)))",
            "for (; i < 3; i = i + 1) {}": "(while (< i 3) (block (block) (; (= i (+ i 1)))))",
        }
        for case, expected in cases.items():
            statements, errors = parse(case)
            self.assertEqual([], errors, case)
            self.assertEqual(expected, show(statements), case)

    def test_for_leaves_no_trace(self):
        statements, __ = parse("for (;;) x;")
        self.assertIsInstance(statements[0], nodes.While)
        self.assertIsInstance(statements[0].condition, nodes.Literal)
        self.assertIs(True, statements[0].condition.value)


class ErrorRecoveryTestCase(unittest.TestCase):

    def test_error_messages(self):
        cases = {
            "print 1": "Expect ';' after value.",
            "1 +;": "Expect expression.",
            "(1;": "Expect ')' after expression.",
            "var 1;": "Expect variable name.",
            "var a = 1": "Expect ';' after variable declaration.",
            "{ print 1;": "Expect '}' after block.",
            "fun (a) {}": "Expect function name.",
            "fun f(1) {}": "Expect parameter name.",
            "fun f() print 1;": "Expect '{' before function body.",
            "class {}": "Expect class name.",
            "class A < {}": "Expect superclass name.",
            "class A print": "Expect '{' before class body.",
            "a.;": "Expect property name after '.'.",
            "super;": "Expect '.' after 'super'.",
            "if a) x;": "Expect '(' after 'if'.",
            "while (a x;": "Expect ')' after condition.",
            "for (;;": "Expect expression.",
            "return 1": "Expect ';' after return value.",
        }
        for case, expected in cases.items():
            __, errors = parse(case)
            self.assertTrue(errors, case)
            self.assertEqual(expected, errors[0].message, case)

    def test_error_location(self):
        __, errors = parse("print 1\nprint 2;")
        self.assertEqual(1, len(errors))
        self.assertEqual("at 'print'", errors[0].where)
        self.assertEqual(2, errors[0].line)

        __, errors = parse("print 1")
        self.assertEqual("at end", errors[0].where)

    def test_synchronizes_to_next_statement(self):
        statements, errors = parse("var = 1; print 2;")
        self.assertEqual(["Expect variable name."], [error.message for error in errors])
        self.assertEqual("(print 2)", show(statements))

    def test_reports_every_error(self):
        statements, errors = parse("print ; var x = ; print 3;")
        self.assertEqual(["Expect expression.", "Expect expression."], [error.message for error in errors])
        self.assertEqual("(print 3)", show(statements))

    def test_synchronizes_on_keywords(self):
        statements, errors = parse("1 + + 2 fun f() {} class A {}")
        self.assertEqual(1, len(errors))
        self.assertEqual("(fun f ())\n(class A)", show(statements))

    def test_only_eof(self):
        statements = Parser([Token(TokenType.EOF, "", None, 1)]).parse()
        self.assertEqual([], statements)


if __name__ == '__main__':
    unittest.main()
