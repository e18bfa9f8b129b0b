import io
import unittest

from lox.lang import syntax
from lox.lang.error import ErrorHandler, ParseError
from lox.lang.lexical import Scanner
from lox.lang.parser import Parser
from lox.lang.printer import AstPrinter


def parse(source):
    handler = ErrorHandler(io.StringIO())
    tokens = Scanner(source, handler).scan_tokens()
    return Parser(tokens, handler).parse(), handler


def render(source):
    statements, handler = parse(source)
    assert not handler.had_error, handler.errors
    return AstPrinter().print(statements)


class ExpressionTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3;": "(; (+ 1 (* 2 3)))",
            "(1 + 2) * 3;": "(; (* (group (+ 1 2)) 3))",
            "1 - 2 - 3;": "(; (- (- 1 2) 3))",
            "8 / 4 / 2;": "(; (/ (/ 8 4) 2))",
            "!-1;": "(; (! (- 1)))",
            "1 < 2 == 3 >= 4;": "(; (== (< 1 2) (>= 3 4)))",
            "a or b and c;": "(; (or a (and b c)))",
            "a and b or c;": "(; (or (and a b) c))",
            "-a.b;": "(; (- (. b a)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_literals(self):
        cases = {
            "1.5;": "(; 1.5)",
            "4;": "(; 4)",
            '"str";': '(; "str")',
            "true;": "(; true)",
            "nil;": "(; nil)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_comma_grouping(self):
        self.assertEqual("(; (group 1 2 3))", render("(1, 2, 3);"))

        statements, __ = parse("(1, a = 2);")
        grouping = statements[0].expression
        self.assertIsInstance(grouping, syntax.Grouping)
        self.assertEqual(2, len(grouping.expressions))
        self.assertIsInstance(grouping.expressions[-1], syntax.Assign)

    def test_assignment(self):
        cases = {
            "a = b = 1;": "(; (= a (= b 1)))",
            "a.b = 1;": "(; (.= b a 1))",
            "a.b.c = 1;": "(; (.= c (. b a) 1))",
            "f().x = 2;": "(; (.= x (call f) 2))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_invalid_assignment_target(self):
        should_fail = ["1 = 2;", "a + b = 2;", "this = 1;", "f() = 1;"]
        for case in should_fail:
            statements, handler = parse(case)
            self.assertEqual(["Invalid assignment target."], [error.message for error in handler.errors], case)
            self.assertEqual(1, len(statements), case)  # no synchronization needed

    def test_calls(self):
        cases = {
            "f();": "(; (call f))",
            "f(1, 2);": "(; (call f 1 2))",
            "f(1)(2);": "(; (call (call f 1) 2))",
            "a.b(c).d;": "(; (. d (call (. b a) c)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_argument_cap(self):
        statements, handler = parse("f(1, 2, 3, 4, 5, 6, 7, 8, 9);")
        self.assertEqual(["Cannot have more than 8 arguments."], [error.message for error in handler.errors])
        self.assertEqual(9, len(statements[0].expression.arguments))

        __, handler = parse("f(1, 2, 3, 4, 5, 6, 7, 8);")
        self.assertFalse(handler.had_error)


class StatementTestCase(unittest.TestCase):

    def test_statements(self):
        cases = {
            "print 1;": "(print 1)",
            "var a;": "(var a)",
            "var a = 1;": "(var a 1)",
            "{ var a = 1; print a; }": "(block (var a 1) (print a))",
            "if (a) print 1; else print 2;": "(if a (print 1) (print 2))",
            "if (a) if (b) print 1; else print 2;": "(if a (if b (print 1) (print 2)))",
            "while (a) a = a - 1;": "(while a (; (= a (- a 1))))",
            "fun f(a, b) { return a + b; }": "(fun f (a b) (return (+ a b)))",
            "fun f() { return; }": "(fun f () (return))",
            "class A { init(x) { this.x = x; } get() { return this.x; } }":
                "(class A (fun init (x) (; (.= x this x))) (fun get () (return (. x this))))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

    def test_for_desugaring(self):
        cases = {
            "for (var i = 0; i < 3; i = i + 1) print i;":
                "(block (var i 0) (while (< i 3) (block (print i) (; (= i (+ i 1))))))",
            "for (;;) print 1;": "(while true (print 1))",
            "for (i = 0; i < 3;) print i;": "(block (; (= i 0)) (while (< i 3) (print i)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(case), case)

        statements, __ = parse("for (;;) print 1;")
        self.assertIsInstance(statements[0], syntax.While)

    def test_parameter_cap(self):
        statements, handler = parse("fun f(a, b, c, d, e, f, g, h, i) {}")
        self.assertEqual(["Cannot have more than 8 parameters."], [error.message for error in handler.errors])
        self.assertEqual(9, len(statements[0].params))


class RecoveryTestCase(unittest.TestCase):

    def test_synchronize(self):
        statements, handler = parse("var = 1; print 2; var x 3; print 4;")
        self.assertEqual(2, len(handler.errors))
        self.assertTrue(all(isinstance(error, ParseError) for error in handler.errors))
        self.assertEqual("(print 2)\n(print 4)", AstPrinter().print(statements))

    def test_synchronize_on_keyword(self):
        statements, handler = parse("print 1 +\nvar a = 2;\nfun f() {}")
        self.assertEqual(1, len(handler.errors))
        # the offending `var` is skipped along with the rest of its statement
        self.assertEqual("(fun f ())", AstPrinter().print(statements))

    def test_error_locations(self):
        __, handler = parse("print 1")
        error = handler.errors[0]
        self.assertEqual(("Expect ';' after value.", " at end"), (error.message, error.where))

        __, handler = parse("print ;")
        error = handler.errors[0]
        self.assertEqual(("Expect expression.", " at ';'"), (error.message, error.where))

    def test_errors_inside_blocks(self):
        statements, handler = parse("{ print ; print 1; }\nprint 2;")
        self.assertEqual(1, len(handler.errors))
        self.assertEqual("(block (print 1))\n(print 2)", AstPrinter().print(statements))

    def test_unsupported_super(self):
        __, handler = parse("super.x;")
        self.assertEqual(["Expect expression."], [error.message for error in handler.errors])


if __name__ == '__main__':
    unittest.main()
