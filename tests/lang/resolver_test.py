import io
import unittest

from lox.lang import syntax
from lox.lang.error import ErrorHandler, ResolutionError
from lox.lang.lexical import Scanner
from lox.lang.parser import Parser
from lox.lang.resolver import Resolver


def resolve(source):
    handler = ErrorHandler(io.StringIO())
    statements = Parser(Scanner(source, handler).scan_tokens(), handler).parse()
    assert not handler.had_error, handler.errors
    return statements, Resolver(handler).resolve(statements), handler


def references(node):
    """Yields every Variable and Assign node under node, in source order."""
    if isinstance(node, (syntax.Variable, syntax.Assign)):
        yield node
    if isinstance(node, list):
        for item in node:
            yield from references(item)
    elif isinstance(node, (syntax.Expr, syntax.Stmt)):
        for value in vars(node).values():
            if isinstance(value, (list, syntax.Expr, syntax.Stmt)):
                yield from references(value)


def hops(source):
    """List of (name, hop count or None) for every reference in source."""
    statements, locals_, handler = resolve(source)
    assert not handler.had_error, handler.errors
    return [(node.name.lexeme, locals_.get(node)) for node in references(statements)]


class HopCountTestCase(unittest.TestCase):

    def test_shadowing(self):
        source = 'var a = "global"; { var a = "outer"; { var a = "inner"; print a; } print a; } print a;'
        self.assertEqual([("a", 0), ("a", 0), ("a", 0)], hops(source))

        source = "var a = 1; { { print a; } }"
        self.assertEqual([("a", 2)], hops(source))

    def test_globals(self):
        # names that aren't declared in any enclosing scope are left for the global frame
        self.assertEqual([("clock", None)], hops("print clock;"))
        self.assertEqual([("later", None)], hops("fun f() { return later; }"))

    def test_functions(self):
        source = "fun f(x) { var y = x; return y; }"
        self.assertEqual([("x", 0), ("y", 0)], hops(source))

        source = "fun f() { return f; }"
        self.assertEqual([("f", 1)], hops(source))

    def test_closures(self):
        source = "fun outer() { var c = 0; fun inner() { c = c + 1; return c; } return inner; }"
        self.assertEqual([("c", 1), ("c", 1), ("c", 1), ("inner", 0)], hops(source))

    def test_closure_binding_is_static(self):
        source = 'var a = "global"; { fun show() { print a; } show(); var a = "block"; show(); }'
        self.assertEqual([("a", 2), ("show", 0), ("show", 0)], hops(source))

    def test_methods(self):
        source = "class A { init(x) { this.x = x; } get() { return this.x; } }"
        self.assertEqual([("this", 1), ("x", 0), ("this", 1)], hops(source))

    def test_same_node_text_distinct_keys(self):
        statements, locals_, __ = resolve("var a = 1; { var a = 2; print a; } print a;")
        inner, outer = list(references(statements))
        self.assertIsNot(inner, outer)
        self.assertEqual(0, locals_[inner])
        self.assertEqual(0, locals_[outer])

    def test_tree_untouched(self):
        statements, __, __ = resolve("{ var a = 1; print a; }")
        self.assertEqual(2, len(statements[0].statements))


class ResolutionErrorTestCase(unittest.TestCase):

    def errors(self, source):
        __, __, handler = resolve(source)
        self.assertTrue(all(isinstance(error, ResolutionError) for error in handler.errors))
        return [error.message for error in handler.errors]

    def test_redeclaration(self):
        self.assertEqual(["Already a variable with this name in this scope."], self.errors("{ var a = 1; var a = 2; }"))
        self.assertEqual(["Already a variable with this name in this scope."], self.errors("fun f(a, a) {}"))
        self.assertEqual([], self.errors("var a = 1; { var a = 2; }"))

    def test_own_initializer(self):
        self.assertEqual(["Can't read local variable in its own initializer."], self.errors("{ var a = a; }"))
        self.assertEqual(
            ["Can't read local variable in its own initializer."], self.errors("var a = 1; { var a = a + 1; }")
        )

    def test_top_level_return(self):
        self.assertEqual(["Can't return from top-level code."], self.errors("return 1;"))
        self.assertEqual(["Can't return from top-level code."], self.errors("{ if (true) return; }"))
        self.assertEqual([], self.errors("fun f() { if (true) return 1; }"))

    def test_this_outside_class(self):
        self.assertEqual(["Can't use 'this' outside of a class."], self.errors("print this;"))
        self.assertEqual(["Can't use 'this' outside of a class."], self.errors("fun f() { return this; }"))

    def test_initializer_return_not_flagged(self):
        self.assertEqual([], self.errors("class A { init() { return 1; } }"))

    def test_keeps_going(self):
        source = "{ var a = 1; var a = 2; } return; { var b = b; }"
        self.assertEqual(3, len(self.errors(source)))


if __name__ == '__main__':
    unittest.main()
