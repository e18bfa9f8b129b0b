"""Debug rendering of lox syntax trees as parenthesized, Lisp-like text. Read-only: printing a tree has no effect on
resolution or evaluation.

Examples:
    print 1 + 2 * 3;        ->  (print (+ 1 (* 2 3)))
    var a = (1, 2);         ->  (var a (group 1 2))
    fun f(x) { return x; }  ->  (fun f (x) (return x))
"""

from lox.lang import syntax
from lox.lang.runtime import stringify


class AstPrinter:

    def __init__(self):
        self._stmts = {
            syntax.Block: lambda stmt: self.parenthesize("block", *stmt.statements),
            syntax.Class: lambda stmt: self.parenthesize(f"class {stmt.name.lexeme}", *stmt.methods),
            syntax.Expression: lambda stmt: self.parenthesize(";", stmt.expression),
            syntax.Function: self._function,
            syntax.If: lambda stmt: self.parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch),
            syntax.Print: lambda stmt: self.parenthesize("print", stmt.expression),
            syntax.Return: lambda stmt: self.parenthesize("return", stmt.value),
            syntax.Var: lambda stmt: self.parenthesize(f"var {stmt.name.lexeme}", stmt.initializer),
            syntax.While: lambda stmt: self.parenthesize("while", stmt.condition, stmt.body),
        }
        self._exprs = {
            syntax.Assign: lambda expr: self.parenthesize(f"= {expr.name.lexeme}", expr.value),
            syntax.Binary: lambda expr: self.parenthesize(expr.operator.lexeme, expr.left, expr.right),
            syntax.Call: lambda expr: self.parenthesize("call", expr.callee, *expr.arguments),
            syntax.Get: lambda expr: self.parenthesize(f". {expr.name.lexeme}", expr.object),
            syntax.Grouping: lambda expr: self.parenthesize("group", *expr.expressions),
            syntax.Literal: self._literal,
            syntax.Logical: lambda expr: self.parenthesize(expr.operator.lexeme, expr.left, expr.right),
            syntax.Set: lambda expr: self.parenthesize(f".= {expr.name.lexeme}", expr.object, expr.value),
            syntax.Unary: lambda expr: self.parenthesize(expr.operator.lexeme, expr.right),
            syntax.Variable: lambda expr: expr.name.lexeme,
        }

    def print(self, statements):
        """Renders statements, one per line."""
        return "\n".join(self.render(stmt) for stmt in statements)

    def render(self, node):
        if isinstance(node, syntax.Stmt):
            return self._stmts[type(node)](node)
        return self._exprs[type(node)](node)

    def parenthesize(self, name, *nodes):
        """(name node...), skipping absent optional nodes."""
        parts = [name] + [self.render(node) for node in nodes if node is not None]
        return f"({' '.join(parts)})"

    def _function(self, stmt):
        params = " ".join(param.lexeme for param in stmt.params)
        return self.parenthesize(f"fun {stmt.name.lexeme} ({params})", *stmt.body)

    @staticmethod
    def _literal(expr):
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return stringify(expr.value)
