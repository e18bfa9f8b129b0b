"""Static scope resolution for the lox language.

The resolver walks the syntax tree once, before evaluation, and computes for every variable reference and assignment
the number of scopes between the reference and the scope that declares the name (its "hop count"). The evaluator
then reads and writes exactly that ancestor frame instead of searching by name, which keeps closures faithful to the
lexical structure of the program. References that can't be bound to any enclosing scope are left out of the table and
treated as globals.

The resolver's scopes are plain dicts of name: defined?, distinct from the runtime Environment chain. A name is
"declared" (False) while its initializer is being resolved and "defined" (True) afterwards.
"""

from enum import Enum, auto

from lox.lang import syntax
from lox.lang.error import ResolutionError


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()


class Resolver:
    """Builds the node -> hop count table. Reports errors and keeps going, so one pass finds all of them."""

    def __init__(self, error_handler):
        self.error_handler = error_handler

        self.scopes = []
        self.locals = {}
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

        self._stmts = {
            syntax.Block: self._block,
            syntax.Class: self._class,
            syntax.Expression: self._expression_stmt,
            syntax.Function: self._function_stmt,
            syntax.If: self._if,
            syntax.Print: self._print,
            syntax.Return: self._return,
            syntax.Var: self._var,
            syntax.While: self._while,
        }
        self._exprs = {
            syntax.Assign: self._assign,
            syntax.Binary: self._binary,
            syntax.Call: self._call,
            syntax.Get: self._get,
            syntax.Grouping: self._grouping,
            syntax.Literal: self._literal,
            syntax.Logical: self._binary,
            syntax.Set: self._set,
            syntax.Unary: self._unary,
            syntax.Variable: self._variable,
        }

    def resolve(self, statements):
        """Resolves a whole program inside a top-level scope. Returns the hop count table."""
        self.begin_scope()
        self.resolve_all(statements)
        self.end_scope()
        return self.locals

    def resolve_all(self, statements):
        for stmt in statements:
            self._stmts[type(stmt)](stmt)

    def resolve_expr(self, expr):
        self._exprs[type(expr)](expr)

    # scopes

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        for hops, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr] = hops
                return
        # not found: global

    def resolve_function(self, function, type_):
        enclosing_function = self.current_function
        self.current_function = type_

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve_all(function.body)
        self.end_scope()

        self.current_function = enclosing_function

    def error(self, token, message):
        self.error_handler.report(ResolutionError.at(token, message))

    # statements

    def _block(self, stmt):
        self.begin_scope()
        self.resolve_all(stmt.statements)
        self.end_scope()

    def _class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        for method in stmt.methods:
            self.begin_scope()
            self.scopes[-1]["this"] = True
            type_ = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self.resolve_function(method, type_)
            self.end_scope()

        self.current_class = enclosing_class

    def _expression_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def _function_stmt(self, stmt):
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    def _if(self, stmt):
        self.resolve_expr(stmt.condition)
        self._stmts[type(stmt.then_branch)](stmt.then_branch)
        if stmt.else_branch is not None:
            self._stmts[type(stmt.else_branch)](stmt.else_branch)

    def _print(self, stmt):
        self.resolve_expr(stmt.expression)

    def _return(self, stmt):
        if self.current_function is FunctionType.NONE:
            self.error(stmt.keyword, "Can't return from top-level code.")

        # a value returned from an initializer is rejected when the initializer is called
        if stmt.value is not None:
            self.resolve_expr(stmt.value)

    def _var(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve_expr(stmt.initializer)
        self.define(stmt.name)

    def _while(self, stmt):
        self.resolve_expr(stmt.condition)
        self._stmts[type(stmt.body)](stmt.body)

    # expressions

    def _assign(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_local(expr, expr.name)

    def _binary(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def _call(self, expr):
        self.resolve_expr(expr.callee)
        for argument in expr.arguments:
            self.resolve_expr(argument)

    def _get(self, expr):
        self.resolve_expr(expr.object)

    def _grouping(self, expr):
        for sub_expr in expr.expressions:
            self.resolve_expr(sub_expr)

    def _literal(self, expr):
        """Literals reference no names."""

    def _set(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_expr(expr.object)

    def _unary(self, expr):
        self.resolve_expr(expr.right)

    def _variable(self, expr):
        name = expr.name
        if name.lexeme == "this" and self.current_class is ClassType.NONE:
            self.error(name, "Can't use 'this' outside of a class.")
            return

        if self.scopes[-1].get(name.lexeme) is False:
            self.error(name, "Can't read local variable in its own initializer.")

        self.resolve_local(expr, name)
