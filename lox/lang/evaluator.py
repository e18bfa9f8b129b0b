"""Tree-walking evaluator for the lox language.

Statements are executed for their effects and return a completion: None when they complete normally, or a Returning
when a `return` statement is unwinding towards the enclosing call. Expressions return lox values (see runtime.py).

Variable references use the hop counts computed by the resolver: a reference with a recorded hop count is looked up
in exactly that ancestor frame, anything else is a global looked up by name.
"""

import sys

from lox.lang import syntax
from lox.lang.error import LoxRuntimeError
from lox.lang.runtime import (
    Environment, LoxCallable, LoxClass, LoxFunction, LoxInstance, NATIVES, Returning, is_equal, is_truthy, stringify
)
from lox.lang.tokens import TokenType


class Interpreter:
    """Executes resolved programs. One Interpreter keeps its global frame across runs (e.g. lines of the shell)."""

    def __init__(self, out=None):
        self.out = out  # print stream, defaults to sys.stdout at write time
        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}

        for native in NATIVES:
            self.globals.define(native.name, native)

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
            syntax.Logical: self._logical,
            syntax.Set: self._set,
            syntax.Unary: self._unary,
            syntax.Variable: self._variable,
        }

    def resolve(self, locals_):
        """Merges a resolver hop count table into this interpreter's."""
        self.locals.update(locals_)

    def interpret(self, statements):
        """Executes statements in order. LoxRuntimeErrors propagate to the caller and abort the rest of the run."""
        for stmt in statements:
            self.execute(stmt)

    def execute(self, stmt):
        return self._stmts[type(stmt)](stmt)

    def execute_block(self, statements, environment):
        """Executes statements in environment, stopping early if one of them returns."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                completion = self.execute(stmt)
                if completion is not None:
                    return completion
            return None
        finally:
            self.environment = previous

    def evaluate(self, expr):
        return self._exprs[type(expr)](expr)

    # statements

    def _block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def _class(self, stmt):
        methods = {
            method.name.lexeme: LoxFunction(method, self.environment, method.name.lexeme == "init")
            for method in stmt.methods
        }
        self.environment.define(stmt.name.lexeme, LoxClass(stmt.name.lexeme, methods))

    def _expression_stmt(self, stmt):
        self.evaluate(stmt.expression)

    def _function_stmt(self, stmt):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    def _if(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def _print(self, stmt):
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.out or sys.stdout)

    def _return(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return Returning(value, stmt.keyword, stmt.value is not None)

    def _var(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def _while(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            completion = self.execute(stmt.body)
            if completion is not None:
                return completion
        return None

    # expressions

    def _assign(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        type_ = operator.type

        if type_ is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if type_ is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if type_ is TokenType.PLUS:
            if Interpreter.is_number(left) and Interpreter.is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        Interpreter.check_number_operands(operator, left, right)

        if type_ is TokenType.GREATER:
            return left > right
        if type_ is TokenType.GREATER_EQUAL:
            return left >= right
        if type_ is TokenType.LESS:
            return left < right
        if type_ is TokenType.LESS_EQUAL:
            return left <= right
        if type_ is TokenType.MINUS:
            return left - right
        if type_ is TokenType.STAR:
            return left * right
        if type_ is TokenType.SLASH:
            if right == 0:
                raise LoxRuntimeError(operator, "Division by zero.")
            return left / right

        raise LoxRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.")

    def _call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            msg = f"Expected {callee.arity()} arguments but got {len(arguments)}."
            raise LoxRuntimeError(expr.paren, msg)

        return callee.call(self, arguments, expr.paren)

    def _get(self, expr):
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def _grouping(self, expr):
        value = None
        for sub_expr in expr.expressions:
            value = self.evaluate(sub_expr)
        return value

    def _literal(self, expr):
        return expr.value

    def _logical(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def _set(self, expr):
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def _unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        if not Interpreter.is_number(right):
            raise LoxRuntimeError(expr.operator, f"Operand of '{expr.operator.lexeme}' must be a number.")
        return -right

    def _variable(self, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, expr.name.lexeme)
        return self.globals.get(expr.name)

    # helpers

    @staticmethod
    def is_number(value):
        return isinstance(value, float)

    @staticmethod
    def check_number_operands(operator, left, right):
        if Interpreter.is_number(left) and Interpreter.is_number(right):
            return
        raise LoxRuntimeError(operator, f"Operands of '{operator.lexeme}' must be numbers.")
