"""Runtime values and scope frames for the lox evaluator.

Lox values map onto Python values: nil is None, booleans are bool, numbers are float and strings are str. Everything
else is one of the classes below: a LoxCallable (LoxFunction, NativeFunction, LoxClass) or a LoxInstance.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import time
from typing import Any

from lox.lang.error import LoxRuntimeError


class Environment:
    """One scope frame: a name -> value mapping plus a link to the enclosing frame. Frames are shared by every closure
    declared in them, so assignments through one closure are visible to all others.
    """

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        self.values[name] = value

    def ancestor(self, distance):
        """Returns the frame distance hops up the chain."""
        env = self
        for __ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance, name):
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name.lexeme] = value

    def get(self, name):
        """Name lookup in this frame only. Used for globals: locals are always reached through get_at."""
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def __repr__(self):
        return f"Environment({list(self.values)}, enclosing={self.enclosing!r})"


@dataclass(frozen=True)
class Returning:
    """Abrupt completion of a statement by `return`. Normal completion is signalled by None."""
    value: Any
    keyword: Any    # the `return` token
    explicit: bool  # whether the return statement had a value expression


class LoxCallable(ABC):
    """Anything that can be called from lox code."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable expects."""

    @abstractmethod
    def call(self, interpreter, arguments, paren):
        """Calls this object. arguments has already been checked against arity; paren locates runtime errors."""


class NativeFunction(LoxCallable):
    """Function implemented in Python and installed in the global frame."""

    def __init__(self, name, arity, fn):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments, paren):
        return self.fn(*arguments)

    def __str__(self):
        return "<native fn>"


def clock():
    """Native `clock()`: wall-clock time in seconds."""
    return time.time()


NATIVES = [NativeFunction("clock", 0, clock)]


class LoxFunction(LoxCallable):
    """User-defined function: a declaration closed over the frame active where it was declared."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance):
        """Returns this function with `this` bound to instance, in a fresh frame between the closure and the call."""
        env = Environment(self.closure)
        env.define("this", instance)
        return LoxFunction(self.declaration, env, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments, paren):
        env = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, env)

        if self.is_initializer:
            if completion is not None and completion.explicit:
                raise LoxRuntimeError(completion.keyword, "Can't return a value from an initializer.")
            return self.closure.get_at(0, "this")

        return completion.value if completion is not None else None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class LoxClass(LoxCallable):
    """Class value. Calling it creates a LoxInstance and runs its `init` method, if any."""

    def __init__(self, name, methods):
        self.name = name
        self.methods = methods

    def find_method(self, name):
        return self.methods.get(name)

    def arity(self):
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter, arguments, paren):
        instance = LoxInstance(self)

        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments, paren)

        return instance

    def __str__(self):
        return self.name


class LoxInstance:
    """Instance of a LoxClass. Fields are created on first assignment."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Fields shadow methods. Methods are bound to this instance on access."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"


def is_truthy(value):
    """nil and false are falsy, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Same type and same content. No coercion: in particular true != 1."""
    if left is None or right is None:
        return left is None and right is None
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value):
    """Textual form of a lox value, as written by `print`."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = str(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)
