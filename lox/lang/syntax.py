"""Syntax tree for the lox language.

Every node is an immutable dataclass. Nodes compare and hash by identity (eq=False) because the resolver keys its
hop-count table on the node itself: two textually identical variable references at different places in the source are
different keys.

```
<expr> ::= Literal | Grouping | Unary | Binary | Logical | Variable | Assign | Call | Get | Set
<stmt> ::= Expression | Print | Var | Block | If | While | Function | Return | Class
```
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from lox.lang.tokens import Token


class Expr:
    """Superclass of expression nodes."""


class Stmt:
    """Superclass of statement nodes."""


node = dataclass(frozen=True, eq=False)


@node
class Literal(Expr):
    value: Any


@node
class Grouping(Expr):
    """Parenthesized, comma-separated expressions. Evaluates to the last one."""
    expressions: List[Expr]


@node
class Unary(Expr):
    operator: Token
    right: Expr


@node
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@node
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@node
class Variable(Expr):
    """Reference to a name. `this` is a Variable whose name is the THIS keyword token."""
    name: Token


@node
class Assign(Expr):
    name: Token
    value: Expr


@node
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate runtime errors
    arguments: List[Expr]


@node
class Get(Expr):
    object: Expr
    name: Token


@node
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@node
class Expression(Stmt):
    expression: Expr


@node
class Print(Stmt):
    expression: Expr


@node
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@node
class Block(Stmt):
    statements: List[Stmt]


@node
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@node
class While(Stmt):
    condition: Expr
    body: Stmt


@node
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@node
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@node
class Class(Stmt):
    name: Token
    methods: List[Function]
