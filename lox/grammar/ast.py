"""Abstract syntax tree for Lox. Expressions and statements are closed sets of node types: the Interpreter and AstPrinter
dispatch over exactly the classes below. Each node owns its children, so a parsed program is a plain tree.

A Program is the ordered list of top-level statements returned by the Parser. A declaration that failed to parse is
recorded as None in its position.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from lox.grammar.tokens import Token


Value = Union[None, bool, float, str]


class Expr:
    """Superclass of every expression node."""


@dataclass
class Literal(Expr):
    value: Value


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    """'and'/'or'. Kept apart from Binary because the right operand is only evaluated when needed."""
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


class Stmt:
    """Superclass of every statement node."""


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass
class Block(Stmt):
    statements: List[Optional[Stmt]]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


Program = List[Optional[Stmt]]
