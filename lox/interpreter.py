"""Tree-walking interpreter for Lox.

Basic program flow (see lang/session.py):
    1. Scanner: source text -> Tokens
    2. Parser: Tokens -> Program (list of statements), reporting syntax errors
    3. Interpreter: if no syntax error was reported, executes the Program statement by statement

Values are represented directly by Python objects: nil is None, booleans are bool, numbers are float and strings are
str. nil and false are falsy, everything else is truthy.
"""

import math
from decimal import Decimal

from lox.environment import Environment
from lox.grammar import ast
from lox.grammar.tokens import TokenType
from lox.lang.error import LoxRuntimeError


def is_truthy(value):
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_number(value):
    return isinstance(value, float)


def is_equal(left, right):
    """Values of different kinds are never equal, so true != 1 even though Python says otherwise. Unlike IEEE
    comparison, NaN is equal to NaN.
    """
    if left is None or right is None:
        return left is right
    if type(left) is not type(right):
        return False
    if is_number(left) and math.isnan(left) and math.isnan(right):
        return True
    return left == right


def stringify(value):
    """Returns the printed form of value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = format(Decimal(repr(value)), "f")  # shortest round-trip digits, never in exponent form
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def divide(left, right):
    """IEEE division: dividing by zero gives a signed infinity (or NaN for 0/0) instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


NUMBER_OPERATORS = {
    TokenType.MINUS: lambda left, right: left - right,
    TokenType.STAR: lambda left, right: left * right,
    TokenType.SLASH: divide,
    TokenType.GREATER: lambda left, right: left > right,
    TokenType.GREATER_EQUAL: lambda left, right: left >= right,
    TokenType.LESS: lambda left, right: left < right,
    TokenType.LESS_EQUAL: lambda left, right: left <= right,
}


class Interpreter:
    """Executes Programs against a persistent global Environment, so that a session can run several Programs in turn
    (one per line in interactive mode) and keep its variables.
    """

    def __init__(self, error_handler, output=print):
        self.error_handler = error_handler
        self.output = output  # called with one line of text per print statement
        self.environment = Environment()

    def interpret(self, program):
        """Executes every statement of program in order. A runtime error is reported and ends the pass: later
        statements are skipped, but bindings made before the error are kept.
        """
        statement = None
        try:
            for statement in program:
                self.execute(statement)
        except LoxRuntimeError as error:
            self.error_handler.runtime_error(error)
        except RecursionError:
            error = LoxRuntimeError(first_token(statement), "Maximum recursion depth exceeded.")
            self.error_handler.runtime_error(error)

    # ---------------------------------------------------------------------------------------------------------------
    # Statements

    def execute(self, stmt):
        if stmt is None:
            return  # missing else branch, or a failed declaration in a program that had syntax errors

        if isinstance(stmt, ast.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, ast.Print):
            self.output(stringify(self.evaluate(stmt.expression)))

        elif isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, ast.Block):
            self.execute_block(stmt.statements)

        elif isinstance(stmt, ast.If):
            self.execute(self._select_branch(stmt))

        else:
            raise TypeError(f"cannot execute {type(stmt).__name__}")

    def execute_block(self, statements):
        """Executes statements in a new frame enclosed by the current one."""
        with self.environment.scope():
            for statement in statements:
                self.execute(statement)

    def _select_branch(self, stmt):
        """Returns the branch of an if statement to run (None if there is none), walking else-if chains in a loop."""
        while isinstance(stmt, ast.If):
            if is_truthy(self.evaluate(stmt.condition)):
                return stmt.then_branch
            stmt = stmt.else_branch
        return stmt

    # ---------------------------------------------------------------------------------------------------------------
    # Expressions

    def evaluate(self, expr):
        if isinstance(expr, ast.Literal):
            return expr.value

        elif isinstance(expr, ast.Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, ast.Unary):
            return self._unary(expr)

        elif isinstance(expr, ast.Binary):
            return self._binary(expr)

        elif isinstance(expr, ast.Logical):
            left = self.evaluate(expr.left)
            if expr.operator.typ is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, ast.Variable):
            return self.environment.get(expr.name)

        elif isinstance(expr, ast.Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value

        raise TypeError(f"cannot evaluate {type(expr).__name__}")

    def _unary(self, expr):
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.typ is TokenType.BANG:
            return not is_truthy(right)

        if operator.typ is TokenType.MINUS:
            if not is_number(right):
                raise LoxRuntimeError(operator, "Operand must be a number.")
            return -right

        raise TypeError(f"unknown unary operator '{operator.lexeme}'")

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.typ is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.typ is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.typ is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        if operator.typ in NUMBER_OPERATORS:
            if not (is_number(left) and is_number(right)):
                raise LoxRuntimeError(operator, "Operands must be numbers.")
            return NUMBER_OPERATORS[operator.typ](left, right)

        raise TypeError(f"unknown binary operator '{operator.lexeme}'")


def first_token(node):
    """Returns a token from the start of node (None if it has none), used to attribute errors to a line."""
    while node is not None:
        if isinstance(node, ast.Unary):
            return node.operator
        if isinstance(node, (ast.Variable, ast.Assign, ast.Var)):
            return node.name
        if isinstance(node, (ast.Binary, ast.Logical)):
            return node.operator

        if isinstance(node, (ast.Grouping, ast.Expression, ast.Print)):
            node = node.expression
        elif isinstance(node, ast.If):
            node = node.condition
        elif isinstance(node, ast.Block):
            node = next((statement for statement in node.statements if statement is not None), None)
        else:
            return None
    return None
