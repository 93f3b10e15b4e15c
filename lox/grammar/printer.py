"""Renders syntax trees in a fully parenthesized prefix form, mainly for debugging the Parser (`lox --ast`).

Format:
    1 + 2 * 3              ->  (+ 1 (* 2 3))
    -(a)                   ->  (- (group a))
    var x = 1;             ->  (var x = 1)
    if (c) print 1;        ->  (if c (print 1))
    { a = 1; }             ->  (block (; (= a 1)))
    <failed declaration>   ->  <error>
"""

from lox.grammar import ast
from lox.interpreter import stringify


class AstPrinter:

    def print(self, node):
        """Returns the printed form of an Expr, Stmt or None (a declaration that failed to parse)."""
        if node is None:
            return "<error>"

        if isinstance(node, ast.Literal):
            if isinstance(node.value, str):
                return f"\"{node.value}\""
            return stringify(node.value)
        if isinstance(node, ast.Grouping):
            return self._parenthesize("group", node.expression)
        if isinstance(node, ast.Unary):
            return self._parenthesize(node.operator.lexeme, node.right)
        if isinstance(node, (ast.Binary, ast.Logical)):
            return self._parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, ast.Variable):
            return node.name.lexeme
        if isinstance(node, ast.Assign):
            return self._parenthesize(f"= {node.name.lexeme}", node.value)

        if isinstance(node, ast.Expression):
            return self._parenthesize(";", node.expression)
        if isinstance(node, ast.Print):
            return self._parenthesize("print", node.expression)
        if isinstance(node, ast.Var):
            if node.initializer is None:
                return f"(var {node.name.lexeme})"
            return self._parenthesize(f"var {node.name.lexeme} =", node.initializer)
        if isinstance(node, ast.Block):
            return self._parenthesize("block", *node.statements)
        if isinstance(node, ast.If):
            return self._print_if(node)

        raise TypeError(f"cannot print {type(node).__name__}")

    def print_program(self, program):
        """Returns one line per top-level statement."""
        return "\n".join(self.print(statement) for statement in program)

    def _print_if(self, node):
        """Else-if chains are printed in a loop, each link closing one more parenthesis at the end."""
        result, links = "", 0
        while isinstance(node, ast.If):
            result += f"(if {self.print(node.condition)} {self.print(node.then_branch)}"
            links += 1
            node = node.else_branch
            if node is not None:
                result += " "

        if node is not None:
            result += self.print(node)
        return result + ")" * links

    def _parenthesize(self, name, *nodes):
        result = f"({name}"
        for node in nodes:
            result += " " + self.print(node)
        return result + ")"
