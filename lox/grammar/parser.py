"""Recursive-descent parser for Lox. Grammar, from lowest to highest precedence:

```
<program>     ::= <declaration>* EOF
<declaration> ::= "var" IDENTIFIER ("=" <expression>)? ";" | <statement>
<statement>   ::= <if_stmt> | <print_stmt> | <block> | <expr_stmt>
<if_stmt>     ::= "if" "(" <expression> ")" <statement> ("else" <statement>)?    ; "else" binds to the nearest "if"
<print_stmt>  ::= "print" <expression> ";"
<block>       ::= "{" <declaration>* "}"
<expr_stmt>   ::= <expression> ";"

<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <logic_or>                      ; right-associative
<logic_or>    ::= <logic_and> ("or" <logic_and>)*                               ; binary levels are left-associative
<logic_and>   ::= <equality> ("and" <equality>)*
<equality>    ::= <comparison> (("!=" | "==") <comparison>)*
<comparison>  ::= <term> ((">" | ">=" | "<" | "<=") <term>)*
<term>        ::= <factor> (("-" | "+") <factor>)*
<factor>      ::= <unary> (("/" | "*") <unary>)*
<unary>       ::= ("!" | "-") <unary> | <primary>
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil" | IDENTIFIER | "(" <expression> ")"
```

Syntax errors are reported to the ErrorHandler as they are found. A ParseError unwinds to the enclosing declaration,
which records None in its place and synchronizes: tokens are discarded until just after a ";" or just before a token
that starts a statement. Parsing then carries on, so independent errors in the same source are all reported.
"""

from contextlib import contextmanager

from lox.grammar import ast
from lox.grammar.tokens import STATEMENT_STARTS, TokenType
from lox.lang.error import ParseError


class Parser:
    """Parses a list of Tokens (ending in EOF) into a Program. A Parser is single-use: call parse once."""
    MAX_DEPTH = 32  # nesting limit for parenthesized/unary/assigned expressions, blocks and if branches

    def __init__(self, tokens, error_handler, max_depth=MAX_DEPTH):
        self.tokens = tokens
        self.error_handler = error_handler
        self.max_depth = max_depth

        self._current = 0
        self._depth = 0

    def parse(self):
        """Returns the Program. Check error_handler.had_error before running it."""
        program = []
        while not self._is_at_end():
            program.append(self._declaration())
        return program

    # ---------------------------------------------------------------------------------------------------------------
    # Statements

    def _declaration(self):
        try:
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _var_declaration(self):
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def _statement(self):
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.LEFT_BRACE):
            return ast.Block(self._block())
        return self._expression_statement()

    def _if_statement(self):
        """Parses an if statement whose "if" has already been consumed. An else-if chain is parsed in a loop and
        folded into nested If nodes afterwards, so only the branches count towards the nesting limit, not the chain.
        """
        links = []  # (condition, then_branch) for each "if" of the chain
        else_branch = None

        while True:
            self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
            condition = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

            with self._nested():
                links.append((condition, self._statement()))

            if not self._match(TokenType.ELSE):
                break
            if not self._match(TokenType.IF):
                with self._nested():
                    else_branch = self._statement()
                break

        for condition, then_branch in reversed(links):
            else_branch = ast.If(condition, then_branch, else_branch)
        return else_branch

    def _print_statement(self):
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def _expression_statement(self):
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    def _block(self):
        """Parses declarations up to the closing brace. The opening brace has already been consumed."""
        statements = []
        with self._nested():
            while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
                statements.append(self._declaration())

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # ---------------------------------------------------------------------------------------------------------------
    # Expressions

    def _expression(self):
        return self._assignment()

    def _assignment(self):
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            with self._nested():
                value = self._assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)

            # reported, but the expression is still usable so there is no need to synchronize
            self.error_handler.token_error(equals, "Invalid assignment target.")

        return expr

    def _or(self):
        return self._left_assoc(ast.Logical, self._and, TokenType.OR)

    def _and(self):
        return self._left_assoc(ast.Logical, self._equality, TokenType.AND)

    def _equality(self):
        return self._left_assoc(ast.Binary, self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self):
        return self._left_assoc(ast.Binary, self._term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                                TokenType.LESS_EQUAL)

    def _term(self):
        return self._left_assoc(ast.Binary, self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self):
        return self._left_assoc(ast.Binary, self._unary, TokenType.SLASH, TokenType.STAR)

    def _left_assoc(self, node_cls, operand, *operators):
        """Parses operand (operator operand)* and folds the result to the left: a - b - c = ((a - b) - c)."""
        expr = operand()

        while self._match(*operators):
            operator = self._previous()
            right = operand()
            expr = node_cls(expr, operator, right)

        return expr

    def _unary(self):
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            with self._nested():
                right = self._unary()
            return ast.Unary(operator, right)

        return self._primary()

    def _primary(self):
        if self._match(TokenType.FALSE):
            return ast.Literal(False)
        if self._match(TokenType.TRUE):
            return ast.Literal(True)
        if self._match(TokenType.NIL):
            return ast.Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(self._previous().literal)

        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            with self._nested():
                expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self.error_handler.token_error(self._peek(), "Expect expression.")

    # ---------------------------------------------------------------------------------------------------------------
    # Helpers

    @contextmanager
    def _nested(self):
        """Tracks how deeply the productions inside the with block are nested."""
        if self._depth >= self.max_depth:
            raise self.error_handler.token_error(self._peek(), "Too much nesting.")

        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def _synchronize(self):
        """Discards tokens until the start of the next statement."""
        self._advance()

        while not self._is_at_end():
            if self._previous().typ is TokenType.SEMICOLON:
                return
            if self._peek().typ in STATEMENT_STARTS:
                return
            self._advance()

    def _consume(self, typ, message):
        if self._check(typ):
            return self._advance()
        raise self.error_handler.token_error(self._peek(), message)

    def _match(self, *types):
        for typ in types:
            if self._check(typ):
                self._advance()
                return True
        return False

    def _check(self, typ):
        return not self._is_at_end() and self._peek().typ is typ

    def _advance(self):
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _is_at_end(self):
        return self._peek().typ is TokenType.EOF

    def _peek(self):
        return self.tokens[self._current]

    def _previous(self):
        return self.tokens[self._current - 1]
