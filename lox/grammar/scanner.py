"""Lexical analysis for Lox. The Scanner makes a single left-to-right pass over the source text and produces the list of
Tokens consumed by the Parser.

```
<token>      ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "/" | "*"
               | "!" | "!=" | "=" | "==" | ">" | ">=" | "<" | "<="    ; two-character forms are matched first
               | <number> | <string> | <identifier> | <keyword>
<number>     ::= <digit>+ ("." <digit>+)?                             ; a trailing "." is not part of the number
<string>     ::= '"' <char>* '"'                                      ; no escape sequences, may span lines
<identifier> ::= (<alpha> | "_") (<alpha> | <digit> | "_")*
<comment>    ::= "//" <char>*                                         ; runs to end of line, produces no token
```

Errors (unexpected characters, unterminated strings) are reported to the ErrorHandler and scanning carries on. The
token list always ends with an EOF token on the final line.
"""

from lox.grammar.tokens import KEYWORDS, Token, TokenType


SINGLE_CHARS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# char: (type if followed by "=", type otherwise)
EQUAL_PAIRS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

WHITESPACE = {" ", "\r", "\t"}


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Scanner:
    """Turns source text into Tokens. A Scanner is single-use: call scan_tokens once."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self._start = 0    # offset of the first char of the token being scanned
        self._current = 0  # offset of the char about to be consumed
        self._line = 1

    def scan_tokens(self):
        """Scans the whole source. Returns the tokens, terminated by an EOF token."""
        while not self._is_at_end():
            self._start = self._current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self._line))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHARS:
            self._add_token(SINGLE_CHARS[char])

        elif char in EQUAL_PAIRS:
            with_equal, alone = EQUAL_PAIRS[char]
            self._add_token(with_equal if self._match("=") else alone)

        elif char == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)

        elif char in WHITESPACE:
            pass

        elif char == "\n":
            self._line += 1

        elif char == "\"":
            self._string()

        elif is_digit(char):
            self._number()

        elif is_alpha(char):
            self._identifier()

        else:
            self.error_handler.error(self._line, f"Unexpected character: {char}")

    def _string(self):
        while self._peek() != "\"" and not self._is_at_end():
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._is_at_end():
            self.error_handler.error(self._line, "Unterminated string.")
            return

        self._advance()  # closing "
        self._add_token(TokenType.STRING, self.source[self._start + 1:self._current - 1])

    def _number(self):
        while is_digit(self._peek()):
            self._advance()

        # only take the "." if a digit follows it
        if self._peek() == "." and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self._start:self._current]))

    def _identifier(self):
        while is_alphanumeric(self._peek()):
            self._advance()

        text = self.source[self._start:self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _add_token(self, typ, literal=None):
        text = self.source[self._start:self._current]
        self.tokens.append(Token(typ, text, literal, self._line))

    def _match(self, expected):
        if self._is_at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _advance(self):
        char = self.source[self._current]
        self._current += 1
        return char

    def _peek(self):
        return "" if self._is_at_end() else self.source[self._current]

    def _peek_next(self):
        return "" if self._current + 1 >= len(self.source) else self.source[self._current + 1]

    def _is_at_end(self):
        return self._current >= len(self.source)
