"""Lexical analysis for the lox language: turns raw source text into a list of Tokens ending with an EOF token.

Lexical grammar can be loosely defined as follows:

```
<number>     ::= <digit>+ ( "." <digit>+ )?      ; a trailing "." is not part of the number
<string>     ::= '"' <char>* '"'                  ; may span lines, no escape sequences
<identifier> ::= <alpha> ( <alpha> | <digit> )*   ; <alpha> includes "_"
<comment>    ::= "//" <char>* "\n"
               | "/*" <char>* "*/"                ; block comments do not nest
```

The scanner never raises: unexpected characters and unterminated strings/comments are reported through the
ErrorHandler and scanning carries on, so that a single pass reports as many errors as possible.
"""

from lox.lang.error import LexicalError
from lox.lang.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single-pass scanner over a source string."""
    SINGLE = {
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
    # char: (token if followed by "=", token otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char being considered
        self.line = 1

    def scan_tokens(self):
        """Scans the whole source. Always returns a token list terminated by EOF."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            matched, single = Scanner.DOUBLE[char]
            self.add_token(matched if self.match("=") else single)
        elif char == "/":
            if self.match("/"):
                self.line_comment()
            elif self.match("*"):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif char in Scanner.WHITESPACE:
            pass
        elif char == "\n":
            self.line += 1
        elif char == '"':
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            self.error(f"Unexpected character '{char}'.")

    def line_comment(self):
        while self.peek() != "\n" and not self.is_at_end():
            self.advance()

    def block_comment(self):
        while not (self.peek() == "*" and self.peek_next() == "/") and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error("Unterminated comment.")
            return

        self.advance()  # closing */
        self.advance()

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alpha(self.peek()) or Scanner.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def error(self, message):
        self.error_handler.report(LexicalError(message, self.line))

    def match(self, expected):
        """Consumes the current char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return "\0" if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def advance(self):
        self.current += 1
        return self.source[self.current - 1]

    def is_at_end(self):
        return self.current >= len(self.source)

    def add_token(self, type_, literal=None):
        self.tokens.append(Token(type_, self.source[self.start:self.current], literal, self.line))

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"
