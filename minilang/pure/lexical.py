r"""Lexical analysis for minilang: turns raw source text into an ordered list of Tokens.

Lexing is rule-ordered rather than longest-match. At every position, Lexer.RULES is tried top to bottom and the first
rule whose pattern matches at that position wins, so rule order is load-bearing:

```
<function>  ::= "function"               ; keywords must come before <word>, and only match on a word boundary
<return>    ::= "return"                 ;   so "functionX" is a single <word>
<let>       ::= "let"
<number>    ::= <digit>+ ["." <digit>+]  ; must come before <word>, since \w also matches digits
<word>      ::= (<letter> | <digit> | "_")+
<space>     ::= horizontal whitespace
<semicolon> ::= ";"
<linebreak> ::= "\r\n" | "\n" | "\r"
<brace>     ::= "{" | "}"
<paren>     ::= "(" | ")"
<punctuator>::= "=" | "+"
```

Letters, digits and word boundaries are ASCII only, so "\u00e9" matches no rule, while horizontal whitespace is any
Unicode space. Whitespace and line breaks are kept as tokens: the parser decides where they matter. A character that
matches no rule becomes a single-character OTHER token, and by default lexing stops right there.
"""

import re
from dataclasses import dataclass
from enum import Enum

from minilang.lang.error import ErrorHandler, LexError


class TokenKind(Enum):
    FUNCTION_KEYWORD = "FunctionKeyword"
    RETURN_KEYWORD = "ReturnKeyword"
    LET_KEYWORD = "LetKeyword"
    NUMBER = "Number"
    WORD = "Word"
    SPACE = "Space"
    SEMICOLON = "Semicolon"
    LINE_BREAK = "LineBreak"
    BRACE = "Brace"
    PAREN = "Paren"
    PUNCTUATOR = "Punctuator"
    OTHER = "Other"

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


@dataclass(frozen=True)
class Token:
    """A classified fragment of source text. position is the offset of the fragment's first character."""
    kind: TokenKind
    text: str
    position: int

    def __repr__(self):
        return f"Token({self.kind.value}, {self.text!r}, {self.position})"


class Lexer:
    """Rule-ordered tokenizer. See module docstring for the rules."""
    RULES = [
        (TokenKind.FUNCTION_KEYWORD, re.compile(r"function\b", re.ASCII)),
        (TokenKind.RETURN_KEYWORD, re.compile(r"return\b", re.ASCII)),
        (TokenKind.LET_KEYWORD, re.compile(r"let\b", re.ASCII)),

        (TokenKind.NUMBER, re.compile(r"\d+(\.\d+)?", re.ASCII)),
        (TokenKind.WORD, re.compile(r"\w+", re.ASCII)),
        (TokenKind.SPACE, re.compile(r"[^\S\r\n]+")),
        (TokenKind.SEMICOLON, re.compile(r";", re.ASCII)),
        (TokenKind.LINE_BREAK, re.compile(r"\r\n|\n|\r", re.ASCII)),
        (TokenKind.BRACE, re.compile(r"[{}]", re.ASCII)),
        (TokenKind.PAREN, re.compile(r"[()]", re.ASCII)),
        (TokenKind.PUNCTUATOR, re.compile(r"[=+]", re.ASCII)),
    ]

    def __init__(self, error_handler=None, halt_on_unmatched=True):
        """If halt_on_unmatched, lexing stops at the first character no rule matches. Otherwise that character becomes
        an OTHER token and lexing carries on after it. Either way, a LexError is recorded with error_handler.
        """
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)

        self.error_handler = error_handler
        self.halt_on_unmatched = halt_on_unmatched

    def match(self, source, pos):
        """Returns the Token produced by the first rule matching source at pos, or None if no rule matches."""
        for kind, pattern in self.RULES:
            matched = pattern.match(source, pos)
            if matched:
                return Token(kind, matched.group(), pos)
        return None

    def tokenize(self, source):
        """Returns the list of Tokens in source."""
        tokens = []
        pos = 0

        while pos < len(source):
            token = self.match(source, pos)

            if token is None:
                token = Token(TokenKind.OTHER, source[pos], pos)
                self.error_handler.warn(LexError("no rule matches '{}'", token.text, position=pos))

            tokens.append(token)
            pos += len(token.text)

            if token.kind is TokenKind.OTHER and self.halt_on_unmatched:
                break

        return tokens


def tokenize(source, error_handler=None, halt_on_unmatched=True):
    """Shorthand for Lexer(error_handler, halt_on_unmatched).tokenize(source)."""
    return Lexer(error_handler, halt_on_unmatched).tokenize(source)
