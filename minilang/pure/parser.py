"""Recursive-descent parser for minilang. See syntax.py for the grammar.

The parser is lenient: it never raises on malformed input. Tokens that don't fit the construct being parsed
are skipped, and the resulting (possibly partial) nodes are returned as is. Skips that lose information are recorded
as ParseSkip diagnostics with the parser's ErrorHandler; skipping whitespace, line breaks and characters the lexer
already reported is not.
"""

from minilang.lang.error import ErrorHandler, ParseSkip
from minilang.pure.lexical import TokenKind
from minilang.pure.syntax import (BinaryExpr, CallExpr, ExpressionStatement, FunctionDeclaration, Identifier,
                                  LetStatement, NumberLiteral, Operator, Program, ReturnStatement)


class TokenCursor:
    """Forward-only view of a token list. Lookahead is by offset from the current token; there is no backtracking."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.current = 0

    def advance(self):
        """Moves past the current token."""
        self.current += 1

    def peek(self, offset=0):
        """Returns the token offset tokens away from the current one, or None if there is no such token."""
        idx = self.current + offset
        if 0 <= idx < len(self.tokens):
            return self.tokens[idx]
        return None

    @property
    def exhausted(self):
        return self.current >= len(self.tokens)

    def skip_until(self, predicate):
        """Advances until predicate(current token) is true or tokens run out. Returns the skipped tokens."""
        skipped = []
        while not self.exhausted and not predicate(self.peek()):
            skipped.append(self.peek())
            self.advance()
        return skipped


class Parser:
    """Builds syntax tree nodes from a token list."""
    SILENT = (TokenKind.SPACE, TokenKind.LINE_BREAK, TokenKind.OTHER)  # OTHER tokens are reported by the lexer

    def __init__(self, tokens, error_handler=None):
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)

        self.cursor = TokenCursor(tokens)
        self.error_handler = error_handler

    def skip(self, token, msg="skipped unexpected '{}'"):
        """Records a ParseSkip diagnostic for token."""
        self.error_handler.warn(ParseSkip(msg, token.text, position=token.position))

    def parse_program(self):
        """Parses every statement in the token list. A stray '}' ends the program early, like it would end a block."""
        program = Program(self.parse_block())

        if not self.cursor.exhausted:
            closing = self.cursor.tokens[self.cursor.current - 1]
            self.skip(closing, "unmatched '{}' ends the program, remaining tokens were ignored")

        return program

    def parse_block(self):
        """Parses statements until a closing '}' has been consumed or tokens run out. Returns the statements."""
        nodes = []

        while not self.cursor.exhausted:
            token = self.cursor.peek()

            if token.kind is TokenKind.FUNCTION_KEYWORD:
                self.cursor.advance()
                nodes.append(self.parse_function())

            elif token.kind is TokenKind.RETURN_KEYWORD:
                self.cursor.advance()
                nodes.append(ReturnStatement(self.parse_expression()))

            elif token.kind is TokenKind.LET_KEYWORD:
                self.cursor.advance()
                nodes.append(self.parse_assignment())

            elif token.kind is TokenKind.BRACE:
                self.cursor.advance()
                if token.text == "}":
                    return nodes

            elif token.kind is TokenKind.WORD:
                nodes.append(ExpressionStatement(self.parse_expression()))

            else:
                if token.kind not in Parser.SILENT + (TokenKind.SEMICOLON,):
                    self.skip(token)
                self.cursor.advance()

        return nodes

    def parse_function(self):
        """Parses the rest of a function declaration after the 'function' keyword. The name is the trimmed text of
        every token before '(', whatever their kind; whatever sits between '(' and '{' is ignored.
        """
        name = "".join(token.text for token in self.cursor.skip_until(lambda token: token.text == "(")).strip()

        header = self.cursor.skip_until(lambda token: token.text == "{")
        if self.cursor.exhausted:
            last = header[-1] if header else self.cursor.peek(-1)
            self.skip(last, "function declaration ends at '{}' without a body")
            return FunctionDeclaration(name)

        self.cursor.advance()  # eat {
        return FunctionDeclaration(name, self.parse_block())

    def parse_assignment(self):
        """Parses the rest of a let statement after the 'let' keyword."""
        for token in self.cursor.skip_until(lambda token: token.kind is TokenKind.WORD):
            if token.kind not in Parser.SILENT:
                self.skip(token, "skipped '{}' while looking for a binding name")

        name = None
        if not self.cursor.exhausted:
            name = self.cursor.peek().text
            self.cursor.advance()

        for token in self.cursor.skip_until(lambda token: token.text == "="):
            if token.kind not in Parser.SILENT:
                self.skip(token, "skipped '{}' while looking for '='")

        if self.cursor.exhausted:
            last = self.cursor.peek(-1)
            if last is not None:
                self.skip(last, "let statement ends at '{}' without '='")
        self.cursor.advance()  # eat =

        return LetStatement(name, self.parse_expression())

    def parse_expression(self):
        """Parses tokens into a flattened postfix BinaryExpr, or a CallExpr if an operand is followed by '('. Stops
        after consuming ';' or a line break, or when tokens run out.
        """
        notation = []
        first = None  # first operand
        operator = None  # pending operator

        while not self.cursor.exhausted:
            token = self.cursor.peek()

            if token.kind is TokenKind.PUNCTUATOR:
                operator = Operator(token.text, token.position)

            elif token.kind in (TokenKind.SEMICOLON, TokenKind.LINE_BREAK):
                self.cursor.advance()
                return BinaryExpr(notation)

            elif token.kind is TokenKind.PAREN:
                if first is not None and operator is None and token.text == "(":
                    self.cursor.skip_until(lambda token: token.text == ")")  # arguments are not supported
                    self.cursor.advance()  # eat )
                    return CallExpr(first.text)
                self.skip(token)

            elif token.kind in (TokenKind.NUMBER, TokenKind.WORD):
                operand = Parser.operand(token)
                if first is None:
                    first = token
                    notation.append(operand)
                elif operator is None:
                    self.skip(token, "operand '{}' is missing an operator")
                else:
                    notation.append(operand)
                    notation.append(operator)
                    operator = None

            elif token.kind not in Parser.SILENT:
                self.skip(token)

            self.cursor.advance()

        return BinaryExpr(notation)

    @staticmethod
    def operand(token):
        """Returns the Operand node for a NUMBER or WORD token."""
        if token.kind is TokenKind.NUMBER:
            return NumberLiteral(token.text, token.position)
        return Identifier(token.text, token.position)


def parse_program(tokens, error_handler=None):
    """Shorthand for Parser(tokens, error_handler).parse_program()."""
    return Parser(tokens, error_handler).parse_program()


def parse_block(tokens, error_handler=None):
    """Parses statements from the start of tokens until a closing '}' or the end of tokens."""
    return Parser(tokens, error_handler).parse_block()
