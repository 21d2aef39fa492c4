"""Session control for minilang. A Session takes a piece of source text through the whole pipeline (lexer, parser,
evaluator) with a single ErrorHandler, so every diagnostic the pipeline records ends up in one place.
"""

from minilang.lang.error import ErrorHandler
from minilang.pure.evaluator import Evaluator
from minilang.pure.lexical import Lexer
from minilang.pure.parser import Parser


class Session:
    """Governs a minilang run: lexing and parsing happen on construction, evaluation is delayed until run is called."""
    STRING_NAME = "<string>"  # name used in messages when source didn't come from anywhere in particular

    def __init__(self, source, name=STRING_NAME, error_handler=None, halt_on_unmatched=True):
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)

        self.error_handler = error_handler
        self.error_handler.register_source(name, source)

        self.source = source
        self.name = name  # used for error messages

        self.tokens = Lexer(self.error_handler, halt_on_unmatched).tokenize(source)
        self.program = Parser(self.tokens, self.error_handler).parse_program()

        self.result = None

    @property
    def diagnostics(self):
        return self.error_handler.diagnostics

    def run(self, environment=None):
        """Evaluates the program and returns its value. Errors raised while running are thrown with the session's
        ErrorHandler, in which case the result is None (or the process exits, if the handler is fatal).
        """
        self.result = None
        with self.error_handler:
            self.result = Evaluator(self.error_handler).run(self.program, environment)
        return self.result
