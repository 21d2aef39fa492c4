"""Error handling for minilang. The pipeline itself is lenient: malformed input is skipped and unknown names resolve to
undefined, so most problems are recorded as diagnostics (non-fatal GenericExceptions) instead of being raised. Only
CallDepthError is raised during normal running; anything else that makes it to ErrorHandler is an internal issue.
"""

import re
import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a minilang error/warning, or be recorded as
    a diagnostic.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, position=None):
        """Parses args for GenericException or warning. position is the offset of expr in the source, if known."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.position = position

        super().__init__(msg.format(*exprs))


class LexError(GenericException):
    """A character that no lexer rule matches."""


class ParseSkip(GenericException):
    """A token that did not fit the construct being parsed and was skipped."""


class EvalUndefined(GenericException):
    """A lookup that resolved to undefined during evaluation."""


class CallDepthError(GenericException):
    """Raised when nested calls exceed Evaluator.MAX_CALL_DEPTH."""


class ErrorHandler:
    """Collects diagnostics, and as a context manager, converts Python errors into minilang errors."""
    ERROR = "red"
    WARNING = "magenta"
    LINE_BREAK = re.compile(r"\r\n|\n|\r")

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose  # whether or not diagnostics are printed as they are recorded

        self.name = None
        self.source = None
        self.diagnostics = []

    def register_source(self, name, source):
        """Registers the source text that positions in diagnostics refer to."""
        self.name = name
        self.source = source

    def locate(self, position):
        """Returns (line, line_num, col) of position in the registered source. line_num and col are 1-indexed."""
        if self.source is None or position is None:
            return None, None, None

        line_start = max(self.source.rfind("\n", 0, position), self.source.rfind("\r", 0, position)) + 1
        line_end = len(self.source)
        for newline in "\r\n":
            found = self.source.find(newline, position)
            if found != -1:
                line_end = min(line_end, found)

        line_num = len(ErrorHandler.LINE_BREAK.findall(self.source, 0, line_start)) + 1
        return self.source[line_start:line_end], line_num, position - line_start + 1

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, error):
        """Records error as a diagnostic. If self.verbose, also prints a warning message for it."""
        self.diagnostics.append(error)
        if not self.verbose:
            return

        line, line_num, col = self.locate(error.position)
        location = f"{self.name}:{line_num}:{col}: " if line is not None else f"{self.name or '<string>'}: "

        error_msg = colored(location, attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if line is not None and error.diagnosis:
            # re-anchor the diagnosis on the whole line so the caret lines up with the source
            start = col - 1
            located = GenericException("{}", line, start=start, end=start + len(error.expr))
            print(ErrorHandler.diagnose(located, warning=True))

    def throw(self, error):
        """Throws error, which must be a GenericException. Exits if self.fatal."""
        error_msg = ""
        line, line_num, __ = self.locate(error.position)
        if line is not None:
            error_msg += f"  File '{self.name}', line {line_num}:\n"
            error_msg += f"    {line}\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

    def clear(self):
        """Forgets all recorded diagnostics."""
        self.diagnostics = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
