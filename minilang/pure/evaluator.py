"""Tree-walking evaluator for minilang.

Environments are plain dicts of name: value, where a value is a number, None (undefined) or a FunctionDeclaration.
Scoping is by snapshot: every statement list and every expression is evaluated against a copy of the environment it
was given, so bindings made inside a call never leak out to the caller, and a callee only sees the caller's bindings
as they were when the call was made.

Evaluation never fails on bad values. Unbound names resolve to None and arithmetic on anything that isn't a number
gives NaN; both just flow on through the program (the former is recorded as an EvalUndefined diagnostic).
"""

from minilang.lang import numerical
from minilang.lang.error import CallDepthError, ErrorHandler, EvalUndefined
from minilang.pure.syntax import (BinaryExpr, CallExpr, ExpressionStatement, FunctionDeclaration, Identifier,
                                  LetStatement, NumberLiteral, Operator, ReturnStatement)


class Evaluator:
    """Runs statements and evaluates expressions. Holds the call depth of the program being run."""
    OPERATORS = {"+": numerical.add}
    MAX_CALL_DEPTH = 128

    def __init__(self, error_handler=None):
        if error_handler is None:
            error_handler = ErrorHandler(fatal=False)

        self.error_handler = error_handler
        self.depth = 0

    def run(self, statements, environment=None):
        """Executes statements in order and returns the value of the last expression or return statement executed, or
        None if there was none. Note that a return statement doesn't stop execution: later statements still run, and
        the last value wins.
        """
        scope = dict(environment) if environment else {}
        last = None

        for node in statements:
            if isinstance(node, FunctionDeclaration):
                scope[node.name] = node

            elif isinstance(node, LetStatement):
                scope[node.name] = self.evaluate(node.expression, scope)

            elif isinstance(node, (ExpressionStatement, ReturnStatement)):
                last = self.evaluate(node.expression, scope)

        return last

    def evaluate(self, expression, environment):
        """Returns the value of expression in a snapshot of environment."""
        scope = dict(environment)

        if isinstance(expression, CallExpr):
            return self.call(expression, scope)

        elif isinstance(expression, BinaryExpr):
            if len(expression.notation) == 1:
                return self.resolve(expression.notation[0], scope)
            return self.fold(expression.notation, scope)

        return None

    def call(self, expression, scope):
        """Runs the body of the function bound to expression.callee against scope."""
        func = scope.get(expression.callee)
        if not isinstance(func, FunctionDeclaration):
            self.error_handler.warn(EvalUndefined("'{}' is not a function", expression.callee))
            return None

        if self.depth >= self.MAX_CALL_DEPTH:
            raise CallDepthError("maximum call depth of {} exceeded calling '{}'",
                                 (str(self.MAX_CALL_DEPTH), expression.callee), diagnosis=False)

        self.depth += 1
        try:
            return self.run(func.body, scope)
        finally:
            self.depth -= 1

    def fold(self, notation, scope):
        """Stack machine over a flattened postfix notation. Operators pop the two most recently pushed operands, so
        the right operand is popped (and passed to the operator) first.
        """
        stack = []
        for entry in notation:
            if isinstance(entry, Operator):
                first = stack.pop() if stack else None
                second = stack.pop() if stack else None

                apply = self.OPERATORS.get(entry.symbol)
                if apply is None:
                    self.error_handler.warn(EvalUndefined("unknown operator '{}'", entry.symbol,
                                                          position=entry.position))
                    stack.append(NumberLiteral.of(numerical.NAN))
                else:
                    stack.append(NumberLiteral.of(apply(self.resolve(first, scope), self.resolve(second, scope))))

            elif isinstance(entry, (Identifier, NumberLiteral)):
                stack.append(entry)

        return self.resolve(stack[0], scope) if stack else None

    def resolve(self, operand, scope):
        """Value of a single operand: identifiers are looked up in scope, number literals are parsed."""
        if isinstance(operand, Identifier):
            if operand.name not in scope:
                self.error_handler.warn(EvalUndefined("'{}' is not defined", operand.name, position=operand.position))
            return scope.get(operand.name)

        elif isinstance(operand, NumberLiteral):
            return operand.number

        return None


def run(statements, environment=None, error_handler=None):
    """Shorthand for Evaluator(error_handler).run(statements, environment)."""
    return Evaluator(error_handler).run(statements, environment)


def evaluate(expression, environment=None, error_handler=None):
    """Shorthand for Evaluator(error_handler).evaluate(expression, environment)."""
    return Evaluator(error_handler).evaluate(expression, environment or {})
