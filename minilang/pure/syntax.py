"""Syntax tree nodes produced by the parser and walked by the evaluator.

Statements:

```
<program>     ::= <statement>*
<statement>   ::= "function" <name> "(" ... ")" "{" <statement>* "}"   ; FunctionDeclaration
                | "let" <word> "=" <expression>                       ; LetStatement
                | "return" <expression>                               ; ReturnStatement
                | <expression>                                        ; ExpressionStatement
<expression>  ::= <operand> ("+" <operand>)*                          ; BinaryExpr
                | <operand> "(" ... ")"                               ; CallExpr (arguments are discarded)
<operand>     ::= <number> | <word>
```

Expressions are not trees: a BinaryExpr keeps a flattened postfix notation, the first operand followed by
(operand, operator) pairs in evaluation order, e.g. `a + b + 1` is [a, b, +, 1, +].
"""

from minilang.lang.numerical import number


class Node:
    """Superclass of every syntax tree node. Subclasses list the attributes that make up their identity in FIELDS."""
    FIELDS = ()

    def __init__(self):
        self._cls = type(self).__name__

    def __repr__(self):
        fields = ", ".join(f"{field}={getattr(self, field)!r}" for field in self.FIELDS)
        return f"{self._cls}({fields})"

    def __eq__(self, other):
        return type(other) is type(self) and all(getattr(self, f) == getattr(other, f) for f in self.FIELDS)


class Operand(Node):
    """Superclass of the entries of a BinaryExpr that hold values. position is where the operand's token started in
    the source, or None for operands that were never written (synthetic results of the evaluator).
    """
    position = None


class NumberLiteral(Operand):
    FIELDS = ("value",)

    def __init__(self, value, position=None):
        super().__init__()
        self.value = value  # text as written, None for synthetic literals
        self.position = position
        self.computed = None

    @property
    def number(self):
        if self.value is None:
            return self.computed
        return number(self.value)

    @classmethod
    def of(cls, value):
        """Synthetic NumberLiteral holding the result of a computation. The value is kept as is, never converted to
        text, since huge ints can't be.
        """
        literal = cls(None)
        literal.computed = value
        return literal


class Identifier(Operand):
    FIELDS = ("name",)

    def __init__(self, name, position=None):
        super().__init__()
        self.name = name
        self.position = position


class Operator(Node):
    FIELDS = ("symbol",)

    def __init__(self, symbol, position=None):
        super().__init__()
        self.symbol = symbol
        self.position = position


class Expression(Node):
    """Superclass of expressions."""


class BinaryExpr(Expression):
    """Flattened postfix sequence of Operands and Operators. A single operand is a BinaryExpr too."""
    FIELDS = ("notation",)

    def __init__(self, notation=None):
        super().__init__()
        self.notation = list(notation) if notation else []


class CallExpr(Expression):
    """Zero-argument call of the function bound to callee."""
    FIELDS = ("callee",)

    def __init__(self, callee):
        super().__init__()
        self.callee = callee


class Statement(Node):
    """Superclass of statements."""


class FunctionDeclaration(Statement):
    FIELDS = ("name", "body")

    def __init__(self, name, body=None):
        super().__init__()
        self.name = name
        self.body = list(body) if body else []


class LetStatement(Statement):
    FIELDS = ("name", "expression")

    def __init__(self, name, expression):
        super().__init__()
        self.name = name
        self.expression = expression


class ReturnStatement(Statement):
    FIELDS = ("expression",)

    def __init__(self, expression):
        super().__init__()
        self.expression = expression


class ExpressionStatement(Statement):
    FIELDS = ("expression",)

    def __init__(self, expression):
        super().__init__()
        self.expression = expression


class Program(Node):
    """Top-level statements. Behaves like a read-only list of them."""
    FIELDS = ("body",)

    def __init__(self, body=None):
        super().__init__()
        self.body = list(body) if body else []

    def __iter__(self):
        return iter(self.body)

    def __len__(self):
        return len(self.body)

    def __getitem__(self, idx):
        return self.body[idx]
