"""Numbers in minilang. Number literals keep the text they were written with; this module converts that text to Python
numbers and implements the arithmetic that the evaluator's operators use.

Undefined operands (None) and anything that is not a number (a function, for example) make arithmetic produce NaN,
which then propagates through any further arithmetic instead of halting the program.
"""

import math
from numbers import Number


NAN = math.nan


def number(text):
    """Returns the int or float written as text. Text that isn't numeric (like 'nan' from a synthetic operand) is
    parsed as a float, and anything else gives NaN.
    """
    try:
        return int(text)
    except ValueError:
        pass

    try:
        return float(text)
    except ValueError:
        return NAN


def is_number(value):
    """Whether or not value takes part in arithmetic. bools are not minilang numbers."""
    return isinstance(value, Number) and not isinstance(value, bool)


def add(left, right):
    """Sum of left and right, or NaN if either is undefined or not a number."""
    if not (is_number(left) and is_number(right)):
        return NAN
    return left + right
