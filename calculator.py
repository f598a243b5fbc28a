"""
Calculator Engine for SmartCalc
Left-to-right accumulator with a single pending operation
"""
import math
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from history_manager import HistoryRecord

# Longest numeric prefix, the way a browser's parseFloat reads it
_NUMBER_PREFIX = re.compile(r'^\s*[+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)')


class Operation(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    PERCENT = "%"

    @property
    def symbol(self):
        return self.value

    @property
    def label(self):
        """Symbol as drawn on the keypad"""
        return _LABELS[self]

    @classmethod
    def from_symbol(cls, text):
        """Accept a key symbol ('*') or a keypad label ('×')"""
        for op in cls:
            if text == op.value or text == _LABELS[op]:
                return op
        raise ValueError(f"Unknown operation: {text!r}")

    def apply(self, a, b):
        """Evaluate ``a <op> b``"""
        if self is Operation.ADD:
            return a + b
        if self is Operation.SUBTRACT:
            return a - b
        if self is Operation.MULTIPLY:
            return a * b
        if self is Operation.DIVIDE:
            # Calculator convention: x / 0 shows 0
            return a / b if b != 0 else 0.0
        return (a / 100) * b


_LABELS = {
    Operation.ADD: "+",
    Operation.SUBTRACT: "−",
    Operation.MULTIPLY: "×",
    Operation.DIVIDE: "÷",
    Operation.PERCENT: "%",
}


def format_number(value):
    """Render a number for the display.

    Shortest round-trip digits, laid out as plain decimal for magnitudes in
    [1e-6, 1e21) and in e-notation outside that range. Integral
    values carry no fractional part and negative zero renders as "0".
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # position of the decimal point relative to the digits

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def parse_display(text):
    """Read the display as a number; text with no numeric prefix reads as 0"""
    match = _NUMBER_PREFIX.match(text)
    if not match:
        return 0.0
    return float(match.group(0))


@dataclass
class AccumulatorState:
    display: str = "0"
    pending_operand: Optional[float] = None
    pending_operation: Optional[Operation] = None
    is_fresh_entry: bool = True

    @property
    def has_pending(self):
        return self.pending_operation is not None

    @property
    def expression_line(self):
        """Secondary line above the display, e.g. '12 ×'"""
        if not self.has_pending:
            return ""
        return f"{format_number(self.pending_operand)} {self.pending_operation.label}"

    @property
    def clear_label(self):
        return "AC" if self.display == "0" else "C"

    def to_dict(self):
        return {
            'display': self.display,
            'pending_operand': self.pending_operand,
            'pending_operation': self.pending_operation.symbol if self.pending_operation else None,
            'is_fresh_entry': self.is_fresh_entry,
            'expression': self.expression_line,
            'clear_label': self.clear_label,
        }


class Calculator:
    DIGIT_TOKENS = "0123456789."

    def __init__(self):
        self.state = AccumulatorState()

    @property
    def display(self):
        return self.state.display

    def press_digit(self, token):
        """Add a digit or decimal point to the current entry"""
        if len(token) != 1 or token not in self.DIGIT_TOKENS:
            raise ValueError(f"Not a digit key: {token!r}")

        state = self.state
        if state.is_fresh_entry:
            state.display = "0." if token == "." else token
            state.is_fresh_entry = False
        elif state.display == "0" and token != ".":
            # No leading zeros
            state.display = token
        else:
            state.display += token
        return state.display

    def press_operation(self, op):
        """Capture or fold the pending operation, then wait for the next operand"""
        state = self.state
        current = parse_display(state.display)
        if state.pending_operand is None:
            state.pending_operand = current
        elif state.pending_operation is not None:
            result = state.pending_operation.apply(state.pending_operand, current)
            state.pending_operand = result
            state.display = format_number(result)
        state.pending_operation = op
        state.is_fresh_entry = True
        return state.display

    def press_equal(self):
        """Finalize the pending operation.

        Returns the HistoryRecord for the calculation, or None when nothing
        was pending (in which case the state is left alone).
        """
        state = self.state
        if state.pending_operand is None or state.pending_operation is None:
            return None

        current = parse_display(state.display)
        op = state.pending_operation
        result_text = format_number(op.apply(state.pending_operand, current))
        expression = f"{format_number(state.pending_operand)} {op.symbol} {format_number(current)}"

        state.display = result_text
        state.pending_operand = None
        state.pending_operation = None
        state.is_fresh_entry = True

        return HistoryRecord(expression=expression, result=result_text, created_at=datetime.now())

    def toggle_sign(self):
        """Negate the displayed number"""
        self.state.display = format_number(-parse_display(self.state.display))
        return self.state.display

    def clear_all(self):
        """Reset to the power-on state"""
        self.state = AccumulatorState()
        return self.state.display
