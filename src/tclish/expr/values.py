"""
Expression values: Integer (64-bit, wrapping), Real (double) and Boolean.

Operators are module-level functions dispatching on the operand variants.
Arithmetic accepts mixed Integer/Real (promoting to Real); comparisons need
both operands of the same variant; bitwise and shift operators are defined
on Integer only; Boolean supports equality and logic only.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Union

import numpy as np
from typing_extensions import TypeAlias

from ..frontend.words import WordType
from ..runtime import values as sv
from ..shared.errors import (
    CastError, DivisionByZeroError, TclError, TclTypeError,
    UnsupportedOperationError,
)
from ..utils.config import TRUE_WORDS, FALSE_WORDS

_INT64_MIN = -(2 ** 63)
_INT64_SPAN = 2 ** 64
_OCTAL = re.compile(r"[+-]?0[0-7]+")



@dataclass(frozen=True)
class Integer:
    value: np.int64

    type_name = "integer"

    def __str__(self) -> str:
        return str(int(self.value))


@dataclass(frozen=True)
class Real:
    value: np.float64

    type_name = "real"

    def __str__(self) -> str:
        return sv.format_number(float(self.value))


@dataclass(frozen=True)
class Boolean:
    value: bool

    type_name = "boolean"

    def __str__(self) -> str:
        return "1" if self.value else "0"


ExprValue: TypeAlias = Union[Integer, Real, Boolean]


def wrap(n: int) -> Integer:
    """Integer from an unbounded Python int, wrapped to 64 bits."""
    return Integer(np.int64((n - _INT64_MIN) % _INT64_SPAN + _INT64_MIN))


def make_real(f: float) -> Real:
    return Real(np.float64(f))


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def parse_integer(text: str) -> int:
    """Integer literal with optional sign and 0x/0o/0b or leading-zero octal."""
    if _OCTAL.fullmatch(text):
        return int(text, 8)
    return int(text, 0)


def from_text(text: str) -> ExprValue:
    """Operand from the string form of a script value."""
    try:
        n = parse_integer(text)
    except ValueError:
        pass
    else:
        if _INT64_MIN <= n < -_INT64_MIN:
            return wrap(n)
    try:
        if text == text.strip() and "_" not in text:
            return make_real(float(text))
    except ValueError:
        pass
    if text in TRUE_WORDS:
        return Boolean(True)
    if text in FALSE_WORDS:
        return Boolean(False)
    raise CastError(f"can't use non-numeric string \"{text}\" as operand")


def from_value(value: sv.Value) -> ExprValue:
    """Operands are always read back from their string form."""
    return from_text(str(value))


def to_value(value: ExprValue) -> sv.Value:
    """Script value of an expression result."""
    if isinstance(value, Integer):
        return sv.String(str(value))
    if isinstance(value, Real):
        return sv.Number(float(value.value))
    return sv.Boolean(value.value)


def as_bool(value: ExprValue) -> bool:
    if isinstance(value, Boolean):
        return value.value
    return bool(value.value != 0)


def as_real(value: ExprValue) -> np.float64:
    if isinstance(value, Boolean):
        raise TclTypeError("boolean can not be used as a number")
    return np.float64(value.value)


# ---------------------------------------------------------------------------
# Unary operators
# ---------------------------------------------------------------------------

def negate(value: ExprValue) -> ExprValue:
    if isinstance(value, Integer):
        return wrap(-int(value.value))
    if isinstance(value, Real):
        return Real(-value.value)
    raise UnsupportedOperationError("-", value.type_name)


def identity(value: ExprValue) -> ExprValue:
    if isinstance(value, Boolean):
        raise UnsupportedOperationError("+", value.type_name)
    return value


def logical_not(value: ExprValue) -> ExprValue:
    return Boolean(not as_bool(value))


def bitwise_not(value: ExprValue) -> ExprValue:
    if isinstance(value, Integer):
        return Integer(np.invert(value.value))
    raise UnsupportedOperationError("~", value.type_name)


UNARY: Dict[WordType, Callable[[ExprValue], ExprValue]] = {
    WordType.SUB: negate,
    WordType.ADD: identity,
    WordType.NOT: logical_not,
    WordType.BNOT: bitwise_not,
}


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def _incompatible(op: str, left: ExprValue, right: ExprValue) -> TclTypeError:
    return TclTypeError(
        f"{op}: incompatible types {left.type_name} and {right.type_name}"
    )


def _check_arithmetic(op: str, left: ExprValue, right: ExprValue) -> bool:
    """Validate operands; True when both are Integer."""
    if isinstance(left, Boolean):
        raise UnsupportedOperationError(op, left.type_name)
    if isinstance(right, Boolean):
        raise _incompatible(op, left, right)
    return isinstance(left, Integer) and isinstance(right, Integer)


def _truncated_divmod(a: int, b: int):
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - b * q


def add(left: ExprValue, right: ExprValue) -> ExprValue:
    if _check_arithmetic("+", left, right):
        return wrap(int(left.value) + int(right.value))
    with np.errstate(over="ignore"):
        return Real(as_real(left) + as_real(right))


def subtract(left: ExprValue, right: ExprValue) -> ExprValue:
    if _check_arithmetic("-", left, right):
        return wrap(int(left.value) - int(right.value))
    with np.errstate(over="ignore"):
        return Real(as_real(left) - as_real(right))


def multiply(left: ExprValue, right: ExprValue) -> ExprValue:
    if _check_arithmetic("*", left, right):
        return wrap(int(left.value) * int(right.value))
    with np.errstate(over="ignore"):
        return Real(as_real(left) * as_real(right))


def divide(left: ExprValue, right: ExprValue) -> ExprValue:
    if _check_arithmetic("/", left, right):
        if right.value == 0:
            raise DivisionByZeroError()
        return wrap(_truncated_divmod(int(left.value), int(right.value))[0])
    divisor = as_real(right)
    if divisor == 0:
        raise DivisionByZeroError()
    with np.errstate(over="ignore"):
        return Real(as_real(left) / divisor)


def modulo(left: ExprValue, right: ExprValue) -> ExprValue:
    if _check_arithmetic("%", left, right):
        if right.value == 0:
            raise DivisionByZeroError()
        return wrap(_truncated_divmod(int(left.value), int(right.value))[1])
    divisor = as_real(right)
    if divisor == 0:
        raise DivisionByZeroError()
    return Real(np.fmod(as_real(left), divisor))


def power(left: ExprValue, right: ExprValue) -> ExprValue:
    both_integers = _check_arithmetic("**", left, right)
    base, exponent = as_real(left), as_real(right)
    if base == 0 and exponent < 0:
        raise DivisionByZeroError()
    with np.errstate(all="ignore"):
        result = np.power(base, exponent)
    if not both_integers:
        return Real(result)
    if not np.isfinite(result) or abs(result) >= -_INT64_MIN:
        raise TclError("integer value too large to represent")
    return Integer(np.int64(result))


# ---------------------------------------------------------------------------
# Bitwise and shifts
# ---------------------------------------------------------------------------

def _integers(op: str, left: ExprValue, right: ExprValue):
    if not isinstance(left, Integer):
        raise UnsupportedOperationError(op, left.type_name)
    if not isinstance(right, Integer):
        raise UnsupportedOperationError(op, right.type_name)
    return int(left.value), int(right.value)


def shift_left(left: ExprValue, right: ExprValue) -> ExprValue:
    a, b = _integers("<<", left, right)
    if b < 0:
        raise TclError("negative shift count")
    if b >= 64:
        return wrap(0)
    return wrap(a << b)


def shift_right(left: ExprValue, right: ExprValue) -> ExprValue:
    a, b = _integers(">>", left, right)
    if b < 0:
        raise TclError("negative shift count")
    return wrap(a >> min(b, 63))


def bitwise_and(left: ExprValue, right: ExprValue) -> ExprValue:
    a, b = _integers("&", left, right)
    return wrap(a & b)


def bitwise_or(left: ExprValue, right: ExprValue) -> ExprValue:
    a, b = _integers("|", left, right)
    return wrap(a | b)


def bitwise_xor(left: ExprValue, right: ExprValue) -> ExprValue:
    a, b = _integers("^", left, right)
    return wrap(a ^ b)


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------

def _comparable(op: str, left: ExprValue, right: ExprValue, ordered: bool) -> None:
    if type(left) is not type(right):
        raise _incompatible(op, left, right)
    if ordered and isinstance(left, Boolean):
        raise UnsupportedOperationError(op, left.type_name)


def equal(left: ExprValue, right: ExprValue) -> ExprValue:
    _comparable("==", left, right, ordered=False)
    return Boolean(bool(left.value == right.value))


def not_equal(left: ExprValue, right: ExprValue) -> ExprValue:
    _comparable("!=", left, right, ordered=False)
    return Boolean(bool(left.value != right.value))


def less(left: ExprValue, right: ExprValue) -> ExprValue:
    _comparable("<", left, right, ordered=True)
    return Boolean(bool(left.value < right.value))


def less_equal(left: ExprValue, right: ExprValue) -> ExprValue:
    _comparable("<=", left, right, ordered=True)
    return Boolean(bool(left.value <= right.value))


def greater(left: ExprValue, right: ExprValue) -> ExprValue:
    _comparable(">", left, right, ordered=True)
    return Boolean(bool(left.value > right.value))


def greater_equal(left: ExprValue, right: ExprValue) -> ExprValue:
    _comparable(">=", left, right, ordered=True)
    return Boolean(bool(left.value >= right.value))


BINARY: Dict[WordType, Callable[[ExprValue, ExprValue], ExprValue]] = {
    WordType.ADD: add,
    WordType.SUB: subtract,
    WordType.MUL: multiply,
    WordType.DIV: divide,
    WordType.MOD: modulo,
    WordType.POW: power,
    WordType.LSHIFT: shift_left,
    WordType.RSHIFT: shift_right,
    WordType.BAND: bitwise_and,
    WordType.BOR: bitwise_or,
    WordType.BXOR: bitwise_xor,
    WordType.EQ: equal,
    WordType.NE: not_equal,
    WordType.LT: less,
    WordType.LE: less_equal,
    WordType.GT: greater,
    WordType.GE: greater_equal,
}
