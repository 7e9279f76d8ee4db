"""Checked unsigned integer wrapper for invariant arithmetic.

Every intermediate of the invariant math is a uint256. SafeInt enforces that
range on each operation, so a corrupt input surfaces as a typed error at the
step that went out of range:

    S(2**255) * 2     -> ArithmeticOverflow
    S(3) - 5          -> Underflow
    S(3) // 0         -> DivisionByZero

Wrap at entry, compute with ordinary operators, unwrap with `.value`:

    from stableswap.safe_int import S

    share = (S(balance) * burn // supply).value
"""

from __future__ import annotations

import operator
from collections.abc import Callable

from stableswap.errors import ArithmeticOverflow, DivisionByZero, Underflow

UINT256_MAX = 2**256 - 1


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


def _to_uint(result: int, expression: str) -> SafeInt:
    """Range-check an exact result and wrap it."""
    if result < 0:
        raise Underflow(f"Underflow: {expression} = {result}")
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"Overflow: {expression} exceeds uint256")
    return SafeInt(result)


def _arith(fn: Callable[[int, int], int], symbol: str, reflected: bool = False):
    def method(self: SafeInt, other: SafeInt | int) -> SafeInt:
        if not isinstance(other, (SafeInt, int)) or isinstance(other, bool):
            return NotImplemented
        left, right = (_raw(other), self._value) if reflected else (self._value, _raw(other))
        if symbol in ("//", "%") and right == 0:
            raise DivisionByZero(f"Division by zero: {left} {symbol} 0")
        return _to_uint(fn(left, right), f"{left} {symbol} {right}")

    return method


def _compare(fn: Callable[[int, int], bool]):
    def method(self: SafeInt, other: object) -> bool:
        if isinstance(other, SafeInt):
            return fn(self._value, other._value)
        if isinstance(other, int):
            return fn(self._value, other)
        return NotImplemented

    return method


class SafeInt:
    """Integer in [0, UINT256_MAX] whose operators are range-checked.

    Mixed operands are accepted on either side (`S(1) + 2`, `2 + S(1)`);
    results are always SafeInt. Division truncates.
    """

    __slots__ = ("_value",)

    def __init__(self, value: SafeInt | int) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"SafeInt cannot hold negative value {value}")
        if value > UINT256_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint256 max: {value}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    __add__ = _arith(operator.add, "+")
    __radd__ = _arith(operator.add, "+", reflected=True)
    __sub__ = _arith(operator.sub, "-")
    __rsub__ = _arith(operator.sub, "-", reflected=True)
    __mul__ = _arith(operator.mul, "*")
    __rmul__ = _arith(operator.mul, "*", reflected=True)
    __floordiv__ = _arith(operator.floordiv, "//")
    __rfloordiv__ = _arith(operator.floordiv, "//", reflected=True)
    __mod__ = _arith(operator.mod, "%")

    __eq__ = _compare(operator.eq)
    __ne__ = _compare(operator.ne)
    __lt__ = _compare(operator.lt)
    __le__ = _compare(operator.le)
    __gt__ = _compare(operator.gt)
    __ge__ = _compare(operator.ge)

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    # Named operations

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounding up.

        Raises:
            DivisionByZero: If other is zero
        """
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // divisor))

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(abs(self._value - _raw(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """self - other, clamped at zero."""
        return SafeInt(max(0, self._value - _raw(other)))


S = SafeInt
