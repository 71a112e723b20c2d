"""Safe integer wrapper for pair accounting arithmetic.

This module provides SafeInt, a lightweight wrapper that makes arithmetic
on balances, reserves and share amounts safe by default:
- Division by zero raises DivisionByZero
- Subtraction underflow raises Underflow
- Narrowing to a fixed width (uint112, uint256) is checked with to_uint()
- Wraparound is only ever explicit (wrapping_add, truncate)

Usage pattern:
    from pairengine.safe_int import S

    def proportional(liquidity: int, balance: int, supply: int) -> int:
        # Wrap at entry
        sl, sb, ss = S(liquidity), S(balance), S(supply)

        # Natural arithmetic - automatically safe
        amount = (sl * sb) // ss  # Raises if ss == 0

        # Unwrap at exit
        return amount.value
"""

from __future__ import annotations

from math import isqrt

UINT256_BITS = 256


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class UintOverflow(SafeIntError):
    """Value does not fit in the requested unsigned width."""

    pass


class SafeInt:
    """Integer with safe arithmetic operations.

    Wraps an integer and provides arithmetic operators that raise
    descriptive errors instead of producing invalid results:
    - Division by zero raises DivisionByZero
    - Negative results from subtraction raise Underflow
    - Values exceeding a fixed width raise UintOverflow on to_uint()

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, clamping result to zero instead of raising.

        Unlike __sub__, this never raises Underflow.
        """
        return SafeInt(max(0, self._value - _extract_value(other)))

    def sqrt(self) -> SafeInt:
        """Floor square root.

        Raises:
            Underflow: If value is negative
        """
        if self._value < 0:
            raise Underflow(f"Square root of negative value: {self._value}")
        return SafeInt(isqrt(self._value))

    def wrapping_add(self, other: SafeInt | int, bits: int = UINT256_BITS) -> SafeInt:
        """Add modulo 2**bits (fixed-width overflow is intended)."""
        return SafeInt((self._value + _extract_value(other)) % (1 << bits))

    def wrapping_sub(self, other: SafeInt | int, bits: int = UINT256_BITS) -> SafeInt:
        """Subtract modulo 2**bits (fixed-width underflow is intended)."""
        return SafeInt((self._value - _extract_value(other)) % (1 << bits))

    def truncate(self, bits: int) -> SafeInt:
        """Keep the low `bits` bits, discarding the rest."""
        return SafeInt(self._value % (1 << bits))

    def is_uint(self, bits: int = UINT256_BITS) -> bool:
        """Check if value fits in an unsigned integer of `bits` width."""
        return 0 <= self._value < (1 << bits)

    def to_uint(self, bits: int = UINT256_BITS) -> int:
        """Convert to int, validating unsigned bounds.

        Raises:
            UintOverflow: If value is negative or exceeds 2**bits - 1
        """
        if self._value < 0:
            raise UintOverflow(f"Negative value cannot be uint{bits}: {self._value}")
        if not self.is_uint(bits):
            raise UintOverflow(f"Value exceeds uint{bits} max: {self._value}")
        return self._value


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
