"""
safemath.py - Checked Unsigned 256-bit Arithmetic

Python integers never overflow, so the host's fixed-width semantics are
enforced here explicitly. Every helper fails loudly with ArithmeticOverflow
instead of wrapping or going negative.

All balance, allowance and supply arithmetic goes through these helpers.
"""

from __future__ import annotations

from .core import UINT256_MAX, ArithmeticOverflow


def require_uint256(value: int, label: str = "value") -> int:
    """
    Validate that a value is an int in [0, 2**256 - 1].

    bool is rejected even though it subclasses int.

    Raises:
        ValueError: If value is not an integer
        ArithmeticOverflow: If value is out of range
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be int, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticOverflow(f"{label} out of uint256 range: {value}")
    return value


def add(a: int, b: int) -> int:
    result = a + b
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"uint256 overflow: {a} + {b}")
    return result


def sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflow(f"uint256 underflow: {a} - {b}")
    return a - b


def mul(a: int, b: int) -> int:
    result = a * b
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"uint256 overflow: {a} * {b}")
    return result


def div(a: int, b: int) -> int:
    """Integer division truncating toward zero (operands are non-negative)."""
    if b == 0:
        raise ArithmeticOverflow(f"uint256 division by zero: {a} / 0")
    return a // b
