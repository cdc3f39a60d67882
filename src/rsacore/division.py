"""Bit-serial restoring division.

Shared by both the modular exponentiation and the key derivation engines. Stateless, hence safe to call from any
number of threads at once.

Typical usage example:

    q, r = divide(3127, 53, 64)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.config import check_width
from rsacore.errors import DivideByZero


def divide(a: int, n: int, width: int) -> tuple[int, int]:
    """Divides `a` by `n` using restoring division over `width` bits.

    For each bit of the dividend, MSB first, the next bit is shifted into a partial remainder, the divisor is
    tentatively subtracted and the subtraction is either kept (quotient bit 1) or restored (quotient bit 0) depending
    on the sign of the tentative result.

    Args:
        a: The unsigned dividend.
        n: The unsigned divisor.
        width: Operand width in bits.

    Returns:
        Tuple of (quotient, remainder), with `a == quotient * n + remainder` and `0 <= remainder < n`.

    Raises:
        DivideByZero: If `n` is zero.
        WidthOverflow: If `a` or `n` do not fit into `width` unsigned bits.
    """
    check_width(a, width, "dividend")
    check_width(n, width, "divisor")
    if n == 0:
        raise DivideByZero("Division by zero.")
    quotient = 0
    remainder = 0
    for i in reversed(range(width)):
        remainder = (remainder << 1) | ((a >> i) & 1)
        tentative = remainder - n
        if tentative >= 0:
            remainder = tentative
            quotient |= 1 << i
        # Otherwise the subtraction is restored by keeping the old remainder.
    return quotient, remainder
