"""Engine configuration, threaded through every engine at construction time.

A single bit width `W` fixes the size of primes and plaintext messages. Everything else derives from it: moduli,
exponents and keys are `2W` bits wide, full products are `4W` bits wide and the signed Bezout coefficients of the key
search need `4W + 2` bits.

Typical usage example:

    cfg = EngineConfig(width=512)
    cfg.key_width  # 1024
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from dataclasses import dataclass

from rsacore.errors import WidthOverflow

DEFAULT_WIDTH: int = 32


@dataclass(frozen=True)
class EngineConfig:
    """Immutable engine configuration.

    Attributes:
        width: Bit width `W` of primes and plaintext messages. Defaults to 32.
        truncate_products: Reduce only the low `2W` bits of each product inside ModExp, reproducing the legacy
            hardware bit-for-bit. Defaults to False (full `4W`-bit products, numerically correct RSA).
        max_candidates: Upper bound on the number of rejected public exponent candidates during key derivation.
            None (default) leaves the search unbounded.
    """
    width: int = DEFAULT_WIDTH
    truncate_products: bool = False
    max_candidates: int | None = None

    def __post_init__(self):
        if isinstance(self.width, bool) or not isinstance(self.width, int) or self.width < 1:
            raise ValueError("Width must be a positive integer.")
        if self.max_candidates is not None and self.max_candidates < 1:
            raise ValueError("max_candidates must be None or >= 1.")

    @property
    def key_width(self) -> int:
        return 2 * self.width

    @property
    def product_width(self) -> int:
        return 4 * self.width

    @property
    def coefficient_width(self) -> int:
        # Signed, including the sign bit and one guard bit.
        return 4 * self.width + 2

    @property
    def reduction_width(self) -> int:
        """Width at which ModExp reduces its products."""
        return self.key_width if self.truncate_products else self.product_width


def mask(width: int) -> int:
    """All-ones mask of `width` bits."""
    return (1 << width) - 1


def check_width(value: int, width: int, name: str = "value") -> int:
    """Validate that `value` is an unsigned integer representable in `width` bits.

    Args:
        value: The integer to check.
        width: Number of available bits.
        name: Operand name for the error message.

    Returns:
        The unchanged `value`.

    Raises:
        WidthOverflow: If `value` is negative or needs more than `width` bits.
    """
    if value < 0 or value.bit_length() > width:
        raise WidthOverflow(f"{name} does not fit in {width} unsigned bits.")
    return value
