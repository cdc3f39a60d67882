# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import random

import pytest

from rsacore import division
from rsacore import errors

base_division_cases = [
    # Edge Cases
    (0, 1, 8),
    (1, 1, 8),
    (255, 1, 8),
    (255, 255, 8),
    (0, 255, 8),
    # Divisor above dividend
    (3, 7, 8),
    (2, 3, 64),
    # Classical RSA example
    (3127, 53, 64),
    (3016, 3, 64),
    (89 * 89 * 89, 3127, 64),
    # Full width operands
    (2**64 - 1, 2**32 + 15, 64),
    (2**128 - 1, 2**64 - 59, 128),
    (2**128 - 1, 3, 128),
]


def random_cases(width: int, count: int, seed: int) -> list[tuple[int, int, int]]:
    rng = random.Random(seed)
    return [(rng.getrandbits(width), rng.getrandbits(rng.randint(1, width)) | 1, width) for _ in range(count)]


@pytest.mark.parametrize("a,n,width", base_division_cases + random_cases(64, 25, 1709) + random_cases(256, 10, 2025))
def test_divide_correct(a, n, width):
    q, r = division.divide(a, n, width)
    assert a == q * n + r
    assert 0 <= r < n
    assert (q, r) == divmod(a, n)


def test_divide_stateless():
    first = division.divide(2**63 + 12345, 97, 64)
    division.divide(3127, 59, 64)
    assert division.divide(2**63 + 12345, 97, 64) == first


@pytest.mark.parametrize("a", [0, 1, 3127, 2**64 - 1])
def test_divide_by_zero(a):
    with pytest.raises(errors.DivideByZero):
        division.divide(a, 0, 64)


def test_divide_by_zero_is_zero_division():
    with pytest.raises(ZeroDivisionError, match="Division by zero."):
        division.divide(1, 0, 8)


@pytest.mark.parametrize("a,n,width", [(256, 3, 8), (3, 256, 8), (-1, 3, 8), (3, -1, 8), (2**64, 1, 64)])
def test_divide_width_overflow(a, n, width):
    with pytest.raises(errors.WidthOverflow):
        division.divide(a, n, width)
