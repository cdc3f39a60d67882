"""Error taxonomy shared by all engines.

Each condition also derives from the closest builtin exception, so `except ValueError` and friends keep working.
Supplying actual primes remains a caller obligation and has no runtime counterpart here.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSACoreError(Exception):
    """Base class for every failure raised by rsacore."""


class DivideByZero(RSACoreError, ZeroDivisionError):
    """Division engine invoked with a zero divisor."""


class InvalidTotient(RSACoreError, ValueError):
    """Derived totient is too small for the exponent search to terminate."""


class RangeViolation(RSACoreError, ValueError):
    """Message representative is not below the modulus."""


class WidthOverflow(RSACoreError, ValueError):
    """Operand does not fit into its configured bit width."""


class SearchExhausted(RSACoreError, RuntimeError):
    """Public exponent search gave up before finding a coprime candidate."""


class EngineNotReady(RSACoreError, RuntimeError):
    """Result read from an engine that has not completed."""
