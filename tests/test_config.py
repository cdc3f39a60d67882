# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses

import pytest

from rsacore import config
from rsacore import errors


def test_defaults():
    cfg = config.EngineConfig()
    assert cfg.width == config.DEFAULT_WIDTH == 32
    assert not cfg.truncate_products
    assert cfg.max_candidates is None


@pytest.mark.parametrize("width", [1, 32, 512, 2048])
def test_derived_widths(width):
    cfg = config.EngineConfig(width=width)
    assert cfg.key_width == 2 * width
    assert cfg.product_width == 4 * width
    assert cfg.coefficient_width == 4 * width + 2
    assert cfg.reduction_width == 4 * width


def test_truncated_reduction_width():
    assert config.EngineConfig(width=16, truncate_products=True).reduction_width == 32


@pytest.mark.parametrize("width", [0, -32, 32.0, True, "32"])
def test_invalid_width(width):
    with pytest.raises(ValueError, match="Width must be a positive integer."):
        config.EngineConfig(width=width)


@pytest.mark.parametrize("bound", [0, -1])
def test_invalid_bound(bound):
    with pytest.raises(ValueError, match="max_candidates"):
        config.EngineConfig(max_candidates=bound)


def test_frozen():
    cfg = config.EngineConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.width = 64


@pytest.mark.parametrize("value,width", [(0, 1), (1, 1), (255, 8), (2**64 - 1, 64)])
def test_check_width_accepts(value, width):
    assert config.check_width(value, width) == value


@pytest.mark.parametrize("value,width", [(2, 1), (256, 8), (-1, 8), (2**64, 64)])
def test_check_width_rejects(value, width):
    with pytest.raises(errors.WidthOverflow, match="operand does not fit"):
        config.check_width(value, width, "operand")


def test_mask():
    assert config.mask(0) == 0
    assert config.mask(8) == 0xFF
    assert config.mask(64) == 2**64 - 1


def test_errors_hierarchy():
    assert issubclass(errors.DivideByZero, ZeroDivisionError)
    for err in (errors.InvalidTotient, errors.RangeViolation, errors.WidthOverflow):
        assert issubclass(err, ValueError)
    for err in (errors.SearchExhausted, errors.EngineNotReady):
        assert issubclass(err, RuntimeError)
    for err in (errors.DivideByZero, errors.InvalidTotient, errors.RangeViolation, errors.WidthOverflow,
                errors.SearchExhausted, errors.EngineNotReady):
        assert issubclass(err, errors.RSACoreError)
