"""Right-to-left binary modular exponentiation as an explicit step machine.

The engine processes one exponent bit per step: it conditionally multiplies the running base into the result, squares
the running base and shifts the exponent. Products are reduced through the restoring division engine.

Typical usage example:

    engine = ModExpEngine(EngineConfig(width=32))
    engine.start(89, 3, 3127)
    while not engine.step():
        pass
    engine.result  # 1394

    mod_pow(89, 3, 3127)  # 1394
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import logging
import warnings

from rsacore.config import check_width
from rsacore.config import EngineConfig
from rsacore.config import mask
from rsacore.division import divide
from rsacore.errors import DivideByZero
from rsacore.errors import EngineNotReady
from rsacore.errors import RSACoreError

logger = logging.getLogger(__name__)


class ModExpState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    REDUCING = "reducing"
    DONE = "done"


class ModExpEngine:
    """Resumable square-and-multiply engine computing `base**exponent % modulus`.

    The working set only lives between `start()` and the DONE state; restarting or resetting discards it entirely.

    Attributes:
        config: The engine configuration.
        iterations: Number of REDUCING steps performed by the current computation.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config if config is not None else EngineConfig()
        if self.config.truncate_products:
            warnings.warn("Product truncation reproduces legacy hardware and may yield incorrect results!",
                          RuntimeWarning)
        self._state = ModExpState.IDLE
        self._inputs: tuple[int, int, int] | None = None
        self._result = 0
        self._base = 0
        self._exponent = 0
        self.iterations = 0

    @property
    def state(self) -> ModExpState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state is ModExpState.DONE

    @property
    def result(self) -> int:
        """The final result.

        Raises:
            EngineNotReady: If the computation has not reached the DONE state.
        """
        if not self.done:
            raise EngineNotReady(f"ModExp result read in state {self._state.name}.")
        return self._result

    def reset(self) -> None:
        """Aborts any computation and drops the working set."""
        self._state = ModExpState.IDLE
        self._inputs = None
        self._result = 0
        self._base = 0
        self._exponent = 0
        self.iterations = 0

    def start(self, base: int, exponent: int, modulus: int) -> None:
        """Captures the inputs and (re)starts the computation.

        Args:
            base: The base, at most `2W` bits.
            exponent: The exponent, at most `2W` bits.
            modulus: The modulus, at most `2W` bits.

        Raises:
            WidthOverflow: If an operand exceeds the key width.
            DivideByZero: If `modulus` is zero.
        """
        self.reset()
        width = self.config.key_width
        check_width(base, width, "base")
        check_width(exponent, width, "exponent")
        check_width(modulus, width, "modulus")
        if modulus == 0:
            raise DivideByZero("Modulus must be non-zero.")
        self._inputs = (base, exponent, modulus)
        self._state = ModExpState.LOADING
        logger.debug("ModExp started: %d-bit exponent, %d-bit modulus", exponent.bit_length(), modulus.bit_length())

    def _reduce(self, x: int, y: int, modulus: int) -> int:
        product = x * y
        if self.config.truncate_products:
            product &= mask(self.config.key_width)
        return divide(product, modulus, self.config.reduction_width)[1]

    def step(self) -> bool:
        """Advances the engine by one transition.

        Returns:
            True once the computation is DONE.

        Raises:
            EngineNotReady: If the engine was never started.
        """
        if self._state is ModExpState.IDLE:
            raise EngineNotReady("ModExp stepped before start().")
        if self._state is ModExpState.DONE:
            return True
        base, exponent, modulus = self._inputs
        if self._state is ModExpState.LOADING:
            self._result = 1
            self._base = base
            self._exponent = exponent
            self._state = ModExpState.REDUCING if exponent else ModExpState.DONE
            return self.done
        try:
            if self._exponent & 1:
                self._result = self._reduce(self._result, self._base, modulus)
            self._base = self._reduce(self._base, self._base, modulus)
        except RSACoreError:
            self.reset()
            raise
        self._exponent >>= 1
        self.iterations += 1
        if self._exponent == 0:
            self._state = ModExpState.DONE
            logger.debug("ModExp done after %d iterations", self.iterations)
        return self.done

    def run(self) -> int:
        """Steps the engine until completion.

        Returns:
            The final result.
        """
        while not self.step():
            pass
        return self.result


def mod_pow(base: int, exponent: int, modulus: int, config: EngineConfig | None = None) -> int:
    """Computes `base**exponent % modulus` with a freshly started engine.

    Args:
        base: The base, at most `2W` bits.
        exponent: The exponent, at most `2W` bits.
        modulus: The modulus, at most `2W` bits.
        config: Engine configuration. Defaults to `EngineConfig()`.

    Returns:
        The modular power. A zero `exponent` always yields 1.

    Raises:
        DivideByZero: If `modulus` is zero.
        WidthOverflow: If an operand exceeds the key width.
    """
    engine = ModExpEngine(config)
    engine.start(base, exponent, modulus)
    return engine.run()
