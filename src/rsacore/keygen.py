"""Key derivation utility, searching a public exponent and its modular inverse for a given prime pair.

The search walks odd candidates upwards from 3 and runs an iterative Extended Euclidean Algorithm against the totient
for each of them, tracking only the Bezout coefficient of the candidate. The first candidate coprime to the totient
becomes the public exponent, its normalized coefficient the private exponent.

Typical usage example:

    keys = derive_keys(53, 59)
    keys.e, keys.d  # (3, 2011)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import logging
import typing

from rsacore.config import check_width
from rsacore.config import EngineConfig
from rsacore.division import divide
from rsacore.errors import EngineNotReady
from rsacore.errors import InvalidTotient
from rsacore.errors import RSACoreError
from rsacore.errors import SearchExhausted

logger = logging.getLogger(__name__)

_FIRST_CANDIDATE: int = 3


class KeyPair(typing.NamedTuple):
    """A derived RSA key pair.

    Attributes:
        n: The modulus, zero when derived from a bare totient.
        e: The public exponent.
        d: The private exponent, in `[0, totient)`.
        totient: The totient the pair was derived against.
    """
    n: int
    e: int
    d: int
    totient: int


class KeyDeriveState(enum.Enum):
    IDLE = "idle"
    CANDIDATE_INIT = "candidate_init"
    EUCLID_STEP = "euclid_step"
    GCD_CHECK = "gcd_check"
    DONE = "done"


def totient(p: int, q: int) -> int:
    """Euler's totient of `p*q` for two primes."""
    return (p - 1) * (q - 1)


class KeyDeriveEngine:
    """Resumable exponent search over odd candidates, one Euclidean division per step.

    Attributes:
        config: The engine configuration.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config if config is not None else EngineConfig()
        self._state = KeyDeriveState.IDLE
        self._totient = 0
        self._modulus = 0
        self._candidate = 0
        self._rejected = 0
        self._a = self._b = 0
        self._t_prev = self._t_curr = 0
        self._keys: KeyPair | None = None

    @property
    def state(self) -> KeyDeriveState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state is KeyDeriveState.DONE

    @property
    def candidate(self) -> int:
        return self._candidate

    @property
    def candidates_tried(self) -> int:
        """Number of candidates examined so far, including an accepted one."""
        return self._rejected + (1 if self.done else 0)

    @property
    def result(self) -> KeyPair:
        """The derived key pair.

        Raises:
            EngineNotReady: If the search has not reached the DONE state.
        """
        if not self.done:
            raise EngineNotReady(f"KeyDerive result read in state {self._state.name}.")
        return self._keys

    def reset(self) -> None:
        """Aborts any search and drops the working set."""
        self._state = KeyDeriveState.IDLE
        self._totient = 0
        self._modulus = 0
        self._candidate = 0
        self._rejected = 0
        self._a = self._b = 0
        self._t_prev = self._t_curr = 0
        self._keys = None

    def start(self, phi: int, modulus: int = 0) -> None:
        """(Re)starts the search against `phi`.

        Args:
            phi: The totient, at most `2W` bits.
            modulus: The modulus to record in the resulting `KeyPair`. Optional.

        Raises:
            InvalidTotient: If `phi <= 1`.
            WidthOverflow: If `phi` exceeds the key width.
        """
        self.reset()
        if phi <= 1:
            raise InvalidTotient(f"Totient must be greater than 1, got {phi}.")
        check_width(phi, self.config.key_width, "totient")
        self._totient = phi
        self._modulus = modulus
        self._candidate = _FIRST_CANDIDATE
        self._state = KeyDeriveState.CANDIDATE_INIT
        logger.debug("KeyDerive started against a %d-bit totient", phi.bit_length())

    def _next_candidate(self) -> None:
        self._rejected += 1
        self._candidate += 2
        if self.config.max_candidates is not None and self._rejected >= self.config.max_candidates:
            self.reset()
            raise SearchExhausted(f"No coprime exponent within {self.config.max_candidates} candidates.")
        if self._candidate.bit_length() > self.config.key_width:
            self.reset()
            raise SearchExhausted("Exponent candidates exceeded the key width.")
        self._state = KeyDeriveState.CANDIDATE_INIT

    def step(self) -> bool:
        """Advances the search by one transition.

        Returns:
            True once a key pair was found.

        Raises:
            EngineNotReady: If the engine was never started.
            SearchExhausted: If the candidate bound is exceeded.
        """
        match self._state:
            case KeyDeriveState.IDLE:
                raise EngineNotReady("KeyDerive stepped before start().")
            case KeyDeriveState.CANDIDATE_INIT:
                self._a, self._b = self._totient, self._candidate
                self._t_prev, self._t_curr = 0, 1
                self._state = KeyDeriveState.EUCLID_STEP
            case KeyDeriveState.EUCLID_STEP:
                try:
                    q, r = divide(self._a, self._b, self.config.key_width)
                except RSACoreError:
                    self.reset()
                    raise
                self._a, self._b = self._b, r
                self._t_prev, self._t_curr = self._t_curr, self._t_prev - q * self._t_curr
                if self._b == 0:
                    self._state = KeyDeriveState.GCD_CHECK
            case KeyDeriveState.GCD_CHECK:
                if self._a == 1:
                    d = self._t_prev + self._totient if self._t_prev < 0 else self._t_prev
                    self._keys = KeyPair(self._modulus, self._candidate, d, self._totient)
                    self._state = KeyDeriveState.DONE
                    logger.info("Key derivation done: e=%d after %d candidate(s)", self._candidate,
                                self.candidates_tried)
                else:
                    logger.debug("Rejected candidate %d, gcd %d", self._candidate, self._a)
                    self._next_candidate()
        return self.done

    def run(self) -> KeyPair:
        """Steps the search until completion.

        Returns:
            The derived key pair.
        """
        while not self.step():
            pass
        return self.result


def derive_keys(p: int, q: int, config: EngineConfig | None = None) -> KeyPair:
    """Derives an RSA key pair from two primes.

    The primes are trusted, no primality test is performed.

    Args:
        p: First prime, at most `W` bits.
        q: Second prime, at most `W` bits.
        config: Engine configuration. Defaults to `EngineConfig()`.

    Returns:
        The `KeyPair` with the smallest odd `e > 1` coprime to the totient.

    Raises:
        InvalidTotient: If `(p-1)*(q-1) <= 1`.
        WidthOverflow: If `p` or `q` exceed the configured width.
        SearchExhausted: If the configured candidate bound is exceeded.
    """
    config = config if config is not None else EngineConfig()
    check_width(p, config.width, "p")
    check_width(q, config.width, "q")
    engine = KeyDeriveEngine(config)
    engine.start(totient(p, q), p * q)
    return engine.run()
