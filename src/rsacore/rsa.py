"""Provides the core RSA transform, sequencing key derivation and modular exponentiation.

The `Orchestrator` owns one key derivation engine and one modular exponentiation engine, each restartable on its own.
A derived key is reused across any number of transforms until the primes change or key derivation is restarted.
Staging of the transform inputs waits for the key derivation to complete.

Typical usage example:

    transform(89, 53, 59, Mode.ENCRYPT)  # 1394

    orc = Orchestrator()
    orc.load_primes(53, 59)
    orc.start_transform(1394, Mode.DECRYPT)
    orc.run()  # 89
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from collections.abc import Iterable
import enum
import logging
import multiprocessing

from rsacore.config import check_width
from rsacore.config import EngineConfig
from rsacore.errors import EngineNotReady
from rsacore.errors import InvalidTotient
from rsacore.errors import RangeViolation
from rsacore.keygen import derive_keys
from rsacore.keygen import KeyDeriveEngine
from rsacore.keygen import KeyDeriveState
from rsacore.keygen import KeyPair
from rsacore.keygen import totient
from rsacore.modexp import mod_pow
from rsacore.modexp import ModExpEngine
from rsacore.modexp import ModExpState

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


def _message_width(mode: Mode, config: EngineConfig) -> int:
    # Plaintexts are W bits wide, ciphertexts live in the full key width.
    return config.width if mode is Mode.ENCRYPT else config.key_width


class RSAKey:
    """Handle for one half of a derived key pair.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key, whether private or public.
        config: The engine configuration used for exponentiation.
    """

    def __init__(self, mod: int, expo: int, config: EngineConfig | None = None) -> None:
        self.mod = mod
        self.expo = expo
        self.config = config if config is not None else EngineConfig()

    def c_rsa(self, message: int) -> int:
        """Performs core RSA operation. (Encrypt/Decrypt)

        Args:
            message: The int-marshalled message.

        Returns:
            The transformed message.

        Raises:
            RangeViolation: If the message is out of range for the current key.
        """
        if not 0 <= message < self.mod:
            raise RangeViolation("Message representative must be in range [0, mod-1]")
        return mod_pow(message, self.expo, self.mod, self.config)

    @classmethod
    def from_keys(cls, keys: KeyPair, mode: Mode, config: EngineConfig | None = None) -> "RSAKey":
        """Selects the exponent of `keys` matching `mode`."""
        return cls(keys.n, keys.e if mode is Mode.ENCRYPT else keys.d, config)


class Orchestrator:
    """Staged sequencer of key derivation and transform.

    Attributes:
        config: The engine configuration shared by both engines.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config if config is not None else EngineConfig()
        self._keygen = KeyDeriveEngine(self.config)
        self._modexp = ModExpEngine(self.config)
        self._modulus = 0
        self._totient = 0
        self._pending: tuple[int, Mode] | None = None

    @property
    def modulus(self) -> int:
        return self._modulus

    @property
    def totient(self) -> int:
        return self._totient

    @property
    def keys_ready(self) -> bool:
        return self._keygen.done

    @property
    def done(self) -> bool:
        return self._pending is None and self._modexp.done

    @property
    def keys(self) -> KeyPair:
        return self._keygen.result

    @property
    def result(self) -> int:
        """The transformed message.

        Raises:
            EngineNotReady: If the transform has not completed.
        """
        if self._pending is not None:
            raise EngineNotReady("Transform is still waiting for key derivation.")
        return self._modexp.result

    def load_primes(self, p: int, q: int) -> None:
        """Loads a new prime pair, discarding any derived key and staged transform.

        Args:
            p: First prime, at most `W` bits.
            q: Second prime, at most `W` bits.

        Raises:
            InvalidTotient: If `(p-1)*(q-1) <= 1`.
            WidthOverflow: If `p` or `q` exceed the configured width.
        """
        check_width(p, self.config.width, "p")
        check_width(q, self.config.width, "q")
        phi = totient(p, q)
        self._keygen.reset()
        self._modexp.reset()
        self._pending = None
        self._modulus = self._totient = 0
        if phi <= 1:
            raise InvalidTotient(f"Totient must be greater than 1, got {phi}.")
        self._modulus = p * q
        self._totient = phi
        logger.debug("Loaded primes: %d-bit modulus", self._modulus.bit_length())

    def start_keys(self) -> None:
        """(Re)starts key derivation, aborting any search in flight.

        Raises:
            EngineNotReady: If no primes were loaded.
        """
        if not self._totient:
            raise EngineNotReady("No primes loaded.")
        self._keygen.start(self._totient, self._modulus)
        if self._modexp.state is not ModExpState.IDLE and self._pending is None:
            # A transform latched against the previous key is no longer valid.
            self._modexp.reset()

    def start_transform(self, message: int, mode: Mode) -> None:
        """(Re)starts the transform of `message`.

        The request is held until the keys are ready, and is latched into the exponentiation engine only then.

        Args:
            message: The message, at most `W` bits for encryption and `2W` bits for decryption.
            mode: Whether to encrypt or decrypt.

        Raises:
            EngineNotReady: If no primes were loaded.
            WidthOverflow: If `message` exceeds its width.
            RangeViolation: If `message` is not below the modulus.
        """
        if not self._modulus:
            raise EngineNotReady("No primes loaded.")
        check_width(message, _message_width(mode, self.config), "message")
        if message >= self._modulus:
            raise RangeViolation("Message representative must be in range [0, mod-1]")
        self._modexp.reset()
        self._pending = (message, mode)
        if self._keygen.done:
            self._latch()

    def _latch(self) -> None:
        message, mode = self._pending
        keys = self._keygen.result
        exponent = keys.e if mode is Mode.ENCRYPT else keys.d
        self._modexp.start(message, exponent, self._modulus)
        self._pending = None
        logger.debug("Latched %s transform", mode.value)

    def step(self) -> bool:
        """Advances key derivation first, then the staged transform.

        Returns:
            True once the transform is done.

        Raises:
            EngineNotReady: If there is nothing to advance.
        """
        if not self._keygen.done:
            if self._keygen.state is KeyDeriveState.IDLE:
                if self._pending is None:
                    raise EngineNotReady("Neither key derivation nor a transform was started.")
                self.start_keys()
            self._keygen.step()
            return False
        if self._pending is not None:
            self._latch()
            return False
        if self._modexp.state is ModExpState.IDLE:
            return False
        return self._modexp.step()

    def derive(self) -> KeyPair:
        """Runs key derivation to completion, starting it if needed.

        Returns:
            The derived key pair.
        """
        if self._keygen.state is KeyDeriveState.IDLE:
            self.start_keys()
        return self._keygen.run()

    def run(self) -> int:
        """Runs the staged transform to completion.

        Returns:
            The transformed message.

        Raises:
            EngineNotReady: If no transform was started.
        """
        if self._pending is None and self._modexp.state is ModExpState.IDLE:
            raise EngineNotReady("No transform started.")
        while not self.step():
            pass
        return self.result


def transform(message: int, p: int, q: int, mode: Mode, config: EngineConfig | None = None) -> int:
    """Encrypts or decrypts `message` with the key pair derived from `p` and `q`.

    Args:
        message: The message, below `p*q`.
        p: First prime.
        q: Second prime.
        mode: Whether to encrypt or decrypt.
        config: Engine configuration. Defaults to `EngineConfig()`.

    Returns:
        The transformed message.
    """
    orc = Orchestrator(config)
    orc.load_primes(p, q)
    orc.start_transform(message, mode)
    return orc.run()


def transform_many(messages: Iterable[int],
                   p: int,
                   q: int,
                   mode: Mode,
                   config: EngineConfig | None = None,
                   n_workers: int = 1) -> list[int]:
    """Transforms a batch of messages under a single derived key.

    The key is derived once and shared read-only across the workers.

    Args:
        messages: The messages, each below `p*q`.
        p: First prime.
        q: Second prime.
        mode: Whether to encrypt or decrypt.
        config: Engine configuration. Defaults to `EngineConfig()`.
        n_workers: Number of worker processes. With 1, runs in-process.

    Returns:
        The transformed messages in input order.

    Raises:
        RangeViolation: If any message is not below the modulus. Checked before any transform runs.
    """
    if n_workers < 1:
        raise ValueError("n_workers must be >= 1")
    config = config if config is not None else EngineConfig()
    key = RSAKey.from_keys(derive_keys(p, q, config), mode, config)
    messages = list(messages)
    width = _message_width(mode, config)
    for message in messages:
        check_width(message, width, "message")
        if message >= key.mod:
            raise RangeViolation("Message representative must be in range [0, mod-1]")
    if n_workers == 1 or len(messages) < 2:
        return [key.c_rsa(m) for m in messages]
    logger.debug("Transforming %d messages on %d workers", len(messages), n_workers)
    with multiprocessing.Pool(n_workers) as pool:
        return pool.map(key.c_rsa, messages)
