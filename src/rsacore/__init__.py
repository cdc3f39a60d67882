"""RSA Core Engines in an Academic Sense.

Derives an RSA key pair from two supplied primes and encrypts or decrypts fixed-width messages, using a restoring
division engine, a square-and-multiply modular exponentiation engine and an extended-Euclidean key search. Every
engine is available both as a resumable step machine and as a blocking function.

Typical usage example:

    keys = derive_keys(53, 59)
    c = transform(89, 53, 59, Mode.ENCRYPT)
    m = mod_pow(c, keys.d, keys.n)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.config import EngineConfig
from rsacore.division import divide
from rsacore.errors import DivideByZero
from rsacore.errors import EngineNotReady
from rsacore.errors import InvalidTotient
from rsacore.errors import RangeViolation
from rsacore.errors import RSACoreError
from rsacore.errors import SearchExhausted
from rsacore.errors import WidthOverflow
from rsacore.keygen import derive_keys
from rsacore.keygen import KeyDeriveEngine
from rsacore.keygen import KeyPair
from rsacore.modexp import mod_pow
from rsacore.modexp import ModExpEngine
from rsacore.rsa import Mode
from rsacore.rsa import Orchestrator
from rsacore.rsa import RSAKey
from rsacore.rsa import transform
from rsacore.rsa import transform_many

__version__ = "0.0.1"
__all__ = [
    "EngineConfig",
    "divide",
    "mod_pow",
    "derive_keys",
    "transform",
    "transform_many",
    "KeyPair",
    "Mode",
    "RSAKey",
    "Orchestrator",
    "ModExpEngine",
    "KeyDeriveEngine",
    "RSACoreError",
    "DivideByZero",
    "InvalidTotient",
    "RangeViolation",
    "WidthOverflow",
    "SearchExhausted",
    "EngineNotReady",
]
