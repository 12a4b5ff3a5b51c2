"""Seed values and the interface of the backends that keep them."""

from __future__ import annotations

import abc
import hmac
import secrets

SEED_LEN = 32


class Seed:
    """Secret 32-byte value from which a long-term Ed25519 key pair is derived."""

    __slots__ = ("_value",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: bytes) -> None:
        if len(value) != SEED_LEN:
            raise ValueError(f"seed must be {SEED_LEN} bytes, got {len(value)}")
        self._value = bytes(value)

    @classmethod
    def random(cls) -> Seed:
        """Create a seed from the system's secure random source."""
        return cls(secrets.token_bytes(SEED_LEN))

    def expose(self) -> bytes:
        """Return the raw seed bytes."""
        return self._value

    def __len__(self) -> int:
        return len(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Seed):
            return NotImplemented
        return hmac.compare_digest(self._value, other._value)

    def __repr__(self) -> str:
        return f"Seed(len={len(self)})"


class BackendError(Exception):
    """Base class of seed backend failures."""


class SeedNotFoundError(BackendError):
    """The requested item does not exist in the backend."""

    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' not found")
        self.name = name


class NotSupportedError(BackendError):
    """The backend does not support the requested operation."""

    def __init__(self, message: str) -> None:
        super().__init__(f"'{message}'")
        self.message = message


class BackendNotAvailableError(BackendError):
    """The named backend is not available in this installation."""

    def __init__(self, backend: str, feature: str) -> None:
        super().__init__(
            f"Seed backend '{backend}' is not available (requires feature '{feature}')"
        )
        self.backend = backend
        self.feature = feature


class SeedBackend(abc.ABC):
    """Keeps a seed available for online use while protecting it from unauthorised access."""

    @abc.abstractmethod
    def store_seed(self, seed: Seed) -> None:
        """Take ownership of ``seed``."""

    @abc.abstractmethod
    def get_seed(self) -> Seed:
        """Return a copy of the stored seed."""

    @abc.abstractmethod
    def sign(self, data: bytes) -> bytes:
        """Return the 64-byte Ed25519 signature of ``data``."""

    @abc.abstractmethod
    def seed_len(self) -> int:
        """Length of the stored seed, or 0 when none is stored."""

    @abc.abstractmethod
    def public_key(self) -> bytes:
        """Return the 32-byte Ed25519 public key of the stored seed."""