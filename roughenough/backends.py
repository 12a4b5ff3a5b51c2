"""Seed backends and backend selection."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .seed import (
    BackendNotAvailableError,
    NotSupportedError,
    Seed,
    SeedBackend,
    SeedNotFoundError,
)


def _keypair(seed: Seed) -> Ed25519PrivateKey:
    return Ed25519PrivateKey.from_private_bytes(seed.expose())


class MemoryBackend(SeedBackend):
    """Keeps the seed in process memory."""

    def __init__(self) -> None:
        self._seed: Seed | None = None
        self._public_key: bytes | None = None

    @classmethod
    def from_value(cls, value: bytes) -> MemoryBackend:
        """Create a backend holding a seed with the given bytes."""
        backend = cls()
        backend.store_seed(Seed(value))
        return backend

    @classmethod
    def from_random(cls) -> MemoryBackend:
        """Create a backend holding a freshly generated random seed."""
        backend = cls()
        backend.store_seed(Seed.random())
        return backend

    def store_seed(self, seed: Seed) -> None:
        self._public_key = _keypair(seed).public_key().public_bytes(
            Encoding.Raw, PublicFormat.Raw
        )
        self._seed = seed

    def get_seed(self) -> Seed:
        if self._seed is None:
            raise SeedNotFoundError("seed")
        return Seed(self._seed.expose())

    def sign(self, data: bytes) -> bytes:
        return _keypair(self.get_seed()).sign(data)

    def seed_len(self) -> int:
        return 0 if self._seed is None else len(self._seed)

    def public_key(self) -> bytes:
        if self._public_key is None:
            raise SeedNotFoundError("public key")
        return self._public_key

    def __repr__(self) -> str:
        return f"MemoryBackend(seed_len={self.seed_len()})"


def try_choose_backend(backend: str) -> SeedBackend:
    """Return a new backend named by ``backend`` (case-insensitive)."""
    name = backend.lower()
    if name == "memory":
        return MemoryBackend()
    if name == "krs":
        raise BackendNotAvailableError("krs", "online-linux-krs")
    if name in ("sshagent", "ssh-agent"):
        raise BackendNotAvailableError("ssh-agent", "online-ssh-agent")
    if name in ("tpm", "yubikey"):
        raise NotSupportedError(f"backend '{name}' is not supported")
    raise ValueError(f"invalid backend: {backend}")