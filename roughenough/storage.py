"""Loading and storing seeds through their long-term protection methods."""

from __future__ import annotations

import base64
import binascii
import enum
import logging
import string

from .envelope import SeedEnvelope
from .seed import SEED_LEN, Seed

log = logging.getLogger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)


class StorageError(Exception):
    """Base class of failures to load or store a seed."""


class InvalidSeedError(StorageError):
    """The seed or the resource naming it is not valid."""


class NotImplementedStorageError(StorageError):
    """The requested protection method is not available in this installation."""


class DecodeError(StorageError):
    """An encoded value could not be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Decoding seed: {message}")


class InvalidJsonError(StorageError):
    """A seed envelope could not be parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Parsing seed envelope: {message}")


class SecretManagerError(StorageError):
    """A secret manager reported a failure."""

    def __init__(self, message: str) -> None:
        super().__init__(f"secret manager error: {message}")


def decode_value(value: str) -> bytes:
    """Decode a hex or base64 encoded value, ignoring surrounding whitespace.

    Hex is tried first; base64 with or without padding is accepted otherwise.
    """
    text = value.strip()
    if len(text) % 2 == 0 and all(ch in _HEX_DIGITS for ch in text):
        return bytes.fromhex(text)

    unpadded = text.rstrip("=")
    if len(unpadded) % 4 == 1:
        raise DecodeError(f"invalid length {len(text)}")
    try:
        return base64.b64decode(unpadded + "=" * (-len(unpadded) % 4), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"value is neither hex nor base64: {exc}") from exc


_NOT_ENABLED = {
    "AWS_KMS": "AWS KMS is not enabled (requires the 'longterm-aws-kms' feature)",
    "GCP_KMS": "GCP KMS is not enabled (requires the 'longterm-gcp-kms' feature)",
    "AWS_SECRET_MANAGER": (
        "AWS Secret Manager is not enabled "
        "(requires the 'longterm-aws-secret-manager' feature)"
    ),
    "GCP_SECRET_MANAGER": (
        "GCP Secret Manager is not enabled "
        "(requires the 'longterm-gcp-secret-manager' feature)"
    ),
}


class Protection(enum.Enum):
    """Methods of secure long-term storage for the server's identity."""

    PLAIN = "seed://"
    AWS_KMS = "aws-kms://"
    GCP_KMS = "gcp-kms://"
    AWS_SECRET_MANAGER = "aws-secret://"
    GCP_SECRET_MANAGER = "gcp-secret://"

    @classmethod
    def from_prefix(cls, value: str) -> Protection | None:
        """Return the method whose prefix starts ``value``, or None."""
        for method in cls:
            if value.startswith(method.value):
                return method
        return None

    def prefix(self) -> str:
        """The URI-style prefix that names this method."""
        return self.value

    def _load(self, value: str) -> Seed:
        if self is Protection.PLAIN:
            data = decode_value(value)
            if len(data) != SEED_LEN:
                raise InvalidSeedError(f"need {SEED_LEN} bytes, found: {len(data)}")
            return Seed(data)
        raise NotImplementedStorageError(_NOT_ENABLED[self.name])

    def _store(self, seed: Seed, resource_id: str) -> SeedEnvelope:
        if self is Protection.PLAIN:
            raise InvalidSeedError(
                "Plain protection method should not be used for storing seeds"
            )
        raise NotImplementedStorageError(_NOT_ENABLED[self.name])


def try_load_seed(encoded_value: str) -> Seed:
    """Load a seed from the long-term storage named by ``encoded_value``.

    A value without a protection prefix is taken to be the plain encoded seed.
    """
    method = Protection.from_prefix(encoded_value)
    if method is None:
        log.debug("No seed protection prefix, assuming plain text")
        return Protection.PLAIN._load(encoded_value)
    log.debug("Seed protection method: %s", method.name)
    return method._load(encoded_value[len(method.prefix()):])


def try_store_seed(seed: Seed, resource_id: str) -> SeedEnvelope:
    """Store ``seed`` with the protection method named by ``resource_id``."""
    method = Protection.from_prefix(resource_id)
    if method is None:
        raise InvalidSeedError("no protection method specified in resource")
    log.debug("Seed protection method: %s", method.name)
    return method._store(seed, resource_id[len(method.prefix()):])