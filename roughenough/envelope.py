"""Envelope encryption of seeds with AES-256-GCM and its JSON form."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .seed import Seed

DEK_LEN = 32
NONCE_LEN = 12
TAG_LEN = 16


class EnvelopeError(ValueError):
    """An envelope could not be decoded or its seed could not be decrypted."""


def _b64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def _b64_decode(text: str) -> bytes:
    if not isinstance(text, str):
        raise EnvelopeError(f"expected a base64 string, got {type(text).__name__}")
    if "=" in text or len(text) % 4 == 1:
        raise EnvelopeError(f"invalid unpadded base64: {text!r}")
    try:
        data = base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EnvelopeError(f"invalid unpadded base64: {exc}") from exc
    if _b64_encode(data) != text:
        raise EnvelopeError(f"non-canonical base64: {text!r}")
    return data


@dataclass
class SeedEnvelope:
    """A seed encrypted under a data encryption key (DEK) that a KMS key protects.

    ``key_id`` names the KMS key (with its protection prefix), ``seed_ct`` is the
    seed encrypted by the DEK, and ``dek_ct`` is the DEK encrypted by the KMS.
    """

    key_id: str
    seed_ct: bytes = b""
    dek_ct: bytes = b""

    def to_dict(self) -> dict[str, str]:
        """Return the JSON-ready mapping; empty ciphertexts are left out."""
        out = {"key_id": self.key_id}
        if self.seed_ct:
            out["seed_ct"] = _b64_encode(self.seed_ct)
        if self.dek_ct:
            out["dek_ct"] = _b64_encode(self.dek_ct)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> SeedEnvelope:
        """Build an envelope from a mapping produced by :meth:`to_dict`."""
        if not isinstance(data, dict):
            raise EnvelopeError("seed envelope must be a JSON object")
        key_id = data.get("key_id")
        if not isinstance(key_id, str):
            raise EnvelopeError("seed envelope is missing a string 'key_id'")
        return cls(
            key_id=key_id,
            seed_ct=_b64_decode(data["seed_ct"]) if "seed_ct" in data else b"",
            dek_ct=_b64_decode(data["dek_ct"]) if "dek_ct" in data else b"",
        )

    def to_json(self, pretty: bool = False) -> str:
        """Serialise to JSON, indented by two spaces when ``pretty``."""
        if pretty:
            return json.dumps(self.to_dict(), indent=2)
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str | bytes) -> SeedEnvelope:
        """Parse an envelope from JSON text."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise EnvelopeError(f"invalid seed envelope JSON: {exc}") from exc
        return cls.from_dict(data)


def _check_dek(dek: bytes) -> None:
    if len(dek) != DEK_LEN:
        raise ValueError(f"DEK must be {DEK_LEN} bytes, got {len(dek)}")


def seal_seed(dek: bytes, seed: Seed, aad: bytes) -> bytes:
    """Encrypt ``seed`` under ``dek``; returns ``ciphertext || tag || nonce``."""
    _check_dek(dek)
    nonce = AESGCM.generate_key(bit_length=128)[:NONCE_LEN]
    sealed = AESGCM(bytes(dek)).encrypt(nonce, seed.expose(), bytes(aad)) + nonce
    assert len(sealed) == len(seed) + TAG_LEN + NONCE_LEN
    return sealed


def open_seed(dek: bytes, encrypted_seed: bytes, aad: bytes) -> Seed:
    """Decrypt the output of :func:`seal_seed`; raises :class:`EnvelopeError` on failure."""
    _check_dek(dek)
    if len(encrypted_seed) < NONCE_LEN + TAG_LEN:
        raise EnvelopeError(f"encrypted seed too short: {len(encrypted_seed)} bytes")
    ciphertext, nonce = encrypted_seed[:-NONCE_LEN], encrypted_seed[-NONCE_LEN:]
    try:
        plaintext = AESGCM(bytes(dek)).decrypt(bytes(nonce), bytes(ciphertext), bytes(aad))
    except InvalidTag as exc:
        raise EnvelopeError("failed to decrypt seed") from exc
    try:
        return Seed(plaintext)
    except ValueError as exc:
        raise EnvelopeError(str(exc)) from exc