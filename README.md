# roughenough

Building blocks for a Roughtime server's cryptography:

- **`roughenough.merkle`**: `MerkleTree`, a Merkle tree using the Roughtime
  leaf (`0x00`) and node (`0x01`) tweaks, with node values taken as the first
  32 bytes of SHA-512.
- **`roughenough.seed`**: the 32-byte `Seed` that a long-term Ed25519
  identity is derived from, the abstract `SeedBackend` interface, and the
  backend errors `BackendError`, `SeedNotFoundError`, `NotSupportedError` and
  `BackendNotAvailableError`.
- **`roughenough.backends`**: `MemoryBackend`, an in-process seed backend,
  and `try_choose_backend` for picking a backend by name.
- **`roughenough.envelope`**: `SeedEnvelope` and AES-256-GCM encryption of a
  seed under a data encryption key (`seal_seed` / `open_seed`).
- **`roughenough.storage`**: the `Protection` methods named by resource
  prefix, `decode_value`, `try_load_seed` and `try_store_seed`.
- **`roughenough.cloud`**: `extract_aws_region` and `extract_secret_parent`,
  helpers for AWS ARNs and GCP secret resource names.
- **`roughenough.cli`**: the `roughenough-keys` command.

## Installation

```
pip install roughenough
```

## Merkle trees

```python
from roughenough.merkle import MerkleTree

tree = MerkleTree()
for request in (b"first", b"second", b"third"):
    tree.push_leaf(request)

root = tree.compute_root()          # 32 bytes
path = tree.get_paths(1)            # list of sibling hashes for leaf 1
assert tree.root_from_paths(1, b"second", path) == root
```

A level with an odd number of nodes is padded with an all-zero node when the
root is computed. `compute_root()` on an empty tree raises `ValueError`.
`clear()` empties the tree so it can be reused; `is_empty()` reports whether
it holds any leaves.

## Seeds and backends

```python
from roughenough.backends import MemoryBackend
from roughenough.seed import Seed

backend = MemoryBackend.from_random()
signature = backend.sign(b"hello world")   # 64-byte Ed25519 signature
public_key = backend.public_key()          # 32-byte Ed25519 public key

seed = Seed.random()
assert len(seed) == 32
```

`Seed` raises `ValueError` for anything other than exactly 32 bytes, and its
`repr` shows only its length. A `MemoryBackend` without a stored seed raises
`SeedNotFoundError` from `get_seed()`, `sign()` and `public_key()`.

`try_choose_backend(name)` is case-insensitive: `"memory"` returns a new,
empty `MemoryBackend`; `"krs"`, `"sshagent"` and `"ssh-agent"` raise
`BackendNotAvailableError`; `"tpm"` and `"yubikey"` raise
`NotSupportedError`; any other name raises `ValueError`.

## Envelope encryption

```python
from roughenough.envelope import SeedEnvelope, open_seed, seal_seed
from roughenough.seed import Seed

dek = bytes(32)                      # data encryption key, 32 bytes
seed = Seed.random()
sealed = seal_seed(dek, seed, b"roughenough-seed")
assert open_seed(dek, sealed, b"roughenough-seed") == seed

envelope = SeedEnvelope(key_id="gcp-kms://example-key", seed_ct=sealed)
assert SeedEnvelope.from_json(envelope.to_json()) == envelope
```

The sealed form is `ciphertext || tag || nonce`. Opening with the wrong key,
the wrong associated data or tampered bytes raises `EnvelopeError`.
`SeedEnvelope` serialises to JSON with unpadded base64 for `seed_ct` and
`dek_ct`, leaving out either field when it is empty.

## Storage

`Protection.from_prefix` recognises `seed://`, `aws-kms://`, `gcp-kms://`,
`aws-secret://` and `gcp-secret://`. `try_load_seed` accepts a `seed://`
value, or a value with no prefix, holding a 32-byte seed encoded as hex or
base64 (`decode_value`); a different length raises `InvalidSeedError`.
`try_store_seed` raises `InvalidSeedError` for a resource with no prefix or
with `seed://`. All failures derive from `StorageError`.

## The `roughenough-keys` command

```
roughenough-keys generate (--key RESOURCE | --secret RESOURCE) [--output FILE]
roughenough-keys seal --input FILE --key RESOURCE [--output FILE]
roughenough-keys open --input FILE [--key RESOURCE] [--output FILE]
roughenough-keys store --input FILE --secret RESOURCE [--output FILE]
roughenough-keys get --input FILE [--output FILE]
```

`get` reads a seed value as described under Storage and prints the seed as
hex. Output goes to standard output unless `--output` names a file, which
must not already exist. `seal` and `store` expect an input file of exactly
32 bytes. Add `-v` for debug logging. Errors are logged and the command
exits with status 1.

## What this package does not do

It does not talk to any key management service or secret manager. Loading
from or storing to `aws-kms://`, `gcp-kms://`, `aws-secret://` or
`gcp-secret://` raises `NotImplementedStorageError`, so the `generate`,
`seal` and `store` commands always report an error, and `open` always
reports that no KMS types are enabled. Only in-memory seed backends are
provided; there is no kernel keyring, ssh-agent, PKCS#11, TPM or YubiKey
backend, and no Roughtime server or client.

## Running the tests

```
pip install -e ".[test]"
pytest
```