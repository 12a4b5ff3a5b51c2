"""Command line tool for generating, sealing, opening, storing and retrieving seeds."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from .envelope import EnvelopeError, SeedEnvelope
from .seed import SEED_LEN, Seed
from .storage import StorageError, try_load_seed, try_store_seed

log = logging.getLogger(__name__)

_VERSION = "2.0.0"
_handler: logging.Handler | None = None


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the key management tool."""
    parser = argparse.ArgumentParser(
        prog="roughenough_keys", description="Key management operations"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Output details; specify multiple times for more detail",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    generate = commands.add_parser(
        "generate", help="Generate a new random long-term identity seed"
    )
    generate.add_argument(
        "-o", "--output", help="Output file for generated long-term identity seed"
    )
    generate.add_argument("-k", "--key", help="Key ID to envelope encrypt the seed with")
    generate.add_argument("-s", "--secret", help="Secret ID to store generated seed in")

    seal = commands.add_parser("seal", help="Envelope encrypt a long-term identity seed")
    seal.add_argument(
        "-i", "--input", required=True, help="File of long-term identity seed"
    )
    seal.add_argument("-o", "--output", help="Output file for envelope encrypted seed")
    seal.add_argument(
        "-k", "--key", required=True, help="Key ID to use for envelope encryption"
    )

    open_ = commands.add_parser(
        "open", help="Decrypt an envelope encrypted long-term identity seed"
    )
    open_.add_argument(
        "-i",
        "--input",
        required=True,
        help="File of envelope encrypted long-term identity seed",
    )
    open_.add_argument(
        "-o", "--output", help="Output file for decrypted long-term identity seed"
    )
    open_.add_argument(
        "-k",
        "--key",
        help="Override the key ID in data blob and use this key ID for decryption",
    )

    store = commands.add_parser(
        "store", help="Store a long-term identity seed in a Secret manager"
    )
    store.add_argument(
        "-i", "--input", required=True, help="File of long-term identity seed"
    )
    store.add_argument(
        "-o", "--output", help="Output file for json encoded storage envelope"
    )
    store.add_argument("-s", "--secret", required=True, help="Secret ID to store seed in")

    get = commands.add_parser(
        "get", help="Retrieve a long-term identity seed from a Secret manager"
    )
    get.add_argument(
        "-i",
        "--input",
        required=True,
        help="File of previously stored long-term identity seed",
    )
    get.add_argument(
        "-o", "--output", help="Output file for decrypted long-term identity seed"
    )
    return parser


def _enable_logging(verbose: int) -> None:
    global _handler
    logger = logging.getLogger("roughenough")
    logger.setLevel(logging.INFO if verbose == 0 else logging.DEBUG)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(_handler)
    _handler.setStream(sys.stderr)


def _seed_from_bytes(data: bytes) -> Seed | None:
    if len(data) != SEED_LEN:
        log.error(
            "Invalid seed length: expected %d bytes, got %d", SEED_LEN, len(data)
        )
        return None
    return Seed(data)


def _handle_generate(args: argparse.Namespace, _data: bytes, output: TextIO) -> int:
    if args.key is None and args.secret is None:
        log.error("Either --key or --secret must be specified")
        return 1
    resource = args.key if args.key is not None else args.secret
    try:
        envelope = try_store_seed(Seed.random(), resource)
    except StorageError as exc:
        log.error("Failed to store seed: %s", exc)
        return 1
    output.write(envelope.to_json(pretty=True))
    return 0


def _handle_seal(args: argparse.Namespace, data: bytes, output: TextIO) -> int:
    seed = _seed_from_bytes(data)
    if seed is None:
        return 1
    try:
        envelope = try_store_seed(seed, args.key)
    except StorageError as exc:
        log.error("Failed to encrypt seed: %s", exc)
        return 1
    output.write(envelope.to_json(pretty=True))
    return 0


def _handle_open(args: argparse.Namespace, data: bytes, _output: TextIO) -> int:
    try:
        envelope = SeedEnvelope.from_json(data)
    except EnvelopeError as exc:
        log.error("Failed to parse seed envelope: %s", exc)
        return 1
    if args.key is not None:
        log.debug("Overriding original key ID %s with %s", envelope.key_id, args.key)
        envelope.key_id = args.key
    log.error("no KMS types enabled: %s", envelope.key_id)
    return 1


def _handle_store(args: argparse.Namespace, data: bytes, output: TextIO) -> int:
    seed = _seed_from_bytes(data)
    if seed is None:
        return 1
    try:
        envelope = try_store_seed(seed, args.secret)
    except StorageError as exc:
        log.error("Failed to store seed: %s", exc)
        return 1
    output.write(envelope.to_json(pretty=True))
    output.write("\n")
    return 0


def _handle_get(_args: argparse.Namespace, data: bytes, output: TextIO) -> int:
    try:
        seed = try_load_seed(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        log.error("Failed to retrieve seed: input is not UTF-8 text: %s", exc)
        return 1
    except StorageError as exc:
        log.error("Failed to retrieve seed: %s", exc)
        return 1
    output.write(seed.expose().hex())
    output.write("\n")
    return 0


_Handler = Callable[[argparse.Namespace, bytes, TextIO], int]

_HANDLERS: dict[str, _Handler] = {
    "generate": _handle_generate,
    "seal": _handle_seal,
    "open": _handle_open,
    "store": _handle_store,
    "get": _handle_get,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the key management tool; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "generate" and args.secret is not None:
        if args.output is not None or args.key is not None:
            parser.error("argument -s/--secret: not allowed with -o/--output or -k/--key")

    _enable_logging(args.verbose)

    data = b""
    if args.command != "generate":
        try:
            with open(args.input, "rb") as infile:
                data = infile.read()
        except OSError as exc:
            log.error("Failed to read input file '%s': %s", args.input, exc)
            return 1

    with contextlib.ExitStack() as stack:
        if args.output is None:
            output: TextIO = sys.stdout
        else:
            try:
                output = stack.enter_context(open(args.output, "x", encoding="utf-8"))
            except OSError as exc:
                log.error("Failed to create output file '%s': %s", args.output, exc)
                return 1
        return _HANDLERS[args.command](args, data, output)


if __name__ == "__main__":
    raise SystemExit(main())