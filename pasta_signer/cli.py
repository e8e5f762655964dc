"""CLI entry point for pasta-signer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import Config, add_config_arguments, get_config
from .curve import PublicKey
from .field import Field, Scalar
from .hash_input import HashInput
from .signing import Signature, sign, verify


def setup_logging(log_level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _int(text: str) -> int:
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pasta-signer",
        description="pasta-signer - Schnorr signatures over the Pallas curve",
    )
    add_config_arguments(parser)
    sub = parser.add_subparsers(dest="command", required=True)

    pk = sub.add_parser("public-key", help="Print the public key of a private key")
    pk.add_argument("--private-key", type=_int, required=True, help="Private key scalar")

    sg = sub.add_parser("sign", help="Sign a list of field elements")
    sg.add_argument("--private-key", type=_int, required=True, help="Private key scalar")
    sg.add_argument(
        "--field", type=_int, action="append", required=True,
        help="Message field element (repeatable)",
    )

    vf = sub.add_parser("verify", help="Verify a base58 signature")
    vf.add_argument("--signature", required=True, help="Base58 signature")
    vf.add_argument("--public-key-x", type=_int, required=True, help="Public key x-coordinate")
    vf.add_argument(
        "--public-key-odd", action="store_true", default=False,
        help="Public key y-coordinate is odd",
    )
    vf.add_argument(
        "--field", type=_int, action="append", required=True,
        help="Message field element (repeatable)",
    )
    return parser


def run(args: argparse.Namespace, config: Config) -> int:
    network = config.network_id
    if args.command == "public-key":
        public_key = PublicKey.from_private_key(Scalar(args.private_key))
        print(json.dumps(public_key.to_json()))
        return 0

    message = HashInput(fields=tuple(Field(f) for f in args.field))
    if args.command == "sign":
        signature = sign(message, Scalar(args.private_key), network)
        print(signature.to_base58())
        return 0

    signature = Signature.from_base58(args.signature)
    public_key = PublicKey(x=Field(args.public_key_x), is_odd=args.public_key_odd)
    ok = verify(signature, message, public_key, network)
    print("valid" if ok else "invalid")
    return 0 if ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = get_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.normalized_log_level)

    try:
        return run(args, config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
