#!/usr/bin/env python3
"""
sha256_cli.py: SHA-256 digests, secret-prefix MACs and length extension.

The message is read from stdin (a single trailing newline is dropped).

Usage:
  sha256_cli -c                               print SHA-256(message)
  sha256_cli -s -k KEY                        print MAC = SHA-256(KEY || message)
  sha256_cli -v -k KEY -m MAC                 exit 0 if MAC matches, 1 otherwise
  sha256_cli -e -n KEYLEN -m MAC -a SUFFIX    forge a MAC for message || glue || SUFFIX

For -e the forged MAC is printed first, then the forged message with
non-printable bytes written as \\xHH escapes.

Exit codes: 0=OK, 1=mismatch or error.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import BinaryIO, Optional

from sha256_errors import ConfigurationError, Sha256Error
from length_extension import forge, render_forged_message
from sha256_mac import compute_mac, verify_mac
from sha256 import sha256_hex

logger = logging.getLogger(__name__)

USAGE = ("usage: sha256_cli [-c (stdin)] [-s (stdin) -k <key>] "
         "[-v (stdin) -k <key> -m <mac_to_verify>] "
         "[-e (stdin) -n <key_length> -m <mac_to_attack> -a <appended_msg>]")


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"Error: {message}", file=sys.stderr)
        raise SystemExit(1)


def _build_parser() -> argparse.ArgumentParser:
    ap = _Parser(
        prog="sha256_cli",
        description="SHA-256 hash, secret-prefix MAC and length-extension attack",
    )
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("-c", "--chash", dest="mode", action="store_const", const="hash",
                      help="Print the SHA-256 digest of stdin")
    mode.add_argument("-s", "--message", dest="mode", action="store_const", const="mac",
                      help="Print the MAC of stdin under -k")
    mode.add_argument("-v", "--verify", dest="mode", action="store_const", const="verify",
                      help="Verify -m against the MAC of stdin under -k")
    mode.add_argument("-e", "--extension_attack", dest="mode", action="store_const", const="attack",
                      help="Length-extend -m by -a for a key of -n bytes")
    ap.add_argument("-k", "--key", default=None, help="Secret key")
    ap.add_argument("-m", "--mac", default=None, help="MAC to verify or attack (64 hex chars)")
    ap.add_argument("-a", "--append", default=None, help="Suffix to append in the attack")
    ap.add_argument("-n", "--length", type=int, default=0, help="Key length in bytes for the attack")
    ap.add_argument("--debug", action="store_true", help="Log debug output to stderr")
    return ap


def _read_message(stream: BinaryIO) -> bytes:
    data = stream.read()
    if data.endswith(b"\n"):
        data = data[:-1]
    return data


def _require(value, what: str, flag: str):
    if not value:
        raise ConfigurationError(f"{what} is missing ({flag})")
    return value


def _check_args(args: argparse.Namespace) -> None:
    if args.mode in ("mac", "verify"):
        _require(args.key, "key", "-k")
    if args.mode == "verify":
        _require(args.mac, "MAC to verify", "-m")
    if args.mode == "attack":
        _require(args.mac, "MAC to attack", "-m")
        _require(args.append, "message to append", "-a")
        if args.length <= 0:
            raise ConfigurationError("length of the key is missing or not positive (-n)")


def main(argv: Optional[list[str]] = None, stdin: Optional[BinaryIO] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        print(USAGE, file=sys.stderr)
        print("Note:\t(stdin) is the input message", file=sys.stderr)
        return 1

    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        stream=sys.stderr)

    try:
        _check_args(args)
        message = _read_message(stdin if stdin is not None else sys.stdin.buffer)
        logger.debug("mode %s, message of %d bytes", args.mode, len(message))

        if args.mode == "hash":
            print(sha256_hex(message))
            return 0

        elif args.mode == "mac":
            print(compute_mac(os.fsencode(args.key), message))
            return 0

        elif args.mode == "verify":
            ok = verify_mac(os.fsencode(args.key), message, args.mac)
            logger.debug("verification %s", "matched" if ok else "failed")
            return 0 if ok else 1

        else:
            suffix = os.fsencode(args.append)
            forged = forge(args.mac, args.length, message, suffix)
            print(forged.mac)
            print(render_forged_message(message, forged.glue, suffix))
            return 0

    except Sha256Error as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
