#!/usr/bin/env python3
"""
cli.py — Command line front end for json-hash

Commands:
  apply     Add _hash fields to a JSON document and print it
  validate  Check every _hash in a JSON document
  digest    Print the hash of a plain string
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .config import HASH_ALGORITHMS, ApplyConfig, HashConfig, NumberHashingConfig
from .errors import JsonHashError
from .hasher import Hash


def _fail_with_error(err: JsonHashError) -> None:
    """Print a structured error message from a ``JsonHashError`` and exit.

    Args:
        err: Structured hashing/validation error.

    Returns:
        None: This function terminates the process.
    """
    context = f" Context: {err.context}." if err.context else ""
    print(f"ERROR: {err.code}. {err.message}{context}")
    sys.exit(1)


def _cli_error(what: str, why: str, fix: str) -> None:
    """Print a CLI usage/input error and exit."""
    print(f"ERROR: {what}. {why}. Fix: {fix}.")
    sys.exit(1)


def _build_hasher(args: argparse.Namespace) -> Hash:
    try:
        number_config = NumberHashingConfig(precision=args.precision)
        config = HashConfig(
            hash_length=args.hash_length,
            hash_algorithm=args.algorithm,
            number_config=number_config,
        )
    except ValueError as exc:
        _cli_error("Invalid hash configuration", str(exc), "check --hash-length and --precision")
    return Hash(config)


def _read_json(source: Optional[str]) -> Any:
    """Load JSON from a file path, or from stdin when ``source`` is None or ``-``."""
    try:
        if source is None or source == "-":
            text = sys.stdin.read()
        else:
            text = Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        _cli_error(f"Cannot read {source}", str(exc), "pass an existing JSON file")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        _cli_error("Input is not valid JSON", str(exc), "fix the document syntax")

    if not isinstance(data, dict):
        _cli_error(
            "Input is not a JSON object",
            f"top-level value is a {type(data).__name__}",
            "wrap the document in an object",
        )
    return data


def cmd_apply(args: argparse.Namespace) -> None:
    """Handle ``json-hash apply``.

    Args:
        args: Parsed CLI arguments with input path and apply options.
    """
    hasher = _build_hasher(args)
    data = _read_json(args.path)
    apply_config = ApplyConfig(
        in_place=True,
        update_existing_hashes=not args.keep_existing,
        throw_on_wrong_hashes=not args.no_throw,
    )
    try:
        hashed = hasher.apply(data, apply_config)
    except JsonHashError as err:
        _fail_with_error(err)
    print(json.dumps(hashed, indent=args.indent, ensure_ascii=False))


def cmd_validate(args: argparse.Namespace) -> None:
    """Handle ``json-hash validate``.

    Args:
        args: Parsed CLI arguments with input path.
    """
    hasher = _build_hasher(args)
    data = _read_json(args.path)
    try:
        hasher.validate(data, ignore_missing_hashes=args.ignore_missing)
    except JsonHashError as err:
        _fail_with_error(err)
    print(f"PASS: all hashes in {args.path} are valid.")


def cmd_digest(args: argparse.Namespace) -> None:
    """Handle ``json-hash digest``."""
    hasher = _build_hasher(args)
    print(hasher.calc_string_hash(args.text))


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entrypoint.

    Parses command-line arguments and routes to a subcommand handler.
    """
    parser = argparse.ArgumentParser(prog="json-hash", description="JSON content hashing CLI")
    parser.add_argument("--hash-length", type=int, default=22, help="Length of the hash strings")
    parser.add_argument(
        "--algorithm", default="SHA-256", choices=sorted(HASH_ALGORITHMS), help="Digest algorithm"
    )
    parser.add_argument(
        "--precision", type=float, default=0.001, help="Finest allowed fractional step of numbers"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    # apply
    p_apply = sub.add_parser("apply", help="Add hashes to a JSON document")
    p_apply.add_argument("path", nargs="?", help="JSON file (default: stdin)")
    p_apply.add_argument("--indent", type=int, default=None, help="Pretty-print indentation")
    p_apply.add_argument(
        "--keep-existing", action="store_true", help="Do not recompute objects that already have a hash"
    )
    p_apply.add_argument(
        "--no-throw", action="store_true", help="Overwrite wrong hashes instead of failing"
    )

    # validate
    p_validate = sub.add_parser("validate", help="Validate the hashes of a JSON document")
    p_validate.add_argument("path", help="JSON file")
    p_validate.add_argument(
        "--ignore-missing", action="store_true", help="Accept objects without a hash"
    )

    # digest
    p_digest = sub.add_parser("digest", help="Hash a plain string")
    p_digest.add_argument("text", help="String to hash")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "apply": cmd_apply(args)
    elif args.command == "validate": cmd_validate(args)
    elif args.command == "digest": cmd_digest(args)

if __name__ == "__main__":
    main()
