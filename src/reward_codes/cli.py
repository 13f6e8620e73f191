# SPDX-License-Identifier: MIT
"""Command-line interface for generating and inspecting reward codes."""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Callable, Sequence

import logfire

from .codec import decode, generate_code
from .errors import CodeFormatError, OptionsError
from .models import CodeKind, policy_from_pairs
from .observability.monitoring import init_logfire
from .runtime.settings import Settings, load_settings
from .utils import ConsoleErrorHandler
from .validator import check_hash

LOG_LEVELS = ["fatal", "error", "warn", "notice", "info", "debug", "trace"]

EXIT_INVALID = 1
EXIT_USAGE = 2


def _print_version() -> None:
    """Print the installed package version."""
    try:
        pkg_version = version("reward-codes")
    except PackageNotFoundError:
        pkg_version = "unknown"
    print(pkg_version)


def _configure_logging(args: argparse.Namespace, settings: Settings) -> None:
    """Configure Logfire based on verbosity flags."""
    index = 2 + args.verbose - args.quiet
    index = max(0, min(len(LOG_LEVELS) - 1, index))
    init_logfire(settings.logfire_token, LOG_LEVELS[index])  # type: ignore[arg-type]


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Return settings overrides from flags the user actually passed."""
    return {
        "key": getattr(args, "key", None),
        "public": True if getattr(args, "public", False) else None,
        "username": getattr(args, "username", None),
        "userid": getattr(args, "userid", None),
        "label": getattr(args, "label", None),
        "currency": getattr(args, "currency", None),
        "max": getattr(args, "max", None),
        "bytes": getattr(args, "bytes", None),
    }


def _cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Print a newly generated code."""
    try:
        options = settings.to_options()
    except OptionsError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        return EXIT_USAGE
    print(generate_code(options))
    return 0


def _cmd_decode(args: argparse.Namespace, settings: Settings) -> int:
    """Print the unauthenticated payload of a code as JSON."""
    try:
        payload = decode(args.code)
    except CodeFormatError as exc:
        print(f"Invalid code: {exc}", file=sys.stderr)
        return EXIT_INVALID
    print(payload.model_dump_json(exclude_none=True))
    return 0


def _cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    """Report whether a code carries a valid hash."""
    if not settings.key:
        print("Missing required parameter: key", file=sys.stderr)
        return EXIT_USAGE
    try:
        policy = policy_from_pairs(settings.bytes)
    except ValueError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        return EXIT_USAGE
    try:
        payload = decode(args.code)
    except CodeFormatError as exc:
        print(f"Invalid code: {exc}", file=sys.stderr)
        return EXIT_INVALID
    id_bound = payload.kind is CodeKind.PERSONAL_BY_ID
    # The redeeming user is never taken from generation settings.
    identity = args.userid if id_bound else None
    if id_bound and identity is None:
        print("Id-bound codes require --userid", file=sys.stderr)
        return EXIT_USAGE
    valid = check_hash(payload, settings.key, policy, identity)
    print("valid" if valid else "invalid")
    return 0 if valid else EXIT_INVALID


def _add_source_args(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add options selecting where settings are read from."""
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=None,
        help="JSON or YAML config file (default: reward_codes.yaml if present)",
    )
    parser.add_argument(
        "--nofile", action="store_true", help="Don't read a config file"
    )
    parser.add_argument(
        "--noenv",
        action="store_true",
        help="Don't read REWARD_CODES_* environment variables",
    )
    return parser


def _add_key_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-k", "--key", help="Authentication hash key")
    parser.add_argument(
        "-b",
        "--bytes",
        type=int,
        nargs="+",
        default=None,
        metavar="N",
        help="Pairs of (currency, bytes) giving the hash bytes required per amount",
    )


def _add_generate_subparser(subparsers: Any, common: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser(
        "generate",
        parents=[common],
        help="Generate a hash-based reward code",
        description=(
            "Generate a reward code. Supports public, use-limited and personal"
            " codes. The body and key are encoded as UTF-8 before hashing."
        ),
    )
    _add_key_args(parser)
    parser.add_argument(
        "-p",
        "--public",
        action="store_true",
        help="This is a public code that anyone can use",
    )
    parser.add_argument(
        "-n",
        "--username",
        help="This is a personal code that only the given user name can use",
    )
    parser.add_argument(
        "-i",
        "--userid",
        help="This is a personal code that only the given user id can use",
    )
    parser.add_argument(
        "-l", "--label", help="User-visible label; this must not be a number"
    )
    parser.add_argument(
        "-m",
        "--max",
        type=int,
        default=None,
        help="Maximum number of uses of a public code",
    )
    parser.add_argument(
        "-c", "--currency", type=int, default=None, help="Amount of currency to give"
    )
    parser.set_defaults(func=_cmd_generate)


def _add_decode_subparser(subparsers: Any, common: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser(
        "decode",
        parents=[common],
        help="Decode a code without checking its hash",
    )
    parser.add_argument("code", help="Code to decode")
    parser.set_defaults(func=_cmd_decode)


def _add_check_subparser(subparsers: Any, common: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Check that a code carries a valid hash",
    )
    parser.add_argument("code", help="Code to check")
    _add_key_args(parser)
    parser.add_argument(
        "-i", "--userid", help="Redeeming user id, required for id-bound codes"
    )
    parser.set_defaults(func=_cmd_check)


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser configured with subcommands."""
    parser = argparse.ArgumentParser(
        prog="reward-codes",
        description=(
            "Generate and inspect hash-authenticated reward codes. Options are"
            " read from the command line, then REWARD_CODES_* environment"
            " variables, then a JSON or YAML config file."
        ),
    )
    parser.add_argument(
        "--version", action="store_true", help="Print the version and exit."
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase logging."
    )
    parser.add_argument(
        "-q", "--quiet", action="count", default=0, help="Decrease logging."
    )
    common = _add_source_args(argparse.ArgumentParser(add_help=False))
    subparsers = parser.add_subparsers(dest="command")
    _add_generate_subparser(subparsers, common)
    _add_decode_subparser(subparsers, common)
    _add_check_subparser(subparsers, common)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and dispatch to the requested subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.version:
        _print_version()
        return
    if args.command is None:
        parser.print_help()
        raise SystemExit(EXIT_USAGE)
    try:
        settings = load_settings(
            args.file,
            use_env=not args.noenv,
            use_file=not args.nofile,
            overrides=_settings_overrides(args),
            error_handler=ConsoleErrorHandler(),
        )
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(EXIT_USAGE) from exc
    _configure_logging(args, settings)
    handler: Callable[[argparse.Namespace, Settings], int] = args.func
    try:
        code = handler(args, settings)
    finally:
        logfire.force_flush()
    raise SystemExit(code)


if __name__ == "__main__":
    main()
