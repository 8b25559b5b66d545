"""Command-line front end for the SealBox secret store.

    sealbox key encrypt -n NAME
    sealbox key decrypt -n NAME --format {utf8,hex} --output {stdout,clipboard}
    sealbox key list
    sealbox key delete -n NAME [--yes]

Passwords and secrets are always read without echo. Revealing a secret
requires naming the output sink explicitly with ``--output``.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Callable, Dict, List, Optional

from sealbox.core.exceptions import SealBoxError
from sealbox.core.service import SecretService
from sealbox.core.storage import FileVault
from sealbox.security.secure_buffer import SecureBuffer

from .clipboard import copy_to_clipboard
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


class PromptError(SealBoxError):
    # raised when interactive input is missing or inconsistent
    pass


def ask_sensitive_info(prompt: str) -> str:
    """Read a value from the terminal without echoing it."""
    try:
        return getpass.getpass(prompt)
    except (EOFError, KeyboardInterrupt) as exc:
        raise PromptError("input aborted") from exc


def _format_secret(secret: SecureBuffer, fmt: str) -> str:
    if fmt == "hex":
        return secret.view().hex()
    try:
        return secret.bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PromptError("secret is not valid UTF-8; use --format hex") from exc


def cmd_encrypt(service: SecretService, args: argparse.Namespace) -> int:
    password = ask_sensitive_info("Password: ")
    if ask_sensitive_info("Confirm password: ") != password:
        raise PromptError("passwords do not match")
    secret = ask_sensitive_info("Key to encrypt: ")
    if not secret:
        raise PromptError("nothing to encrypt")
    with SecureBuffer(secret) as buf:
        service.store_key(args.name, buf.bytes(), password)
    print(f"Stored key '{args.name}'.")
    return 0


def cmd_decrypt(service: SecretService, args: argparse.Namespace) -> int:
    password = ask_sensitive_info("Password: ")
    with service.open_key(args.name, password) as secret:
        text = _format_secret(secret, args.format)
    logger.info("Revealing key %r to %s", args.name, args.output)
    if args.output == "clipboard":
        copy_to_clipboard(text)
        print(f"Key '{args.name}' copied to clipboard.")
    else:
        print(text)
    return 0


def cmd_list(service: SecretService, args: argparse.Namespace) -> int:
    for name in service.list_keys():
        print(name)
    return 0


def cmd_delete(service: SecretService, args: argparse.Namespace) -> int:
    if not args.yes:
        try:
            answer = input(f"Delete key '{args.name}' permanently? [y/N] ")
        except EOFError:
            answer = ""
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return 1
    service.delete_key(args.name)
    print(f"Deleted key '{args.name}'.")
    return 0


COMMANDS: Dict[str, Callable[[SecretService, argparse.Namespace], int]] = {
    "encrypt": cmd_encrypt,
    "decrypt": cmd_decrypt,
    "list": cmd_list,
    "delete": cmd_delete,
}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sealbox",
        description="Password-protected local storage for private keys and other secrets.",
    )
    parser.add_argument(
        "--home",
        default=None,
        help="Storage root directory (default: $SEALBOX_HOME or ~/.sealbox)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    groups = parser.add_subparsers(dest="group", required=True)
    key = groups.add_parser("key", help="Manage encrypted keys")
    sub = key.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encrypt", aliases=["e"], help="Encrypt and store a key")
    enc.add_argument("-n", "--name", required=True, help="Name to store the key under")
    enc.set_defaults(command="encrypt")

    dec = sub.add_parser("decrypt", aliases=["d"], help="Decrypt a stored key")
    dec.add_argument("-n", "--name", required=True, help="Name of the key to decrypt")
    dec.add_argument(
        "-f", "--format", choices=("utf8", "hex"), default="utf8",
        help="How to render the decrypted bytes (default: utf8)",
    )
    dec.add_argument(
        "-o", "--output", choices=("stdout", "clipboard"), required=True,
        help="Where to reveal the secret (required, no default)",
    )
    dec.set_defaults(command="decrypt")

    lst = sub.add_parser("list", aliases=["l"], help="List stored key names")
    lst.set_defaults(command="list")

    rm = sub.add_parser("delete", aliases=["del"], help="Delete a stored key")
    rm.add_argument("-n", "--name", required=True, help="Name of the key to delete")
    rm.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    rm.set_defaults(command="delete")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        service = SecretService(FileVault(args.home))
        return COMMANDS[args.command](service, args)
    except SealBoxError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
