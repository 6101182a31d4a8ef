"""Command-line front door for lazyexplorer.

Parses a subcommand, runs the matching core operation synchronously, and
prints its outcome. Failures are reported as ``error: <message>`` with exit
status 1 and leave the filesystem exactly as the operation left it.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from . import archive, entry_ops
from .crypto import decrypt_file, encrypt_file
from .errors import FsError
from .file_tree_model import (
    KIND_SYMLINK,
    SORT_COLUMNS,
    FileEntry,
    list_directory,
    scan_entry,
    search,
    sort_entries,
)
from .runtime.config import load_settings, save_settings

SIZE_LABEL_MIN_BYTES = 10 * 1024


def _format_entry(entry: FileEntry) -> str:
    """One listing row: name (``/`` for directories), optional KB label."""
    if entry.is_dir:
        return f"{entry.name}/"
    label = entry.name
    if entry.kind == KIND_SYMLINK:
        label += "@"
    if entry.size >= SIZE_LABEL_MIN_BYTES:
        label += f" [{entry.size // 1024} KB]"
    return label


def _format_stat(entry: FileEntry) -> str:
    modified = datetime.fromtimestamp(entry.modified, tz=timezone.utc).isoformat()
    return "\n".join(
        [
            f"name: {entry.name}",
            f"path: {entry.path}",
            f"kind: {entry.kind}",
            f"size: {entry.size}",
            f"modified: {modified}",
            f"hidden: {'yes' if entry.hidden else 'no'}",
        ]
    )


def _read_password(args: argparse.Namespace, confirm: bool) -> str:
    """Take the password from ``--password-env`` or prompt without echo."""
    if args.password_env:
        value = os.environ.get(args.password_env)
        if not value:
            raise SystemExit(f"Environment variable {args.password_env} is not set.")
        return value
    password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password must not be empty.")
    if confirm and getpass.getpass("Confirm password: ") != password:
        raise SystemExit("Passwords do not match.")
    return password


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _cmd_ls(args: argparse.Namespace) -> None:
    settings = load_settings()
    path = Path(args.path) if args.path is not None else settings.last_path
    column = args.sort or settings.sort_column
    descending = args.reverse or (args.sort is None and settings.sort_descending)
    entries = list_directory(path, show_hidden=args.all or settings.show_hidden)
    for entry in sort_entries(entries, column, descending):
        print(_format_entry(entry))
    save_settings(replace(settings, last_path=Path(os.path.abspath(path))))


def _cmd_search(args: argparse.Namespace) -> None:
    for entry in search(args.root, args.query):
        print(entry.path)


def _cmd_stat(args: argparse.Namespace) -> None:
    print(_format_stat(scan_entry(args.path)))


def _cmd_mkdir(args: argparse.Namespace) -> None:
    print(entry_ops.create_directory(args.parent, args.name))


def _cmd_touch(args: argparse.Namespace) -> None:
    print(entry_ops.create_file(args.parent, args.name))


def _cmd_rename(args: argparse.Namespace) -> None:
    print(entry_ops.rename(args.path, args.name))


def _cmd_rm(args: argparse.Namespace) -> None:
    entry_ops.delete(args.path)


def _cmd_cp(args: argparse.Namespace) -> None:
    print(entry_ops.copy(args.src, args.dest_dir))


def _cmd_mv(args: argparse.Namespace) -> None:
    print(entry_ops.move(args.src, args.dest_dir))


def _cmd_encrypt(args: argparse.Namespace) -> None:
    print(encrypt_file(args.path, _read_password(args, confirm=True)))


def _cmd_decrypt(args: argparse.Namespace) -> None:
    print(decrypt_file(args.path, _read_password(args, confirm=False)))


def _cmd_zip(args: argparse.Namespace) -> None:
    src = Path(args.src)
    dest = Path(args.dest) if args.dest else archive.default_archive_path(src)
    print(archive.pack(src, dest))


def _cmd_unzip(args: argparse.Namespace) -> None:
    source = Path(args.archive)
    dest_dir = Path(args.dest_dir) if args.dest_dir else archive.default_extract_dir(source)
    print(archive.unpack(source, dest_dir))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyexplorer",
        description="List, search, copy, encrypt and archive files and directories.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug).")
    commands = parser.add_subparsers(dest="command", required=True)

    ls = commands.add_parser("ls", help="List a directory (defaults to the last listed one).")
    ls.add_argument("path", nargs="?", default=None)
    ls.add_argument("-a", "--all", action="store_true", help="Include hidden entries.")
    ls.add_argument("--sort", choices=SORT_COLUMNS, default=None, help="Sort column.")
    ls.add_argument("--reverse", action="store_true", help="Reverse order within directories and files.")
    ls.set_defaults(handler=_cmd_ls)

    find = commands.add_parser("search", help="Recursively find entries whose name contains QUERY.")
    find.add_argument("root")
    find.add_argument("query")
    find.set_defaults(handler=_cmd_search)

    info = commands.add_parser("stat", help="Show metadata for one path.")
    info.add_argument("path")
    info.set_defaults(handler=_cmd_stat)

    for name, handler, help_text in (
        ("mkdir", _cmd_mkdir, "Create a directory."),
        ("touch", _cmd_touch, "Create an empty file."),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("parent")
        sub.add_argument("name")
        sub.set_defaults(handler=handler)

    ren = commands.add_parser("rename", help="Rename an entry within its directory.")
    ren.add_argument("path")
    ren.add_argument("name")
    ren.set_defaults(handler=_cmd_rename)

    rm = commands.add_parser("rm", help="Delete a file or a directory tree (irreversible).")
    rm.add_argument("path")
    rm.set_defaults(handler=_cmd_rm)

    for name, handler, help_text in (
        ("cp", _cmd_cp, "Copy SRC into DEST_DIR."),
        ("mv", _cmd_mv, "Move SRC into DEST_DIR."),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("src")
        sub.add_argument("dest_dir")
        sub.set_defaults(handler=handler)

    for name, handler, help_text in (
        ("encrypt", _cmd_encrypt, "Encrypt a file to <name>.enc and delete the original."),
        ("decrypt", _cmd_decrypt, "Decrypt a .enc file and delete the encrypted copy."),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("path")
        sub.add_argument("--password-env", metavar="VAR", default=None, help="Read the password from VAR.")
        sub.set_defaults(handler=handler)

    pack = commands.add_parser("zip", help="Pack a file or directory into a store-only zip.")
    pack.add_argument("src")
    pack.add_argument("dest", nargs="?", default=None)
    pack.set_defaults(handler=_cmd_zip)

    unpack = commands.add_parser("unzip", help="Extract a zip archive.")
    unpack.add_argument("archive")
    unpack.add_argument("dest_dir", nargs="?", default=None)
    unpack.set_defaults(handler=_cmd_unzip)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run one operation; returns the process exit status."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        args.handler(args)
    except FsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
