from __future__ import annotations

import sys
import argparse
import json as _json
import tarfile

from typing import BinaryIO, Dict, List, Optional

import zstandard

from debpkg.ar import ArchiveReader, Header
from debpkg.constants import SKIP_CHUNK_SIZE
from debpkg.errors import DebpkgError
from debpkg.logutil import configure_logging, get_logger
from debpkg.package import read_package


log = get_logger("debpkg.cli")


def _format_mtime(h: Header) -> str:
    if h.mtime is None:
        return "-"
    return h.mtime.strftime("%Y-%m-%d %H:%M:%S")


def _format_field(key: str, value: str) -> str:
    # Continuation lines go back out indented by one space
    return f"{key}: " + value.replace("\n", "\n ")


def cmd_members(archive: str) -> bool:
    """List ar members in archive order.

    Args:
        archive: Path to an ar archive (e.g. a .deb).
    """
    with ArchiveReader.open(archive) as r:
        for h in r:
            print(f"{h.filemode}\t{h.uid}/{h.gid}\t{h.size}\t{_format_mtime(h)}\t{h.name}")
    return True


def cmd_cat(archive: str, member: str, *, out: Optional[BinaryIO] = None) -> bool:
    """Copy the raw content of one member to ``out`` (stdout by default).

    Returns False when the archive has no member with that name.
    """
    if out is None:
        out = sys.stdout.buffer
    with ArchiveReader.open(archive) as r:
        for h in r:
            if h.name != member:
                continue
            while True:
                buf = r.read(SKIP_CHUNK_SIZE)
                if not buf:
                    break
                out.write(buf)
            out.flush()
            return True
    print(f"Error: no member named {member!r} in {archive}", file=sys.stderr)
    return False


def cmd_info(path: str, *, as_json: bool = False) -> bool:
    """Show package name, size and control fields (including digests)."""
    pkg = read_package(path)
    if as_json:
        doc: Dict[str, object] = {
            "path": pkg.path,
            "name": pkg.name,
            "size": pkg.size,
            "fields": pkg.fields,
        }
        print(_json.dumps(doc, indent=2))
        return True
    print(f"File: {pkg.name}")
    print(f"Size: {pkg.size}")
    for key, value in pkg.fields.items():
        print(_format_field(key, value))
    return True


def cmd_files(path: str) -> bool:
    pkg = read_package(path)
    for name in pkg.files:
        print(name)
    return True


def cmd_scripts(path: str, *, as_json: bool = False) -> bool:
    pkg = read_package(path)
    scripts = pkg.scripts
    if as_json:
        print(_json.dumps(scripts, indent=2))
        return True
    if not scripts:
        print("No maintainer scripts")
        return True
    for name, text in scripts.items():
        print(f"==> {name} <==")
        print(text, end="" if text.endswith("\n") else "\n")
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="debpkg",
        description="Inspect ar archives and Debian binary packages",
    )
    ap.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR); defaults to $DEBPKG_LOG_LEVEL or WARNING",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_members = sub.add_parser("members", help="List ar archive members")
    ap_members.add_argument("archive", help="Archive path")

    ap_cat = sub.add_parser("cat", help="Write one member's raw content to stdout")
    ap_cat.add_argument("archive", help="Archive path")
    ap_cat.add_argument("member", help="Member name (e.g. debian-binary)")

    ap_info = sub.add_parser("info", help="Show package control fields and checksums")
    ap_info.add_argument("package", help=".deb path")
    ap_info.add_argument("--json", action="store_true", help="Emit JSON")

    ap_files = sub.add_parser("files", help="List installed file paths")
    ap_files.add_argument("package", help=".deb path")

    ap_scripts = sub.add_parser("scripts", help="Show maintainer scripts")
    ap_scripts.add_argument("package", help=".deb path")
    ap_scripts.add_argument("--json", action="store_true", help="Emit JSON")

    args = ap.parse_args(argv)
    configure_logging(args.log_level)
    try:
        if args.cmd == "members":
            cmd_members(args.archive)
        elif args.cmd == "cat":
            if not cmd_cat(args.archive, args.member):
                sys.exit(1)
        elif args.cmd == "info":
            cmd_info(args.package, as_json=args.json)
        elif args.cmd == "files":
            cmd_files(args.package)
        elif args.cmd == "scripts":
            cmd_scripts(args.package, as_json=args.json)
        else:
            raise RuntimeError("Unknown command")
    except (DebpkgError, tarfile.TarError, zstandard.ZstdError) as e:
        log.debug("command %s failed", args.cmd, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
