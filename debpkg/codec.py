from __future__ import annotations

import tarfile
from typing import BinaryIO, Optional, Tuple

import zstandard

from .constants import BUNDLE_MODES, CONTROL_BUNDLE, DATA_BUNDLE
from .errors import UnsupportedFormatError


def split_bundle_name(name: str) -> Optional[Tuple[str, str]]:
    """Split a member name into (bundle, compression suffix).

    Returns None for names that are not a control or data bundle, e.g.
    ``debian-binary``. ``data.tar.xz`` yields ``("data.tar", ".xz")``.
    """
    for base in (CONTROL_BUNDLE, DATA_BUNDLE):
        if name == base:
            return base, ""
        if name.startswith(base + "."):
            return base, name[len(base):]
    return None


class BundleCodec:
    def __init__(self, member_name: str, suffix: str):
        if suffix not in BUNDLE_MODES:
            raise UnsupportedFormatError(f"unsupported compression for member {member_name!r}: {suffix}")
        self.member_name = member_name
        self.suffix = suffix
        self.mode = BUNDLE_MODES[suffix]

    def open_tar(self, fileobj: BinaryIO) -> tarfile.TarFile:
        # Stream modes only; the member content cannot be seeked
        if self.mode is None:
            reader = zstandard.ZstdDecompressor().stream_reader(fileobj, closefd=False)
            return tarfile.open(fileobj=reader, mode="r|")
        return tarfile.open(fileobj=fileobj, mode=self.mode)
