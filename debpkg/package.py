from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import Dict, List

from .ar import ArchiveReader, Header, MemberStream
from .codec import BundleCodec, split_bundle_name
from .constants import (
    CONTROL_BUNDLE,
    DATA_BUNDLE,
    CONTROL_FILE,
    SCRIPT_PREINST,
    SCRIPT_PRERM,
    SCRIPT_POSTINST,
    SCRIPT_POSTRM,
)
from .control import parse_fields
from .errors import EmptyControlError, EmptyDataError
from .hashutil import file_checksums


log = logging.getLogger(__name__)

# control bundle entry -> Package attribute
_CONTROL_ENTRIES = {
    CONTROL_FILE: "control_data",
    SCRIPT_PREINST: "preinst_data",
    SCRIPT_PRERM: "prerm_data",
    SCRIPT_POSTINST: "postinst_data",
    SCRIPT_POSTRM: "postrm_data",
}


@dataclass
class Package:
    path: str
    name: str
    size: int
    files: List[str] = field(default_factory=list)
    fields: Dict[str, str] = field(default_factory=dict)
    control_data: str = ""
    preinst_data: str = ""
    prerm_data: str = ""
    postinst_data: str = ""
    postrm_data: str = ""
    members: List[Header] = field(default_factory=list)

    @classmethod
    def from_path(cls, path: str) -> "Package":
        return read_package(path)

    @property
    def scripts(self) -> Dict[str, str]:
        """Maintainer scripts present in the package, keyed by script name."""
        out = {}
        for entry, attr in _CONTROL_ENTRIES.items():
            if entry == CONTROL_FILE:
                continue
            text = getattr(self, attr)
            if text:
                out[entry] = text
        return out


def _entry_name(name: str) -> str:
    # "./control" and "control" name the same entry
    return posixpath.normpath(name)


def _decode_text(data: bytes) -> str:
    # Older packages carry Latin-1 maintainer names; every byte string is valid Latin-1
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _read_control(pkg: Package, hdr: Header, stream: MemberStream, codec: BundleCodec) -> None:
    if hdr.size == 0:
        raise EmptyControlError(f"empty control bundle {hdr.name!r}")
    with codec.open_tar(stream) as tf:
        for ti in tf:
            attr = _CONTROL_ENTRIES.get(_entry_name(ti.name))
            if attr is None or not ti.isfile():
                continue
            fh = tf.extractfile(ti)
            if fh is None:
                continue
            setattr(pkg, attr, _decode_text(fh.read()))


def _read_data(pkg: Package, hdr: Header, stream: MemberStream, codec: BundleCodec) -> None:
    if hdr.size == 0:
        raise EmptyDataError(f"empty data bundle {hdr.name!r}")
    with codec.open_tar(stream) as tf:
        for ti in tf:
            if not ti.isdir():
                pkg.files.append(ti.name)


def read_package(path: str) -> Package:
    """Read a Debian binary package.

    Walks the ar members once, collecting control text and maintainer
    scripts from the control bundle and installed paths from the data
    bundle, then parses the control fields and adds MD5sum/SHA1/SHA256
    digests of the whole file. The first error aborts the read.

    Args:
        path: Path to a .deb file.

    Returns:
        A fully populated Package.
    """
    with open(path, "rb") as f:
        st = os.fstat(f.fileno())
        pkg = Package(path=path, name=os.path.basename(path), size=st.st_size)
        reader = ArchiveReader(f)
        for hdr in reader:
            pkg.members.append(hdr)
            parts = split_bundle_name(hdr.name)
            if parts is None:
                log.debug("skipping member %r", hdr.name)
                continue
            base, suffix = parts
            codec = BundleCodec(hdr.name, suffix)
            log.debug("reading %s bundle %r", base, hdr.name)
            if base == CONTROL_BUNDLE:
                _read_control(pkg, hdr, reader.stream(), codec)
            elif base == DATA_BUNDLE:
                _read_data(pkg, hdr, reader.stream(), codec)

    pkg.fields.update(parse_fields(pkg.control_data))
    pkg.fields.update(file_checksums(path))
    pkg.files.sort()
    return pkg

