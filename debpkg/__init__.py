"""
debpkg — streaming reader for ar archives and Debian binary packages.

Features:

- Forward-only ar reader (`debpkg.ar.ArchiveReader`) with bounded per-member
  content streams, pad-byte verification and terminal error state.
- Package inspection (`debpkg.package.read_package`): control fields, maintainer
  scripts, installed file list and MD5/SHA1/SHA256 digests of the .deb.
- Control and data bundles as plain tar, gzip, bzip2, xz, lzma or zstd.

Writing archives is not supported.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "ar",
    "package",
    "control",
    "codec",
    "errors",
]
