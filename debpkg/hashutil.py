from __future__ import annotations

from typing import Dict

from Cryptodome.Hash import MD5, SHA1, SHA256

from .constants import FIELD_MD5, FIELD_SHA1, FIELD_SHA256, HASH_CHUNK_SIZE


def file_checksums(path: str) -> Dict[str, str]:
    """Return MD5, SHA1 and SHA256 hex digests of a whole file, keyed by control field name."""
    hashers = {
        FIELD_MD5: MD5.new(),
        FIELD_SHA1: SHA1.new(),
        FIELD_SHA256: SHA256.new(),
    }
    with open(path, "rb") as f:
        while True:
            buf = f.read(HASH_CHUNK_SIZE)
            if not buf:
                break
            for h in hashers.values():
                h.update(buf)
    return {name: h.hexdigest() for name, h in hashers.items()}
