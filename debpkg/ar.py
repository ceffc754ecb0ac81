"""Forward-only reader for ar archives.

An ar archive is the 8-byte global magic followed by members, each made of a
60-byte ASCII header and ``size`` bytes of content, plus one ``\\n`` pad byte
when ``size`` is odd. ``ArchiveReader`` walks the members in a single pass and
never seeks, so any readable binary stream (file, pipe, socket) works.
"""

from __future__ import annotations

import enum
import logging
import re
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from types import TracebackType
from typing import BinaryIO, Iterator, List, Optional, Tuple

from .constants import (
    AR_MAGIC,
    MEMBER_TERMINATOR,
    PAD_BYTE,
    HEADER_SIZE,
    FIELD_NAME,
    FIELD_MTIME,
    FIELD_UID,
    FIELD_GID,
    FIELD_MODE,
    FIELD_SIZE,
    FIELD_TERMINATOR,
    SKIP_CHUNK_SIZE,
)
from .errors import ArchiveError, MagicError, HeaderError, ContentUnavailableError


log = logging.getLogger(__name__)

_DIGITS = {
    8: re.compile(rb"[0-7]+"),
    10: re.compile(rb"[0-9]+"),
}


@dataclass(frozen=True)
class Header:
    name: str
    mtime: Optional[datetime]  # None when the raw timestamp is zero
    uid: int
    gid: int
    mode: int
    size: int

    @property
    def perm(self) -> int:
        return stat.S_IMODE(self.mode)

    @property
    def is_dir(self) -> bool:
        # ar members are always plain files
        return False

    @property
    def filemode(self) -> str:
        return stat.filemode(self.mode)


def _field(block: bytes, spec: Tuple[int, int]) -> bytes:
    off, width = spec
    return block[off : off + width]


def parse_int(raw: bytes, base: int) -> int:
    """Parse a space-padded ASCII integer field in ``base`` (8 or 10).

    Only the digits of the base are accepted once surrounding whitespace is
    trimmed; signs, underscores and empty fields raise ``HeaderError``.
    """
    pattern = _DIGITS.get(base)
    if pattern is None:
        raise ValueError(f"unsupported base: {base}")
    text = raw.strip()
    if not pattern.fullmatch(text):
        raise HeaderError(f"invalid base-{base} header field: {raw!r}")
    return int(text, base)


def parse_mtime(raw: bytes) -> Optional[datetime]:
    sec = parse_int(raw, 10)
    if sec == 0:
        return None
    try:
        return datetime.fromtimestamp(sec, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise HeaderError(f"modification time out of range: {sec}") from exc


def parse_header(block: bytes) -> Header:
    """Decode one fixed 60-byte member header.

    Either every field parses and a ``Header`` is returned, or ``HeaderError``
    is raised; a partially valid header is never produced.
    """
    if len(block) != HEADER_SIZE:
        raise HeaderError(f"truncated member header ({len(block)} of {HEADER_SIZE} bytes)")
    if _field(block, FIELD_TERMINATOR) != MEMBER_TERMINATOR:
        raise HeaderError("invalid member header terminator")
    try:
        name = _field(block, FIELD_NAME).strip().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HeaderError("member name is not valid UTF-8") from exc
    return Header(
        name=name,
        mtime=parse_mtime(_field(block, FIELD_MTIME)),
        uid=parse_int(_field(block, FIELD_UID), 10),
        gid=parse_int(_field(block, FIELD_GID), 10),
        mode=parse_int(_field(block, FIELD_MODE), 8),
        size=parse_int(_field(block, FIELD_SIZE), 10),
    )


class _State(enum.Enum):
    FRESH = "fresh"
    ACTIVE = "active"
    DONE = "done"
    FAILED = "failed"


class MemberStream:
    """Bounded read-only view over the content of the current member.

    The view is tied to the header it was created for; once the reader
    advances, every read through it raises ``ContentUnavailableError``. After
    a terminal error it re-raises the reader's sticky error instead.
    """

    def __init__(self, reader: "ArchiveReader", header: Header):
        self._reader = reader
        self.header = header

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def remaining(self) -> int:
        if self._reader._stream is not self:
            return 0
        return self._reader.remaining

    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> bytes:
        reader = self._reader
        if reader._err is not None:
            reader._raise_sticky()
        if reader._stream is not self:
            raise ContentUnavailableError(f"member {self.header.name!r} is no longer current")
        return reader._read_content(size)

    def close(self) -> None:
        pass


class ArchiveReader:
    """Sequential reader over the members of an ar archive.

    ``next()`` returns the ``Header`` of the next member, or ``None`` once the
    archive is exhausted. Content of the current member is read with
    ``read()`` or through the ``MemberStream`` returned by ``stream()``; any
    unread content is skipped on the following ``next()``.

    Errors are terminal: after ``MagicError``, ``HeaderError`` or an
    ``OSError`` from the source, every later ``next()``, ``read()`` and
    ``stream()`` re-raises the same exception without touching the source
    again. A closed reader behaves the same way with a
    ``ContentUnavailableError``.
    """

    def __init__(self, fileobj: BinaryIO):
        self.fileobj = fileobj
        self.header: Optional[Header] = None
        self.remaining: int = 0
        self.padded: bool = False
        self.validated: bool = False
        self._state = _State.FRESH
        self._err: Optional[BaseException] = None
        self._err_tb: Optional[TracebackType] = None
        self._stream: Optional[MemberStream] = None
        self._owns_file = False

    @classmethod
    def open(cls, path: str) -> "ArchiveReader":
        reader = cls(open(path, "rb"))
        reader._owns_file = True
        return reader

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self) -> Iterator[Header]:
        while True:
            header = self.next()
            if header is None:
                return
            yield header

    def close(self) -> None:
        if self._err is None:
            self._fail(ContentUnavailableError("archive reader is closed"))
        self._stream = None
        if self._owns_file and self.fileobj is not None:
            self.fileobj.close()
            self._owns_file = False

    @property
    def failed(self) -> bool:
        return self._state is _State.FAILED

    @property
    def done(self) -> bool:
        return self._state is _State.DONE

    def next(self) -> Optional[Header]:
        if self._err is not None:
            self._raise_sticky()
        if self._state is _State.DONE:
            return None
        try:
            self._skip_unread()
            if not self.validated:
                self._validate()
            header = self._read_header()
        except (ArchiveError, OSError) as exc:
            self._fail(exc)
            raise
        if header is None:
            self._state = _State.DONE
            log.debug("end of archive")
            return None
        self._state = _State.ACTIVE
        log.debug("member %r: size=%d mode=%o", header.name, header.size, header.mode)
        return header

    def stream(self) -> MemberStream:
        """Return the bounded content view of the current member."""
        if self._err is not None:
            self._raise_sticky()
        if self._stream is None:
            raise ContentUnavailableError("no current archive member")
        return self._stream

    def read(self, size: Optional[int] = -1) -> bytes:
        return self.stream().read(size)

    def members(self) -> List[Header]:
        """Consume the rest of the archive and return the remaining headers."""
        return list(self)

    # internals
    def _fail(self, exc: BaseException) -> None:
        self._err = exc
        self._err_tb = exc.__traceback__
        self._state = _State.FAILED
        self._stream = None
        self.header = None

    def _raise_sticky(self) -> None:
        # Restart from the original traceback so repeated raises don't stack frames
        raise self._err.with_traceback(self._err_tb)

    def _read_full(self, n: int) -> bytes:
        # Sources such as pipes may return short reads before EOF
        buf = bytearray()
        while len(buf) < n:
            chunk = self.fileobj.read(n - len(buf))
            if not chunk:
                break
            buf += chunk
        return bytes(buf)

    def _validate(self) -> None:
        magic = self._read_full(len(AR_MAGIC))
        if magic != AR_MAGIC:
            raise MagicError("invalid ar global header magic string")
        self.validated = True
        log.debug("ar global header validated")

    def _skip_unread(self) -> None:
        self._stream = None
        if self.remaining:
            log.debug("skipping %d unread bytes of %r", self.remaining, self.header.name if self.header else "")
        while self.remaining > 0:
            chunk = self.fileobj.read(min(self.remaining, SKIP_CHUNK_SIZE))
            if not chunk:
                raise HeaderError("archive truncated inside member content")
            self.remaining -= len(chunk)
        if self.padded:
            # The pad byte sits on the raw stream right after the last content byte
            if self._read_full(1) != PAD_BYTE:
                raise HeaderError("missing or invalid pad byte after odd-sized member")
            self.padded = False
        self.header = None

    def _read_header(self) -> Optional[Header]:
        block = self._read_full(HEADER_SIZE)
        if not block:
            return None
        header = parse_header(block)
        self.header = header
        self.remaining = header.size
        self.padded = header.size % 2 == 1
        self._stream = MemberStream(self, header)
        return header

    def _read_content(self, size: Optional[int]) -> bytes:
        if size is None or size < 0 or size > self.remaining:
            size = self.remaining
        if size == 0:
            return b""
        try:
            data = self.fileobj.read(size)
            if not data:
                raise HeaderError(f"archive truncated inside member {self.header.name!r}")
        except (ArchiveError, OSError) as exc:
            self._fail(exc)
            raise
        self.remaining -= len(data)
        return data
