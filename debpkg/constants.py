# Global header and member framing
AR_MAGIC = b"!<arch>\n"      # 8 bytes, once at stream start
MEMBER_TERMINATOR = b"\x60\n"  # "`\n", last 2 bytes of each member header
PAD_BYTE = b"\n"             # follows odd-sized member content

HEADER_SIZE = 60

# (offset, width) of each fixed-width header field
FIELD_NAME = (0, 16)
FIELD_MTIME = (16, 12)
FIELD_UID = (28, 6)
FIELD_GID = (34, 6)
FIELD_MODE = (40, 8)
FIELD_SIZE = (48, 10)
FIELD_TERMINATOR = (58, 2)

# I/O tunables
SKIP_CHUNK_SIZE = 65536
HASH_CHUNK_SIZE = 1_048_576  # 1 MiB


# Debian package members
CONTROL_BUNDLE = "control.tar"
DATA_BUNDLE = "data.tar"

# Compression suffix -> tarfile stream mode; None marks zstd (handled by zstandard)
BUNDLE_MODES = {
    "": "r|",
    ".gz": "r|gz",
    ".bz2": "r|bz2",
    ".xz": "r|xz",
    ".lzma": "r|xz",  # tarfile's xz stream auto-detects legacy .lzma
    ".zst": None,
}

CONTROL_FILE = "control"
SCRIPT_PREINST = "preinst"
SCRIPT_PRERM = "prerm"
SCRIPT_POSTINST = "postinst"
SCRIPT_POSTRM = "postrm"

# Digest fields injected into the control field map
FIELD_MD5 = "MD5sum"
FIELD_SHA1 = "SHA1"
FIELD_SHA256 = "SHA256"


# Environment
ENV_LOG_LEVEL = "DEBPKG_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
