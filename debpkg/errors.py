class DebpkgError(Exception):
    """Base class for debpkg-specific errors."""


# ar archive reader
class ArchiveError(DebpkgError):
    """Base class for errors raised while reading an ar archive."""


class MagicError(ArchiveError):
    """The global header does not hold the ar magic string."""


class HeaderError(ArchiveError):
    """A member header, pad byte or member body is malformed or truncated."""


class ContentUnavailableError(ArchiveError):
    """Member content was requested while no member is current."""


# Debian package assembly
class PackageError(DebpkgError):
    """Base class for errors raised while assembling a package."""


class EmptyControlError(PackageError):
    pass


class EmptyDataError(PackageError):
    pass


class UnsupportedFormatError(PackageError):
    pass


class ControlFieldError(PackageError):
    def __init__(self, message: str, line_no: int = 0):
        super().__init__(message)
        self.line_no = line_no
