"""Error types raised while preloading."""


class PreloadError(Exception):
    """Base class for preloader errors."""


class TransportError(PreloadError):
    """A request to the remote repository failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FormatError(PreloadError):
    """The index resource could not be decompressed or decoded."""


class ItemProbeError(PreloadError):
    """A probe for a single package failed."""

    def __init__(self, identifier, cause: BaseException):
        super().__init__(f"{identifier}: {cause}")
        self.identifier = identifier
        self.cause = cause
