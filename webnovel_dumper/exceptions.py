from typing import Optional


class DumperError(Exception):
    """Base exception for every error raised by webnovel-dumper."""
    pass


# --- HTTP fetch outcomes -----------------------------------------------------

class FetchError(DumperError):
    """Base exception for a failed HTTP fetch."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class UnexpectedStatusError(FetchError):
    """The server answered with a status other than 200 or 404."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"Request to {url} got unexpected result code: {status_code}", url)
        self.status_code = status_code


class SourceUnreachableError(FetchError):
    """Transport-level failure: DNS, refused connection, TLS, timeout."""
    pass


class InvalidBodyError(FetchError):
    """The response body could not be decoded as text."""
    pass


# --- Chapter list construction -----------------------------------------------

class InitError(DumperError):
    """Base exception for failures while opening the chapter list."""
    pass


class PageUnavailableError(InitError):
    pass


class TitleContainerMissingError(InitError):
    pass


class TitleAnchorMissingError(InitError):
    pass


class TitleAttributeMissingError(InitError):
    pass


class ChapterListContainerMissingError(InitError):
    pass


# --- Per-chapter rendering ---------------------------------------------------

class WriteError(DumperError):
    """Base exception for a chapter that could not be rendered into the output."""
    retryable = False


class HttpWriteError(WriteError):
    """The chapter page could not be fetched. Worth retrying."""
    retryable = True


class ProtocolWriteError(WriteError):
    """The chapter page was fetched but its body container is missing."""
    pass


class FileWriteError(WriteError):
    """The output sink rejected a write."""

    def __init__(self, io_error: OSError):
        super().__init__(f"Write file error: {io_error}")
        self.io_error = io_error
