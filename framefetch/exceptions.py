"""
Defines custom exceptions for the application to allow for more specific error handling.

"No data" answers from the server (a non-200 status, a multipart body without
parts) are not exceptions; the downloader returns None for those.
"""


class FrameFetchError(Exception):
    """Base exception for all application-specific errors."""


class ProtocolError(FrameFetchError):
    """Raised when a server response violates the frame-serving wire protocol."""


class BufferUnderflowError(ProtocolError, IndexError):
    """Raised when more bytes are requested than a scratch buffer has left."""


class BufferOverflowError(ProtocolError):
    """Raised when a response body does not fit into the caller-supplied buffer."""


class TransportError(FrameFetchError):
    """Raised when the HTTP request itself fails (connection, timeout, read)."""


class ConfigurationError(FrameFetchError):
    """Raised for issues related to configuration loading or validation."""
