"""Exception hierarchy used throughout the driver."""

from __future__ import annotations


class Error(Exception):
    """Base class of every error raised by the driver."""

    _prefix = "Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self._prefix}: `{self.message}`"


class DriverError(Error):
    """A protocol-level failure detected by the driver itself."""

    _prefix = "Driver error"

    def __init__(self, message: str, *, packet: int | None = None) -> None:
        super().__init__(message)
        self.packet = packet


class ConnectError(Error):
    """Establishing a connection to the server failed."""

    _prefix = "Connections error"


class OtherError(Error):
    """A failure that fits no more specific category."""

    _prefix = "Other error"


class ServerError(Error):
    """An exception reported by the server."""

    _prefix = "Server error"

    def __init__(self, code: int, name: str, message: str, stack_trace: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.name = name
        self.stack_trace = stack_trace

    def __str__(self) -> str:
        return f"{self._prefix}: `ERROR {self.name} ({self.code}): {self.message}`"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServerError):
            return NotImplemented
        return (self.code, self.name, self.message, self.stack_trace) == (
            other.code,
            other.name,
            other.message,
            other.stack_trace,
        )

    def __hash__(self) -> int:
        return hash((self.code, self.name, self.message, self.stack_trace))


class UrlError(Error):
    """The connection URL is malformed or carries bad parameters."""

    _prefix = "URL error"


class FromSqlError(Error):
    """A value could not be converted from its SQL type."""

    _prefix = "From SQL error"


class IncompleteData(Error):
    """Not enough bytes are buffered yet to decode the next value."""

    _prefix = "Input/output error"

    def __init__(self, message: str = "would block") -> None:
        super().__init__(message)


def is_would_block(error: BaseException) -> bool:
    """Return True when ``error`` only means that more input is needed."""
    return isinstance(error, IncompleteData)