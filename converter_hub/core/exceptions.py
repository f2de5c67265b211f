"""Errors raised by the converter models."""


class ConverterError(Exception):
    """Base class for converter errors."""


class SourceUnavailableError(ConverterError):
    """The rates feed or the country file could not be fetched or parsed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Data source unavailable: {reason}")


class DivisionByZeroError(ConverterError, ZeroDivisionError):
    """The conversion anchor rate is zero."""

    def __init__(self, code: str) -> None:
        self.code = (code or "").upper()
        super().__init__(f"Cannot convert from '{self.code}': its rate is zero")


class NotTrackedError(ConverterError, LookupError):
    """The currency is not in the tracked (or currently visible) set."""

    def __init__(self, code: str) -> None:
        self.code = (code or "").upper()
        super().__init__(f"Currency '{self.code}' is not tracked")


class CurrencyNotFoundError(ConverterError, LookupError):
    """Unknown currency."""

    def __init__(self, code: str) -> None:
        self.code = (code or "").upper()
        super().__init__(f"Unknown currency '{self.code}'")


class AlreadyTrackedError(ConverterError):
    """The currency is already tracked."""

    def __init__(self, code: str) -> None:
        self.code = (code or "").upper()
        super().__init__(f"Currency '{self.code}' is already tracked")


class IndexOutOfRangeError(ConverterError, IndexError):
    """A row beyond the currently visible list was requested."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"Row {index} out of range ({size} rows visible)")


class StorageError(ConverterError):
    """The local selection store could not be read or written."""
