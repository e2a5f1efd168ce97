"""Exceptions raised while fetching and decoding aviation weather reports."""

from typing import Any, Optional


class AvWeatherError(Exception):
    """Base class for every error raised by avweather."""


class InvalidStationQuery(AvWeatherError):
    """The service returned zero results, usually an unknown station id."""

    def __init__(self, message: str = "Invalid station string."):
        super().__init__(message)


class MalformedDocument(AvWeatherError):
    """The payload is not well-formed or does not have the expected shape."""


class FieldConversionFailed(AvWeatherError):
    """
    A value present on the wire could not be converted to its typed field.

    Attributes:
        field: Wire name of the field (e.g. ``latitude``, ``validTimeFrom``)
        raw_value: The text or JSON value that failed to convert
    """

    def __init__(self, field: str, raw_value: Any, reason: Optional[str] = None):
        self.field = field
        self.raw_value = raw_value
        self.reason = reason
        message = f"Failed to parse {field}: {raw_value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedContentType(AvWeatherError):
    """The declared content type does not match the selected decoder."""

    def __init__(self, expected: str, actual: Optional[str]):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected content type {expected}, got {actual}")


class ServiceError(AvWeatherError):
    """The weather service reported an error or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
