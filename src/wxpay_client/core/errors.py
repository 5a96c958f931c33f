"""
Exception hierarchy shared by the wxpay client modules.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "WxPayError",
    "ConfigError",
    "InputValidationError",
    "TransportError",
    "ParseError",
    "DateFormatError",
]


class WxPayError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(WxPayError):
    """Raised when the supplied configuration is invalid."""


class InputValidationError(WxPayError, ValueError):
    """Raised when a parameter mapping has the wrong shape for signing."""


class TransportError(WxPayError):
    """
    The request never produced a usable HTTP response.

    ``status_code`` is set when the server answered with an error status.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(WxPayError):
    """The server answered but the body could not be decoded."""


class DateFormatError(WxPayError, ValueError):
    """A provider timestamp is not in ``YYYYMMDDHHmmss`` form."""
