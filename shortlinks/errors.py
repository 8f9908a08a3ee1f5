"""
Exceptions raised by the Shortlinks manager and stores.

Validation errors derive from ValueError so callers that only know about
ValueError (as the HTTP layer did historically) keep working.
"""

__all__ = [
    "ShortlinkError",
    "InvalidUrlError",
    "InvalidCodeFormatError",
    "CodeTakenError",
    "ReservedCodeError",
    "InvalidValidityError",
    "CodeSpaceExhaustedError",
    "StorageError",
]


class ShortlinkError(ValueError):
    """Base class for errors raised synchronously by LinkManager.create."""


class InvalidUrlError(ShortlinkError):
    def __init__(self, url: str):
        super().__init__("Invalid URL provided")
        self.url = url


class InvalidCodeFormatError(ShortlinkError):
    def __init__(self, code: str):
        super().__init__("Custom shortcode must be 3-10 alphanumeric characters")
        self.code = code


class CodeTakenError(ShortlinkError):
    def __init__(self, code: str):
        super().__init__("Custom shortcode already exists")
        self.code = code


class ReservedCodeError(CodeTakenError):
    """The code is one the HTTP surface routes itself (e.g. `health`)."""

    def __init__(self, code: str):
        ShortlinkError.__init__(self, "Custom shortcode is reserved")
        self.code = code


class InvalidValidityError(ShortlinkError):
    def __init__(self, minutes):
        super().__init__("Validity must be a non-negative number of minutes")
        self.minutes = minutes


class CodeSpaceExhaustedError(ShortlinkError):
    """Every attempt to draw an unused random code collided."""

    def __init__(self, attempts: int):
        super().__init__(f"Could not generate a unique shortcode after {attempts} attempts")
        self.attempts = attempts


class StorageError(Exception):
    """A store could not read or write a key (I/O, quota, locked database)."""
