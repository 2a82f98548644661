"""
Error types raised by the SmartDoc utilities.

All of these indicate a problem with the caller's input or configuration,
so they are raised immediately and never retried.
"""


class SmartDocError(Exception):
    """Base class for SmartDoc errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class EmptyInputError(SmartDocError):
    """Raised when text to embed is empty or whitespace-only"""


class InvalidChunkSizeError(SmartDocError):
    """Raised when a non-positive chunk size is requested"""


class DimensionMismatchError(SmartDocError):
    """Raised when vectors of different lengths are averaged"""

    def __init__(self, expected: int, actual: int, index: int):
        self.expected = expected
        self.actual = actual
        self.index = index
        super().__init__(f"Vector {index} has dimension {actual}, expected {expected}")


class ParseError(SmartDocError):
    """Raised when a model response cannot be parsed into the expected structure"""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class UnsupportedFileTypeError(SmartDocError):
    """Raised when an uploaded file has an extension we cannot extract text from"""
