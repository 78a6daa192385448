"""
Exceptions raised by the conversion pipeline.
"""


class ConverterError(Exception):
    """Base class for batch conversion failures."""


class UnsupportedFormatError(ConverterError):
    """A submitted document is neither a .vcf file nor contains a vCard."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported file format: {filename}")


class BatchTooLargeError(ConverterError):
    """More documents were submitted than one batch accepts."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Cannot convert {count} files at once (maximum {limit})")
