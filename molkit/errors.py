"""Errors raised when data does not match the layout of its type."""

from __future__ import annotations


class VerificationError(ValueError):
    """Data failed verification against the type named ``name``."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class TotalSizeNotMatch(VerificationError):
    """The data length differs from the size the type requires."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(
            name, f"{name} total size doesn't match, expect {expected}, actual {actual}"
        )
        self.expected = expected
        self.actual = actual


class HeaderIsBroken(VerificationError):
    """The data is too short to hold the type's header."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(
            name,
            f"{name} total size is not enough for header, "
            f"expect {expected}, actual {actual}",
        )
        self.expected = expected
        self.actual = actual


class UnknownItem(VerificationError):
    """A union holds an item id outside its known items."""

    def __init__(self, name: str, size: int, actual: int) -> None:
        super().__init__(
            name,
            f"{name} item id (={actual}) is an unknown id, only has {size} kind of items",
        )
        self.size = size
        self.actual = actual


class OffsetsNotMatch(VerificationError):
    """The offsets in a header are inconsistent."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"{name} some offsets is not match")


class FieldCountNotMatch(VerificationError):
    """A table holds a different number of fields than declared."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(
            name, f"{name} field count doesn't match, expect {expected}, actual {actual}"
        )
        self.expected = expected
        self.actual = actual