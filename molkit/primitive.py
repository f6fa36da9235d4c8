"""The single-byte primitive and its read-only view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .errors import TotalSizeNotMatch


@dataclass(frozen=True, order=True)
class Byte:
    """One byte of data."""

    NAME: ClassVar[str] = "Byte"

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"byte value out of range: {self.value}")

    @classmethod
    def new_unchecked(cls, data: bytes) -> Byte:
        """Build from the first byte of ``data`` without checking its length."""
        return cls(data[0])

    @classmethod
    def from_slice(cls, data: bytes) -> Byte:
        """Build from ``data``, which must be exactly one byte."""
        ByteReader.verify(data, False)
        return cls(data[0])

    @classmethod
    def from_compatible_slice(cls, data: bytes) -> Byte:
        """Build from ``data`` in compatible mode; the length rule is the same."""
        ByteReader.verify(data, True)
        return cls(data[0])

    def as_slice(self) -> bytes:
        return bytes((self.value,))

    def as_reader(self) -> ByteReader:
        return ByteReader(self.as_slice())

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __bytes__(self) -> bytes:
        return self.as_slice()

    def __repr__(self) -> str:
        return f"{self.NAME}(0x{self.value:02x})"

    __str__ = __repr__


@dataclass(frozen=True, order=True)
class ByteReader:
    """A read-only view over one byte of data."""

    NAME: ClassVar[str] = "ByteReader"

    data: bytes

    @classmethod
    def verify(cls, data: bytes, compatible: bool) -> None:
        """Raise ``TotalSizeNotMatch`` unless ``data`` is exactly one byte."""
        if len(data) != 1:
            raise TotalSizeNotMatch(cls.NAME, 1, len(data))

    @classmethod
    def from_slice(cls, data: bytes) -> ByteReader:
        cls.verify(data, False)
        return cls(bytes(data))

    @classmethod
    def from_compatible_slice(cls, data: bytes) -> ByteReader:
        cls.verify(data, True)
        return cls(bytes(data))

    def as_slice(self) -> bytes:
        return self.data

    def to_entity(self) -> Byte:
        return Byte(self.data[0])

    def __int__(self) -> int:
        return self.data[0]

    def __repr__(self) -> str:
        return f"{self.NAME}(0x{self.data[0]:02x})"

    __str__ = __repr__