"""Little-endian 32-bit numbers used as headers, sizes and offsets."""

from __future__ import annotations

import struct

NUMBER_SIZE = 4
"""Size in bytes of a packed number."""

NUMBER_MAX = 0xFFFF_FFFF

_NUMBER = struct.Struct("<I")


def pack_number(num: int) -> bytes:
    """Pack an unsigned 32-bit integer as four little-endian bytes."""
    if not 0 <= num <= NUMBER_MAX:
        raise ValueError(f"number {num} does not fit in {NUMBER_SIZE} bytes")
    return _NUMBER.pack(num)


def unpack_number(data: bytes) -> int:
    """Read the little-endian number held in the first four bytes of ``data``."""
    if len(data) < NUMBER_SIZE:
        raise ValueError(
            f"need at least {NUMBER_SIZE} bytes to unpack a number, got {len(data)}"
        )
    return _NUMBER.unpack_from(data)[0]


def unpack_number_vec(data: bytes) -> list[bytes]:
    """Split ``data`` into consecutive four-byte chunks."""
    if len(data) % NUMBER_SIZE:
        raise ValueError(
            f"length {len(data)} is not a multiple of {NUMBER_SIZE}"
        )
    view = bytes(data)
    return [view[start:start + NUMBER_SIZE] for start in range(0, len(view), NUMBER_SIZE)]


def hex_string(data: bytes) -> str:
    """Return the lower-case hexadecimal form of ``data``."""
    return bytes(data).hex()