"""
Interop between arbitrary precision ints and 32 byte curve scalars.

Notes on Endianness
Big Endian: power is ordered by descending byte index,
    e.g. 0x123456 as 4 bytes is [0x00, 0x12, 0x34, 0x56],
    the coefficients of [256^3, 256^2, 256^1, 256^0].
Little Endian: [0x56, 0x34, 0x12, 0x00].
Curve scalars are always exchanged big endian.
"""

from .ec_op import order as secp256k1_order, ec_scalar_mul, generator
from .modular import rem_euclid

SCALAR_LENGTH = 32


def big_integer_to_scalar(x: int, order: int = secp256k1_order) -> bytes:
    """
    Reduce x modulo order and encode it as exactly 32 big endian bytes.
    """
    a = rem_euclid(x, order)
    src = a.to_bytes((a.bit_length() + 7) // 8, byteorder="big")
    if len(src) > SCALAR_LENGTH:
        # keep the low order bytes; cannot happen for a 256 bit order
        return src[len(src) - SCALAR_LENGTH:]
    return src.rjust(SCALAR_LENGTH, b"\x00")


def scalar_to_big_integer(s: bytes) -> int:
    assert len(s) == SCALAR_LENGTH, f"Scalar must be {SCALAR_LENGTH} bytes"
    return int.from_bytes(s, byteorder="big")


def scalar_mul_base(x: int):
    """
    x * G, with x going through the canonical scalar encoding first.
    """
    return ec_scalar_mul(generator, scalar_to_big_integer(big_integer_to_scalar(x)))
