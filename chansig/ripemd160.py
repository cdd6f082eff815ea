# Copyright (C) 2018-2025 The python-bitcoin-utils developers
#
# This file is part of chansig
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of chansig, including this file, may be copied, modified,
# propagated, or distributed except according to the terms contained in the
# LICENSE file.

"""Pure Python RIPEMD-160.

hashlib only offers ripemd160 when the linked OpenSSL still ships it, which
is not the case for most OpenSSL 3 builds, so script hashes use this one.
"""

MASK32 = 0xFFFFFFFF

# message word selection, left and right lines
_WORDS_LEFT = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
    7, 4, 13, 1, 10, 6, 15, 3, 12, 0, 9, 5, 2, 14, 11, 8,
    3, 10, 14, 4, 9, 15, 8, 1, 2, 7, 0, 6, 13, 11, 5, 12,
    1, 9, 11, 10, 0, 8, 12, 4, 13, 3, 7, 15, 14, 5, 6, 2,
    4, 0, 5, 9, 7, 12, 2, 10, 14, 1, 3, 8, 11, 6, 15, 13,
)
_WORDS_RIGHT = (
    5, 14, 7, 0, 9, 2, 11, 4, 13, 6, 15, 8, 1, 10, 3, 12,
    6, 11, 3, 7, 0, 13, 5, 10, 14, 15, 8, 12, 4, 9, 1, 2,
    15, 5, 1, 3, 7, 14, 6, 9, 11, 8, 12, 2, 10, 0, 4, 13,
    8, 6, 4, 1, 3, 11, 15, 0, 5, 12, 2, 13, 9, 7, 10, 14,
    12, 15, 10, 4, 1, 5, 8, 7, 6, 2, 13, 14, 0, 3, 9, 11,
)

# rotation amounts, left and right lines
_SHIFTS_LEFT = (
    11, 14, 15, 12, 5, 8, 7, 9, 11, 13, 14, 15, 6, 7, 9, 8,
    7, 6, 8, 13, 11, 9, 7, 15, 7, 12, 15, 9, 11, 7, 13, 12,
    11, 13, 6, 7, 14, 9, 13, 15, 14, 8, 13, 6, 5, 12, 7, 5,
    11, 12, 14, 15, 14, 15, 9, 8, 9, 14, 5, 6, 8, 6, 5, 12,
    9, 15, 5, 11, 6, 8, 13, 12, 5, 12, 13, 14, 11, 8, 5, 6,
)
_SHIFTS_RIGHT = (
    8, 9, 9, 11, 13, 15, 15, 5, 7, 7, 8, 11, 14, 14, 12, 6,
    9, 13, 15, 7, 12, 8, 9, 11, 7, 7, 12, 7, 6, 15, 13, 11,
    9, 7, 15, 11, 8, 6, 6, 14, 12, 13, 5, 14, 13, 13, 7, 5,
    15, 5, 8, 11, 14, 14, 6, 14, 6, 9, 12, 9, 12, 5, 15, 8,
    8, 5, 12, 9, 12, 5, 14, 6, 8, 13, 6, 5, 15, 13, 11, 11,
)

_CONSTANTS_LEFT = (0x00000000, 0x5A827999, 0x6ED9EBA1, 0x8F1BBCDC, 0xA953FD4E)
_CONSTANTS_RIGHT = (0x50A28BE6, 0x5C4DD124, 0x6D703EF3, 0x7A6D76E9, 0x00000000)

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)


def _boolean(round_index: int, x: int, y: int, z: int) -> int:
    if round_index == 0:
        return x ^ y ^ z
    if round_index == 1:
        return (x & y) | (~x & z)
    if round_index == 2:
        return (x | ~y) ^ z
    if round_index == 3:
        return (x & z) | (y & ~z)
    return x ^ (y | ~z)


def _rotate_left(value: int, count: int) -> int:
    value &= MASK32
    return ((value << count) | (value >> (32 - count))) & MASK32


def _compress(state: tuple, block: bytes) -> tuple:
    words = [int.from_bytes(block[i : i + 4], "little") for i in range(0, 64, 4)]

    a_left, b_left, c_left, d_left, e_left = state
    a_right, b_right, c_right, d_right, e_right = state

    for step in range(80):
        round_index = step // 16

        t = (
            a_left
            + _boolean(round_index, b_left, c_left, d_left)
            + words[_WORDS_LEFT[step]]
            + _CONSTANTS_LEFT[round_index]
        )
        t = (_rotate_left(t, _SHIFTS_LEFT[step]) + e_left) & MASK32
        a_left, e_left, d_left = e_left, d_left, _rotate_left(c_left, 10)
        c_left, b_left = b_left, t

        t = (
            a_right
            + _boolean(4 - round_index, b_right, c_right, d_right)
            + words[_WORDS_RIGHT[step]]
            + _CONSTANTS_RIGHT[round_index]
        )
        t = (_rotate_left(t, _SHIFTS_RIGHT[step]) + e_right) & MASK32
        a_right, e_right, d_right = e_right, d_right, _rotate_left(c_right, 10)
        c_right, b_right = b_right, t

    h0, h1, h2, h3, h4 = state
    return (
        (h1 + c_left + d_right) & MASK32,
        (h2 + d_left + e_right) & MASK32,
        (h3 + e_left + a_right) & MASK32,
        (h4 + a_left + b_right) & MASK32,
        (h0 + b_left + c_right) & MASK32,
    )


def ripemd160(data: bytes) -> bytes:
    """Returns the 20-byte RIPEMD-160 digest of data"""

    # pad to a multiple of 64 bytes: 0x80, zeros, bit length (little-endian)
    padding = b"\x80" + b"\x00" * ((55 - len(data)) % 64)
    message = bytes(data) + padding + (8 * len(data)).to_bytes(8, "little")

    state = _INITIAL_STATE
    for offset in range(0, len(message), 64):
        state = _compress(state, message[offset : offset + 64])

    return b"".join(h.to_bytes(4, "little") for h in state)
