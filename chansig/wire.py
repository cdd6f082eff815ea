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

"""Fixed-width wire record for signatures.

Peers exchange a signature as eight unsigned 64-bit fields, in order
r1, r2, r3, r4, s1, s2, s3, s4. Each scalar's 32-byte big-endian form is cut
into four 8-byte chunks, most significant chunk first, and every chunk is
read as a big-endian integer. The split only exists here; the rest of the
library works with Signature.
"""

import logging
import struct
from typing import Any, Mapping, NamedTuple

from chansig.constants import (
    WIRE_FIELDS,
    WIRE_WORD_SIZE,
    WIRE_WORDS_PER_SCALAR,
)
from chansig.errors import InvalidSignatureEncoding, NonCanonicalSignature
from chansig.signature import Signature

logger = logging.getLogger(__name__)

_WIRE_FORMAT = ">8Q"
_WORD_LIMIT = 1 << (8 * WIRE_WORD_SIZE)


class WireSignature(NamedTuple):
    """Eight big-endian 64-bit words; r1..r4 then s1..s4"""

    r1: int
    r2: int
    r3: int
    r4: int
    s1: int
    s2: int
    s3: int
    s4: int

    def to_bytes(self) -> bytes:
        """Packs the eight words into 64 bytes"""
        return struct.pack(_WIRE_FORMAT, *self)

    @classmethod
    def from_bytes(cls, b: bytes) -> "WireSignature":
        if len(b) != struct.calcsize(_WIRE_FORMAT):
            raise InvalidSignatureEncoding("Wire signature must be exactly 64 bytes")
        return cls(*struct.unpack(_WIRE_FORMAT, b))

    def to_dict(self) -> dict[str, int]:
        return dict(self._asdict())

    @classmethod
    def from_dict(cls, fields: Mapping[str, Any]) -> "WireSignature":
        """Creates a wire signature from a mapping with keys r1..s4

        Raises
        ------
        InvalidSignatureEncoding
            if a field is missing or not an unsigned 64-bit integer
        """
        words = []
        for name in WIRE_FIELDS:
            if name not in fields:
                raise InvalidSignatureEncoding(f"Wire signature is missing {name}")
            value = fields[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSignatureEncoding(f"Wire field {name} must be an integer")
            if not 0 <= value < _WORD_LIMIT:
                raise InvalidSignatureEncoding(f"Wire field {name} exceeds 64 bits")
            words.append(value)
        return cls(*words)


def _split(scalar: bytes) -> list[int]:
    return [
        int.from_bytes(scalar[i : i + WIRE_WORD_SIZE], "big")
        for i in range(0, WIRE_WORD_SIZE * WIRE_WORDS_PER_SCALAR, WIRE_WORD_SIZE)
    ]


def _join(words: tuple[int, ...]) -> bytes:
    try:
        return b"".join(word.to_bytes(WIRE_WORD_SIZE, "big") for word in words)
    except OverflowError as e:
        raise InvalidSignatureEncoding("Wire field exceeds 64 bits") from e


def encode(signature: Signature) -> WireSignature:
    """Splits a signature into its wire record; never fails"""
    return WireSignature(*_split(signature.r_bytes), *_split(signature.s_bytes))


def decode(wire: WireSignature) -> Signature:
    """Reassembles a signature from its wire record.

    Raises
    ------
    NonCanonicalSignature
        if the reassembled s is odd
    InvalidSignatureEncoding
        if a word does not fit in 64 bits
    """
    if any(word < 0 for word in wire):
        raise InvalidSignatureEncoding("Wire fields must be unsigned")

    r_bytes = _join(tuple(wire[:WIRE_WORDS_PER_SCALAR]))
    s_bytes = _join(tuple(wire[WIRE_WORDS_PER_SCALAR:]))

    # s must be even
    if s_bytes[-1] & 1:
        logger.debug("Rejected wire signature with odd s")
        raise NonCanonicalSignature("Wire signature has an odd s value")

    return Signature.from_bytes(r_bytes + s_bytes)
