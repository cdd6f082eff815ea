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


import hashlib
import unittest

from chansig.errors import InvalidSignatureEncoding, NonCanonicalSignature
from chansig.keys import PrivateKey
from chansig.setup import setup
from chansig.signature import Signature, sign_digest
from chansig.wire import WireSignature, decode, encode


class TestWireSignature(unittest.TestCase):
    def setUp(self):
        setup("testnet")
        self.r = int.from_bytes(bytes(range(0, 32)), "big")
        self.s = int.from_bytes(bytes(range(33, 65)), "big")
        self.wire = WireSignature(
            0x0001020304050607,
            0x08090A0B0C0D0E0F,
            0x1011121314151617,
            0x18191A1B1C1D1E1F,
            0x2122232425262728,
            0x292A2B2C2D2E2F30,
            0x3132333435363738,
            0x393A3B3C3D3E3F40,
        )

    def test_encode_layout(self):
        self.assertEqual(encode(Signature(self.r, self.s)), self.wire)

    def test_decode_layout(self):
        self.assertEqual(decode(self.wire), Signature(self.r, self.s))

    def test_zero_signature(self):
        zero = encode(Signature(0, 0))
        self.assertEqual(tuple(zero), (0,) * 8)
        self.assertEqual(decode(zero), Signature(0, 0))

    def test_signed_round_trip(self):
        key = PrivateKey(secret_exponent=0xC0FFEE)
        for i in range(5):
            sig = sign_digest(hashlib.sha256(bytes([i])).digest(), key)
            self.assertEqual(decode(encode(sig)), sig)

    def test_decode_odd_s(self):
        odd = self.wire._replace(s4=self.wire.s4 | 1)
        with self.assertRaises(NonCanonicalSignature):
            decode(odd)

    def test_encode_odd_s(self):
        wire = encode(Signature(5, 7))
        self.assertEqual(wire.r4, 5)
        self.assertEqual(wire.s4, 7)

    def test_decode_out_of_range_word(self):
        with self.assertRaises(InvalidSignatureEncoding):
            decode(self.wire._replace(r1=1 << 64))
        with self.assertRaises(InvalidSignatureEncoding):
            decode(self.wire._replace(s2=-1))

    def test_bytes(self):
        packed = self.wire.to_bytes()
        self.assertEqual(packed, bytes(range(0, 32)) + bytes(range(33, 65)))
        self.assertEqual(WireSignature.from_bytes(packed), self.wire)
        with self.assertRaises(InvalidSignatureEncoding):
            WireSignature.from_bytes(packed[:-1])

    def test_dict(self):
        fields = self.wire.to_dict()
        self.assertEqual(list(fields), ["r1", "r2", "r3", "r4", "s1", "s2", "s3", "s4"])
        self.assertEqual(WireSignature.from_dict(fields), self.wire)

    def test_dict_validation(self):
        fields = self.wire.to_dict()
        del fields["s3"]
        with self.assertRaises(InvalidSignatureEncoding):
            WireSignature.from_dict(fields)

        fields = self.wire.to_dict()
        fields["r2"] = 1 << 64
        with self.assertRaises(InvalidSignatureEncoding):
            WireSignature.from_dict(fields)

        fields = self.wire.to_dict()
        fields["r2"] = "12"
        with self.assertRaises(InvalidSignatureEncoding):
            WireSignature.from_dict(fields)


if __name__ == "__main__":
    unittest.main()
