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


import unittest

from chansig.keys import PrivateKey
from chansig.script import Script, create_2of2_multisig_script
from chansig.setup import setup


class TestScript(unittest.TestCase):
    def setUp(self):
        setup("testnet")
        self.pub_1 = PrivateKey(secret_exponent=1).get_public_key().to_hex()
        self.pub_2 = PrivateKey(secret_exponent=2).get_public_key().to_hex()
        self.p2pkh_hex = "76a914751e76e8199196d454941c45d1b3a323f1433bd688ac"

    def test_p2pkh_serialization(self):
        script = Script(
            [
                "OP_DUP",
                "OP_HASH160",
                "751e76e8199196d454941c45d1b3a323f1433bd6",
                "OP_EQUALVERIFY",
                "OP_CHECKSIG",
            ]
        )
        self.assertEqual(script.to_hex(), self.p2pkh_hex)
        self.assertEqual(Script.from_raw(self.p2pkh_hex), script)
        self.assertFalse(script.is_p2sh())

    def test_integers(self):
        self.assertEqual(Script([0, 16]).to_hex(), "0060")
        self.assertEqual(Script([144]).to_hex(), "029000")
        with self.assertRaises(ValueError):
            Script([-1]).to_bytes()

    def test_pushdata1(self):
        data = "ab" * 80
        script = Script([data])
        self.assertEqual(script.to_hex(), "4c50" + data)
        self.assertEqual(Script.from_raw(script.to_bytes()).get_script(), [data])

    def test_from_raw_errors(self):
        with self.assertRaises(ValueError):
            Script.from_raw("05aabb")
        for truncated in ("4c", "4d01", "4e010000"):
            with self.assertRaises(ValueError, msg=truncated):
                Script.from_raw(truncated)
        with self.assertRaises(ValueError):
            Script.from_raw("4c05aabb")
        with self.assertRaises(TypeError):
            Script.from_raw(42)

    def test_from_raw_keeps_encoding(self):
        # 0x4c push of two bytes where a direct push would do
        script = Script.from_raw("4c02abcd87")
        self.assertEqual(script.get_script(), ["abcd", "OP_EQUAL"])
        self.assertEqual(script.to_hex(), "4c02abcd87")
        self.assertEqual(Script.copy(script).to_hex(), "4c02abcd87")
        self.assertNotEqual(script, Script(["abcd", "OP_EQUAL"]))

        # editing the op codes falls back to the shortest encoding
        script.script.append("OP_VERIFY")
        self.assertEqual(script.to_hex(), "02abcd8769")

    def test_from_raw_all_op_codes(self):
        script = Script.from_raw("5152935387")
        self.assertEqual(
            script.get_script(), ["OP_1", "OP_2", "OP_ADD", "OP_3", "OP_EQUAL"]
        )
        self.assertEqual(Script.from_raw("6dba").get_script(), ["OP_2DROP", "OP_CHECKSIGADD"])
        self.assertEqual(Script.from_raw("b1").get_script(), ["OP_CHECKLOCKTIMEVERIFY"])

    def test_from_raw_unknown_op_code(self):
        script = Script.from_raw("bbff")
        self.assertEqual(script.get_script(), ["OP_UNKNOWN_bb", "OP_INVALIDOPCODE"])
        self.assertEqual(Script(list(script.get_script())).to_hex(), "bbff")

    def test_2of2_script_ordering(self):
        first, second = sorted([self.pub_1, self.pub_2])
        expected = Script(["OP_2", first, second, "OP_2", "OP_CHECKMULTISIG"])
        self.assertEqual(create_2of2_multisig_script(self.pub_1, self.pub_2), expected)
        self.assertEqual(create_2of2_multisig_script(self.pub_2, self.pub_1), expected)
        self.assertTrue(expected.to_hex().startswith("5221"))
        self.assertTrue(expected.to_hex().endswith("52ae"))

    def test_2of2_script_distinct_keys(self):
        with self.assertRaises(ValueError):
            create_2of2_multisig_script(self.pub_1, self.pub_1.upper())

    def test_p2sh(self):
        redeem = create_2of2_multisig_script(self.pub_1, self.pub_2)
        p2sh = redeem.to_p2sh_script_pub_key()
        self.assertTrue(p2sh.is_p2sh())
        self.assertEqual(len(p2sh.to_bytes()), 23)
        self.assertTrue(Script.from_raw(p2sh.to_hex()).is_p2sh())
        self.assertFalse(redeem.is_p2sh())
        self.assertFalse(Script(["OP_HASH160", "abcd", "OP_EQUAL"]).is_p2sh())

    def test_copy(self):
        script = Script(["OP_0"])
        duplicate = Script.copy(script)
        duplicate.script.append("OP_1")
        self.assertEqual(script.get_script(), ["OP_0"])
        self.assertTrue(Script([]).is_empty())


if __name__ == "__main__":
    unittest.main()
