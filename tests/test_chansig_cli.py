#!/usr/bin/env python3
"""
Tests for the chansig command line tool
"""

import json
import sys
import unittest
from io import StringIO

import chansig_cli
from chansig.keys import PrivateKey
from chansig.script import create_2of2_multisig_script
from chansig.setup import setup
from chansig.transactions import Transaction, TxInput, TxOutput, build_input_digest


class TestChansigCLI(unittest.TestCase):
    """Test cases for the chansig CLI"""

    def setUp(self):
        """Capture stdout for testing and reset for each test"""
        setup('testnet')
        self.wif = 'cTALNpTpRbbxTCJ2A5Vq88UxT44w1PE2cYqiB3n4hRvzyCev1Wwo'
        self.pubkey = PrivateKey(self.wif).get_public_key().to_hex()
        other = PrivateKey(secret_exponent=5).get_public_key().to_hex()
        self.subscript = create_2of2_multisig_script(
            self.pubkey, other
        ).to_p2sh_script_pub_key()
        self.tx = Transaction(
            [TxInput('76464c2b9e2af4d63ef38a77964b3b77e629dddefc5cb9eb1a3645b1608b790f', 0)],
            [TxOutput(50000, self.subscript)],
        )
        self.digest = '11' * 32

        self.held_output = StringIO()
        self.original_stdout = sys.stdout
        sys.stdout = self.held_output

    def tearDown(self):
        """Restore stdout"""
        sys.stdout = self.original_stdout
        setup('testnet')

    def _run(self, *argv):
        self.held_output.seek(0)
        self.held_output.truncate()
        code = chansig_cli.main(list(argv))
        return code, self.held_output.getvalue()

    def test_digest(self):
        code, output = self._run('digest', self.tx.to_hex(), '0', self.subscript.to_hex())
        self.assertEqual(code, 0)
        result = json.loads(output)
        self.assertEqual(len(result['digest']), 64)

    def test_digest_bad_index(self):
        code, output = self._run('digest', self.tx.to_hex(), '3', self.subscript.to_hex())
        self.assertEqual(code, 1)
        self.assertIn('Error computing digest', output)

    def test_digest_uses_subscript_bytes(self):
        code, output = self._run('digest', self.tx.to_hex(), '0', '4c02abcd87')
        self.assertEqual(code, 0)
        expected = build_input_digest(self.tx, 0, bytes.fromhex('4c02abcd87'))
        self.assertEqual(json.loads(output)['digest'], expected.hex())
        shortest = build_input_digest(self.tx, 0, bytes.fromhex('02abcd87'))
        self.assertNotEqual(expected, shortest)

        code, output = self._run(
            'sign', '--wif', self.wif, '--tx', self.tx.to_hex(),
            '--subscript', '4c02abcd87'
        )
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)['digest'], expected.hex())

    def test_digest_truncated_push(self):
        code, output = self._run('digest', self.tx.to_hex(), '0', '4c')
        self.assertEqual(code, 0)
        expected = build_input_digest(self.tx, 0, b'\x4c')
        self.assertEqual(json.loads(output)['digest'], expected.hex())

        # a truncated push inside an output script is a parse error
        raw = self.tx.to_hex()[:-56] + '01' + '4c' + '00000000'
        code, output = self._run('digest', raw, '0', self.subscript.to_hex())
        self.assertEqual(code, 1)
        self.assertIn('Error computing digest', output)

    def test_sign_and_verify(self):
        code, output = self._run('sign', '--wif', self.wif, '--digest', self.digest)
        self.assertEqual(code, 0)
        signed = json.loads(output)
        self.assertEqual(signed['digest'], self.digest)
        self.assertEqual(set(signed['wire']), {'r1', 'r2', 'r3', 'r4', 's1', 's2', 's3', 's4'})
        self.assertTrue(signed['script_sig_item'].endswith('01'))

        code, output = self._run('verify', self.digest, signed['signature'], self.pubkey)
        self.assertEqual(code, 0)
        self.assertTrue(json.loads(output)['valid'])

    def test_sign_transaction_input(self):
        code, output = self._run(
            'sign', '--wif', self.wif, '--tx', self.tx.to_hex(),
            '--index', '0', '--subscript', self.subscript.to_hex()
        )
        self.assertEqual(code, 0)
        signed = json.loads(output)

        code, output = self._run('digest', self.tx.to_hex(), '0', self.subscript.to_hex())
        self.assertEqual(json.loads(output)['digest'], signed['digest'])

    def test_verify_wrong_digest(self):
        _, output = self._run('sign', '--wif', self.wif, '--digest', self.digest)
        signature = json.loads(output)['signature']

        code, output = self._run('verify', '22' * 32, signature, self.pubkey)
        self.assertEqual(code, 1)
        result = json.loads(output)
        self.assertFalse(result['valid'])
        self.assertEqual(result['reason'], 'verification_failed')

    def test_verify_bad_pubkey(self):
        _, output = self._run('sign', '--wif', self.wif, '--digest', self.digest)
        signature = json.loads(output)['signature']

        code, output = self._run('verify', self.digest, signature, '05' + '11' * 32)
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(output)['reason'], 'invalid_public_key')

    def test_encode_decode(self):
        signature = '00' * 31 + '07' + '00' * 31 + '0a'
        code, output = self._run('encode', signature)
        self.assertEqual(code, 0)
        wire = json.loads(output)
        self.assertEqual(wire['r4'], 7)
        self.assertEqual(wire['s4'], 10)

        code, output = self._run('decode', json.dumps(wire))
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)['signature'], signature)

    def test_decode_odd_s(self):
        wire = {'r1': 0, 'r2': 0, 'r3': 0, 'r4': 1, 's1': 0, 's2': 0, 's3': 0, 's4': 3}
        code, output = self._run('decode', json.dumps(wire))
        self.assertEqual(code, 1)
        self.assertIn('Error decoding', output)

    def test_no_command(self):
        code, _ = self._run()
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
