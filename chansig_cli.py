#!/usr/bin/env python3
"""
chansig CLI - Command line interface for chansig

Computes input digests, signs, verifies and converts signatures to and from
the eight-word wire record. Results are printed as JSON.
"""

import argparse
import json
import logging
import sys

from chansig.errors import SignatureError
from chansig.keys import PrivateKey, PublicKey
from chansig.setup import setup
from chansig.signature import Signature, check_signed_digest, sign_digest
from chansig.transactions import Transaction, build_input_digest
from chansig.utils import h_to_b
from chansig.wire import WireSignature, decode, encode


def _digest_from_args(args):
    if args.digest:
        return h_to_b(args.digest)
    tx = Transaction.from_raw(args.tx)
    return build_input_digest(tx, args.index, h_to_b(args.subscript))


def compute_digest(args):
    """Print the SIGHASH_ALL digest of a transaction input"""
    try:
        tx = Transaction.from_raw(args.tx)
        digest = build_input_digest(tx, args.index, h_to_b(args.subscript))
    except (SignatureError, ValueError) as e:
        print(f"Error computing digest: {e}")
        return 1
    print(json.dumps({"digest": digest.hex()}, indent=2))
    return 0


def sign(args):
    """Sign a digest (or a transaction input) with a WIF private key"""
    try:
        digest = _digest_from_args(args)
        signature = sign_digest(digest, PrivateKey.from_wif(args.wif))
    except (SignatureError, ValueError) as e:
        print(f"Error signing: {e}")
        return 1

    result = {
        "digest": digest.hex(),
        "signature": signature.to_hex(),
        "script_sig_item": signature.for_script_sig(),
        "wire": encode(signature).to_dict(),
    }
    print(json.dumps(result, indent=2))
    return 0


def verify_signature(args):
    """Verify a 64-byte r||s signature against a digest and SEC public key"""
    try:
        signature = Signature.from_hex(args.signature)
        check_signed_digest(h_to_b(args.digest), signature, PublicKey.from_hex(args.pubkey))
    except SignatureError as e:
        print(json.dumps({"valid": False, "reason": e.reason, "message": e.message}, indent=2))
        return 1
    except ValueError as e:
        print(f"Error verifying: {e}")
        return 1
    print(json.dumps({"valid": True}, indent=2))
    return 0


def encode_signature(args):
    """Convert a 64-byte r||s signature to its wire record"""
    try:
        wire = encode(Signature.from_hex(args.signature))
    except ValueError as e:
        print(f"Error encoding: {e}")
        return 1
    print(json.dumps(wire.to_dict(), indent=2))
    return 0


def decode_signature(args):
    """Convert a wire record (JSON object with r1..s4) to r||s hex"""
    try:
        wire = WireSignature.from_dict(json.loads(args.wire))
        signature = decode(wire)
    except SignatureError as e:
        print(f"Error decoding: {e.message}")
        return 1
    except ValueError as e:
        print(f"Error decoding: {e}")
        return 1
    print(json.dumps({"signature": signature.to_hex()}, indent=2))
    return 0


def main(argv=None):
    """Main entry point for the CLI"""
    parser = argparse.ArgumentParser(description='chansig - channel signature tools')

    parser.add_argument('--network', choices=['mainnet', 'testnet', 'regtest', 'signet'],
                        default='testnet', help='Bitcoin network to use (WIF prefix)')
    parser.add_argument('--random-nonce', action='store_true',
                        help='Use random instead of RFC 6979 nonces when signing')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    digest_parser = subparsers.add_parser('digest', help='Compute an input signature digest')
    digest_parser.add_argument('tx', help='Raw unsigned transaction in hex')
    digest_parser.add_argument('index', type=int, help='Index of the input to sign')
    digest_parser.add_argument('subscript', help='Subscript in hex')

    sign_parser = subparsers.add_parser('sign', help='Sign a digest or a transaction input')
    sign_parser.add_argument('--wif', required=True, help='Private key in WIF')
    sign_parser.add_argument('--digest', help='32-byte digest in hex')
    sign_parser.add_argument('--tx', help='Raw unsigned transaction in hex')
    sign_parser.add_argument('--index', type=int, default=0, help='Index of the input to sign')
    sign_parser.add_argument('--subscript', help='Subscript in hex')

    verify_parser = subparsers.add_parser('verify', help='Verify a signature')
    verify_parser.add_argument('digest', help='32-byte digest in hex')
    verify_parser.add_argument('signature', help='64-byte r||s signature in hex')
    verify_parser.add_argument('pubkey', help='Public key in SEC format (hex)')

    encode_parser = subparsers.add_parser('encode', help='Signature to wire record')
    encode_parser.add_argument('signature', help='64-byte r||s signature in hex')

    decode_parser = subparsers.add_parser('decode', help='Wire record to signature')
    decode_parser.add_argument('wire', help='JSON object with fields r1..r4, s1..s4')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    setup(args.network, deterministic_nonce=not args.random_nonce)

    if args.command == 'sign' and not args.digest and not (args.tx and args.subscript):
        parser.error('sign requires --digest or both --tx and --subscript')

    if args.command == 'digest':
        return compute_digest(args)
    elif args.command == 'sign':
        return sign(args)
    elif args.command == 'verify':
        return verify_signature(args)
    elif args.command == 'encode':
        return encode_signature(args)
    elif args.command == 'decode':
        return decode_signature(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
