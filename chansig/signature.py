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
import logging
import struct
from typing import Union

from ecdsa.der import UnexpectedDER  # type: ignore
from ecdsa.ecdsa import RSZeroError  # type: ignore
from ecdsa.keys import BadDigestError, BadSignatureError  # type: ignore
from ecdsa.util import (  # type: ignore
    sigdecode_der,
    sigdecode_string,
    sigencode_der,
    sigencode_string,
)

from chansig.constants import DIGEST_SIZE, SIGHASH_ALL, SIGNATURE_SCALAR_SIZE
from chansig.errors import (
    InvalidSignatureEncoding,
    NonCanonicalSignature,
    PreconditionViolation,
    SigningFailure,
    VerificationFailed,
)
from chansig.keys import PrivateKey, PublicKey
from chansig.script import Script
from chansig.setup import get_deterministic_nonce
from chansig.transactions import Transaction, TxOutput, build_input_digest
from chansig.utils import Secp256k1Params, b_to_h, b_to_i, h_to_b, i_to_b32

logger = logging.getLogger(__name__)


class Signature:
    """An ECDSA signature (r, s) over secp256k1.

    r and s are kept as integers; their 32-byte big-endian forms are
    available as r_bytes and s_bytes.

    A signature is canonical when s is even. Among the two valid values s
    and (order - s) for a given digest and r exactly one is even, and peers
    only accept that one. This is not the BIP62 low-S rule.

    Attributes
    ----------
    r : int
    s : int

    Methods
    -------
    to_bytes()
        returns r || s as 64 bytes
    from_bytes(b)
        creates a signature from 64 bytes (classmethod)
    to_der()
        returns the strict DER encoding
    from_der(der)
        creates a signature from DER (classmethod)
    for_script_sig(sighash=SIGHASH_ALL)
        returns the hex DER signature with the sighash byte appended
    is_canonical()
        returns True if s is even
    """

    def __init__(self, r: int, s: int) -> None:
        for name, value in (("r", r), ("s", s)):
            if not isinstance(value, int):
                raise TypeError(f"Signature {name} must be an integer")
            if not 0 <= value < 1 << (8 * SIGNATURE_SCALAR_SIZE):
                raise ValueError(f"Signature {name} does not fit in 32 bytes")
        self.r = r
        self.s = s

    @property
    def r_bytes(self) -> bytes:
        return i_to_b32(self.r)

    @property
    def s_bytes(self) -> bytes:
        return i_to_b32(self.s)

    def is_canonical(self) -> bool:
        """Returns True if s is even"""
        return self.s % 2 == 0

    def to_bytes(self) -> bytes:
        """Returns the 64 bytes r || s, each 32-byte big-endian"""
        return self.r_bytes + self.s_bytes

    @classmethod
    def from_bytes(cls, b: bytes) -> "Signature":
        """Creates a signature from 64 bytes r || s"""
        if len(b) != 2 * SIGNATURE_SCALAR_SIZE:
            raise ValueError("Signature must be exactly 64 bytes")
        return cls(b_to_i(b[:SIGNATURE_SCALAR_SIZE]), b_to_i(b[SIGNATURE_SCALAR_SIZE:]))

    def to_hex(self) -> str:
        return b_to_h(self.to_bytes())

    @classmethod
    def from_hex(cls, hex_str: str) -> "Signature":
        return cls.from_bytes(h_to_b(hex_str))

    def to_der(self) -> bytes:
        """Returns the DER encoding used inside scriptSigs"""
        return sigencode_der(self.r, self.s, Secp256k1Params._order)

    @classmethod
    def from_der(cls, der: bytes) -> "Signature":
        """Creates a signature from its DER encoding

        Raises
        ------
        InvalidSignatureEncoding
            if der is not a valid DER signature
        """
        try:
            r, s = sigdecode_der(der, Secp256k1Params._order)
        except UnexpectedDER as e:
            raise InvalidSignatureEncoding(f"Malformed DER signature: {e}") from e
        try:
            return cls(r, s)
        except ValueError as e:
            raise InvalidSignatureEncoding(str(e)) from e

    def for_script_sig(self, sighash: int = SIGHASH_ALL) -> str:
        """Returns the DER signature plus the sighash byte, as hex; this is
        the item that goes in a scriptSig"""
        return b_to_h(self.to_der() + struct.pack("B", sighash))

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, Signature):
            return False
        return self.r == _other.r and self.s == _other.s

    def __hash__(self) -> int:
        return hash((self.r, self.s))

    def __repr__(self) -> str:
        return f"Signature(r={self.r:064x}, s={self.s:064x})"


def canonicalize_s(s: int, order: int = Secp256k1Params._order) -> int:
    """Returns the even one of s and order - s"""
    if s % 2:
        return order - s
    return s


def _check_digest(digest: bytes) -> None:
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_SIZE:
        raise ValueError("Digest must be exactly 32 bytes")


def sign_digest(digest: bytes, private_key: PrivateKey) -> Signature:
    """Signs a 32-byte digest and returns the canonical (even s) signature.

    Nonces follow RFC 6979 (HMAC-SHA256) unless deterministic nonces were
    disabled with setup(deterministic_nonce=False), in which case they come
    from the OS entropy source. Either way the resulting signature verifies
    against the key's public key.

    Raises
    ------
    ValueError
        if digest is not 32 bytes
    SigningFailure
        if the signing engine fails
    """
    _check_digest(digest)

    try:
        if get_deterministic_nonce():
            raw = private_key.key.sign_digest_deterministic(
                bytes(digest), hashfunc=hashlib.sha256, sigencode=sigencode_string
            )
        else:
            raw = private_key.key.sign_digest(bytes(digest), sigencode=sigencode_string)
    except (RSZeroError, BadDigestError) as e:
        raise SigningFailure(f"Signing engine failed: {e}") from e

    order = Secp256k1Params._order
    r, s = sigdecode_string(raw, order)

    # There can only be one signature with an even s, make sure we get it.
    canonical_s = canonicalize_s(s, order)
    if canonical_s != s:
        logger.debug("Replaced odd s with order - s")

    return Signature(r, canonical_s)


def sign_input(
    tx: Transaction,
    input_index: int,
    subscript: Union[Script, bytes],
    private_key: PrivateKey,
) -> Signature:
    """Signs input input_index of tx committing to subscript (SIGHASH_ALL)

    Raises
    ------
    PreconditionViolation
        if the input index is out of range or an input already has a script
    SigningFailure
        if the signing engine fails
    """
    digest = build_input_digest(tx, input_index, subscript)
    return sign_digest(digest, private_key)


def _to_public_key(public_key: Union[PublicKey, bytes, str]) -> PublicKey:
    if isinstance(public_key, PublicKey):
        return public_key
    return PublicKey(public_key)


def check_signed_digest(
    digest: bytes, signature: Signature, public_key: Union[PublicKey, bytes, str]
) -> None:
    """Verifies signature over digest and raises on any failure.

    Raises
    ------
    NonCanonicalSignature
        if signature.s is odd (caller contract violation)
    InvalidPublicKey
        if public_key does not decode to a curve point
    InvalidSignatureEncoding
        if r or s is not in [1, order)
    VerificationFailed
        if the signature does not verify
    """
    _check_digest(digest)

    if not signature.is_canonical():
        raise NonCanonicalSignature("Signature s value must be even")

    key = _to_public_key(public_key)

    order = Secp256k1Params._order
    for name, value in (("r", signature.r), ("s", signature.s)):
        if not 1 <= value < order:
            raise InvalidSignatureEncoding(
                f"Signature {name} is not a valid scalar (must be in [1, order))"
            )

    try:
        key.key.verify_digest(
            signature.to_bytes(), bytes(digest), sigdecode=sigdecode_string
        )
    except BadSignatureError as e:
        raise VerificationFailed("Signature does not match digest and key") from e


def verify(
    digest: bytes, signature: Signature, public_key: Union[PublicKey, bytes, str]
) -> bool:
    """Returns True if signature is a valid signature of digest by
    public_key.

    Invalid and malformed signatures both return False; use
    check_signed_digest to tell them apart. A non-canonical (odd s)
    signature or an undecodable public key is a caller error and raises.

    Raises
    ------
    NonCanonicalSignature
        if signature.s is odd
    InvalidPublicKey
        if public_key does not decode to a curve point
    """
    try:
        check_signed_digest(digest, signature, public_key)
    except (InvalidSignatureEncoding, VerificationFailed) as e:
        logger.debug("Signature rejected (%s): %s", e.reason, e.message)
        return False
    return True


def verify_2of2(
    tx: Transaction,
    input_index: int,
    output: TxOutput,
    pubkey_a: Union[PublicKey, bytes, str],
    pubkey_b: Union[PublicKey, bytes, str],
    sig_a: Signature,
    sig_b: Signature,
) -> bool:
    """Checks that both parties signed input input_index of tx, which spends
    the P2SH output.

    Both signatures commit to the same digest: the SIGHASH_ALL digest with
    the output's scriptPubKey as subscript.

    Raises
    ------
    PreconditionViolation
        if output is not P2SH, the input index is out of range or an input
        already has a script
    NonCanonicalSignature
        if either signature has an odd s
    InvalidPublicKey
        if either public key is invalid
    """
    if not output.script_pubkey.is_p2sh():
        raise PreconditionViolation("Output being spent must be a P2SH output")

    digest = build_input_digest(tx, input_index, output.script_pubkey)

    return verify(digest, sig_a, pubkey_a) and verify(digest, sig_b, pubkey_b)
