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

from typing import Optional


class SignatureError(Exception):
    """Base class for all signing and verification errors.

    Attributes:
        message -- explanation of the error
        reason -- short machine readable failure kind
    """

    reason = "signature_error"

    def __init__(self, message: str, reason: Optional[str] = None):
        self.message = message
        if reason is not None:
            self.reason = reason
        super().__init__(message)


class SigningFailure(SignatureError):
    """The signing engine could not produce a signature (key or engine fault)."""

    reason = "signing_failure"


class InvalidPublicKey(SignatureError, ValueError):
    """Public key bytes do not decode to a point on secp256k1."""

    reason = "invalid_public_key"


class InvalidSignatureEncoding(SignatureError, ValueError):
    """The r or s magnitude is not a valid scalar, i.e. not in [1, order)."""

    reason = "invalid_signature_encoding"


class NonCanonicalSignature(SignatureError, ValueError):
    """The signature's s value is odd."""

    reason = "non_canonical_signature"


class PreconditionViolation(SignatureError, ValueError):
    """The caller broke an input contract, e.g. an input already has a script."""

    reason = "precondition_violation"


class VerificationFailed(SignatureError):
    """Well-formed inputs that simply do not verify."""

    reason = "verification_failed"
