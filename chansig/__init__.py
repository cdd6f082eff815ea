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

__version__ = "0.1.0"

from chansig.setup import setup, get_network

from chansig.errors import (
    SignatureError,
    SigningFailure,
    InvalidPublicKey,
    InvalidSignatureEncoding,
    NonCanonicalSignature,
    PreconditionViolation,
    VerificationFailed,
)

from chansig.keys import PrivateKey, PublicKey

from chansig.script import Script, create_2of2_multisig_script

from chansig.transactions import (
    Transaction,
    TxInput,
    TxOutput,
    build_input_digest,
)

from chansig.signature import (
    Signature,
    sign_digest,
    sign_input,
    verify,
    check_signed_digest,
    verify_2of2,
)

from chansig.wire import WireSignature, encode, decode

__all__ = [
    'setup',
    'get_network',
    'SignatureError',
    'SigningFailure',
    'InvalidPublicKey',
    'InvalidSignatureEncoding',
    'NonCanonicalSignature',
    'PreconditionViolation',
    'VerificationFailed',
    'PrivateKey',
    'PublicKey',
    'Script',
    'create_2of2_multisig_script',
    'Transaction',
    'TxInput',
    'TxOutput',
    'build_input_digest',
    'Signature',
    'sign_digest',
    'sign_input',
    'verify',
    'check_signed_digest',
    'verify_2of2',
    'WireSignature',
    'encode',
    'decode',
]
