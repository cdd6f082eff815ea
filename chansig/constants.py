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

NETWORK_WIF_PREFIXES = {
    "mainnet": b"\x80",
    "signet": b"\xef",
    "testnet": b"\xef",
    "regtest": b"\xef",
}


# The only supported signature type; binds the signature to all outputs.
SIGHASH_ALL = 0x01


DEFAULT_TX_LOCKTIME = b"\x00\x00\x00\x00"

DEFAULT_TX_SEQUENCE = b"\xff\xff\xff\xff"

# commitment transactions are plain version 1 transactions
DEFAULT_TX_VERSION = b"\x01\x00\x00\x00"


# Signature sizes
SIGNATURE_SCALAR_SIZE = 32
DIGEST_SIZE = 32

# Wire signature: each 32-byte scalar is split in 4 big-endian 64-bit words
WIRE_WORDS_PER_SCALAR = 4
WIRE_WORD_SIZE = 8
WIRE_FIELDS = ("r1", "r2", "r3", "r4", "s1", "s2", "s3", "s4")


# SEC public key prefixes
SEC_COMPRESSED_EVEN = 0x02
SEC_COMPRESSED_ODD = 0x03
SEC_UNCOMPRESSED = 0x04
