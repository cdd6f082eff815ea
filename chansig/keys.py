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

import logging
from typing import Optional, Union

from base58 import b58decode, b58encode  # type: ignore
from ecdsa import SECP256k1, SigningKey, VerifyingKey  # type: ignore
from ecdsa.errors import MalformedPointError  # type: ignore
from sympy.ntheory import sqrt_mod  # type: ignore

from chansig.constants import (
    NETWORK_WIF_PREFIXES,
    SEC_COMPRESSED_EVEN,
    SEC_COMPRESSED_ODD,
    SEC_UNCOMPRESSED,
)
from chansig.errors import InvalidPublicKey
from chansig.setup import get_network
from chansig.utils import Secp256k1Params, b_to_h, b_to_i, h_to_b, hash256, i_to_b32

logger = logging.getLogger(__name__)


class PrivateKey:
    """Represents an ECDSA private key.

    The key is only handed to the signing engine; this library never
    generates or stores keys on its own.

    Attributes
    ----------
    key : ecdsa.SigningKey
        the secp256k1 signing key

    Methods
    -------
    from_wif(wif)
        creates an object from a WIF of WIFC format (string)
    from_bytes()
        creates an object from raw 32 bytes
    to_wif(compressed=True)
        returns as WIFC (compressed) or WIF format (string)
    to_bytes()
        returns the key's raw bytes
    get_public_key()
        returns the corresponding PublicKey object
    """

    def __init__(
        self,
        wif: Optional[str] = None,
        secret_exponent: Optional[int] = None,
        b: Optional[bytes] = None,
    ) -> None:
        """Exactly one of the parameters is expected

        Parameters
        ----------
        wif : str, optional
            the key in WIF of WIFC format (default None)
        secret_exponent : int, optional
            used to create a specific key deterministically (default None)
        b : bytes, optional
            used to create a key from raw bytes

        Raises
        ------
        TypeError
            if no key material is given
        ValueError
            if the key material is invalid
        """

        if wif is not None:
            self._from_wif(wif)
        elif b is not None:
            self._from_bytes(b)
        elif secret_exponent is not None:
            if not 1 <= secret_exponent < Secp256k1Params._order:
                raise ValueError("Secret exponent must be in [1, curve order)")
            self.key = SigningKey.from_secret_exponent(
                secret_exponent, curve=SECP256k1
            )
        else:
            raise TypeError("A WIF, secret exponent or raw bytes are required.")

    def to_bytes(self) -> bytes:
        """Returns key's bytes"""

        return self.key.to_string()

    @classmethod
    def from_wif(cls, wif: str) -> "PrivateKey":
        """Creates key from WIFC or WIF format key"""

        return cls(wif=wif)

    @classmethod
    def from_bytes(cls, b: bytes) -> "PrivateKey":
        """Creates a key directly from 32 raw bytes"""

        return cls(b=b)

    def _from_bytes(self, b: bytes) -> None:
        if len(b) != 32:
            raise ValueError("Invalid key length: must be exactly 32 bytes.")
        if not 1 <= b_to_i(b) < Secp256k1Params._order:
            raise ValueError("Invalid key: must be in [1, curve order)")
        self.key = SigningKey.from_string(b, curve=SECP256k1)

    def _from_wif(self, wif: str) -> None:
        """Creates key from WIFC or WIF format key

        Check to_wif for the detailed process. From WIF is the reverse.

        Raises
        ------
        ValueError
            if the checksum is wrong or if the WIF/WIFC is not from the
            configured network.
        """

        data_bytes = b58decode(wif.encode("utf-8"))
        key_bytes = data_bytes[:-4]
        checksum = data_bytes[-4:]

        # verify key with checksum
        if checksum != hash256(key_bytes)[0:4]:
            raise ValueError("Checksum is wrong. Possible mistype?")

        # get network prefix and check with current setup
        network_prefix = key_bytes[:1]
        if NETWORK_WIF_PREFIXES[get_network()] != network_prefix:
            raise ValueError("Using the wrong network!")

        key_bytes = key_bytes[1:]

        # compressed keys carry a trailing 0x01
        if len(key_bytes) == 33 and key_bytes[-1] == 0x01:
            key_bytes = key_bytes[:-1]
        self._from_bytes(key_bytes)

    def to_wif(self, compressed: bool = True) -> str:
        """Returns key in WIFC or WIF string

        |  Pseudocode:
        |      network_prefix = (1 byte version number)
        |      data = network_prefix + (32 bytes number/key) [ + 0x01 if compressed ]
        |      data_hash = SHA-256( SHA-256( data ) )
        |      checksum = (first 4 bytes of data_hash)
        |      wif = Base58CheckEncode( data + checksum )
        """

        data = NETWORK_WIF_PREFIXES[get_network()] + self.to_bytes()

        if compressed is True:
            data += b"\x01"

        checksum = hash256(data)[0:4]
        return b58encode(data + checksum).decode("utf-8")

    def get_public_key(self) -> "PublicKey":
        """Returns the corresponding PublicKey"""

        return PublicKey.from_bytes(
            bytes([SEC_UNCOMPRESSED]) + self.key.get_verifying_key().to_string()
        )


class PublicKey:
    """Represents an ECDSA public key.

    Attributes
    ----------
    key : ecdsa.VerifyingKey
        the decoded secp256k1 point

    Methods
    -------
    from_hex(hex_str)
        creates an object from a hex string in SEC format (classmethod)
    from_bytes(sec_bytes)
        creates an object from SEC bytes (classmethod)
    to_hex(compressed=True)
        returns the key as hex string (in SEC format - compressed by default)
    to_sec(compressed=True)
        returns the key as SEC bytes
    to_bytes()
        returns the key's raw 64 bytes (x, y)
    is_y_even()
        returns true if y coordinate is even
    """

    def __init__(self, sec: Union[str, bytes]) -> None:
        """
        Parameters
        ----------
        sec : str or bytes
            the public key in SEC format, compressed (33 bytes) or
            uncompressed (65 bytes), as bytes or hex string

        Raises
        ------
        InvalidPublicKey
            If the data is not a valid SEC encoding of a point on secp256k1
        """

        if isinstance(sec, str):
            hex_str = sec.strip()
            if hex_str.lower().startswith("0x"):
                hex_str = hex_str[2:]
            try:
                sec = h_to_b(hex_str)
            except ValueError as e:
                raise InvalidPublicKey("Public key is not a valid hex string") from e

        self.key = self._decode(bytes(sec))

    @staticmethod
    def _decode(sec: bytes) -> VerifyingKey:
        if not sec:
            raise InvalidPublicKey("Empty public key")

        prefix = sec[0]
        if prefix == SEC_UNCOMPRESSED and len(sec) == 65:
            raw = sec[1:]
        elif prefix in (SEC_COMPRESSED_EVEN, SEC_COMPRESSED_ODD) and len(sec) == 33:
            x_coord = b_to_i(sec[1:])
            if x_coord >= Secp256k1Params._p:
                raise InvalidPublicKey("Public key x coordinate is not a field element")

            # y = modulo_square_root( (x**3 + 7) mod p ) -- there will be 2 y values
            y_values = sqrt_mod(
                (x_coord**3 + Secp256k1Params._b) % Secp256k1Params._p,
                Secp256k1Params._p,
                True,
            )
            if not y_values:
                raise InvalidPublicKey("Public key x coordinate is not on the curve")

            # the SEC prefix selects which of the two roots is used
            wanted_parity = prefix - SEC_COMPRESSED_EVEN
            y_coord = next(int(y) for y in y_values if int(y) % 2 == wanted_parity)
            raw = i_to_b32(x_coord) + i_to_b32(y_coord)
        else:
            raise InvalidPublicKey(
                f"Invalid SEC public key (prefix 0x{prefix:02x}, {len(sec)} bytes)"
            )

        try:
            return VerifyingKey.from_string(raw, curve=SECP256k1)
        except MalformedPointError as e:
            raise InvalidPublicKey(f"Public key is not on the curve: {e}") from e

    @classmethod
    def from_hex(cls, hex_str: str) -> "PublicKey":
        """Creates a public key from a hex string (SEC format)"""

        return cls(hex_str)

    @classmethod
    def from_bytes(cls, sec: bytes) -> "PublicKey":
        """Creates a public key from SEC bytes"""

        return cls(sec)

    def to_bytes(self) -> bytes:
        """Returns key's raw x || y bytes"""

        return self.key.to_string()

    def to_sec(self, compressed: bool = True) -> bytes:
        """Returns the key in SEC format (compressed by default)"""

        raw = self.key.to_string()
        if compressed:
            prefix = SEC_COMPRESSED_EVEN if raw[-1] % 2 == 0 else SEC_COMPRESSED_ODD
            return bytes([prefix]) + raw[:32]
        return bytes([SEC_UNCOMPRESSED]) + raw

    def to_hex(self, compressed: bool = True) -> str:
        """Returns public key as a hex string (SEC format - compressed by
        default)"""

        return b_to_h(self.to_sec(compressed))

    def is_y_even(self) -> bool:
        """Returns True if the y coordinate of the public key is even and
        False otherwise."""

        return self.key.to_string()[-1] % 2 == 0

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, PublicKey):
            return False
        return self.to_bytes() == _other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"PublicKey({self.to_hex()})"
