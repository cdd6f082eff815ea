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

import copy
import struct
from typing import Any, Optional, Union

from chansig.utils import b_to_h, h_to_b, hash160


# Bitcoin's op codes. Complete list at: https://en.bitcoin.it/wiki/Script
# Where two names share a code the first one is used when parsing.
OP_CODES = {
    # constants
    "OP_0": b"\x00",
    "OP_FALSE": b"\x00",
    "OP_PUSHDATA1": b"\x4c",
    "OP_PUSHDATA2": b"\x4d",
    "OP_PUSHDATA4": b"\x4e",
    "OP_1NEGATE": b"\x4f",
    "OP_RESERVED": b"\x50",
    "OP_1": b"\x51",
    "OP_TRUE": b"\x51",
    "OP_2": b"\x52",
    "OP_3": b"\x53",
    "OP_4": b"\x54",
    "OP_5": b"\x55",
    "OP_6": b"\x56",
    "OP_7": b"\x57",
    "OP_8": b"\x58",
    "OP_9": b"\x59",
    "OP_10": b"\x5a",
    "OP_11": b"\x5b",
    "OP_12": b"\x5c",
    "OP_13": b"\x5d",
    "OP_14": b"\x5e",
    "OP_15": b"\x5f",
    "OP_16": b"\x60",
    # flow control
    "OP_NOP": b"\x61",
    "OP_VER": b"\x62",
    "OP_IF": b"\x63",
    "OP_NOTIF": b"\x64",
    "OP_VERIF": b"\x65",
    "OP_VERNOTIF": b"\x66",
    "OP_ELSE": b"\x67",
    "OP_ENDIF": b"\x68",
    "OP_VERIFY": b"\x69",
    "OP_RETURN": b"\x6a",
    # stack
    "OP_TOALTSTACK": b"\x6b",
    "OP_FROMALTSTACK": b"\x6c",
    "OP_2DROP": b"\x6d",
    "OP_2DUP": b"\x6e",
    "OP_3DUP": b"\x6f",
    "OP_2OVER": b"\x70",
    "OP_2ROT": b"\x71",
    "OP_2SWAP": b"\x72",
    "OP_IFDUP": b"\x73",
    "OP_DEPTH": b"\x74",
    "OP_DROP": b"\x75",
    "OP_DUP": b"\x76",
    "OP_NIP": b"\x77",
    "OP_OVER": b"\x78",
    "OP_PICK": b"\x79",
    "OP_ROLL": b"\x7a",
    "OP_ROT": b"\x7b",
    "OP_SWAP": b"\x7c",
    "OP_TUCK": b"\x7d",
    # splice (disabled, but may still appear in outputs)
    "OP_CAT": b"\x7e",
    "OP_SUBSTR": b"\x7f",
    "OP_LEFT": b"\x80",
    "OP_RIGHT": b"\x81",
    "OP_SIZE": b"\x82",
    # bitwise logic
    "OP_INVERT": b"\x83",
    "OP_AND": b"\x84",
    "OP_OR": b"\x85",
    "OP_XOR": b"\x86",
    "OP_EQUAL": b"\x87",
    "OP_EQUALVERIFY": b"\x88",
    "OP_RESERVED1": b"\x89",
    "OP_RESERVED2": b"\x8a",
    # arithmetic
    "OP_1ADD": b"\x8b",
    "OP_1SUB": b"\x8c",
    "OP_2MUL": b"\x8d",
    "OP_2DIV": b"\x8e",
    "OP_NEGATE": b"\x8f",
    "OP_ABS": b"\x90",
    "OP_NOT": b"\x91",
    "OP_0NOTEQUAL": b"\x92",
    "OP_ADD": b"\x93",
    "OP_SUB": b"\x94",
    "OP_MUL": b"\x95",
    "OP_DIV": b"\x96",
    "OP_MOD": b"\x97",
    "OP_LSHIFT": b"\x98",
    "OP_RSHIFT": b"\x99",
    "OP_BOOLAND": b"\x9a",
    "OP_BOOLOR": b"\x9b",
    "OP_NUMEQUAL": b"\x9c",
    "OP_NUMEQUALVERIFY": b"\x9d",
    "OP_NUMNOTEQUAL": b"\x9e",
    "OP_LESSTHAN": b"\x9f",
    "OP_GREATERTHAN": b"\xa0",
    "OP_LESSTHANOREQUAL": b"\xa1",
    "OP_GREATERTHANOREQUAL": b"\xa2",
    "OP_MIN": b"\xa3",
    "OP_MAX": b"\xa4",
    "OP_WITHIN": b"\xa5",
    # crypto
    "OP_RIPEMD160": b"\xa6",
    "OP_SHA1": b"\xa7",
    "OP_SHA256": b"\xa8",
    "OP_HASH160": b"\xa9",
    "OP_HASH256": b"\xaa",
    "OP_CODESEPARATOR": b"\xab",
    "OP_CHECKSIG": b"\xac",
    "OP_CHECKSIGVERIFY": b"\xad",
    "OP_CHECKMULTISIG": b"\xae",
    "OP_CHECKMULTISIGVERIFY": b"\xaf",
    # expansion and locktime
    "OP_NOP1": b"\xb0",
    "OP_CHECKLOCKTIMEVERIFY": b"\xb1",
    "OP_NOP2": b"\xb1",
    "OP_CHECKSEQUENCEVERIFY": b"\xb2",
    "OP_NOP3": b"\xb2",
    "OP_NOP4": b"\xb3",
    "OP_NOP5": b"\xb4",
    "OP_NOP6": b"\xb5",
    "OP_NOP7": b"\xb6",
    "OP_NOP8": b"\xb7",
    "OP_NOP9": b"\xb8",
    "OP_NOP10": b"\xb9",
    "OP_CHECKSIGADD": b"\xba",
    "OP_INVALIDOPCODE": b"\xff",
}

CODE_OPS = {}
for _name, _code in OP_CODES.items():
    CODE_OPS.setdefault(_code, _name)

# op codes without a name (0xbb-0xfe) are kept as OP_UNKNOWN_<hex byte>
UNKNOWN_OP_PREFIX = "OP_UNKNOWN_"


class Script:
    """Represents any script in Bitcoin

    A Script contains just a list of OP_CODES and also knows how to serialize
    into bytes. A script parsed with from_raw remembers the bytes it came
    from and serializes back to exactly those bytes as long as its op code
    list is not changed; this matters for scripts that use a longer push
    than necessary, since signatures commit to the bytes.

    Attributes
    ----------
    script : list
        the list with all the script OP_CODES and data (hex strings)

    Methods
    -------
    to_bytes()
        returns a serialized byte version of the script
    to_hex()
        returns a serialized version of the script in hex
    get_script()
        returns the list of strings that makes up this script
    copy()
        creates a copy of the object (classmethod)
    from_raw()
        parses a serialized script (hex string or bytes)
    to_p2sh_script_pub_key()
        converts script to p2sh scriptPubKey (locking script)
    is_p2sh()
        checks if script is P2SH (Pay-to-Script-Hash)
    is_empty()
        checks if the script has no op codes

    Raises
    ------
    ValueError
        If string data is too large or integer is negative
    """

    def __init__(self, script: list[Any]):
        """See Script description"""
        self.script: list[Any] = script
        self._raw: Optional[bytes] = None
        self._raw_commands: Optional[list[Any]] = None

    @classmethod
    def copy(cls, script: "Script") -> "Script":
        """Deep copy of Script"""
        duplicate = cls(copy.deepcopy(script.script))
        duplicate._raw = script._raw
        duplicate._raw_commands = copy.deepcopy(script._raw_commands)
        return duplicate

    def _op_push_data(self, data: str) -> bytes:
        """Converts data to appropriate OP_PUSHDATA OP code including length"""
        data_bytes = h_to_b(data)

        if len(data_bytes) < 0x4C:
            return bytes([len(data_bytes)]) + data_bytes
        elif len(data_bytes) <= 0xFF:
            return b"\x4c" + bytes([len(data_bytes)]) + data_bytes
        elif len(data_bytes) <= 0xFFFF:
            return b"\x4d" + struct.pack("<H", len(data_bytes)) + data_bytes
        elif len(data_bytes) <= 0xFFFFFFFF:
            return b"\x4e" + struct.pack("<I", len(data_bytes)) + data_bytes
        else:
            raise ValueError("Data too large. Cannot push into script")

    def _push_integer(self, integer: int) -> bytes:
        """Converts integer to bytes; as signed little-endian integer"""
        if integer < 0:
            raise ValueError("Integer is currently required to be positive.")

        number_of_bytes = (integer.bit_length() + 7) // 8
        integer_bytes = integer.to_bytes(number_of_bytes, byteorder="little")

        if integer & (1 << number_of_bytes * 8 - 1):
            integer_bytes += b"\x00"

        return self._op_push_data(b_to_h(integer_bytes))

    def to_bytes(self) -> bytes:
        """Converts the script to bytes"""
        if self._raw is not None and self.script == self._raw_commands:
            return self._raw

        script_bytes = b""
        for token in self.script:
            if isinstance(token, str) and token in OP_CODES:
                script_bytes += OP_CODES[token]
            elif isinstance(token, str) and token.startswith(UNKNOWN_OP_PREFIX):
                script_bytes += h_to_b(token[len(UNKNOWN_OP_PREFIX) :])
            elif isinstance(token, int) and 0 <= token <= 16:
                script_bytes += OP_CODES["OP_" + str(token)]
            elif isinstance(token, int):
                script_bytes += self._push_integer(token)
            else:
                script_bytes += self._op_push_data(token)
        return script_bytes

    def to_hex(self) -> str:
        """Converts the script to hexadecimal"""
        return b_to_h(self.to_bytes())

    @staticmethod
    def from_raw(scriptraw: Union[str, bytes]) -> "Script":
        """
        Imports a Script commands list from raw hexadecimal data or bytes

        Raises
        ------
        ValueError
            if a push runs past the end of the script
        """
        if isinstance(scriptraw, str):
            scriptraw = h_to_b(scriptraw)
        elif not isinstance(scriptraw, (bytes, bytearray)):
            raise TypeError("Input must be a hexadecimal string or bytes")
        scriptraw = bytes(scriptraw)

        commands: list[Any] = []
        index = 0
        while index < len(scriptraw):
            opcode = scriptraw[index]
            index += 1

            # direct pushes carry their length in the op code itself
            if 0x01 <= opcode <= 0x4B:
                size = opcode
            elif opcode in (0x4C, 0x4D, 0x4E):
                width = {0x4C: 1, 0x4D: 2, 0x4E: 4}[opcode]
                if index + width > len(scriptraw):
                    raise ValueError("Script push length is truncated")
                size = int.from_bytes(scriptraw[index : index + width], "little")
                index += width
            else:
                code = bytes([opcode])
                if code in CODE_OPS:
                    commands.append(CODE_OPS[code])
                else:
                    commands.append(f"{UNKNOWN_OP_PREFIX}{opcode:02x}")
                continue

            if index + size > len(scriptraw):
                raise ValueError("Script push exceeds script length")
            commands.append(scriptraw[index : index + size].hex())
            index += size

        script = Script(commands)
        script._raw = scriptraw
        script._raw_commands = list(commands)
        return script

    def get_script(self) -> list[Any]:
        """Returns script as array of strings"""
        return self.script

    def is_empty(self) -> bool:
        return len(self.script) == 0

    def to_p2sh_script_pub_key(self) -> "Script":
        """Converts script to p2sh scriptPubKey (locking script)"""
        return Script(["OP_HASH160", b_to_h(hash160(self.to_bytes())), "OP_EQUAL"])

    def is_p2sh(self) -> bool:
        """
        Check if script is P2SH (Pay-to-Script-Hash).

        P2SH format: OP_HASH160 <20-byte-script-hash> OP_EQUAL

        Returns:
            bool: True if script is P2SH
        """
        script_bytes = self.to_bytes()
        return (
            len(script_bytes) == 23
            and script_bytes[:2] == b"\xa9\x14"
            and script_bytes[22] == 0x87
        )

    def __str__(self) -> str:
        return str(self.script)

    def __repr__(self) -> str:
        return self.__str__()

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, Script):
            return False
        return self.to_bytes() == _other.to_bytes()


def create_2of2_multisig_script(pubkey_a: str, pubkey_b: str) -> Script:
    """Creates the 2-of-2 multisig redeem script that locks a channel's
    funding output.

    The two SEC public keys (hex) are ordered lexicographically so both
    parties derive the identical script regardless of who is 'a'.

    |  OP_2 <key_1> <key_2> OP_2 OP_CHECKMULTISIG
    """
    first, second = sorted([pubkey_a.lower(), pubkey_b.lower()])
    if first == second:
        raise ValueError("A 2-of-2 script requires two distinct keys")
    return Script(["OP_2", first, second, "OP_2", "OP_CHECKMULTISIG"])
