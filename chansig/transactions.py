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
from typing import Optional, Union

from chansig.constants import (
    DEFAULT_TX_LOCKTIME,
    DEFAULT_TX_SEQUENCE,
    DEFAULT_TX_VERSION,
    SIGHASH_ALL,
)
from chansig.errors import PreconditionViolation
from chansig.script import Script
from chansig.utils import encode_varint, h_to_b, hash256, parse_compact_size

logger = logging.getLogger(__name__)


class TxInput:
    """Represents a transaction input.

    A transaction input requires a transaction id of a UTXO and the index of
    that UTXO.

    Attributes
    ----------
    txid : str
        the transaction id as a hex string (little-endian as displayed by
        tools)
    txout_index : int
        the index of the UTXO that we want to spend
    script_sig : Script
        the script that satisfies the locking conditions (aka unlocking script)
    sequence : bytes
        the input sequence

    Methods
    -------
    to_bytes(script_sig_bytes=None)
        serializes TxInput to bytes, optionally with another script
    copy()
        creates a copy of the object (classmethod)
    from_raw()
        instantiates object from raw bytes (staticmethod)
    """

    def __init__(
        self,
        txid: str,
        txout_index: int,
        script_sig: Optional[Script] = None,
        sequence: Union[str, bytes] = DEFAULT_TX_SEQUENCE,
    ) -> None:
        """See TxInput description"""

        if len(txid) != 64:
            raise ValueError("Transaction id must be 32 bytes (64 hex characters)")

        # expected in the format used for displaying Bitcoin hashes
        self.txid = txid
        self.txout_index = txout_index
        self.script_sig = script_sig if script_sig is not None else Script([])

        if isinstance(sequence, str):
            self.sequence = h_to_b(sequence)
        else:
            self.sequence = sequence

    def has_script(self) -> bool:
        """True if the input carries a non-empty scriptSig"""
        return not self.script_sig.is_empty()

    def to_bytes(self, script_sig_bytes: Optional[bytes] = None) -> bytes:
        """Serializes to bytes

        If script_sig_bytes is given it is serialized in place of the input's
        own scriptSig; the input itself is left untouched.
        """

        # note that we reverse the byte order for the tx hash since the string
        # was displayed in little-endian!
        txid_bytes = h_to_b(self.txid)[::-1]
        txout_bytes = struct.pack("<L", self.txout_index)

        if script_sig_bytes is None:
            script_sig_bytes = self.script_sig.to_bytes()

        return (
            txid_bytes
            + txout_bytes
            + encode_varint(len(script_sig_bytes))
            + script_sig_bytes
            + self.sequence
        )

    def __str__(self) -> str:
        return str(
            {
                "txid": self.txid,
                "txout_index": self.txout_index,
                "script_sig": self.script_sig,
                "sequence": self.sequence.hex(),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_raw(txraw: bytes, cursor: int = 0) -> tuple["TxInput", int]:
        """Parses a TxInput starting at cursor; returns (input, new cursor)"""

        txid, vout = struct.unpack_from("<32sI", txraw, cursor)
        cursor += 36

        script_size, size = parse_compact_size(txraw[cursor:])
        cursor += size
        script_bytes = txraw[cursor : cursor + script_size]
        if len(script_bytes) != script_size:
            raise ValueError("Script runs past the end of the transaction")
        cursor += script_size

        (sequence,) = struct.unpack_from("<4s", txraw, cursor)
        cursor += 4

        tx_input = TxInput(
            txid=txid[::-1].hex(),
            txout_index=vout,
            script_sig=Script.from_raw(script_bytes),
            sequence=sequence,
        )
        return tx_input, cursor

    @classmethod
    def copy(cls, txin: "TxInput") -> "TxInput":
        """Deep copy of TxInput"""

        return cls(
            txin.txid, txin.txout_index, Script.copy(txin.script_sig), txin.sequence
        )


class TxOutput:
    """Represents a transaction output

    Attributes
    ----------
    amount : int
        the value we want to send to this output in satoshis
    script_pubkey : Script
        the script that will lock this amount
    """

    def __init__(self, amount: int, script_pubkey: Script) -> None:
        """See TxOutput description"""

        if not isinstance(amount, int):
            raise TypeError("Amount needs to be in satoshis as an integer")

        self.amount = amount
        self.script_pubkey = script_pubkey

    def to_bytes(self) -> bytes:
        """Serializes to bytes"""

        amount_bytes = struct.pack("<q", self.amount)
        script_bytes = self.script_pubkey.to_bytes()
        return amount_bytes + encode_varint(len(script_bytes)) + script_bytes

    @staticmethod
    def from_raw(txraw: bytes, cursor: int = 0) -> tuple["TxOutput", int]:
        """Parses a TxOutput starting at cursor; returns (output, new cursor)"""

        (amount,) = struct.unpack_from("<q", txraw, cursor)
        cursor += 8

        script_size, size = parse_compact_size(txraw[cursor:])
        cursor += size
        script_bytes = txraw[cursor : cursor + script_size]
        if len(script_bytes) != script_size:
            raise ValueError("Script runs past the end of the transaction")
        cursor += script_size

        return TxOutput(amount, Script.from_raw(script_bytes)), cursor

    def __str__(self) -> str:
        return str({"amount": self.amount, "script_pubkey": self.script_pubkey})

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, txout: "TxOutput") -> "TxOutput":
        """Deep copy of TxOutput"""

        return cls(txout.amount, Script.copy(txout.script_pubkey))


class Transaction:
    """Represents a (non-segwit) Bitcoin transaction

    Attributes
    ----------
    inputs : list (TxInput)
        A list of all the transaction inputs
    outputs : list (TxOutput)
        A list of all the transaction outputs
    locktime : bytes
        The transaction's locktime parameter
    version : bytes
        The transaction version

    Methods
    -------
    to_bytes()
        Serializes Transaction to bytes
    to_hex()
        converts result of to_bytes to hexadecimal string
    serialize()
        converts result of to_bytes to hexadecimal string
    from_raw()
        Instantiates a Transaction from serialized raw hexadacimal data
    get_txid()
        Calculates txid and returns it
    copy()
        creates a copy of the object (classmethod)
    get_transaction_digest(txin_index, script)
        returns the SIGHASH_ALL digest that is signed for an input
    """

    def __init__(
        self,
        inputs: Optional[list[TxInput]] = None,
        outputs: Optional[list[TxOutput]] = None,
        locktime: Union[str, bytes] = DEFAULT_TX_LOCKTIME,
        version: bytes = DEFAULT_TX_VERSION,
    ) -> None:
        """See Transaction description"""

        self.inputs = inputs if inputs is not None else []
        self.outputs = outputs if outputs is not None else []

        if isinstance(locktime, str):
            self.locktime = h_to_b(locktime)
        else:
            self.locktime = locktime

        self.version = version

    def _to_bytes(self, override: Optional[tuple[int, bytes]] = None) -> bytes:
        """Serializes the transaction following the Bitcoin protocol.

        override is an optional (input index, script bytes) pair; that input
        is serialized with the given script and every other input with an
        empty script. Used to build signature pre-images.
        """
        data = self.version + encode_varint(len(self.inputs))
        for index, txin in enumerate(self.inputs):
            if override is None:
                data += txin.to_bytes()
            elif index == override[0]:
                data += txin.to_bytes(override[1])
            else:
                data += txin.to_bytes(b"")

        data += encode_varint(len(self.outputs))
        for txout in self.outputs:
            data += txout.to_bytes()

        return data + self.locktime

    def to_bytes(self) -> bytes:
        """Serializes transaction to bytes"""
        return self._to_bytes()

    def to_hex(self) -> str:
        """Serializes transaction to hex string"""
        return self._to_bytes().hex()

    def serialize(self) -> str:
        """Alias for to_hex() - serializes transaction to hex string"""
        return self.to_hex()

    def get_txid(self) -> str:
        """Calculates the transaction id (txid) and returns it"""
        # double hash and display in little-endian
        return hash256(self._to_bytes())[::-1].hex()

    @staticmethod
    def from_raw(rawtx: Union[str, bytes]) -> "Transaction":
        """Imports a (non-segwit) Transaction from hex or bytes"""

        if isinstance(rawtx, str):
            rawtx = h_to_b(rawtx)

        try:
            version = rawtx[0:4]
            cursor = 4

            if rawtx[cursor : cursor + 2] == b"\x00\x01":
                raise ValueError("Segwit transactions are not supported")

            n_inputs, size = parse_compact_size(rawtx[cursor:])
            cursor += size
            inputs = []
            for _ in range(n_inputs):
                txin, cursor = TxInput.from_raw(rawtx, cursor)
                inputs.append(txin)

            n_outputs, size = parse_compact_size(rawtx[cursor:])
            cursor += size
            outputs = []
            for _ in range(n_outputs):
                txout, cursor = TxOutput.from_raw(rawtx, cursor)
                outputs.append(txout)
        except (struct.error, IndexError) as e:
            raise ValueError("Truncated transaction data") from e

        locktime = rawtx[cursor : cursor + 4]
        if len(locktime) != 4 or cursor + 4 != len(rawtx):
            raise ValueError("Invalid transaction length")

        return Transaction(inputs, outputs, locktime, version)

    def __str__(self) -> str:
        return str(
            {
                "inputs": self.inputs,
                "outputs": self.outputs,
                "locktime": self.locktime.hex(),
                "version": self.version.hex(),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, tx: "Transaction") -> "Transaction":
        """Deep copy of Transaction"""

        ins = [TxInput.copy(txin) for txin in tx.inputs]
        outs = [TxOutput.copy(txout) for txout in tx.outputs]
        return cls(ins, outs, tx.locktime, tx.version)

    def get_transaction_digest(
        self, txin_index: int, script: Union[Script, bytes]
    ) -> bytes:
        """Returns the transaction's SIGHASH_ALL digest for signing input
        txin_index.
        https://en.bitcoin.it/wiki/OP_CHECKSIG

        The pre-image is the transaction serialized with the scriptSig of
        txin_index replaced by script (the subscript, normally the
        scriptPubKey of the UTXO being spent) and every other scriptSig
        empty, followed by the sighash type as a 4-byte little-endian
        integer. The digest is the double SHA-256 of that.

        The transaction itself is not modified.

        Attributes
        ----------
        txin_index : int
            The index of the input that we wish to sign
        script : Script or bytes
            The subscript to commit to

        Raises
        ------
        PreconditionViolation
            if txin_index is out of range or any input already carries a
            scriptSig
        """

        if not 0 <= txin_index < len(self.inputs):
            raise PreconditionViolation(
                f"Input index {txin_index} out of range "
                f"(transaction has {len(self.inputs)} inputs)"
            )

        # the signature commits to unsigned inputs only
        for index, txin in enumerate(self.inputs):
            if txin.has_script():
                raise PreconditionViolation(
                    f"Input {index} already has a scriptSig; all inputs must be "
                    f"empty when computing a signature digest"
                )

        if isinstance(script, Script):
            script_bytes = script.to_bytes()
        else:
            script_bytes = bytes(script)

        tx_for_signing = self._to_bytes(override=(txin_index, script_bytes))

        # sighash is one byte but is hashed as a 4 byte little-endian value
        state = hashlib.sha256(tx_for_signing)
        state.update(struct.pack("<I", SIGHASH_ALL))
        tx_digest = hashlib.sha256(state.digest()).digest()

        logger.debug(
            "Built SIGHASH_ALL digest %s for input %d", tx_digest.hex(), txin_index
        )
        return tx_digest


def build_input_digest(
    tx: Transaction, input_index: int, subscript: Union[Script, bytes]
) -> bytes:
    """Returns the 32-byte digest that is signed to spend input_index of tx
    with subscript; see Transaction.get_transaction_digest"""
    return tx.get_transaction_digest(input_index, subscript)
