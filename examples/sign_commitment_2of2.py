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


from chansig.setup import setup
from chansig.transactions import Transaction, TxInput, TxOutput
from chansig.keys import PrivateKey
from chansig.script import Script, create_2of2_multisig_script
from chansig.signature import sign_input, verify_2of2
from chansig.wire import encode, decode


def main():
    # always remember to setup the network
    setup("testnet")

    #
    # Two parties sign a commitment transaction that spends their 2-of-2
    # P2SH funding output
    #

    alice_sk = PrivateKey("cTALNpTpRbbxTCJ2A5Vq88UxT44w1PE2cYqiB3n4hRvzyCev1Wwo")
    bob_sk = PrivateKey("cRvyLwCPLU88jsyj94L7iJjQX5C2f8koG4G2gevN4BeSGcEvfKe9")
    alice_pk = alice_sk.get_public_key()
    bob_pk = bob_sk.get_public_key()

    # both parties derive the same redeem script
    redeem_script = create_2of2_multisig_script(alice_pk.to_hex(), bob_pk.to_hex())
    funding_output = TxOutput(100000, redeem_script.to_p2sh_script_pub_key())

    # the funding transaction's id and output index
    txin = TxInput(
        "f557c623e55f0affc696b742630770df2342c4aac395e0ed470923247bc51b95", 0
    )

    to_alice = TxOutput(
        60000,
        Script(
            [
                "OP_DUP",
                "OP_HASH160",
                "fd337ad3bf81e086d96a68e1f8d6a0a510f8c24a",
                "OP_EQUALVERIFY",
                "OP_CHECKSIG",
            ]
        ),
    )
    to_bob = TxOutput(
        39000,
        Script(
            [
                "OP_DUP",
                "OP_HASH160",
                "751e76e8199196d454941c45d1b3a323f1433bd6",
                "OP_EQUALVERIFY",
                "OP_CHECKSIG",
            ]
        ),
    )

    commitment = Transaction([txin], [to_alice, to_bob])
    print("\nRaw unsigned commitment:\n" + commitment.serialize())

    # each party signs with the funding scriptPubKey as subscript
    alice_sig = sign_input(commitment, 0, funding_output.script_pubkey, alice_sk)
    bob_sig = sign_input(commitment, 0, funding_output.script_pubkey, bob_sk)

    # bob's signature travels to alice as a wire record
    wire = encode(bob_sig)
    print("\nBob's signature on the wire:\n", wire.to_dict())
    bob_sig = decode(wire)

    valid = verify_2of2(
        commitment, 0, funding_output, alice_pk, bob_pk, alice_sig, bob_sig
    )
    print("\nBoth signatures valid:", valid)

    # signatures go in the same order as the keys in the redeem script
    sig_by_key = {
        alice_pk.to_hex(): alice_sig.for_script_sig(),
        bob_pk.to_hex(): bob_sig.for_script_sig(),
    }
    ordered_sigs = [sig_by_key[pk] for pk in redeem_script.get_script()[1:3]]

    # OP_0 works around the extra item OP_CHECKMULTISIG pops
    txin.script_sig = Script(["OP_0"] + ordered_sigs + [redeem_script.to_hex()])

    print("\nRaw signed commitment:\n" + commitment.serialize())
    print("\nTxId:", commitment.get_txid())


if __name__ == "__main__":
    main()
