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

NETWORK = "testnet"
networks = {"mainnet", "testnet", "regtest", "signet"}

# RFC 6979 nonces when True, nonces from OS entropy otherwise
DETERMINISTIC_NONCE = True


def setup(network: str = "testnet", deterministic_nonce: bool = True) -> str:
    """Setup chansig with the specified network and signing options.

    Args:
        network: The network to use (mainnet, testnet, regtest, signet)
        deterministic_nonce: Whether signatures use RFC 6979 nonces
                             (default: True)
    """
    global NETWORK, DETERMINISTIC_NONCE
    if network not in networks:
        raise ValueError(f"Unknown network: {network}")
    NETWORK = network
    DETERMINISTIC_NONCE = deterministic_nonce
    return NETWORK


def get_network() -> str:
    global NETWORK
    return NETWORK


def is_mainnet() -> bool:
    global NETWORK
    return NETWORK == "mainnet"


def is_testnet() -> bool:
    global NETWORK
    return NETWORK == "testnet"


def is_regtest() -> bool:
    global NETWORK
    return NETWORK == "regtest"


def get_deterministic_nonce() -> bool:
    """Returns whether signing uses RFC 6979 deterministic nonces"""
    global DETERMINISTIC_NONCE
    return DETERMINISTIC_NONCE


def set_deterministic_nonce(value: bool) -> None:
    """Sets whether signing uses RFC 6979 deterministic nonces"""
    global DETERMINISTIC_NONCE
    DETERMINISTIC_NONCE = value
