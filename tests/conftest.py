from __future__ import annotations

import pytest

from cw_platform.chain import TxResult

SENDER = "omniflix1sender"


class FakeClient:
    """Records broadcasts and returns a canned TxResult."""

    def __init__(self, tx_result: TxResult | None = None, error: Exception | None = None):
        self.address = SENDER
        self.tx_result = tx_result or TxResult(tx_hash="ABC")
        self.error = error
        self.broadcasts = []

    def broadcast_batch(self, msgs, fee, gas_limit, memo=""):
        self.broadcasts.append({"msgs": msgs, "fee": fee, "gas_limit": gas_limit, "memo": memo})
        if self.error is not None:
            raise self.error
        return self.tx_result


def store_code_event(code_id: str | None) -> dict:
    attributes = [{"key": "code_checksum", "value": "ff"}]
    if code_id is not None:
        attributes.append({"key": "code_id", "value": code_id})
    return {"type": "store_code", "attributes": attributes}


@pytest.fixture()
def chain_config() -> dict:
    return {
        "CHAINS": [
            {
                "NAME": "X",
                "PREFIX": "omniflix",
                "OPTIONS": [
                    {
                        "TYPE": "test",
                        "CHAIN_ID": "X",
                        "RPC_LIST": ["http://rpc.x"],
                        "REST_LIST": ["http://rest.x"],
                        "DENOM": "uflix",
                        "GAS_PRICE_AMOUNT": 0.025,
                        "STORE_CODE_GAS_MULTIPLIER": 20,
                        "CONTRACTS": [
                            {"LABEL": "platform", "WASM": "platform.wasm", "CODE": 0},
                            {
                                "LABEL": "nft",
                                "WASM": "cw721.wasm",
                                "CODE": 5,
                                "ADDRESS": "omniflix1nft",
                                "PERMISSION": ["omniflix1admin"],
                            },
                        ],
                    }
                ],
            },
            {
                "NAME": "Y",
                "PREFIX": "legacy",
                "OPTIONS": [
                    {
                        "TYPE": "main",
                        "CHAIN_ID": "Y",
                        "RPC_LIST": ["http://rpc.y"],
                        "REST_LIST": ["http://rest.y"],
                        "DENOM": "uy",
                        "GAS_PRICE_AMOUNT": 0.1,
                        "STORE_CODE_GAS_MULTIPLIER": 10,
                        "EVENT_FORMAT": "raw_log",
                        "CONTRACTS": [
                            {"LABEL": "platform", "WASM": "platform.wasm", "CODE": 0},
                            {"LABEL": "nft", "WASM": "cw721.wasm", "CODE": 0},
                        ],
                    }
                ],
            },
        ]
    }


@pytest.fixture()
def artifacts() -> dict:
    return {
        "platform.wasm": b"\x00asm" + b"platform" * 64,
        "cw721.wasm": b"\x00asm" + b"cw721" * 64,
    }
