from __future__ import annotations

import json
from base64 import urlsafe_b64decode

import httpx
import pytest

from cw_platform import chain
from cw_platform.chain import ChainClient, TxResult, calculate_fee
from cw_platform.errors import ClientUnavailable, QueryFailure


def test_fee_is_rounded_up():
    assert calculate_fee(1000, 0.0251, "uflix") == "26uflix"
    assert calculate_fee(0, 0.025, "uflix") == "0uflix"


def test_fee_is_exact_for_decimal_gas_prices():
    assert calculate_fee(30, 0.1, "uflix") == "3uflix"
    assert calculate_fee(300000, 0.025, "uflix") == "7500uflix"


def test_bad_mnemonic_checksum_is_client_unavailable():
    with pytest.raises(ClientUnavailable):
        chain.create_wallet(" ".join(["abandon"] * 12), "omniflix")


def test_tx_result_prefers_per_message_logs():
    tx_response = {
        "txhash": "HASH",
        "height": "12",
        "code": 0,
        "raw_log": "log",
        "logs": [
            {"events": [{"type": "store_code", "attributes": []}]},
            {"events": [{"type": "message", "attributes": []}]},
        ],
        "events": [{"type": "tx", "attributes": []}],
    }

    result = TxResult.from_tx_response(tx_response)

    assert result.height == 12
    assert [x["type"] for x in result.events] == ["store_code", "message"]


def test_tx_result_falls_back_to_flat_events():
    result = TxResult.from_tx_response({"txhash": "HASH", "logs": [], "events": [{"type": "tx"}]})

    assert result.events == [{"type": "tx"}]
    assert result.raw_log == ""


def option() -> dict:
    return {
        "CHAIN_ID": "X",
        "DENOM": "uflix",
        "RPC_LIST": ["http://rpc.x"],
        "REST_LIST": ["http://rest.x/"],
    }


def test_query_smart_encodes_query_in_path(monkeypatch):
    seen = {}

    def fake_get(url, timeout):
        seen["url"] = url
        return httpx.Response(200, json={"data": {"tokens": []}}, request=httpx.Request("GET", url))

    monkeypatch.setattr(chain.httpx, "get", fake_get)

    res = ChainClient(option()).query_smart("omniflix1nft", {"tokens": {"owner": "o"}})

    assert res == {"tokens": []}
    prefix = "http://rest.x/cosmwasm/wasm/v1/contract/omniflix1nft/smart/"
    assert seen["url"].startswith(prefix)
    assert json.loads(urlsafe_b64decode(seen["url"][len(prefix):])) == {"tokens": {"owner": "o"}}


def test_query_smart_wraps_http_errors(monkeypatch):
    def fake_get(url, timeout):
        return httpx.Response(500, text="oops", request=httpx.Request("GET", url))

    monkeypatch.setattr(chain.httpx, "get", fake_get)

    with pytest.raises(QueryFailure):
        ChainClient(option()).query_smart("omniflix1nft", {"tokens": {}})


def test_query_only_client_has_no_address():
    with pytest.raises(ClientUnavailable):
        ChainClient(option()).address
