from __future__ import annotations

import json

import pytest
import toml

from cw_platform import settings
from cw_platform.chain import TxResult
from cw_platform.commands import parse_store_args
from cw_platform.commands import call_contract, capture_users, store_contract
from cw_platform.errors import BroadcastFailure, ConfigLookupFailure
from cw_platform.funding import Cw20, Native
from cw_platform.pagination import PageResult

from .conftest import FakeClient, store_code_event


@pytest.fixture()
def workspace(tmp_path, monkeypatch, chain_config, artifacts):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(chain_config, indent=2), encoding="utf-8")

    wallets_path = tmp_path / "wallets.toml"
    wallets_path.write_text('[test]\nSEED_ADMIN = "seed"\n', encoding="utf-8")

    artifacts_path = tmp_path / "artifacts"
    artifacts_path.mkdir()
    for name, data in artifacts.items():
        (artifacts_path / name).write_bytes(data)

    monkeypatch.setattr(settings, "PATH_TO_CONFIG_JSON", str(config_path))
    monkeypatch.setattr(settings, "PATH_TO_WALLETS_TOML", str(wallets_path))
    monkeypatch.setattr(settings, "ARTIFACTS_FOLDER_PATH", str(artifacts_path))
    monkeypatch.setattr(settings, "DEPLOYED_CONTRACTS_FOLDER_PATH", str(tmp_path / "deployed"))
    monkeypatch.setattr(settings, "SNAPSHOTS_FOLDER_PATH", str(tmp_path / "snapshots"))
    return tmp_path


def use_client(monkeypatch, client, command=store_contract):
    calls = []

    def fake_get_signing_client(option, prefix, mnemonic):
        calls.append((option["CHAIN_ID"], prefix, mnemonic))
        return client

    monkeypatch.setattr(command, "get_signing_client", fake_get_signing_client)
    return calls


def test_parse_store_args():
    assert parse_store_args(["X", "platform,nft", "extra"]) == ("X", ["platform", "nft", "extra"])
    assert parse_store_args(["X"]) == ("X", [])
    with pytest.raises(ConfigLookupFailure):
        parse_store_args([])


def test_store_command_rewrites_config(workspace, monkeypatch, chain_config):
    client = FakeClient(TxResult(tx_hash="HASH", events=[store_code_event("42")]))
    calls = use_client(monkeypatch, client)

    assert store_contract.main(["X", "platform"]) == 0

    chain_config["CHAINS"][0]["OPTIONS"][0]["CONTRACTS"][0]["CODE"] = 42
    written = (workspace / "config.json").read_text(encoding="utf-8")
    assert written == json.dumps(chain_config, indent=2)
    assert calls == [("X", "omniflix", "seed")]

    record = toml.load(workspace / "deployed" / "X.toml")
    assert record["code-ids"] == {"platform": 42}
    assert record["info"]["store_tx_hash"] == "HASH"
    assert set(record["checksums"]) == {"platform.wasm"}


def test_failed_store_leaves_config_untouched(workspace, monkeypatch):
    before = (workspace / "config.json").read_text(encoding="utf-8")
    use_client(monkeypatch, FakeClient(error=BroadcastFailure("rejected")))

    assert store_contract.main(["X", "platform"]) == 1

    assert (workspace / "config.json").read_text(encoding="utf-8") == before
    assert not (workspace / "deployed").exists()


def test_store_command_requires_labels(workspace, monkeypatch):
    client = FakeClient()
    use_client(monkeypatch, client)

    assert store_contract.main(["X"]) == 1
    assert client.broadcasts == []


def user(address: str, roi: str, last_flip_date: int = 0) -> dict:
    return {
        "address": address,
        "info": {
            "stats": {
                "bets": {"count": 3, "value": "3000000"},
                "wins": {"count": 1, "value": "1999999"},
            },
            "roi": roi,
            "unclaimed": "1250000",
            "last_flip_date": last_flip_date,
        },
    }


def test_format_users_sorts_by_roi_and_scales_amounts():
    users = capture_users.format_users([user("a", "-0.5"), user("b", "0.25", 86400)])

    assert [x["address"] for x in users] == ["b", "a"]
    assert users[0] == {
        "address": "b",
        "bets": {"count": 3, "value": 3.0},
        "wins": {"count": 1, "value": 1.9},
        "roi": 0.25,
        "unclaimed": 1.2,
        "lastFlipDate": "1970-01-02 00:00:00",
    }


def test_capture_users_writes_snapshot(workspace, monkeypatch):
    class FakeHelpers:
        def __init__(self, client, platform_address):
            self.platform_address = platform_address

        def user_list_all(self, amount):
            return PageResult(items=[user("a", "0.1")], iterations=1, exhausted=True)

    monkeypatch.setattr(capture_users, "QueryHelpers", FakeHelpers)

    assert capture_users.main(["X"]) == 0

    snapshot = workspace / "snapshots" / "x" / "test" / "users.json"
    assert [x["address"] for x in json.loads(snapshot.read_text(encoding="utf-8"))] == ["a"]


@pytest.fixture()
def platform_workspace(workspace, chain_config):
    chain_config["CHAINS"][0]["OPTIONS"][0]["CONTRACTS"][0]["ADDRESS"] = "omniflix1platform"
    (workspace / "config.json").write_text(json.dumps(chain_config, indent=2), encoding="utf-8")
    return workspace


def sent_payload(msg) -> dict:
    return json.loads(msg.msg.decode("utf-8"))


def test_call_deposit_with_native_token(platform_workspace, monkeypatch):
    client = FakeClient()
    calls = use_client(monkeypatch, client, call_contract)

    assert call_contract.main(["X", "deposit", "1000", '{"native": {"denom": "uflix"}}']) == 0

    assert calls == [("X", "omniflix", "seed")]
    [broadcast] = client.broadcasts
    [msg] = broadcast["msgs"]
    assert msg.contract == "omniflix1platform"
    assert sent_payload(msg) == {"deposit": {}}
    assert [(x.denom, x.amount) for x in msg.funds] == [("uflix", "1000")]
    assert broadcast["gas_limit"] == 300000
    assert broadcast["fee"] == "7500uflix"


def test_call_flip_with_cw20_token(platform_workspace, monkeypatch):
    client = FakeClient()
    use_client(monkeypatch, client, call_contract)

    token = json.dumps({"cw20": {"address": "omniflix1cw20"}})
    assert call_contract.main(["X", "flip", "TAIL", "5", token]) == 0

    [msg] = client.broadcasts[0]["msgs"]
    assert msg.contract == "omniflix1cw20"
    assert sent_payload(msg)["send"]["contract"] == "omniflix1platform"
    assert sent_payload(msg)["send"]["amount"] == "5"


@pytest.mark.parametrize(
    "args",
    [
        ["X", "deposit", "1000", '{"native": {}}'],
        ["X", "deposit", "1000", "uflix"],
        ["X", "deposit", "-1", '{"native": {"denom": "uflix"}}'],
        ["X", "flip", "edge", "5", '{"native": {"denom": "uflix"}}'],
        ["X", "deposit", "1000"],
        ["X", "withdraw", "1000"],
    ],
)
def test_call_rejects_bad_action_args(platform_workspace, monkeypatch, args):
    client = FakeClient()
    use_client(monkeypatch, client, call_contract)

    assert call_contract.main(args) == 1
    assert client.broadcasts == []


def test_parse_token_accepts_both_forms():
    assert call_contract.parse_token('{"native": {"denom": "uflix"}}') == Native("uflix")
    assert call_contract.parse_token('{"cw20": {"address": "omniflix1cw20"}}') == Cw20("omniflix1cw20")
