"""
Wallet and chain client.

Signing goes through cosmpy, transport through httpx: transactions are
posted to the Tendermint RPC with broadcast_tx_sync and their result is read
back from the REST (LCD) endpoint.
"""

import json
import logging
import math
import time
from base64 import b64encode, urlsafe_b64encode
from dataclasses import dataclass, field
from decimal import Decimal
from hashlib import sha256
from typing import Optional

import httpx
from bip_utils import Bip39SeedGenerator, Bip44, Bip44Coins, MnemonicChecksumError
from cosmpy.aerial.client import LedgerClient, NetworkConfig
from cosmpy.aerial.tx import SigningCfg, Transaction
from cosmpy.aerial.wallet import LocalWallet
from cosmpy.crypto.keypairs import PrivateKey

from .config import get_endpoint
from .errors import BroadcastFailure, ClientUnavailable, QueryFailure

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 60
TX_POLL_ATTEMPTS = 10
TX_POLL_INTERVAL = 3


def calculate_fee(gas_limit: int, gas_price_amount: float, denom: str) -> str:
    return f"{math.ceil(Decimal(str(gas_price_amount)) * gas_limit)}{denom}"


def create_wallet(mnemonic: str, prefix: str) -> LocalWallet:
    """Create a wallet from a mnemonic using the default Cosmos BIP44 path."""
    try:
        seed_bytes = Bip39SeedGenerator(mnemonic).Generate()
        bip44_def_ctx = Bip44.FromSeed(seed_bytes, Bip44Coins.COSMOS).DeriveDefaultPath()
        return LocalWallet(
            PrivateKey(bip44_def_ctx.PrivateKey().Raw().ToBytes()),
            prefix=prefix,
        )
    except (ValueError, MnemonicChecksumError) as e:
        raise ClientUnavailable(f"Can't create wallet with prefix {prefix!r}: {e}") from e


@dataclass
class TxResult:
    tx_hash: str
    height: int = 0
    code: int = 0
    raw_log: str = ""
    events: list = field(default_factory=list)

    @classmethod
    def from_tx_response(cls, tx_response: dict) -> "TxResult":
        # SDK < 0.50 groups events by message in `logs`, newer versions
        # only fill the flat `events` list
        logs = tx_response.get("logs") or []
        if logs:
            events = [event for log in logs for event in log.get("events", [])]
        else:
            events = tx_response.get("events", [])

        return cls(
            tx_hash=tx_response.get("txhash", ""),
            height=int(tx_response.get("height", 0)),
            code=int(tx_response.get("code", 0)),
            raw_log=tx_response.get("raw_log", ""),
            events=events,
        )


class ChainClient:
    def __init__(self, option: dict, wallet: Optional[LocalWallet] = None):
        self.chain_id = option["CHAIN_ID"]
        self.denom = option["DENOM"]
        self.rpc_url = get_endpoint(option, "RPC_LIST")
        self.rest_url = get_endpoint(option, "REST_LIST").rstrip("/")
        self.wallet = wallet
        self._ledger = None

    @property
    def address(self) -> str:
        if self.wallet is None:
            raise ClientUnavailable("Client has no wallet, it can only query")
        return str(self.wallet.address())

    @property
    def ledger(self) -> LedgerClient:
        if self._ledger is None:
            cfg = NetworkConfig(
                chain_id=self.chain_id,
                url=f"rest+{self.rest_url}",
                fee_minimum_gas_price=0,
                fee_denomination=self.denom,
                staking_denomination=self.denom,
            )
            try:
                self._ledger = LedgerClient(cfg)
            except (httpx.HTTPError, RuntimeError, ValueError) as e:
                raise ClientUnavailable(f"Can't connect to {self.rest_url}: {e}") from e
        return self._ledger

    def create_tx(self, msgs: list, fee: str, gas_limit: int, memo: str = "") -> Transaction:
        tx = Transaction()
        for msg in msgs:
            tx.add_message(msg)

        account = self.ledger.query_account(self.address)

        tx.seal(
            signing_cfgs=[SigningCfg.direct(self.wallet.public_key(), account.sequence)],
            fee=fee,
            gas_limit=gas_limit,
            memo=memo,
        )
        tx.sign(self.wallet.signer(), self.chain_id, account.number)
        tx.complete()

        return tx

    def broadcast_batch(self, msgs: list, fee: str, gas_limit: int, memo: str = "") -> TxResult:
        """Sign msgs into one transaction, broadcast it and wait for inclusion."""
        tx = self.create_tx(msgs, fee, gas_limit, memo)
        tx_bytes = tx.tx.SerializeToString()
        tx_hash = sha256(tx_bytes).hexdigest().upper()
        logger.info("Broadcasting %d messages, tx hash %s, fee %s", len(msgs), tx_hash, fee)

        data = {
            "jsonrpc": "2.0",
            "method": "broadcast_tx_sync",
            "params": [b64encode(tx_bytes).decode("utf-8")],
            "id": 1,
        }
        try:
            resp = httpx.post(self.rpc_url, json=data, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BroadcastFailure(f"Broadcast of {tx_hash} failed: {e}") from e

        if "error" in body:
            raise BroadcastFailure(f"Broadcast of {tx_hash} failed: {body['error']}")
        check = body.get("result") or {}
        if int(check.get("code", 0)) != 0:
            raise BroadcastFailure(f"Tx {tx_hash} rejected: {check.get('log')}")

        result = TxResult.from_tx_response(self.wait_for_tx(tx_hash))
        if result.code != 0:
            raise BroadcastFailure(f"Tx {tx_hash} failed: {result.raw_log}")

        logger.info("Tx %s included at height %d", tx_hash, result.height)
        return result

    def wait_for_tx(self, tx_hash: str) -> dict:
        url = f"{self.rest_url}/cosmos/tx/v1beta1/txs/{tx_hash}"

        for attempt in range(1, TX_POLL_ATTEMPTS + 1):
            time.sleep(TX_POLL_INTERVAL)
            try:
                resp = httpx.get(url, timeout=REQUEST_TIMEOUT)
            except httpx.HTTPError as e:
                logger.debug("Tx %s lookup attempt %d failed: %s", tx_hash, attempt, e)
                continue
            if resp.status_code == 200:
                return resp.json()["tx_response"]

        raise BroadcastFailure(
            f"Tx {tx_hash} was not found after {TX_POLL_ATTEMPTS} attempts"
        )

    def query_smart(self, contract_address: str, query_msg: dict):
        encoded = urlsafe_b64encode(json.dumps(query_msg).encode("utf-8")).decode("utf-8")
        url = f"{self.rest_url}/cosmwasm/wasm/v1/contract/{contract_address}/smart/{encoded}"
        try:
            resp = httpx.get(url, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            return resp.json()["data"]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            raise QueryFailure(f"Query {query_msg} to {contract_address} failed: {e}") from e


def get_signing_client(option: dict, prefix: str, mnemonic: str) -> ChainClient:
    wallet = create_wallet(mnemonic, prefix)
    client = ChainClient(option, wallet)
    logger.info("Wallet address: %s", client.address)
    return client
