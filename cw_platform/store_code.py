"""
Store-code pipeline.

Uploads the wasm artifacts of the requested contracts in one transaction
and writes the assigned code ids into the chain config:

1. gzip every artifact and build a MsgStoreCode for it
2. gas = ceil(STORE_CODE_GAS_MULTIPLIER * total compressed size)
3. broadcast the batch
4. read the code ids back from the tx, either from the structured events
   or, on chains flagged with EVENT_FORMAT = "raw_log", from the raw log
5. match code ids to contracts by position and update the config

Nothing is persisted here. Callers save StoreResult.config only after
store_contracts returns, so a failed run never leaves a half-updated file.
"""

import gzip
import logging
import math
import os
import re
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Callable, Optional

from cosmpy.protos.cosmwasm.wasm.v1.tx_pb2 import MsgStoreCode
from cosmpy.protos.cosmwasm.wasm.v1.types_pb2 import (
    ACCESS_TYPE_ANY_OF_ADDRESSES,
    ACCESS_TYPE_EVERYBODY,
    AccessConfig,
)

from .chain import calculate_fee
from .config import get_chain_option_by_id
from .errors import ArtifactReadFailure, ConfigLookupFailure, EventExtractionMismatch
from .reconcile import update_code_ids

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9
DEFAULT_EVENT_FORMAT = "events"

CODE_ID_PATTERN = re.compile(r'"code_id","value":"(\d+)"')


class ArtifactStore:
    def __init__(self, folder_path: str):
        self.folder_path = folder_path

    def read(self, file_name: str) -> bytes:
        path = os.path.join(self.folder_path, file_name)
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise ArtifactReadFailure(f"Can't read artifact {path!r}: {e}") from e


@dataclass
class StoreCodeBatchEntry:
    contract: dict
    msg: MsgStoreCode
    # sha256 of the uncompressed artifact, as in artifacts/checksums.txt
    checksum: str
    compressed_size: int

    @property
    def label(self) -> str:
        return self.contract["LABEL"]


@dataclass
class StoreResult:
    config: dict
    code_ids: list
    tx_hash: str
    checksums: dict = field(default_factory=dict)
    mismatch: Optional[EventExtractionMismatch] = None


def get_instantiate_permission(addresses: Optional[list] = None) -> AccessConfig:
    if addresses:
        return AccessConfig(permission=ACCESS_TYPE_ANY_OF_ADDRESSES, addresses=addresses)

    return AccessConfig(permission=ACCESS_TYPE_EVERYBODY)


def compress(wasm_binary: bytes) -> bytes:
    return gzip.compress(wasm_binary, compresslevel=COMPRESSION_LEVEL)


def estimate_gas(byte_length_sum: int, gas_multiplier: float) -> int:
    return math.ceil(gas_multiplier * byte_length_sum)


def parse_code_id_list_legacy(raw_log: str) -> list:
    return [int(x) for x in CODE_ID_PATTERN.findall(raw_log or "")]


def _to_code_id(value) -> int:
    value = str(value or "")
    return int(value) if value.isdigit() else 0


def parse_code_id_list(events: list) -> list:
    code_ids = []

    for event in events:
        if event.get("type") != "store_code":
            continue

        value = next(
            (x.get("value") for x in event.get("attributes", []) if x.get("key") == "code_id"),
            None,
        )
        code_ids.append(_to_code_id(value))

    return code_ids


# EVENT_FORMAT -> (TxResult -> code ids)
CODE_ID_PARSERS = {
    "events": lambda tx: parse_code_id_list(tx.events),
    "raw_log": lambda tx: parse_code_id_list_legacy(tx.raw_log),
}


def get_code_id_parser(option: dict) -> Callable:
    event_format = option.get("EVENT_FORMAT", DEFAULT_EVENT_FORMAT)
    try:
        return CODE_ID_PARSERS[event_format]
    except KeyError:
        raise ConfigLookupFailure(
            f"Unknown EVENT_FORMAT {event_format!r} for {option.get('CHAIN_ID')!r}"
        ) from None


def build_store_code_batch(
    contracts: list, label_list: list, sender: str, read_artifact: Callable[[str], bytes]
) -> tuple:
    """Build the batch in config order, returns (entries, compressed size sum)."""
    missing = [x for x in label_list if x not in {c["LABEL"] for c in contracts}]
    if missing:
        raise ConfigLookupFailure(f"Contracts {missing} are not found in config")

    byte_length_sum = 0
    entries = []

    for contract in contracts:
        if contract["LABEL"] not in label_list:
            continue

        wasm_binary = read_artifact(contract["WASM"])
        compressed = compress(wasm_binary)
        byte_length_sum += len(compressed)

        msg = MsgStoreCode(
            sender=sender,
            wasm_byte_code=compressed,
            instantiate_permission=get_instantiate_permission(contract.get("PERMISSION")),
        )
        entries.append(
            StoreCodeBatchEntry(
                contract=contract,
                msg=msg,
                checksum=sha256(wasm_binary).hexdigest(),
                compressed_size=len(compressed),
            )
        )
        logger.debug("%s: %d bytes compressed to %d", contract["WASM"], len(wasm_binary), len(compressed))

    return entries, byte_length_sum


def correlate_code_ids(entries: list, code_id_list: list) -> list:
    """Pair entry i with code id i, entries past the end of the list get 0."""
    return [
        (entry.label, code_id_list[i] if i < len(code_id_list) else 0)
        for i, entry in enumerate(entries)
    ]


def store_contracts(
    config: dict,
    chain_id: str,
    label_list: list,
    client,
    read_artifact: Callable[[str], bytes],
) -> StoreResult:
    """Upload the label_list contracts of chain_id and return the updated config.

    client is a signing cw_platform.chain.ChainClient or anything exposing
    address and broadcast_batch(msgs, fee, gas_limit).
    """
    option = get_chain_option_by_id(config, chain_id).option
    parse_code_ids = get_code_id_parser(option)

    entries, byte_length_sum = build_store_code_batch(
        option.get("CONTRACTS", []), label_list, client.address, read_artifact
    )
    if not entries:
        raise ConfigLookupFailure(f"Nothing to store on {chain_id!r}: no labels requested")

    gas_limit = estimate_gas(byte_length_sum, option["STORE_CODE_GAS_MULTIPLIER"])
    fee = calculate_fee(gas_limit, option["GAS_PRICE_AMOUNT"], option["DENOM"])
    logger.info(
        "Storing %s on %s: %d bytes, gas %d, fee %s",
        [x.label for x in entries],
        chain_id,
        byte_length_sum,
        gas_limit,
        fee,
    )

    tx = client.broadcast_batch([x.msg for x in entries], fee, gas_limit)

    code_id_list = parse_code_ids(tx)
    mismatch = None
    if len(code_id_list) != len(entries):
        mismatch = EventExtractionMismatch(len(entries), len(code_id_list))
        logger.warning("Tx %s: %s", tx.tx_hash, mismatch)

    code_ids = correlate_code_ids(entries, code_id_list)
    for label, code_id in code_ids:
        logger.info('"%s" contract code is %s', label.lower(), code_id)

    return StoreResult(
        config=update_code_ids(config, chain_id, code_ids),
        code_ids=code_ids,
        tx_hash=tx.tx_hash,
        checksums={x.contract["WASM"]: x.checksum for x in entries},
        mismatch=mismatch,
    )
