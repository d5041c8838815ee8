"""
Chain config and wallet storage.

The chain config is a JSON document shaped as

    {"CHAINS": [{"NAME", "PREFIX", "OPTIONS": [{"CHAIN_ID", "RPC_LIST",
      "REST_LIST", "DENOM", "GAS_PRICE_AMOUNT", "STORE_CODE_GAS_MULTIPLIER",
      "TYPE", "EVENT_FORMAT"?, "CONTRACTS": [{"LABEL", "WASM", "CODE",
      "ADDRESS"?, "PERMISSION"?}]}]}]}

and is kept as plain dicts. Nothing here mutates a loaded tree; updates go
through cw_platform.reconcile.
"""

import json
import logging
from typing import NamedTuple

import toml

from .errors import ConfigLookupFailure
from .settings import ENCODING

logger = logging.getLogger(__name__)


class ChainOption(NamedTuple):
    name: str
    prefix: str
    option: dict


def load_chain_config(path: str) -> dict:
    with open(path, "r", encoding=ENCODING) as f:
        return json.load(f)


def save_chain_config(path: str, config: dict) -> None:
    with open(path, "w", encoding=ENCODING) as f:
        f.write(dump_chain_config(config))
    logger.info("Config saved to %s", path)


def dump_chain_config(config: dict) -> str:
    return json.dumps(config, indent=2, ensure_ascii=False)


def get_chain_option_by_id(config: dict, chain_id: str) -> ChainOption:
    """Return the single option registered for chain_id.

    Raises ConfigLookupFailure when no option, or more than one, matches.
    """
    matches = [
        ChainOption(chain.get("NAME", ""), chain.get("PREFIX", ""), option)
        for chain in config.get("CHAINS", [])
        for option in chain.get("OPTIONS", [])
        if option.get("CHAIN_ID") == chain_id
    ]

    if not matches:
        raise ConfigLookupFailure(f"Chain id {chain_id!r} is not found in config")
    if len(matches) > 1:
        raise ConfigLookupFailure(
            f"Chain id {chain_id!r} is ambiguous: {len(matches)} options match"
        )

    return matches[0]


def get_contract_by_label(contracts: list, label: str) -> dict:
    for contract in contracts:
        if contract.get("LABEL") == label:
            return contract

    raise ConfigLookupFailure(f"Contract {label!r} is not found in config")


def get_endpoint(option: dict, key: str) -> str:
    # first endpoint wins, the rest are fallbacks for manual use
    endpoints = option.get(key) or []
    if not endpoints:
        raise ConfigLookupFailure(f"{key} is empty for {option.get('CHAIN_ID')!r}")
    return endpoints[0]


def load_wallets(path: str, wallet_type: str) -> dict:
    """Load the seed table for the option TYPE (e.g. "main" or "test")."""
    try:
        wallets = toml.load(path)
    except FileNotFoundError as e:
        raise ConfigLookupFailure(f"Wallets file {path!r} is not found") from e

    if wallet_type not in wallets:
        raise ConfigLookupFailure(f"Wallet set {wallet_type!r} is not found in {path!r}")

    return wallets[wallet_type]
