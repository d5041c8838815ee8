"""
Query or call the platform contract.

    cw-call-contract <chain_id>
    cw-call-contract <chain_id> deposit <amount> <token_json>
    cw-call-contract <chain_id> flip <head|tail> <amount> <token_json>

Without an action logs the platform config and app info. deposit and flip
are signed with the SEED_ADMIN wallet; token_json is either
'{"native":{"denom":"uflix"}}' or '{"cw20":{"address":"..."}}'.
"""

import json
import sys

from .. import settings
from ..chain import ChainClient, get_signing_client
from ..composer import Side
from ..config import get_chain_option_by_id, get_contract_by_label, load_chain_config, load_wallets
from ..errors import ConfigLookupFailure, InvalidFundingParameters
from ..executor import Executor
from ..funding import token_from_json
from ..queries import QueryHelpers
from . import run


def get_platform_address(option: dict) -> str:
    return get_contract_by_label(option.get("CONTRACTS", []), "platform").get("ADDRESS", "")


def get_platform_query_helpers(chain_id: str) -> QueryHelpers:
    config = load_chain_config(settings.PATH_TO_CONFIG_JSON)
    option = get_chain_option_by_id(config, chain_id).option

    return QueryHelpers(ChainClient(option), get_platform_address(option))


def get_platform_executor(chain_id: str) -> Executor:
    config = load_chain_config(settings.PATH_TO_CONFIG_JSON)
    chain = get_chain_option_by_id(config, chain_id)
    wallets = load_wallets(settings.PATH_TO_WALLETS_TOML, chain.option["TYPE"])
    client = get_signing_client(chain.option, chain.prefix, wallets["SEED_ADMIN"])

    return Executor(
        client,
        chain.option["GAS_PRICE_AMOUNT"],
        chain.option["DENOM"],
        get_platform_address(chain.option),
    )


def parse_amount(value: str) -> int:
    try:
        amount = int(value)
    except ValueError:
        raise InvalidFundingParameters(f"Amount must be an integer, got {value!r}") from None
    if amount <= 0:
        raise InvalidFundingParameters(f"Amount must be positive, got {amount}")
    return amount


def parse_token(value: str):
    try:
        return token_from_json(json.loads(value))
    except json.JSONDecodeError as e:
        raise InvalidFundingParameters(f"Token must be JSON, got {value!r}: {e}") from e


def parse_side(value: str) -> Side:
    try:
        return Side(value.lower())
    except ValueError:
        raise InvalidFundingParameters(f"Side must be head or tail, got {value!r}") from None


def deposit(executor: Executor, args: list):
    if len(args) != 2:
        raise ConfigLookupFailure("Usage: deposit <amount> <token_json>")
    return executor.deposit(parse_amount(args[0]), parse_token(args[1]))


def flip(executor: Executor, args: list):
    if len(args) != 3:
        raise ConfigLookupFailure("Usage: flip <head|tail> <amount> <token_json>")
    return executor.flip(parse_side(args[0]), parse_amount(args[1]), parse_token(args[2]))


ACTIONS = {
    "deposit": deposit,
    "flip": flip,
}


def call(args: list) -> None:
    if not args:
        raise ConfigLookupFailure("Must enter a chain id as 1st cli arg.")

    chain_id, action_args = args[0], args[1:]

    if not action_args:
        platform = get_platform_query_helpers(chain_id)
        platform.app_info(is_displayed=True)
        platform.config(is_displayed=True)
        return

    action, params = action_args[0], action_args[1:]
    if action not in ACTIONS:
        raise ConfigLookupFailure(f"Unknown action {action!r}, expected one of {sorted(ACTIONS)}")

    ACTIONS[action](get_platform_executor(chain_id), params)


def main(argv=None) -> int:
    return run(call, argv)


if __name__ == "__main__":
    sys.exit(main())
