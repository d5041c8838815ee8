"""
Snapshot the platform user list.

    cw-capture-users <chain_id>

Walks the whole user list and writes it, sorted by ROI descending, to
snapshots/<chain name>/<option type>/users.json.
"""

import json
import logging
import math
import os
import sys
from datetime import datetime, timezone

from .. import settings
from ..chain import ChainClient
from ..config import get_chain_option_by_id, get_contract_by_label, load_chain_config
from ..queries import QueryHelpers
from . import parse_store_args, run

logger = logging.getLogger(__name__)

PAGINATION_QUERY_AMOUNT = 200


def to_number(value: str) -> float:
    """Micro units to units, floored to one decimal."""
    return math.floor(int(value) / 1e6 * 10) / 10


def epoch_to_date_string_utc(seconds: int) -> str:
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def get_snapshot_path(name: str, wallet_type: str, file_name: str) -> str:
    return os.path.join(settings.SNAPSHOTS_FOLDER_PATH, name.lower(), wallet_type, file_name)


def format_user(item: dict) -> dict:
    info = item["info"]
    bets = info["stats"]["bets"]
    wins = info["stats"]["wins"]

    return {
        "address": item["address"],
        "bets": {"count": bets["count"], "value": to_number(bets["value"])},
        "wins": {"count": wins["count"], "value": to_number(wins["value"])},
        "roi": float(info["roi"]),
        "unclaimed": to_number(info["unclaimed"]),
        "lastFlipDate": epoch_to_date_string_utc(info["last_flip_date"]),
    }


def format_users(items: list) -> list:
    # sort by ROI descending
    ordered = sorted(items, key=lambda x: float(x["info"]["roi"]), reverse=True)
    return [format_user(x) for x in ordered]


def capture(args: list) -> None:
    chain_id, _ = parse_store_args(args)
    config = load_chain_config(settings.PATH_TO_CONFIG_JSON)
    chain = get_chain_option_by_id(config, chain_id)
    platform = get_contract_by_label(chain.option.get("CONTRACTS", []), "platform")

    helpers = QueryHelpers(ChainClient(chain.option), platform.get("ADDRESS", ""))
    res = helpers.user_list_all(PAGINATION_QUERY_AMOUNT)
    if not res.complete:
        logger.warning(
            "User list is partial: %d failed pages, exhausted=%s",
            len(res.failures),
            res.exhausted,
        )

    path = get_snapshot_path(chain.name, chain.option["TYPE"], "users.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding=settings.ENCODING) as f:
        f.write(json.dumps(format_users(res.items), indent=2))

    logger.info("%d users saved to %s", len(res.items), path)


def main(argv=None) -> int:
    return run(capture, argv)


if __name__ == "__main__":
    sys.exit(main())
