"""
Store contract code.

    cw-store-contract <chain_id> <label>[,<label>...]

Uploads the wasm artifacts of the given contracts in one transaction, writes
the new code ids to the chain config and records checksums, code ids and the
tx hash in deployed-contracts/<chain_id>.toml.
"""

import logging
import os
import sys
from datetime import datetime

import toml

from .. import settings
from ..chain import get_signing_client
from ..config import get_chain_option_by_id, load_chain_config, load_wallets, save_chain_config
from ..errors import ConfigLookupFailure
from ..store_code import ArtifactStore, store_contracts
from . import parse_store_args, run

logger = logging.getLogger(__name__)


def get_deployment_record_path(chain_id: str) -> str:
    return os.path.join(settings.DEPLOYED_CONTRACTS_FOLDER_PATH, f"{chain_id}.toml")


def write_deployment_record(chain_id: str, result) -> str:
    path = get_deployment_record_path(chain_id)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    record = toml.load(path) if os.path.exists(path) else {}
    record["info"] = {
        "chain_id": chain_id,
        "deploy_date": datetime.now().strftime("%d/%m/%Y %H:%M:%S"),
        "store_tx_hash": result.tx_hash,
    }
    record.setdefault("checksums", {}).update(result.checksums)
    record.setdefault("code-ids", {}).update({label: code_id for label, code_id in result.code_ids})

    with open(path, "w", encoding=settings.ENCODING) as f:
        toml.dump(record, f)

    return path


def store(args: list) -> None:
    chain_id, label_list = parse_store_args(args)
    if not label_list:
        raise ConfigLookupFailure("Must enter contract labels as 2nd cli arg.")

    config = load_chain_config(settings.PATH_TO_CONFIG_JSON)
    chain = get_chain_option_by_id(config, chain_id)
    wallets = load_wallets(settings.PATH_TO_WALLETS_TOML, chain.option["TYPE"])
    client = get_signing_client(chain.option, chain.prefix, wallets["SEED_ADMIN"])

    result = store_contracts(
        config,
        chain_id,
        label_list,
        client,
        ArtifactStore(settings.ARTIFACTS_FOLDER_PATH).read,
    )

    save_chain_config(settings.PATH_TO_CONFIG_JSON, result.config)
    path = write_deployment_record(chain_id, result)
    logger.info("Deployment record saved to %s", path)


def main(argv=None) -> int:
    return run(store, argv)


if __name__ == "__main__":
    sys.exit(main())
