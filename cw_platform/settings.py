import logging
import os

ENCODING = "utf-8"

PATH_TO_CONFIG_JSON = os.getenv("CW_PLATFORM_CONFIG", "config/config.json")
PATH_TO_WALLETS_TOML = os.getenv("CW_PLATFORM_WALLETS", "config/wallets.toml")
ARTIFACTS_FOLDER_PATH = os.getenv("CW_PLATFORM_ARTIFACTS", "../contracts/artifacts")
SNAPSHOTS_FOLDER_PATH = os.getenv("CW_PLATFORM_SNAPSHOTS", "snapshots")
DEPLOYED_CONTRACTS_FOLDER_PATH = os.getenv("CW_PLATFORM_DEPLOYED", "deployed-contracts")


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
