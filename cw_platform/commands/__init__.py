"""Command line entry points.

Each command takes positional arguments the way the deploy scripts always
have: `<chain_id> [<label>[,<label>...] ...]`.
"""

import logging
import sys

from ..errors import ConfigLookupFailure, CwPlatformError
from ..settings import configure_logging

logger = logging.getLogger(__name__)


def parse_store_args(argv: list) -> tuple:
    """Return (chain_id, label_list) from positional arguments."""
    if not argv:
        raise ConfigLookupFailure("Must enter a chain id as 1st cli arg.")

    chain_id = argv[0]
    label_list = [label for arg in argv[1:] for label in arg.split(",") if label]

    return chain_id, label_list


def run(command, argv=None) -> int:
    """Run command(argv) and turn any error into a logged failure and exit code 1."""
    configure_logging()
    args = sys.argv[1:] if argv is None else argv

    try:
        command(args)
    except CwPlatformError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except Exception:
        logger.exception("Unexpected error")
        return 1

    return 0
