import logging

logger = logging.getLogger(__name__)


def update_code_ids(config: dict, chain_id: str, code_ids: list) -> dict:
    """Return a copy of config where the contracts of chain_id get new CODE values.

    code_ids is a list of (label, code_id) pairs. Only the containers on the
    path to a changed contract are rebuilt, everything else is shared with
    the input, which is never mutated. A falsy code_id is written as 0.
    """
    new_codes = {label: code_id or 0 for label, code_id in code_ids}

    def update_contract(contract):
        if contract.get("LABEL") not in new_codes:
            return contract

        previous = contract.get("CODE", 0)
        code_id = new_codes[contract["LABEL"]]
        if previous and previous != code_id:
            logger.warning(
                "Overwriting code id of %r on %s: %s -> %s",
                contract["LABEL"],
                chain_id,
                previous,
                code_id,
            )

        return {**contract, "CODE": code_id}

    def update_option(option):
        if option.get("CHAIN_ID") != chain_id:
            return option

        return {
            **option,
            "CONTRACTS": [update_contract(x) for x in option.get("CONTRACTS", [])],
        }

    def update_chain(chain):
        options = chain.get("OPTIONS", [])
        if not any(x.get("CHAIN_ID") == chain_id for x in options):
            return chain

        return {**chain, "OPTIONS": [update_option(x) for x in options]}

    return {**config, "CHAINS": [update_chain(x) for x in config.get("CHAINS", [])]}
