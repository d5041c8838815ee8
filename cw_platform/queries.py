import logging
from typing import Optional

from .pagination import ITER_LIMIT, MAX_LIMIT, PageResult, paginate

logger = logging.getLogger(__name__)


def query_all_operators_msg(owner: str) -> dict:
    return {"all_operators": {"owner": owner}}


def query_approvals_msg(token_id: str) -> dict:
    return {"approvals": {"token_id": token_id}}


def query_tokens_msg(owner: str, start_after: Optional[str], limit: int) -> dict:
    msg = {"owner": owner, "limit": limit}
    if start_after is not None:
        msg["start_after"] = start_after
    return {"tokens": msg}


def query_owner_of_msg(token_id: str) -> dict:
    return {"owner_of": {"token_id": token_id}}


def query_user_list_msg(amount: int, start_after: Optional[str]) -> dict:
    msg = {"amount": amount}
    if start_after is not None:
        msg["start_after"] = start_after
    return {"user_list": msg}


def _log_and_return(res, is_displayed: bool):
    if is_displayed:
        logger.info("%s", res)
    return res


class QueryHelpers:
    """Smart queries for CW721 collections and the platform contract.

    client is anything with query_smart(address, msg), normally a
    cw_platform.chain.ChainClient.
    """

    def __init__(self, client, platform_address: str = ""):
        self.client = client
        self.platform_address = platform_address

    # utils

    def operators(self, owner: str, collection_address: str, is_displayed: bool = False):
        res = self.client.query_smart(collection_address, query_all_operators_msg(owner))
        return _log_and_return(res, is_displayed)

    def is_collection_approved(self, owner: str, operator: str, collection_address: str) -> bool:
        res = self.operators(owner, collection_address)
        return any(x.get("spender") == operator for x in res.get("operators", []))

    def approvals(self, collection_address: str, token_id: str, is_displayed: bool = False):
        res = self.client.query_smart(collection_address, query_approvals_msg(token_id))
        return _log_and_return(res, is_displayed)

    def balance_in_nft(
        self,
        owner: str,
        collection_address: str,
        is_displayed: bool = False,
        limit: int = MAX_LIMIT,
        iter_limit: int = ITER_LIMIT,
    ) -> PageResult:
        """All token ids of owner in the collection."""

        def fetch_page(start_after, page_limit):
            res = self.client.query_smart(
                collection_address, query_tokens_msg(owner, start_after, page_limit)
            )
            return res["tokens"]

        res = paginate(fetch_page, lambda token_id: token_id, limit, iter_limit)
        return _log_and_return(res, is_displayed)

    def nft_owner(self, collection_address: str, token_id: str, is_displayed: bool = False):
        res = self.client.query_smart(collection_address, query_owner_of_msg(token_id))
        return _log_and_return(res, is_displayed)

    # platform

    def _platform(self, msg: dict):
        return self.client.query_smart(self.platform_address, msg)

    def config(self, is_displayed: bool = False):
        return _log_and_return(self._platform({"config": {}}), is_displayed)

    def app_info(self, is_displayed: bool = False):
        return _log_and_return(self._platform({"app_info": {}}), is_displayed)

    def required_to_deposit(self, is_displayed: bool = False):
        return _log_and_return(self._platform({"required_to_deposit": {}}), is_displayed)

    def available_to_withdraw(self, is_displayed: bool = False):
        return _log_and_return(self._platform({"available_to_withdraw": {}}), is_displayed)

    def user(self, address: str, is_displayed: bool = False):
        return _log_and_return(self._platform({"user": {"address": address}}), is_displayed)

    def user_list(
        self, amount: int = MAX_LIMIT, start_after: Optional[str] = None, is_displayed: bool = False
    ):
        res = self._platform(query_user_list_msg(amount, start_after))
        return _log_and_return(res, is_displayed)

    def user_list_all(self, amount: int = MAX_LIMIT, iter_limit: int = ITER_LIMIT) -> PageResult:
        return paginate(
            lambda start_after, limit: self.user_list(limit, start_after),
            lambda item: item["address"],
            amount,
            iter_limit,
        )
