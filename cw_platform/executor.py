import logging
import math
from typing import Optional

from .chain import calculate_fee
from .composer import (
    PlatformMsgComposer,
    Range,
    Side,
    approve_collection_msg,
    migrate_contracts_msgs,
    mint_nft_msgs,
    revoke_collection_msg,
    transfer_admin_msg,
)
from .funding import TokenUnverified, add_single_token_to_msg

logger = logging.getLogger(__name__)

# fixed per-message budget for execute, migrate and update admin messages
GAS_LIMIT_PER_MSG = 300000


class Executor:
    """Signs composed messages into one transaction per call and broadcasts it.

    client is a signing cw_platform.chain.ChainClient (or anything with
    address and broadcast_batch).
    """

    def __init__(
        self,
        client,
        gas_price_amount: float,
        denom: str,
        platform_address: str = "",
        gas_limit_per_msg: int = GAS_LIMIT_PER_MSG,
    ):
        self.client = client
        self.gas_price_amount = gas_price_amount
        self.denom = denom
        self.gas_limit_per_msg = gas_limit_per_msg
        self.platform = PlatformMsgComposer(client.address, platform_address)

    def sign_and_broadcast(self, msgs: list, gas_adjustment: float = 1, memo: str = ""):
        gas_limit = math.ceil(self.gas_limit_per_msg * len(msgs) * gas_adjustment)
        fee = calculate_fee(gas_limit, self.gas_price_amount, self.denom)
        tx = self.client.broadcast_batch(msgs, fee, gas_limit, memo)
        logger.info("Tx %s: %d messages", tx.tx_hash, len(msgs))
        return tx

    # utils

    def transfer_admin(self, contract: str, new_admin: str, gas_adjustment: float = 1):
        msg = transfer_admin_msg(self.client.address, contract, new_admin)
        return self.sign_and_broadcast([msg], gas_adjustment)

    def migrate_contracts(
        self, contract_list: list, code_id: int, migrate_msg: dict, gas_adjustment: float = 1
    ):
        msgs = migrate_contracts_msgs(self.client.address, contract_list, code_id, migrate_msg)
        return self.sign_and_broadcast(msgs, gas_adjustment)

    def approve(self, collection_address: str, operator: str):
        msg = approve_collection_msg(collection_address, self.client.address, operator)
        return self.sign_and_broadcast([msg])

    def revoke(self, collection_address: str, operator: str):
        msg = revoke_collection_msg(collection_address, self.client.address, operator)
        return self.sign_and_broadcast([msg])

    def mint_nft(self, collection_address: str, recipient: str, token_id_list: list):
        msgs = mint_nft_msgs(self.client.address, collection_address, recipient, token_id_list)
        return self.sign_and_broadcast(msgs)

    # platform

    def flip(self, side: Side, amount: int, token: TokenUnverified):
        msg = add_single_token_to_msg(self.platform.flip(side), amount, token)
        return self.sign_and_broadcast([msg])

    def claim(self):
        return self.sign_and_broadcast([self.platform.claim()])

    def accept_admin_role(self):
        return self.sign_and_broadcast([self.platform.accept_admin_role()])

    def deposit(self, amount: int, token: TokenUnverified):
        msg = add_single_token_to_msg(self.platform.deposit(), amount, token)
        return self.sign_and_broadcast([msg])

    def withdraw(self, amount: int, recipient: Optional[str] = None):
        return self.sign_and_broadcast([self.platform.withdraw(amount, recipient)])

    def update_config(
        self,
        admin: Optional[str] = None,
        worker: Optional[str] = None,
        bet: Optional[Range] = None,
        platform_fee=None,
    ):
        msg = self.platform.update_config(admin, worker, bet, platform_fee)
        return self.sign_and_broadcast([msg])

    def pause(self):
        return self.sign_and_broadcast([self.platform.pause()])

    def unpause(self):
        return self.sign_and_broadcast([self.platform.unpause()])
