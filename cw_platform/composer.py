"""
Message composer for the platform contract and CW721/admin utilities.

Every builder returns unsigned protobuf messages. Signing and broadcasting
belong to cw_platform.executor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cosmpy.protos.cosmwasm.wasm.v1.tx_pb2 import (
    MsgExecuteContract,
    MsgMigrateContract,
    MsgUpdateAdmin,
)

from .funding import encode_msg, get_single_token_exec_msg


class Side(str, Enum):
    HEAD = "head"
    TAIL = "tail"


@dataclass(frozen=True)
class Range:
    min: int
    max: int

    def to_json(self) -> dict:
        return {"min": str(self.min), "max": str(self.max)}


def _drop_none(fields: dict) -> dict:
    # unset fields must stay off the wire, the contract treats null as a reset
    return {k: v for k, v in fields.items() if v is not None}


class PlatformMsgComposer:
    def __init__(self, sender: str, contract_address: str):
        self.sender = sender
        self.contract_address = contract_address

    def _msg(self, msg: dict) -> MsgExecuteContract:
        return get_single_token_exec_msg(self.contract_address, self.sender, msg)

    def deposit(self) -> MsgExecuteContract:
        return self._msg({"deposit": {}})

    def withdraw(self, amount: int, recipient: Optional[str] = None) -> MsgExecuteContract:
        return self._msg(
            {"withdraw": _drop_none({"amount": str(amount), "recipient": recipient})}
        )

    def flip(self, side: Side) -> MsgExecuteContract:
        return self._msg({"flip": {"side": Side(side).value}})

    def claim(self) -> MsgExecuteContract:
        return self._msg({"claim": {}})

    def accept_admin_role(self) -> MsgExecuteContract:
        return self._msg({"accept_admin_role": {}})

    def update_config(
        self,
        admin: Optional[str] = None,
        worker: Optional[str] = None,
        bet: Optional[Range] = None,
        platform_fee=None,
    ) -> MsgExecuteContract:
        """Only the given fields are sent, the contract keeps the others."""
        fields = {
            "admin": admin,
            "worker": worker,
            "bet": bet.to_json() if bet is not None else None,
            "platform_fee": str(platform_fee) if platform_fee is not None else None,
        }
        return self._msg({"update_config": _drop_none(fields)})

    def pause(self) -> MsgExecuteContract:
        return self._msg({"pause": {}})

    def unpause(self) -> MsgExecuteContract:
        return self._msg({"unpause": {}})


def transfer_admin_msg(sender: str, contract: str, new_admin: str) -> MsgUpdateAdmin:
    return MsgUpdateAdmin(sender=sender, new_admin=new_admin, contract=contract)


def migrate_contracts_msgs(
    sender: str, contract_list: list, code_id: int, migrate_msg: dict
) -> list:
    """One MsgMigrateContract per contract, all moved to the same code id."""
    return [
        MsgMigrateContract(
            sender=sender,
            contract=contract,
            code_id=code_id,
            msg=encode_msg(migrate_msg),
        )
        for contract in contract_list
    ]


def mint_nft_msgs(
    sender: str, collection_address: str, recipient: str, token_id_list: list
) -> list:
    return [
        get_single_token_exec_msg(
            collection_address,
            sender,
            {"mint": {"owner": recipient, "token_id": str(token_id)}},
        )
        for token_id in token_id_list
    ]


def approve_collection_msg(
    collection_address: str, sender_address: str, operator: str
) -> MsgExecuteContract:
    return get_single_token_exec_msg(
        collection_address, sender_address, {"approve_all": {"operator": operator}}
    )


def revoke_collection_msg(
    collection_address: str, sender_address: str, operator: str
) -> MsgExecuteContract:
    return get_single_token_exec_msg(
        collection_address, sender_address, {"revoke_all": {"operator": operator}}
    )
