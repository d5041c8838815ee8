"""
Token funding for execute messages.

A deposit or a flip can be paid either with a native coin, attached to the
message funds, or with a CW20 token. CW20 funds can't be attached: the
message is wrapped into a CW20 `send` addressed to the token contract,
which transfers the amount and forwards the original payload to the target
contract.
"""

import json
from base64 import b64encode
from dataclasses import dataclass
from typing import Optional, Union

from cosmpy.common.utils import json_encode
from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin
from cosmpy.protos.cosmwasm.wasm.v1.tx_pb2 import MsgExecuteContract

from .errors import InvalidFundingParameters


@dataclass(frozen=True)
class Native:
    denom: str


@dataclass(frozen=True)
class Cw20:
    address: str


TokenUnverified = Union[Native, Cw20]


def token_from_json(value: dict) -> TokenUnverified:
    """Parse {"native": {"denom": ...}} or {"cw20": {"address": ...}}."""
    if not isinstance(value, dict) or len(value) != 1:
        raise InvalidFundingParameters(f"Unknown token: {value!r}")

    try:
        if "native" in value:
            return Native(denom=value["native"]["denom"])
        if "cw20" in value:
            return Cw20(address=value["cw20"]["address"])
    except (KeyError, TypeError) as e:
        raise InvalidFundingParameters(f"Malformed token: {value!r}") from e

    raise InvalidFundingParameters(f"Unknown token: {value!r}")


def encode_msg(msg) -> bytes:
    return json_encode(msg).encode("UTF8")


def get_execute_contract_msg(
    contract_address: str, sender_address: str, msg, funds: list
) -> MsgExecuteContract:
    return MsgExecuteContract(
        sender=sender_address,
        contract=contract_address,
        msg=encode_msg(msg),
        funds=funds,
    )


def get_single_token_exec_msg(
    contract_address: str,
    sender_address: str,
    msg,
    amount: Optional[int] = None,
    token: Optional[TokenUnverified] = None,
) -> MsgExecuteContract:
    # msg without funds
    if not (token and amount):
        return get_execute_contract_msg(contract_address, sender_address, msg, [])

    if isinstance(token, Native):
        return get_execute_contract_msg(
            contract_address,
            sender_address,
            msg,
            [Coin(denom=token.denom, amount=str(amount))],
        )

    if isinstance(token, Cw20):
        cw20_send_msg = {
            "send": {
                "contract": contract_address,
                "amount": str(amount),
                "msg": b64encode(encode_msg(msg)).decode("utf-8"),
            }
        }
        return get_execute_contract_msg(token.address, sender_address, cw20_send_msg, [])

    raise TypeError(f"Unsupported token type: {type(token).__name__}")


def add_single_token_to_msg(
    exec_msg: MsgExecuteContract,
    amount: Optional[int] = None,
    token: Optional[TokenUnverified] = None,
) -> MsgExecuteContract:
    """Rebuild a composed execute message with funds for amount of token."""
    if not (exec_msg.contract and exec_msg.sender and exec_msg.msg):
        raise InvalidFundingParameters(
            f"Execute message parameters error: contract={exec_msg.contract!r}, "
            f"sender={exec_msg.sender!r}, msg={exec_msg.msg!r}"
        )

    return get_single_token_exec_msg(
        exec_msg.contract,
        exec_msg.sender,
        json.loads(exec_msg.msg.decode("utf-8")),
        amount,
        token,
    )
