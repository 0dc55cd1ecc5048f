"""Starknet adapter models for calls, invocations, and raw fee estimates."""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple, Union

RawFeeEstimate = Mapping[str, object]


class InvocationType(Enum):
    INVOKE = "INVOKE_FUNCTION"
    DEPLOY_ACCOUNT = "DEPLOY_ACCOUNT"


@dataclass(frozen=True)
class Call:
    contract_address: str
    entrypoint: str
    calldata: Tuple[str, ...] = ()

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "Call":
        return Call(
            contract_address=str(data["contractAddress"]),
            entrypoint=str(data["entrypoint"]),
            calldata=tuple(str(item) for item in data.get("calldata", ())),
        )


@dataclass(frozen=True)
class DeployAccountPayload:
    """Parameters needed to deploy an account contract."""

    class_hash: str
    constructor_calldata: Tuple[str, ...]
    salt: str
    contract_address: str


@dataclass(frozen=True)
class InvokeInvocation:
    calls: Tuple[Call, ...]

    @property
    def type(self) -> InvocationType:
        return InvocationType.INVOKE


@dataclass(frozen=True)
class DeployAccountInvocation:
    payload: DeployAccountPayload

    @property
    def type(self) -> InvocationType:
        return InvocationType.DEPLOY_ACCOUNT


Invocation = Union[InvokeInvocation, DeployAccountInvocation]
InvocationBatch = Tuple[Invocation, ...]


def normalize_address(address: str) -> str:
    """Return ``address`` as a lowercase, zero-padded 32-byte hex felt."""

    if not isinstance(address, str) or not address.lower().startswith("0x"):
        raise ValueError(f"Address must be a 0x-prefixed hex string: {address!r}")
    value = int(address, 16)
    if value >= 2**251:
        raise ValueError(f"Address out of felt range: {address}")
    return f"0x{value:064x}"
