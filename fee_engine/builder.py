"""Normalize call input into a single invoke invocation."""

from typing import Sequence, Tuple, Union

from chain_adapter.starknet.models import Call, InvokeInvocation

from .errors import InvocationError


def ensure_calls(transactions: Union[Call, Sequence[Call]]) -> Tuple[Call, ...]:
    if isinstance(transactions, Call):
        return (transactions,)
    return tuple(transactions)


def calls_to_invocation(calls: Sequence[Call]) -> InvokeInvocation:
    calls = tuple(calls)
    if not calls:
        raise InvocationError("At least one call is required.")
    for call in calls:
        _validate_call(call)
    return InvokeInvocation(calls=calls)


def _validate_call(call: Call) -> None:
    if not isinstance(call, Call):
        raise InvocationError(f"Expected a Call, got {type(call).__name__}.")
    if not call.contract_address:
        raise InvocationError("Call contract address must be non-empty.")
    if not call.entrypoint:
        raise InvocationError("Call entrypoint must be non-empty.")
