"""Estimate Starknet invocation fees offline without network calls."""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import (
    DeployAccountInvocation,
    Invocation,
    InvokeInvocation,
    RawFeeEstimate,
    normalize_address,
)

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when the provider cannot estimate an invocation batch."""


_INVOKE_BASE_GAS = 1_500
_PER_CALL_GAS = 600
_PER_CALLDATA_WORD_GAS = 50
_PER_SIGNATURE_VALIDATE_GAS = 250
_DEPLOY_BASE_GAS = 3_000
_DATA_GAS_BASE = 128
_DATA_GAS_PER_WORD = 32

DEFAULT_GAS_PRICE = 1_000_000_000
DEFAULT_DATA_GAS_PRICE = 100_000


class DryRunProvider:
    """Deterministic fee provider backed by an in-memory deployment registry."""

    def __init__(
        self,
        deployed: Optional[Mapping[str, str]] = None,
        gas_price: int = DEFAULT_GAS_PRICE,
        data_gas_price: int = DEFAULT_DATA_GAS_PRICE,
        unit: str = "WEI",
    ) -> None:
        if gas_price < 0 or data_gas_price < 0:
            raise ValueError("Gas prices must be non-negative.")
        self._class_hashes: Dict[str, str] = {
            normalize_address(address): class_hash
            for address, class_hash in (deployed or {}).items()
        }
        self._gas_price = gas_price
        self._data_gas_price = data_gas_price
        self._unit = unit

    def mark_deployed(self, address: str, class_hash: str) -> None:
        self._class_hashes[normalize_address(address)] = class_hash

    async def get_class_hash_at(self, address: str) -> Optional[str]:
        return self._class_hashes.get(normalize_address(address))

    async def estimate_fee(
        self,
        invocations: Sequence[Invocation],
        *,
        sender_address: str,
        signature_count: int = 1,
        skip_validate: bool = False,
    ) -> List[RawFeeEstimate]:
        if not invocations:
            raise ProviderError("Nothing to estimate.")

        sender = normalize_address(sender_address)
        deployed = sender in self._class_hashes
        estimates = []
        for index, invocation in enumerate(invocations):
            if isinstance(invocation, DeployAccountInvocation):
                if index != 0:
                    raise ProviderError("Account deployment must come first in a batch.")
                if deployed:
                    raise ProviderError(f"Account already deployed: {sender}")
                gas, words = _deploy_gas(invocation)
                deployed = True
            elif isinstance(invocation, InvokeInvocation):
                if not deployed:
                    raise ProviderError(f"Contract not found: {sender}")
                gas, words = _invoke_gas(invocation)
            else:
                raise ProviderError(f"Unsupported invocation: {invocation!r}")

            if not skip_validate:
                gas += _PER_SIGNATURE_VALIDATE_GAS * signature_count
            data_gas = _DATA_GAS_BASE + _DATA_GAS_PER_WORD * words
            estimates.append(self._to_rpc(gas, data_gas))

        logger.debug("Dry-run estimated %d invocation(s) for %s", len(estimates), sender)
        return estimates

    def _to_rpc(self, gas: int, data_gas: int) -> RawFeeEstimate:
        overall = gas * self._gas_price + data_gas * self._data_gas_price
        return {
            "gas_consumed": hex(gas),
            "gas_price": hex(self._gas_price),
            "data_gas_consumed": hex(data_gas),
            "data_gas_price": hex(self._data_gas_price),
            "overall_fee": hex(overall),
            "unit": self._unit,
        }


def _invoke_gas(invocation: InvokeInvocation) -> Tuple[int, int]:
    if not invocation.calls:
        raise ProviderError("Invoke invocation must include at least one call.")
    gas = _INVOKE_BASE_GAS
    words = 0
    for call in invocation.calls:
        if not call.contract_address or not call.entrypoint:
            raise ProviderError("Call must include a contract address and entrypoint.")
        gas += _PER_CALL_GAS + _PER_CALLDATA_WORD_GAS * len(call.calldata)
        # address, selector, calldata length, calldata
        words += 3 + len(call.calldata)
    return gas, words


def _deploy_gas(invocation: DeployAccountInvocation) -> Tuple[int, int]:
    payload = invocation.payload
    if not payload.class_hash.startswith("0x"):
        raise ProviderError("Deploy payload class hash must be hex-prefixed.")
    constructor_words = len(payload.constructor_calldata)
    gas = _DEPLOY_BASE_GAS + _PER_CALLDATA_WORD_GAS * constructor_words
    return gas, 2 + constructor_words

