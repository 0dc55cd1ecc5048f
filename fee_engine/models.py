"""Domain models for the fee estimation pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

from chain_adapter.starknet.models import Call, InvocationType
from wallet_core.models import AccountRef


@dataclass(frozen=True)
class EstimateRequest:
    account: AccountRef
    fee_token_address: str
    transactions: Union[Call, Sequence[Call]]


class EstimationState(Enum):
    IDLE = "IDLE"
    ACCOUNT_RESOLVED = "ACCOUNT_RESOLVED"
    INVOCATION_BUILT = "INVOCATION_BUILT"
    BATCH_EXTENDED = "BATCH_EXTENDED"
    CAPABILITY_VERIFIED = "CAPABILITY_VERIFIED"
    ESTIMATED = "ESTIMATED"
    AGGREGATED = "AGGREGATED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class EstimatedFee:
    amount: int
    price_per_unit: int
    data_gas_consumed: int
    data_gas_price: int
    overall_fee: int
    unit: str
    max_amount: int
    max_price_per_unit: int
    max_fee: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "amount": str(self.amount),
            "pricePerUnit": str(self.price_per_unit),
            "dataGasConsumed": str(self.data_gas_consumed),
            "dataGasPrice": str(self.data_gas_price),
            "overallFee": str(self.overall_fee),
            "unit": self.unit,
            "max": {
                "amount": str(self.max_amount),
                "pricePerUnit": str(self.max_price_per_unit),
                "maxFee": str(self.max_fee),
            },
        }


@dataclass(frozen=True)
class InvocationFee:
    index: int
    invocation_type: InvocationType
    fee: EstimatedFee

    def to_dict(self) -> Dict[str, object]:
        return {
            "index": self.index,
            "type": self.invocation_type.value,
            "fee": self.fee.to_dict(),
        }


@dataclass(frozen=True)
class AggregatedFeeResponse:
    """Combined estimate for every invocation in a batch."""

    fee_token_address: str
    transactions: EstimatedFee
    entries: Tuple[InvocationFee, ...]
    overall_fee: int
    max_fee: int
    unit: str
    deployment: Optional[EstimatedFee] = None

    def to_dict(self) -> Dict[str, object]:
        result: Dict[str, object] = {
            "feeTokenAddress": self.fee_token_address,
            "transactions": self.transactions.to_dict(),
            "entries": [entry.to_dict() for entry in self.entries],
            "overallFee": str(self.overall_fee),
            "maxFee": str(self.max_fee),
            "unit": self.unit,
        }
        if self.deployment is not None:
            result["deployment"] = self.deployment.to_dict()
        return result
