"""Fold per-invocation fee estimates into one aggregated response."""

from decimal import Decimal
import logging
import math
from typing import Mapping, Sequence, Union

from chain_adapter.starknet.models import Invocation, InvocationType, RawFeeEstimate

from .errors import CannotAggregate
from .models import AggregatedFeeResponse, EstimatedFee, InvocationFee

logger = logging.getLogger(__name__)

DEFAULT_AMOUNT_OVERHEAD = 1.5
DEFAULT_PRICE_OVERHEAD = 1.5

_REQUIRED_FIELDS = ("gas_consumed", "gas_price", "overall_fee")
_OPTIONAL_FIELDS = ("data_gas_consumed", "data_gas_price")


class MalformedEstimateError(ValueError):
    """Raised when a raw estimate is missing or has invalid numeric fields."""


def aggregate_estimated_fees(
    estimates: Sequence[RawFeeEstimate],
    invocations: Sequence[Invocation],
    fee_token_address: str,
    amount_overhead: float = DEFAULT_AMOUNT_OVERHEAD,
    price_overhead: float = DEFAULT_PRICE_OVERHEAD,
) -> Union[AggregatedFeeResponse, CannotAggregate]:
    try:
        return _aggregate(
            estimates, invocations, fee_token_address, amount_overhead, price_overhead
        )
    except Exception as exc:
        logger.warning("Fee aggregation failed: %s", exc)
        return CannotAggregate(reason=str(exc), cause=exc)


def estimated_fees_to_response(
    estimates: Sequence[RawFeeEstimate],
    invocations: Sequence[Invocation],
    fee_token_address: str,
    amount_overhead: float = DEFAULT_AMOUNT_OVERHEAD,
    price_overhead: float = DEFAULT_PRICE_OVERHEAD,
) -> AggregatedFeeResponse:
    result = aggregate_estimated_fees(
        estimates, invocations, fee_token_address, amount_overhead, price_overhead
    )
    if isinstance(result, CannotAggregate):
        error = result.to_error()
        raise error from result.cause
    return result


def _aggregate(
    estimates: Sequence[RawFeeEstimate],
    invocations: Sequence[Invocation],
    fee_token_address: str,
    amount_overhead: float,
    price_overhead: float,
) -> AggregatedFeeResponse:
    if len(estimates) != len(invocations):
        raise ValueError(
            f"Expected {len(invocations)} fee estimate(s), received {len(estimates)}."
        )
    if not invocations:
        raise ValueError("No invocations to aggregate.")

    entries = []
    for index, (raw, invocation) in enumerate(zip(estimates, invocations)):
        if invocation.type == InvocationType.DEPLOY_ACCOUNT and index != 0:
            raise ValueError("Deploy invocation must be the first batch entry.")
        fee = _parse_estimate(raw, index, amount_overhead, price_overhead)
        entries.append(
            InvocationFee(index=index, invocation_type=invocation.type, fee=fee)
        )

    units = {entry.fee.unit for entry in entries}
    if len(units) != 1:
        raise ValueError(f"Fee estimates use mixed units: {sorted(units)}.")

    deployment = None
    if entries[0].invocation_type == InvocationType.DEPLOY_ACCOUNT:
        deployment = entries[0].fee

    transaction_fees = [
        entry.fee for entry in entries if entry.invocation_type == InvocationType.INVOKE
    ]
    if not transaction_fees:
        raise ValueError("Batch contains no transaction invocation.")

    return AggregatedFeeResponse(
        fee_token_address=fee_token_address,
        transactions=_combine(transaction_fees),
        entries=tuple(entries),
        overall_fee=sum(entry.fee.overall_fee for entry in entries),
        max_fee=sum(entry.fee.max_fee for entry in entries),
        unit=units.pop(),
        deployment=deployment,
    )


def _parse_estimate(
    raw: RawFeeEstimate, index: int, amount_overhead: float, price_overhead: float
) -> EstimatedFee:
    if not isinstance(raw, Mapping):
        raise MalformedEstimateError(f"Estimate {index} is not a mapping.")

    values = {}
    for field in _REQUIRED_FIELDS:
        if raw.get(field) is None:
            raise MalformedEstimateError(f"Estimate {index} is missing '{field}'.")
        values[field] = _to_int(raw[field], field, index)
    for field in _OPTIONAL_FIELDS:
        values[field] = _to_int(raw.get(field) or 0, field, index)

    amount = values["gas_consumed"]
    price = values["gas_price"]
    data_fee = values["data_gas_consumed"] * values["data_gas_price"]
    max_amount = _apply_overhead(amount, amount_overhead)
    max_price = _apply_overhead(price, price_overhead)

    return EstimatedFee(
        amount=amount,
        price_per_unit=price,
        data_gas_consumed=values["data_gas_consumed"],
        data_gas_price=values["data_gas_price"],
        overall_fee=values["overall_fee"],
        unit=str(raw.get("unit") or "WEI"),
        max_amount=max_amount,
        max_price_per_unit=max_price,
        max_fee=max_amount * max_price + data_fee,
    )


def _combine(fees: Sequence[EstimatedFee]) -> EstimatedFee:
    if len(fees) == 1:
        return fees[0]
    return EstimatedFee(
        amount=sum(fee.amount for fee in fees),
        price_per_unit=max(fee.price_per_unit for fee in fees),
        data_gas_consumed=sum(fee.data_gas_consumed for fee in fees),
        data_gas_price=max(fee.data_gas_price for fee in fees),
        overall_fee=sum(fee.overall_fee for fee in fees),
        unit=fees[0].unit,
        max_amount=sum(fee.max_amount for fee in fees),
        max_price_per_unit=max(fee.max_price_per_unit for fee in fees),
        max_fee=sum(fee.max_fee for fee in fees),
    )


def _to_int(value: object, field: str, index: int) -> int:
    if isinstance(value, bool):
        raise MalformedEstimateError(f"Estimate {index} field '{field}' is not numeric.")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        try:
            result = int(value, 16) if value.lower().startswith("0x") else int(value, 10)
        except ValueError as exc:
            raise MalformedEstimateError(
                f"Estimate {index} field '{field}' is not numeric: {value!r}"
            ) from exc
    else:
        raise MalformedEstimateError(f"Estimate {index} field '{field}' is not numeric.")
    if result < 0:
        raise MalformedEstimateError(f"Estimate {index} field '{field}' is negative.")
    return result


def _apply_overhead(value: int, overhead: float) -> int:
    return math.ceil(Decimal(value) * Decimal(str(overhead)))
