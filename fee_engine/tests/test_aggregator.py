"""Fee aggregation tests: alignment, parsing, and failure values."""

import unittest

from chain_adapter.starknet.models import (
    Call,
    DeployAccountInvocation,
    DeployAccountPayload,
    InvocationType,
    InvokeInvocation,
)
from fee_engine.aggregator import (
    MalformedEstimateError,
    aggregate_estimated_fees,
    estimated_fees_to_response,
)
from fee_engine.errors import AccountError, AccountErrorCode, CannotAggregate
from fee_engine.models import AggregatedFeeResponse

TOKEN = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"

INVOKE = InvokeInvocation(calls=(Call(contract_address="0x5", entrypoint="transfer"),))
DEPLOY = DeployAccountInvocation(
    payload=DeployAccountPayload(
        class_hash="0xabc", constructor_calldata=(), salt="0x1", contract_address="0x9"
    )
)


def _estimate(gas: int, price: int = 10, data_gas: int = 2, data_price: int = 3) -> dict:
    return {
        "gas_consumed": hex(gas),
        "gas_price": hex(price),
        "data_gas_consumed": hex(data_gas),
        "data_gas_price": hex(data_price),
        "overall_fee": hex(gas * price + data_gas * data_price),
        "unit": "WEI",
    }


class AggregatorTests(unittest.TestCase):
    def test_single_invocation_figures(self) -> None:
        result = aggregate_estimated_fees([_estimate(100)], [INVOKE], TOKEN)
        self.assertIsInstance(result, AggregatedFeeResponse)
        fee = result.transactions
        self.assertEqual(fee.amount, 100)
        self.assertEqual(fee.price_per_unit, 10)
        self.assertEqual(fee.overall_fee, 1006)
        self.assertEqual(fee.max_amount, 150)
        self.assertEqual(fee.max_price_per_unit, 15)
        self.assertEqual(fee.max_fee, 150 * 15 + 6)
        self.assertIsNone(result.deployment)
        self.assertEqual(result.fee_token_address, TOKEN)
        self.assertEqual(result.overall_fee, 1006)

    def test_deploy_entry_attributed_separately(self) -> None:
        result = aggregate_estimated_fees(
            [_estimate(300), _estimate(100)], [DEPLOY, INVOKE], TOKEN
        )
        self.assertEqual(len(result.entries), 2)
        self.assertEqual(result.entries[0].invocation_type, InvocationType.DEPLOY_ACCOUNT)
        self.assertEqual(result.entries[1].invocation_type, InvocationType.INVOKE)
        self.assertEqual(result.deployment.overall_fee, 3006)
        self.assertEqual(result.transactions.overall_fee, 1006)
        self.assertEqual(result.overall_fee, 4012)
        self.assertEqual(
            result.max_fee, result.deployment.max_fee + result.transactions.max_fee
        )

    def test_entry_count_matches_batch(self) -> None:
        for count in (1, 2, 4):
            with self.subTest(count=count):
                invocations = [INVOKE] * count
                estimates = [_estimate(100 + index) for index in range(count)]
                result = aggregate_estimated_fees(estimates, invocations, TOKEN)
                self.assertEqual(len(result.entries), count)
                self.assertEqual(
                    result.transactions.amount, sum(100 + index for index in range(count))
                )

    def test_length_mismatch_is_cannot_aggregate(self) -> None:
        for estimates in ([], [_estimate(1)], [_estimate(1)] * 3):
            with self.subTest(count=len(estimates)):
                result = aggregate_estimated_fees(estimates, [DEPLOY, INVOKE], TOKEN)
                self.assertIsInstance(result, CannotAggregate)
                self.assertIn("Expected 2", result.reason)
                self.assertIsInstance(result.cause, ValueError)

    def test_missing_numeric_field_is_cannot_aggregate(self) -> None:
        raw = _estimate(100)
        del raw["gas_consumed"]
        result = aggregate_estimated_fees([raw], [INVOKE], TOKEN)
        self.assertIsInstance(result, CannotAggregate)
        self.assertIsInstance(result.cause, MalformedEstimateError)

    def test_non_numeric_and_negative_fields_rejected(self) -> None:
        for field, value in (("gas_price", "lots"), ("overall_fee", -1), ("gas_price", True)):
            with self.subTest(field=field, value=value):
                raw = _estimate(100)
                raw[field] = value
                result = aggregate_estimated_fees([raw], [INVOKE], TOKEN)
                self.assertIsInstance(result, CannotAggregate)

    def test_non_mapping_estimate_rejected(self) -> None:
        result = aggregate_estimated_fees([None], [INVOKE], TOKEN)
        self.assertIsInstance(result, CannotAggregate)

    def test_non_sequence_estimates_rejected(self) -> None:
        result = aggregate_estimated_fees(None, [INVOKE], TOKEN)
        self.assertIsInstance(result, CannotAggregate)
        self.assertIsInstance(result.cause, TypeError)

    def test_decimal_strings_and_missing_data_gas_accepted(self) -> None:
        raw = {"gas_consumed": "100", "gas_price": 10, "overall_fee": "1000"}
        result = aggregate_estimated_fees([raw], [INVOKE], TOKEN)
        self.assertEqual(result.transactions.data_gas_consumed, 0)
        self.assertEqual(result.transactions.overall_fee, 1000)
        self.assertEqual(result.unit, "WEI")

    def test_deploy_out_of_position_rejected(self) -> None:
        result = aggregate_estimated_fees(
            [_estimate(1), _estimate(2)], [INVOKE, DEPLOY], TOKEN
        )
        self.assertIsInstance(result, CannotAggregate)

    def test_deploy_only_batch_rejected(self) -> None:
        result = aggregate_estimated_fees([_estimate(1)], [DEPLOY], TOKEN)
        self.assertIsInstance(result, CannotAggregate)

    def test_mixed_units_rejected(self) -> None:
        fri = dict(_estimate(1), unit="FRI")
        result = aggregate_estimated_fees([_estimate(1), fri], [DEPLOY, INVOKE], TOKEN)
        self.assertIsInstance(result, CannotAggregate)

    def test_custom_overheads(self) -> None:
        result = aggregate_estimated_fees(
            [_estimate(101, price=7)], [INVOKE], TOKEN, amount_overhead=1.0, price_overhead=2.0
        )
        self.assertEqual(result.transactions.max_amount, 101)
        self.assertEqual(result.transactions.max_price_per_unit, 14)

    def test_raising_wrapper_carries_cause(self) -> None:
        with self.assertRaises(AccountError) as ctx:
            estimated_fees_to_response([_estimate(1)], [DEPLOY, INVOKE], TOKEN)
        self.assertEqual(ctx.exception.code, AccountErrorCode.CANNOT_ESTIMATE_TRANSACTIONS)
        self.assertIsInstance(ctx.exception.cause, ValueError)
        self.assertIs(ctx.exception.__cause__, ctx.exception.cause)

    def test_to_dict_wire_shape(self) -> None:
        result = estimated_fees_to_response(
            [_estimate(300), _estimate(100)], [DEPLOY, INVOKE], TOKEN
        )
        payload = result.to_dict()
        self.assertEqual(payload["feeTokenAddress"], TOKEN)
        self.assertEqual(payload["transactions"]["amount"], "100")
        self.assertEqual(payload["deployment"]["overallFee"], "3006")
        self.assertEqual([entry["type"] for entry in payload["entries"]], ["DEPLOY_ACCOUNT", "INVOKE_FUNCTION"])

        deployed_only = estimated_fees_to_response([_estimate(100)], [INVOKE], TOKEN)
        self.assertNotIn("deployment", deployed_only.to_dict())


if __name__ == "__main__":
    unittest.main()
