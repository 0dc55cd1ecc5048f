"""Invocation builder normalization tests."""

import unittest

from chain_adapter.starknet.models import Call, InvocationType
from fee_engine.builder import calls_to_invocation, ensure_calls
from fee_engine.errors import InvocationError


def _call(index: int) -> Call:
    return Call(contract_address=hex(0x100 + index), entrypoint="transfer", calldata=(hex(index),))


class InvocationBuilderTests(unittest.TestCase):
    def test_single_call_becomes_one_element(self) -> None:
        call = _call(1)
        invocation = calls_to_invocation(ensure_calls(call))
        self.assertEqual(invocation.calls, (call,))
        self.assertEqual(invocation.type, InvocationType.INVOKE)

    def test_sequence_preserves_length_and_order(self) -> None:
        for count in (1, 2, 5):
            with self.subTest(count=count):
                calls = [_call(index) for index in reversed(range(count))]
                invocation = calls_to_invocation(ensure_calls(calls))
                self.assertEqual(invocation.calls, tuple(calls))

    def test_duplicates_are_kept(self) -> None:
        call = _call(3)
        invocation = calls_to_invocation(ensure_calls([call, call]))
        self.assertEqual(len(invocation.calls), 2)

    def test_input_list_is_not_aliased(self) -> None:
        calls = [_call(1)]
        invocation = calls_to_invocation(ensure_calls(calls))
        calls.append(_call(2))
        self.assertEqual(len(invocation.calls), 1)

    def test_empty_input_rejected(self) -> None:
        with self.assertRaises(InvocationError):
            calls_to_invocation(ensure_calls([]))

    def test_malformed_call_rejected(self) -> None:
        with self.assertRaises(InvocationError):
            calls_to_invocation([Call(contract_address="", entrypoint="transfer")])
        with self.assertRaises(InvocationError):
            calls_to_invocation([Call(contract_address="0x1", entrypoint="")])
        with self.assertRaises(InvocationError):
            calls_to_invocation([{"contractAddress": "0x1"}])


if __name__ == "__main__":
    unittest.main()
