"""Smoke tests for the operator CLI."""

import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path
from unittest import mock

from operator_cli.cli import main

CLASS_HASH = "0x36078334509b514626504edc9fb252328d1a240e4e948bef8d0c08dff45927f"
TOKEN = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"


class OperatorCliSmokeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.TemporaryDirectory()
        self.store = str(Path(self.tempdir.name) / "accounts.json")

    def tearDown(self) -> None:
        self.tempdir.cleanup()

    def _run(self, args):
        out = StringIO()
        err = StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(args)
        return code, out.getvalue(), err.getvalue()

    def _add_account(self, variant: str = "standard") -> str:
        code, output, _ = self._run(
            [
                "account",
                "add",
                "--store",
                self.store,
                "--network",
                "sepolia-alpha",
                "--class-hash",
                CLASS_HASH,
                "--label",
                "primary",
                "--variant",
                variant,
                "--constructor-calldata",
                "0x1",
            ]
        )
        self.assertEqual(code, 0)
        return output.strip()

    def _estimate(self, address: str, *calls: str):
        args = [
            "estimate",
            "--store",
            self.store,
            "--address",
            address,
            "--network",
            "sepolia-alpha",
            "--fee-token",
            TOKEN,
        ]
        for call in calls:
            args.extend(["--call", call])
        return self._run(args)

    def test_estimate_undeployed_includes_deployment(self) -> None:
        address = self._add_account()
        code, output, _ = self._estimate(address, f"{TOKEN}:transfer:0x5,0x64,0x0")
        self.assertEqual(code, 0)
        payload = json.loads(output)
        self.assertEqual(payload["feeTokenAddress"], TOKEN)
        self.assertIn("deployment", payload)
        self.assertEqual(len(payload["entries"]), 2)

    def test_estimate_after_mark_deployed(self) -> None:
        address = self._add_account()
        code, output, _ = self._run(
            [
                "account",
                "mark-deployed",
                "--store",
                self.store,
                "--address",
                address,
                "--network",
                "sepolia-alpha",
            ]
        )
        self.assertEqual(code, 0)
        self.assertIn("deployed", output)

        code, output, _ = self._estimate(address, f"{TOKEN}:approve", f"{TOKEN}:transfer:0x5")
        self.assertEqual(code, 0)
        payload = json.loads(output)
        self.assertNotIn("deployment", payload)
        self.assertEqual(len(payload["entries"]), 1)

    def test_account_list(self) -> None:
        address = self._add_account()
        code, output, _ = self._run(["account", "list", "--store", self.store])
        self.assertEqual(code, 0)
        self.assertIn(address, output)
        self.assertIn("undeployed", output)

    def test_unknown_account_reports_code(self) -> None:
        code, _, err = self._estimate("0x1234", f"{TOKEN}:transfer")
        self.assertEqual(code, 2)
        self.assertIn("ERROR [NOT_FOUND]", err)

    def test_legacy_account_reports_missing_method(self) -> None:
        address = self._add_account(variant="legacy")
        code, _, err = self._estimate(address, f"{TOKEN}:transfer")
        self.assertEqual(code, 2)
        self.assertIn("ERROR [MISSING_METHOD]", err)

    def test_malformed_call_rejected(self) -> None:
        address = self._add_account()
        code, _, err = self._estimate(address, "no-entrypoint")
        self.assertEqual(code, 2)
        self.assertIn("ERROR:", err)

    def test_invalid_settings_reported_without_traceback(self) -> None:
        for name, value in (
            ("FEE_ESTIMATOR_LOG_LEVEL", "chatty"),
            ("FEE_ESTIMATOR_AMOUNT_OVERHEAD", "0.5"),
        ):
            with self.subTest(name=name):
                with mock.patch.dict(os.environ, {name: value}):
                    code, output, err = self._run(["account", "list", "--store", self.store])
                self.assertEqual(code, 2)
                self.assertEqual(output, "")
                self.assertTrue(err.startswith("ERROR: "))
                self.assertNotIn("Traceback", err)

    def test_log_level_is_case_insensitive(self) -> None:
        with mock.patch.dict(os.environ, {"FEE_ESTIMATOR_LOG_LEVEL": "warning"}):
            code, _, _ = self._run(["account", "list", "--store", self.store])
        self.assertEqual(code, 0)


if __name__ == "__main__":
    unittest.main()
