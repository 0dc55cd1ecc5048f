"""Operator CLI for account fee estimation."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Iterable, List, Optional, Tuple

from chain_adapter.starknet.models import Call
from chain_adapter.starknet.simulator import ProviderError
from fee_engine.config import Settings, load_settings
from fee_engine.errors import AccountError, InvocationError
from fee_engine.estimator import TransactionEstimator
from fee_engine.local import build_local_wallet, resolve_store_path
from fee_engine.models import EstimateRequest
from wallet_core.keystore import FileAccountStore
from wallet_core.models import AccountRef, AccountVariant


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="fee-estimator")
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    account_parser = subparsers.add_parser("account")
    account_sub = account_parser.add_subparsers(dest="account_command", required=True)

    account_add = account_sub.add_parser("add")
    _add_store_args(account_add)
    account_add.add_argument("--network")
    account_add.add_argument("--class-hash", required=True)
    account_add.add_argument("--label", required=True)
    account_add.add_argument(
        "--variant",
        choices=[variant.value for variant in AccountVariant],
        default=AccountVariant.STANDARD.value,
    )
    account_add.add_argument("--constructor-calldata", action="append", default=[])
    account_add.add_argument("--threshold", type=int, default=1)
    account_add.set_defaults(func=_account_add)

    account_list = account_sub.add_parser("list")
    _add_store_args(account_list)
    account_list.set_defaults(func=_account_list)

    account_deployed = account_sub.add_parser("mark-deployed")
    _add_account_args(account_deployed)
    account_deployed.set_defaults(func=_account_mark_deployed)

    estimate_parser = subparsers.add_parser("estimate")
    _add_account_args(estimate_parser)
    estimate_parser.add_argument("--fee-token")
    estimate_parser.add_argument(
        "--call",
        action="append",
        required=True,
        help="ADDRESS:ENTRYPOINT[:CALLDATA,...]",
    )
    estimate_parser.set_defaults(func=_estimate)

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )
        return args.func(args, settings)
    except AccountError as exc:
        print(f"ERROR [{exc.code.value}]: {exc.message}", file=sys.stderr)
        return 2
    except (ValueError, KeyError, InvocationError, ProviderError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


def _account_add(args: argparse.Namespace, settings: Settings) -> int:
    network_id = args.network or settings.default_network_id
    wallet = build_local_wallet(
        resolve_store_path(args.store, settings), settings, extra_networks=(network_id,)
    )
    record = wallet.add_account(
        network_id=network_id,
        class_hash=args.class_hash,
        label=args.label,
        variant=AccountVariant(args.variant),
        constructor_calldata=args.constructor_calldata,
        threshold=args.threshold,
    )
    print(record.address)
    return 0


def _account_list(args: argparse.Namespace, settings: Settings) -> int:
    wallet = build_local_wallet(resolve_store_path(args.store, settings), settings)
    for account in wallet.list_accounts():
        state = "undeployed" if account.needs_deploy else "deployed"
        print(
            f"{account.address} {account.network_id} {account.variant.value} "
            f"{state} {account.label}"
        )
    return 0


def _account_mark_deployed(args: argparse.Namespace, settings: Settings) -> int:
    store = FileAccountStore(resolve_store_path(args.store, settings))
    record = store.mark_deployed(_account_ref(args, settings))
    print(f"{record.address} deployed")
    return 0


def _estimate(args: argparse.Namespace, settings: Settings) -> int:
    wallet = build_local_wallet(resolve_store_path(args.store, settings), settings)
    estimator = TransactionEstimator(wallet, settings=settings)
    request = EstimateRequest(
        account=_account_ref(args, settings),
        fee_token_address=args.fee_token or settings.default_fee_token_address,
        transactions=_parse_calls(args.call),
    )
    response = asyncio.run(estimator.estimate(request))
    print(json.dumps(response.to_dict(), indent=2))
    return 0


def _add_store_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--store")


def _add_account_args(parser: argparse.ArgumentParser) -> None:
    _add_store_args(parser)
    parser.add_argument("--address", required=True)
    parser.add_argument("--network")


def _account_ref(args: argparse.Namespace, settings: Settings) -> AccountRef:
    return AccountRef(
        address=args.address,
        network_id=args.network or settings.default_network_id,
    )


def _parse_calls(values: Iterable[str]) -> Tuple[Call, ...]:
    calls = []
    for raw in values:
        parts = raw.split(":", 2)
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise ValueError("Call must be formatted as ADDRESS:ENTRYPOINT[:CALLDATA,...].")
        calldata: List[str] = []
        if len(parts) == 3 and parts[2]:
            calldata = [item.strip() for item in parts[2].split(",")]
        calls.append(
            Call.from_dict(
                {"contractAddress": parts[0], "entrypoint": parts[1], "calldata": calldata}
            )
        )
    return tuple(calls)


if __name__ == "__main__":
    raise SystemExit(main())
