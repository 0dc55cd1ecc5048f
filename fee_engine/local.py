"""Wire a local wallet to offline dry-run providers."""

from pathlib import Path
from typing import Dict, Iterable, Optional

from chain_adapter.starknet.simulator import DryRunProvider
from wallet_core.keystore import FileAccountStore
from wallet_core.wallet import LocalWallet

from .config import Settings


def build_local_wallet(
    store_path: Path,
    settings: Settings,
    extra_networks: Iterable[str] = (),
) -> LocalWallet:
    """One dry-run provider per known network, seeded with deployed accounts."""

    store = FileAccountStore(store_path)
    records = store.list_records()
    networks = {settings.default_network_id, *extra_networks}
    networks.update(record.network_id for record in records)

    providers: Dict[str, DryRunProvider] = {}
    for network_id in sorted(networks):
        providers[network_id] = DryRunProvider(
            deployed={
                record.address: record.class_hash
                for record in records
                if record.network_id == network_id and record.deployed
            },
            gas_price=settings.dry_run_gas_price,
            data_gas_price=settings.dry_run_data_gas_price,
        )
    return LocalWallet(store=store, providers=providers)


def resolve_store_path(path: Optional[str], settings: Settings) -> Path:
    return Path(path or settings.account_store_path)
