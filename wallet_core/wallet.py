"""Wallet service resolving accounts, chain handles, and deployment state."""

from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Type
import hashlib
import logging
import secrets

from chain_adapter.starknet.accounts import (
    ChainAccount,
    FeeProvider,
    LegacyAccount,
    MultisigAccount,
    PluginAccount,
    StandardAccount,
)
from chain_adapter.starknet.models import DeployAccountPayload, normalize_address

from .keystore import AccountStore
from .models import AccountRecord, AccountRef, AccountVariant, WalletAccount

logger = logging.getLogger(__name__)

_FELT_MASK = (1 << 251) - 1

ACCOUNT_CLASSES: Dict[AccountVariant, Type[ChainAccount]] = {
    AccountVariant.STANDARD: StandardAccount,
    AccountVariant.MULTISIG: MultisigAccount,
    AccountVariant.PLUGIN: PluginAccount,
    AccountVariant.LEGACY: LegacyAccount,
}


class UnknownNetworkError(KeyError):
    """Raised when no fee provider is configured for a network."""


class LocalWallet:
    """Local-only wallet backed by an account store and per-network providers."""

    def __init__(
        self,
        store: AccountStore,
        providers: Mapping[str, FeeProvider],
        salt_provider: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._providers = dict(providers)
        self._salt_provider = salt_provider or _random_salt

    def add_account(
        self,
        network_id: str,
        class_hash: str,
        label: str,
        variant: AccountVariant = AccountVariant.STANDARD,
        constructor_calldata: Sequence[str] = (),
        threshold: int = 1,
    ) -> AccountRecord:
        self._provider(network_id)
        salt = self._salt_provider()
        calldata = tuple(constructor_calldata)
        address = derive_contract_address(class_hash, salt, calldata)
        record = AccountRecord(
            address=address,
            network_id=network_id,
            variant=variant,
            label=label,
            class_hash=class_hash,
            constructor_calldata=calldata,
            salt=salt,
            threshold=threshold,
        )
        if self._store.find(record.ref) is not None:
            raise ValueError("Account already exists for deployment parameters.")
        self._store.store(record)
        logger.info("Added %s account %s on %s", variant.value, address, network_id)
        return record

    def list_accounts(self) -> Tuple[WalletAccount, ...]:
        return tuple(record.to_account() for record in self._store.list_records())

    async def get_account(self, ref: AccountRef) -> Optional[WalletAccount]:
        record = self._store.find(ref)
        return record.to_account() if record is not None else None

    async def get_chain_account(self, ref: AccountRef) -> ChainAccount:
        record = self._store.load(ref)
        provider = self._provider(record.network_id)
        account_class = ACCOUNT_CLASSES[record.variant]
        if account_class is MultisigAccount:
            return MultisigAccount(record.address, provider, threshold=record.threshold)
        return account_class(record.address, provider)

    async def is_account_deployed(self, account: WalletAccount) -> bool:
        if not account.needs_deploy:
            return True
        provider = self._provider(account.network_id)
        class_hash = await provider.get_class_hash_at(account.address)
        if class_hash is None:
            return False
        self._store.mark_deployed(account.ref)
        logger.info("Account %s found on-chain; marked deployed", account.address)
        return True

    async def get_account_deployment_payload(
        self, account: WalletAccount
    ) -> DeployAccountPayload:
        record = self._store.load(account.ref)
        return DeployAccountPayload(
            class_hash=record.class_hash,
            constructor_calldata=record.constructor_calldata,
            salt=record.salt,
            contract_address=record.address,
        )

    def _provider(self, network_id: str) -> FeeProvider:
        try:
            return self._providers[network_id]
        except KeyError:
            raise UnknownNetworkError(f"No provider configured for network: {network_id}") from None


def derive_contract_address(
    class_hash: str, salt: str, constructor_calldata: Sequence[str]
) -> str:
    """Deterministic counterfactual address for an undeployed account."""

    material = ":".join((class_hash.lower(), salt.lower(), *constructor_calldata))
    digest = hashlib.sha256(material.encode("utf-8")).digest()
    return normalize_address(hex(int.from_bytes(digest, "big") & _FELT_MASK))


def _random_salt() -> str:
    return hex(int.from_bytes(secrets.token_bytes(31), "big"))
