from .keystore import AccountStore, FileAccountStore
from .models import AccountRecord, AccountRef, AccountVariant, WalletAccount
from .wallet import ACCOUNT_CLASSES, LocalWallet, UnknownNetworkError, derive_contract_address

__all__ = [
    "ACCOUNT_CLASSES",
    "AccountRecord",
    "AccountRef",
    "AccountStore",
    "AccountVariant",
    "FileAccountStore",
    "LocalWallet",
    "UnknownNetworkError",
    "WalletAccount",
    "derive_contract_address",
]
