"""Domain models for wallet accounts."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple


class AccountVariant(Enum):
    STANDARD = "standard"
    MULTISIG = "multisig"
    PLUGIN = "plugin"
    LEGACY = "legacy"


@dataclass(frozen=True)
class AccountRef:
    """Address and network pair identifying a wallet account."""

    address: str
    network_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"address": self.address, "networkId": self.network_id}


@dataclass(frozen=True)
class WalletAccount:
    address: str
    network_id: str
    variant: AccountVariant
    label: str
    needs_deploy: bool

    @property
    def ref(self) -> AccountRef:
        return AccountRef(address=self.address, network_id=self.network_id)


@dataclass(frozen=True)
class AccountRecord:
    """Persisted account entry, including its deployment parameters."""

    address: str
    network_id: str
    variant: AccountVariant
    label: str
    class_hash: str
    constructor_calldata: Tuple[str, ...]
    salt: str
    deployed: bool = False
    threshold: int = 1

    @property
    def ref(self) -> AccountRef:
        return AccountRef(address=self.address, network_id=self.network_id)

    def to_account(self) -> WalletAccount:
        return WalletAccount(
            address=self.address,
            network_id=self.network_id,
            variant=self.variant,
            label=self.label,
            needs_deploy=not self.deployed,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "address": self.address,
            "network_id": self.network_id,
            "variant": self.variant.value,
            "label": self.label,
            "class_hash": self.class_hash,
            "constructor_calldata": list(self.constructor_calldata),
            "salt": self.salt,
            "deployed": self.deployed,
            "threshold": self.threshold,
        }

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "AccountRecord":
        return AccountRecord(
            address=data["address"],
            network_id=data["network_id"],
            variant=AccountVariant(data["variant"]),
            label=data.get("label", ""),
            class_hash=data["class_hash"],
            constructor_calldata=tuple(data.get("constructor_calldata", [])),
            salt=data["salt"],
            deployed=bool(data.get("deployed", False)),
            threshold=int(data.get("threshold", 1)),
        )
