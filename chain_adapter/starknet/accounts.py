"""Chain-account variants with explicitly declared capability sets."""

import logging
from enum import Enum
from typing import ClassVar, FrozenSet, List, Optional, Protocol, Sequence

from .models import Call, Invocation, InvokeInvocation, RawFeeEstimate

logger = logging.getLogger(__name__)


class Capability(Enum):
    FEE_ESTIMATION = "FEE_ESTIMATION"
    BULK_FEE_ESTIMATION = "BULK_FEE_ESTIMATION"


class FeeProvider(Protocol):
    async def estimate_fee(
        self,
        invocations: Sequence[Invocation],
        *,
        sender_address: str,
        signature_count: int,
        skip_validate: bool,
    ) -> List[RawFeeEstimate]:
        ...

    async def get_class_hash_at(self, address: str) -> Optional[str]:
        ...


class ChainAccount:
    """On-chain account handle. Subclasses widen ``capabilities``."""

    capabilities: ClassVar[FrozenSet[Capability]] = frozenset({Capability.FEE_ESTIMATION})

    def __init__(self, address: str, provider: FeeProvider) -> None:
        self._address = address
        self._provider = provider

    @property
    def address(self) -> str:
        return self._address

    @property
    def signature_count(self) -> int:
        return 1

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    async def estimate_fee(
        self, calls: Sequence[Call], skip_validate: bool = False
    ) -> RawFeeEstimate:
        estimates = await self._provider.estimate_fee(
            (InvokeInvocation(calls=tuple(calls)),),
            sender_address=self._address,
            signature_count=self.signature_count,
            skip_validate=skip_validate,
        )
        return estimates[0]


class BulkFeeEstimator(ChainAccount):
    """Account handle able to estimate a whole invocation batch in one call."""

    capabilities: ClassVar[FrozenSet[Capability]] = ChainAccount.capabilities | {
        Capability.BULK_FEE_ESTIMATION
    }

    async def estimate_fee_bulk(
        self, invocations: Sequence[Invocation], skip_validate: bool = False
    ) -> List[RawFeeEstimate]:
        logger.debug(
            "Bulk fee estimation for %s: %d invocation(s), skip_validate=%s",
            self._address,
            len(invocations),
            skip_validate,
        )
        return await self._provider.estimate_fee(
            tuple(invocations),
            sender_address=self._address,
            signature_count=self.signature_count,
            skip_validate=skip_validate,
        )


class StandardAccount(BulkFeeEstimator):
    """Default account contract."""


class PluginAccount(BulkFeeEstimator):
    @property
    def signature_count(self) -> int:
        # owner + plugin session key
        return 2


class MultisigAccount(BulkFeeEstimator):
    def __init__(self, address: str, provider: FeeProvider, threshold: int = 1) -> None:
        if threshold < 1:
            raise ValueError("Multisig threshold must be at least 1.")
        super().__init__(address, provider)
        self._threshold = threshold

    @property
    def signature_count(self) -> int:
        return self._threshold


class LegacyAccount(ChainAccount):
    """Pre-bulk account contract; only single-invocation estimates."""
