"""Prepend an account deployment invocation for undeployed accounts."""

import logging
from typing import Protocol, Sequence

from chain_adapter.starknet.accounts import ChainAccount
from chain_adapter.starknet.models import (
    DeployAccountInvocation,
    DeployAccountPayload,
    Invocation,
    InvocationBatch,
)
from wallet_core.models import WalletAccount

logger = logging.getLogger(__name__)


class DeploymentLookup(Protocol):
    async def is_account_deployed(self, account: WalletAccount) -> bool:
        ...

    async def get_account_deployment_payload(
        self, account: WalletAccount
    ) -> DeployAccountPayload:
        ...


async def extend_invocations_by_account_deploy(
    invocations: Sequence[Invocation],
    account: WalletAccount,
    chain_account: ChainAccount,
    wallet: DeploymentLookup,
) -> InvocationBatch:
    """Return a new batch, with a deploy invocation first if one is needed.

    Lookup failures propagate; deployment state is never assumed.
    """

    batch = tuple(invocations)
    if await wallet.is_account_deployed(account):
        return batch

    payload = await wallet.get_account_deployment_payload(account)
    logger.debug(
        "Account %s not deployed; prepending deploy invocation (class %s)",
        chain_account.address,
        payload.class_hash,
    )
    return (DeployAccountInvocation(payload=payload),) + batch
