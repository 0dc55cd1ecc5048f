"""Sequential transaction fee estimation pipeline."""

import logging
from typing import Callable, Optional, Protocol

from chain_adapter.starknet.accounts import ChainAccount
from wallet_core.models import AccountRef, WalletAccount

from .aggregator import aggregate_estimated_fees
from .builder import calls_to_invocation, ensure_calls
from .capability import require_bulk_fee_estimation
from .config import Settings
from .deploy import DeploymentLookup, extend_invocations_by_account_deploy
from .errors import AccountError, AccountErrorCode, CannotAggregate
from .models import AggregatedFeeResponse, EstimateRequest, EstimationState

logger = logging.getLogger(__name__)


class Wallet(DeploymentLookup, Protocol):
    async def get_account(self, ref: AccountRef) -> Optional[WalletAccount]:
        ...

    async def get_chain_account(self, ref: AccountRef) -> ChainAccount:
        ...


class TransactionEstimator:
    """Estimates the total fee of a transaction, deployment included.

    Keeps no per-request state, so concurrent ``estimate`` calls are
    independent. Failures are raised once at the step that detects them.
    """

    def __init__(
        self,
        wallet: Wallet,
        settings: Optional[Settings] = None,
        on_transition: Optional[Callable[[EstimationState], None]] = None,
    ) -> None:
        self._wallet = wallet
        self._settings = settings or Settings()
        self._on_transition = on_transition

    async def estimate(self, request: EstimateRequest) -> AggregatedFeeResponse:
        self._transition(EstimationState.IDLE)
        try:
            return await self._run(request)
        except Exception as exc:
            self._transition(EstimationState.FAILED)
            logger.info(
                "Fee estimation failed for %s: %s",
                request.account.address,
                exc,
            )
            raise

    async def _run(self, request: EstimateRequest) -> AggregatedFeeResponse:
        account = await self._wallet.get_account(request.account)
        if account is None:
            raise AccountError(AccountErrorCode.NOT_FOUND)
        chain_account = await self._wallet.get_chain_account(request.account)
        self._transition(EstimationState.ACCOUNT_RESOLVED)

        invocation = calls_to_invocation(ensure_calls(request.transactions))
        self._transition(EstimationState.INVOCATION_BUILT)

        batch = await extend_invocations_by_account_deploy(
            (invocation,), account, chain_account, self._wallet
        )
        self._transition(EstimationState.BATCH_EXTENDED)

        estimator = require_bulk_fee_estimation(chain_account)
        self._transition(EstimationState.CAPABILITY_VERIFIED)

        # Fee token only labels the response; estimation is token-agnostic.
        estimates = await estimator.estimate_fee_bulk(batch, skip_validate=True)
        self._transition(EstimationState.ESTIMATED)

        result = aggregate_estimated_fees(
            estimates,
            batch,
            request.fee_token_address,
            amount_overhead=self._settings.amount_overhead,
            price_overhead=self._settings.price_overhead,
        )
        if isinstance(result, CannotAggregate):
            raise result.to_error() from result.cause
        self._transition(EstimationState.AGGREGATED)
        return result

    def _transition(self, state: EstimationState) -> None:
        logger.debug("Estimation state -> %s", state.value)
        if self._on_transition is not None:
            self._on_transition(state)
