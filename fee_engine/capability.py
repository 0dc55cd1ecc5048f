"""Capability gate for optional chain-account operations."""

from chain_adapter.starknet.accounts import BulkFeeEstimator, Capability, ChainAccount

from .errors import AccountError, AccountErrorCode


def require_bulk_fee_estimation(chain_account: ChainAccount) -> BulkFeeEstimator:
    if not isinstance(chain_account, BulkFeeEstimator) or not chain_account.supports(
        Capability.BULK_FEE_ESTIMATION
    ):
        raise AccountError(
            AccountErrorCode.MISSING_METHOD,
            message=(
                f"{type(chain_account).__name__} does not support bulk fee estimation"
            ),
        )
    return chain_account
