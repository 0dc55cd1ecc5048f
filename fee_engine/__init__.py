from .aggregator import (
    MalformedEstimateError,
    aggregate_estimated_fees,
    estimated_fees_to_response,
)
from .builder import calls_to_invocation, ensure_calls
from .capability import require_bulk_fee_estimation
from .config import ETH_TOKEN_ADDRESS, Settings, load_settings
from .deploy import DeploymentLookup, extend_invocations_by_account_deploy
from .errors import AccountError, AccountErrorCode, CannotAggregate, InvocationError
from .estimator import TransactionEstimator, Wallet
from .models import (
    AggregatedFeeResponse,
    EstimatedFee,
    EstimateRequest,
    EstimationState,
    InvocationFee,
)

__all__ = [
    "AccountError",
    "AccountErrorCode",
    "AggregatedFeeResponse",
    "CannotAggregate",
    "DeploymentLookup",
    "ETH_TOKEN_ADDRESS",
    "EstimateRequest",
    "EstimatedFee",
    "EstimationState",
    "InvocationError",
    "InvocationFee",
    "MalformedEstimateError",
    "Settings",
    "TransactionEstimator",
    "Wallet",
    "aggregate_estimated_fees",
    "calls_to_invocation",
    "ensure_calls",
    "estimated_fees_to_response",
    "extend_invocations_by_account_deploy",
    "load_settings",
    "require_bulk_fee_estimation",
]
