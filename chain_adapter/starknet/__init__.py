from .accounts import (
    BulkFeeEstimator,
    Capability,
    ChainAccount,
    FeeProvider,
    LegacyAccount,
    MultisigAccount,
    PluginAccount,
    StandardAccount,
)
from .models import (
    Call,
    DeployAccountInvocation,
    DeployAccountPayload,
    Invocation,
    InvocationBatch,
    InvocationType,
    InvokeInvocation,
    RawFeeEstimate,
    normalize_address,
)
from .simulator import DryRunProvider, ProviderError

__all__ = [
    "BulkFeeEstimator",
    "Call",
    "Capability",
    "ChainAccount",
    "DeployAccountInvocation",
    "DeployAccountPayload",
    "DryRunProvider",
    "FeeProvider",
    "Invocation",
    "InvocationBatch",
    "InvocationType",
    "InvokeInvocation",
    "LegacyAccount",
    "MultisigAccount",
    "PluginAccount",
    "ProviderError",
    "RawFeeEstimate",
    "StandardAccount",
    "normalize_address",
]
