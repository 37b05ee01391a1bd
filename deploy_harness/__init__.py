"""
Deploy Harness - contract deployment helpers for test suites

Deploys single artifacts and proxy + logic pairs against a simulated node,
and normalizes revert reasons from failed transactions for assertions.
"""

__version__ = "0.1.0"

from .artifacts import Artifact, compile_artifact, load_artifact
from .config import SKIP_TESTS, HarnessConfig
from .contracts import DeployedContract, PendingTransaction
from .deployer import deploy_proxy_contract, deploy_test_contract
from .exceptions import (
    ArtifactError,
    ArtifactNotFoundError,
    DeploymentFailure,
    EnvironmentNotStartedError,
    HarnessError,
    InitArgsError,
    InitializationFailure,
    RevertExtractionGap,
    TransactionReverted,
)
from .harness_env import HarnessEnvironment
from .identities import Identities, Identity
from .results import DeploymentResult, ProxyBinding, ProxyDeploymentResult
from .reverts import (
    NO_REVERT,
    BatchResultReason,
    ExecutionRevertedMessage,
    FailureReason,
    StructuredReason,
    UnrecognizedFailure,
    classify_failure,
    get_call_failure,
    get_call_revert_reason,
)

__all__ = [
    "Artifact",
    "compile_artifact",
    "load_artifact",
    "HarnessConfig",
    "SKIP_TESTS",
    "HarnessEnvironment",
    "Identity",
    "Identities",
    "DeployedContract",
    "PendingTransaction",
    "deploy_test_contract",
    "deploy_proxy_contract",
    "DeploymentResult",
    "ProxyBinding",
    "ProxyDeploymentResult",
    "NO_REVERT",
    "get_call_revert_reason",
    "get_call_failure",
    "classify_failure",
    "FailureReason",
    "StructuredReason",
    "BatchResultReason",
    "ExecutionRevertedMessage",
    "UnrecognizedFailure",
    "HarnessError",
    "EnvironmentNotStartedError",
    "ArtifactError",
    "ArtifactNotFoundError",
    "DeploymentFailure",
    "TransactionReverted",
    "InitializationFailure",
    "InitArgsError",
    "RevertExtractionGap",
]
