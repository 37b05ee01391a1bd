"""Custom exception classes for deploy-harness."""

from typing import Any, Dict, Optional


class HarnessError(Exception):
    """Base exception for harness errors."""

    pass


class EnvironmentNotStartedError(HarnessError, RuntimeError):
    """Raised when the environment is used before start() or after stop()."""

    pass


class ArtifactError(HarnessError, ValueError):
    """Raised when an artifact file is malformed or lacks ABI/bytecode."""

    pass


class ArtifactNotFoundError(ArtifactError, FileNotFoundError):
    """Raised when an artifact file does not exist."""

    pass


class DeploymentFailure(HarnessError, RuntimeError):
    """Raised when a contract deployment does not produce a live contract."""

    pass


class TransactionReverted(HarnessError, RuntimeError):
    """
    Raised when a mined transaction has status 0.

    reason holds the revert string recovered by replaying the transaction,
    or None when the replay did not produce one.
    """

    def __init__(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        receipt: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.tx_hash = tx_hash
        self.receipt = receipt
        self.reason = reason


class InitializationFailure(HarnessError, RuntimeError):
    """Raised when a proxy's initialize call or its confirmation fails."""

    pass


class InitArgsError(HarnessError, ValueError):
    """Raised when initialization arguments cannot be ABI-encoded."""

    pass


class RevertExtractionGap(HarnessError, LookupError):
    """Raised when a failed operation carries no recognizable revert reason."""

    def __init__(self, error: BaseException):
        super().__init__(
            f"Could not extract a revert reason from {type(error).__name__}: {error}"
        )
        self.error = error
