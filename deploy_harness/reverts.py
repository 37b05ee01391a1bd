"""
Revert reason extraction

Execution backends surface revert strings in different places:
1. A `reason` attribute on the error (a string, or a sequence of strings)
2. Batched-call wrappers: `error.results[error.hashes[0]].reason`
3. web3 ContractLogicError / eth-tester TransactionFailed messages,
   prefixed with "execution reverted: "

Each shape is a FailureReason variant; anything else is an UnrecognizedFailure.
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from eth_tester.exceptions import TransactionFailed
from web3.exceptions import ContractLogicError

from .exceptions import RevertExtractionGap

# Returned when the operation under test did not fail
NO_REVERT = "VM did not revert"

EXECUTION_REVERTED_PREFIX = "execution reverted: "

Operation = Callable[[], Union[Awaitable[Any], Any]]


@dataclass(frozen=True)
class FailureReason(ABC):
    """A failed operation's error, classified by where it carries its reason."""

    error: BaseException

    @abstractmethod
    def reason(self) -> str:
        """Return the revert reason."""


@dataclass(frozen=True)
class StructuredReason(FailureReason):
    """error.reason, or its first element when it is a sequence."""

    value: str

    def reason(self) -> str:
        return self.value


@dataclass(frozen=True)
class BatchResultReason(FailureReason):
    """Reason stored per transaction hash in error.results."""

    tx_hash: Any
    value: str

    def reason(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExecutionRevertedMessage(FailureReason):
    """Reason embedded in a node's "execution reverted" message."""

    value: str

    def reason(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnrecognizedFailure(FailureReason):
    """No known reason location matched."""

    def reason(self) -> str:
        raise RevertExtractionGap(self.error) from self.error


def _structured_reason(error: BaseException) -> Optional[str]:
    reason = getattr(error, "reason", None)
    if not reason:
        return None
    if isinstance(reason, (list, tuple)):
        reason = reason[0] if reason else None
        if reason is None:
            return None
    return str(reason)


def _batch_result_reason(error: BaseException):
    hashes = getattr(error, "hashes", None)
    results = getattr(error, "results", None)
    if not hashes or not isinstance(results, Mapping):
        return None

    tx_hash = hashes[0]
    entry = results.get(tx_hash)
    if isinstance(entry, Mapping):
        reason = entry.get("reason")
    else:
        reason = getattr(entry, "reason", None)

    if reason is None:
        return None
    return tx_hash, str(reason)


def _strip_execution_reverted(message: str) -> str:
    if message.startswith(EXECUTION_REVERTED_PREFIX):
        return message[len(EXECUTION_REVERTED_PREFIX):]
    return message


def _execution_reverted_reason(error: BaseException) -> Optional[str]:
    if isinstance(error, ContractLogicError):
        message = getattr(error, "message", None) or str(error)
    elif isinstance(error, TransactionFailed):
        message = str(error.args[0]) if error.args else str(error)
    else:
        return None
    return _strip_execution_reverted(message)


def classify_failure(error: BaseException) -> FailureReason:
    """
    Classify an error by the location of its revert reason.

    Shapes are checked in order: structured reason, batched results,
    execution-reverted message.
    """
    reason = _structured_reason(error)
    if reason is not None:
        return StructuredReason(error=error, value=reason)

    batch = _batch_result_reason(error)
    if batch is not None:
        tx_hash, reason = batch
        return BatchResultReason(error=error, tx_hash=tx_hash, value=reason)

    reason = _execution_reverted_reason(error)
    if reason is not None:
        return ExecutionRevertedMessage(error=error, value=reason)

    return UnrecognizedFailure(error=error)


async def get_call_failure(operation: Operation) -> Optional[FailureReason]:
    """
    Run an operation expected to fail.

    Args:
        operation: Zero-argument callable, usually returning an awaitable

    Returns:
        The classified failure, or None if the operation did not raise
    """
    try:
        result = operation()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        return classify_failure(e)
    return None


async def get_call_revert_reason(operation: Operation) -> str:
    """
    Run an operation expected to revert and return its revert reason.

    No retries: a revert is deterministic for the submitted transaction.

    Args:
        operation: Zero-argument callable, usually returning an awaitable

    Returns:
        The revert reason, or NO_REVERT if the operation completed

    Raises:
        RevertExtractionGap: If the operation failed without a recognizable reason
    """
    failure = await get_call_failure(operation)
    if failure is None:
        return NO_REVERT
    return failure.reason()
