"""Unit tests for custom exception classes."""

import pytest

from deploy_harness.exceptions import (
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


class TestExceptionCatching:
    """Test that exceptions can be caught as their base types."""

    def test_artifact_not_found_as_file_not_found_error(self):
        with pytest.raises(FileNotFoundError):
            raise ArtifactNotFoundError("test")

    def test_artifact_not_found_as_artifact_error(self):
        with pytest.raises(ArtifactError):
            raise ArtifactNotFoundError("test")

    def test_init_args_error_as_value_error(self):
        with pytest.raises(ValueError):
            raise InitArgsError("test")

    def test_revert_extraction_gap_as_lookup_error(self):
        with pytest.raises(LookupError):
            raise RevertExtractionGap(RuntimeError("test"))

    def test_catch_all_as_harness_error(self):
        """Test that all custom exceptions can be caught as HarnessError."""
        exceptions = [
            EnvironmentNotStartedError("test"),
            ArtifactError("test"),
            ArtifactNotFoundError("test"),
            DeploymentFailure("test"),
            TransactionReverted("test"),
            InitializationFailure("test"),
            InitArgsError("test"),
            RevertExtractionGap(RuntimeError("test")),
        ]

        for exc in exceptions:
            with pytest.raises(HarnessError):
                raise exc


class TestExceptionAttributes:
    def test_transaction_reverted_carries_receipt(self):
        receipt = {"status": 0}
        exc = TransactionReverted("reverted", tx_hash="0xabc", receipt=receipt)

        assert str(exc) == "reverted"
        assert exc.tx_hash == "0xabc"
        assert exc.receipt is receipt
        assert exc.reason is None

    def test_transaction_reverted_carries_reason(self):
        exc = TransactionReverted("setValue() reverted", reason="NOT_OWNER")

        assert exc.reason == "NOT_OWNER"

    def test_revert_extraction_gap_carries_error(self):
        error = KeyError("results")
        exc = RevertExtractionGap(error)

        assert exc.error is error
        assert "KeyError" in str(exc)
