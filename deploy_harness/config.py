"""Harness configuration."""

import os
from dataclasses import dataclass
from typing import Optional

# Gas budgets used by the deployers
DEFAULT_DEPLOY_GAS_LIMIT = 6_000_000
DEFAULT_PROXY_GAS_LIMIT = 3_000_000

DEFAULT_RECEIPT_TIMEOUT = 30
DEFAULT_REQUEST_TIMEOUT = 60

# 100 ETH for each locally created identity
DEFAULT_LOCAL_IDENTITY_FUNDING = 100 * 10**18

ENV_RPC_URL = "DEPLOY_HARNESS_RPC_URL"
ENV_SKIP_TESTS = "DEPLOY_HARNESS_SKIP_TESTS"
ENV_RECEIPT_TIMEOUT = "DEPLOY_HARNESS_RECEIPT_TIMEOUT"

_TRUTHY = ("1", "true", "yes", "on")


def parse_flag(value: Optional[str]) -> bool:
    """Interpret an environment variable value as a boolean flag."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


@dataclass
class HarnessConfig:
    """Settings for a harness run."""

    # None selects the in-process eth-tester chain
    rpc_url: Optional[str] = None
    deploy_gas_limit: int = DEFAULT_DEPLOY_GAS_LIMIT
    proxy_gas_limit: int = DEFAULT_PROXY_GAS_LIMIT
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    skip_tests: bool = False
    local_identity_funding: int = DEFAULT_LOCAL_IDENTITY_FUNDING

    @classmethod
    def from_env(cls, **overrides) -> "HarnessConfig":
        """
        Build a configuration from environment variables.

        Priority:
        1. Keyword overrides
        2. DEPLOY_HARNESS_* environment variables
        3. Defaults

        Raises:
            ValueError: If DEPLOY_HARNESS_RECEIPT_TIMEOUT is not a number
        """
        values = {
            "rpc_url": os.getenv(ENV_RPC_URL) or None,
            "skip_tests": parse_flag(os.getenv(ENV_SKIP_TESTS)),
        }

        timeout = os.getenv(ENV_RECEIPT_TIMEOUT)
        if timeout:
            try:
                values["receipt_timeout"] = float(timeout)
            except ValueError:
                raise ValueError(
                    f"{ENV_RECEIPT_TIMEOUT} must be a number of seconds, got {timeout!r}"
                ) from None

        values.update(overrides)
        return cls(**values)

    @property
    def uses_eth_tester(self) -> bool:
        return self.rpc_url is None


# Process-wide skip flag for dependent test modules
SKIP_TESTS = parse_flag(os.getenv(ENV_SKIP_TESTS))
