"""Result types returned by the deployers."""

from dataclasses import dataclass
from typing import Optional

from .contracts import DeployedContract
from .exceptions import DeploymentFailure, InitializationFailure


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a single-artifact deployment."""

    artifact_name: str
    contract: Optional[DeployedContract] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.contract is not None

    @property
    def address(self) -> Optional[str]:
        return self.contract.address if self.contract else None

    def unwrap(self) -> DeployedContract:
        """
        Return the deployed contract.

        Raises:
            DeploymentFailure: If the deployment failed, chained to the recorded error
        """
        if self.contract is None:
            raise DeploymentFailure(
                f"Deployment of {self.artifact_name} failed: {self.error}"
            ) from self.error
        return self.contract


@dataclass(frozen=True)
class ProxyBinding:
    """Proxy address typed with the logic contract's interface, plus the logic address."""

    contract: DeployedContract
    logic_address: str

    def __post_init__(self):
        if self.contract.address.lower() == self.logic_address.lower():
            raise ValueError(
                f"Proxy and logic contract share address {self.logic_address}"
            )

    @property
    def address(self) -> str:
        return self.contract.address

    def __iter__(self):
        # Allows `contract, logic_address = binding`
        return iter((self.contract, self.logic_address))


@dataclass(frozen=True)
class ProxyDeploymentResult:
    """
    Outcome of a proxy + logic deployment.

    On failure, stage names the step that failed ("deploy_proxy",
    "deploy_logic", "encode", "initialize" or "confirm") and the addresses of
    contracts deployed before the failure are kept. They stay live on chain.
    """

    binding: Optional[ProxyBinding] = None
    error: Optional[BaseException] = None
    stage: Optional[str] = None
    proxy_address: Optional[str] = None
    logic_address: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.binding is not None

    def unwrap(self) -> ProxyBinding:
        """
        Return the binding.

        Raises:
            InitializationFailure: If any step failed, chained to the recorded error
        """
        if self.binding is None:
            raise InitializationFailure(
                f"Proxy deployment failed at {self.stage}: {self.error}"
            ) from self.error
        return self.binding
