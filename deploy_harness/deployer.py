"""
Deployers used during test setup

Both deployers catch failures, print a diagnostic and hand back a result
object, so a setup phase can continue past a broken deployment.
"""

import traceback
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .artifacts import Artifact, resolve_artifact
from .encoding import encode_init_args
from .exceptions import InitializationFailure
from .harness_env import HarnessEnvironment
from .identities import Identity
from .results import DeploymentResult, ProxyBinding, ProxyDeploymentResult

ArtifactRef = Union[Artifact, str, Path]

PROXY_INITIALIZER = "initialize"


async def deploy_test_contract(
    env: HarnessEnvironment,
    artifact: ArtifactRef,
    gas_limit: Optional[int] = None,
) -> DeploymentResult:
    """
    Deploy one artifact from the default identity, without constructor arguments.

    Args:
        env: Started harness environment
        artifact: Artifact or path to an artifact JSON file
        gas_limit: Override for env.config.deploy_gas_limit

    Returns:
        DeploymentResult; on failure `ok` is False and `error` holds the exception
    """
    try:
        resolved = resolve_artifact(artifact)
        contract = await env.deploy_contract(
            env.identities.wallet,
            resolved,
            (),
            gas_limit=gas_limit if gas_limit is not None else env.config.deploy_gas_limit,
        )
    except Exception as e:
        print(f"❌ Error deploying {artifact}: {e}")
        traceback.print_exc()
        return DeploymentResult(artifact_name=str(artifact), error=e)

    print(f"✓ {resolved.name} deployed: {contract.address}")
    return DeploymentResult(artifact_name=resolved.name, contract=contract)


async def deploy_proxy_contract(
    env: HarnessEnvironment,
    signer: Identity,
    proxy_artifact: ArtifactRef,
    logic_artifact: ArtifactRef,
    init_types: Sequence[str] = (),
    init_values: Sequence[Any] = (),
) -> ProxyDeploymentResult:
    """
    Deploy a proxy and its logic contract, then initialize the proxy.

    Steps run strictly in order:
    1. Deploy proxy (no constructor args)
    2. Deploy logic (no constructor args)
    3. ABI-encode init_values as init_types
    4. proxy.initialize(logic_address, encoded)
    5. Wait for the initialize receipt

    Contracts deployed before a failing step are left on chain.

    Args:
        env: Started harness environment
        signer: Identity signing both deployments and the initialize call
        proxy_artifact: Proxy artifact (must expose initialize(address,bytes))
        logic_artifact: Logic artifact
        init_types: ABI type names of the initialization arguments
        init_values: Initialization argument values

    Returns:
        ProxyDeploymentResult whose binding talks to the proxy through the
        logic contract's interface
    """
    stage = "deploy_proxy"
    proxy_address = None
    logic_address = None

    try:
        gas_limit = env.config.proxy_gas_limit

        # 1. Proxy
        proxy_artifact = resolve_artifact(proxy_artifact)
        proxy = await env.deploy_contract(signer, proxy_artifact, (), gas_limit=gas_limit)
        proxy_address = proxy.address
        print(f"  • Proxy deployed: {proxy_address}")

        # 2. Logic
        stage = "deploy_logic"
        logic_artifact = resolve_artifact(logic_artifact)
        logic = await env.deploy_contract(signer, logic_artifact, (), gas_limit=gas_limit)
        logic_address = logic.address
        print(f"  • Logic deployed: {logic_address}")

        # 3. Init payload
        stage = "encode"
        init_args = encode_init_args(init_types, init_values)

        # 4. Initialize
        stage = "initialize"
        try:
            pending = await proxy.transact(PROXY_INITIALIZER, logic_address, init_args)
        except Exception as e:
            raise InitializationFailure(f"{PROXY_INITIALIZER}() call failed: {e}") from e

        # 5. Confirmation
        stage = "confirm"
        try:
            await pending.wait()
        except Exception as e:
            raise InitializationFailure(f"{PROXY_INITIALIZER}() was not confirmed: {e}") from e

        binding = ProxyBinding(
            contract=env.contract_at(proxy_address, logic_artifact, signer),
            logic_address=logic_address,
        )
    except Exception as e:
        print(f"❌ Error deploying proxy contract: {e}")
        traceback.print_exc()
        return ProxyDeploymentResult(
            error=e,
            stage=stage,
            proxy_address=proxy_address,
            logic_address=logic_address,
        )

    print(f"✓ Proxy initialized: {binding.address} -> {logic_address}")
    return ProxyDeploymentResult(
        binding=binding,
        proxy_address=proxy_address,
        logic_address=logic_address,
    )
