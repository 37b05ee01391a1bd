"""Shared pytest fixtures for deploy-harness tests."""

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from deploy_harness import Artifact, HarnessConfig, HarnessEnvironment, compile_artifact, load_artifact

# Init code that returns a single STOP byte as runtime code
TRIVIAL_BYTECODE = "0x60016000f3"

# INVALID opcode: every deployment fails
INVALID_BYTECODE = "0xfe"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def artifacts_dir(fixtures_dir: Path) -> Path:
    """Return the path to the artifact JSON fixtures."""
    return fixtures_dir / "artifacts"


@pytest.fixture
def harness_config() -> HarnessConfig:
    """Configuration for the in-process eth-tester chain."""
    return HarnessConfig(rpc_url=None)


@pytest.fixture
def trivial_artifact() -> Artifact:
    return Artifact(name="Trivial", abi=[], bytecode=TRIVIAL_BYTECODE)


@pytest.fixture
def invalid_artifact() -> Artifact:
    return Artifact(name="Invalid", abi=[], bytecode=INVALID_BYTECODE)


@pytest.fixture
def run_in_env(harness_config: HarnessConfig):
    """
    Run an async scenario against a freshly started environment.

    Usage: run_in_env(scenario) where scenario is `async def scenario(env)`.
    """

    def run(scenario, config: Optional[HarnessConfig] = None):
        async def main():
            async with HarnessEnvironment(config or harness_config) as env:
                return await scenario(env)

        return asyncio.run(main())

    return run


def _installed_solc_version() -> Optional[str]:
    try:
        import solcx

        versions = solcx.get_installed_solc_versions()
    except Exception:
        return None

    versions = [v for v in versions if v.major == 0 and v.minor >= 8]
    if not versions:
        return None
    return str(max(versions))


@pytest.fixture(scope="session")
def solc_version() -> str:
    """Installed solc >= 0.8; tests needing a compiler are skipped without one."""
    version = _installed_solc_version()
    if version is None:
        pytest.skip("no Solidity >=0.8 compiler installed for py-solc-x")
    return version


@pytest.fixture(scope="session")
def proxy_artifacts():
    """Prebuilt (InitializableProxy, CounterLogic) artifacts."""
    artifacts = Path(__file__).parent / "fixtures" / "artifacts"
    return (
        load_artifact(artifacts / "InitializableProxy.json"),
        load_artifact(artifacts / "CounterLogic.json"),
    )


@pytest.fixture(scope="session")
def compiled_proxy_artifacts(solc_version: str):
    """(InitializableProxy, CounterLogic) compiled from the fixture sources."""
    contracts_dir = Path(__file__).parent / "fixtures" / "contracts"
    proxy = compile_artifact(
        (contracts_dir / "InitializableProxy.sol").read_text(),
        "InitializableProxy",
        solc_version=solc_version,
        install=False,
    )
    logic = compile_artifact(
        (contracts_dir / "CounterLogic.sol").read_text(),
        "CounterLogic",
        solc_version=solc_version,
        install=False,
    )
    return proxy, logic
