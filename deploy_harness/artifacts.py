"""
Artifact loading and compilation

Supports the common build-output layouts:
1. Waffle / Truffle / Hardhat: {"abi": [...], "bytecode": "0x..."}
2. Foundry: {"abi": [...], "bytecode": {"object": "0x..."}}
3. solc standard JSON contract entry: {"abi": [...], "evm": {"bytecode": {"object": "..."}}}
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import ArtifactError, ArtifactNotFoundError

DEFAULT_SOLC_VERSION = "0.8.20"


@dataclass(frozen=True)
class Artifact:
    """Compiled contract: bytecode plus ABI."""

    name: str
    abi: Tuple[Dict[str, Any], ...]
    bytecode: str  # 0x-prefixed hex

    def __post_init__(self):
        object.__setattr__(self, "abi", tuple(self.abi))
        object.__setattr__(self, "bytecode", normalize_bytecode(self.bytecode))

    @property
    def abi_list(self) -> List[Dict[str, Any]]:
        return list(self.abi)

    def has_function(self, name: str) -> bool:
        return any(
            item.get("type") == "function" and item.get("name") == name
            for item in self.abi
        )

    def __str__(self) -> str:
        return self.name


def normalize_bytecode(bytecode: str) -> str:
    """Return bytecode as lowercase 0x-prefixed hex."""
    if not isinstance(bytecode, str):
        raise ArtifactError(f"Bytecode must be a hex string, got {type(bytecode).__name__}")

    bytecode = bytecode.strip()
    if bytecode.startswith(("0x", "0X")):
        bytecode = bytecode[2:]
    return "0x" + bytecode.lower()


def _extract_bytecode(data: Dict[str, Any]) -> Optional[str]:
    bytecode = data.get("bytecode")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not bytecode and isinstance(data.get("evm"), dict):
        bytecode = data["evm"].get("bytecode", {}).get("object")
    return bytecode or None


def artifact_from_dict(data: Dict[str, Any], name: str) -> Artifact:
    """
    Build an Artifact from parsed artifact JSON.

    Args:
        data: Parsed artifact content
        name: Fallback contract name if the artifact has no contractName

    Raises:
        ArtifactError: If ABI or bytecode is missing
    """
    if not isinstance(data, dict):
        raise ArtifactError(f"Artifact {name} is not a JSON object")

    name = data.get("contractName") or name
    abi = data.get("abi")
    if abi is None:
        raise ArtifactError(f"ABI not found in artifact {name}")

    bytecode = _extract_bytecode(data)
    if not bytecode or normalize_bytecode(bytecode) == "0x":
        raise ArtifactError(f"Bytecode not found in artifact {name}")

    return Artifact(name=name, abi=abi, bytecode=bytecode)


def load_artifact(path: Union[str, Path]) -> Artifact:
    """
    Load an artifact JSON file.

    Args:
        path: Path to the artifact file

    Returns:
        Artifact named after contractName, or the file stem

    Raises:
        ArtifactNotFoundError: If the file does not exist
        ArtifactError: If the file is not valid JSON or lacks ABI/bytecode
    """
    path = Path(path)
    if not path.exists():
        raise ArtifactNotFoundError(f"Artifact not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Artifact {path} is not valid JSON: {e}") from e

    return artifact_from_dict(data, path.stem)


def resolve_artifact(artifact: Union[Artifact, str, Path]) -> Artifact:
    """Accept either an Artifact or a path to one."""
    if isinstance(artifact, Artifact):
        return artifact
    return load_artifact(artifact)


def compile_artifact(
    source: str,
    contract_name: str,
    solc_version: str = DEFAULT_SOLC_VERSION,
    install: bool = True,
) -> Artifact:
    """
    Compile a Solidity source string with py-solc-x.

    Args:
        source: Solidity source code
        contract_name: Contract to pick from the compiled output
        solc_version: Compiler version
        install: Install the compiler version if it is missing

    Returns:
        Artifact for the requested contract

    Raises:
        ArtifactError: If the contract is not in the compiled output
    """
    import solcx

    installed = [str(v) for v in solcx.get_installed_solc_versions()]
    if solc_version not in installed:
        if not install:
            raise ArtifactError(f"solc {solc_version} is not installed")
        print(f"  • Installing solc {solc_version}...")
        solcx.install_solc(solc_version)

    compiled = solcx.compile_source(
        source,
        output_values=["abi", "bin"],
        solc_version=solc_version,
    )

    # Keys look like '<stdin>:ContractName'
    for contract_id, interface in compiled.items():
        if contract_id.split(":")[-1] == contract_name:
            return Artifact(name=contract_name, abi=interface["abi"], bytecode=interface["bin"])

    raise ArtifactError(f"{contract_name} contract not found in compiled output")
