"""Unit tests for artifact loading and compilation."""

import json
from pathlib import Path

import pytest
import solcx
from packaging.version import Version

from deploy_harness.artifacts import (
    Artifact,
    artifact_from_dict,
    compile_artifact,
    load_artifact,
    normalize_bytecode,
    resolve_artifact,
)
from deploy_harness.exceptions import ArtifactError, ArtifactNotFoundError

GETTER_ABI = [
    {
        "type": "function",
        "name": "value",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    }
]


class TestLoadArtifact:
    """Test load_artifact across build-output layouts."""

    def test_waffle_layout(self, artifacts_dir: Path):
        artifact = load_artifact(artifacts_dir / "Trivial.json")

        assert artifact.name == "Trivial"
        assert artifact.abi == ()
        assert artifact.bytecode == "0x60016000f3"

    def test_foundry_layout_uses_creation_bytecode(self, artifacts_dir: Path):
        """Test that bytecode.object is used, not deployedBytecode."""
        artifact = load_artifact(artifacts_dir / "TrivialFoundry.json")

        assert artifact.name == "TrivialFoundry"
        assert artifact.bytecode == "0x60016000f3"

    def test_solc_standard_json_layout(self, tmp_path: Path):
        path = tmp_path / "Getter.json"
        path.write_text(json.dumps({"abi": GETTER_ABI, "evm": {"bytecode": {"object": "6001"}}}))

        artifact = load_artifact(path)

        assert artifact.bytecode == "0x6001"
        assert artifact.has_function("value")

    def test_accepts_string_path(self, artifacts_dir: Path):
        assert load_artifact(str(artifacts_dir / "Trivial.json")).name == "Trivial"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ArtifactNotFoundError):
            load_artifact(tmp_path / "Missing.json")

    def test_missing_file_is_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_artifact(tmp_path / "Missing.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "Bad.json"
        path.write_text("{ invalid json")

        with pytest.raises(ArtifactError, match="not valid JSON"):
            load_artifact(path)

    def test_missing_abi(self, tmp_path: Path):
        path = tmp_path / "NoAbi.json"
        path.write_text(json.dumps({"bytecode": "0x6001"}))

        with pytest.raises(ArtifactError, match="ABI not found"):
            load_artifact(path)

    def test_missing_bytecode(self, tmp_path: Path):
        path = tmp_path / "NoBytecode.json"
        path.write_text(json.dumps({"abi": []}))

        with pytest.raises(ArtifactError, match="Bytecode not found"):
            load_artifact(path)

    def test_empty_bytecode(self):
        """Test that interface-only artifacts are rejected."""
        with pytest.raises(ArtifactError):
            artifact_from_dict({"abi": [], "bytecode": "0x"}, "Interface")


class TestArtifact:
    """Test the Artifact dataclass."""

    def test_normalizes_bytecode(self):
        assert Artifact(name="A", abi=[], bytecode="6001").bytecode == "0x6001"
        assert Artifact(name="A", abi=[], bytecode="0XAB").bytecode == "0xab"

    def test_is_immutable(self):
        artifact = Artifact(name="A", abi=[], bytecode="0x6001")
        with pytest.raises(AttributeError):
            artifact.name = "B"

    def test_abi_list_is_a_copy(self):
        artifact = Artifact(name="A", abi=GETTER_ABI, bytecode="0x6001")
        abi = artifact.abi_list
        abi.append({})

        assert len(artifact.abi) == 1

    def test_has_function(self):
        artifact = Artifact(name="A", abi=GETTER_ABI, bytecode="0x6001")

        assert artifact.has_function("value")
        assert not artifact.has_function("initialize")

    def test_non_string_bytecode(self):
        with pytest.raises(ArtifactError):
            normalize_bytecode(b"\x60\x01")

    def test_resolve_passes_artifacts_through(self):
        artifact = Artifact(name="A", abi=[], bytecode="0x6001")
        assert resolve_artifact(artifact) is artifact


class TestCompileArtifact:
    """Test compile_artifact with py-solc-x stubbed out."""

    @pytest.fixture
    def compiled_output(self):
        return {
            "<stdin>:Helper": {"abi": [], "bin": "6002"},
            "<stdin>:Getter": {"abi": GETTER_ABI, "bin": "6001"},
        }

    def test_picks_requested_contract(self, monkeypatch, compiled_output):
        monkeypatch.setattr(solcx, "get_installed_solc_versions", lambda: [Version("0.8.20")])
        monkeypatch.setattr(solcx, "compile_source", lambda source, **kwargs: compiled_output)

        artifact = compile_artifact("contract Getter {}", "Getter")

        assert artifact.name == "Getter"
        assert artifact.bytecode == "0x6001"
        assert artifact.has_function("value")

    def test_unknown_contract(self, monkeypatch, compiled_output):
        monkeypatch.setattr(solcx, "get_installed_solc_versions", lambda: [Version("0.8.20")])
        monkeypatch.setattr(solcx, "compile_source", lambda source, **kwargs: compiled_output)

        with pytest.raises(ArtifactError, match="Missing contract not found"):
            compile_artifact("contract Getter {}", "Missing")

    def test_installs_missing_compiler(self, monkeypatch, compiled_output):
        installed = []
        monkeypatch.setattr(solcx, "get_installed_solc_versions", lambda: [])
        monkeypatch.setattr(solcx, "install_solc", lambda version: installed.append(version))
        monkeypatch.setattr(solcx, "compile_source", lambda source, **kwargs: compiled_output)

        compile_artifact("contract Getter {}", "Getter", solc_version="0.8.24")

        assert installed == ["0.8.24"]

    def test_missing_compiler_without_install(self, monkeypatch):
        monkeypatch.setattr(solcx, "get_installed_solc_versions", lambda: [])

        with pytest.raises(ArtifactError, match="not installed"):
            compile_artifact("contract Getter {}", "Getter", install=False)


class TestPrebuiltFixtures:
    """Test the prebuilt proxy fixtures load with their interfaces."""

    def test_proxy_artifact(self, artifacts_dir: Path):
        artifact = load_artifact(artifacts_dir / "InitializableProxy.json")

        assert artifact.name == "InitializableProxy"
        assert artifact.has_function("initialize")

    def test_logic_artifact(self, artifacts_dir: Path):
        artifact = load_artifact(artifacts_dir / "CounterLogic.json")

        for name in ("initialize", "setValue", "value", "owner"):
            assert artifact.has_function(name)
