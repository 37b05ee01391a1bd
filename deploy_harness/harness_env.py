"""
Harness Environment - Environment Layer

Responsibilities:
1. Connect to the simulated node (in-process eth-tester, or an RPC node such as Anvil)
2. Provision the signing identities shared by a test run
3. Provide snapshots, balances and the deployment primitives bound to the node
"""

from typing import Any, Dict, Optional, Sequence, Union

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.providers.eth_tester import AsyncEthereumTesterProvider

from .artifacts import Artifact
from .config import HarnessConfig
from .contracts import DeployedContract, PendingTransaction, contract_at, deploy_contract, send_transaction
from .exceptions import EnvironmentNotStartedError
from .identities import Identities, Identity, identities_from_accounts


class HarnessEnvironment:
    """Harness Environment Management Class"""

    def __init__(self, config: Optional[HarnessConfig] = None):
        """
        Initialize harness environment

        Args:
            config: Harness configuration
                    - None: read from DEPLOY_HARNESS_* environment variables
                    - rpc_url None: in-process eth-tester chain
        """
        self.config = config if config is not None else HarnessConfig.from_env()

        self.w3: Optional[AsyncWeb3] = None
        self._identities: Optional[Identities] = None
        self.initial_snapshot_id: Optional[Any] = None  # Initial snapshot for fast reset

    @property
    def node_label(self) -> str:
        return self.config.rpc_url or "eth-tester (in-process)"

    @property
    def skip_tests(self) -> bool:
        return self.config.skip_tests

    @property
    def started(self) -> bool:
        return self.w3 is not None

    @property
    def identities(self) -> Identities:
        self._require_started("access identities")
        return self._identities

    def _require_started(self, action: str):
        if self.w3 is None:
            raise EnvironmentNotStartedError(f"Environment not started, cannot {action}")

    def _build_provider(self):
        if self.config.uses_eth_tester:
            return AsyncEthereumTesterProvider()
        return AsyncHTTPProvider(
            self.config.rpc_url,
            request_kwargs={"timeout": self.config.request_timeout},
        )

    async def start(self) -> Dict[str, Any]:
        """
        Start environment

        Returns:
            Environment info dictionary

        Raises:
            ConnectionError: If the node is unreachable
            ValueError: If the node exposes fewer than four unlocked accounts
        """
        # 1. Connect
        w3 = AsyncWeb3(self._build_provider())
        if not await w3.is_connected():
            await self._disconnect(w3)
            raise ConnectionError(f"Cannot connect to node: {self.node_label}")
        self.w3 = w3

        chain_id = await w3.eth.chain_id
        print("✓ Node connected successfully")
        print(f"  Chain ID: {chain_id}")
        print(f"  Node: {self.node_label}")

        # 2. Provision identities
        try:
            self._identities = identities_from_accounts(await w3.eth.accounts)
        except Exception:
            await self.stop()
            raise

        print("✓ Identities provisioned")
        for identity in self._identities:
            print(f"  {identity}")

        # 3. Initial snapshot for fast reset
        try:
            self.initial_snapshot_id = await self.create_snapshot()
            print(f"✓ Initial snapshot created: {self.initial_snapshot_id}")
        except Exception as e:
            print(f"⚠️  Failed to create initial snapshot: {e}")
            self.initial_snapshot_id = None

        return {
            "node": self.node_label,
            "chain_id": chain_id,
            "block_number": await w3.eth.block_number,
            "identities": {identity.name: identity.address for identity in self._identities},
            "skip_tests": self.skip_tests,
        }

    async def stop(self):
        """Release the node connection"""
        if self.w3 is not None:
            await self._disconnect(self.w3)
            print(f"✓ Disconnected from {self.node_label}")
        self.w3 = None
        self._identities = None
        self.initial_snapshot_id = None

    async def _disconnect(self, w3: AsyncWeb3):
        # Only the HTTP provider holds a client session; eth-tester runs in process
        if isinstance(w3.provider, AsyncHTTPProvider):
            await w3.provider.disconnect()

    async def _rpc(self, method: str, params: Sequence[Any]) -> Any:
        response = await self.w3.provider.make_request(method, list(params))
        if "error" in response:
            raise RuntimeError(f"{method} failed: {response['error']}")
        return response.get("result")

    async def create_snapshot(self) -> Any:
        """
        Create snapshot of current state

        Returns:
            Snapshot ID
        """
        self._require_started("create snapshot")
        return await self._rpc("evm_snapshot", [])

    async def revert_to_snapshot(self, snapshot_id: Any) -> bool:
        """
        Revert to specified snapshot

        Args:
            snapshot_id: Snapshot ID

        Returns:
            Whether revert was successful
        """
        self._require_started("revert snapshot")

        # eth-tester answers with no result, Anvil with true/false
        reverted = await self._rpc("evm_revert", [snapshot_id]) is not False
        if reverted:
            print(f"✓ Reverted to snapshot: {snapshot_id}")
        else:
            print(f"⚠️  Failed to revert snapshot: {snapshot_id}")
        return reverted

    async def reset(self) -> bool:
        """
        Fast reset chain state to the initial snapshot

        Returns:
            Whether reset was successful
        """
        self._require_started("reset")

        if self.initial_snapshot_id is None:
            print("⚠️  No initial snapshot, cannot reset")
            return False

        print("🔄 Resetting environment state (reverting snapshot)...")
        if not await self.revert_to_snapshot(self.initial_snapshot_id):
            return False

        # Some nodes consume the snapshot on revert
        self.initial_snapshot_id = await self.create_snapshot()
        return True

    async def create_local_identity(self, name: str, funder: Optional[Identity] = None) -> Identity:
        """
        Create a fresh key pair that signs locally, funded from another identity

        Args:
            name: Identity name
            funder: Identity paying the funding transfer (defaults to wallet)

        Returns:
            Funded local Identity
        """
        self._require_started("create identity")

        account = Account.create()
        identity = Identity(name=name, address=account.address, account=account)
        funder = funder or self._identities.wallet

        tx_hash = await send_transaction(
            self.w3,
            funder,
            {"to": identity.address, "value": self.config.local_identity_funding, "gas": 21000},
        )
        await PendingTransaction(self.w3, tx_hash, self.config.receipt_timeout, f"Funding {name}").wait()

        print(f"✓ Local identity created: {identity}")
        return identity

    async def get_balance(self, address: str) -> float:
        """
        Get address balance

        Args:
            address: Address

        Returns:
            Balance (ETH)
        """
        self._require_started("query balance")
        balance_wei = await self.w3.eth.get_balance(address)
        return balance_wei / 10**18

    async def deploy_contract(
        self,
        signer: Identity,
        artifact: Artifact,
        constructor_args: Sequence[Any] = (),
        gas_limit: Optional[int] = None,
    ) -> DeployedContract:
        """Deploy an artifact on this environment's node (raises on failure)."""
        self._require_started("deploy contract")
        return await deploy_contract(
            self.w3,
            signer,
            artifact,
            constructor_args,
            gas_limit=gas_limit if gas_limit is not None else self.config.deploy_gas_limit,
            timeout=self.config.receipt_timeout,
        )

    def contract_at(
        self,
        address: str,
        interface: Union[Artifact, Sequence[Dict[str, Any]]],
        signer: Identity,
    ) -> DeployedContract:
        """Bind an address to an artifact's (or raw ABI's) interface."""
        self._require_started("bind contract")
        abi = interface.abi if isinstance(interface, Artifact) else interface
        return contract_at(self.w3, address, abi, signer, self.config.receipt_timeout)

    async def __aenter__(self):
        """Context manager enter"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        await self.stop()
