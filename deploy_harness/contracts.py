"""
Contract primitives - deployment, transaction submission and confirmation

Responsibilities:
1. Sign and submit transactions for node-managed or local identities
2. Deploy an artifact and wait for its receipt
3. Provide contract handles bound to an address, an ABI and a signer
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from eth_utils import to_checksum_address, to_hex
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from .artifacts import Artifact
from .config import DEFAULT_DEPLOY_GAS_LIMIT, DEFAULT_RECEIPT_TIMEOUT
from .exceptions import DeploymentFailure, TransactionReverted
from .identities import Identity
from .reverts import UnrecognizedFailure, classify_failure


async def send_transaction(w3: AsyncWeb3, signer: Identity, tx: Dict[str, Any]):
    """
    Submit a transaction on behalf of a signer.

    Node-managed identities go through eth_sendTransaction. Local identities
    sign with their key; the nonce is read from the node right before signing.

    Returns:
        Transaction hash
    """
    tx = dict(tx)
    tx["from"] = signer.address

    if not signer.signs_locally:
        return await w3.eth.send_transaction(tx)

    if "nonce" not in tx:
        tx["nonce"] = await w3.eth.get_transaction_count(signer.address, "pending")
    if "chainId" not in tx:
        tx["chainId"] = await w3.eth.chain_id
    if "gasPrice" not in tx and "maxFeePerGas" not in tx:
        tx["gasPrice"] = await w3.eth.gas_price

    signed_tx = signer.account.sign_transaction(tx)
    return await w3.eth.send_raw_transaction(signed_tx.raw_transaction)


class PendingTransaction:
    """A submitted transaction that has not been confirmed yet."""

    def __init__(
        self,
        w3: AsyncWeb3,
        tx_hash,
        timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        description: str = "Transaction",
    ):
        self.w3 = w3
        self.tx_hash = tx_hash
        self.timeout = timeout
        self.description = description

    @property
    def hash_hex(self) -> str:
        return to_hex(self.tx_hash)

    async def wait(self):
        """
        Wait until the transaction is mined.

        Returns:
            Transaction receipt

        Raises:
            TransactionReverted: If the receipt status is not 1; its reason is
                recovered by replaying the transaction with eth_call
        """
        receipt = await self.w3.eth.wait_for_transaction_receipt(
            self.tx_hash, timeout=self.timeout
        )
        if receipt["status"] != 1:
            reason = await self.replay_revert_reason(receipt)
            detail = f": {reason}" if reason is not None else ""
            raise TransactionReverted(
                f"{self.description} reverted{detail} (status={receipt['status']}). Hash: {self.hash_hex}",
                tx_hash=self.hash_hex,
                receipt=receipt,
                reason=reason,
            )
        return receipt

    async def replay_revert_reason(self, receipt) -> Optional[str]:
        """
        Re-run a failed transaction as a call in the block it was mined in.

        Returns:
            The revert reason, or None if the replay yields none
        """
        tx = await self.w3.eth.get_transaction(self.tx_hash)
        call: Dict[str, Any] = {
            "from": tx["from"],
            "data": to_hex(tx["input"]),
            "value": tx["value"],
            "gas": tx["gas"],
        }
        if tx.get("to"):
            call["to"] = tx["to"]

        try:
            await self.w3.eth.call(call, receipt["blockNumber"])
        except Exception as e:
            failure = classify_failure(e)
            if not isinstance(failure, UnrecognizedFailure):
                return failure.reason()
        return None

    def __repr__(self) -> str:
        return f"PendingTransaction({self.description}, {self.hash_hex})"


@dataclass(frozen=True)
class DeployedContract:
    """Live contract handle: address, interface and the identity that signs calls."""

    address: str
    abi: Tuple[Dict[str, Any], ...]
    signer: Identity
    contract: AsyncContract = field(repr=False, compare=False)
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT

    @property
    def w3(self) -> AsyncWeb3:
        return self.contract.w3

    def function(self, fn_name: str, *args):
        return self.contract.functions[fn_name](*args)

    async def call(self, fn_name: str, *args):
        """Read-only call, evaluated against the latest block."""
        return await self.function(fn_name, *args).call({"from": self.signer.address})

    async def transact(
        self,
        fn_name: str,
        *args,
        gas: Optional[int] = None,
        value: int = 0,
    ) -> PendingTransaction:
        """
        Submit a state-changing call.

        Without an explicit gas limit the node estimates it, so a call that
        would revert fails here rather than at wait().

        Returns:
            PendingTransaction to await confirmation on
        """
        params: Dict[str, Any] = {"from": self.signer.address, "value": value}
        if gas is not None:
            params["gas"] = gas

        tx = await self.function(fn_name, *args).build_transaction(params)
        tx_hash = await send_transaction(self.w3, self.signer, tx)
        return PendingTransaction(self.w3, tx_hash, self.receipt_timeout, f"{fn_name}()")

    def connect(self, signer: Identity) -> "DeployedContract":
        """Same contract, calls signed by another identity."""
        return replace(self, signer=signer)


def contract_at(
    w3: AsyncWeb3,
    address: str,
    abi: Sequence[Dict[str, Any]],
    signer: Identity,
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
) -> DeployedContract:
    """Bind an existing address to an interface and a signer."""
    address = to_checksum_address(address)
    abi = tuple(abi)
    contract = w3.eth.contract(address=address, abi=list(abi))
    return DeployedContract(
        address=address,
        abi=abi,
        signer=signer,
        contract=contract,
        receipt_timeout=receipt_timeout,
    )


async def deploy_contract(
    w3: AsyncWeb3,
    signer: Identity,
    artifact: Artifact,
    constructor_args: Sequence[Any] = (),
    gas_limit: int = DEFAULT_DEPLOY_GAS_LIMIT,
    timeout: float = DEFAULT_RECEIPT_TIMEOUT,
) -> DeployedContract:
    """
    Deploy an artifact and wait for the deployment receipt.

    Args:
        w3: Connected web3 instance
        signer: Deploying identity
        artifact: Contract to deploy
        constructor_args: Constructor arguments
        gas_limit: Gas limit for the deployment transaction
        timeout: Receipt wait timeout (seconds)

    Returns:
        DeployedContract bound to the new address

    Raises:
        DeploymentFailure: If the deployment reverted or created no contract
    """
    factory = w3.eth.contract(abi=artifact.abi_list, bytecode=artifact.bytecode)
    deploy_tx = await factory.constructor(*constructor_args).build_transaction(
        {"from": signer.address, "gas": gas_limit}
    )

    tx_hash = await send_transaction(w3, signer, deploy_tx)
    pending = PendingTransaction(w3, tx_hash, timeout, f"{artifact.name} deployment")

    try:
        receipt = await pending.wait()
    except TransactionReverted as e:
        raise DeploymentFailure(f"{artifact.name} deployment failed: {e}") from e

    contract_address = receipt.get("contractAddress")
    if not contract_address:
        raise DeploymentFailure(f"{artifact.name} deployment failed - no contract address")

    return contract_at(w3, contract_address, artifact.abi, signer, timeout)
