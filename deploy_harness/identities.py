"""Signing identities used for deployments and calls."""

from dataclasses import dataclass
from typing import Iterator, Optional

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

IDENTITY_NAMES = ("wallet", "wallet1", "wallet2", "exit_wallet")


@dataclass(frozen=True)
class Identity:
    """
    An account able to authorize transactions.

    Node-managed identities (account is None) are unlocked on the node and
    sign through eth_sendTransaction. Local identities sign with their own key.
    """

    name: str
    address: str
    account: Optional[LocalAccount] = None

    def __post_init__(self):
        object.__setattr__(self, "address", to_checksum_address(self.address))

    @property
    def signs_locally(self) -> bool:
        return self.account is not None

    def __str__(self) -> str:
        return f"{self.name} ({self.address})"


@dataclass(frozen=True)
class Identities:
    """The four identities provisioned for a harness run."""

    wallet: Identity
    wallet1: Identity
    wallet2: Identity
    exit_wallet: Identity

    def __iter__(self) -> Iterator[Identity]:
        return iter((self.wallet, self.wallet1, self.wallet2, self.exit_wallet))


def identities_from_accounts(accounts) -> Identities:
    """
    Map node accounts onto the named identities.

    Args:
        accounts: Unlocked account addresses reported by the node

    Raises:
        ValueError: If the node exposes fewer than four accounts
    """
    if len(accounts) < len(IDENTITY_NAMES):
        raise ValueError(
            f"Node exposes {len(accounts)} unlocked accounts, "
            f"{len(IDENTITY_NAMES)} are required"
        )

    return Identities(
        *(Identity(name=name, address=address) for name, address in zip(IDENTITY_NAMES, accounts))
    )
