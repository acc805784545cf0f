"""
Core types and constants for the gated emission token.

This module provides the foundational pieces shared by every component:
1. Constants: token metadata defaults, supply figures, period configuration
2. Type aliases: Address, BalanceMap
3. Enums: Phase of the transfer gate
4. Exceptions: TokenError and the domain-specific failure taxonomy
5. Protocols: FungibleAsset and ApprovalReceiver for external collaborators
6. Immutable records: TokenEvent

Nothing in this module mutates token state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Protocol, Tuple, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# The null address. It never holds a grant and can never receive a transfer.
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Default token metadata.
DEFAULT_NAME = "Emission Token"
DEFAULT_SYMBOL = "EMT"
DECIMALS = 18

# One whole token expressed in the smallest unit.
ONE_TOKEN = 10 ** DECIMALS

# Supply at deployment, credited to the deployer.
INIT_SUPPLY = 1_237_433_627 * ONE_TOKEN

# Absolute supply cap, exactly twice the initial supply.
MAX_SUPPLY = 2 * INIT_SUPPLY

# Length of one emission period, in seconds.
PERIOD_UNIT = 600

# Period index at which the emission schedule is exhausted.
LAST_PERIOD = 1_051_200

# Largest value representable by the host's native unsigned integer.
UINT256_MAX = 2 ** 256 - 1


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Account or contract identifier supplied by the host.
Address = str

# Mapping from holder address to balance in the smallest unit.
BalanceMap = Dict[Address, int]


# ============================================================================
# ENUMS
# ============================================================================

class Phase(Enum):
    """
    Phase of the transfer gate.

    LOCKED: Only addresses holding a grant may originate transfers.
    OPEN: Anyone may originate transfers. Terminal; never reverts to LOCKED.
    """
    LOCKED = "locked"
    OPEN = "open"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class TokenError(Exception):
    """Base exception for all token-related errors."""
    pass


class InvalidRecipient(TokenError):
    """Raised when a transfer targets the zero address."""
    pass


class InsufficientBalance(TokenError):
    """Raised when an amount exceeds the holder's balance."""
    pass


class ExceedsAllowance(TokenError):
    """Raised when a delegated transfer exceeds the spender's allowance."""
    pass


class TransfersNotEnabled(TokenError):
    """Raised when the transfer gate does not let the caller originate a transfer."""
    pass


class AlreadyOpen(TokenError):
    """Raised when enabling transfers a second time."""
    pass


class GateAlreadyOpen(TokenError):
    """Raised when editing transfer grants after the gate has opened."""
    pass


class AlreadyGranted(TokenError):
    """Raised when granting a transfer right the address already holds."""
    pass


class AlreadyCancelled(TokenError):
    """Raised when cancelling a transfer right the address does not hold."""
    pass


class ZeroAddress(TokenError):
    """Raised when the zero address is passed where a real address is required."""
    pass


class NotOwner(TokenError):
    """Raised when a privileged operation is invoked by a non-owner."""
    pass


class CannotRemoveSelf(TokenError):
    """Raised when an owner tries to remove itself from the owner set."""
    pass


class AlreadyStarted(TokenError):
    """Raised when the minting period is started a second time."""
    pass


class GateNotOpen(TokenError):
    """Raised when starting the minting period before transfers are enabled."""
    pass


class ZeroBalance(TokenError):
    """Raised when a recovery sweep finds nothing to withdraw."""
    pass


class CallbackUnsupported(TokenError):
    """Raised when an approveAndCall target does not expose receive_approval."""
    pass


class ArithmeticOverflow(TokenError):
    """Raised when checked uint256 arithmetic would overflow or underflow."""
    pass


class SupplyCapExceeded(TokenError):
    """Raised when a mint would push total supply above the hard cap."""
    pass


class EtherNotAccepted(TokenError):
    """Raised when native value is sent directly to the token."""
    pass


class AssetNotFound(TokenError):
    """Raised when asset recovery targets an address with no fungible asset."""
    pass


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class FungibleAsset(Protocol):
    """
    Minimal interface of another token held by this one.

    Used by asset recovery to query and sweep balances of foreign tokens
    that were sent to the token's own address.
    """

    def balance_of(self, holder: Address) -> int:
        ...

    def transfer(self, sender: Address, to: Address, amount: int) -> bool:
        ...


@runtime_checkable
class ApprovalReceiver(Protocol):
    """
    Notification target for approve_and_call.

    The callback receives the approving account, the approved amount, the
    address of the approving token, and opaque caller data.
    """

    def receive_approval(self, sender: Address, amount: int, token: Address, data: bytes) -> Any:
        ...


# ============================================================================
# EVENTS
# ============================================================================

@dataclass(frozen=True, slots=True)
class TokenEvent:
    """
    Immutable record of something a successful operation did.

    Attributes:
        name: Event name ("Transfer", "Approval", "Mint", ...)
        args: Event arguments as a tuple of (key, value) pairs
        timestamp: Host time at which the operation ran
        sequence_number: Monotonic position within the token's event log
    """
    name: str
    args: Tuple[Tuple[str, Any], ...]
    timestamp: int
    sequence_number: int

    @property
    def args_dict(self) -> Dict[str, Any]:
        """Get args as a dictionary for convenience."""
        return dict(self.args)

    def __repr__(self) -> str:
        rendered = ", ".join(f"{k}={v}" for k, v in self.args)
        return f"{self.name}({rendered})@{self.timestamp}#{self.sequence_number}"
