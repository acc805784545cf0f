"""
tokenledger - Gated Emission Token Ledger

A fungible token whose transfers are gated until launch and whose supply
grows on a deterministic, time-driven emission schedule up to a hard cap.

Usage:
    from tokenledger import Host, ONE_TOKEN, PERIOD_UNIT

    host = Host(initial_time=1_700_000_000)
    token = host.deploy_token("deployer", verbose=False)

    # Pre-launch distribution (deployer holds a transfer grant)
    token.transfer("deployer", "alice", 100 * ONE_TOKEN)

    # Launch: irreversible
    token.enable_transfers("deployer")
    token.start_minting_period("deployer")

    # One period later, mint whatever the schedule allows
    host.advance_time(PERIOD_UNIT)
    minted = token.mint("deployer", "treasury", 10_000 * ONE_TOKEN)
"""

# Core types
from .core import (
    Address,
    BalanceMap,
    Phase,
    TokenEvent,
    FungibleAsset,
    ApprovalReceiver,
    ZERO_ADDRESS,
    DEFAULT_NAME,
    DEFAULT_SYMBOL,
    DECIMALS,
    ONE_TOKEN,
    INIT_SUPPLY,
    MAX_SUPPLY,
    PERIOD_UNIT,
    LAST_PERIOD,
    UINT256_MAX,
    TokenError,
    InvalidRecipient,
    InsufficientBalance,
    ExceedsAllowance,
    TransfersNotEnabled,
    AlreadyOpen,
    GateAlreadyOpen,
    AlreadyGranted,
    AlreadyCancelled,
    ZeroAddress,
    NotOwner,
    CannotRemoveSelf,
    AlreadyStarted,
    GateNotOpen,
    ZeroBalance,
    CallbackUnsupported,
    ArithmeticOverflow,
    SupplyCapExceeded,
    EtherNotAccepted,
    AssetNotFound,
)

# Undo journal
from .journal import Journal, JournalEntry

# Components
from .ledger import Ledger
from .gate import TransferGate
from .allowance import AllowanceBook
from .owners import OwnerSet

# Emission schedule
from .emission import (
    EmissionParameters,
    EmissionSchedule,
    DEFAULT_EMISSION,
    first_allotment,
    decrement,
    allotment,
    max_allowed_supply,
    current_period,
    mintable_amount,
    schedule_rows,
)

# Aggregate and environment
from .token import Token, atomic
from .host import Host


__all__ = [
    # Core
    'Address', 'BalanceMap', 'Phase', 'TokenEvent',
    'FungibleAsset', 'ApprovalReceiver',
    'ZERO_ADDRESS', 'DEFAULT_NAME', 'DEFAULT_SYMBOL', 'DECIMALS', 'ONE_TOKEN',
    'INIT_SUPPLY', 'MAX_SUPPLY', 'PERIOD_UNIT', 'LAST_PERIOD', 'UINT256_MAX',
    # Exceptions
    'TokenError', 'InvalidRecipient', 'InsufficientBalance', 'ExceedsAllowance',
    'TransfersNotEnabled', 'AlreadyOpen', 'GateAlreadyOpen', 'AlreadyGranted',
    'AlreadyCancelled', 'ZeroAddress', 'NotOwner', 'CannotRemoveSelf',
    'AlreadyStarted', 'GateNotOpen', 'ZeroBalance', 'CallbackUnsupported',
    'ArithmeticOverflow', 'SupplyCapExceeded', 'EtherNotAccepted', 'AssetNotFound',
    # Journal
    'Journal', 'JournalEntry',
    # Components
    'Ledger', 'TransferGate', 'AllowanceBook', 'OwnerSet',
    # Emission
    'EmissionParameters', 'EmissionSchedule', 'DEFAULT_EMISSION',
    'first_allotment', 'decrement', 'allotment', 'max_allowed_supply',
    'current_period', 'mintable_amount', 'schedule_rows',
    # Aggregate
    'Token', 'atomic', 'Host',
]
