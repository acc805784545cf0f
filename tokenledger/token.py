"""
token.py - Gated Emission Token

Token is the single aggregate tying together the Ledger, TransferGate,
EmissionSchedule, AllowanceBook and OwnerSet. It is the only entry point
external callers use, and the only place guards are checked.

Key responsibilities:
    - Explicit caller identity on every operation (first positional argument)
    - Owner and gate preconditions at the top of each operation
    - One host time sample per operation
    - All-or-nothing execution through the host transaction: any exception
      unwinds every write, on this token and on any other contract it reached
    - Event log as the audit trail
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import functools

from . import safemath
from .core import (
    Address, TokenEvent,
    ZERO_ADDRESS, DEFAULT_NAME, DEFAULT_SYMBOL, DECIMALS,
    InsufficientBalance, InvalidRecipient, CallbackUnsupported,
    ZeroBalance, ZeroAddress, EtherNotAccepted, AssetNotFound,
    FungibleAsset, ApprovalReceiver,
)
from .ledger import Ledger
from .gate import TransferGate
from .emission import EmissionParameters, EmissionSchedule, DEFAULT_EMISSION
from .allowance import AllowanceBook
from .owners import OwnerSet


def atomic(method):
    """
    Run a Token operation all-or-nothing.

    The operation runs inside a host transaction. If it raises, every
    journaled write made during it is unwound, including writes to other
    contracts reached through callbacks or asset sweeps, and the exception
    propagates unchanged.
    """
    @functools.wraps(method)
    def wrapper(self: 'Token', *args, **kwargs):
        try:
            with self.host.transaction():
                return method(self, *args, **kwargs)
        except Exception as e:
            if self.verbose:
                print(f"✗ REJECTED: {method.__name__}: {type(e).__name__}: {e}")
            raise
    return wrapper


class Token:
    """
    Fungible token with a transfer gate, an emission schedule and multiple owners.

    Lifecycle:
        1. Deploy: INIT_SUPPLY credited to the deployer, gate LOCKED with the
           deployer granted, deployer is the only owner
        2. Pre-launch distribution by granted addresses
        3. enable_transfers(): gate OPEN forever, grants frozen
        4. start_minting_period(): emission schedule clock starts
        5. mint() at any cadence, capped by the schedule

    Thread Safety:
        Not thread-safe. Operations are assumed to be serialized by the host.

    Example:
        host = Host()
        token = Token(host, "0xtoken", "deployer", verbose=False)
        token.transfer("deployer", "alice", 10 * ONE_TOKEN)
        token.enable_transfers("deployer")
        token.start_minting_period("deployer")
        host.advance_time(PERIOD_UNIT)
        minted = token.mint("deployer", "treasury", 10_000 * ONE_TOKEN)
    """

    def __init__(
        self,
        host: Any,
        address: Address,
        deployer: Address,
        name: str = DEFAULT_NAME,
        symbol: str = DEFAULT_SYMBOL,
        decimals: int = DECIMALS,
        params: EmissionParameters = DEFAULT_EMISSION,
        verbose: bool = True,
    ):
        """
        Create a token and register it with the host at address.

        Args:
            host: Execution environment (clock, registry, native value)
            address: The token's own address
            deployer: First owner, first grant holder, initial supply holder
            name: Human-readable token name
            symbol: Ticker symbol
            decimals: Number of decimals of the smallest unit
            params: Emission schedule configuration
            verbose: Print operation outcomes (default: True)

        Raises:
            ValueError: If deployer is not a non-empty string
            ZeroAddress: If deployer is the zero address
        """
        if not isinstance(deployer, str) or not deployer.strip():
            raise ValueError(f"deployer must be a non-empty address string, got {deployer!r}")
        if deployer == ZERO_ADDRESS:
            raise ZeroAddress("the zero address cannot deploy a token")

        self.host = host
        self.address = address
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.params = params
        self.verbose = verbose

        journal = host.journal
        self.ledger = Ledger(params.max_supply, journal)
        self.gate = TransferGate(initial_grants=(deployer,), journal=journal)
        self.schedule = EmissionSchedule(params, journal)
        self.allowances = AllowanceBook(journal)
        self.owners = OwnerSet(deployer, journal)
        self.event_log: List[TokenEvent] = []

        self.ledger.credit_mint(deployer, params.init_supply)
        self._emit("Transfer", ("from", ZERO_ADDRESS), ("to", deployer), ("value", params.init_supply))
        host.register(address, self)

        if self.verbose:
            print(f"📝 Deployed: {symbol} ({name}) at {address}, supply={params.init_supply}")

    def __repr__(self) -> str:
        return f"Token({self.symbol} @ {self.address}, supply={self.total_supply}, phase={self.gate.phase.value})"

    # ========================================================================
    # READS
    # ========================================================================

    @property
    def total_supply(self) -> int:
        return self.ledger.total_supply

    @property
    def transferable(self) -> bool:
        """True once transfers have been enabled."""
        return self.gate.is_open

    @property
    def first_period_start(self) -> Optional[int]:
        """Start of the emission schedule, or None if minting has not started."""
        return self.schedule.first_period_start

    def balance_of(self, holder: Address) -> int:
        return self.ledger.balance_of(holder)

    def allowance(self, owner: Address, spender: Address) -> int:
        return self.allowances.allowance(owner, spender)

    def has_transfer_grant(self, addr: Address) -> bool:
        return self.gate.has_grant(addr)

    def is_owner(self, addr: Address) -> bool:
        return addr in self.owners

    def current_period(self, now: Optional[int] = None) -> int:
        """Emission period at now (default: host time)."""
        return self.schedule.current_period(self.host.now if now is None else now)

    def max_allowed_supply(self, period: int) -> int:
        return self.schedule.max_allowed_supply(period)

    def verify_conservation(self) -> Dict[str, Any]:
        return self.ledger.verify_conservation()

    def events(self, name: Optional[str] = None) -> List[TokenEvent]:
        """Return logged events, optionally only those with the given name."""
        if name is None:
            return list(self.event_log)
        return [e for e in self.event_log if e.name == name]

    # ========================================================================
    # TRANSFER GATE (privileged)
    # ========================================================================

    @atomic
    def enable_transfers(self, caller: Address) -> bool:
        """
        Make the token publicly transferable. Irreversible.

        Raises:
            NotOwner: If caller is not an owner
            AlreadyOpen: If transfers are already enabled
        """
        self.owners.require_owner(caller)
        self.gate.enable()
        self._emit("TransfersEnabled", ("by", caller))
        return True

    @atomic
    def grant_transfer_right(self, caller: Address, addr: Address) -> bool:
        """
        Allow addr to originate transfers before launch.

        Raises:
            NotOwner, GateAlreadyOpen, ZeroAddress, AlreadyGranted
        """
        self.owners.require_owner(caller)
        self.gate.grant(addr)
        self._emit("TransferRightGranted", ("account", addr))
        return True

    @atomic
    def cancel_transfer_right(self, caller: Address, addr: Address) -> bool:
        """
        Revoke addr's pre-launch transfer right.

        Raises:
            NotOwner, GateAlreadyOpen, AlreadyCancelled
        """
        self.owners.require_owner(caller)
        self.gate.cancel(addr)
        self._emit("TransferRightCancelled", ("account", addr))
        return True

    # ========================================================================
    # TRANSFERS
    # ========================================================================

    @atomic
    def transfer(self, caller: Address, to: Address, amount: int) -> bool:
        """
        Move amount of caller's tokens to `to`.

        Raises:
            TransfersNotEnabled: If caller may not originate transfers yet
            InvalidRecipient: If `to` is the zero address
            InsufficientBalance: If caller holds less than amount
        """
        self.gate.require_can_originate(caller)
        self.ledger.transfer(caller, to, amount)
        self._emit("Transfer", ("from", caller), ("to", to), ("value", amount))
        return True

    @atomic
    def transfer_from(self, caller: Address, owner: Address, to: Address, amount: int) -> bool:
        """
        Move amount from owner to `to` using caller's allowance.

        Checks run in this order: gate open, allowance, owner balance, recipient.

        Raises:
            TransfersNotEnabled, ExceedsAllowance, InsufficientBalance, InvalidRecipient
        """
        safemath.require_uint256(amount, "amount")
        self.gate.require_open()
        self.allowances.require_covers(owner, caller, amount)
        balance = self.ledger.balance_of(owner)
        if amount > balance:
            raise InsufficientBalance(f"{owner}: balance {balance} < {amount}")
        if to == ZERO_ADDRESS:
            raise InvalidRecipient("cannot transfer to the zero address")

        self.allowances.consume(owner, caller, amount)
        self.ledger.transfer(owner, to, amount)
        self._emit("Transfer", ("from", owner), ("to", to), ("value", amount))
        return True

    @atomic
    def burn(self, caller: Address, amount: int) -> bool:
        """
        Destroy amount of caller's tokens, shrinking total supply.

        Burning originates from the holder, so it is gated like a transfer.

        Raises:
            TransfersNotEnabled, InsufficientBalance
        """
        self.gate.require_can_originate(caller)
        self.ledger.burn(caller, amount)
        self._emit("Burn", ("burner", caller), ("value", amount))
        self._emit("Transfer", ("from", caller), ("to", ZERO_ADDRESS), ("value", amount))
        return True

    # ========================================================================
    # ALLOWANCES
    # ========================================================================

    @atomic
    def approve(self, caller: Address, spender: Address, amount: int) -> bool:
        """Set spender's allowance over caller's tokens to amount."""
        self._approve(caller, spender, amount)
        return True

    @atomic
    def increase_approval(self, caller: Address, spender: Address, added: int) -> bool:
        self.gate.require_open()
        new_value = self.allowances.increase(caller, spender, added)
        self._emit("Approval", ("owner", caller), ("spender", spender), ("value", new_value))
        return True

    @atomic
    def decrease_approval(self, caller: Address, spender: Address, subtracted: int) -> bool:
        """Lower spender's allowance; going below zero clamps to zero."""
        self.gate.require_open()
        new_value = self.allowances.decrease(caller, spender, subtracted)
        self._emit("Approval", ("owner", caller), ("spender", spender), ("value", new_value))
        return True

    @atomic
    def approve_and_call(self, caller: Address, spender: Address, amount: int, data: bytes = b"") -> bool:
        """
        Approve spender, then notify it through receive_approval().

        The spender must be a contract registered with the host that exposes
        receive_approval(sender, amount, token, data). If it does not, or if
        the callback raises, the approval is rolled back.

        Raises:
            TransfersNotEnabled: If transfers are not enabled
            CallbackUnsupported: If spender has no receive_approval callback
        """
        self._approve(caller, spender, amount)
        target = self.host.get_contract(spender)
        if not isinstance(target, ApprovalReceiver):
            raise CallbackUnsupported(f"{spender} does not implement receive_approval")
        target.receive_approval(caller, amount, self.address, data)
        return True

    def _approve(self, caller: Address, spender: Address, amount: int) -> None:
        self.gate.require_open()
        self.allowances.approve(caller, spender, amount)
        self._emit("Approval", ("owner", caller), ("spender", spender), ("value", amount))

    # ========================================================================
    # EMISSION (privileged)
    # ========================================================================

    @atomic
    def start_minting_period(self, caller: Address) -> bool:
        """
        Start the emission schedule clock at the current host time.

        Raises:
            NotOwner, GateNotOpen, AlreadyStarted
        """
        self.owners.require_owner(caller)
        now = self.host.now
        self.schedule.start(self.gate, now)
        self._emit("MintingStarted", ("first_period_start", now))
        return True

    @atomic
    def mint(self, caller: Address, to: Address, amount: int) -> int:
        """
        Mint up to amount new tokens to `to`, capped by the emission schedule.

        Never fails because the request is too large; the excess is simply
        not minted. Before start_minting_period() this mints nothing.

        Returns:
            The amount actually minted

        Raises:
            NotOwner: If caller is not an owner
        """
        self.owners.require_owner(caller)
        now = self.host.now
        minted = self.schedule.mintable(now, self.ledger.total_supply, amount)
        if minted == 0:
            return 0
        self.ledger.credit_mint(to, minted)
        self._emit("Mint", ("to", to), ("value", minted))
        self._emit("Transfer", ("from", ZERO_ADDRESS), ("to", to), ("value", minted))
        return minted

    # ========================================================================
    # OWNERS (privileged)
    # ========================================================================

    @atomic
    def add_owner(self, caller: Address, addr: Address) -> bool:
        """
        Add addr to the owners. Adding an existing owner changes nothing.

        Raises:
            NotOwner, ZeroAddress
        """
        if self.owners.add(caller, addr):
            self._emit("OwnerAdded", ("owner", addr))
        return True

    @atomic
    def remove_owner(self, caller: Address, addr: Address) -> bool:
        """
        Remove addr from the owners. Removing a non-owner changes nothing.

        Raises:
            NotOwner, CannotRemoveSelf
        """
        if self.owners.remove(caller, addr):
            self._emit("OwnerRemoved", ("owner", addr))
        return True

    # ========================================================================
    # ASSET RECOVERY (privileged)
    # ========================================================================

    @atomic
    def withdraw_erc20_tokens(self, caller: Address, asset_address: Address) -> int:
        """
        Sweep this token's whole balance of another token to caller.

        Returns:
            The amount withdrawn

        Raises:
            NotOwner: If caller is not an owner
            AssetNotFound: If no fungible asset is registered at asset_address
            ZeroBalance: If this token holds none of the asset
        """
        self.owners.require_owner(caller)
        asset = self.host.get_contract(asset_address)
        if not isinstance(asset, FungibleAsset):
            raise AssetNotFound(f"no fungible asset registered at {asset_address}")
        balance = asset.balance_of(self.address)
        if balance == 0:
            raise ZeroBalance(f"{self.address} holds no {asset_address}")
        asset.transfer(self.address, caller, balance)
        self._emit("TokensWithdrawn", ("asset", asset_address), ("to", caller), ("value", balance))
        return balance

    @atomic
    def withdraw_ether(self, caller: Address) -> int:
        """
        Sweep native value that reached this token by any path to caller.

        Returns:
            The amount withdrawn

        Raises:
            NotOwner, ZeroBalance
        """
        self.owners.require_owner(caller)
        balance = self.host.native_balance(self.address)
        if balance == 0:
            raise ZeroBalance(f"{self.address} holds no native value")
        self.host.send_value(self.address, caller, balance)
        self._emit("EtherWithdrawn", ("to", caller), ("value", balance))
        return balance

    def receive_value(self, sender: Address, amount: int) -> None:
        """Host hook for direct native-value transfers. Always refuses."""
        raise EtherNotAccepted(f"{self.symbol} does not accept native value (from {sender}, {amount})")

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _emit(self, name: str, *args: Tuple[str, Any]) -> TokenEvent:
        event = TokenEvent(
            name=name,
            args=tuple(args),
            timestamp=self.host.now,
            sequence_number=len(self.event_log),
        )
        self.host.journal.append(self.event_log, event)
        if self.verbose:
            print(f"✓ {event!r}")
        return event
