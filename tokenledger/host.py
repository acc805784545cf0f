"""
host.py - In-Process Execution Environment

The token needs a few things from whatever runs it: the current time, a way
to look up other contracts by address, and native-value balances. Host
supplies exactly those, so tokens can be exercised without a live chain.

Time only moves forward. Caller identity is passed explicitly to every
token operation; the host does not track it.

The host owns the undo journal shared by every contract it runs. An
operation entered through transaction() is all-or-nothing across all of
them: if it raises, every journaled write made by any contract during it,
and every native-value movement, is unwound. Contracts that keep their own
state take part by writing through host.journal.
"""

from __future__ import annotations
from typing import Any, ContextManager, Dict, Optional
import hashlib
import itertools

from . import safemath
from .core import Address, ZERO_ADDRESS, InsufficientBalance
from .journal import Journal


class Host:
    """
    Clock, contract registry and native-value balances.

    Example:
        host = Host(initial_time=1_700_000_000)
        token = host.deploy_token("deployer", verbose=False)
        host.advance_time(600)
    """

    def __init__(self, initial_time: int = 0):
        self._now: int = safemath.require_uint256(initial_time, "initial_time")
        self.contracts: Dict[Address, Any] = {}
        self.native_balances: Dict[Address, int] = {}
        self.journal = Journal()
        self._nonce = itertools.count()

    def transaction(self) -> ContextManager[Journal]:
        """
        All-or-nothing scope spanning every contract on this host.

        Nests: an inner failure unwinds only the inner scope, an outer
        failure unwinds everything since the outer scope began.

        Example:
            with host.transaction():
                token_a.transfer(alice, bob, 10)
                token_b.transfer(bob, alice, 20)
        """
        return self.journal.transaction()

    # ========================================================================
    # TIME
    # ========================================================================

    @property
    def now(self) -> int:
        """Current host time in seconds."""
        return self._now

    def advance_time(self, seconds: int) -> int:
        """
        Move the clock forward by seconds. Returns the new time.

        Raises:
            ValueError: If seconds is negative
        """
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards by {seconds}s")
        self._now = safemath.add(self._now, seconds)
        return self._now

    def set_time(self, timestamp: int) -> None:
        """
        Jump the clock to timestamp.

        Raises:
            ValueError: If timestamp is before the current time
        """
        if timestamp < self._now:
            raise ValueError(f"Cannot move time backwards: {timestamp} < {self._now}")
        self._now = timestamp

    # ========================================================================
    # CONTRACT REGISTRY
    # ========================================================================

    def new_address(self, label: str = "contract") -> Address:
        """Derive a fresh, deterministic contract address."""
        digest = hashlib.sha256(f"{label}:{next(self._nonce)}".encode()).hexdigest()
        return "0x" + digest[:40]

    def register(self, address: Address, contract: Any) -> Address:
        """
        Place a contract at address.

        Raises:
            ValueError: If address is not a non-empty string, is the zero address, or is taken
        """
        if not isinstance(address, str) or not address.strip():
            raise ValueError("contract address must be a non-empty string")
        if address == ZERO_ADDRESS:
            raise ValueError("cannot register a contract at the zero address")
        if address in self.contracts:
            raise ValueError(f"Address {address} already has a contract")
        self.journal.set_item(self.contracts, address, contract)
        return address

    def get_contract(self, address: Address) -> Optional[Any]:
        return self.contracts.get(address)

    def deploy_token(self, deployer: Address, address: Optional[Address] = None, **kwargs) -> 'Token':
        """
        Create a Token owned by deployer and register it.

        Keyword arguments are passed through to Token.
        """
        from .token import Token

        address = address or self.new_address("token")
        return Token(self, address, deployer, **kwargs)

    # ========================================================================
    # NATIVE VALUE
    # ========================================================================

    def native_balance(self, address: Address) -> int:
        return self.native_balances.get(address, 0)

    def fund(self, address: Address, amount: int) -> None:
        """Create native value out of thin air (test and setup helper)."""
        self.journal.set_item(self.native_balances, address, safemath.add(
            self.native_balance(address), safemath.require_uint256(amount, "amount")
        ))

    def send_value(self, source: Address, dest: Address, amount: int) -> None:
        """
        Send native value, giving a destination contract the chance to refuse.

        If dest is a registered contract exposing receive_value(sender, amount),
        it is called first; any exception it raises aborts the send.

        Raises:
            InsufficientBalance: If source lacks the value
        """
        safemath.require_uint256(amount, "amount")
        balance = self.native_balance(source)
        if amount > balance:
            raise InsufficientBalance(f"{source}: native balance {balance} < {amount}")
        contract = self.contracts.get(dest)
        hook = getattr(contract, "receive_value", None)
        if callable(hook):
            hook(source, amount)
        self._move_value(source, dest, amount)

    def force_value(self, source: Address, dest: Address, amount: int) -> None:
        """
        Push native value into dest without consulting it.

        Models value arriving by a path outside the recipient's control.
        """
        safemath.require_uint256(amount, "amount")
        balance = self.native_balance(source)
        if amount > balance:
            raise InsufficientBalance(f"{source}: native balance {balance} < {amount}")
        self._move_value(source, dest, amount)

    def _move_value(self, source: Address, dest: Address, amount: int) -> None:
        if source == dest:
            return
        new_src = safemath.sub(self.native_balance(source), amount)
        new_dst = safemath.add(self.native_balance(dest), amount)
        self.journal.set_item(self.native_balances, source, new_src)
        self.journal.set_item(self.native_balances, dest, new_dst)
