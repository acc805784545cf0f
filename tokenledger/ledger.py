"""
ledger.py - Balance and Total Supply Bookkeeping

The Ledger holds per-holder balances and the total supply of the token.
It enforces conservation (sum of balances == total supply) and the hard
supply cap, and knows nothing about gates, owners or time.

Key responsibilities:
    - Transfers that redistribute without changing supply
    - Burns that shrink holdings and supply together
    - Mint credits that grow holdings and supply together, never past the cap
    - Conservation verification for tests and audits
"""

from __future__ import annotations
from typing import Dict, Any, Optional

from . import safemath
from .core import (
    Address, BalanceMap,
    ZERO_ADDRESS,
    InvalidRecipient, InsufficientBalance, SupplyCapExceeded,
)
from .journal import Journal


class Ledger:
    """
    Unsigned balance ledger with a supply cap.

    All arithmetic is checked uint256 arithmetic; no balance can go negative
    and no operation can wrap.

    Thread Safety:
        Not thread-safe. The owning Token serializes access.

    Example:
        ledger = Ledger(max_supply=2000)
        ledger.credit_mint("alice", 1000)
        ledger.transfer("alice", "bob", 250)
        assert ledger.verify_conservation()['valid']
    """

    def __init__(self, max_supply: int, journal: Optional[Journal] = None):
        """
        Create an empty ledger.

        Args:
            max_supply: Absolute cap on total supply
            journal: Undo journal recording writes (default: a private one)
        """
        self.max_supply = safemath.require_uint256(max_supply, "max_supply")
        self.total_supply: int = 0
        self.balances: Dict[Address, int] = {}
        self.journal = journal if journal is not None else Journal()

    # ========================================================================
    # READS
    # ========================================================================

    def balance_of(self, holder: Address) -> int:
        """Return the holder's balance (0 for unknown holders)."""
        return self.balances.get(holder, 0)

    def holders(self) -> BalanceMap:
        """Return all non-zero balances."""
        return {holder: amount for holder, amount in self.balances.items() if amount}

    def verify_conservation(self) -> Dict[str, Any]:
        """
        Verify that the sum of all balances equals the total supply.

        Holders are sorted before summation for a deterministic
        accumulation order.

        Returns:
            Dict with keys:
            - 'valid': bool - True if conservation holds and supply is within cap
            - 'total_supply': int
            - 'sum_of_balances': int
            - 'difference': int - sum_of_balances - total_supply
        """
        summed = sum(self.balances[h] for h in sorted(self.balances))
        return {
            'valid': summed == self.total_supply and self.total_supply <= self.max_supply,
            'total_supply': self.total_supply,
            'sum_of_balances': summed,
            'difference': summed - self.total_supply,
        }

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def transfer(self, source: Address, dest: Address, amount: int) -> bool:
        """
        Move amount from source to dest, leaving total supply unchanged.

        Raises:
            InvalidRecipient: If dest is the zero address
            InsufficientBalance: If amount exceeds the source balance
        """
        safemath.require_uint256(amount, "amount")
        if dest == ZERO_ADDRESS:
            raise InvalidRecipient("cannot transfer to the zero address")
        balance = self.balance_of(source)
        if amount > balance:
            raise InsufficientBalance(f"{source}: balance {balance} < {amount}")

        # Compute both sides before touching state
        new_src = safemath.sub(balance, amount)
        if source == dest:
            return True
        new_dst = safemath.add(self.balance_of(dest), amount)
        self.journal.set_item(self.balances, source, new_src)
        self.journal.set_item(self.balances, dest, new_dst)
        return True

    def burn(self, holder: Address, amount: int) -> bool:
        """
        Destroy amount from holder's balance and from total supply.

        Raises:
            InsufficientBalance: If amount exceeds the holder's balance
        """
        safemath.require_uint256(amount, "amount")
        balance = self.balance_of(holder)
        if amount > balance:
            raise InsufficientBalance(f"{holder}: balance {balance} < {amount}")
        new_supply = safemath.sub(self.total_supply, amount)
        self.journal.set_item(self.balances, holder, safemath.sub(balance, amount))
        self.journal.set_attr(self, "total_supply", new_supply)
        return True

    def credit_mint(self, dest: Address, amount: int) -> bool:
        """
        Create amount new tokens in dest's balance.

        The caller decides how much may be minted; this is the last-line
        check that the hard cap is never crossed.

        Raises:
            InvalidRecipient: If dest is the zero address
            SupplyCapExceeded: If total supply would exceed max_supply
        """
        safemath.require_uint256(amount, "amount")
        if dest == ZERO_ADDRESS:
            raise InvalidRecipient("cannot mint to the zero address")
        new_supply = safemath.add(self.total_supply, amount)
        if new_supply > self.max_supply:
            raise SupplyCapExceeded(f"supply {new_supply} > cap {self.max_supply}")
        self.journal.set_item(self.balances, dest, safemath.add(self.balance_of(dest), amount))
        self.journal.set_attr(self, "total_supply", new_supply)
        return True
