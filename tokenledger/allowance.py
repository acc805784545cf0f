"""
allowance.py - Delegated Transfer Allowances

Tracks how much each spender may move on each owner's behalf. The book only
does arithmetic; gate and balance checks belong to the Token.
"""

from __future__ import annotations
from typing import Dict, Optional

from . import safemath
from .core import Address, ExceedsAllowance
from .journal import Journal


class AllowanceBook:
    """owner -> spender -> remaining allowance."""

    def __init__(self, journal: Optional[Journal] = None):
        self._allowed: Dict[Address, Dict[Address, int]] = {}
        self.journal = journal if journal is not None else Journal()

    def allowance(self, owner: Address, spender: Address) -> int:
        return self._allowed.get(owner, {}).get(spender, 0)

    def _set(self, owner: Address, spender: Address, value: int) -> None:
        if owner not in self._allowed:
            self.journal.set_item(self._allowed, owner, {})
        self.journal.set_item(self._allowed[owner], spender, value)

    def approve(self, owner: Address, spender: Address, amount: int) -> int:
        """Overwrite the allowance. Returns the new value."""
        self._set(owner, spender, safemath.require_uint256(amount, "amount"))
        return amount

    def increase(self, owner: Address, spender: Address, added: int) -> int:
        """Add to the allowance with overflow checking. Returns the new value."""
        safemath.require_uint256(added, "added")
        new_value = safemath.add(self.allowance(owner, spender), added)
        self._set(owner, spender, new_value)
        return new_value

    def decrease(self, owner: Address, spender: Address, subtracted: int) -> int:
        """Subtract from the allowance, clamping at zero. Returns the new value."""
        safemath.require_uint256(subtracted, "subtracted")
        current = self.allowance(owner, spender)
        new_value = 0 if subtracted > current else current - subtracted
        self._set(owner, spender, new_value)
        return new_value

    def require_covers(self, owner: Address, spender: Address, amount: int) -> None:
        current = self.allowance(owner, spender)
        if amount > current:
            raise ExceedsAllowance(f"{spender} may spend {current} of {owner}, requested {amount}")

    def consume(self, owner: Address, spender: Address, amount: int) -> int:
        """
        Spend amount of the allowance.

        Raises:
            ExceedsAllowance: If amount is larger than the allowance
        """
        self.require_covers(owner, spender, amount)
        new_value = safemath.sub(self.allowance(owner, spender), amount)
        self._set(owner, spender, new_value)
        return new_value
