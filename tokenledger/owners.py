"""
owners.py - Multi-Owner Access Control

A flat set of privileged addresses. The deployer is the first member and,
because no owner may remove itself, the set can never become empty.
"""

from __future__ import annotations
from typing import FrozenSet, Optional, Set

from .core import Address, ZERO_ADDRESS, NotOwner, CannotRemoveSelf, ZeroAddress
from .journal import Journal


class OwnerSet:

    def __init__(self, first_owner: Address, journal: Optional[Journal] = None):
        if first_owner == ZERO_ADDRESS:
            raise ZeroAddress("the zero address cannot be an owner")
        self._owners: Set[Address] = {first_owner}
        self.journal = journal if journal is not None else Journal()

    def __contains__(self, addr: Address) -> bool:
        return addr in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    @property
    def members(self) -> FrozenSet[Address]:
        return frozenset(self._owners)

    def require_owner(self, caller: Address) -> None:
        if caller not in self._owners:
            raise NotOwner(f"{caller} is not an owner")

    def add(self, caller: Address, addr: Address) -> bool:
        """
        Add addr to the owner set. Returns False if it was already a member.

        Raises:
            NotOwner: If caller is not an owner
            ZeroAddress: If addr is the zero address
        """
        self.require_owner(caller)
        if addr == ZERO_ADDRESS:
            raise ZeroAddress("the zero address cannot be an owner")
        if addr in self._owners:
            return False
        self.journal.add(self._owners, addr)
        return True

    def remove(self, caller: Address, addr: Address) -> bool:
        """
        Remove addr from the owner set. Returns False if it was not a member.

        Raises:
            NotOwner: If caller is not an owner
            CannotRemoveSelf: If addr is the caller
        """
        self.require_owner(caller)
        if addr == caller:
            raise CannotRemoveSelf(f"{caller} cannot remove itself from the owners")
        if addr not in self._owners:
            return False
        self.journal.discard(self._owners, addr)
        return True
