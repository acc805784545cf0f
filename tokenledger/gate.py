"""
gate.py - Two-Phase Transfer Gate

Before launch the gate is LOCKED and only addresses holding a grant may
originate transfers. enable_transfers() moves the gate to OPEN exactly once;
from then on anyone may transfer and the grant set is frozen.

Owner checks happen in the Token; the gate only tracks phase and grants.
"""

from __future__ import annotations
from typing import Iterable, Optional, Set, FrozenSet

from .core import (
    Address, Phase, ZERO_ADDRESS,
    AlreadyOpen, GateAlreadyOpen, AlreadyGranted, AlreadyCancelled,
    ZeroAddress, TransfersNotEnabled,
)
from .journal import Journal


class TransferGate:
    """
    Phase plus grant set controlling who may originate transfers.

    Invariants:
        - OPEN never reverts to LOCKED
        - grants change only while LOCKED
        - the zero address never holds a grant
    """

    def __init__(self, initial_grants: Iterable[Address] = (), journal: Optional[Journal] = None):
        self.phase: Phase = Phase.LOCKED
        self._grants: Set[Address] = set()
        self.journal = journal if journal is not None else Journal()
        for addr in initial_grants:
            self.grant(addr)

    @property
    def is_open(self) -> bool:
        return self.phase is Phase.OPEN

    @property
    def grants(self) -> FrozenSet[Address]:
        return frozenset(self._grants)

    def has_grant(self, addr: Address) -> bool:
        return addr in self._grants

    def can_originate(self, source: Address) -> bool:
        """True if source may originate a transfer in the current phase."""
        if self.phase is Phase.OPEN:
            return True
        return source in self._grants

    def require_open(self) -> None:
        if self.phase is not Phase.OPEN:
            raise TransfersNotEnabled("transfers are not enabled yet")

    def require_can_originate(self, source: Address) -> None:
        if not self.can_originate(source):
            raise TransfersNotEnabled(f"{source} has no transfer grant and transfers are not enabled")

    # ========================================================================
    # TRANSITIONS
    # ========================================================================

    def enable(self) -> None:
        """
        Open the gate. Irreversible.

        Raises:
            AlreadyOpen: If the gate is already open
        """
        if self.phase is Phase.OPEN:
            raise AlreadyOpen("transfers are already enabled")
        self.journal.set_attr(self, "phase", Phase.OPEN)

    def grant(self, addr: Address) -> None:
        """
        Give addr the right to transfer while LOCKED.

        Raises:
            GateAlreadyOpen: If the gate is open
            ZeroAddress: If addr is the zero address
            AlreadyGranted: If addr already holds a grant
        """
        if self.phase is Phase.OPEN:
            raise GateAlreadyOpen("transfer grants are frozen once transfers are enabled")
        if addr == ZERO_ADDRESS:
            raise ZeroAddress("the zero address cannot hold a transfer grant")
        if addr in self._grants:
            raise AlreadyGranted(f"{addr} already holds a transfer grant")
        self.journal.add(self._grants, addr)

    def cancel(self, addr: Address) -> None:
        """
        Remove addr's transfer right.

        Raises:
            GateAlreadyOpen: If the gate is open
            AlreadyCancelled: If addr holds no grant
        """
        if self.phase is Phase.OPEN:
            raise GateAlreadyOpen("transfer grants are frozen once transfers are enabled")
        if addr not in self._grants:
            raise AlreadyCancelled(f"{addr} holds no transfer grant")
        self.journal.discard(self._grants, addr)
