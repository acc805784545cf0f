"""
emission.py - Time-Driven Emission Schedule

This module bounds how much supply may exist at any point in time:
1. EmissionParameters - immutable schedule configuration
2. Pure functions - first_allotment(), decrement(), allotment(),
   max_allowed_supply(), current_period(), mintable_amount(), schedule_rows()
3. EmissionSchedule - the one piece of mutable state (first_period_start)

Shape of the schedule:
    New supply is released as a decreasing arithmetic sequence of per-period
    allotments a1, a1 - r, a1 - 2r, ... whose sum over LAST_PERIOD periods is
    MAX_SUPPLY - INIT_SUPPLY and whose last term is (approximately) zero:

        a1   = 2 * (MAX - INIT) // LAST_PERIOD
        r    = a1 // (LAST_PERIOD - 1)
        S(p) = p * (2 * a1 - r * (p - 1)) // 2

        max_allowed_supply(p) = min(INIT + S(p), MAX)   for p < LAST_PERIOD
                              = MAX                     for p >= LAST_PERIOD

Rounding rule:
    Integer arithmetic only, truncating at every division in the order
    written above. p * (p - 1) is always even, so the final // 2 is exact.
    No floating point anywhere: two independent evaluators always agree.

Minting only reads elapsed time and the current total supply, so mint() can
be called at any cadence with any requested amount. Over-requests are capped,
never rejected.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from . import safemath
from .core import (
    INIT_SUPPLY, MAX_SUPPLY, PERIOD_UNIT, LAST_PERIOD,
    AlreadyStarted, GateNotOpen,
)
from .gate import TransferGate
from .journal import Journal


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass(frozen=True, slots=True)
class EmissionParameters:
    """
    Immutable emission schedule configuration.

    Attributes:
        init_supply: Supply credited to the deployer at creation
        max_supply: Absolute supply cap
        period_unit: Duration of one period in seconds
        last_period: Period index from which the cap is fully reachable
    """
    init_supply: int = INIT_SUPPLY
    max_supply: int = MAX_SUPPLY
    period_unit: int = PERIOD_UNIT
    last_period: int = LAST_PERIOD

    def __post_init__(self):
        for label in ("init_supply", "max_supply", "period_unit", "last_period"):
            safemath.require_uint256(getattr(self, label), label)
        if self.init_supply <= 0:
            raise ValueError(f"init_supply must be positive, got {self.init_supply}")
        if self.max_supply < self.init_supply:
            raise ValueError(
                f"max_supply {self.max_supply} must be >= init_supply {self.init_supply}"
            )
        if self.period_unit <= 0:
            raise ValueError(f"period_unit must be positive, got {self.period_unit}")
        if self.last_period < 2:
            raise ValueError(f"last_period must be at least 2, got {self.last_period}")

    @property
    def emission(self) -> int:
        """Total supply released by the schedule (MAX - INIT)."""
        return self.max_supply - self.init_supply


DEFAULT_EMISSION = EmissionParameters()


# ============================================================================
# PURE SCHEDULE FUNCTIONS
# ============================================================================

def first_allotment(params: EmissionParameters) -> int:
    """a1: tokens released in the first period."""
    return safemath.div(safemath.mul(2, params.emission), params.last_period)


def decrement(params: EmissionParameters) -> int:
    """r: amount by which each period's allotment shrinks."""
    return safemath.div(first_allotment(params), params.last_period - 1)


def _partial_sum(params: EmissionParameters, period: int) -> int:
    """S(p) for 0 <= p < last_period."""
    a1 = first_allotment(params)
    r = decrement(params)
    if period == 0:
        return 0
    # r * (p - 1) <= r * (last_period - 2) <= a1, so the term never underflows
    term = safemath.sub(safemath.mul(2, a1), safemath.mul(r, period - 1))
    return safemath.div(safemath.mul(period, term), 2)


def max_allowed_supply(params: EmissionParameters, period: int) -> int:
    """
    Cumulative supply ceiling reachable by the given period.

    Non-decreasing in period; equals init_supply at period 0 and max_supply
    from last_period onwards; never above max_supply.
    """
    safemath.require_uint256(period, "period")
    if period >= params.last_period:
        return params.max_supply
    return min(safemath.add(params.init_supply, _partial_sum(params, period)), params.max_supply)


def allotment(params: EmissionParameters, period: int) -> int:
    """
    Scheduled allotment for a single period: a1 - r * (period - 1).

    Returns 0 for period 0 and for periods past last_period. This is the
    nominal sequence term; the cap clamp in max_allowed_supply() may make the
    final realized increments differ by a few smallest units.
    """
    if period < 1 or period > params.last_period:
        return 0
    a1 = first_allotment(params)
    r = decrement(params)
    step = safemath.mul(r, period - 1)
    return a1 - step if step < a1 else 0


def current_period(params: EmissionParameters, first_period_start: Optional[int], now: int) -> int:
    """
    Index of the period containing now.

    Returns 0 while the schedule is unstarted. Time before the start clamps
    to period 0 rather than underflowing.
    """
    if first_period_start is None or now <= first_period_start:
        return 0
    return safemath.div(safemath.sub(now, first_period_start), params.period_unit)


def mintable_amount(
    params: EmissionParameters,
    first_period_start: Optional[int],
    now: int,
    total_supply: int,
    requested: int,
) -> int:
    """
    How much of a mint request may be honoured right now.

    Returns:
        0 if the schedule is unstarted, otherwise
        min(requested, max(0, max_allowed_supply(current_period) - total_supply))
    """
    safemath.require_uint256(requested, "requested")
    if first_period_start is None:
        return 0
    ceiling = max_allowed_supply(params, current_period(params, first_period_start, now))
    if ceiling <= total_supply:
        return 0
    return min(requested, ceiling - total_supply)


def schedule_rows(
    params: EmissionParameters,
    periods: Iterable[int],
) -> List[Tuple[int, int, int]]:
    """
    Tabulate the schedule for reporting.

    Returns:
        List of (period, allotment, max_allowed_supply) tuples in input order.

    Example:
        for period, amount, ceiling in schedule_rows(DEFAULT_EMISSION, range(5)):
            print(period, amount, ceiling)
    """
    return [(p, allotment(params, p), max_allowed_supply(params, p)) for p in periods]


# ============================================================================
# SCHEDULE STATE
# ============================================================================

class EmissionSchedule:
    """
    Start time of the emission schedule plus its parameters.

    first_period_start is None until start() succeeds and never changes
    afterwards.
    """

    def __init__(self, params: EmissionParameters = DEFAULT_EMISSION, journal: Optional[Journal] = None):
        self.params = params
        self.first_period_start: Optional[int] = None
        self.journal = journal if journal is not None else Journal()

    @property
    def started(self) -> bool:
        return self.first_period_start is not None

    def start(self, gate: TransferGate, now: int) -> None:
        """
        Begin the schedule at now.

        Raises:
            GateNotOpen: If transfers have not been enabled
            AlreadyStarted: If the schedule was already started
        """
        if not gate.is_open:
            raise GateNotOpen("transfers must be enabled before minting can start")
        if self.first_period_start is not None:
            raise AlreadyStarted(f"minting already started at {self.first_period_start}")
        self.journal.set_attr(self, "first_period_start", safemath.require_uint256(now, "now"))

    def current_period(self, now: int) -> int:
        return current_period(self.params, self.first_period_start, now)

    def max_allowed_supply(self, period: int) -> int:
        return max_allowed_supply(self.params, period)

    def mintable(self, now: int, total_supply: int, requested: int) -> int:
        return mintable_amount(self.params, self.first_period_start, now, total_supply, requested)
