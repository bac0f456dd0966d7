"""Data types for the `stake_ledger` kernel.

All types are frozen dataclasses (immutable).

Units/conventions:
- amounts (`*_stake`, `*_burned`, bucket fields) are non-negative integer base units,
- `*_ratio` values are fractions scaled by `WAD` (1e18),
- `yield_bps` is a signed rate in basis points (1/10_000).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class Action(Enum):
    """One member per ledger operation."""
    APPLY_LOSS = "apply_loss"
    RELEASE_UNSTAKES = "release_unstakes"
    REQUEST_UNSTAKE = "request_unstake"
    APPLY_YIELD = "apply_yield"


@unique
class Event(Enum):
    """One member per effect event type."""
    LOSS_APPLIED = "LossApplied"
    UNSTAKES_RELEASED = "UnstakesReleased"
    UNSTAKE_REQUESTED = "UnstakeRequested"
    YIELD_APPLIED = "YieldApplied"


@dataclass(frozen=True)
class UnstakeBucket:
    """One withdrawal request, resolved in FIFO order."""

    requested: int
    virtual_requested: int = 0
    released: int = 0
    burned: int = 0

    @property
    def remaining(self) -> int:
        return self.requested - self.released - self.burned

    @property
    def resolved(self) -> bool:
        return self.remaining == 0

    @property
    def touched(self) -> bool:
        return self.released != 0 or self.burned != 0


@dataclass(frozen=True)
class PoolState:
    """Capital accounts of one pool plus its unstake queue."""

    active_stake: int = 0
    inactive_stake: int = 0
    inactive_burned: int = 0

    # Cached active_stake + inactive_stake; checked by inv_total_burnable_cached.
    total_burnable: int = 0

    buckets: tuple[UnstakeBucket, ...] = ()


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0."""

    action: Action
    amount: int = 0      # apply_loss / release_unstakes (quota) / request_unstake
    yield_bps: int = 0   # apply_yield


@dataclass(frozen=True)
class BucketDelta:
    """What one release call did to one bucket."""

    index: int
    take: int
    released: int
    burned: int


@dataclass(frozen=True)
class Effect:
    """Observables emitted after a successful step."""

    event: Event
    amount: int = 0

    # apply_loss
    loss_ratio: int = 0
    active_loss: int = 0
    inactive_loss: int = 0

    # release_unstakes
    taken_total: int = 0
    released_total: int = 0
    burned_total: int = 0
    unused_quota: int = 0
    bucket_deltas: tuple[BucketDelta, ...] = ()

    # request_unstake
    bucket_index: int = -1
    virtual_requested: int = 0

    # apply_yield
    yield_amount: int = 0

    # post-state summary
    burn_ratio_after: int = 0
    total_burnable_after: int = 0


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: PoolState | None = None
    effect: Effect | None = None
    rejection: str | None = None
