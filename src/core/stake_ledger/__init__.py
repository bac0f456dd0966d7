"""`stake_ledger`: bucketed capital accounting for one pooled-stake insurance pool.

The kernel tracks active stake (earning yield, exposed to loss) and inactive
stake (requested for withdrawal, still exposed to loss until released), applies
losses pro rata across both, and resolves FIFO unstake buckets at the pool's
burn ratio at release time.

- deterministic, integer-only transitions (WAD-scaled ratios, floor rounding),
- immutable state (frozen dataclasses),
- fail-closed guards and invariant checks.

Public API:
- `initial_state(...) -> PoolState`
- `step(state, params) -> StepResult`
- `step_or_raise(state, params) -> StepResult` (raises on rejection)
- `StakeLedger` (owning wrapper with one method per operation)
"""

from .engine import step, step_or_raise
from .errors import (
    InsufficientActiveStake,
    InvalidLossAmount,
    InvalidReleaseAmount,
    InvalidRequestAmount,
    InvalidYieldPercentage,
    LedgerGuardError,
    LedgerInvariantError,
    LedgerOverflowError,
    StakeLedgerError,
    UndefinedBurnRatio,
)
from .ledger import StakeLedger
from .math import BPS_SCALE, WAD
from .state import initial_state, pool_burn_ratio, state_from_dict, state_to_dict
from .types import (
    Action,
    ActionParams,
    BucketDelta,
    Effect,
    Event,
    PoolState,
    StepResult,
    UnstakeBucket,
)

__all__ = [
    "step",
    "step_or_raise",
    "initial_state",
    "pool_burn_ratio",
    "state_from_dict",
    "state_to_dict",
    "StakeLedger",
    "WAD",
    "BPS_SCALE",
    "Action",
    "ActionParams",
    "BucketDelta",
    "Effect",
    "Event",
    "PoolState",
    "StepResult",
    "UnstakeBucket",
    "StakeLedgerError",
    "LedgerGuardError",
    "LedgerInvariantError",
    "LedgerOverflowError",
    "InvalidLossAmount",
    "InvalidReleaseAmount",
    "InvalidRequestAmount",
    "InsufficientActiveStake",
    "InvalidYieldPercentage",
    "UndefinedBurnRatio",
]
