"""Guard functions for `stake_ledger`.

One pure function per action. Each inspects the PRE-state and the parameters
and returns ``None`` when the action is allowed, or a rejection code otherwise.
Rejection codes are the ``reason`` attributes of the ``LedgerGuardError``
subclasses in ``errors.py``.
"""

from __future__ import annotations

from .errors import (
    InsufficientActiveStake,
    InvalidLossAmount,
    InvalidReleaseAmount,
    InvalidRequestAmount,
    InvalidYieldPercentage,
    UndefinedBurnRatio,
)
from .math import MIN_YIELD_BPS_EXCLUSIVE, is_ratio_saturated
from .types import ActionParams, PoolState


def guard_apply_loss(state: PoolState, params: ActionParams) -> str | None:
    if params.amount < 0:
        return InvalidLossAmount.reason
    # Also covers a non-zero loss against an empty pool.
    if params.amount > state.active_stake + state.inactive_stake:
        return InvalidLossAmount.reason
    return None


def guard_release_unstakes(state: PoolState, params: ActionParams) -> str | None:
    if params.amount < 0:
        return InvalidReleaseAmount.reason
    return None


def guard_request_unstake(state: PoolState, params: ActionParams) -> str | None:
    if params.amount < 0:
        return InvalidRequestAmount.reason
    if params.amount > state.active_stake:
        return InsufficientActiveStake.reason
    if params.amount > 0 and is_ratio_saturated(state.inactive_stake, state.inactive_burned):
        return UndefinedBurnRatio.reason
    return None


def guard_apply_yield(state: PoolState, params: ActionParams) -> str | None:
    if params.yield_bps <= MIN_YIELD_BPS_EXCLUSIVE:
        return InvalidYieldPercentage.reason
    return None
