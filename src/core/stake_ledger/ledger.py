"""
Owning wrapper around the pure `stake_ledger` engine.

A `StakeLedger` holds exactly one pool's state and is the only thing that
replaces it. Each operation runs `step_or_raise()` and commits the post-state
only when the step is accepted, so a raised error leaves the ledger exactly as
it was.

The ledger is not thread-safe: callers serialize operations per pool.
Independent pools share nothing and may be driven in parallel.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .engine import step_or_raise
from .state import initial_state, pending_unstake, pool_burn_ratio, total_stake
from .types import Action, ActionParams, Effect, PoolState, UnstakeBucket


class StakeLedger:
    def __init__(self, state: PoolState | None = None) -> None:
        self._state = state if state is not None else initial_state()
        self._history: List[Tuple[ActionParams, Effect]] = []

    @classmethod
    def open(
        cls,
        active_stake: int = 0,
        inactive_stake: int = 0,
        inactive_burned: int = 0,
        buckets: Sequence[UnstakeBucket | int] = (),
    ) -> "StakeLedger":
        return cls(initial_state(active_stake, inactive_stake, inactive_burned, buckets))

    # -- operations ----------------------------------------------------------

    def _run(self, params: ActionParams) -> Effect:
        result = step_or_raise(self._state, params)
        assert result.state is not None and result.effect is not None
        self._state = result.state
        self._history.append((params, result.effect))
        return result.effect

    def apply_loss(self, amount: int) -> Effect:
        """Burn ``amount`` pro rata from active and inactive stake."""
        return self._run(ActionParams(action=Action.APPLY_LOSS, amount=amount))

    def release_unstakes(self, max_amount: int) -> Effect:
        """Release up to ``max_amount`` of requested stake, oldest bucket first."""
        return self._run(ActionParams(action=Action.RELEASE_UNSTAKES, amount=max_amount))

    def request_unstake(self, amount: int) -> Effect:
        """Move ``amount`` from active to inactive stake and queue a bucket for it."""
        return self._run(ActionParams(action=Action.REQUEST_UNSTAKE, amount=amount))

    def apply_yield(self, yield_bps: int) -> Effect:
        """Grow (or shrink) active stake by ``yield_bps`` basis points."""
        return self._run(ActionParams(action=Action.APPLY_YIELD, yield_bps=yield_bps))

    # -- read accessors ------------------------------------------------------

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def buckets(self) -> Tuple[UnstakeBucket, ...]:
        return self._state.buckets

    @property
    def active_stake(self) -> int:
        return self._state.active_stake

    @property
    def inactive_stake(self) -> int:
        return self._state.inactive_stake

    @property
    def inactive_burned(self) -> int:
        return self._state.inactive_burned

    @property
    def total_burnable(self) -> int:
        return self._state.total_burnable

    @property
    def total_stake(self) -> int:
        return total_stake(self._state)

    @property
    def burn_ratio(self) -> int:
        return pool_burn_ratio(self._state)

    @property
    def pending_unstake(self) -> int:
        return pending_unstake(self._state)

    @property
    def history(self) -> Tuple[Tuple[ActionParams, Effect], ...]:
        return tuple(self._history)

    def __repr__(self) -> str:
        s = self._state
        return (
            f"StakeLedger(active={s.active_stake}, inactive={s.inactive_stake}, "
            f"inactive_burned={s.inactive_burned}, buckets={len(s.buckets)})"
        )
