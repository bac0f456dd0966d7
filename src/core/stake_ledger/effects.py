"""Effect functions for `stake_ledger`.

One pure function per action. Each builds the ``Effect`` from the PRE-state,
the POST-state and the parameters; amounts that the update derived (loss split,
bucket draws) are recomputed here from the same helpers, never read back from
mutable scratch state.
"""

from __future__ import annotations

from .math import gross_up_burned, loss_ratio, split_loss
from .state import pool_burn_ratio
from .types import ActionParams, Effect, Event, PoolState
from .updates import plan_release


def _summary(post: PoolState) -> dict[str, int]:
    return {
        "burn_ratio_after": pool_burn_ratio(post),
        "total_burnable_after": post.total_burnable,
    }


def effect_apply_loss(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    active_loss, inactive_loss = split_loss(params.amount, pre.active_stake, pre.inactive_stake)
    return Effect(
        event=Event.LOSS_APPLIED,
        amount=params.amount,
        loss_ratio=loss_ratio(params.amount, pre.active_stake + pre.inactive_stake),
        active_loss=active_loss,
        inactive_loss=inactive_loss,
        **_summary(post),
    )


def effect_release_unstakes(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    deltas, unused = plan_release(pre, params.amount)
    return Effect(
        event=Event.UNSTAKES_RELEASED,
        amount=params.amount,
        taken_total=sum(d.take for d in deltas),
        released_total=sum(d.released for d in deltas),
        burned_total=sum(d.burned for d in deltas),
        unused_quota=unused,
        bucket_deltas=tuple(deltas),
        **_summary(post),
    )


def effect_request_unstake(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    created = params.amount > 0
    return Effect(
        event=Event.UNSTAKE_REQUESTED,
        amount=params.amount,
        bucket_index=len(post.buckets) - 1 if created else -1,
        virtual_requested=(
            gross_up_burned(pre.inactive_stake, pre.inactive_burned, params.amount) if created else 0
        ),
        **_summary(post),
    )


def effect_apply_yield(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.YIELD_APPLIED,
        amount=params.yield_bps,
        yield_amount=post.active_stake - pre.active_stake,
        **_summary(post),
    )
