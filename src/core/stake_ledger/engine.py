"""Dispatch-table engine for `stake_ledger`.

``step(state, params)`` is the single entry point. It:

1. Validates parameter domains.
2. Dispatches to the correct guard / update / effect functions.
3. Checks all invariants and transition rules on the post-state.
4. Returns a ``StepResult`` (accepted or rejected with reason).

Nothing is committed on rejection: the caller keeps its pre-state.
"""

from __future__ import annotations

from typing import Callable, Optional

from .effects import (
    effect_apply_loss,
    effect_apply_yield,
    effect_release_unstakes,
    effect_request_unstake,
)
from .errors import error_for_rejection
from .guards import (
    guard_apply_loss,
    guard_apply_yield,
    guard_release_unstakes,
    guard_request_unstake,
)
from .invariants import check_all, check_transition
from .types import Action, ActionParams, Effect, PoolState, StepResult
from .updates import (
    apply_loss,
    apply_release_unstakes,
    apply_request_unstake,
    apply_yield,
)

GuardFn = Callable[[PoolState, ActionParams], Optional[str]]
UpdateFn = Callable[[PoolState, ActionParams], PoolState]
EffectFn = Callable[[PoolState, PoolState, ActionParams], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.APPLY_LOSS: (
        guard_apply_loss, apply_loss, effect_apply_loss,
    ),
    Action.RELEASE_UNSTAKES: (
        guard_release_unstakes, apply_release_unstakes, effect_release_unstakes,
    ),
    Action.REQUEST_UNSTAKE: (
        guard_request_unstake, apply_request_unstake, effect_request_unstake,
    ),
    Action.APPLY_YIELD: (
        guard_apply_yield, apply_yield, effect_apply_yield,
    ),
}

# -- Parameter domain bounds -------------------------------------------------

MAX_PARAM_AMOUNT: int = 10**36  # 1e18 tokens at 18 decimals
MAX_YIELD_BPS: int = 1_000_000  # +10_000%

# Per-action bounds: list of (field_name, max_val). Lower bounds are guards,
# since a negative amount is a domain error with its own error kind.
_PARAM_BOUNDS: dict[Action, list[tuple[str, int]]] = {
    Action.APPLY_LOSS: [("amount", MAX_PARAM_AMOUNT)],
    Action.RELEASE_UNSTAKES: [("amount", MAX_PARAM_AMOUNT)],
    Action.REQUEST_UNSTAKE: [("amount", MAX_PARAM_AMOUNT)],
    Action.APPLY_YIELD: [("yield_bps", MAX_YIELD_BPS)],
}


def _validate_params(params: ActionParams) -> str | None:
    """Check parameter types and upper bounds. Returns rejection reason or None."""
    for field, hi in _PARAM_BOUNDS.get(params.action, []):
        val = getattr(params, field)
        if isinstance(val, bool) or not isinstance(val, int):
            return f"param_domain:{field}"
        if val > hi:
            return f"param_domain:{field}"
    return None


def step(state: PoolState, params: ActionParams) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a ``rejection`` reason string.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")

    domain_err = _validate_params(params)
    if domain_err is not None:
        return StepResult(accepted=False, rejection=domain_err)

    guard_fn, update_fn, effect_fn = entry

    reason = guard_fn(state, params)
    if reason is not None:
        return StepResult(accepted=False, rejection=f"guard:{reason}")

    new_state = update_fn(state, params)

    violations = check_all(new_state) + check_transition(state, new_state)
    if violations:
        return StepResult(
            accepted=False,
            rejection=f"invariant:{','.join(violations)}",
        )

    effect = effect_fn(state, new_state, params)
    return StepResult(accepted=True, state=new_state, effect=effect)


def step_or_raise(state: PoolState, params: ActionParams) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        LedgerOverflowError: Parameter outside its domain bounds.
        LedgerGuardError: Guard condition not satisfied (one subclass per reason).
        LedgerInvariantError: Post-state violates one or more invariants.
    """
    result = step(state, params)
    if result.accepted:
        return result
    raise error_for_rejection(result.rejection or "")
