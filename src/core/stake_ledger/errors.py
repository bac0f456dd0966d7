"""Exception types for the stake ledger.

Used by ``step_or_raise()`` in ``engine.py`` and by ``StakeLedger`` for callers
that prefer exceptions over ``StepResult`` inspection. Every guard rejection
code maps to one ``LedgerGuardError`` subclass.
"""

from __future__ import annotations


class StakeLedgerError(Exception):
    """Base class for all ledger failures."""


class LedgerGuardError(StakeLedgerError):
    """Raised when an action's guard condition is not satisfied."""

    reason: str = "guard"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


class InvalidLossAmount(LedgerGuardError):
    reason = "invalid_loss_amount"


class InvalidReleaseAmount(LedgerGuardError):
    reason = "invalid_release_amount"


class InvalidRequestAmount(LedgerGuardError):
    reason = "invalid_request_amount"


class InsufficientActiveStake(LedgerGuardError):
    reason = "insufficient_active_stake"


class InvalidYieldPercentage(LedgerGuardError):
    reason = "invalid_yield_percentage"


class UndefinedBurnRatio(LedgerGuardError):
    reason = "undefined_burn_ratio"


class LedgerInvariantError(StakeLedgerError):
    """Raised when a post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class LedgerOverflowError(StakeLedgerError):
    """Raised when a parameter is outside its domain bounds."""


GUARD_ERRORS: dict[str, type[LedgerGuardError]] = {
    cls.reason: cls
    for cls in (
        InvalidLossAmount,
        InvalidReleaseAmount,
        InvalidRequestAmount,
        InsufficientActiveStake,
        InvalidYieldPercentage,
        UndefinedBurnRatio,
    )
}


def error_for_rejection(rejection: str) -> StakeLedgerError:
    """Build the exception matching a ``StepResult.rejection`` string."""
    if rejection.startswith("param_domain:"):
        return LedgerOverflowError(rejection)
    if rejection.startswith("invariant:"):
        return LedgerInvariantError(rejection.removeprefix("invariant:").split(","))
    reason = rejection.removeprefix("guard:")
    cls = GUARD_ERRORS.get(reason)
    if cls is None:
        return LedgerGuardError(rejection)
    return cls()
