"""Pure arithmetic for the `stake_ledger` kernel.

Every function is stateless and operates on plain Python ints.

Rounding is explicit: all divisions use `//` (floor). Amounts handed back to a
requester are rounded down; the burned share of a release is the exact
complement, so `released + burned == take` always holds.

Ratios are scaled by `WAD` (1e18). The burn ratio of the inactive pool is never
stored; it is derived from `inactive_burned / inactive_stake`, and the helpers
below work on that exact quotient rather than on a pre-rounded ratio.
"""

from __future__ import annotations

# Domain constants
WAD: int = 10**18
BPS_SCALE: int = 10_000
MIN_YIELD_BPS_EXCLUSIVE: int = -BPS_SCALE  # -100%
RESOLUTION_TOLERANCE: int = 0


def mul_div_down(a: int, b: int, denominator: int) -> int:
    """``floor(a * b / denominator)``; raises ZeroDivisionError on zero denominator."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div_down: zero denominator")
    return (a * b) // denominator


def burn_ratio(inactive_stake: int, inactive_burned: int) -> int:
    """Fraction of inactive stake already lost, scaled by WAD (0 when the pool is empty)."""
    if inactive_stake == 0:
        return 0
    return mul_div_down(inactive_burned, WAD, inactive_stake)


def loss_ratio(amount: int, total_stake: int) -> int:
    """Loss as a WAD-scaled fraction of the pre-loss total."""
    if total_stake == 0:
        return 0
    return mul_div_down(amount, WAD, total_stake)


def split_loss(amount: int, active_stake: int, inactive_stake: int) -> tuple[int, int]:
    """Split a loss pro rata between the two pools.

    Returns ``(active_loss, inactive_loss)``. The inactive share takes the
    rounding remainder so the two parts always sum to ``amount``.
    """
    total = active_stake + inactive_stake
    if total == 0:
        return 0, 0
    active_loss = mul_div_down(amount, active_stake, total)
    return active_loss, amount - active_loss


def compound_inactive_burned(
    inactive_before: int,
    burned_before: int,
    inactive_after: int,
    lr: int,
) -> int:
    """Burned amount of the inactive pool after one more loss.

    The unburned fraction compounds: ``(1 - r') = (1 - r) * (1 - lr)``, with
    ``r = burned_before / inactive_before``. The unburned part is floored, so the
    burned part is rounded up and stays within ``[0, inactive_after]``.
    """
    if inactive_before == 0 or inactive_after == 0:
        return 0
    unburned = (inactive_after * (inactive_before - burned_before) * (WAD - lr)) // (
        inactive_before * WAD
    )
    return inactive_after - unburned


def release_split(take: int, inactive_stake: int, inactive_burned: int) -> tuple[int, int]:
    """Split a bucket draw into ``(released, burned)`` at the pool's burn ratio.

    ``released = floor(take * (1 - burned/inactive))``; ``burned`` is the remainder.
    """
    if inactive_stake == 0:
        return take, 0
    released = mul_div_down(take, inactive_stake - inactive_burned, inactive_stake)
    return released, take - released


def gross_up_burned(inactive_stake: int, inactive_burned: int, amount: int) -> int:
    """Virtual burned amount attributed to ``amount`` at the pool's burn ratio.

    ``floor(r * amount / (1 - r))`` with ``r = inactive_burned / inactive_stake``,
    computed as ``floor(inactive_burned * amount / (inactive_stake - inactive_burned))``.
    Undefined (ZeroDivisionError) when the whole inactive pool is burned.
    """
    if inactive_stake == 0:
        return 0
    return mul_div_down(inactive_burned, amount, inactive_stake - inactive_burned)


def yield_delta(active_stake: int, yield_bps: int) -> int:
    """Signed change of active stake for a yield of ``yield_bps`` basis points."""
    return mul_div_down(active_stake, yield_bps, BPS_SCALE)


def is_ratio_saturated(inactive_stake: int, inactive_burned: int) -> bool:
    """True when 100% of a non-empty inactive pool is already burned."""
    return inactive_stake > 0 and inactive_burned >= inactive_stake
