"""Tests for src/core/stake_ledger/math.py: pure arithmetic functions."""

import pytest

from src.core.stake_ledger.math import (
    BPS_SCALE,
    WAD,
    burn_ratio,
    compound_inactive_burned,
    gross_up_burned,
    is_ratio_saturated,
    loss_ratio,
    mul_div_down,
    release_split,
    split_loss,
    yield_delta,
)

U = 10**18


class TestMulDivDown:
    def test_exact(self):
        assert mul_div_down(6, 10, 3) == 20

    def test_floors(self):
        assert mul_div_down(10, 1, 3) == 3

    def test_zero_denominator(self):
        with pytest.raises(ZeroDivisionError):
            mul_div_down(1, 1, 0)


class TestBurnRatio:
    def test_empty_pool_is_zero(self):
        assert burn_ratio(0, 0) == 0

    def test_ten_percent(self):
        assert burn_ratio(450 * U, 45 * U) == WAD // 10

    def test_fully_burned(self):
        assert burn_ratio(7, 7) == WAD


class TestLossRatio:
    def test_basic(self):
        assert loss_ratio(150 * U, 1500 * U) == WAD // 10

    def test_empty_total(self):
        assert loss_ratio(0, 0) == 0


class TestSplitLoss:
    def test_pro_rata(self):
        assert split_loss(150 * U, 1000 * U, 500 * U) == (100 * U, 50 * U)

    def test_parts_always_sum_to_amount(self):
        active_loss, inactive_loss = split_loss(10, 3, 4)
        assert active_loss == 4  # floor(10 * 3 / 7)
        assert active_loss + inactive_loss == 10

    def test_only_active(self):
        assert split_loss(5, 10, 0) == (5, 0)

    def test_only_inactive(self):
        assert split_loss(5, 0, 10) == (0, 5)

    def test_empty(self):
        assert split_loss(0, 0, 0) == (0, 0)


class TestCompoundInactiveBurned:
    def test_first_loss_is_inactive_after_times_loss_ratio(self):
        lr = WAD // 10
        assert compound_inactive_burned(500 * U, 0, 450 * U, lr) == 45 * U

    def test_compounds_unburned_fraction(self):
        # r = 0.1, lr = 0.5 -> unburned fraction 0.9 * 0.5 = 0.45
        after = compound_inactive_burned(400 * U, 40 * U, 200 * U, WAD // 2)
        assert after == 200 * U - 90 * U
        assert burn_ratio(200 * U, after) == WAD * 55 // 100

    def test_total_loss_burns_everything_left(self):
        assert compound_inactive_burned(100, 10, 0, WAD) == 0

    def test_empty_inactive(self):
        assert compound_inactive_burned(0, 0, 0, WAD // 3) == 0

    def test_never_exceeds_inactive(self):
        after = compound_inactive_burned(3, 1, 2, WAD // 3)
        assert 0 <= after <= 2


class TestReleaseSplit:
    def test_ten_percent_burn(self):
        assert release_split(50 * U, 450 * U, 45 * U) == (45 * U, 5 * U)

    def test_no_burn(self):
        assert release_split(50, 100, 0) == (50, 0)

    def test_empty_pool_releases_everything(self):
        assert release_split(50, 0, 0) == (50, 0)

    def test_payout_rounds_down(self):
        released, burned = release_split(10, 3, 1)
        assert released == 6  # floor(10 * 2 / 3)
        assert burned == 4


class TestGrossUpBurned:
    def test_virtual_requested(self):
        # r = 0.1: 0.1 * 100 / 0.9
        assert gross_up_burned(400 * U, 40 * U, 100 * U) == (100 * U) // 9

    def test_zero_ratio(self):
        assert gross_up_burned(400, 0, 100) == 0

    def test_empty_pool(self):
        assert gross_up_burned(0, 0, 100) == 0

    def test_saturated_is_undefined(self):
        with pytest.raises(ZeroDivisionError):
            gross_up_burned(10, 10, 5)


class TestYieldDelta:
    def test_five_percent(self):
        assert yield_delta(800 * U, 500) == 40 * U

    def test_negative(self):
        assert yield_delta(1000, -BPS_SCALE // 2) == -500

    def test_negative_floors_toward_more_loss(self):
        assert yield_delta(3, -1) == -1


class TestIsRatioSaturated:
    def test_saturated(self):
        assert is_ratio_saturated(10, 10)

    def test_not_saturated(self):
        assert not is_ratio_saturated(10, 9)

    def test_empty_pool_not_saturated(self):
        assert not is_ratio_saturated(0, 0)
