"""
Core staking-pool accounting
"""

from .stake_ledger import (
    Action,
    ActionParams,
    Effect,
    PoolState,
    StakeLedger,
    StepResult,
    UnstakeBucket,
    initial_state,
)
from .stake_ledger import step as ledger_step
from .stake_ledger import step_or_raise as ledger_step_or_raise

__all__ = [
    "Action",
    "ActionParams",
    "Effect",
    "PoolState",
    "StakeLedger",
    "StepResult",
    "UnstakeBucket",
    "initial_state",
    "ledger_step",
    "ledger_step_or_raise",
]
