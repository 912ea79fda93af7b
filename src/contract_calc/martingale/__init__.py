"""Martingale averaging simulator.

Projects a sequence of increasingly large adds at worsening prices and
tracks average cost, unified take-profit, fees, funding and an
approximate liquidation price at every step.
"""

from contract_calc.martingale.accumulator import (
    PositionAccumulator,
    add_margin,
    add_price,
    cumulative_diff_percent,
)
from contract_calc.martingale.initial import initial_position
from contract_calc.martingale.simulator import run_martingale
from contract_calc.martingale.summary import (
    estimate_liquidation_price,
    liq_distance_percent,
    liq_distance_risk,
    summarize,
)

__all__ = [
    "PositionAccumulator",
    "add_margin",
    "add_price",
    "cumulative_diff_percent",
    "estimate_liquidation_price",
    "initial_position",
    "liq_distance_percent",
    "liq_distance_risk",
    "run_martingale",
    "summarize",
]
