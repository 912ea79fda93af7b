"""Whole-run summary for a martingale projection.

Derives the final unrealized PnL, an approximate liquidation price, the
total estimated funding cost and a whole-position take-profit from the
accepted steps and the final cumulative state.

The liquidation price is an explicit approximation that ignores realized
PnL and cross-margin effects:

    long:  avg * (1 + mmr) - total_margin / total_quantity   (floored at 0)
    short: avg * (1 - mmr) + total_margin / total_quantity   (None if < 0)
"""

from collections.abc import Sequence
from decimal import Decimal

from contract_calc.martingale.initial import signed_tp_percent
from contract_calc.models import (
    PositionSide,
    PositionState,
    StepRecord,
    StrategyParameters,
    SummaryResult,
)
from contract_calc.pnl.fee_calculator import HUNDRED, ZERO, fee


def estimate_liquidation_price(
    direction: PositionSide,
    avg_price: Decimal,
    total_margin: Decimal,
    total_quantity: Decimal,
    maintenance_margin_rate: Decimal,
) -> Decimal | None:
    """Approximate liquidation price for the accumulated position.

    Args:
        direction: Position direction.
        avg_price: Average entry price of the whole position.
        total_margin: Margin committed across all entries.
        total_quantity: Total position quantity.
        maintenance_margin_rate: MMR in percent (0.5 = 0.5%).

    Returns:
        Liquidation price, or None when there is no position or a short's
        estimate would be negative.
    """
    if total_quantity <= ZERO:
        return None

    mmr = maintenance_margin_rate / HUNDRED
    margin_per_unit = total_margin / total_quantity

    if direction == PositionSide.LONG:
        liq_price = avg_price * (1 + mmr) - margin_per_unit
        return max(liq_price, ZERO)

    liq_price = avg_price * (1 - mmr) + margin_per_unit
    if liq_price < ZERO:
        return None
    return liq_price


def liq_distance_percent(
    liq_price: Decimal | None,
    avg_price: Decimal,
) -> Decimal | None:
    """Percentage move from the average price to the liquidation price."""
    if liq_price is None or avg_price == ZERO:
        return None
    return (liq_price - avg_price) / avg_price * HUNDRED


def liq_distance_risk(
    direction: PositionSide,
    liq_diff_percent: Decimal | None,
) -> str:
    """Classify the liquidation distance as "safe", "adverse" or "unknown".

    The distance is adverse when liquidation sits on the losing side of
    the average: below it for a long, above it for a short.
    """
    if liq_diff_percent is None:
        return "unknown"
    if direction == PositionSide.LONG and liq_diff_percent < ZERO:
        return "adverse"
    if direction == PositionSide.SHORT and liq_diff_percent > ZERO:
        return "adverse"
    return "safe"


def summarize(
    params: StrategyParameters,
    steps: Sequence[StepRecord],
    final_state: PositionState,
    price_of_last_trade: Decimal,
) -> SummaryResult:
    """Aggregate accepted steps into a SummaryResult.

    Args:
        params: The run's strategy parameters.
        steps: Accepted steps in order, starting with step 0.
        final_state: Position after the last accepted step.
        price_of_last_trade: Entry price of the last accepted trade (the
            initial price when no add was accepted).

    Returns:
        SummaryResult for the run.
    """
    total_quantity = final_state.total_quantity
    avg_price = final_state.avg_price
    has_trades = total_quantity > ZERO
    has_adds = any(step.step > 0 for step in steps)

    final_unrealized_pnl = ZERO
    liq_price: Decimal | None = None
    liq_diff: Decimal | None = None

    if has_trades:
        mark = price_of_last_trade if price_of_last_trade != ZERO else params.initial_price
        if params.is_long:
            final_unrealized_pnl = total_quantity * (mark - avg_price)
        else:
            final_unrealized_pnl = total_quantity * (avg_price - mark)

        liq_price = estimate_liquidation_price(
            params.direction,
            avg_price,
            final_state.total_margin,
            total_quantity,
            params.maintenance_margin_rate,
        )
        liq_diff = liq_distance_percent(liq_price, avg_price)

    price_diff: Decimal | None = None
    if has_adds:
        price_diff = (
            (price_of_last_trade - params.initial_price) / params.initial_price * HUNDRED
        )

    total_funding = sum((step.step_funding_cost for step in steps), ZERO)

    if has_trades:
        total_opening_fees = sum((step.opening_fee for step in steps), ZERO)
        tp_price = avg_price * (1 + signed_tp_percent(params) / HUNDRED)
        closing_fee = fee(total_quantity, tp_price, params.taker_fee)
        final_tp_profit = (
            total_quantity * abs(tp_price - avg_price)
            - total_opening_fees
            - closing_fee
            - total_funding
        )
    else:
        initial = next((step for step in steps if step.step == 0), None)
        final_tp_profit = initial.tp_profit if initial is not None else ZERO

    return SummaryResult(
        final_avg_price=avg_price if has_trades else params.initial_price,
        total_margin=final_state.total_margin,
        final_unrealized_pnl=final_unrealized_pnl,
        estimated_liq_price=liq_price,
        price_diff_percent=price_diff,
        liq_diff_percent=liq_diff,
        total_estimated_funding_cost=total_funding,
        final_tp_profit=final_tp_profit,
        has_trades=has_trades,
        has_adds=has_adds,
    )
