"""Step 0 of a martingale run: the initial entry at the starting price."""

from decimal import Decimal

from contract_calc.models import PositionState, StepRecord, StrategyParameters
from contract_calc.pnl.fee_calculator import HUNDRED, ZERO, FundingCostEstimator, fee


def signed_tp_percent(params: StrategyParameters) -> Decimal:
    """Take-profit percent with the direction's sign applied."""
    return params.tp_percent if params.is_long else -params.tp_percent


def initial_position(
    params: StrategyParameters,
    funding: FundingCostEstimator,
) -> tuple[StepRecord, PositionState]:
    """Compute the initial entry and seed the cumulative position.

    Args:
        params: Validated strategy parameters.
        funding: Funding estimator configured for this run.

    Returns:
        Tuple of (step 0 record, position state after the entry).
    """
    price = params.initial_price
    quantity = params.initial_margin * params.leverage / price
    tp_price = price * (1 + signed_tp_percent(params) / HUNDRED)

    opening_fee = fee(quantity, price, params.taker_fee)
    closing_fee_at_tp = fee(quantity, tp_price, params.taker_fee)
    step_funding_cost = funding.step_cost(quantity, price)

    tp_profit = (
        quantity * abs(tp_price - price)
        - opening_fee
        - closing_fee_at_tp
        - step_funding_cost
    )

    percent_to_tp = ZERO
    if price != ZERO:
        percent_to_tp = (tp_price - price) / price * HUNDRED

    record = StepRecord(
        step=0,
        add_price=price,
        add_quantity=quantity,
        add_margin=params.initial_margin,
        opening_fee=opening_fee,
        accumulated_opening_fees=opening_fee,
        step_funding_cost=step_funding_cost,
        unrealized_pnl=ZERO,
        avg_price=price,
        tp_price=tp_price,
        tp_profit=tp_profit,
        percent_to_tp=percent_to_tp,
        cumulative_diff_percent=ZERO,
    )
    state = PositionState(
        total_margin=params.initial_margin,
        total_quantity=quantity,
        avg_price=price,
        accumulated_opening_fees=opening_fee,
    )
    return record, state
