"""Martingale add-step recurrence.

Each add is placed at a deviation from the initial price that grows as a
geometric series, with a margin that grows geometrically too:

    add_margin_i      = add_margin_base * amount_multiplier^(i-1)
    cumulative_diff_i = sum_{k=1..i} add_diff_percent * diff_multiplier^(k-1)
    add_price_i       = initial_price * (1 -/+ cumulative_diff_i / 100)

The whole position is then re-averaged and a new unified take-profit
target, fee load and funding estimate are derived from it.

CRITICAL: All monetary values use Decimal. Never use float for prices, quantities, or fees.
"""

from decimal import Decimal

from contract_calc.exceptions import InvalidAddPriceError
from contract_calc.models import PositionState, StepRecord, StrategyParameters
from contract_calc.pnl.fee_calculator import HUNDRED, ZERO, FundingCostEstimator, fee


def add_margin(params: StrategyParameters, step: int) -> Decimal:
    """Margin committed by add ``step`` (1-based)."""
    return params.add_margin_base * params.amount_multiplier ** (step - 1)


def cumulative_diff_percent(params: StrategyParameters, step: int) -> Decimal:
    """Total deviation from the initial price at which add ``step`` triggers.

    Recomputes the series from the parameters alone; the accumulator keeps
    a running total instead and uses this only when steps are requested
    out of order.
    """
    total = ZERO
    for k in range(1, step + 1):
        total += params.add_diff_percent * params.diff_multiplier ** (k - 1)
    return total


def add_price(params: StrategyParameters, diff_percent: Decimal) -> Decimal:
    """Entry price for an add triggered at ``diff_percent`` from the start."""
    if params.is_long:
        return params.initial_price * (1 - diff_percent / HUNDRED)
    return params.initial_price * (1 + diff_percent / HUNDRED)


class PositionAccumulator:
    """Produces add steps 1..max_adds from the previous cumulative state.

    The accumulator is owned by a single run loop. It carries only the
    running deviation total; the position itself is passed in and returned
    as an immutable PositionState.

    Args:
        params: Validated strategy parameters.
        funding: Funding estimator configured for this run.
    """

    def __init__(
        self,
        params: StrategyParameters,
        funding: FundingCostEstimator,
    ) -> None:
        self._params = params
        self._funding = funding
        self._diff_step = 0
        self._diff_total = ZERO

    def _diff_for_step(self, step: int) -> Decimal:
        if step == self._diff_step + 1:
            term = self._params.add_diff_percent * self._params.diff_multiplier ** (step - 1)
            self._diff_total += term
        else:
            self._diff_total = cumulative_diff_percent(self._params, step)
        self._diff_step = step
        return self._diff_total

    def next_step(
        self,
        prior: PositionState,
        step: int,
    ) -> tuple[StepRecord, PositionState]:
        """Apply add ``step`` to the ``prior`` position.

        Args:
            prior: Cumulative position before this add.
            step: Add index, starting at 1.

        Returns:
            Tuple of (step record, updated position state).

        Raises:
            InvalidAddPriceError: If the computed add price is <= 0. No
                record is produced for this step.
        """
        params = self._params
        margin = add_margin(params, step)
        diff_percent = self._diff_for_step(step)
        price = add_price(params, diff_percent)

        if price <= ZERO:
            raise InvalidAddPriceError(step, price)

        quantity = margin * params.leverage / price

        total_margin = prior.total_margin + margin
        total_quantity = prior.total_quantity + quantity
        total_value = prior.total_quantity * prior.avg_price + quantity * price
        avg_price = total_value / total_quantity

        # Whole position marked at this add's price against the new average
        if params.is_long:
            unrealized_pnl = total_quantity * (price - avg_price)
            tp_price = avg_price * (1 + params.tp_percent / HUNDRED)
        else:
            unrealized_pnl = total_quantity * (avg_price - price)
            tp_price = avg_price * (1 - params.tp_percent / HUNDRED)

        opening_fee = fee(quantity, price, params.taker_fee)
        accumulated_opening_fees = prior.accumulated_opening_fees + opening_fee

        closing_fee_at_tp = fee(total_quantity, tp_price, params.taker_fee)
        profit_before_fees = total_quantity * abs(tp_price - avg_price)
        step_funding_cost = self._funding.step_cost(total_quantity, avg_price)

        tp_profit = (
            profit_before_fees
            - accumulated_opening_fees
            - closing_fee_at_tp
            - step_funding_cost
        )
        percent_to_tp = (tp_price - price) / price * HUNDRED

        record = StepRecord(
            step=step,
            add_price=price,
            add_quantity=quantity,
            add_margin=margin,
            opening_fee=opening_fee,
            accumulated_opening_fees=accumulated_opening_fees,
            step_funding_cost=step_funding_cost,
            unrealized_pnl=unrealized_pnl,
            avg_price=avg_price,
            tp_price=tp_price,
            tp_profit=tp_profit,
            percent_to_tp=percent_to_tp,
            cumulative_diff_percent=diff_percent,
        )
        state = PositionState(
            total_margin=total_margin,
            total_quantity=total_quantity,
            avg_price=avg_price,
            accumulated_opening_fees=accumulated_opening_fees,
        )
        return record, state
