"""Martingale run loop: step 0, then adds until max_adds or an invalid price."""

from decimal import Overflow

from contract_calc.exceptions import InvalidAddPriceError
from contract_calc.logging import get_logger
from contract_calc.martingale.accumulator import PositionAccumulator
from contract_calc.martingale.initial import initial_position
from contract_calc.martingale.summary import summarize
from contract_calc.models import MartingaleResult, StepRecord, StrategyParameters
from contract_calc.pnl.fee_calculator import FundingCostEstimator

logger = get_logger(__name__)


def run_martingale(params: StrategyParameters) -> MartingaleResult:
    """Project a full martingale sequence for the given parameters.

    Step 0 is always produced. Adds 1..max_adds follow; if an add price
    comes out <= 0, or an add's figures exceed the Decimal exponent range,
    the run stops there and returns the steps accepted so far with
    ``aborted=True``.

    Args:
        params: Validated strategy parameters.

    Returns:
        MartingaleResult with steps, final state and summary.
    """
    funding = FundingCostEstimator(
        funding_rate=params.funding_rate,
        funding_settlements=params.funding_settlements,
        max_adds=params.max_adds,
    )

    first, state = initial_position(params, funding)
    steps: list[StepRecord] = [first]
    price_of_last_trade = first.add_price

    accumulator = PositionAccumulator(params, funding)
    aborted = False
    abort_reason: str | None = None
    invalid_price = None

    for i in range(1, params.max_adds + 1):
        try:
            record, state = accumulator.next_step(state, i)
        except InvalidAddPriceError as e:
            aborted = True
            abort_reason = str(e)
            invalid_price = e.add_price
            logger.warning(
                "martingale_add_price_invalid",
                step=e.step,
                add_price=str(e.add_price),
                accepted_steps=len(steps),
            )
            break
        except Overflow:
            aborted = True
            abort_reason = f"Figures for step {i} are too large to represent; no further adds can be placed"
            logger.warning("martingale_step_overflow", step=i, accepted_steps=len(steps))
            break
        steps.append(record)
        price_of_last_trade = record.add_price

    if len(steps) == 1:
        price_of_last_trade = params.initial_price

    summary = summarize(params, steps, state, price_of_last_trade)

    logger.debug(
        "martingale_run_complete",
        direction=params.direction.value,
        steps=len(steps),
        aborted=aborted,
        final_avg_price=str(summary.final_avg_price),
        total_margin=str(summary.total_margin),
        liq_price=str(summary.estimated_liq_price),
    )

    return MartingaleResult(
        parameters=params,
        steps=tuple(steps),
        final_state=state,
        summary=summary,
        aborted=aborted,
        abort_reason=abort_reason,
        invalid_add_price=invalid_price,
    )
