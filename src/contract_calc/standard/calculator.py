"""PnL, ROE, fees and liquidation price for one leveraged trade.

Rates are decimal fractions here (taker_fee_rate=0.0005 is 0.05%).
Isolated-margin liquidation approximation:

    long:  entry * (1 - 1/leverage) / (1 - mmr)   floored at 0
    short: entry * (1 + 1/leverage) / (1 + mmr)   None if negative
"""

from decimal import Decimal

from contract_calc.models import PositionSide, StandardTradeParameters, StandardTradeResult
from contract_calc.pnl.fee_calculator import HUNDRED, ZERO, fee

ONE = Decimal("1")


def standard_liquidation_price(
    direction: PositionSide,
    entry_price: Decimal,
    leverage: Decimal,
    maintenance_margin_rate: Decimal,
) -> Decimal | None:
    """Liquidation price for a single isolated position.

    Returns None when the formula's domain is invalid: leverage <= 0,
    mmr >= 1 for a long, mmr <= -1 for a short, or a negative short result.
    """
    if leverage <= ZERO:
        return None

    mmr = maintenance_margin_rate
    if direction == PositionSide.LONG:
        if mmr >= ONE:
            return None
        liq_price = entry_price * (ONE - ONE / leverage) / (ONE - mmr)
        return max(liq_price, ZERO)

    if mmr <= -ONE:
        return None
    liq_price = entry_price * (ONE + ONE / leverage) / (ONE + mmr)
    if liq_price < ZERO:
        return None
    return liq_price


def calculate_standard_trade(params: StandardTradeParameters) -> StandardTradeResult:
    """Compute realized figures for one entry/exit pair.

    Args:
        params: Validated trade parameters.

    Returns:
        StandardTradeResult with pnl net of both taker fees.
    """
    qty = params.quantity
    fee_percent = params.taker_fee_rate * HUNDRED

    initial_margin = ZERO
    if params.leverage > ZERO:
        initial_margin = params.entry_price * qty / params.leverage
    opening_fee = fee(qty, params.entry_price, fee_percent)
    closing_fee = fee(qty, params.exit_price, fee_percent)
    total_fees = opening_fee + closing_fee

    if params.direction == PositionSide.LONG:
        pnl = (params.exit_price - params.entry_price) * qty - total_fees
    else:
        pnl = (params.entry_price - params.exit_price) * qty - total_fees

    roe = pnl / initial_margin * HUNDRED if initial_margin > ZERO else ZERO

    return StandardTradeResult(
        pnl=pnl,
        roe=roe,
        liquidation_price=standard_liquidation_price(
            params.direction,
            params.entry_price,
            params.leverage,
            params.maintenance_margin_rate,
        ),
        total_fees=total_fees,
        initial_margin=initial_margin,
        opening_fee=opening_fee,
        closing_fee=closing_fee,
    )
