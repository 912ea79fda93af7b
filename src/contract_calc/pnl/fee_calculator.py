"""Trading fee and funding cost computation.

All calculations use Decimal arithmetic exclusively -- no float conversions anywhere.

Fee rates here are in PERCENT units (0.05 means 0.05% of notional), the
way they are entered for the martingale simulator. The standard trade
calculator works with decimal fractions and applies its rate directly.

Funding convention:
  - Positive funding rate = longs pay shorts
  - A positive step funding cost is an expense, negative is income
"""

from decimal import Decimal

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def fee(quantity: Decimal, price: Decimal, fee_percent: Decimal) -> Decimal:
    """Return the fee for trading ``quantity`` at ``price``.

    Non-positive quantity or price, or a negative rate, is treated as
    "no fee" and yields 0 rather than an error.

    Args:
        quantity: Base asset quantity.
        price: Execution price.
        fee_percent: Fee rate in percent (0.05 = 0.05%).

    Returns:
        Fee in quote currency.
    """
    if quantity <= ZERO or price <= ZERO or fee_percent < ZERO:
        return ZERO
    return quantity * price * fee_percent / HUNDRED


class FundingCostEstimator:
    """Spreads an estimated number of funding settlements over simulated steps.

    The total ``funding_settlements`` is divided evenly across
    ``max_adds + 1`` virtual steps (the initial entry plus every add), so
    fractional events per step are expected.

    Args:
        funding_rate: Funding rate per settlement, in percent.
        funding_settlements: Estimated total settlements over the trade.
        max_adds: Maximum number of adds in the run.
    """

    def __init__(
        self,
        funding_rate: Decimal,
        funding_settlements: int,
        max_adds: int,
    ) -> None:
        self._funding_rate = funding_rate
        virtual_steps = max_adds + 1
        if virtual_steps > 0:
            self._events_per_step = Decimal(funding_settlements) / Decimal(virtual_steps)
        else:
            self._events_per_step = ZERO

    @property
    def events_per_step(self) -> Decimal:
        return self._events_per_step

    def step_cost(self, quantity: Decimal, price: Decimal) -> Decimal:
        """Estimated funding cost for one step.

        Args:
            quantity: Total position quantity after the step.
            price: Average price after the step.

        Returns:
            Funding cost in quote currency. Positive = paid, negative = received.
        """
        position_value = quantity * price
        return position_value * (self._funding_rate / HUNDRED) * self._events_per_step
