"""Shared data models for the contract calculators.

CRITICAL: All monetary values use Decimal. Never use float for prices, quantities, or fees.

Records are frozen dataclasses: a run produces them once and every
consumer (summary, report, API) only reads them.
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from typing import Any


class PositionSide(str, Enum):
    """Position direction."""

    LONG = "long"
    SHORT = "short"


def _serialize(value: Any) -> Any:
    """Convert Decimal/Enum values to JSON-friendly primitives."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def _record_to_dict(record: Any) -> dict[str, Any]:
    return {f.name: _serialize(getattr(record, f.name)) for f in fields(record)}


@dataclass(frozen=True)
class StrategyParameters:
    """Validated inputs for one martingale simulation run.

    Percent fields (add_diff_percent, tp_percent, taker_fee, maker_fee,
    maintenance_margin_rate, funding_rate) are in percent units, e.g.
    ``Decimal("0.05")`` means 0.05%.
    """

    direction: PositionSide
    initial_price: Decimal
    add_diff_percent: Decimal
    tp_percent: Decimal
    initial_margin: Decimal
    add_margin_base: Decimal
    max_adds: int
    leverage: Decimal
    taker_fee: Decimal = Decimal("0")
    maker_fee: Decimal = Decimal("0")
    maintenance_margin_rate: Decimal = Decimal("0")
    funding_rate: Decimal = Decimal("0")
    funding_settlements: int = 0
    amount_multiplier: Decimal = Decimal("1")
    diff_multiplier: Decimal = Decimal("1")

    @property
    def is_long(self) -> bool:
        return self.direction == PositionSide.LONG

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass(frozen=True)
class StepRecord:
    """One row of the martingale projection (step 0 is the initial entry)."""

    step: int
    add_price: Decimal
    add_quantity: Decimal
    add_margin: Decimal
    opening_fee: Decimal
    accumulated_opening_fees: Decimal
    step_funding_cost: Decimal
    unrealized_pnl: Decimal
    avg_price: Decimal
    tp_price: Decimal
    tp_profit: Decimal
    percent_to_tp: Decimal
    cumulative_diff_percent: Decimal

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass(frozen=True)
class PositionState:
    """Cumulative position carried from one martingale step to the next."""

    total_margin: Decimal
    total_quantity: Decimal
    avg_price: Decimal
    accumulated_opening_fees: Decimal

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass(frozen=True)
class SummaryResult:
    """Whole-run figures derived from the accepted steps.

    Values that cannot be computed are None rather than NaN:
    estimated_liq_price and liq_diff_percent when there is no position or
    the formula's domain is invalid, price_diff_percent when no add was
    accepted.
    """

    final_avg_price: Decimal
    total_margin: Decimal
    final_unrealized_pnl: Decimal
    estimated_liq_price: Decimal | None
    price_diff_percent: Decimal | None
    liq_diff_percent: Decimal | None
    total_estimated_funding_cost: Decimal
    final_tp_profit: Decimal
    has_trades: bool
    has_adds: bool

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass(frozen=True)
class MartingaleResult:
    """Complete output of a martingale run.

    Attributes:
        parameters: The inputs the run was computed from.
        steps: Accepted steps, contiguous from step 0.
        final_state: Cumulative position after the last accepted step.
        summary: Aggregated whole-run figures.
        aborted: True when an add price fell to zero or below and the
            run stopped before max_adds.
        abort_reason: Message describing why the run stopped early.
        invalid_add_price: The rejected add price, when aborted.
    """

    parameters: StrategyParameters
    steps: tuple[StepRecord, ...]
    final_state: PositionState
    summary: SummaryResult
    aborted: bool = False
    abort_reason: str | None = None
    invalid_add_price: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for JSON output, Decimals as strings."""
        return {
            "parameters": self.parameters.to_dict(),
            "steps": [step.to_dict() for step in self.steps],
            "final_state": self.final_state.to_dict(),
            "summary": self.summary.to_dict(),
            "aborted": self.aborted,
            "abort_reason": self.abort_reason,
            "invalid_add_price": _serialize(self.invalid_add_price),
        }


@dataclass(frozen=True)
class StandardTradeParameters:
    """Inputs for a single entry/exit trade.

    Unlike StrategyParameters, taker_fee_rate and maintenance_margin_rate
    are decimal fractions (0.0005 means 0.05%).
    """

    direction: PositionSide
    entry_price: Decimal
    exit_price: Decimal
    quantity: Decimal
    leverage: Decimal
    taker_fee_rate: Decimal = Decimal("0")
    maintenance_margin_rate: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass(frozen=True)
class StandardTradeResult:
    """Realized figures for a single trade."""

    pnl: Decimal
    roe: Decimal
    liquidation_price: Decimal | None
    total_fees: Decimal
    initial_margin: Decimal
    opening_fee: Decimal
    closing_fee: Decimal

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)
