"""Parse raw form/JSON values into validated parameter records.

Raw values may arrive as str, int, float or Decimal. Every field is
checked before any computation; all violations are collected and raised
together as a single ValidationError keyed by field name.

Floats are converted through str() so that 0.1 becomes Decimal("0.1"),
never the binary expansion.

Magnitudes are capped at MAX_MAGNITUDE and max_adds at MAX_ADDS. Within
those bounds every intermediate of a run (geometric margin growth over
MAX_ADDS steps included) stays inside the Decimal exponent range, and a
run always finishes in bounded time.
"""

from collections.abc import Callable, Mapping
from decimal import Decimal, InvalidOperation

from contract_calc.config import FeeSettings, MarginSettings
from contract_calc.exceptions import ValidationError
from contract_calc.logging import get_logger
from contract_calc.models import PositionSide, StandardTradeParameters, StrategyParameters

logger = get_logger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

MAX_MAGNITUDE = Decimal("1e15")
MAX_ADDS = 1000


def _to_decimal(value: object) -> Decimal | None:
    """Convert a raw value to a finite Decimal, or None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite() or abs(result) > MAX_MAGNITUDE:
        return None
    return result


def _to_int(value: object) -> int | None:
    """Convert a raw value to an int; fractional values are rejected."""
    number = _to_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def _to_direction(value: object) -> PositionSide | None:
    if isinstance(value, PositionSide):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PositionSide(value.strip().lower())
    except ValueError:
        return None


class _FieldReader:
    """Collects parsed values and per-field error messages from one mapping."""

    def __init__(self, raw: Mapping[str, object]) -> None:
        self._raw = raw
        self.errors: dict[str, str] = {}

    def decimal(
        self,
        name: str,
        check: Callable[[Decimal], bool],
        message: str,
        default: Decimal | None = None,
    ) -> Decimal:
        raw_value = self._raw.get(name)
        if raw_value is None and default is not None:
            return default
        value = _to_decimal(raw_value)
        if value is None or not check(value):
            self.errors[name] = message
            return ZERO
        return value

    def integer(self, name: str, message: str, maximum: int | None = None) -> int:
        value = _to_int(self._raw.get(name))
        if value is None or value < 0 or (maximum is not None and value > maximum):
            self.errors[name] = message
            return 0
        return value

    def direction(self, name: str) -> PositionSide:
        value = _to_direction(self._raw.get(name))
        if value is None:
            self.errors[name] = "Direction must be 'long' or 'short'."
            return PositionSide.LONG
        return value

    def raise_if_invalid(self, kind: str) -> None:
        if self.errors:
            logger.info("validation_failed", kind=kind, fields=sorted(self.errors))
            raise ValidationError(self.errors)


def _positive(value: Decimal) -> bool:
    return value > ZERO


def _non_negative(value: Decimal) -> bool:
    return value >= ZERO


def parse_strategy_inputs(
    raw: Mapping[str, object],
    fee_settings: FeeSettings | None = None,
    margin_settings: MarginSettings | None = None,
) -> StrategyParameters:
    """Build StrategyParameters from raw martingale inputs.

    Optional fields (taker_fee, maker_fee, maintenance_margin_rate,
    funding_rate, funding_settlements, amount_multiplier, diff_multiplier)
    fall back to configured defaults or neutral values when absent.

    Args:
        raw: Field name to raw value.
        fee_settings: Default fee rates. Defaults to FeeSettings().
        margin_settings: Default MMR. Defaults to MarginSettings().

    Returns:
        Validated StrategyParameters.

    Raises:
        ValidationError: With every invalid field and its message.
    """
    if fee_settings is None:
        fee_settings = FeeSettings()
    if margin_settings is None:
        margin_settings = MarginSettings()

    r = _FieldReader(raw)
    direction = r.direction("direction")
    initial_price = r.decimal(
        "initial_price", _positive, "Initial price must be a number greater than 0."
    )
    add_diff_percent = r.decimal(
        "add_diff_percent", _positive, "Add price deviation must be a number greater than 0."
    )
    tp_percent = r.decimal(
        "tp_percent", _positive, "Take-profit percent must be a number greater than 0."
    )
    initial_margin = r.decimal(
        "initial_margin", _positive, "Initial margin must be a number greater than 0."
    )
    add_margin_base = r.decimal(
        "add_margin_base", _positive, "Base add margin must be a number greater than 0."
    )
    max_adds = r.integer(
        "max_adds",
        f"Max adds must be an integer between 0 and {MAX_ADDS}.",
        maximum=MAX_ADDS,
    )
    leverage = r.decimal(
        "leverage", lambda v: v >= ONE, "Leverage must be a number of at least 1."
    )
    taker_fee = r.decimal(
        "taker_fee", _non_negative, "Taker fee cannot be negative.",
        default=fee_settings.taker_fee,
    )
    maker_fee = r.decimal(
        "maker_fee", _non_negative, "Maker fee cannot be negative.",
        default=fee_settings.maker_fee,
    )
    maintenance_margin_rate = r.decimal(
        "maintenance_margin_rate",
        lambda v: ZERO <= v <= HUNDRED,
        "Maintenance margin rate must be between 0 and 100.",
        default=margin_settings.maintenance_margin_rate,
    )
    funding_rate = r.decimal(
        "funding_rate", lambda v: True, "Funding rate must be a number.", default=ZERO
    )
    if raw.get("funding_settlements") is None:
        funding_settlements = 0
    else:
        funding_settlements = r.integer(
            "funding_settlements", "Funding settlements must be a non-negative integer."
        )
    amount_multiplier = r.decimal(
        "amount_multiplier", _positive, "Amount multiplier must be a number greater than 0.",
        default=ONE,
    )
    diff_multiplier = r.decimal(
        "diff_multiplier", _positive, "Deviation multiplier must be a number greater than 0.",
        default=ONE,
    )

    r.raise_if_invalid("martingale")

    return StrategyParameters(
        direction=direction,
        initial_price=initial_price,
        add_diff_percent=add_diff_percent,
        tp_percent=tp_percent,
        initial_margin=initial_margin,
        add_margin_base=add_margin_base,
        max_adds=max_adds,
        leverage=leverage,
        taker_fee=taker_fee,
        maker_fee=maker_fee,
        maintenance_margin_rate=maintenance_margin_rate,
        funding_rate=funding_rate,
        funding_settlements=funding_settlements,
        amount_multiplier=amount_multiplier,
        diff_multiplier=diff_multiplier,
    )


def parse_standard_inputs(
    raw: Mapping[str, object],
    fee_settings: FeeSettings | None = None,
    margin_settings: MarginSettings | None = None,
) -> StandardTradeParameters:
    """Build StandardTradeParameters from raw single-trade inputs.

    ``taker_fee`` and ``maintenance_margin_rate`` are entered in percent
    and converted to decimal fractions on the returned record.

    Raises:
        ValidationError: With every invalid field and its message.
    """
    if fee_settings is None:
        fee_settings = FeeSettings()
    if margin_settings is None:
        margin_settings = MarginSettings()

    r = _FieldReader(raw)
    direction = r.direction("direction")
    entry_price = r.decimal(
        "entry_price", _positive, "Entry price must be a number greater than 0."
    )
    exit_price = r.decimal(
        "exit_price", _positive, "Exit price must be a number greater than 0."
    )
    quantity = r.decimal("quantity", _positive, "Quantity must be a number greater than 0.")
    leverage = r.decimal(
        "leverage", lambda v: v >= ONE, "Leverage must be at least 1."
    )
    taker_fee = r.decimal(
        "taker_fee", _non_negative, "Taker fee cannot be negative.",
        default=fee_settings.taker_fee,
    )
    mmr = r.decimal(
        "maintenance_margin_rate",
        lambda v: ZERO <= v < HUNDRED,
        "Maintenance margin rate must be at least 0 and below 100.",
        default=margin_settings.maintenance_margin_rate,
    )

    r.raise_if_invalid("standard")

    return StandardTradeParameters(
        direction=direction,
        entry_price=entry_price,
        exit_price=exit_price,
        quantity=quantity,
        leverage=leverage,
        taker_fee_rate=taker_fee / HUNDRED,
        maintenance_margin_rate=mmr / HUNDRED,
    )
