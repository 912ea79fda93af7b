"""Shared test fixtures for the contract calculators."""

from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

import pytest

from contract_calc.config import AppSettings, FeeSettings, MarginSettings
from contract_calc.models import PositionSide, StrategyParameters


@pytest.fixture
def base_params() -> StrategyParameters:
    """Long, $100 start, 100 USDT margin at 10x, one add 5% lower, no fees or funding."""
    return StrategyParameters(
        direction=PositionSide.LONG,
        initial_price=Decimal("100"),
        add_diff_percent=Decimal("5"),
        tp_percent=Decimal("10"),
        initial_margin=Decimal("100"),
        add_margin_base=Decimal("100"),
        max_adds=1,
        leverage=Decimal("10"),
        taker_fee=Decimal("0"),
        maker_fee=Decimal("0"),
        maintenance_margin_rate=Decimal("0"),
        funding_rate=Decimal("0"),
        funding_settlements=0,
        amount_multiplier=Decimal("1"),
        diff_multiplier=Decimal("1"),
    )


@pytest.fixture
def make_params(base_params: StrategyParameters) -> Callable[..., StrategyParameters]:
    """Factory returning base_params with selected fields overridden."""

    def _make(**overrides: object) -> StrategyParameters:
        return replace(base_params, **overrides)

    return _make


@pytest.fixture
def app_settings() -> AppSettings:
    """AppSettings with explicit defaults, independent of the environment."""
    return AppSettings(
        log_level="DEBUG",
        fees=FeeSettings(taker_fee=Decimal("0.05"), maker_fee=Decimal("0.02")),
        margin=MarginSettings(maintenance_margin_rate=Decimal("0.5")),
    )
