"""Tests for plain-text reports and export file names."""

from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

from contract_calc.martingale.simulator import run_martingale
from contract_calc.models import PositionSide, StandardTradeParameters, StrategyParameters
from contract_calc.report import (
    export_filename,
    format_martingale_report,
    format_standard_report,
)
from contract_calc.standard.calculator import calculate_standard_trade


class TestExportFilename:
    """Test export_filename."""

    def test_reference_parameters(self, base_params: StrategyParameters) -> None:
        assert export_filename(base_params) == (
            "Martingale_Long_P100.000000_Diff5.00_TP10.00_N1_L10x_TF0.000_MF0.000"
            "_MMR0.0_FR0.0000_FS0_AM1.00_DM1.00.png"
        )

    def test_short_and_fractional_leverage(
        self, make_params: Callable[..., StrategyParameters]
    ) -> None:
        params = make_params(
            direction=PositionSide.SHORT,
            leverage=Decimal("12.5"),
            funding_rate=Decimal("-0.01"),
            funding_settlements=9,
        )
        name = export_filename(params, extension="txt")
        assert name.startswith("Martingale_Short_")
        assert "_L12x_" in name
        assert "_FR-0.0100_FS9_" in name
        assert name.endswith(".txt")

    def test_unsafe_characters_replaced(self, base_params: StrategyParameters) -> None:
        assert export_filename(base_params, extension="p:n*g").endswith(".p_n_g")


class TestMartingaleReport:
    """Test format_martingale_report."""

    def test_reference_run(self, base_params: StrategyParameters) -> None:
        report = format_martingale_report(run_martingale(base_params))
        assert "MARTINGALE PROJECTION (LONG)" in report
        assert "95.000000" in report
        assert "Start to last add:       -5.00%" in report
        assert "(adverse)" in report
        assert "Total margin:            200.00" in report
        assert "Stopped at step" not in report

    def test_no_adds_configured(self, make_params: Callable[..., StrategyParameters]) -> None:
        report = format_martingale_report(run_martingale(make_params(max_adds=0)))
        assert "N/A (no adds)" in report

    def test_no_adds_placed(self, make_params: Callable[..., StrategyParameters]) -> None:
        """First add would be at $0, so none is placed even though max_adds=3."""
        result = run_martingale(make_params(add_diff_percent=Decimal("100"), max_adds=3))
        report = format_martingale_report(result)
        assert "0.00% (no adds placed)" in report
        assert "Stopped at step 1" in report

    def test_aborted_run(self, make_params: Callable[..., StrategyParameters]) -> None:
        result = run_martingale(make_params(add_diff_percent=Decimal("40"), max_adds=5))
        report = format_martingale_report(result)
        assert "Stopped at step 3: add price -20.00000000 is not valid" in report

    def test_aborted_without_price(self, base_params: StrategyParameters) -> None:
        """A run stopped for a reason other than a bad price prints that reason."""
        result = replace(
            run_martingale(base_params),
            aborted=True,
            abort_reason="Figures for step 2 are too large to represent",
        )
        report = format_martingale_report(result)
        assert "Stopped at step 2: Figures for step 2 are too large to represent." in report
        assert "is not valid" not in report

    def test_funding_sign(self, make_params: Callable[..., StrategyParameters]) -> None:
        params = make_params(funding_rate=Decimal("0.01"), funding_settlements=4, max_adds=0)
        report = format_martingale_report(run_martingale(params))
        # 4 events on 1000 of value at 0.01%
        assert "Est. funding cost:       +0.4000 USDT" in report


class TestStandardReport:
    """Test format_standard_report."""

    def test_long_report(self) -> None:
        params = StandardTradeParameters(
            direction=PositionSide.LONG,
            entry_price=Decimal("100"),
            exit_price=Decimal("110"),
            quantity=Decimal("1"),
            leverage=Decimal("10"),
        )
        report = format_standard_report(calculate_standard_trade(params), params.direction)
        assert "PnL:               10.00" in report
        assert "ROE:               100.00%" in report
        assert "Liquidation price: 90.000000" in report

    def test_floored_long_liquidation(self) -> None:
        params = StandardTradeParameters(
            direction=PositionSide.LONG,
            entry_price=Decimal("100"),
            exit_price=Decimal("110"),
            quantity=Decimal("1"),
            leverage=Decimal("1"),
        )
        report = format_standard_report(calculate_standard_trade(params), params.direction)
        assert "Liquidation price: <=0.000000" in report

    def test_undefined_liquidation(self) -> None:
        params = StandardTradeParameters(
            direction=PositionSide.SHORT,
            entry_price=Decimal("100"),
            exit_price=Decimal("90"),
            quantity=Decimal("1"),
            leverage=Decimal("10"),
            maintenance_margin_rate=Decimal("-1"),
        )
        report = format_standard_report(calculate_standard_trade(params), params.direction)
        assert "Liquidation price: N/A" in report
