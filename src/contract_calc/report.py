"""Plain-text rendering of calculator results.

Reads finished result records only; nothing here feeds back into the
calculations. Values the core reports as None are shown as "N/A".
"""

import re
from decimal import Decimal

from contract_calc.martingale.summary import liq_distance_risk
from contract_calc.models import (
    MartingaleResult,
    PositionSide,
    StandardTradeResult,
    StrategyParameters,
)

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')

_STEP_COLUMNS: list[tuple[str, int]] = [
    ("Step", 4),
    ("Price", 14),
    ("Qty", 12),
    ("Margin", 10),
    ("Open Fee", 10),
    ("uPnL", 11),
    ("Avg Price", 14),
    ("TP Price", 14),
    ("TP Profit", 11),
    ("To TP", 8),
]


def _fmt(value: Decimal | None, places: int) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{places}f}"


def _fmt_percent(value: Decimal | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:.2f}%"


def format_martingale_report(result: MartingaleResult) -> str:
    """Format the step table and summary block of a martingale run.

    Args:
        result: A completed (possibly aborted) martingale run.

    Returns:
        Formatted string suitable for console output.
    """
    params = result.parameters
    summary = result.summary

    lines: list[str] = []
    lines.append("=" * 80)
    lines.append(f"MARTINGALE PROJECTION ({params.direction.value.upper()})")
    lines.append("=" * 80)

    header = " | ".join(f"{name:>{width}s}" for name, width in _STEP_COLUMNS)
    lines.append(header)
    lines.append("-" * len(header))

    for step in result.steps:
        cells = [
            f"{step.step:>4d}",
            f"{step.add_price:>14.6f}",
            f"{step.add_quantity:>12.4f}",
            f"{step.add_margin:>10.2f}",
            f"{step.opening_fee:>10.4f}",
            f"{step.unrealized_pnl:>11.2f}",
            f"{step.avg_price:>14.6f}",
            f"{step.tp_price:>14.6f}",
            f"{step.tp_profit:>11.2f}",
            f"{_fmt_percent(step.percent_to_tp):>8s}",
        ]
        lines.append(" | ".join(cells))

    if result.aborted and result.invalid_add_price is not None:
        lines.append(
            f"Stopped at step {len(result.steps)}: add price "
            f"{_fmt(result.invalid_add_price, 8)} is not valid, no further adds."
        )
    elif result.aborted:
        lines.append(f"Stopped at step {len(result.steps)}: {result.abort_reason}.")

    lines.append("")
    lines.append("SUMMARY")
    lines.append("-" * 40)
    lines.append(f"Final average price:     {summary.final_avg_price:.6f}")
    lines.append(f"Total margin:            {summary.total_margin:.2f}")
    lines.append(f"Final unrealized PnL:    {summary.final_unrealized_pnl:.2f}")

    if summary.has_adds:
        price_diff = _fmt_percent(summary.price_diff_percent)
    elif params.max_adds <= 0:
        price_diff = "N/A (no adds)"
    else:
        price_diff = "0.00% (no adds placed)"
    lines.append(f"Start to last add:       {price_diff}")

    if not summary.has_trades or summary.estimated_liq_price is None:
        liq_text = "N/A (no position)"
        liq_diff_text = "N/A"
    else:
        if summary.estimated_liq_price > 0:
            liq_text = f"{summary.estimated_liq_price:.6f} USDT"
        else:
            liq_text = "<=0.000000 USDT"
        risk = liq_distance_risk(params.direction, summary.liq_diff_percent)
        liq_diff_text = f"{_fmt_percent(summary.liq_diff_percent)} ({risk})"
    lines.append(f"Est. liquidation price:  {liq_text}")
    lines.append(f"Distance to liquidation: {liq_diff_text}")

    funding = summary.total_estimated_funding_cost
    funding_text = f"+{funding:.4f}" if funding > 0 else f"{funding:.4f}"
    lines.append(f"Est. funding cost:       {funding_text} USDT")
    lines.append(f"Final TP profit:         {summary.final_tp_profit:.2f}")
    lines.append("=" * 80)

    return "\n".join(lines)


def format_standard_report(
    result: StandardTradeResult,
    direction: PositionSide,
) -> str:
    """Format the figures of a single trade.

    A long liquidation price floored at 0 is shown as "<=0.000000".
    """
    if result.liquidation_price is None:
        liq_text = "N/A"
    elif result.liquidation_price == 0 and direction == PositionSide.LONG:
        liq_text = "<=0.000000"
    else:
        liq_text = f"{result.liquidation_price:.6f}"

    lines = [
        f"PnL:               {result.pnl:.2f}",
        f"ROE:               {result.roe:.2f}%",
        f"Liquidation price: {liq_text}",
        f"Total fees:        {result.total_fees:.4f}",
        f"Initial margin:    {result.initial_margin:.2f}",
    ]
    return "\n".join(lines)


def export_filename(params: StrategyParameters, extension: str = "png") -> str:
    """Build a descriptive, filesystem-safe file name from run parameters.

    Example: ``Martingale_Long_P100.000000_Diff5.00_TP10.00_N3_L10x_...png``
    """
    parts = [
        "Martingale",
        "Long" if params.direction == PositionSide.LONG else "Short",
        f"P{params.initial_price:.6f}",
        f"Diff{params.add_diff_percent:.2f}",
        f"TP{params.tp_percent:.2f}",
        f"N{params.max_adds}",
        f"L{int(params.leverage)}x",
        f"TF{params.taker_fee:.3f}",
        f"MF{params.maker_fee:.3f}",
        f"MMR{params.maintenance_margin_rate:.1f}",
        f"FR{params.funding_rate:.4f}",
        f"FS{params.funding_settlements}",
        f"AM{params.amount_multiplier:.2f}",
        f"DM{params.diff_multiplier:.2f}",
    ]
    filename = "_".join(parts) + f".{extension}"
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)
