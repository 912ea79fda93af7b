"""Leveraged contract calculators: martingale averaging simulator and single-trade PnL."""

__version__ = "0.1.0"
