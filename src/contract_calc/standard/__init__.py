"""Single entry/exit contract calculator."""

from contract_calc.standard.calculator import calculate_standard_trade, standard_liquidation_price

__all__ = ["calculate_standard_trade", "standard_liquidation_price"]
