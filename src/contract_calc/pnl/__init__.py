"""Fee and funding cost computation."""

from contract_calc.pnl.fee_calculator import FundingCostEstimator, fee

__all__ = ["FundingCostEstimator", "fee"]
