"""JSON API exposing both calculators over HTTP."""

from contract_calc.api.app import create_app

__all__ = ["create_app"]
