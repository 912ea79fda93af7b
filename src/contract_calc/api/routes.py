"""JSON endpoints for the martingale simulator and the standard trade calculator.

Validation failures are returned as a ``{"errors": {field: message}}``
body with status 422; an aborted martingale run is a normal 200 result
with ``aborted: true``.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from contract_calc.config import AppSettings
from contract_calc.exceptions import ValidationError
from contract_calc.martingale import liq_distance_risk, run_martingale
from contract_calc.report import (
    export_filename,
    format_martingale_report,
    format_standard_report,
)
from contract_calc.standard import calculate_standard_trade
from contract_calc.validation import parse_standard_inputs, parse_strategy_inputs

log = structlog.get_logger(__name__)

router = APIRouter()


def _settings(request: Request) -> AppSettings:
    return request.app.state.settings


async def _read_body(request: Request) -> dict[str, Any] | None:
    """Return the JSON object body, or None if it is not a JSON object."""
    try:
        body = await request.json()
    except Exception:
        return None
    if not isinstance(body, dict):
        return None
    return body


def _invalid_json() -> JSONResponse:
    return JSONResponse(content={"error": "Invalid JSON body"}, status_code=400)


def _validation_errors(e: ValidationError) -> JSONResponse:
    return JSONResponse(content={"errors": e.errors}, status_code=422)


@router.get("/defaults")
async def get_defaults(request: Request) -> JSONResponse:
    """Default fee and margin settings used when a request omits them."""
    settings = _settings(request)
    return JSONResponse(content={
        "taker_fee": str(settings.fees.taker_fee),
        "maker_fee": str(settings.fees.maker_fee),
        "maintenance_margin_rate": str(settings.margin.maintenance_margin_rate),
    })


@router.post("/martingale")
async def martingale_endpoint(request: Request) -> JSONResponse:
    """Run a martingale projection.

    Expects a JSON object of raw strategy inputs (see parse_strategy_inputs).

    Returns:
        JSON with parameters, steps, final_state, summary, abort info,
        liquidation risk classification and a suggested export filename.
    """
    body = await _read_body(request)
    if body is None:
        return _invalid_json()

    settings = _settings(request)
    try:
        params = parse_strategy_inputs(body, settings.fees, settings.margin)
    except ValidationError as e:
        return _validation_errors(e)

    result = run_martingale(params)
    log.info(
        "martingale_request_complete",
        direction=params.direction.value,
        steps=len(result.steps),
        aborted=result.aborted,
    )

    content = result.to_dict()
    content["liq_risk"] = liq_distance_risk(params.direction, result.summary.liq_diff_percent)
    content["export_filename"] = export_filename(params)
    return JSONResponse(content=content)


@router.post("/martingale/report")
async def martingale_report_endpoint(request: Request) -> Response:
    """Run a martingale projection and return it as a text report."""
    body = await _read_body(request)
    if body is None:
        return _invalid_json()

    settings = _settings(request)
    try:
        params = parse_strategy_inputs(body, settings.fees, settings.margin)
    except ValidationError as e:
        return _validation_errors(e)

    return PlainTextResponse(format_martingale_report(run_martingale(params)))


@router.post("/standard")
async def standard_endpoint(request: Request) -> JSONResponse:
    """Compute PnL, ROE, fees and liquidation price for one trade."""
    body = await _read_body(request)
    if body is None:
        return _invalid_json()

    settings = _settings(request)
    try:
        params = parse_standard_inputs(body, settings.fees, settings.margin)
    except ValidationError as e:
        return _validation_errors(e)

    result = calculate_standard_trade(params)
    return JSONResponse(content={
        "parameters": params.to_dict(),
        "result": result.to_dict(),
    })


@router.post("/standard/report")
async def standard_report_endpoint(request: Request) -> Response:
    """Compute a single trade and return its figures as a text report."""
    body = await _read_body(request)
    if body is None:
        return _invalid_json()

    settings = _settings(request)
    try:
        params = parse_standard_inputs(body, settings.fees, settings.margin)
    except ValidationError as e:
        return _validation_errors(e)

    result = calculate_standard_trade(params)
    return PlainTextResponse(format_standard_report(result, params.direction))
