"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from investsim.core.presets import SCENARIO_PRESETS, get_preset
from investsim.core.simulation import run_simulation
from investsim.schemas.ping import PingResponse
from investsim.schemas.simulation import (
    PresetListResponse,
    PresetSummary,
    SimulationRequest,
)

api_bp = Blueprint("api", __name__)
logger = logging.getLogger(__name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    settings = current_app.config["SETTINGS"]
    response = PingResponse(message="pong", service=settings.APP_NAME, version=settings.VERSION)
    return jsonify(response.model_dump())


@api_bp.get("/presets")
def presets() -> Any:
    """The three named scenario presets with their rate profiles."""
    response = PresetListResponse(
        presets=[PresetSummary.from_preset(preset) for preset in SCENARIO_PRESETS.values()]
    )
    return jsonify(response.model_dump())


@api_bp.get("/presets/<name>")
def preset(name: str) -> Any:
    try:
        found = get_preset(name)
    except KeyError:
        return jsonify({"detail": f"unknown preset '{name}'"}), HTTPStatus.NOT_FOUND
    return jsonify(PresetSummary.from_preset(found).model_dump())


@api_bp.post("/simulate")
def simulate() -> Any:
    """Buy-and-hold vs. deposit projection for one parameter set."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = SimulationRequest.model_validate(raw_payload)
    result = run_simulation(payload.to_simulation_input(current_app.config["SETTINGS"]))
    logger.debug("simulate: %s rows", len(result.chart))
    # model_dump_json writes non-finite floats (e.g. payback_years) as null
    return Response(result.model_dump_json(), status=HTTPStatus.OK, mimetype="application/json")
