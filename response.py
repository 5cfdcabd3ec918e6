# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Structured JSON envelopes for simulation results.

  Success:
    {
      "success": true,
      "kind": "<game|match|season|match_season|roster>",
      "data": { ... }
    }

  Error:
    {
      "success": false,
      "error_code": "<ERROR_CODE>",
      "error": "Human-readable error description"
    }

Rates (batting average, OBP, SLG, OPS) are emitted as raw floats; display
formatting is left to the consumer.
"""

import json
from typing import Any

from pydantic import ValidationError

from validation import (
    RosterError,
    SimulationError,
    SimulationRangeError,
    format_validation_error,
)


# Pydantic error types raised by Field(ge=..., le=...) bounds.
_RANGE_ERROR_TYPES = {"greater_than", "greater_than_equal", "less_than", "less_than_equal"}


def success_response(kind: str, data: dict[str, Any]) -> str:
    """Build a structured success response.

    Args:
        kind: What was simulated (game, match, season, ...).
        data: The result payload, usually ``result.to_dict()``.

    Returns:
        JSON string with consistent top-level structure.
    """
    return json.dumps({
        "success": True,
        "kind": kind,
        "data": data,
    })


def error_response(error_code: str, message: str, details: list[str] | None = None) -> str:
    """Build a structured error response."""
    payload: dict[str, Any] = {
        "success": False,
        "error_code": error_code,
        "error": message,
    }
    if details:
        payload["details"] = details
    return json.dumps(payload)


def error_code_for(exc: Exception) -> str:
    """Map an engine exception to a machine-readable error code."""
    if isinstance(exc, SimulationRangeError):
        return "OUT_OF_RANGE"
    if isinstance(exc, ValidationError) and all(
        e["type"] in _RANGE_ERROR_TYPES for e in exc.errors()
    ):
        return "OUT_OF_RANGE"
    if isinstance(exc, RosterError):
        return "INVALID_ROSTER"
    if isinstance(exc, (SimulationError, ValidationError)):
        return "INVALID_INPUT"
    return "SIMULATION_FAILED"


def exception_response(exc: Exception) -> str:
    details = getattr(exc, "details", None)
    return error_response(error_code_for(exc), format_validation_error(exc), details)
