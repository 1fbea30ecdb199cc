"""Azure Functions entry point: farm / forest land-cover classifier.

Registers the HTTP routes using the Python v2 programming model.

All business logic lives in the farm_classifier package. This file is
purely the wiring layer between Azure Functions bindings and application
code: configuration and the Earth Engine session are set up once per
worker, then shared read-only by every request.
"""

from __future__ import annotations

import json
import logging

import azure.functions as func

from farm_classifier.core.config import ClassifierConfig
from farm_classifier.core.ingress import (
    handle_check_farm,
    health_status,
    resolve_correlation_id,
)
from farm_classifier.providers.factory import get_client
from farm_classifier.providers.session import EarthEngineSession

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("farm_classifier.function_app")

# ---------------------------------------------------------------------------
# Worker start-up: configuration, session, client
# ---------------------------------------------------------------------------

CONFIG = ClassifierConfig.from_env()

SESSION = EarthEngineSession()
SESSION.initialize(
    key_json=CONFIG.gee_key,
    key_file=CONFIG.gee_key_file,
    project=CONFIG.gee_project,
)

CLIENT = get_client(CONFIG.reduction_client, CONFIG.to_reduction_config(), SESSION)

logger.info(
    "Worker configured | client=%s | session=%s | qualifying=%s | scale=%s | max_pixels=%g",
    CLIENT.name,
    SESSION.state.value,
    ",".join(CONFIG.qualifying_classes),
    CONFIG.scale_m,
    CONFIG.max_pixels,
)


def _json_response(status: int, body: dict[str, object]) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status,
        mimetype="application/json",
    )


# ---------------------------------------------------------------------------
# HTTP: Classify a polygon
# ---------------------------------------------------------------------------


@app.function_name("check_farm")
@app.route(route="check-farm", methods=["POST"])
async def check_farm(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Classify the land cover inside a polygon.

    Body: ``{"coordinates": [[x, y], ...]}`` with at least three pairs.

    Returns:
        200 with the classification, 400 for invalid coordinates,
        500 for processing errors, 503 while the session is not ready.
    """
    correlation_id = resolve_correlation_id(req.headers, context.invocation_id)
    status, body = await handle_check_farm(
        req.get_body(),
        CLIENT,
        policy=CONFIG.policy,
        correlation_id=correlation_id,
    )
    return _json_response(status, body)


# ---------------------------------------------------------------------------
# HTTP: Health (session readiness)
# ---------------------------------------------------------------------------


@app.function_name("health")
@app.route(route="health", methods=["GET"])
def health(req: func.HttpRequest) -> func.HttpResponse:  # noqa: ARG001
    """Report whether the Earth Engine session is ready to serve traffic."""
    status, body = health_status(SESSION)
    return _json_response(status, body)
