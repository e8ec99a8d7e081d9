"""Health, readiness and metrics endpoints for the operator."""

from __future__ import annotations

import json
import threading
from typing import Any

from prometheus_client import make_wsgi_app
from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

_ready = threading.Event()


def set_ready(ready: bool = True) -> None:
    """Mark the operator as ready (or not) to reconcile."""
    if ready:
        _ready.set()
    else:
        _ready.clear()


def is_ready() -> bool:
    return _ready.is_set()


def _json_response(payload: dict[str, Any], status: int) -> Response:
    return Response(json.dumps(payload, separators=(",", ":")), mimetype="application/json", status=status)


def _readiness_response() -> Response:
    if is_ready():
        return _json_response({"status": "ready"}, 200)
    return _json_response({"status": "starting"}, 503)


def health_check_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
    """WSGI application for /healthz and /readyz.

    Liveness is unconditional; readiness reports 503 until the startup
    handler has finished.
    """
    request = Request(environ)
    path = request.path

    if path == "/healthz":
        response = _json_response({"status": "ok"}, 200)
    elif path == "/readyz":
        response = _readiness_response()
    else:
        response = _json_response({"error": "not found"}, 404)

    return response(environ, start_response)


def create_combined_wsgi_app() -> Any:
    """Create a WSGI app that serves health checks and Prometheus metrics.

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
        path = environ.get("PATH_INFO", "")
        if path in ("/healthz", "/readyz"):
            return health_check_app(environ, start_response)
        return metrics_app(environ, start_response)

    return combined_app


def start_metrics_server(port: int) -> Any:
    """Serve the combined app on ``port`` from a daemon thread.

    Args:
        port: TCP port to bind on all interfaces

    Returns:
        The werkzeug server, so callers can shut it down
    """
    server = make_server("", port, create_combined_wsgi_app(), threaded=True)
    thread = threading.Thread(target=server.serve_forever, name="metrics-server", daemon=True)
    thread.start()
    return server
