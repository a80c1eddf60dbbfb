"""Health check endpoints for the operator."""

import threading
from typing import Any

from werkzeug.serving import make_server
from werkzeug.wrappers import Response

# Flipped once the controller workers are running
_ready = threading.Event()


def set_ready(ready: bool) -> None:
    """Mark the operator as ready or not ready to serve reconciliations."""
    if ready:
        _ready.set()
    else:
        _ready.clear()


def is_ready() -> bool:
    """Return whether the controller workers are running."""
    return _ready.is_set()


def create_combined_wsgi_app() -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    Returns:
        Combined WSGI application
    """
    from prometheus_client import make_wsgi_app

    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
        """WSGI app that routes /healthz and /readyz, delegates /metrics to prometheus."""
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        elif path == "/readyz":
            if is_ready():
                response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            else:
                response = Response('{"status":"not ready"}', mimetype="application/json", status=503)
            return response(environ, start_response)
        else:
            return metrics_app(environ, start_response)

    return combined_app


def start_health_server(port: int) -> threading.Thread:
    """Serve metrics and health checks on ``port`` from a daemon thread.

    Args:
        port: Port number for the combined server

    Returns:
        The thread running the server
    """
    server = make_server("", port, create_combined_wsgi_app(), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return thread
