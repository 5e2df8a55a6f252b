# xiuchart/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter
from typing import Final

from flask import Flask, Response, g, jsonify, request
from flask_cors import CORS
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Gauge, Histogram, generate_latest
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from xiuchart.api.routes import api as api_bp
from xiuchart.core.errors import ChartError
from xiuchart.core.validators import ValidationError
from xiuchart.utils.config import load_config
from xiuchart.version import VERSION

# ───────────────────────── Prometheus ─────────────────────────
MET_REQUESTS: Final = Counter("xiuchart_api_requests_total", "API requests", ["route"])
MET_ERRORS: Final = Counter("xiuchart_api_errors_total", "API error responses", ["code"])
REQ_LATENCY: Final = Histogram("xiuchart_request_seconds", "API request latency", ["route"])
GAUGE_APP_UP: Final = Gauge("xiuchart_app_up", "1 if app is running")

SEEDED_ROUTES: Final = (
    "/api/health", "/api/config", "/api/date", "/api/julian-day",
    "/api/mansions", "/api/solar-terms", "/api/divisions",
    "/api/bodies", "/api/descriptor", "/api/project", "/api/chart",
)

# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask, level: str) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
    else:
        logging.basicConfig(level=level)

def _register_errors(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        app.logger.warning("HTTP %s at %s %s: %s", e.code, request.method, request.path, e.description)
        MET_ERRORS.labels(code="http_error").inc()
        return jsonify(
            ok=False,
            error="http_error",
            code=e.code,
            name=e.name,
            message=e.description,
            path=request.path,
        ), e.code

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        MET_ERRORS.labels(code="validation_error").inc()
        return jsonify(ok=False, error="validation_error", details=e.errors()), 400

    @app.errorhandler(ChartError)
    def _chart(e: ChartError):
        app.logger.info("%s at %s %s: %s", e.code, request.method, request.path, e.message)
        MET_ERRORS.labels(code=e.code).inc()
        return jsonify(ok=False, error=e.code, message=e.message, path=request.path), 422

    @app.errorhandler(Exception)
    def _any(e: Exception):
        tb = traceback.format_exc()
        app.logger.error("UNHANDLED %s at %s %s\n%s", type(e).__name__, request.method, request.path, tb)
        MET_ERRORS.labels(code="internal_error").inc()
        return jsonify(
            ok=False,
            error="internal_error",
            type=type(e).__name__,
            message=str(e),
            path=request.path,
        ), 500

def _metrics_auth_ok() -> bool:
    auth = request.authorization
    user = os.getenv("METRICS_USER", "")
    pw = os.getenv("METRICS_PASS", "")
    return bool(
        auth and auth.type == "basic" and auth.username == user and auth.password == pw and user and pw
    )

# ───────────────────────── app factory ─────────────────────────
def create_app(config_path: str | None = None) -> Flask:
    app = Flask(__name__)
    app.json.ensure_ascii = False  # mansion names stay readable in responses
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    cfg = load_config(config_path)
    app.cfg = cfg  # type: ignore[attr-defined]
    _configure_logging(app, cfg.log_level)

    for route in SEEDED_ROUTES:
        MET_REQUESTS.labels(route=route).inc(0)
        REQ_LATENCY.labels(route=route).observe(0.0)
    GAUGE_APP_UP.set(1.0)

    def _route_label() -> str:
        return request.url_rule.rule if request.url_rule is not None else "unmatched"

    @app.before_request
    def _before():
        if (request.path or "").startswith("/api/"):
            MET_REQUESTS.labels(route=_route_label()).inc()
            g.t0 = perf_counter()

    @app.after_request
    def _after(resp):
        t0 = g.pop("t0", None)
        if t0 is not None:
            REQ_LATENCY.labels(route=_route_label()).observe(perf_counter() - t0)
        return resp

    _register_errors(app)
    app.register_blueprint(api_bp)

    @app.get("/")
    def root():
        return jsonify(ok=True, service="xiuchart", version=VERSION, health="/api/health"), 200

    # /metrics (Basic Auth)
    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)

    # CORS for browser UIs
    CORS(
        app,
        resources={r"/api/*": {"origins": os.environ.get("CORS_ALLOW_ORIGIN") or cfg.cors.origins}},
        supports_credentials=False,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=600,
    )

    app.logger.info(
        "xiuchart %s initialized; default_year=%s cache_size=%s",
        VERSION, cfg.default_year, cfg.cache_size,
    )
    return app

# ───────────────────────── app instance ─────────────────────────
app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
