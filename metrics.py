from flask import Response, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

api_requests_total = Counter(
    "anime_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"]
)


def init_metrics(app, counter):
    """Count every /api request and expose Prometheus text at /api/metrics."""

    @app.route("/api/metrics")
    def metrics():
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def count_request():
        if request.path.startswith("/api/") and request.method != "OPTIONS":
            counter.increment()

    @app.after_request
    def record_request(response):
        if request.path.startswith("/api/") and request.method != "OPTIONS":
            api_requests_total.labels(
                endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
            ).inc()
        return response

    app.logger.info("Prometheus metrics initialized at /api/metrics")
