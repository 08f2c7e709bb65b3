"""
Prometheus metrics for the terminal.

Exposes /metrics with request latency and sales counters (settled sales per
payment method, liters sold, blocked settlement attempts). Keep the endpoint
on the internal network; it is not authenticated.
"""
from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY
import time
import os

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share samples through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    _metric_registry = None
else:
    registry = REGISTRY
    _metric_registry = REGISTRY

# Requests
http_requests_total = Counter(
    'kegpos_http_requests_total', 'HTTP requests by endpoint and status',
    ['method', 'endpoint', 'http_status'], registry=_metric_registry
)
http_request_duration_seconds = Histogram(
    'kegpos_http_request_duration_seconds', 'HTTP request latency in seconds',
    ['method', 'endpoint'], registry=_metric_registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)
http_requests_in_flight = Gauge(
    'kegpos_http_requests_in_flight', 'HTTP requests being processed',
    registry=_metric_registry
)

# Sales
sales_settled_total = Counter(
    'kegpos_sales_settled_total', 'Sales settled at the terminal',
    ['payment_method'], registry=_metric_registry
)
liters_sold_total = Counter(
    'kegpos_liters_sold_total', 'Liters taken out of the pool by settled sales',
    registry=_metric_registry
)
settlements_blocked_total = Counter(
    'kegpos_settlements_blocked_total', 'Settlement attempts rejected by validation',
    ['state'], registry=_metric_registry
)


def record_settlement_metrics(result) -> None:
    """Count a settled sale and the liters it consumed."""
    sales_settled_total.labels(payment_method=result.payment_method).inc()
    liters_sold_total.inc(float(result.liters_consumed))


def setup_metrics_instrumentation(app):
    """Time every request except the scrape itself. Called from the app factory."""

    @app.before_request
    def _start_request_timer():
        if request.endpoint == 'metrics.metrics':
            return
        g._request_started = time.perf_counter()
        http_requests_in_flight.inc()

    @app.after_request
    def _observe_request(response):
        started = g.pop('_request_started', None)
        if started is None:
            return response

        endpoint = request.endpoint or 'unknown'
        try:
            http_request_duration_seconds.labels(request.method, endpoint).observe(time.perf_counter() - started)
            http_requests_total.labels(request.method, endpoint, response.status_code).inc()
        except Exception as e:
            app.logger.warning(f"Failed to record metrics: {e}")
        finally:
            http_requests_in_flight.dec()
        return response


@metrics_bp.route('/metrics')
def metrics():
    """Prometheus text exposition."""
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
