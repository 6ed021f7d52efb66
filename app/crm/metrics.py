from __future__ import annotations

import time
from dataclasses import dataclass

from flask import Flask, Response, current_app, g, request
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest


@dataclass(frozen=True)
class Metrics:
    registry: CollectorRegistry
    requests_total: Counter
    request_duration: Histogram
    customer_operations: Counter

    def render(self) -> Response:
        return Response(generate_latest(self.registry), content_type=CONTENT_TYPE_LATEST)


def _build_metrics() -> Metrics:
    # One registry per app so test apps don't collide on the global default registry.
    registry = CollectorRegistry()
    return Metrics(
        registry=registry,
        requests_total=Counter(
            "http_requests_total",
            "HTTP requests by method, endpoint and status.",
            ("method", "endpoint", "status"),
            registry=registry,
        ),
        request_duration=Histogram(
            "http_request_duration_seconds",
            "HTTP request latency by method and endpoint.",
            ("method", "endpoint"),
            registry=registry,
        ),
        customer_operations=Counter(
            "customer_operations",
            "Customer resource operations served.",
            ("operation",),
            registry=registry,
        ),
    )


def record_customer_operation(operation: str) -> None:
    m: Metrics | None = current_app.extensions.get("metrics")
    if m is not None:
        m.customer_operations.labels(operation=operation).inc()


def init_metrics(app: Flask) -> Metrics:
    metrics = _build_metrics()
    app.extensions["metrics"] = metrics

    @app.before_request
    def _start_timer():  # type: ignore[no-redef]
        g.request_started = time.perf_counter()

    @app.after_request
    def _observe(response):  # type: ignore[no-redef]
        # Label by route rule, not raw path, to keep label cardinality bounded.
        endpoint = request.url_rule.rule if request.url_rule is not None else "<unmatched>"
        started = getattr(g, "request_started", None)
        if started is not None:
            metrics.request_duration.labels(method=request.method, endpoint=endpoint).observe(
                time.perf_counter() - started
            )
        metrics.requests_total.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        return response

    return metrics
