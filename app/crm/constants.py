"""
Central constants for the customer service.
"""
from __future__ import annotations

APP_VERSION = "0.1.0"

# Management endpoint groups that can be toggled via MANAGEMENT_ENDPOINTS.
# /health and /healthz are always on (load balancer probes).
MANAGEMENT_ENDPOINTS = ("health", "info", "metrics", "docs")
DEFAULT_MANAGEMENT_ENDPOINTS = MANAGEMENT_ENDPOINTS

REQUEST_ID_HEADER = "X-Request-ID"

# Signed 64-bit range for customerId / orderId.
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1
