from __future__ import annotations

import os

# Remote monitoring API (machines, chart data, alerts, metrics, upload, train).
API_BASE_URL: str = os.getenv("API_BASE_URL", "http://127.0.0.1:5000/api").rstrip("/")
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
# Upload triggers server-side training, which can take minutes.
UPLOAD_TIMEOUT_SECONDS: float = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "300"))

ALERT_REFRESH_SECONDS: int = 30
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_PARAMETER: str = "metal_temperature"

# Value-axis bounds used when a series has no numeric readings at all.
FALLBACK_DOMAIN: tuple[int, int] = (0, 100)
DOMAIN_PADDING_RATIO: float = 0.1
# Padding for a flat series, otherwise the axis would have zero height.
FLAT_SERIES_PADDING: float = 20
