from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

import constants
from annotator import Reading
from thresholds import Parameter

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """The monitoring API could not serve a request."""


class NoDataFileError(ApiError):
    """The server is reachable but has no data file loaded yet."""


@dataclass
class ChartData:
    readings: List[Reading] = field(default_factory=list)
    feature_columns: List[str] = field(default_factory=list)


@dataclass
class UploadResult:
    success: bool
    message: str


def _url(path: str) -> str:
    return f"{constants.API_BASE_URL}/{path.lstrip('/')}"


def _json_or_empty(resp: requests.Response) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def check_health() -> bool:
    try:
        resp = requests.get(_url("health"), timeout=constants.REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.warning("Health check failed: %s", e)
        return False
    if not resp.ok:
        logger.warning("Health check returned HTTP %s", resp.status_code)
    return resp.ok


def fetch_machines() -> List[str]:
    try:
        resp = requests.get(_url("machines"), timeout=constants.REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise ApiError(f"API is not reachable: {e}") from e
    data = _json_or_empty(resp)
    if not resp.ok:
        if data.get("code") == "NO_DATA_FILE":
            raise NoDataFileError(data.get("message") or "No data file found on server.")
        raise ApiError(data.get("message") or "Failed to fetch machine data.")
    return [str(m) for m in data.get("machines") or []]


def fetch_chart_data(machine: str, parameter: Parameter | str) -> ChartData:
    """
    Readings for one machine, queried for a single parameter. The server
    computes each reading's violation flag for that parameter. Any failure
    yields an empty ChartData so the chart is cleared rather than stale.
    """
    param = parameter.value if isinstance(parameter, Parameter) else str(parameter)
    try:
        resp = requests.get(
            _url("chart_data"),
            params={"machine": machine, "parameter": param},
            timeout=constants.REQUEST_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("Fetch chart data failed for %s/%s: %s", machine, param, e)
        return ChartData()
    data = _json_or_empty(resp)
    if not data.get("success"):
        logger.warning("Chart data request unsuccessful for %s/%s", machine, param)
        return ChartData()
    readings = [Reading.from_record(r) for r in data.get("data") or [] if isinstance(r, dict)]
    return ChartData(readings=readings, feature_columns=list(data.get("feature_columns") or []))


def fetch_alerts() -> List[Dict[str, Any]]:
    try:
        resp = requests.get(_url("alerts"), timeout=constants.REQUEST_TIMEOUT_SECONDS)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("Fetch alerts failed: %s", e)
        return []
    data = _json_or_empty(resp)
    return list(data.get("alerts") or []) if data.get("success") else []


def fetch_metrics() -> Optional[Dict[str, Any]]:
    try:
        resp = requests.get(_url("metrics"), timeout=constants.REQUEST_TIMEOUT_SECONDS)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("Fetch metrics failed: %s", e)
        return None
    data = _json_or_empty(resp)
    return data.get("metrics") if data.get("success") else None


def upload_file(filename: str, content: bytes, auto_train: bool = True) -> UploadResult:
    try:
        resp = requests.post(
            _url("upload"),
            files={"file": (filename, content)},
            data={"auto_train": "true" if auto_train else "false"},
            timeout=constants.UPLOAD_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("Upload of %s failed: %s", filename, e)
        return UploadResult(False, f"Upload failed: {e}")
    data = _json_or_empty(resp)
    if resp.ok and data.get("success"):
        status = data.get("auto_train_status") or {}
        message = status.get("message") if isinstance(status, dict) else None
        logger.info("Uploaded %s", filename)
        return UploadResult(True, message or "File processed successfully!")
    logger.warning("Upload of %s rejected: HTTP %s", filename, resp.status_code)
    return UploadResult(False, data.get("message") or "Upload failed")


def train_model() -> UploadResult:
    try:
        resp = requests.post(_url("train"), timeout=constants.UPLOAD_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.error("Train request failed: %s", e)
        return UploadResult(False, "Failed to train model.")
    data = _json_or_empty(resp)
    return UploadResult(bool(data.get("success")), data.get("message") or "Request completed.")
