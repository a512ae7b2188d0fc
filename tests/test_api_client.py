import pytest
import requests

import api_client
import constants
from api_client import ApiError, NoDataFileError
from thresholds import Parameter


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class _Recorder(list):
    pass


@pytest.fixture()
def api(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(constants, "API_BASE_URL", "http://api.test/api", raising=False)
    recorded = _Recorder()

    def install(method, response):
        def fake(url, **kwargs):
            recorded.append((url, kwargs))
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(requests, method, fake)

    recorded.install = install
    return recorded


def test_check_health(api):
    api.install("get", FakeResponse({"status": "ok"}))
    assert api_client.check_health() is True
    assert api[0][0] == "http://api.test/api/health"
    assert "timeout" in api[0][1]

    api.install("get", FakeResponse({}, status_code=503))
    assert api_client.check_health() is False

    api.install("get", requests.ConnectionError("refused"))
    assert api_client.check_health() is False


def test_fetch_machines_success(api):
    api.install("get", FakeResponse({"machines": ["M1", "M2"]}))
    assert api_client.fetch_machines() == ["M1", "M2"]


def test_fetch_machines_no_data_file(api):
    api.install("get", FakeResponse({"code": "NO_DATA_FILE", "message": "Upload a file"}, 404))
    with pytest.raises(NoDataFileError, match="Upload a file"):
        api_client.fetch_machines()


def test_fetch_machines_other_failures(api):
    api.install("get", FakeResponse(None, 500))
    with pytest.raises(ApiError, match="Failed to fetch machine data."):
        api_client.fetch_machines()

    api.install("get", requests.ConnectionError("refused"))
    with pytest.raises(ApiError):
        api_client.fetch_machines()


def test_fetch_chart_data_builds_readings(api):
    payload = {
        "success": True,
        "data": [
            {"time": "10:00", "metal_temperature": 705, "is_violation": True},
            {"time": "10:01", "metal_temperature": None},
        ],
        "feature_columns": ["metal_temperature", "tilting_angle"],
    }
    api.install("get", FakeResponse(payload))
    chart = api_client.fetch_chart_data("M1", Parameter.METAL_TEMPERATURE)

    url, kwargs = api[0]
    assert url == "http://api.test/api/chart_data"
    assert kwargs["params"] == {"machine": "M1", "parameter": "metal_temperature"}
    assert [r.time for r in chart.readings] == ["10:00", "10:01"]
    assert chart.readings[0].is_violation is True
    assert chart.readings[1].value_for(Parameter.METAL_TEMPERATURE) is None
    assert chart.feature_columns == ["metal_temperature", "tilting_angle"]


def test_fetch_chart_data_failures_clear_chart(api):
    api.install("get", FakeResponse({"success": False}))
    chart = api_client.fetch_chart_data("M1", "metal_temperature")
    assert chart.readings == [] and chart.feature_columns == []

    api.install("get", FakeResponse({}, 500))
    assert api_client.fetch_chart_data("M1", "metal_temperature").readings == []

    api.install("get", requests.Timeout("slow"))
    assert api_client.fetch_chart_data("M1", "metal_temperature").readings == []


def test_fetch_alerts_and_metrics(api):
    api.install("get", FakeResponse({"success": True, "alerts": [{"id": 1}]}))
    assert api_client.fetch_alerts() == [{"id": 1}]

    api.install("get", FakeResponse({"success": True, "metrics": {"M1": {"mae": 0.4}}}))
    assert api_client.fetch_metrics() == {"M1": {"mae": 0.4}}

    api.install("get", requests.ConnectionError("down"))
    assert api_client.fetch_alerts() == []
    assert api_client.fetch_metrics() is None


def test_upload_file(api):
    api.install(
        "post",
        FakeResponse({"success": True, "auto_train_status": {"message": "Model retrained"}}),
    )
    result = api_client.upload_file("data.csv", b"a,b\n1,2\n")
    assert result.success is True
    assert result.message == "Model retrained"
    url, kwargs = api[0]
    assert url == "http://api.test/api/upload"
    assert kwargs["files"]["file"][0] == "data.csv"
    assert kwargs["data"] == {"auto_train": "true"}

    api.install("post", FakeResponse({"success": True}))
    assert api_client.upload_file("data.csv", b"").message == "File processed successfully!"

    api.install("post", FakeResponse({"success": False, "message": "Bad columns"}, 400))
    result = api_client.upload_file("data.csv", b"")
    assert (result.success, result.message) == (False, "Bad columns")

    api.install("post", requests.ConnectionError("refused"))
    result = api_client.upload_file("data.csv", b"")
    assert result.success is False
    assert result.message.startswith("Upload failed: ")


def test_train_model(api):
    api.install("post", FakeResponse({"success": True, "message": "Training started"}))
    result = api_client.train_model()
    assert (result.success, result.message) == (True, "Training started")

    api.install("post", FakeResponse({}))
    assert api_client.train_model().message == "Request completed."

    api.install("post", requests.ConnectionError("refused"))
    assert api_client.train_model().message == "Failed to train model."
