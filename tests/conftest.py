from pathlib import Path

import platformdirs
import pytest
import requests
from requests.structures import CaseInsensitiveDict

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.get."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """Register the markers used to group the test suite."""
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line(
        "markers", "integration: tests spanning fetch, resolution and download"
    )


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs and the relevant environment variables at a temporary tree.

    Also blocks every requests entry point so an unmocked HTTP call fails loudly
    instead of reaching the network.
    """
    base = tmp_path_factory.mktemp("relfetch")
    config_dir = base / "config"
    log_dir = base / "log"
    for path in (config_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )

    for name in ("get", "post", "put", "delete", "head", "patch", "options"):
        monkeypatch.setattr(requests, name, _block_network)
    monkeypatch.setattr(requests.Session, "request", _block_network)


@pytest.fixture
def make_response():
    """
    Provide a factory for real `requests.Response` objects with an in-memory body.

    The factory accepts `status`, `body` (bytes or str), `json_data` (serialized
    into the body) and `headers`, and returns a response whose `json()`, `text`,
    `iter_content()` and `raise_for_status()` behave like a live one.
    """
    import json

    def _create_response(status=200, body=b"", json_data=None, headers=None, url=""):
        response = requests.Response()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response.url = url or "https://example.invalid/"
        response.encoding = "utf-8"
        if json_data is not None:
            body = json.dumps(json_data)
        response._content = body.encode("utf-8") if isinstance(body, str) else body
        response._content_consumed = True
        response.headers = CaseInsensitiveDict(headers or {})
        return response

    return _create_response


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Return a path for a YAML config file inside the test's temp directory."""
    return tmp_path / "relfetch.yaml"
