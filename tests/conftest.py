import json
from pathlib import Path
from unittest.mock import MagicMock

import platformdirs
import pytest
import requests

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs, the default cache directory and the config file at temp paths.

    Also clears the SOFACHECK_* environment variables so a developer's own settings
    cannot leak into test results.
    """
    base = tmp_path_factory.mktemp("sofacheck")
    cache_dir = base / "cache"
    config_dir = base / "config"
    for path in (cache_dir, config_dir):
        path.mkdir(parents=True, exist_ok=True)

    for var in ("SOFACHECK_FEED_URL", "SOFACHECK_CACHE_DIR", "SOFACHECK_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setattr(
        platformdirs, "user_cache_dir", lambda *_args, **_kwargs: str(cache_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )

    import sofacheck.config as config_module

    monkeypatch.setattr(config_module, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        config_module, "CONFIG_FILE", str(config_dir / "sofacheck.yaml")
    )
    monkeypatch.setattr(config_module, "get_default_cache_dir", lambda: cache_dir)


def pytest_runtest_setup():
    """Replace requests entry points with a blocker so no test reaches the network."""
    requests.get = _block_network
    requests.post = _block_network
    requests.head = _block_network
    requests.Session.request = _block_network


def _make_feed(latest="15.0", models=None) -> bytes:
    """Build a minimal SOFA feed document."""
    if models is None:
        models = {"Mac14,7": {"SupportedOS": ["14.5"]}}
    document = {
        "UpdateHash": "abc123",
        "OSVersions": [
            {"OSVersion": latest, "Latest": {"ProductVersion": latest}},
            {"OSVersion": "14.5", "Latest": {"ProductVersion": "14.5"}},
        ],
        "Models": models,
    }
    return json.dumps(document).encode("utf-8")


def _make_response(status_code=200, content=b"", etag=None):
    """Build a MagicMock that looks enough like a requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.headers = {"ETag": etag} if etag else {}
    return response


@pytest.fixture
def feed_bytes():
    return _make_feed()


@pytest.fixture
def make_feed():
    return _make_feed


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "sofa"


@pytest.fixture
def feed_cache(cache_dir):
    from sofacheck.cache import FeedCache

    return FeedCache(cache_dir)


@pytest.fixture
def feed_config(cache_dir):
    from sofacheck.config import FeedConfig

    return FeedConfig(cache_dir=cache_dir, timeout=5)


@pytest.fixture
def session():
    """A stand-in requests.Session whose get() tests configure per case."""
    return MagicMock(spec=requests.Session)
