"""
Tests for the sofacheck exception hierarchy.
"""

import pytest

from sofacheck.exceptions import (
    ConfigFileError,
    ConfigurationError,
    FeedError,
    FeedFetchError,
    FeedParseError,
    HostFactsError,
    SofacheckError,
)


class TestSofacheckError:
    def test_basic_message(self):
        error = SofacheckError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details is None

    def test_message_with_details(self):
        error = SofacheckError("Operation failed", details="Connection timeout")
        assert str(error) == "Operation failed - Connection timeout"


@pytest.mark.parametrize(
    "exc_class,parent",
    [
        (ConfigurationError, SofacheckError),
        (ConfigFileError, ConfigurationError),
        (FeedError, SofacheckError),
        (FeedFetchError, FeedError),
        (FeedParseError, FeedError),
        (HostFactsError, SofacheckError),
    ],
)
def test_hierarchy(exc_class, parent):
    assert issubclass(exc_class, parent)


def test_config_file_error_path():
    error = ConfigFileError("Invalid YAML", "/etc/sofacheck.yaml", "line 3")
    assert error.path == "/etc/sofacheck.yaml"
    assert str(error) == "Invalid YAML - line 3"


def test_feed_fetch_error_attributes():
    error = FeedFetchError(
        "Request failed", url="https://example.test", status_code=503
    )
    assert error.url == "https://example.test"
    assert error.status_code == 503


def test_feed_parse_error_detail():
    error = FeedParseError("Expecting value: line 1 column 1 (char 0)")
    assert error.detail == "Expecting value: line 1 column 1 (char 0)"
    assert str(error).endswith("Expecting value: line 1 column 1 (char 0)")
