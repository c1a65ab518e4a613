"""
End-to-end tests for the single-row report: fetch, cache and evaluate together.
"""

import requests

from sofacheck.evaluator import Compatibility, HostFacts
from sofacheck.report import generate, parse_error_row, unavailable_row


class TestScenarios:
    def test_outdated_hardware_fails(
        self, feed_config, feed_cache, session, make_response, feed_bytes
    ):
        session.get.return_value = make_response(200, feed_bytes)

        result = generate(HostFacts("14.5", "Mac14,7"), feed_config, feed_cache, session)

        assert result.latest_macos == "15.0"
        assert result.latest_compatible_macos == "14.5"
        assert result.is_compatible is Compatibility.INCOMPATIBLE
        assert result.status == "Fail"

    def test_unknown_model_is_unsupported_hardware(
        self, feed_config, feed_cache, session, make_response, feed_bytes
    ):
        session.get.return_value = make_response(200, feed_bytes)

        result = generate(HostFacts("14.5", "Mac99,9"), feed_config, feed_cache, session)

        assert result.latest_compatible_macos == "Unsupported"
        assert result.status == "Unsupported Hardware"
        assert result.is_compatible is Compatibility.INCOMPATIBLE

    def test_network_failure_without_cache(self, feed_config, feed_cache, session):
        session.get.side_effect = requests.exceptions.ConnectionError("offline")

        result = generate(HostFacts("14.5", "Mac14,7"), feed_config, feed_cache, session)

        assert result.status == "Could not obtain data"
        assert result.is_compatible is Compatibility.UNKNOWN
        assert result.latest_macos == "Unknown"
        assert result.latest_compatible_macos == "Unknown"
        assert result.system_os_major == "14"

    def test_not_modified_uses_cached_feed(
        self, feed_config, feed_cache, session, make_response, make_feed
    ):
        feed_cache.ensure_directory()
        feed_cache.write_body(
            make_feed(latest="14.5", models={"Mac14,7": {"SupportedOS": ["14.5"]}})
        )
        feed_cache.write_etag('"v1"')
        session.get.return_value = make_response(304)

        result = generate(HostFacts("14.5", "Mac14,7"), feed_config, feed_cache, session)

        assert result.status == "Pass"
        assert result.is_compatible is Compatibility.COMPATIBLE

    def test_malformed_feed(self, feed_config, feed_cache, session, make_response):
        session.get.return_value = make_response(200, b"{this is not json")

        result = generate(HostFacts("14.5", "Mac14,7"), feed_config, feed_cache, session)

        assert result.status.startswith("Error parsing data: ")
        assert len(result.status) > len("Error parsing data: ")
        assert result.latest_macos == "Error"
        assert result.latest_compatible_macos == "Error"
        assert result.is_compatible is Compatibility.UNKNOWN

    def test_deeply_nested_feed_is_a_parse_error(
        self, feed_config, feed_cache, session, make_response
    ):
        session.get.return_value = make_response(200, b"[" * 200000)

        result = generate(HostFacts("14.5", "Mac14,7"), feed_config, feed_cache, session)

        assert result.status.startswith("Error parsing data: ")
        assert result.is_compatible is Compatibility.UNKNOWN


class TestFallbacks:
    def test_stale_cache_used_when_server_errors(
        self, feed_config, feed_cache, session, make_response, feed_bytes
    ):
        feed_cache.ensure_directory()
        feed_cache.write_body(feed_bytes)
        session.get.return_value = make_response(502)

        result = generate(HostFacts("14.5", "Mac14,7"), feed_config, feed_cache, session)

        assert result.status == "Fail"
        assert result.latest_macos == "15.0"

    def test_repeated_runs_are_identical(
        self, feed_config, feed_cache, session, make_response, feed_bytes
    ):
        def server(url, headers, timeout):
            if headers.get("If-None-Match") == '"v1"':
                return make_response(304)
            return make_response(200, feed_bytes, etag='"v1"')

        session.get.side_effect = server
        host = HostFacts("14.5", "Mac14,7")

        first = generate(host, feed_config, feed_cache, session)
        second = generate(host, feed_config, feed_cache, session)

        assert first == second
        assert session.get.call_args.kwargs["headers"]["If-None-Match"] == '"v1"'

    def test_error_rows_keep_supplied_model(self, feed_config, feed_cache, session):
        session.get.side_effect = requests.exceptions.ConnectionError("offline")

        result = generate(
            HostFacts("15.1", "VirtualMac2,1"), feed_config, feed_cache, session
        )

        assert result.model_identifier == "VirtualMac2,1"


class TestErrorRows:
    def test_unavailable_row(self):
        row = unavailable_row(HostFacts("26", "Mac16,1")).as_row()

        assert row == {
            "system_version": "26",
            "system_os_major": "26",
            "model_identifier": "Mac16,1",
            "latest_macos": "Unknown",
            "latest_compatible_macos": "Unknown",
            "is_compatible": -1,
            "status": "Could not obtain data",
        }

    def test_parse_error_row(self):
        result = parse_error_row(HostFacts("14.5", "Mac14,7"), "bad token at 3")

        assert result.status == "Error parsing data: bad token at 3"
        assert result.is_compatible.to_int() == -1
