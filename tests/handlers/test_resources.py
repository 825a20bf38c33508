"""Tests for stream teardown helpers."""

import logging
from unittest.mock import Mock

from filewatch.handlers.resources import close_all, close_and_ignore


class TestCloseAll:
    """Tests for closing layered streams."""

    def test_closes_in_reverse_acquisition_order(self) -> None:
        """Test that the newest resource is closed first."""
        order = []
        resources = []
        for name in ["file", "gzip", "buffered", "decoder"]:
            resource = Mock()
            resource.close.side_effect = lambda name=name: order.append(name)
            resources.append(resource)

        close_all(resources)

        assert order == ["decoder", "buffered", "gzip", "file"]

    def test_all_closes_attempted_when_first_raises(self) -> None:
        """Test that a failing close does not skip the remaining ones."""
        resources = [Mock() for _ in range(4)]
        resources[-1].close.side_effect = OSError("decoder close failed")

        close_all(resources)

        for resource in resources:
            resource.close.assert_called_once_with()

    def test_every_close_raising_is_swallowed(self) -> None:
        resources = [Mock() for _ in range(4)]
        for resource in resources:
            resource.close.side_effect = RuntimeError("boom")

        close_all(resources)

        assert all(r.close.call_count == 1 for r in resources)

    def test_empty_list(self) -> None:
        close_all([])

    def test_accepts_generator(self) -> None:
        resources = [Mock(), Mock()]
        close_all(r for r in resources)
        assert all(r.close.called for r in resources)


class TestCloseAndIgnore:
    """Tests for closing a single resource."""

    def test_logs_warning_naming_resource_class(self, caplog) -> None:
        """Test that the warning identifies the kind of resource that failed."""

        class GzipStream:
            def close(self) -> None:
                raise OSError("disk gone")

        caplog.set_level(logging.WARNING, logger="filewatch")

        close_and_ignore(GzipStream())

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert "GzipStream" in record.getMessage()
        assert record.resource == "GzipStream"
        assert record.exception == "OSError"
        assert record.error_message == "disk gone"

    def test_successful_close_logs_nothing(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="filewatch")
        resource = Mock()

        close_and_ignore(resource)

        resource.close.assert_called_once_with()
        assert caplog.records == []
