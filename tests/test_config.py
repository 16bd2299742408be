"""Tests for run configuration resolution."""

from datetime import timedelta
from pathlib import Path

import pytest

from ping_latency_reporter.config import ConfigurationError, resolve_run_config


def test_default_run_is_thirty_seconds_without_log():
    """No duration selector: 30s run, 1s poll, result file forced off."""
    config = resolve_run_config(["LAB-EX-01"], no_log=False)
    assert config.duration == timedelta(seconds=30)
    assert config.poll_interval == timedelta(seconds=1)
    assert config.write_log is False


def test_minutes_poll_every_five_seconds():
    config = resolve_run_config(["LAB-EX-01"], minutes=5)
    assert config.duration == timedelta(minutes=5)
    assert config.poll_interval == timedelta(seconds=5)
    assert config.write_log is True


def test_hours_poll_every_minute():
    config = resolve_run_config(["LAB-EX-01"], hours=2)
    assert config.duration == timedelta(hours=2)
    assert config.poll_interval == timedelta(seconds=60)
    assert config.write_log is True


@pytest.mark.parametrize("selector", [{"minutes": 5}, {"hours": 1}])
def test_no_log_suppresses_result_file(selector):
    config = resolve_run_config(["LAB-EX-01"], no_log=True, **selector)
    assert config.write_log is False


def test_default_thresholds():
    config = resolve_run_config(["LAB-EX-01"])
    assert config.warn_threshold_ms == 10
    assert config.fail_threshold_ms == 100


def test_minutes_and_hours_are_mutually_exclusive():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve_run_config(["LAB-EX-01"], minutes=5, hours=1)
    assert "mutually exclusive" in str(exc_info.value)


def test_empty_targets_rejected():
    with pytest.raises(ConfigurationError):
        resolve_run_config([])


@pytest.mark.parametrize("warn, fail", [(-1, 100), (10, -5)])
def test_negative_thresholds_rejected(warn, fail):
    with pytest.raises(ConfigurationError):
        resolve_run_config(["LAB-EX-01"], warn_threshold_ms=warn, fail_threshold_ms=fail)


@pytest.mark.parametrize("selector", [{"minutes": 0}, {"hours": -1}])
def test_non_positive_duration_rejected(selector):
    with pytest.raises(ConfigurationError):
        resolve_run_config(["LAB-EX-01"], **selector)


def test_config_is_immutable_and_keeps_order(tmp_path):
    config = resolve_run_config(
        ["b-host", "a-host"], output_dir=str(tmp_path), source_host="WS-01"
    )
    assert config.targets == ("b-host", "a-host")
    assert config.output_dir == Path(tmp_path)
    assert config.source_host == "WS-01"
    with pytest.raises(AttributeError):
        config.write_log = True


def test_source_host_defaults_to_local_hostname(monkeypatch):
    monkeypatch.setattr("socket.gethostname", lambda: "LOCAL-PC")
    assert resolve_run_config(["LAB-EX-01"]).source_host == "LOCAL-PC"
