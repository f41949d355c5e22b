"""Tests for configuration helpers."""

from pathlib import Path

import pytest

from faultwatch.config import (
    DEFAULT_LOG_PATH,
    DEFAULT_MAX_WORKERS,
    DEFAULT_SWEEP_INTERVAL,
    DETECTION_RECLAMATION,
    DETECTION_SWEEP,
    PROJECT_ROOT,
    find_project_root,
    resolve_detection_mode,
    resolve_log_path,
    resolve_max_workers,
    resolve_sweep_interval,
)


class TestResolveLogPath:
    def test_default(self):
        assert resolve_log_path(None) == DEFAULT_LOG_PATH

    def test_relative_to_project_root(self):
        assert resolve_log_path("logs/x.log") == PROJECT_ROOT / "logs/x.log"

    def test_absolute(self, tmp_path):
        target = tmp_path / "x.log"
        assert resolve_log_path(str(target)) == Path(target)


class TestResolveNumbers:
    def test_sweep_interval_default(self):
        assert resolve_sweep_interval("") == DEFAULT_SWEEP_INTERVAL

    def test_sweep_interval_parsed(self):
        assert resolve_sweep_interval("0.25") == 0.25

    @pytest.mark.parametrize("value", ["0", "-2"])
    def test_sweep_interval_positive(self, value):
        with pytest.raises(ValueError):
            resolve_sweep_interval(value)

    def test_max_workers(self):
        assert resolve_max_workers(None) == DEFAULT_MAX_WORKERS
        assert resolve_max_workers("8") == 8

    def test_max_workers_at_least_one(self):
        with pytest.raises(ValueError):
            resolve_max_workers("0")


class TestResolveDetectionMode:
    def test_default(self):
        assert resolve_detection_mode(None) == DETECTION_SWEEP

    def test_case_insensitive(self):
        assert resolve_detection_mode(" Reclamation ") == DETECTION_RECLAMATION

    def test_unknown(self):
        with pytest.raises(ValueError):
            resolve_detection_mode("finalizer")


class TestFindProjectRoot:
    def test_source_checkout(self, tmp_path):
        module = tmp_path / "02_src" / "faultwatch" / "config.py"

        assert find_project_root(module) == tmp_path.resolve()

    def test_installed_package_uses_cwd(self, tmp_path):
        module = tmp_path / "lib" / "site-packages" / "faultwatch" / "config.py"
        cwd = tmp_path / "work"

        assert find_project_root(module, cwd=cwd) == cwd

    def test_installed_package_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        module = tmp_path / "venv" / "site-packages" / "faultwatch" / "config.py"

        assert find_project_root(module) == Path.cwd()
