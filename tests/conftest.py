"""Shared fixtures for FluxForge tests."""

from __future__ import annotations

import datetime
import subprocess
from pathlib import Path

import pytest

from fluxforge.config import ExportConfig
from fluxforge.core import ConfigManager, FFmpegProbe


class FakeRunner:
    """Command runner that records commands and returns canned results."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "", error: BaseException | None = None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.error = error
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def __call__(self, command, *, timeout=None):
        self.calls.append(list(command))
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, self.returncode, stdout=self.stdout, stderr=self.stderr)


@pytest.fixture(autouse=True)
def clear_probe_cache():
    """Keep probe results from leaking between tests."""
    FFmpegProbe.clear_cache()
    yield
    FFmpegProbe.clear_cache()


@pytest.fixture
def export_base(tmp_path) -> Path:
    base = tmp_path / "export"
    base.mkdir()
    return base


@pytest.fixture
def config(export_base) -> ExportConfig:
    """Configuration writing into a temporary export folder."""
    return ExportConfig(export_folder=str(export_base), export_folder_name="FluxForge")


@pytest.fixture
def flat_config(config) -> ExportConfig:
    """Configuration without date folders."""
    return config.with_overrides(auto_create_date_folders=False)


@pytest.fixture
def config_manager(tmp_path, export_base) -> ConfigManager:
    """Config manager backed by a YAML file in a temporary folder."""
    config_path = tmp_path / "settings" / "config.yaml"
    ExportConfig(export_folder=str(export_base)).save_to_file(config_path)
    return ConfigManager(config_path)


@pytest.fixture
def today_folder() -> str:
    return datetime.date.today().strftime("%Y-%m-%d")


@pytest.fixture
def fake_runner_factory():
    return FakeRunner
