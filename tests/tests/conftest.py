from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
from wpcivi.record import ConfigRecord  # noqa: E402
from wpcivi.steps import DeployContext  # noqa: E402

from _fakes import FakeRunner, full_env  # noqa: E402


@pytest.fixture
def base_dir(tmp_path) -> Path:
    return tmp_path / "srv"


@pytest.fixture
def record(base_dir) -> ConfigRecord:
    return ConfigRecord.from_mapping(full_env(base_dir))


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(outputs={("timedatectl", "list-timezones"): "Europe/Berlin\nUTC\n"})


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def ctx(record, runner, sleeps) -> DeployContext:
    return DeployContext(record, runner, sleep=sleeps.append)
