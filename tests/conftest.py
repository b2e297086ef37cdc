"""Common test fixtures for the InkFlow data layer."""

import pytest

from inkflow.config import InkflowConfig
from inkflow.observability import metrics
from inkflow.services.inkflow_service import InkflowService
from tests.fakes import FakeGitRunner


@pytest.fixture
def data_dir(tmp_path):
    """Per-test application data directory."""
    return tmp_path / "inkflow-data"


@pytest.fixture
def test_config(data_dir):
    """A config rooted in the temporary data directory."""
    return InkflowConfig(data_dir=data_dir)


@pytest.fixture
def fake_git():
    """A FakeGitRunner that succeeds with empty output."""
    return FakeGitRunner()


@pytest.fixture
def service(test_config, fake_git):
    """An InkflowService wired to temp storage and the fake git runner."""
    return InkflowService(test_config, git_runner=fake_git)


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()

