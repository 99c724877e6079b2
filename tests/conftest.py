import logging

import pytest

from artifetch.kernel.artifacts import ArtifactSpec
from tests.kernel.mocks import NPUZONE_COMMIT, STORE_URL


@pytest.fixture
def npuzone_spec():
    return ArtifactSpec(name="npuzone", repo="softnpu", commit=NPUZONE_COMMIT)


@pytest.fixture
def npuzone_url():
    return f"{STORE_URL}/oxidecomputer/softnpu/image/{NPUZONE_COMMIT}/npuzone"


@pytest.fixture
def store_env(monkeypatch):
    """
    Points every store client at a fake base URL and keeps ambient
    logging settings from leaking into tests.
    """
    monkeypatch.setenv("ARTIFETCH_STORE_URL", STORE_URL)
    monkeypatch.delenv("ARTIFETCH_ORG", raising=False)
    monkeypatch.delenv("ARTIFETCH_TIMEOUT", raising=False)
    monkeypatch.delenv("ARTIFETCH_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ARTIFETCH_LOG_FILE", raising=False)
    yield STORE_URL


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Runs the test from an empty directory so out/<name> lands in tmp_path."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)
