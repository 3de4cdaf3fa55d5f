import pytest

from art_curator.adapters.harvard import DirectRequestBuilder, HarvardAdapter
from art_curator.adapters.met import MetAdapter
from fakes import FakeSession


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def log_entries() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def met(session, log_entries) -> MetAdapter:
    adapter = MetAdapter(session=session, fetch_timeout=5, max_workers=8)
    adapter.set_logger(lambda level, message: log_entries.append((level, message)))
    return adapter


@pytest.fixture
def harvard(session, log_entries) -> HarvardAdapter:
    adapter = HarvardAdapter(DirectRequestBuilder("test-key"), session=session, fetch_timeout=5)
    adapter.set_logger(lambda level, message: log_entries.append((level, message)))
    return adapter
