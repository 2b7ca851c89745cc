import pytest

from tests.helpers import RecordingSleep, StubLLM


@pytest.fixture
def stub_llm_factory():
    return StubLLM


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
