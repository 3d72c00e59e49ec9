import pytest
from rich.console import Console

from artalk_registry.remote import client as client_module
from fake_http import FakeHttp


@pytest.fixture
def http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(client_module, "httpx", fake.module())
    return fake


@pytest.fixture
def recording_console() -> Console:
    return Console(record=True, force_terminal=False, width=240)
