from __future__ import annotations

import httpx
import pytest

from fake_hsds import ENDPOINT, FakeHsds
from hsds_client import BasicAuth, HsdsClient, HsdsSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in ("ENDPOINT", "USERNAME", "PASSWORD", "TOKEN", "LOG_LEVEL", "HTTP_TIMEOUT_SECONDS", "USER_AGENT"):
        monkeypatch.delenv(f"HSDS_{name}", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_hsds() -> FakeHsds:
    return FakeHsds(username="test_user1", password="test")


@pytest.fixture
def client(fake_hsds: FakeHsds) -> HsdsClient:
    http = httpx.AsyncClient(transport=fake_hsds.transport())
    return HsdsClient(
        ENDPOINT,
        BasicAuth("test_user1", "test"),
        settings=HsdsSettings(endpoint=ENDPOINT),
        http_client=http,
    )
