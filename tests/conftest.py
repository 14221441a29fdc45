"""Shared test fixtures."""

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

import wifiviewer.config as config_module
from wifiviewer.main import app


@pytest.fixture(autouse=True)
def _isolated_env_file(tmp_path, monkeypatch):
    """Point the .env loader at an empty temp file so local config can't leak in."""
    monkeypatch.setattr(config_module, "_ENV_FILE", tmp_path / ".env")
    for name in list(os.environ):
        if name.startswith("WIFIVIEWER_"):
            monkeypatch.delenv(name)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
