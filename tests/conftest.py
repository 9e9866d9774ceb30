"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Any, Callable, Dict
from unittest.mock import MagicMock

import pytest

from hheat.models import Credentials, HeatingDevice


@pytest.fixture
def hheat_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HHEAT_HOME at a temporary directory."""
    home = tmp_path / "hheat"
    monkeypatch.setenv("HHEAT_HOME", str(home))
    return home


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="user@example.com", password="password123")


@pytest.fixture
def heating_product() -> Dict[str, Any]:
    """A heating record as returned by the products endpoint."""
    return {
        "id": "heat-1",
        "type": "heating",
        "state": {"mode": "MANUAL", "target": 21.0},
        "props": {"temperature": 19.5, "working": True},
    }


@pytest.fixture
def heating_device(heating_product: Dict[str, Any]) -> HeatingDevice:
    return HeatingDevice.from_product(heating_product)


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """
    Build mock requests.Response objects.

    Returns:
        Factory taking a JSON body (or None for a non-JSON body) and status.
    """

    def factory(body: Any = None, status: int = 200) -> MagicMock:
        response = MagicMock()
        response.status_code = status
        response.ok = 200 <= status < 300
        if body is None:
            response.json.side_effect = ValueError("No JSON")
        else:
            response.json.return_value = body
        return response

    return factory
