"""
Global test configuration with support for different test types.
"""

from collections.abc import Callable
import os

import httpx
import pytest

from gemini_chat import GenerativeModel

# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch):
    """Ensure a clean GEMINI_* environment for each test.

    - Removes all GEMINI_* variables and debug toggles before each test
    - Leaves non-GEMINI_* variables intact for stability

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles enabling telemetry
    monkeypatch.delenv("DEBUG", raising=False)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked APIs",
        "allow_env_pollution: Keep GEMINI_* environment variables for this test",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "test_api_key_12345_67890_abcdef_ghijkl"


@pytest.fixture
def make_model(mock_api_key) -> Callable[..., GenerativeModel]:
    """Factory for models whose HTTP traffic goes to a handler function.

    Usage:
        model = make_model(lambda request: httpx.Response(200, json={...}))
    """

    def _make(handler, name: str = "gemini-1.5-flash", **kwargs) -> GenerativeModel:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GenerativeModel(name, mock_api_key, http_client=client, **kwargs)

    return _make


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """A list that handlers can append captured requests to."""
    return []
