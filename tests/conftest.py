"""Pytest configuration and fixtures for FlowSankey tests."""

import logging
from typing import Any

import pytest
import structlog

from flowsankey.common.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test so env overrides take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging configuration made by a test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        environment="development",
        logging={"level": "DEBUG", "format": "console", "include_caller": False},
    )


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def node_link_payload() -> dict[str, Any]:
    """Node-link payload with a duplicate edge and an out-of-range edge."""
    return {
        "nodes": [
            "SrcAS: 15169: Google",
            "SrcAS: 13335: Cloudflare",
            "ExporterAddress: 10.0.0.1",
        ],
        "links": [
            {"source": 0, "target": 2, "value": 1500},
            {"source": 1, "target": 2, "weight": 800},
            {"source": 0, "target": 2, "bytes": 500},
            {"source": 5, "target": 2, "value": 99},
        ],
        "meta": {"units": "l3bps"},
    }


@pytest.fixture
def rows_payload() -> dict[str, Any]:
    """Rows payload with paths across two dimensions."""
    return {
        "rows": [
            ["SrcAS: 15169: Google", "ExporterAddress: 10.0.0.1"],
            ["SrcAS: 13335: Cloudflare", "ExporterAddress: 10.0.0.1"],
            ["SrcAS: 15169: Google", "ExporterAddress: 10.0.0.2"],
        ],
        "values": [3_000_000, 1_200_000, 450_000],
    }
