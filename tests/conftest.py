"""Pytest configuration and fixtures."""
import os
import tempfile
import pytest

# Audit logs go to a throwaway directory; the oracle stays off unless a test injects one
os.environ.setdefault("LOG_PATH", tempfile.mkdtemp(prefix="aiprobe-logs-"))
os.environ.setdefault("ORACLE_ENABLED", "false")


UNIFORM_TEXT = (
    "The system processes the data. The system analyzes the data. "
    "The system reports the data. The system stores the data. "
    "The system finishes the task."
)

INFORMAL_TEXT = (
    "I think, maybe, this works? Honestly not sure... "
    "but I tried :) it kind of helped a little I guess."
)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache and service singletons before each test."""
    from aiprobe.config import get_settings
    from aiprobe.services.detector import reset_detector_service
    get_settings.cache_clear()
    reset_detector_service()
    yield
    get_settings.cache_clear()
    reset_detector_service()


@pytest.fixture
def uniform_text():
    return UNIFORM_TEXT


@pytest.fixture
def informal_text():
    return INFORMAL_TEXT
