import logging

import pytest
import structlog
from pydantic import ValidationError

from critical_cache.core import logging as app_logging
from critical_cache.core.config import Settings, settings


@pytest.mark.parametrize(
    ("configured", "debug", "expected"),
    [
        (None, True, logging.DEBUG),
        (None, False, logging.INFO),
        ("warning", True, logging.WARNING),
    ],
    ids=["debug-default", "production-default", "explicit-level"],
)
def test_resolve_level(monkeypatch, configured, debug, expected):
    monkeypatch.setattr(settings, "log_level", configured)
    monkeypatch.setattr(settings, "debug", debug)
    assert app_logging._resolve_level(None) == expected


def test_explicit_argument_wins(monkeypatch):
    monkeypatch.setattr(settings, "log_level", "error")
    assert app_logging._resolve_level("info") == logging.INFO
    assert app_logging._resolve_level(logging.DEBUG) == logging.DEBUG


def test_bound_log_context_is_scoped():
    with app_logging.bound_log_context(url="/a/"):
        assert structlog.contextvars.get_contextvars()["url"] == "/a/"
    assert "url" not in structlog.contextvars.get_contextvars()


def test_unknown_level_name_falls_back_to_info():
    assert app_logging._resolve_level("verbose") == logging.INFO


def test_settings_normalize_and_validate_log_level():
    assert Settings(log_level="warning").log_level == "WARNING"
    with pytest.raises(ValidationError):
        Settings(log_level="bogus")
