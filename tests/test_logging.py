from __future__ import annotations

import logging

from seshlock.core.config import Settings
from seshlock.core.logging import LOG_FORMAT, setup_logging


def test_setup_logging_uses_settings_level(monkeypatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    setup_logging(Settings(_env_file=None, LOG_LEVEL="debug"))

    assert calls == [{"level": "DEBUG", "format": LOG_FORMAT}]


def test_setup_logging_keeps_existing_handlers(monkeypatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging.getLogger(), "handlers", [logging.NullHandler()])
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    setup_logging(Settings(_env_file=None))

    assert calls == []
