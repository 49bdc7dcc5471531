from __future__ import annotations

import pytest

from storygraph.config import Settings, settings


@pytest.fixture(autouse=True)
def _reset_settings() -> None:
    defaults = Settings()
    for name in Settings.model_fields:
        setattr(settings, name, getattr(defaults, name))
    yield
    for name in Settings.model_fields:
        setattr(settings, name, getattr(defaults, name))
