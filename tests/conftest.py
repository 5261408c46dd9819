from __future__ import annotations

import pytest

from savemetoilet.core.metrics import InMemoryFetchMetricsCollector


@pytest.fixture
def metrics() -> InMemoryFetchMetricsCollector:
    return InMemoryFetchMetricsCollector()
