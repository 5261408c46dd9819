"""Seoul open data provider adapters."""

from savemetoilet.providers.factory import build_collector
from savemetoilet.providers.paged import SeoulToiletCollector
from savemetoilet.providers.seoul import SeoulToiletFetcher

__all__ = [
    "SeoulToiletCollector",
    "SeoulToiletFetcher",
    "build_collector",
]
