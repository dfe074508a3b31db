"""
Shared fixtures for fetch-cache unit tests.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.append(os.path.dirname(__file__))

from fetch_cache.models import FetchResult
from cache_fakes import FakeStore, FakeUpstream


@pytest.fixture
def store():
    """Empty fake store."""
    return FakeStore()


@pytest.fixture
def upstream():
    """Fake upstream with a few canned answers."""
    return FakeUpstream({
        "/x": FetchResult("hello"),
        "http://a.com/tile.png": FetchResult(b"\x89PNG"),
        "http://a.com/meta.json": FetchResult({"name": "tiles", "zoom": [0, 14]}),
    })
