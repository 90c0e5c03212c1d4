"""
pytest configuration and shared fixtures.
"""

import pytest

from pyfactorial.distributions import tukey_ppf


@pytest.fixture(autouse=True)
def _clear_quantile_cache():
    """Cached studentized range quantiles must not leak between tests."""
    tukey_ppf.cache_clear()
    yield
    tukey_ppf.cache_clear()


class _UnavailableStats:
    """Stand-in for scipy.stats whose every distribution fails."""

    def __getattr__(self, name):
        raise ValueError(f"scipy.stats.{name} unavailable")


@pytest.fixture
def broken_scipy(monkeypatch):
    """Force every distribution function onto its approximation path."""
    monkeypatch.setattr('pyfactorial.distributions.sp_stats', _UnavailableStats())
