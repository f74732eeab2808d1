"""Shared test fixtures for the CAPM toolkit."""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def trading_days() -> pd.DatetimeIndex:
    """Sixty business days starting 2024-01-02."""
    return pd.bdate_range("2024-01-02", periods=60)


@pytest.fixture
def synthetic_prices(trading_days):
    """Return (asset, market) price series with a true beta of about 1.5."""
    rng = np.random.default_rng(42)
    market_returns = rng.normal(0.0005, 0.01, len(trading_days))
    noise = rng.normal(0.0, 0.004, len(trading_days))
    asset_returns = 0.0002 + 1.5 * market_returns + noise

    market = pd.Series(
        100 * np.cumprod(1 + market_returns), index=trading_days, name="market"
    )
    asset = pd.Series(
        50 * np.cumprod(1 + asset_returns), index=trading_days, name="asset"
    )
    return asset, market


@pytest.fixture
def weekly_rates(trading_days) -> pd.Series:
    """Sparse annual risk-free rate (percent), observed on Mondays only."""
    mondays = pd.date_range("2024-01-01", trading_days[-1], freq="W-MON")
    return pd.Series(
        np.linspace(5.0, 4.5, len(mondays)), index=mondays, name="rate"
    )
