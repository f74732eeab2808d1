"""Tests for the prediction interval calculator."""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from capm.capm_data import build_return_series
from capm.capm_estimator import fit_capm
from capm.errors import InvalidConfidenceError
from capm.forecast import (
    ForecastInputs,
    PredictionInterval,
    prediction_interval,
    t_critical_value,
)


@pytest.fixture
def fitted(synthetic_prices, weekly_rates):
    asset, market = synthetic_prices
    return fit_capm(build_return_series(asset, market, weekly_rates))


def _perfect_fit():
    frame = pd.DataFrame(
        {"market_excess": [-1.0, 0.0, 1.0], "asset_excess": [-2.0, 0.0, 2.0]}
    )
    return fit_capm(frame)


# ---------------------------------------------------------------------------
# Interval arithmetic
# ---------------------------------------------------------------------------


def test_interval_collapses_for_perfect_fit():
    interval = prediction_interval(
        _perfect_fit(), ForecastInputs(market_excess_return=0.5, risk_free_rate=3.0)
    )

    assert isinstance(interval, PredictionInterval)
    assert interval.daily_point == pytest.approx(1.0)
    assert interval.daily_lower == interval.daily_point == interval.daily_upper
    assert interval.lower == interval.point == interval.upper
    assert interval.point == pytest.approx(1.0 * 252 + 3.0)
    assert interval.width == 0.0


def test_interval_matches_closed_form(fitted):
    x_f = 0.04
    inputs = ForecastInputs(market_excess_return=x_f, risk_free_rate=4.0, confidence=0.95)

    interval = prediction_interval(fitted, inputs)

    y_hat = fitted.intercept + fitted.beta * x_f
    s_f = fitted.residual_se * np.sqrt(
        1 + 1 / fitted.n + (x_f - fitted.market_excess_mean) ** 2 / fitted.market_excess_ssd
    )
    t_crit = stats.t.ppf(0.975, fitted.n - 2)

    assert interval.degrees_of_freedom == fitted.n - 2
    assert interval.t_critical == pytest.approx(t_crit)
    assert interval.forecast_se == pytest.approx(s_f)
    assert interval.daily_lower == pytest.approx(y_hat - t_crit * s_f)
    assert interval.daily_upper == pytest.approx(y_hat + t_crit * s_f)
    assert interval.point == pytest.approx(y_hat * 252 + 4.0)
    assert interval.lower == pytest.approx((y_hat - t_crit * s_f) * 252 + 4.0)
    assert interval.upper == pytest.approx((y_hat + t_crit * s_f) * 252 + 4.0)


def test_interval_is_symmetric_around_point(fitted):
    interval = prediction_interval(
        fitted, ForecastInputs(market_excess_return=-0.1, risk_free_rate=2.0)
    )

    assert interval.lower < interval.point < interval.upper
    assert interval.point - interval.lower == pytest.approx(interval.upper - interval.point)


def test_wider_confidence_widens_interval(fitted):
    narrow = prediction_interval(
        fitted, ForecastInputs(market_excess_return=0.02, risk_free_rate=4.0, confidence=0.90)
    )
    wide = prediction_interval(
        fitted, ForecastInputs(market_excess_return=0.02, risk_free_rate=4.0, confidence=0.99)
    )

    assert wide.lower < narrow.lower
    assert wide.upper > narrow.upper
    assert wide.point == pytest.approx(narrow.point)


def test_interval_widens_away_from_sample_mean(fitted):
    centre = prediction_interval(
        fitted,
        ForecastInputs(market_excess_return=fitted.market_excess_mean, risk_free_rate=4.0),
    )
    far = prediction_interval(
        fitted,
        ForecastInputs(market_excess_return=fitted.market_excess_mean + 3.0, risk_free_rate=4.0),
    )

    assert far.forecast_se > centre.forecast_se
    assert centre.forecast_se == pytest.approx(
        fitted.residual_se * np.sqrt(1 + 1 / fitted.n)
    )


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


def test_from_annual_converts_to_daily_excess():
    inputs = ForecastInputs.from_annual(market_return=10.0, risk_free_rate=4.0)

    assert inputs.market_excess_return == pytest.approx(6.0 / 252)
    assert inputs.risk_free_rate == 4.0
    assert inputs.confidence == 0.90


def test_from_annual_market_equal_to_rate_gives_alpha_plus_rate():
    result = _perfect_fit()
    interval = prediction_interval(
        result, ForecastInputs.from_annual(market_return=4.0, risk_free_rate=4.0)
    )

    assert interval.point == pytest.approx(result.intercept * 252 + 4.0)


@pytest.mark.parametrize("confidence", [0.0, 1.0, -0.5, 1.5, 90.0])
def test_invalid_confidence_rejected(fitted, confidence):
    with pytest.raises(InvalidConfidenceError):
        prediction_interval(
            fitted,
            ForecastInputs(market_excess_return=0.0, risk_free_rate=4.0, confidence=confidence),
        )


def test_t_critical_value_depends_on_degrees_of_freedom():
    assert t_critical_value(0.95, 1) > t_critical_value(0.95, 10) > t_critical_value(0.95, 1000)
    assert t_critical_value(0.95, 100000) == pytest.approx(stats.norm.ppf(0.975), abs=1e-3)
