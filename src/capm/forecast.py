"""
CAPM Forecast Interval
======================

Point forecast and two-sided prediction interval for a single future
daily observation of the CAPM regression, annualized to a total return.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy import stats

from config import DEFAULT_CONFIDENCE, TRADING_DAYS_PER_YEAR

from .capm_estimator import RegressionResult
from .errors import InvalidConfidenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastInputs:
    """
    Forecast scenario.

    Attributes:
        market_excess_return: Hypothetical daily market excess return (percent).
        risk_free_rate: Annual risk-free rate (percent) added back after
            annualization.
        confidence: Two-sided confidence level in (0, 1).
    """

    market_excess_return: float
    risk_free_rate: float
    confidence: float = DEFAULT_CONFIDENCE

    @classmethod
    def from_annual(
        cls,
        market_return: float,
        risk_free_rate: float,
        confidence: float = DEFAULT_CONFIDENCE,
    ) -> "ForecastInputs":
        """Build inputs from an annual market return scenario (percent)."""

        daily_excess = (market_return - risk_free_rate) / TRADING_DAYS_PER_YEAR
        return cls(
            market_excess_return=daily_excess,
            risk_free_rate=risk_free_rate,
            confidence=confidence,
        )


@dataclass(frozen=True)
class PredictionInterval:
    """
    Prediction interval for the asset's return.

    point, lower and upper are annualized total returns in percent; the
    daily_* fields hold the underlying daily excess-return interval.
    """

    point: float
    lower: float
    upper: float
    daily_point: float
    daily_lower: float
    daily_upper: float
    forecast_se: float
    t_critical: float
    confidence: float
    degrees_of_freedom: int

    @property
    def width(self) -> float:
        return self.upper - self.lower


def t_critical_value(confidence: float, degrees_of_freedom: int) -> float:
    """Two-sided Student-t critical value for the given confidence level."""

    if not 0 < confidence < 1:
        raise InvalidConfidenceError(
            f"Confidence level must lie in (0, 1), got {confidence}"
        )
    return float(stats.t.ppf(1 - (1 - confidence) / 2, degrees_of_freedom))


def prediction_interval(
    result: RegressionResult, inputs: ForecastInputs
) -> PredictionInterval:
    """
    Compute the prediction interval for one future observation.

    The daily excess forecast intercept + beta * X_f is bracketed by
    t * s_f, where s_f = residual_se * sqrt(1 + 1/n + (X_f - mean_x)^2 / SSD_x)
    and t uses the regression's n - 2 degrees of freedom. The point and both
    bounds are then multiplied by the trading days per year and the annual
    risk-free rate is added back.

    Args:
        result: Fitted CAPM regression.
        inputs: Forecast scenario.

    Returns:
        PredictionInterval with annualized and daily bounds.

    Raises:
        InvalidConfidenceError: If the confidence level is outside (0, 1).
    """

    t_crit = t_critical_value(inputs.confidence, result.degrees_of_freedom)

    x_f = inputs.market_excess_return
    daily_point = result.intercept + result.beta * x_f
    forecast_se = result.residual_se * np.sqrt(
        1
        + 1 / result.n
        + (x_f - result.market_excess_mean) ** 2 / result.market_excess_ssd
    )
    margin = t_crit * forecast_se
    daily_lower = daily_point - margin
    daily_upper = daily_point + margin

    def annualise(daily: float) -> float:
        return float(daily * TRADING_DAYS_PER_YEAR + inputs.risk_free_rate)

    interval = PredictionInterval(
        point=annualise(daily_point),
        lower=annualise(daily_lower),
        upper=annualise(daily_upper),
        daily_point=float(daily_point),
        daily_lower=float(daily_lower),
        daily_upper=float(daily_upper),
        forecast_se=float(forecast_se),
        t_critical=t_crit,
        confidence=inputs.confidence,
        degrees_of_freedom=result.degrees_of_freedom,
    )
    logger.debug(
        f"[Forecast] {inputs.confidence:.0%} interval "
        f"[{interval.lower:.2f}%, {interval.upper:.2f}%] around {interval.point:.2f}%"
    )
    return interval


__all__ = [
    "ForecastInputs",
    "PredictionInterval",
    "prediction_interval",
    "t_critical_value",
]
