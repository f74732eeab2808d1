"""
CAPM Estimation Utilities
=========================

Ordinary least-squares fit of the single-index CAPM regression

    asset_excess = intercept + beta * market_excess + residual

over a daily return sample, plus the CAPM expected return helper.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import numpy as np
import pandas as pd

from .capm_data import ReturnSeries
from .errors import DegenerateRegressionError, InsufficientDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionResult:
    """
    Fitted CAPM regression.

    Attributes:
        intercept: Regression intercept (daily alpha, percent).
        beta: Regression slope.
        residual_se: Residual standard error, n - 2 degrees of freedom.
        residual_variance: Square of residual_se.
        n: Number of observations in the sample.
        market_excess_mean: Sample mean of the predictor.
        market_excess_ssd: Sum of squared deviations of the predictor.
        r_squared: Coefficient of determination.
        beta_se: Standard error of beta.
        intercept_se: Standard error of the intercept.
    """

    intercept: float
    beta: float
    residual_se: float
    residual_variance: float
    n: int
    market_excess_mean: float
    market_excess_ssd: float
    r_squared: float
    beta_se: float
    intercept_se: float

    @property
    def degrees_of_freedom(self) -> int:
        return self.n - 2

    @property
    def beta_t_stat(self) -> float:
        return self.beta / self.beta_se if self.beta_se > 0 else np.inf

    @property
    def intercept_t_stat(self) -> float:
        if self.intercept_se > 0:
            return self.intercept / self.intercept_se
        return 0.0 if self.intercept == 0 else np.inf


def _excess_columns(returns: Union[ReturnSeries, pd.DataFrame]):
    frame = returns.frame if isinstance(returns, ReturnSeries) else returns
    try:
        x = frame["market_excess"].to_numpy(dtype=float)
        y = frame["asset_excess"].to_numpy(dtype=float)
    except KeyError as exc:
        raise KeyError(
            "Return table needs 'market_excess' and 'asset_excess' columns"
        ) from exc
    return x, y


def fit_capm(returns: Union[ReturnSeries, pd.DataFrame]) -> RegressionResult:
    """
    Fit the CAPM regression of asset excess return on market excess return.

    Args:
        returns: ReturnSeries, or a DataFrame with market_excess and
            asset_excess columns.

    Returns:
        RegressionResult with coefficients and sample statistics.

    Raises:
        DegenerateRegressionError: If n < 3 or the market excess return has
            zero variance.
        InsufficientDataError: If the sample contains missing or infinite
            values.
    """

    x, y = _excess_columns(returns)
    n = len(x)

    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        raise InsufficientDataError(
            "Regression sample contains missing or infinite values."
        )
    if n < 3:
        raise DegenerateRegressionError(
            f"Need at least 3 observations for a regression with n - 2 "
            f"degrees of freedom, got {n}"
        )

    x_mean = x.mean()
    y_mean = y.mean()
    x_dev = x - x_mean
    ssd_x = float(np.sum(x_dev**2))
    # Zero up to rounding of the mean, relative to the predictor's magnitude.
    if ssd_x <= np.finfo(float).eps * float(np.sum(x**2)):
        raise DegenerateRegressionError(
            "Market excess return variance is zero; cannot compute beta."
        )

    beta = float(np.sum(x_dev * (y - y_mean)) / ssd_x)
    intercept = float(y_mean - beta * x_mean)

    residuals = y - (intercept + beta * x)
    ssr = float(np.sum(residuals**2))
    residual_variance = ssr / (n - 2)
    residual_se = float(np.sqrt(residual_variance))

    sst = float(np.sum((y - y_mean) ** 2))
    r_squared = 1.0 - ssr / sst if sst > 0 else 1.0

    beta_se = residual_se / np.sqrt(ssd_x)
    intercept_se = residual_se * np.sqrt(1 / n + x_mean**2 / ssd_x)

    logger.debug(
        f"[CapmEstimator] n={n} beta={beta:.4f} intercept={intercept:.6f} "
        f"se={residual_se:.6f} r2={r_squared:.4f}"
    )

    return RegressionResult(
        intercept=intercept,
        beta=beta,
        residual_se=residual_se,
        residual_variance=residual_variance,
        n=n,
        market_excess_mean=float(x_mean),
        market_excess_ssd=ssd_x,
        r_squared=r_squared,
        beta_se=float(beta_se),
        intercept_se=float(intercept_se),
    )


def capm_expected_return(
    beta: float, market_return: float, risk_free_rate: float
) -> float:
    """
    Compute the CAPM expected return: E[R_i] = R_f + beta * (E[R_m] - R_f).

    Args:
        beta: Asset beta.
        market_return: Expected market return.
        risk_free_rate: Risk-free rate, in the same units as market_return.

    Returns:
        CAPM expected return.
    """

    return risk_free_rate + beta * (market_return - risk_free_rate)


__all__ = [
    "RegressionResult",
    "capm_expected_return",
    "fit_capm",
]
